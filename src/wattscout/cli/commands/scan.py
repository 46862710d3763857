from __future__ import annotations

import asyncio
import logging

import typer
from rich.console import Console
from rich.table import Table

from wattscout.core import detect_local_network, enumerate_addresses, scan_network
from wattscout.utils.redaction import Redactor

from ..common import load_settings_or_exit

logger = logging.getLogger(__name__)


def scan(
    network: str | None = typer.Argument(
        None,
        help="Network to scan (e.g., 192.168.1.0/24). Uses config default if omitted.",
    ),
    local: bool = typer.Option(
        False, "--local", help="Scan the /24 of the local interface instead"
    ),
    redact: bool = typer.Option(
        False,
        "--redact",
        help="Redact sensitive values in output",
    ),
) -> None:
    """Run one discovery sweep and list the devices found."""
    console = Console()
    settings = load_settings_or_exit()

    if local:
        try:
            network = detect_local_network()
        except RuntimeError as exc:
            typer.echo(str(exc), err=True)
            raise typer.Exit(1) from exc
    elif network is None:
        network = settings.scanning.network
        console.print(f"Using network from config: {network}")

    addresses = enumerate_addresses(network)
    if not addresses:
        typer.echo(f"Invalid network range: {network}", err=True)
        raise typer.Exit(1)

    console.print(f"Scanning {network} for power meters...")
    logger.info(
        "Scan settings: timeout=%.2fs, addresses=%d",
        settings.scanning.timeout,
        len(addresses),
    )
    found = asyncio.run(scan_network(addresses, timeout=settings.scanning.timeout))

    if not found:
        console.print("No power meters found.")
        return

    redactor = Redactor(enabled=redact)
    table = Table()
    table.add_column("IP", style="cyan")
    table.add_column("Device ID", style="green")
    table.add_column("Name", style="yellow")
    table.add_column("Type")

    for device in sorted(found.values(), key=lambda d: (d.device_name, d.ip)):
        table.add_row(
            redactor.redact_ip(device.ip),
            redactor.redact_device_id(device.device_id),
            device.device_name,
            device.device_type,
        )

    console.print(table)
    console.print(f"\n[green]Found {len(found)} device(s)[/green]")


def register(app: typer.Typer) -> None:
    app.command()(scan)
