from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from wattscout.core import Exporter
from wattscout.utils.redaction import Redactor

from ..common import load_settings_or_exit, with_network


async def _read_once(exporter: Exporter) -> int:
    await exporter.discover()
    return await exporter.collect()


def read(
    network: str | None = typer.Argument(
        None, help="Network to scan. Uses config default if omitted."
    ),
    redact: bool = typer.Option(
        False, "--redact", help="Redact sensitive values in output"
    ),
) -> None:
    """Discover devices, poll them once and print their power readings."""
    console = Console()
    settings = with_network(load_settings_or_exit(), network)
    exporter = Exporter(settings)

    console.print(f"Reading power meters on {settings.scanning.network}...")
    succeeded = asyncio.run(_read_once(exporter))

    readings = exporter.store.snapshot()
    if not readings:
        console.print("No power readings collected.")
        return

    redactor = Redactor(enabled=redact)
    table = Table()
    table.add_column("IP", style="cyan")
    table.add_column("Device ID", style="green")
    table.add_column("Name", style="yellow")
    table.add_column("Type")
    table.add_column("Power (W)", justify="right")

    for labels, value in sorted(readings.items()):
        table.add_row(
            redactor.redact_ip(labels.ip_address),
            redactor.redact_device_id(labels.device_id),
            labels.device_name,
            labels.device_type,
            f"{value:.2f}",
        )

    console.print(table)
    known = len(exporter.registry)
    console.print(f"\n[green]Collected from {succeeded}/{known} device(s)[/green]")


def register(app: typer.Typer) -> None:
    app.command()(read)
