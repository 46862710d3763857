from __future__ import annotations

import asyncio

import typer
from rich.console import Console

from wattscout.mock_device import run_mock_device


def register(app: typer.Typer) -> None:
    @app.command()
    def mock(
        port: int = typer.Option(
            8081, "--port", "-p", help="Port to listen on (sweeps probe port 80)"
        ),
        host: str = typer.Option("0.0.0.0", "--host", help="Address to bind"),
        device_type: str = typer.Option(
            "SHPLG-S", "--type", "-t", help="Device type to report"
        ),
        mac: str = typer.Option("AABBCCDDEEFF", "--mac", help="MAC address to report"),
        name: str = typer.Option("Mock Plug", "--name", "-n", help="Device name"),
        power: float = typer.Option(42.0, "--power", help="Mean power in watts"),
        jitter: float = typer.Option(
            5.0, "--jitter", help="Random variation of each reading in watts"
        ),
    ) -> None:
        """Run a mock power meter for development."""
        console = Console()
        console.print(f"Starting mock device '{name}' on {host}:{port}...")
        console.print("Press Ctrl+C to stop.\n")

        try:
            asyncio.run(
                run_mock_device(
                    port=port,
                    host=host,
                    device_type=device_type,
                    mac=mac,
                    name=name,
                    power=power,
                    jitter=jitter,
                )
            )
        except KeyboardInterrupt:
            console.print("\n[green]Mock device stopped.[/green]")
