from __future__ import annotations

import asyncio
import logging
import signal

import typer

from wattscout.core import Exporter
from wattscout.server import MetricsServer, make_app

from ..common import load_settings_or_exit, with_network

logger = logging.getLogger(__name__)


async def _run_until_signalled(exporter: Exporter) -> None:
    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(signum, exporter.stop)
    await exporter.run()


def serve(
    network: str | None = typer.Option(
        None, "--network", "-n", help="Network range to scan (overrides config)"
    ),
    port: int | None = typer.Option(
        None, "--port", "-p", help="Port for the metrics endpoint (overrides config)"
    ),
) -> None:
    """Run the exporter: periodic discovery, collection and /metrics endpoint."""
    settings = with_network(load_settings_or_exit(), network)
    exporter = Exporter(settings)

    logger.info("Starting wattscout exporter")
    try:
        server = MetricsServer(
            make_app(exporter),
            host=settings.server.host,
            port=port or settings.server.port,
        )
    except OSError as exc:
        typer.echo(f"Error starting HTTP server: {exc}", err=True)
        raise typer.Exit(1) from exc

    server.start()
    try:
        asyncio.run(_run_until_signalled(exporter))
    finally:
        server.stop()


def register(app: typer.Typer) -> None:
    app.command()(serve)
