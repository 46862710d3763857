from __future__ import annotations

from typing import Annotated

import typer

from wattscout.utils.logging import setup_logging

from .commands import config as config_cmd
from .commands.mock import register as register_mock
from .commands.read import register as register_read
from .commands.scan import register as register_scan
from .commands.serve import register as register_serve

app = typer.Typer(
    help="wattscout - Prometheus exporter for network power meters",
    no_args_is_help=True,
)

app.add_typer(config_cmd.app, name="config")

register_serve(app)
register_scan(app)
register_read(app)
register_mock(app)


@app.callback(invoke_without_command=True)
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", help="Show version and exit"),
    ] = False,
) -> None:
    """wattscout CLI."""
    setup_logging()

    if version:
        from importlib.metadata import version as get_version

        typer.echo(f"wattscout version {get_version('wattscout')}")
        raise typer.Exit()
