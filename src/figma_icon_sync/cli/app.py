from pathlib import Path
from typing import Optional

import typer

from figma_icon_sync.utils import setup_logging


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:  # pragma: no cover
        import figma_icon_sync

        typer.echo(f"figma-icon-sync version: {figma_icon_sync.__version__}")
        raise typer.Exit()


app = typer.Typer(name="figma-icon-sync", no_args_is_help=True)


@app.callback()
def app_callback(
    ctx: typer.Context,
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        help="Log level (DEBUG, INFO, WARNING, ERROR)",
        envvar="FIGMA_ICON_SYNC_LOG_LEVEL",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Also write logs to this file",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """figma-icon-sync - Automatically sync Figma icons to your repository."""
    setup_logging(level=log_level.upper(), log_file=log_file)
