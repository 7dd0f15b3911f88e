"""Validate command for figma-icon-sync CLI."""

import asyncio
from pathlib import Path
from typing import List, Optional

import typer
from loguru import logger
from rich.console import Console

from figma_icon_sync.cli.app import app
from figma_icon_sync.config import SyncConfig, load_config
from figma_icon_sync.exceptions import ConfigError
from figma_icon_sync.figma import FigmaClient

console = Console()

SAMPLE_SIZE = 5


async def run_validate(config: SyncConfig) -> List[str]:
    """Check the Figma connection and return the names of the icons found."""
    token = config.access_token
    if not token:
        raise ConfigError("Figma access token missing. Set FIGMA_ACCESS_TOKEN.")

    async with FigmaClient(token, config.figma.file_key) as client:
        document = await client.get_file()
        console.print(f"[green]Connected to Figma file: {document.get('name') or 'Untitled'}[/green]")
        nodes = await client.find_icon_nodes(config.figma.node_id)

    return [node["name"] for node in nodes]


@app.command()
def validate(
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to the configuration file"
    ),
) -> None:
    """Validate configuration and Figma connection."""
    try:
        config = load_config(config_path)
        console.print("[green]Configuration valid[/green]")

        names = asyncio.run(run_validate(config))
        console.print(f"[green]Found {len(names)} potential icon(s)[/green]")

        if names:
            console.print("[dim]\nSample icons:[/dim]")
            for name in names[:SAMPLE_SIZE]:
                console.print(f"[dim]  - {name}[/dim]")
            if len(names) > SAMPLE_SIZE:
                console.print(f"[dim]  ... and {len(names) - SAMPLE_SIZE} more[/dim]")

        console.print("[green]\nEverything looks good![/green]")

    except Exception as e:
        logger.error(f"Validation failed: {e}")
        typer.echo(f"Validation failed: {e}", err=True)
        raise typer.Exit(1)
