"""Init command for figma-icon-sync CLI."""

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from figma_icon_sync.cli.app import app
from figma_icon_sync.config import CONFIG_FILENAMES, create_config_file
from figma_icon_sync.exceptions import ConfigError
from figma_icon_sync.models import OutputKind

console = Console()


def parse_formats(value: str) -> List[str]:
    """Parse a comma separated list of output formats."""
    formats = [item.strip().lower() for item in value.split(",") if item.strip()]
    valid = {kind.value for kind in OutputKind}
    unknown = [item for item in formats if item not in valid]
    if unknown:
        raise typer.BadParameter(
            f"Unknown format(s): {', '.join(unknown)}. Choose from: {', '.join(sorted(valid))}"
        )
    return formats or [OutputKind.SVG.value]


@app.command()
def init(
    config_path: Path = typer.Option(
        Path(CONFIG_FILENAMES[0]),
        "--config",
        "-c",
        help="Where to write the configuration file",
    ),
) -> None:
    """Initialize a configuration file."""
    console.print("[blue]Initializing figma-icon-sync...[/blue]\n")

    file_key = typer.prompt("Enter your Figma file key (from the URL)")
    node_id: Optional[str] = typer.prompt(
        "Enter the frame/page node ID (optional, press Enter to skip)",
        default="",
        show_default=False,
    )
    directory = typer.prompt("Where should icons be saved?", default="./icons")
    formats = parse_formats(
        typer.prompt("Output formats (comma separated: svg, react)", default="svg")
    )

    try:
        path = create_config_file(
            config_path,
            file_key=file_key.strip(),
            node_id=(node_id or "").strip() or None,
            directory=directory,
            formats=formats,
        )
    except ConfigError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(f"\n[green]Configuration file created: {path}[/green]")
    console.print(f"[dim]  Edit {path.name} to customize settings[/dim]")
    console.print("[dim]  Set FIGMA_ACCESS_TOKEN environment variable[/dim]")
    console.print("[dim]\nNext steps:[/dim]")
    console.print("[dim]  1. Update the config file with your Figma details[/dim]")
    console.print("[dim]  2. Set FIGMA_ACCESS_TOKEN in your environment[/dim]")
    console.print("[dim]  3. Run: figma-icon-sync sync[/dim]")
