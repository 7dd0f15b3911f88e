"""Command module for figma-icon-sync sync operations."""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.tree import Tree

from figma_icon_sync.cli.app import app
from figma_icon_sync.config import SyncConfig, load_config
from figma_icon_sync.exceptions import ConfigError
from figma_icon_sync.figma import FigmaClient
from figma_icon_sync.git import GitHandler
from figma_icon_sync.sync import BatchReport, run_sync

console = Console()


def display_sync_summary(report: BatchReport) -> None:
    """Display a short summary of sync changes."""
    console.print("\n[bold]Sync Summary:[/bold]")
    if report.added:
        console.print(f"  [green]Added: {len(report.added)} icon(s)[/green]")
    if report.updated:
        console.print(f"  [yellow]Updated: {len(report.updated)} icon(s)[/yellow]")
    if report.deleted:
        console.print(f"  [red]Deleted: {len(report.deleted)} icon(s)[/red]")
    if report.unchanged:
        console.print(f"  [dim]Unchanged: {len(report.unchanged)} icon(s)[/dim]")
    if report.errors:
        console.print(f"  [red]Errors: {len(report.errors)}[/red]")
        for error in report.errors:
            console.print(f"     - {error.source}: {error.error}")
    if not report.has_changes and not report.errors:
        console.print("  [green]Everything up to date[/green]")


def display_detailed_sync_results(report: BatchReport) -> None:
    """Display every file touched by the sync as a tree."""
    if not report.has_changes:
        console.print("\n[green]Everything up to date[/green]")
        return

    tree = Tree("[bold]Icons[/bold]")
    for title, style, paths in (
        ("Added", "green", report.added),
        ("Updated", "yellow", report.updated),
        ("Deleted", "red", report.deleted),
    ):
        if paths:
            branch = tree.add(f"[{style}]{title}[/{style}]")
            for path in sorted(paths):
                branch.add(f"[{style}]{path}[/{style}]")
    console.print(tree)


async def run_icon_sync(config: SyncConfig, verbose: bool = False) -> BatchReport:
    """Fetch icons from Figma, write them and run git automation."""
    token = config.access_token
    if not token:
        raise ConfigError("Figma access token missing. Set FIGMA_ACCESS_TOKEN.")

    console.print("Fetching icons from Figma...")
    async with FigmaClient(token, config.figma.file_key) as client:
        icons = await client.get_icons(config.figma.node_id)

    if not icons:
        console.print("[yellow]No icons found in Figma[/yellow]")
        return BatchReport()
    console.print(f"Found {len(icons)} icon(s)")

    console.print("Processing and saving icons...")
    report = await run_sync(icons, config)

    display_sync_summary(report)
    if verbose:
        display_detailed_sync_results(report)

    if config.git.enabled:
        console.print("\n[bold]Git automation...[/bold]")
        handler = GitHandler(
            config.git, config.output.directory, github_token=config.github_token
        )
        url = await handler.automate(report)
        if url:
            console.print(f"\n[green]Pull request: {url}[/green]")

    return report


@app.command()
def sync(
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to the configuration file"
    ),
    git: bool = typer.Option(True, "--git/--no-git", help="Enable git automation"),
    pr: bool = typer.Option(True, "--pr/--no-pr", help="Create a pull request (otherwise only commit)"),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show detailed sync information.",
    ),
) -> None:
    """Sync icons from Figma."""
    try:
        config = load_config(config_path)
        if not git:
            config.git.enabled = False
        if not pr:
            config.git.create_pr = False

        asyncio.run(run_icon_sync(config, verbose))
        console.print("\n[green]Sync completed successfully![/green]")

    except Exception as e:
        if not isinstance(e, typer.Exit):
            logger.exception("Sync failed")
            typer.echo(f"Error during sync: {e}", err=True)
            raise typer.Exit(1)
        raise
