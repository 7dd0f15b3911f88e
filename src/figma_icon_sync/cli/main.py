"""Main CLI entry point for figma-icon-sync."""  # pragma: no cover

from figma_icon_sync.cli.app import app  # pragma: no cover

# Register commands
from figma_icon_sync.cli.commands import init, sync, validate  # pragma: no cover

__all__ = ["app", "init", "sync", "validate"]  # pragma: no cover

if __name__ == "__main__":  # pragma: no cover
    app()
