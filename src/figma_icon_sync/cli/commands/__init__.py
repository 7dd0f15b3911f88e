"""CLI commands for figma-icon-sync."""

from . import init, sync, validate

__all__ = ["init", "sync", "validate"]
