"""Command line interface for figma-icon-sync."""
