"""figma-icon-sync - keep a local icon directory in sync with a Figma file."""

__version__ = "0.1.0"
