from .client import FigmaClient

__all__ = ["FigmaClient"]
