"""Route group exports."""

from . import health, shipping, tracking

__all__ = ["health", "shipping", "tracking"]
