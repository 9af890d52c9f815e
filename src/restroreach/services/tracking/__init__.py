"""Order tracking services."""

from .eta import compute_eta, estimate_eta
from .timeline import build_status_timeline

__all__ = ["compute_eta", "estimate_eta", "build_status_timeline"]
