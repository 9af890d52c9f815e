"""RestroReach delivery pricing, ETA and order tracking engine."""

from .services.shipping.service import compute_shipping_quote
from .services.tracking.eta import compute_eta
from .services.tracking.timeline import build_status_timeline

__version__ = "1.0.0"

__all__ = ["compute_shipping_quote", "compute_eta", "build_status_timeline"]
