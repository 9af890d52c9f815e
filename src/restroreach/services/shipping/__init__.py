"""Delivery pricing services."""

from .calculator import ShippingRates, calculate_shipping_cost
from .service import compute_shipping_quote, quote_delivery

__all__ = ["ShippingRates", "calculate_shipping_cost", "compute_shipping_quote", "quote_delivery"]
