"""Distance-based delivery cost rules."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ...config import Settings, settings
from ...models.domain import CalculationMethod, DeliveryZone

_CENT = Decimal("0.01")


@dataclass(slots=True)
class ShippingRates:
    """Configured pricing for the distance-based delivery method."""

    title: str = "Delivery"
    base_cost: float = 5.00
    cost_per_km: float = 1.50
    min_cost: float = 3.00
    max_cost: float = 25.00
    max_distance_km: float = 15.0
    free_delivery_threshold: float = 50.00
    calculation_method: CalculationMethod = CalculationMethod.HAVERSINE

    @classmethod
    def from_settings(cls, config: Settings | None = None) -> "ShippingRates":
        config = config or settings
        return cls(
            title=config.shipping_title,
            base_cost=config.shipping_base_cost,
            cost_per_km=config.shipping_cost_per_km,
            min_cost=config.shipping_min_cost,
            max_cost=config.shipping_max_cost,
            max_distance_km=config.shipping_max_distance_km,
            free_delivery_threshold=config.shipping_free_delivery_threshold,
            calculation_method=CalculationMethod.parse(config.shipping_calculation_method),
        )


def round_currency(amount: float) -> float:
    """Round half-up to cents."""
    return float(Decimal(str(amount)).quantize(_CENT, rounding=ROUND_HALF_UP))


def is_free_delivery(cart_total: float, free_delivery_threshold: float) -> bool:
    if free_delivery_threshold <= 0:
        return False
    return cart_total >= free_delivery_threshold


def calculate_shipping_cost(
    distance_km: float,
    *,
    base_cost: float,
    cost_per_km: float,
    min_cost: float = 0.0,
    max_cost: float = 0.0,
    zone: Optional[DeliveryZone] = None,
    cart_total: float = 0.0,
    free_delivery_threshold: float = 0.0,
) -> float:
    """Delivery cost for ``distance_km``.

    The zone adjustment runs after the min/max clamp, so a zone can move the
    cost outside ``[min_cost, max_cost]``. The free-delivery threshold
    overrides everything else.
    """
    cost = base_cost + distance_km * cost_per_km

    if min_cost > 0:
        cost = max(cost, min_cost)
    if max_cost > 0:
        cost = min(cost, max_cost)

    if zone is not None:
        cost = cost * zone.price_multiplier + zone.additional_cost

    if is_free_delivery(cart_total, free_delivery_threshold):
        cost = 0.0

    return round_currency(cost)
