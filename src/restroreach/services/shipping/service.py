"""Checkout-time delivery quotes."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional, Sequence

from ...config import settings
from ...models.domain import CalculationMethod, Coordinate, DeliveryZone, ShippingQuote
from ...schemas.shipping import ShippingQuoteRequest
from ..routing.base import RoutingClient
from ..routing.resolver import resolve_distance
from ..validation import ensure_valid
from ..zones.matcher import match_zone
from .calculator import ShippingRates, calculate_shipping_cost, is_free_delivery, round_currency

logger = logging.getLogger(__name__)


def shipping_label(title: str, distance_km: float) -> str:
    if distance_km > 0:
        return f"{title} (~{distance_km:.1f} km)"
    return title


def compute_shipping_quote(
    restaurant: Coordinate,
    customer: Coordinate,
    *,
    rates: ShippingRates,
    postcode: Optional[str] = None,
    cart_total: float = 0.0,
    zones: Sequence[DeliveryZone] = (),
    routing_client: Optional[RoutingClient] = None,
) -> Optional[ShippingQuote]:
    """Price delivery from ``restaurant`` to ``customer``.

    Returns None when the destination lies beyond ``rates.max_distance_km``.
    """
    ensure_valid(restaurant, field="restaurant location")
    ensure_valid(customer, field="customer location")

    resolution = resolve_distance(rates.calculation_method, restaurant, customer, routing_client)
    distance_km = resolution.distance_km

    if rates.max_distance_km > 0 and distance_km > rates.max_distance_km:
        logger.info(
            f"Destination {distance_km:.2f} km away exceeds max delivery distance "
            f"{rates.max_distance_km:.2f} km; no rate offered."
        )
        return None

    zone = match_zone(postcode, zones)
    cost = calculate_shipping_cost(
        distance_km,
        base_cost=rates.base_cost,
        cost_per_km=rates.cost_per_km,
        min_cost=rates.min_cost,
        max_cost=rates.max_cost,
        zone=zone,
        cart_total=cart_total,
        free_delivery_threshold=rates.free_delivery_threshold,
    )
    return ShippingQuote(
        distance_km=distance_km,
        cost=cost,
        calculation_method=resolution.method,
        zone_applied=zone,
        label=shipping_label(rates.title, distance_km),
        free_delivery=is_free_delivery(cart_total, rates.free_delivery_threshold),
    )


def resolve_restaurant_location(routing_client: Optional[RoutingClient] = None) -> Optional[Coordinate]:
    """Configured restaurant coordinates, else the configured address geocoded."""
    if settings.restaurant_latitude is not None and settings.restaurant_longitude is not None:
        return ensure_valid(
            Coordinate(settings.restaurant_latitude, settings.restaurant_longitude),
            field="restaurant location",
        )
    if settings.restaurant_address and routing_client is not None and routing_client.is_enabled():
        try:
            return routing_client.geocode(settings.restaurant_address)
        except Exception as e:
            logger.warning(f"Failed to geocode restaurant address: {e}")
    return None


def quote_delivery(
    request: ShippingQuoteRequest,
    *,
    restaurant: Optional[Coordinate],
    zones: Sequence[DeliveryZone] = (),
    rates: Optional[ShippingRates] = None,
    routing_client: Optional[RoutingClient] = None,
) -> Optional[ShippingQuote]:
    """Quote for a checkout destination given as coordinates or an address."""
    rates = rates or ShippingRates.from_settings()
    if request.calculation_method:
        rates = replace(rates, calculation_method=CalculationMethod.parse(request.calculation_method))

    if restaurant is None:
        logger.warning("Restaurant location unknown; offering flat base-cost delivery.")
        return ShippingQuote(
            distance_km=0.0,
            cost=round_currency(rates.base_cost),
            calculation_method=CalculationMethod.HAVERSINE,
            label=rates.title,
        )

    customer = request.coordinate()
    if customer is None and request.address:
        if routing_client is not None and routing_client.is_enabled():
            try:
                customer = routing_client.geocode(request.address)
            except Exception as e:
                logger.warning(f"Failed to geocode delivery address: {e}")
    if customer is None:
        logger.info("Delivery address could not be located; no rate offered.")
        return None

    return compute_shipping_quote(
        restaurant,
        customer,
        rates=rates,
        postcode=request.postcode,
        cart_total=request.cart_total,
        zones=zones,
        routing_client=routing_client,
    )
