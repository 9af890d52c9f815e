"""Best-available delivery ETA with a confidence-ranked fallback chain."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from ...models.domain import (
    AgentLocation,
    CalculationMethod,
    Confidence,
    Coordinate,
    ETAResult,
    OrderStatus,
)
from ..geospatial import DEFAULT_AVERAGE_SPEED_KMH, eta_minutes_from_distance
from ..routing.base import RoutingClient
from ..routing.resolver import resolve_distance
from ..validation import ensure_valid

logger = logging.getLogger(__name__)

DEFAULT_MAX_LOCATION_AGE = timedelta(hours=1)
DEFAULT_MAX_CLOCK_SKEW = timedelta(minutes=5)

STATUS_ETA_LABELS = {
    OrderStatus.PENDING: "20-30 minutes",
    OrderStatus.PROCESSING: "20-30 minutes",
    OrderStatus.ON_HOLD: "20-30 minutes",
    OrderStatus.READY_FOR_PICKUP: "10-15 minutes",
    OrderStatus.OUT_FOR_DELIVERY: "5-10 minutes",
}
DELIVERED_LABEL = "Delivered"


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def is_location_fresh(
    location: AgentLocation,
    now: Optional[datetime] = None,
    max_age: timedelta = DEFAULT_MAX_LOCATION_AGE,
    max_clock_skew: timedelta = DEFAULT_MAX_CLOCK_SKEW,
) -> bool:
    """True if the fix was recorded within ``max_age`` of ``now``.

    Fixes stamped more than ``max_clock_skew`` after ``now`` are not trusted.
    """
    now = _as_utc(now or datetime.now(timezone.utc))
    age = now - _as_utc(location.recorded_at)
    return -max_clock_skew <= age <= max_age


def status_fallback_eta(order_status: OrderStatus | str) -> ETAResult:
    status = OrderStatus.parse(order_status)
    label = DELIVERED_LABEL if status.is_terminal else STATUS_ETA_LABELS.get(status, DELIVERED_LABEL)
    return ETAResult(eta_minutes=None, eta_label=label, distance_km=None, confidence=Confidence.LOW)


def estimate_eta(
    order_status: OrderStatus | str,
    agent_location: Optional[AgentLocation] = None,
    restaurant_location: Optional[Coordinate] = None,
    customer_location: Optional[Coordinate] = None,
    routing_client: Optional[RoutingClient] = None,
    *,
    now: Optional[datetime] = None,
    avg_speed_kmh: float = DEFAULT_AVERAGE_SPEED_KMH,
    max_location_age: timedelta = DEFAULT_MAX_LOCATION_AGE,
) -> ETAResult:
    """Estimate delivery time from the best data available.

    1. Fresh agent fix and customer location with a routing-service route:
       the service's own duration, ``high`` confidence.
    2. Fresh agent fix and customer location otherwise: Haversine distance
       at ``avg_speed_kmh``, ``medium`` confidence.
    3. No usable agent fix: a fixed range keyed by order status, ``low``.

    Agent fixes older than ``max_location_age``, or stamped in the future
    beyond the allowed clock skew, count as absent.
    """
    status = OrderStatus.parse(order_status)
    if agent_location is not None:
        ensure_valid(agent_location.coordinate, field="agent location")
    if customer_location is not None:
        ensure_valid(customer_location, field="customer location")
    if restaurant_location is not None:
        ensure_valid(restaurant_location, field="restaurant location")

    usable_agent = agent_location
    if usable_agent is not None and not is_location_fresh(usable_agent, now, max_location_age):
        logger.info(
            f"Ignoring agent location recorded at {usable_agent.recorded_at.isoformat()}: outside the freshness window."
        )
        usable_agent = None

    if usable_agent is None or customer_location is None:
        return status_fallback_eta(status)

    resolution = resolve_distance(
        CalculationMethod.ROUTING_SERVICE,
        usable_agent.coordinate,
        customer_location,
        routing_client,
    )
    if resolution.route is not None:
        return ETAResult(
            eta_minutes=resolution.route.duration_minutes,
            eta_label=resolution.route.duration_text,
            distance_km=resolution.route.distance_km,
            confidence=Confidence.HIGH,
        )

    minutes = eta_minutes_from_distance(resolution.distance_km, avg_speed_kmh)
    return ETAResult(
        eta_minutes=minutes,
        eta_label=f"{minutes} minute" if minutes == 1 else f"{minutes} minutes",
        distance_km=resolution.distance_km,
        confidence=Confidence.MEDIUM,
    )


compute_eta = estimate_eta
