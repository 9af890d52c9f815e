"""Distance resolution with routing-service preference and Haversine fallback."""

from __future__ import annotations

import logging
from typing import Optional

from ...models.domain import CalculationMethod, Coordinate, DistanceResolution
from ..geospatial import haversine_km
from ..validation import ensure_valid
from .base import RoutingClient

logger = logging.getLogger(__name__)


def resolve_distance(
    method: CalculationMethod | str,
    origin: Coordinate,
    destination: Coordinate,
    routing_client: Optional[RoutingClient] = None,
) -> DistanceResolution:
    """Distance in km between two points.

    Only invalid coordinates raise. Routing failures of any kind fall back
    to the great-circle distance.
    """
    ensure_valid(origin, field="origin")
    ensure_valid(destination, field="destination")
    method = CalculationMethod.parse(method)

    if method is CalculationMethod.ROUTING_SERVICE and routing_client is not None:
        try:
            if routing_client.is_enabled():
                route = routing_client.driving_distance(origin, destination)
                if route is not None and route.distance_km >= 0:
                    return DistanceResolution(
                        distance_km=route.distance_km,
                        method=CalculationMethod.ROUTING_SERVICE,
                        route=route,
                    )
                logger.warning("Routing service found no route. Using haversine fallback.")
            else:
                logger.debug("Routing service disabled. Using haversine distance.")
        except Exception as e:
            logger.warning(f"Routing service request failed: {e}. Using haversine fallback.")

    return DistanceResolution(
        distance_km=haversine_km(origin, destination),
        method=CalculationMethod.HAVERSINE,
    )
