"""Customer-facing order tracking orchestration."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from ...config import settings
from ...data.tracking_repository import get_assigned_agent_id, get_latest_agent_location, get_order
from ...models.domain import AgentLocation, Coordinate, DeliveryStage, GeoPoint, OrderRecord
from ...schemas.tracking import ETAResponse, MilestoneModel, TrackedLocation, TrackingResponse
from ..routing.base import RoutingClient
from ..shipping.service import resolve_restaurant_location
from .eta import estimate_eta
from .timeline import build_status_timeline

logger = logging.getLogger(__name__)


def _customer_location(order: OrderRecord, routing_client: Optional[RoutingClient]) -> Optional[Coordinate]:
    if order.customer_location is not None:
        return order.customer_location
    if not order.address or routing_client is None or not routing_client.is_enabled():
        return None
    try:
        return routing_client.geocode(order.address)
    except Exception as e:
        logger.warning(f"Failed to geocode address for order {order.order_id}: {e}")
        return None


def _agent_location(order: OrderRecord) -> Optional[AgentLocation]:
    if order.status.is_terminal:
        return None
    agent_id = get_assigned_agent_id(order.order_id)
    if not agent_id:
        return None
    return get_latest_agent_location(agent_id)


def _stage_timestamps(order: OrderRecord, now: datetime) -> dict[DeliveryStage, datetime]:
    timestamps: dict[DeliveryStage, datetime] = {}
    if order.created_at is not None:
        timestamps[DeliveryStage.RECEIVED] = order.created_at
    current_stage = order.status.stage
    if current_stage is not DeliveryStage.RECEIVED or order.created_at is None:
        timestamps[current_stage] = now
    return timestamps


def get_tracking_summary(
    order_id: str,
    *,
    routing_client: Optional[RoutingClient] = None,
    now: Optional[datetime] = None,
) -> TrackingResponse:
    now = now or datetime.now(timezone.utc)
    order = get_order(order_id)
    if order is None:
        raise LookupError(f"Order '{order_id}' not found.")

    restaurant = resolve_restaurant_location(routing_client)
    customer = _customer_location(order, routing_client)
    agent = _agent_location(order)

    eta = estimate_eta(
        order.status,
        agent_location=agent,
        restaurant_location=restaurant,
        customer_location=customer,
        routing_client=routing_client,
        now=now,
        avg_speed_kmh=settings.average_speed_kmh,
        max_location_age=timedelta(minutes=settings.agent_location_max_age_minutes),
    )
    timeline = build_status_timeline(order.status, _stage_timestamps(order, now))

    locations: dict[str, TrackedLocation] = {}
    if restaurant is not None:
        locations["restaurant"] = TrackedLocation.from_point(
            GeoPoint(restaurant, label=settings.restaurant_name, address=settings.restaurant_address)
        )
    if customer is not None:
        locations["customer"] = TrackedLocation.from_point(GeoPoint(customer, address=order.address))
    if agent is not None:
        locations["agent"] = TrackedLocation.from_point(
            GeoPoint(agent.coordinate, label=agent.agent_id),
            last_update=agent.recorded_at,
        )

    logger.debug(f"Tracking summary for order {order_id}: eta={eta.eta_label} ({eta.confidence.value})")
    return TrackingResponse(
        order_id=order.order_id,
        status=order.status.value,
        eta=ETAResponse.from_result(eta),
        status_timeline=[MilestoneModel.from_milestone(milestone) for milestone in timeline],
        locations=locations,
        refresh_interval=settings.tracking_refresh_interval_seconds,
    )
