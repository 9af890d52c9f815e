"""Order, assignment and agent location lookups backed by Supabase."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from ..db.supabase import get_supabase_client
from ..models.domain import AgentLocation, Coordinate, OrderRecord, OrderStatus

ACTIVE_ASSIGNMENT_STATUSES = ("assigned", "picked_up")


def _parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    text = str(value).strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def _parse_coordinate(latitude: Any, longitude: Any) -> Optional[Coordinate]:
    if latitude is None or longitude is None:
        return None
    return Coordinate(latitude=float(latitude), longitude=float(longitude))


def get_order(order_id: str) -> Optional[OrderRecord]:
    supabase = get_supabase_client()
    if not supabase:
        raise ConnectionError("Order storage is not configured. Set RDM_SUPABASE_URL and RDM_SUPABASE_KEY.")

    response = (
        supabase.table("orders")
        .select("id, status, cart_total, shipping_postcode, shipping_address, created_at, shipping_latitude, shipping_longitude")
        .eq("id", order_id)
        .limit(1)
        .execute()
    )
    if not response.data:
        return None

    row = response.data[0]
    return OrderRecord(
        order_id=str(row["id"]),
        status=OrderStatus.parse(row["status"]),
        cart_total=float(row.get("cart_total") or 0.0),
        postcode=row.get("shipping_postcode"),
        address=row.get("shipping_address"),
        created_at=_parse_datetime(row.get("created_at")),
        customer_location=_parse_coordinate(row.get("shipping_latitude"), row.get("shipping_longitude")),
    )


def get_assigned_agent_id(order_id: str) -> Optional[str]:
    """Agent currently assigned to (or carrying) the order."""
    supabase = get_supabase_client()
    if not supabase:
        return None

    try:
        response = (
            supabase.table("order_assignments")
            .select("agent_id, status, assigned_at")
            .eq("order_id", order_id)
            .in_("status", list(ACTIVE_ASSIGNMENT_STATUSES))
            .order("assigned_at", desc=True)
            .limit(1)
            .execute()
        )
    except Exception as e:
        logging.warning(f"Failed to load assignment for order {order_id}: {e}")
        return None

    if not response.data:
        return None
    return str(response.data[0]["agent_id"])


def get_latest_agent_location(agent_id: str) -> Optional[AgentLocation]:
    """Most recent recorded GPS fix for the agent, regardless of age."""
    supabase = get_supabase_client()
    if not supabase:
        return None

    try:
        response = (
            supabase.table("location_tracking")
            .select("latitude, longitude, accuracy, recorded_at")
            .eq("agent_id", agent_id)
            .order("recorded_at", desc=True)
            .limit(1)
            .execute()
        )
    except Exception as e:
        logging.warning(f"Failed to load location for agent {agent_id}: {e}")
        return None

    if not response.data:
        return None
    row = response.data[0]
    try:
        return AgentLocation(
            coordinate=Coordinate(latitude=float(row["latitude"]), longitude=float(row["longitude"])),
            recorded_at=_parse_datetime(row["recorded_at"]),
            accuracy=float(row["accuracy"]) if row.get("accuracy") is not None else None,
            agent_id=agent_id,
        )
    except (KeyError, TypeError, ValueError) as e:
        logging.warning(f"Skipping malformed location row for agent {agent_id}: {e}")
        return None
