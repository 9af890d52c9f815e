"""Order status timeline."""

from __future__ import annotations

from datetime import datetime
from typing import Mapping, Optional, Union

from ...models.domain import STAGE_ORDER, DeliveryStage, OrderStatus, StatusMilestone

StageTimestamp = Union[datetime, str, None]

STAGE_LABELS = {
    DeliveryStage.RECEIVED: "Order Received",
    DeliveryStage.PREPARING: "Preparing Food",
    DeliveryStage.READY_FOR_PICKUP: "Ready for Pickup",
    DeliveryStage.OUT_FOR_DELIVERY: "Out for Delivery",
    DeliveryStage.DELIVERED: "Delivered",
}


def _format_timestamp(value: StageTimestamp) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.strftime("%H:%M")
    return value or None


def _normalize_timestamps(
    timestamps: Optional[Mapping[Union[DeliveryStage, str], StageTimestamp]],
) -> dict[DeliveryStage, StageTimestamp]:
    normalized: dict[DeliveryStage, StageTimestamp] = {}
    for key, value in (timestamps or {}).items():
        try:
            stage = DeliveryStage(key)
        except ValueError:
            raise ValueError(f"Unknown delivery stage '{key}'.") from None
        normalized[stage] = value
    return normalized


def build_status_timeline(
    order_status: OrderStatus | str,
    timestamps: Optional[Mapping[Union[DeliveryStage, str], StageTimestamp]] = None,
) -> list[StatusMilestone]:
    """Milestones in workflow order, completed up to the order's current stage."""
    current = OrderStatus.parse(order_status).stage.position
    times = _normalize_timestamps(timestamps)
    return [
        StatusMilestone(
            status_key=stage.value,
            label=STAGE_LABELS[stage],
            completed=stage.position <= current,
            timestamp=_format_timestamp(times.get(stage)),
        )
        for stage in STAGE_ORDER
    ]
