from datetime import datetime

import pytest

from restroreach.models.domain import DeliveryStage
from restroreach.services.tracking.timeline import build_status_timeline


def _completed(timeline):
    return {milestone.status_key: milestone.completed for milestone in timeline}


def test_timeline_follows_fixed_stage_order():
    timeline = build_status_timeline("pending")

    assert [milestone.status_key for milestone in timeline] == [
        "received",
        "preparing",
        "ready-for-pickup",
        "out-for-delivery",
        "delivered",
    ]
    assert [milestone.label for milestone in timeline] == [
        "Order Received",
        "Preparing Food",
        "Ready for Pickup",
        "Out for Delivery",
        "Delivered",
    ]


def test_out_for_delivery_completes_earlier_stages():
    assert _completed(build_status_timeline("out-for-delivery")) == {
        "received": True,
        "preparing": True,
        "ready-for-pickup": True,
        "out-for-delivery": True,
        "delivered": False,
    }


@pytest.mark.parametrize(
    ("status", "completed_count"),
    [
        ("pending", 1),
        ("processing", 2),
        ("ready-for-pickup", 3),
        ("out-for-delivery", 4),
        ("completed", 5),
        ("cancelled", 1),
    ],
)
def test_completion_is_monotonic(status, completed_count):
    flags = [milestone.completed for milestone in build_status_timeline(status)]

    assert flags == [True] * completed_count + [False] * (5 - completed_count)


def test_timestamps_are_only_taken_from_input():
    timeline = build_status_timeline(
        "out-for-delivery",
        {
            DeliveryStage.RECEIVED: datetime(2026, 10, 19, 11, 5),
            "out-for-delivery": "11:42",
        },
    )
    times = {milestone.status_key: milestone.timestamp for milestone in timeline}

    assert times == {
        "received": "11:05",
        "preparing": None,
        "ready-for-pickup": None,
        "out-for-delivery": "11:42",
        "delivered": None,
    }


def test_unknown_stage_key_is_rejected():
    with pytest.raises(ValueError):
        build_status_timeline("processing", {"cooking": "10:00"})


@pytest.mark.parametrize(
    ("stage", "completed_count"),
    [
        (DeliveryStage.RECEIVED, 1),
        (DeliveryStage.PREPARING, 2),
        (DeliveryStage.READY_FOR_PICKUP, 3),
        (DeliveryStage.OUT_FOR_DELIVERY, 4),
        (DeliveryStage.DELIVERED, 5),
    ],
)
def test_stage_members_are_accepted_as_status(stage, completed_count):
    flags = [milestone.completed for milestone in build_status_timeline(stage)]

    assert flags == [True] * completed_count + [False] * (5 - completed_count)
