from datetime import datetime, timedelta, timezone

import pytest

from restroreach.config import settings
from restroreach.models.domain import AgentLocation, Coordinate, OrderRecord, OrderStatus
from restroreach.services.tracking import service as tracking_service

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
RESTAURANT = Coordinate(0.0, 0.0)
CUSTOMER = Coordinate(0.0, 0.05)


def _order(status: str, **kwargs) -> OrderRecord:
    kwargs.setdefault("customer_location", CUSTOMER)
    return OrderRecord(
        order_id="1042",
        status=OrderStatus.parse(status),
        cart_total=32.5,
        address="12 Canal Street",
        created_at=datetime(2026, 10, 19, 11, 20, tzinfo=timezone.utc),
        **kwargs,
    )


@pytest.fixture
def stub_storage(monkeypatch):
    state = {
        "order": _order("out-for-delivery"),
        "agent_id": "agent-7",
        "location": AgentLocation(
            coordinate=Coordinate(0.0, 0.0),
            recorded_at=NOW - timedelta(minutes=3),
            accuracy=8.0,
            agent_id="agent-7",
        ),
        "agent_lookups": [],
    }

    def fake_assigned_agent(order_id):
        state["agent_lookups"].append(order_id)
        return state["agent_id"]

    monkeypatch.setattr(tracking_service, "get_order", lambda order_id: state["order"])
    monkeypatch.setattr(tracking_service, "get_assigned_agent_id", fake_assigned_agent)
    monkeypatch.setattr(tracking_service, "get_latest_agent_location", lambda agent_id: state["location"])
    monkeypatch.setattr(tracking_service, "resolve_restaurant_location", lambda routing_client=None: RESTAURANT)
    return state


def test_active_delivery_uses_agent_location(stub_storage):
    summary = tracking_service.get_tracking_summary("1042", now=NOW)

    assert summary.order_id == "1042"
    assert summary.status == "out-for-delivery"
    assert summary.eta.confidence == "medium"
    assert summary.eta.eta_label == "11 minutes"
    assert set(summary.locations) == {"restaurant", "customer", "agent"}
    assert summary.locations["agent"].label == "agent-7"
    assert summary.refresh_interval == 30


def test_timeline_is_stamped_from_order_data(stub_storage):
    summary = tracking_service.get_tracking_summary("1042", now=NOW)
    timeline = {milestone.status_key: milestone for milestone in summary.status_timeline}

    assert timeline["received"].timestamp == "11:20"
    assert timeline["out-for-delivery"].timestamp == "12:00"
    assert timeline["out-for-delivery"].completed
    assert not timeline["delivered"].completed
    assert timeline["preparing"].timestamp is None


def test_no_assigned_agent_falls_back_to_status(stub_storage):
    stub_storage["agent_id"] = None

    summary = tracking_service.get_tracking_summary("1042", now=NOW)

    assert summary.eta.confidence == "low"
    assert summary.eta.eta_label == "5-10 minutes"
    assert "agent" not in summary.locations


def test_stale_agent_location_is_not_used_for_eta(stub_storage):
    stub_storage["location"] = AgentLocation(
        coordinate=Coordinate(0.0, 0.0), recorded_at=NOW - timedelta(hours=3), agent_id="agent-7"
    )

    summary = tracking_service.get_tracking_summary("1042", now=NOW)

    assert summary.eta.confidence == "low"


def test_completed_order_skips_agent_lookup(stub_storage):
    stub_storage["order"] = _order("completed")

    summary = tracking_service.get_tracking_summary("1042", now=NOW)

    assert stub_storage["agent_lookups"] == []
    assert summary.eta.eta_label == "Delivered"
    assert all(milestone.completed for milestone in summary.status_timeline)


def test_missing_customer_location_without_geocoder(stub_storage):
    stub_storage["order"] = _order("processing", customer_location=None)

    summary = tracking_service.get_tracking_summary("1042", now=NOW)

    assert "customer" not in summary.locations
    assert summary.eta.eta_label == "20-30 minutes"


def test_unknown_order_raises_lookup_error(stub_storage):
    stub_storage["order"] = None

    with pytest.raises(LookupError):
        tracking_service.get_tracking_summary("missing", now=NOW)


def test_locations_carry_labels_and_addresses(stub_storage, monkeypatch):
    monkeypatch.setattr(settings, "restaurant_name", "Canal Kitchen")
    monkeypatch.setattr(settings, "restaurant_address", "1 Dock Road")

    locations = tracking_service.get_tracking_summary("1042", now=NOW).locations

    assert (locations["restaurant"].label, locations["restaurant"].address) == ("Canal Kitchen", "1 Dock Road")
    assert (locations["restaurant"].latitude, locations["restaurant"].longitude) == (0.0, 0.0)
    assert locations["customer"].address == "12 Canal Street"
    assert locations["customer"].longitude == 0.05
    assert locations["customer"].label is None
    assert locations["agent"].last_update == NOW - timedelta(minutes=3)
