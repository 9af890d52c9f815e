from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from restroreach.main import create_app
from restroreach.models.domain import Coordinate, DeliveryZone
from restroreach.schemas.tracking import ETAResponse, TrackingResponse


@pytest.fixture
def api_client(monkeypatch: pytest.MonkeyPatch) -> TestClient:
    from restroreach.api.routes import shipping as shipping_routes
    from restroreach.api.routes import tracking as tracking_routes

    monkeypatch.setattr(shipping_routes, "get_routing_client", lambda: None)
    monkeypatch.setattr(tracking_routes, "get_routing_client", lambda: None)
    monkeypatch.setattr(shipping_routes, "resolve_restaurant_location", lambda routing_client=None: Coordinate(0.0, 0.0))
    monkeypatch.setattr(
        shipping_routes,
        "load_delivery_zones",
        lambda: (DeliveryZone("SW1A*", 1.2, 2.0, "Downtown"),),
    )
    return TestClient(create_app())


def test_health(api_client):
    response = api_client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_shipping_quote(api_client):
    response = api_client.post("/api/shipping/quote", json={"latitude": 0.0, "longitude": 0.05, "cart_total": 20})

    assert response.status_code == 200
    body = response.json()
    assert body["cost"] == 13.34
    assert body["label"] == "Delivery (~5.6 km)"
    assert body["calculation_method"] == "haversine"
    assert body["free_delivery"] is False
    assert body["zone_applied"] is None


def test_shipping_quote_with_zone_and_free_delivery(api_client):
    response = api_client.post(
        "/api/shipping/quote",
        json={"latitude": 0.0, "longitude": 0.05, "postcode": "sw1a 1aa", "cart_total": 60},
    )

    body = response.json()
    assert response.status_code == 200
    assert body["cost"] == 0.0
    assert body["free_delivery"] is True
    assert body["zone_applied"]["name"] == "Downtown"


def test_shipping_quote_out_of_range(api_client):
    response = api_client.post("/api/shipping/quote", json={"latitude": 0.0, "longitude": 0.2})

    assert response.status_code == 404


def test_shipping_quote_invalid_coordinates(api_client):
    response = api_client.post("/api/shipping/quote", json={"latitude": 95.0, "longitude": 0.0})

    assert response.status_code == 400


def test_shipping_quote_requires_destination(api_client):
    response = api_client.post("/api/shipping/quote", json={"cart_total": 10})

    assert response.status_code == 422


def test_eta_endpoint_with_fresh_agent(api_client):
    recorded_at = (datetime.now(timezone.utc) - timedelta(minutes=2)).isoformat()
    response = api_client.post(
        "/api/tracking/eta",
        json={
            "order_status": "out-for-delivery",
            "agent_location": {"latitude": 0.0, "longitude": 0.0, "recorded_at": recorded_at},
            "customer_location": {"latitude": 0.0, "longitude": 0.05},
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["confidence"] == "medium"
    assert body["eta_minutes"] == 11


def test_eta_endpoint_status_fallback(api_client):
    response = api_client.post("/api/tracking/eta", json={"order_status": "processing"})

    assert response.json() == {
        "eta_minutes": None,
        "eta_label": "20-30 minutes",
        "distance_km": None,
        "confidence": "low",
    }


def test_eta_endpoint_unknown_status(api_client):
    response = api_client.post("/api/tracking/eta", json={"order_status": "lost"})

    assert response.status_code == 400


def test_timeline_endpoint(api_client):
    response = api_client.post(
        "/api/tracking/timeline",
        json={"order_status": "ready-for-pickup", "timestamps": {"received": "10:02"}},
    )

    assert response.status_code == 200
    body = response.json()
    assert [item["completed"] for item in body] == [True, True, True, False, False]
    assert body[0]["timestamp"] == "10:02"


def test_timeline_endpoint_rejects_unknown_stage(api_client):
    response = api_client.post(
        "/api/tracking/timeline",
        json={"order_status": "pending", "timestamps": {"cooking": "10:02"}},
    )

    assert response.status_code == 400


def test_tracking_summary_endpoint(api_client, monkeypatch):
    from restroreach.api.routes import tracking as tracking_routes

    def fake_summary(order_id, routing_client=None):
        return TrackingResponse(
            order_id=order_id,
            status="processing",
            eta=ETAResponse(eta_minutes=None, eta_label="20-30 minutes", distance_km=None, confidence="low"),
            status_timeline=[],
            locations={},
            refresh_interval=30,
        )

    monkeypatch.setattr(tracking_routes, "get_tracking_summary", fake_summary)

    response = api_client.get("/api/tracking/1042")

    assert response.status_code == 200
    assert response.json()["order_id"] == "1042"


@pytest.mark.parametrize(
    ("error", "status_code"),
    [
        (LookupError("Order 'x' not found."), 404),
        (ConnectionError("Order storage is not configured."), 503),
    ],
)
def test_tracking_summary_errors(api_client, monkeypatch, error, status_code):
    from restroreach.api.routes import tracking as tracking_routes

    def fake_summary(order_id, routing_client=None):
        raise error

    monkeypatch.setattr(tracking_routes, "get_tracking_summary", fake_summary)

    assert api_client.get("/api/tracking/x").status_code == status_code
