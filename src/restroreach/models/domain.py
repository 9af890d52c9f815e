"""Domain models for delivery pricing, ETA and order tracking."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class CalculationMethod(str, Enum):
    HAVERSINE = "haversine"
    ROUTING_SERVICE = "routing_service"

    @classmethod
    def parse(cls, value: str | CalculationMethod) -> CalculationMethod:
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        if normalized == "google_maps":
            return cls.ROUTING_SERVICE
        return cls(normalized)


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class DeliveryStage(str, Enum):
    """Restaurant workflow stages, declared in progression order."""

    RECEIVED = "received"
    PREPARING = "preparing"
    READY_FOR_PICKUP = "ready-for-pickup"
    OUT_FOR_DELIVERY = "out-for-delivery"
    DELIVERED = "delivered"

    @property
    def position(self) -> int:
        return STAGE_ORDER.index(self)


STAGE_ORDER: tuple[DeliveryStage, ...] = tuple(DeliveryStage)


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    ON_HOLD = "on-hold"
    READY_FOR_PICKUP = "ready-for-pickup"
    OUT_FOR_DELIVERY = "out-for-delivery"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"
    FAILED = "failed"

    @classmethod
    def parse(cls, value: str | Enum) -> OrderStatus:
        """Parse a status string or enum member, accepting ``wc-`` prefixes and stage names."""
        if isinstance(value, cls):
            return value
        raw = value.value if isinstance(value, Enum) else value
        normalized = str(raw).strip().lower().replace("_", "-")
        if normalized.startswith("wc-"):
            normalized = normalized[3:]
        if normalized in _STAGE_ALIASES:
            return _STAGE_ALIASES[normalized]
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(f"Unknown order status '{value}'.") from None

    @property
    def stage(self) -> DeliveryStage:
        return _STATUS_STAGES[self]

    @property
    def is_terminal(self) -> bool:
        return self in {
            OrderStatus.COMPLETED,
            OrderStatus.CANCELLED,
            OrderStatus.REFUNDED,
            OrderStatus.FAILED,
        }


_STAGE_ALIASES = {
    "received": OrderStatus.PENDING,
    "preparing": OrderStatus.PROCESSING,
    "delivered": OrderStatus.COMPLETED,
}

_STATUS_STAGES = {
    OrderStatus.PENDING: DeliveryStage.RECEIVED,
    OrderStatus.ON_HOLD: DeliveryStage.RECEIVED,
    OrderStatus.CANCELLED: DeliveryStage.RECEIVED,
    OrderStatus.REFUNDED: DeliveryStage.RECEIVED,
    OrderStatus.FAILED: DeliveryStage.RECEIVED,
    OrderStatus.PROCESSING: DeliveryStage.PREPARING,
    OrderStatus.READY_FOR_PICKUP: DeliveryStage.READY_FOR_PICKUP,
    OrderStatus.OUT_FOR_DELIVERY: DeliveryStage.OUT_FOR_DELIVERY,
    OrderStatus.COMPLETED: DeliveryStage.DELIVERED,
}


@dataclass(frozen=True, slots=True)
class Coordinate:
    """A latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float

    def as_tuple(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """A coordinate with an optional display label and address."""

    coordinate: Coordinate
    label: Optional[str] = None
    address: Optional[str] = None


@dataclass(frozen=True, slots=True)
class DeliveryZone:
    """Postcode-pattern pricing adjustment for a delivery area."""

    postcode_pattern: str
    price_multiplier: float = 1.0
    additional_cost: float = 0.0
    name: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ShippingQuote:
    distance_km: float
    cost: float
    calculation_method: CalculationMethod
    zone_applied: Optional[DeliveryZone] = None
    label: str = "Delivery"
    free_delivery: bool = False


@dataclass(frozen=True, slots=True)
class ETAResult:
    eta_minutes: Optional[int]
    eta_label: str
    distance_km: Optional[float]
    confidence: Confidence


@dataclass(frozen=True, slots=True)
class StatusMilestone:
    status_key: str
    label: str
    completed: bool
    timestamp: Optional[str] = None


@dataclass(frozen=True, slots=True)
class AgentLocation:
    """Most recent GPS fix reported by a delivery agent."""

    coordinate: Coordinate
    recorded_at: datetime
    accuracy: Optional[float] = None
    agent_id: Optional[str] = None


@dataclass(frozen=True, slots=True)
class RouteEstimate:
    """Driving route metrics returned by a routing service."""

    distance_km: float
    duration_minutes: int
    duration_text: str
    distance_text: str


@dataclass(frozen=True, slots=True)
class DistanceResolution:
    distance_km: float
    method: CalculationMethod
    route: Optional[RouteEstimate] = None


@dataclass(slots=True)
class OrderRecord:
    """Order fields the delivery engine reads from storage."""

    order_id: str
    status: OrderStatus
    cart_total: float = 0.0
    postcode: Optional[str] = None
    address: Optional[str] = None
    created_at: Optional[datetime] = None
    customer_location: Optional[Coordinate] = None
