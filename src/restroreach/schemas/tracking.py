"""Tracking request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

from ..models.domain import Coordinate, ETAResult, GeoPoint, StatusMilestone


class LocationModel(BaseModel):
    latitude: float
    longitude: float

    def to_coordinate(self) -> Coordinate:
        return Coordinate(latitude=self.latitude, longitude=self.longitude)


class AgentLocationModel(LocationModel):
    recorded_at: datetime
    accuracy: Optional[float] = None
    agent_id: Optional[str] = None


class ETARequest(BaseModel):
    order_status: str
    agent_location: Optional[AgentLocationModel] = None
    restaurant_location: Optional[LocationModel] = None
    customer_location: Optional[LocationModel] = None
    use_routing_service: bool = Field(default=True, description="Ask the routing service for a driving ETA.")


class ETAResponse(BaseModel):
    eta_minutes: Optional[int]
    eta_label: str
    distance_km: Optional[float]
    confidence: str

    @classmethod
    def from_result(cls, result: ETAResult) -> "ETAResponse":
        return cls(
            eta_minutes=result.eta_minutes,
            eta_label=result.eta_label,
            distance_km=round(result.distance_km, 3) if result.distance_km is not None else None,
            confidence=result.confidence.value,
        )


class TimelineRequest(BaseModel):
    order_status: str
    timestamps: Dict[str, Union[datetime, str, None]] = Field(default_factory=dict)


class MilestoneModel(BaseModel):
    status_key: str
    label: str
    completed: bool
    timestamp: Optional[str] = None

    @classmethod
    def from_milestone(cls, milestone: StatusMilestone) -> "MilestoneModel":
        return cls(
            status_key=milestone.status_key,
            label=milestone.label,
            completed=milestone.completed,
            timestamp=milestone.timestamp,
        )


class TrackedLocation(BaseModel):
    latitude: float
    longitude: float
    label: Optional[str] = None
    address: Optional[str] = None
    last_update: Optional[datetime] = None

    @classmethod
    def from_point(cls, point: GeoPoint, last_update: Optional[datetime] = None) -> "TrackedLocation":
        return cls(
            latitude=point.coordinate.latitude,
            longitude=point.coordinate.longitude,
            label=point.label,
            address=point.address,
            last_update=last_update,
        )


class TrackingResponse(BaseModel):
    order_id: str
    status: str
    eta: ETAResponse
    status_timeline: List[MilestoneModel]
    locations: Dict[str, TrackedLocation]
    refresh_interval: int
