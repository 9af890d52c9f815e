"""Contract for routing/geocoding capabilities used by the delivery engine."""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from ...models.domain import Coordinate, RouteEstimate


@runtime_checkable
class RoutingClient(Protocol):
    def is_enabled(self) -> bool:
        ...

    def driving_distance(self, origin: Coordinate, destination: Coordinate) -> Optional[RouteEstimate]:
        ...

    def geocode(self, address: str) -> Optional[Coordinate]:
        ...
