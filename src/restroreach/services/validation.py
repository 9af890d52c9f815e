"""Latitude/longitude range validation."""

from __future__ import annotations

import math
from typing import Any

from ..models.domain import Coordinate


class InvalidCoordinate(ValueError):
    """Raised when a latitude or longitude falls outside its valid range."""


def _is_finite_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def is_valid_latitude(latitude: Any) -> bool:
    return _is_finite_number(latitude) and -90 <= latitude <= 90


def is_valid_longitude(longitude: Any) -> bool:
    return _is_finite_number(longitude) and -180 <= longitude <= 180


def is_valid(coord: Coordinate | None) -> bool:
    """Return True if both components of ``coord`` are within range."""

    if coord is None:
        return False
    return is_valid_latitude(coord.latitude) and is_valid_longitude(coord.longitude)


def ensure_valid(coord: Coordinate | None, *, field: str = "coordinate") -> Coordinate:
    if coord is None:
        raise InvalidCoordinate(f"{field} is required.")
    if not is_valid(coord):
        raise InvalidCoordinate(
            f"Invalid {field}: latitude={coord.latitude!r}, longitude={coord.longitude!r}. "
            "Latitude must be within [-90, 90] and longitude within [-180, 180]."
        )
    return coord
