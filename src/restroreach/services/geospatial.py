"""Geospatial helper functions."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal

from ..models.domain import Coordinate
from .validation import ensure_valid

EARTH_RADIUS_KM = 6371.0
DEFAULT_AVERAGE_SPEED_KMH = 30.0


def haversine_km(a: Coordinate, b: Coordinate) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    ensure_valid(a, field="origin")
    ensure_valid(b, field="destination")

    phi1, phi2 = math.radians(a.latitude), math.radians(b.latitude)
    d_phi = math.radians(b.latitude - a.latitude)
    d_lambda = math.radians(b.longitude - a.longitude)

    h = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_KM * c


def bearing_degrees(a: Coordinate, b: Coordinate) -> float:
    """Calculate the initial bearing from ``a`` to ``b``."""

    ensure_valid(a, field="origin")
    ensure_valid(b, field="destination")

    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    delta_lambda = math.radians(b.longitude - a.longitude)
    y = math.sin(delta_lambda) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(delta_lambda)
    bearing = math.degrees(math.atan2(y, x))
    return (bearing + 360) % 360


def eta_minutes_from_distance(distance_km: float, avg_speed_kmh: float = DEFAULT_AVERAGE_SPEED_KMH) -> int:
    """Travel time in whole minutes at ``avg_speed_kmh``; 0 when the speed is not positive."""

    if avg_speed_kmh <= 0:
        return 0
    minutes = (distance_km / avg_speed_kmh) * 60
    return int(Decimal(str(minutes)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_distance(distance_km: float) -> str:
    if distance_km < 1:
        meters = int(Decimal(str(distance_km * 1000)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
        return f"{meters} meter" if meters == 1 else f"{meters} meters"
    unit = "kilometer" if round(distance_km, 1) == 1.0 else "kilometers"
    return f"{distance_km:.1f} {unit}"


def format_duration(minutes: int) -> str:
    """Render a duration the way map services do, e.g. ``1 hour 5 mins``."""

    minutes = max(int(minutes), 0)
    hours, remainder = divmod(minutes, 60)
    parts: list[str] = []
    if hours:
        parts.append(f"{hours} hour" if hours == 1 else f"{hours} hours")
    if remainder or not hours:
        parts.append(f"{remainder} min" if remainder == 1 else f"{remainder} mins")
    return " ".join(parts)
