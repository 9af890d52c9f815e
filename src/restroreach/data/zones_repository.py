"""Delivery area loader with database-first approach, falling back to an Excel file."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterable

from openpyxl import load_workbook

from ..config import settings
from ..db.supabase import get_supabase_client
from ..models.domain import DeliveryZone

REQUIRED_COLUMNS = {"Postcodes", "Price Multiplier", "Additional Cost"}


def _split_postcodes(value: Any) -> list[str]:
    if value is None:
        return []
    return [code.strip() for code in str(value).split(",") if code.strip()]


def _to_float(value: Any, default: float) -> float:
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    return float(value)


def _area_to_zones(name: Any, postcodes: Any, multiplier: Any, additional: Any) -> list[DeliveryZone]:
    """Expand one delivery area into one zone per postcode pattern, keeping their order."""
    area_name = str(name).strip() if name else None
    price_multiplier = _to_float(multiplier, 1.0)
    additional_cost = _to_float(additional, 0.0)
    if price_multiplier < 0:
        raise ValueError(f"Delivery area '{area_name}' has a negative price multiplier.")
    return [
        DeliveryZone(
            postcode_pattern=pattern,
            price_multiplier=price_multiplier,
            additional_cost=additional_cost,
            name=area_name,
        )
        for pattern in _split_postcodes(postcodes)
    ]


def _rows_to_zones(rows: Iterable[dict]) -> tuple[DeliveryZone, ...]:
    zones: list[DeliveryZone] = []
    for row in rows:
        try:
            zones.extend(
                _area_to_zones(
                    row.get("area_name"),
                    row.get("postcodes"),
                    row.get("price_multiplier"),
                    row.get("additional_cost"),
                )
            )
        except (ValueError, TypeError) as e:
            logging.warning(f"Skipping invalid delivery area row: {e}")
    return tuple(zones)


@lru_cache(maxsize=1)
def _load_zones_from_database() -> tuple[DeliveryZone, ...]:
    """Load delivery areas from Supabase; empty when no database is configured.

    Query failures propagate so that a failed read is never memoized.
    """
    supabase = get_supabase_client()
    if not supabase:
        return tuple()

    response = (
        supabase.table("delivery_areas")
        .select("area_name, postcodes, price_multiplier, additional_cost, priority")
        .order("priority")
        .execute()
    )
    return _rows_to_zones(response.data or [])


@lru_cache(maxsize=4)
def _load_zones_from_file(source: Path) -> tuple[DeliveryZone, ...]:
    """Load delivery areas from an Excel workbook, one area per row."""
    if not source.exists():
        raise FileNotFoundError(f"Delivery zones workbook not found: {source}")

    wb = load_workbook(source, data_only=True, read_only=True)
    try:
        sheet = wb.active
        rows = sheet.iter_rows(min_row=1, values_only=True)
        header = next(rows, None)
        if header is None:
            raise ValueError(f"Delivery zones workbook '{source}' is empty.")

        header_map = {str(name).strip(): idx for idx, name in enumerate(header) if name is not None}
        missing_columns = REQUIRED_COLUMNS - set(header_map)
        if missing_columns:
            raise ValueError(f"Delivery zones workbook missing columns: {', '.join(sorted(missing_columns))}")

        area_idx = header_map.get("Area")
        zones: list[DeliveryZone] = []
        for row in rows:
            postcodes = row[header_map["Postcodes"]]
            if not postcodes:
                continue
            zones.extend(
                _area_to_zones(
                    row[area_idx] if area_idx is not None else None,
                    postcodes,
                    row[header_map["Price Multiplier"]],
                    row[header_map["Additional Cost"]],
                )
            )
        return tuple(zones)
    finally:
        wb.close()


def load_delivery_zones(source: Path | None = None) -> tuple[DeliveryZone, ...]:
    """Ordered delivery zones; first match wins, so order is preserved from storage."""
    if source is None:
        try:
            database_zones = _load_zones_from_database()
        except Exception as e:
            logging.warning(f"Delivery area query failed, falling back to file: {e}")
            database_zones = tuple()
        if database_zones:
            logging.info(f"Loaded {len(database_zones)} delivery zones from database")
            return database_zones
        source = settings.delivery_zones_file

    if source is None:
        return tuple()
    return _load_zones_from_file(source)


def clear_zone_cache() -> None:
    """Drop memoized zones so the next call re-reads the database and workbook."""
    _load_zones_from_database.cache_clear()
    _load_zones_from_file.cache_clear()
