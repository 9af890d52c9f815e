"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Literal, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="RDM_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "RestroReach Delivery API"
    api_prefix: str = "/api"
    delivery_zones_file: Optional[Path] = Field(
        default=None,
        description="Excel workbook with delivery areas (Area, Postcodes, Price Multiplier, Additional Cost).",
    )

    # Restaurant location
    restaurant_latitude: Optional[float] = Field(default=None, description="Restaurant latitude.")
    restaurant_longitude: Optional[float] = Field(default=None, description="Restaurant longitude.")
    restaurant_address: Optional[str] = Field(
        default=None,
        description="Full restaurant address, geocoded when coordinates are not configured.",
    )
    restaurant_name: str = "Restaurant"

    # Distance-based delivery pricing
    shipping_title: str = "Delivery"
    shipping_base_cost: float = Field(default=5.00, ge=0.0)
    shipping_cost_per_km: float = Field(default=1.50, ge=0.0)
    shipping_min_cost: float = Field(default=3.00, ge=0.0, description="0 disables the floor.")
    shipping_max_cost: float = Field(default=25.00, ge=0.0, description="0 disables the ceiling.")
    shipping_max_distance_km: float = Field(default=15.0, ge=0.0, description="0 for no limit.")
    shipping_free_delivery_threshold: float = Field(default=50.00, ge=0.0, description="0 to disable.")
    shipping_calculation_method: Literal["haversine", "routing_service", "google_maps"] = Field(
        default="haversine",
        description="Distance source for quotes. 'google_maps' is accepted as a legacy alias.",
    )

    # Tracking
    average_speed_kmh: float = Field(default=30.0, description="City driving speed for Haversine ETAs.")
    agent_location_max_age_minutes: int = Field(default=60, ge=1)
    tracking_refresh_interval_seconds: int = Field(default=30, ge=5)

    # Routing / geocoding
    routing_enabled: bool = True
    osrm_base_url: Optional[str] = Field(
        default=None,
        description="Base URL for the OSRM routing service (e.g., http://localhost:5000).",
    )
    osrm_profile: Literal["driving", "car", "bike", "foot"] = Field(
        default="driving",
        description="OSRM profile to use when computing travel times.",
    )
    osrm_max_retries: int = Field(default=2, ge=0)
    osrm_backoff_seconds: float = Field(default=0.5, ge=0.0)
    routing_timeout_seconds: float = Field(default=10.0, gt=0.0)
    geocoder_base_url: Optional[str] = Field(
        default=None,
        description="Nominatim-compatible geocoder base URL (e.g., https://nominatim.openstreetmap.org).",
    )
    geocoder_user_agent: str = "restroreach-delivery/1.0"

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key for backend operations.",
    )

    @field_validator("delivery_zones_file", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Optional[Path]:
        if value is None or value == "":
            return None
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
