"""HTTP client for OSRM routing and Nominatim-style geocoding."""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

import httpx

from ...config import settings
from ...models.domain import Coordinate, RouteEstimate
from ..geospatial import format_duration
from ..validation import is_valid

logger = logging.getLogger(__name__)


class OSRMClient:
    def __init__(
        self,
        base_url: str | None = None,
        profile: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        geocoder_base_url: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.osrm_base_url or "").rstrip("/")
        if not self.base_url:
            raise ValueError("OSRM base URL is not configured.")
        self.profile = profile or settings.osrm_profile
        self.timeout = timeout if timeout is not None else settings.routing_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.osrm_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.osrm_backoff_seconds
        geocoder = geocoder_base_url if geocoder_base_url is not None else settings.geocoder_base_url
        self.geocoder_base_url = geocoder.rstrip("/") if geocoder else None
        self._transport = transport

    def is_enabled(self) -> bool:
        return bool(self.base_url) and settings.routing_enabled

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 5.0)),
            headers={"User-Agent": settings.geocoder_user_agent},
            transport=self._transport,
        )

    def _get_json(self, url: str, params: dict[str, Any]) -> Any:
        """GET ``url`` with retries; raises ConnectionError once retries are exhausted."""
        client = self._get_client()
        try:
            attempt = 0
            while True:
                try:
                    response = client.get(url, params=params)
                    response.raise_for_status()
                    return response.json()
                except httpx.HTTPStatusError as e:
                    # 4xx other than 429 will not improve on retry
                    status_code = e.response.status_code
                    if status_code < 500 and status_code != 429:
                        raise
                    attempt += 1
                    if attempt > self.max_retries:
                        raise
                    time.sleep(self.backoff_seconds * attempt)
                except httpx.TimeoutException as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        logger.warning(f"Routing request timed out after {self.max_retries} retries: {e}")
                        raise ConnectionError(f"Routing request to {url} timed out.") from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"Routing request timeout, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries})")
                    time.sleep(wait_time)
                except httpx.TransportError as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise ConnectionError(
                            f"Failed to connect to routing service at {url}: {e}"
                        ) from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"Routing network error, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries}): {e}")
                    time.sleep(wait_time)
        finally:
            client.close()

    def driving_distance(self, origin: Coordinate, destination: Coordinate) -> Optional[RouteEstimate]:
        """Driving route between two points, or None when OSRM finds no route.

        Transport failures propagate; callers decide how to fall back.
        """
        coordinate_str = ";".join(
            f"{point.longitude},{point.latitude}" for point in (origin, destination)
        )
        url = f"{self.base_url}/route/v1/{self.profile}/{coordinate_str}"
        data = self._get_json(url, {"overview": "false", "steps": "false"})

        if data.get("code") != "Ok" or not data.get("routes"):
            logger.info(f"OSRM returned no route ({data.get('code')}): {data.get('message', '')}")
            return None

        route = data["routes"][0]
        distance_km = float(route["distance"]) / 1000.0
        duration_minutes = max(int(round(float(route["duration"]) / 60.0)), 1)
        return RouteEstimate(
            distance_km=distance_km,
            duration_minutes=duration_minutes,
            duration_text=format_duration(duration_minutes),
            distance_text=f"{distance_km:.1f} km",
        )

    def geocode(self, address: str) -> Optional[Coordinate]:
        """Look up coordinates for a free-form address."""
        if not self.geocoder_base_url or not address or not address.strip():
            return None

        url = f"{self.geocoder_base_url}/search"
        data = self._get_json(url, {"q": address.strip(), "format": "json", "limit": 1})
        if not data:
            logger.warning(f"Geocoder returned no results for address: {address}")
            return None

        try:
            coordinate = Coordinate(latitude=float(data[0]["lat"]), longitude=float(data[0]["lon"]))
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.error(f"Unexpected geocoder response for address '{address}': {e}")
            return None
        if not is_valid(coordinate):
            logger.error(f"Geocoder returned out-of-range coordinates for '{address}': {coordinate}")
            return None
        return coordinate


def get_routing_client() -> OSRMClient | None:
    """Build the configured routing client, or None if routing is not set up."""
    try:
        return OSRMClient()
    except ValueError as e:
        logger.debug(f"Routing client unavailable: {e}")
        return None


def check_health(base_url: str | None = None) -> bool:
    """Check OSRM service health with a minimal two-point route request."""
    base = base_url or settings.osrm_base_url
    if not base:
        return False
    try:
        test_coords = "13.388860,52.517037;13.385983,52.496891"
        url = f"{base.rstrip('/')}/route/v1/{settings.osrm_profile}/{test_coords}"
        response = httpx.get(url, params={"overview": "false"}, timeout=5.0)
        response.raise_for_status()
        return response.json().get("code") == "Ok"
    except (httpx.HTTPError, ValueError):
        return False
