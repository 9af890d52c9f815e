"""Routing services."""

from .base import RoutingClient
from .osrm_client import OSRMClient, get_routing_client
from .resolver import resolve_distance

__all__ = ["RoutingClient", "OSRMClient", "get_routing_client", "resolve_distance"]
