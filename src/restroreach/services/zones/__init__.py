"""Postcode-based delivery zone helpers."""

from .matcher import match_zone, postcode_matches

__all__ = ["match_zone", "postcode_matches"]
