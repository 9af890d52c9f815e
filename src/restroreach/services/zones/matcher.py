"""Resolve a customer postcode to its delivery pricing zone."""

from __future__ import annotations

import re
from typing import Optional, Sequence

from ...models.domain import DeliveryZone


def postcode_matches(postcode: str, pattern: str) -> bool:
    """Whole-postcode, case-insensitive match where ``*`` stands for zero or more characters."""

    postcode = (postcode or "").strip()
    pattern = (pattern or "").strip()
    if not postcode or not pattern:
        return False

    if "*" in pattern:
        regex = ".*".join(re.escape(part) for part in pattern.split("*"))
        return re.fullmatch(regex, postcode, flags=re.IGNORECASE | re.DOTALL) is not None
    return postcode.casefold() == pattern.casefold()


def match_zone(postcode: Optional[str], zones: Sequence[DeliveryZone]) -> Optional[DeliveryZone]:
    """Return the first zone, in the given order, whose pattern matches ``postcode``."""

    if not postcode or not zones:
        return None
    for zone in zones:
        if postcode_matches(postcode, zone.postcode_pattern):
            return zone
    return None
