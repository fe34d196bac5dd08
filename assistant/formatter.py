"""
Result formatting for emergency-mode answers.

Pure functions: turn a non-empty list of :class:`PlaceRecord` into the
multi-line chat text shown to the user.
"""

from __future__ import annotations

import math
from typing import Sequence

from assistant.models import PlaceRecord

CATEGORY_ICONS: dict[str, str] = {
    "healthcare.hospital": "🏥",
    "service.police": "👮",
    "service.ambulance_station": "🚑",
    "service.fire_station": "🚒",
    "service.social_facility.shelter": "🏠",
    "healthcare.pharmacy": "💊",
    "amenity.toilet": "🚻",
    "amenity.drinking_water": "💧",
}
DEFAULT_ICON = "📍"

UNNAMED_PLACE = "Unnamed location"
NO_PHONE = "No phone available"


def category_label(category: str) -> str:
    """``service.fire_station`` -> ``fire station``."""
    last = (category or "").split(".")[-1].replace("_", " ").strip()
    return last or "places"


def format_distance(distance_m: float) -> str:
    # Half-up rounding to whole metres before choosing the unit.
    metres = int(math.floor(distance_m + 0.5))
    if metres < 1000:
        return f"{metres}m"
    return f"{metres / 1000:.1f}km"


def _format_radius(radius_km: float) -> str:
    return f"{radius_km:g}"


def format_place(place: PlaceRecord, icon: str) -> str:
    lines = [f"{icon} {place.name or UNNAMED_PLACE}"]
    if place.address:
        lines.append(f"📍 {place.address}")
    lines.append(f"📞 {place.phone or NO_PHONE}")
    if place.distance_m is not None:
        lines.append(f"🚶‍♀️ {format_distance(place.distance_m)} away")
    return "\n".join(lines)


def format_places(places: Sequence[PlaceRecord], category: str, radius_km: float) -> str:
    if not places:
        raise ValueError("format_places needs at least one place")

    icon = CATEGORY_ICONS.get(category, DEFAULT_ICON)
    body = "\n\n".join(format_place(p, icon) for p in places)
    return (
        f"I found these {category_label(category)} locations within "
        f"{_format_radius(radius_km)}km radius:\n\n{body}"
    )
