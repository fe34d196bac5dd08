"""
Shared value types for the assistant core.

Everything here is immutable: coordinates are acquired once, place records
are built from provider data and thrown away after formatting, and messages
are never changed after they enter the history.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any


class Mode(str, Enum):
    EMERGENCY = "emergency"
    ADVICE = "advice"


class Sender(str, Enum):
    USER = "user"
    BOT = "bot"


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lon: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.lat <= 90.0:
            raise ValueError(f"latitude out of range: {self.lat}")
        if not -180.0 <= self.lon <= 180.0:
            raise ValueError(f"longitude out of range: {self.lon}")


def _clean(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class PlaceRecord:
    name: str | None = None
    address: str | None = None
    phone: str | None = None
    distance_m: float | None = None

    @classmethod
    def from_feature(cls, feature: dict[str, Any]) -> "PlaceRecord":
        """Build a record from one GeoJSON feature of the places provider.

        The address is the first present of ``formatted``,
        ``address_line2`` and ``street``.
        """
        props = feature.get("properties") if isinstance(feature, dict) else None
        if not isinstance(props, dict):
            props = {}

        address = None
        for key in ("formatted", "address_line2", "street"):
            address = _clean(props.get(key))
            if address:
                break

        distance = props.get("distance")
        try:
            distance_m = float(distance) if distance is not None else None
        except (TypeError, ValueError):
            distance_m = None
        if distance_m is not None and not math.isfinite(distance_m):
            distance_m = None

        phone = _clean(props.get("phone"))
        if phone is None and isinstance(props.get("contact"), dict):
            # newer Geoapify responses nest contact details
            phone = _clean(props["contact"].get("phone"))

        return cls(
            name=_clean(props.get("name")),
            address=address,
            phone=phone,
            distance_m=distance_m,
        )


@dataclass(frozen=True)
class Message:
    sender: Sender
    text: str
    timestamp: float

    def to_dict(self) -> dict[str, Any]:
        return {"sender": self.sender.value, "text": self.text, "timestamp": self.timestamp}
