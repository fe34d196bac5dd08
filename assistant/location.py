"""
Location acquisition.

The assistant needs a single coordinate, acquired once at startup. Where it
comes from (browser GPS, CLI flags, a geocoded place name) is up to the
caller; :func:`acquire_location` wraps any provider so that a failure
degrades to "no location" instead of crashing.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

import httpx

from assistant.config import NOMINATIM_SEARCH
from assistant.http_client import provider_client
from assistant.models import Coordinate

logger = logging.getLogger(__name__)

LocationProvider = Callable[[], Awaitable["Coordinate | None"]]

USER_AGENT = "SafeHer-Assistant/0.1"


def static_location(lat: float | None, lon: float | None) -> LocationProvider:
    """Provider for a coordinate the caller already has (e.g. CLI flags)."""

    async def _provide() -> Coordinate | None:
        if lat is None or lon is None:
            return None
        return Coordinate(lat=lat, lon=lon)

    return _provide


async def geocode_place(
    query: str,
    *,
    url: str = NOMINATIM_SEARCH,
    timeout: float = 10.0,
    client: httpx.AsyncClient | None = None,
) -> Coordinate | None:
    """Resolve a free-text place ("Union Station, Toronto") to a coordinate."""
    if not (query or "").strip():
        return None
    try:
        async with provider_client(client, timeout) as http:
            resp = await http.get(
                url,
                params={"q": query.strip(), "format": "json", "limit": 1},
                headers={"User-Agent": USER_AGENT},
            )
            resp.raise_for_status()
            results = resp.json()
        if results:
            return Coordinate(lat=float(results[0]["lat"]), lon=float(results[0]["lon"]))
        logger.warning("Nominatim returned no match for %r", query)
        return None
    except (httpx.HTTPError, ValueError, KeyError, TypeError, IndexError) as exc:
        logger.error("Geocoding failed for %r: %s", query, exc)
        return None


def geocoded_location(query: str, **kwargs) -> LocationProvider:
    async def _provide() -> Coordinate | None:
        return await geocode_place(query, **kwargs)

    return _provide


async def acquire_location(provider: LocationProvider | None) -> Coordinate | None:
    """Run *provider* once; any failure means "no location"."""
    if provider is None:
        return None
    try:
        coordinate = await provider()
    except Exception as exc:  # provider is caller-supplied
        logger.warning("Location unavailable: %s", exc)
        return None
    if coordinate is None:
        logger.warning("Location unavailable; emergency search disabled")
    else:
        logger.info("Location acquired: (%.4f, %.4f)", coordinate.lat, coordinate.lon)
    return coordinate
