"""
Progressive place search (Geoapify Places API).

Searches for one place category around the user's coordinate, widening the
circle over a fixed ladder of tiers until something is found:

    5 km (limit 5) -> 10 km (limit 5) -> 50 km (limit 10)

Tiers are issued one after another, never concurrently. The outcome is one
of four explicit variants so callers cannot confuse "nothing there" with
"the provider failed":

    Found                 - non-empty list of places plus the radius used
    NotFoundAtMaxRadius   - every tier came back empty
    TransportError        - network failure, non-2xx status or undecodable body
    NotConfigured         - no API key; no request was made
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Union

import httpx

from assistant.config import DEFAULT_PLACES_TIMEOUT, GEOAPIFY_PLACES_URL, AssistantConfig
from assistant.http_client import provider_client
from assistant.models import Coordinate, PlaceRecord

logger = logging.getLogger(__name__)

NoticeCallback = Callable[[str], Union[Awaitable[None], None]]


@dataclass(frozen=True)
class SearchTier:
    radius_m: int
    limit: int
    # Posted when this tier is empty and a wider tier follows.
    escalation_notice: str | None = None

    @property
    def radius_km(self) -> float:
        return self.radius_m / 1000


DEFAULT_TIERS: tuple[SearchTier, ...] = (
    SearchTier(
        5_000, 5,
        "I couldn't find any places of that type nearby. Let me search in a wider area...",
    ),
    SearchTier(10_000, 5, "Still searching in an even wider area..."),
    SearchTier(50_000, 10),
)


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Found:
    places: tuple[PlaceRecord, ...]
    radius_km: float

    def __post_init__(self) -> None:
        if not self.places:
            raise ValueError("Found requires at least one place")


@dataclass(frozen=True)
class NotFoundAtMaxRadius:
    radius_km: float


@dataclass(frozen=True)
class TransportError:
    detail: str


@dataclass(frozen=True)
class NotConfigured:
    pass


SearchOutcome = Union[Found, NotFoundAtMaxRadius, TransportError, NotConfigured]


class _TierFailed(Exception):
    pass


def _validate_tiers(tiers: tuple[SearchTier, ...]) -> tuple[SearchTier, ...]:
    if not tiers:
        raise ValueError("at least one search tier is required")
    radii = [t.radius_m for t in tiers]
    if any(b <= a for a, b in zip(radii, radii[1:])):
        raise ValueError(f"search tiers must strictly increase in radius: {radii}")
    return tuple(tiers)


def _features(body: Any) -> list[dict[str, Any]]:
    """Return the feature list, treating any unexpected shape as empty."""
    if not isinstance(body, dict):
        return []
    features = body.get("features")
    if not isinstance(features, list):
        return []
    return [f for f in features if isinstance(f, dict)]


class PlaceSearchEngine:
    def __init__(
        self,
        api_key: str | None,
        *,
        url: str = GEOAPIFY_PLACES_URL,
        tiers: tuple[SearchTier, ...] = DEFAULT_TIERS,
        timeout: float = DEFAULT_PLACES_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.api_key = api_key
        self.url = url
        self.tiers = _validate_tiers(tiers)
        self.timeout = timeout
        self._client = client

    @classmethod
    def from_config(
        cls,
        config: AssistantConfig,
        client: httpx.AsyncClient | None = None,
    ) -> "PlaceSearchEngine":
        return cls(
            config.geoapify_key,
            url=config.places_url,
            timeout=config.places_timeout,
            client=client,
        )

    @property
    def max_radius_km(self) -> float:
        return self.tiers[-1].radius_km

    def _params(self, category: str, origin: Coordinate, tier: SearchTier) -> dict[str, Any]:
        return {
            "categories": category,
            "filter": f"circle:{origin.lon},{origin.lat},{tier.radius_m}",
            "bias": f"proximity:{origin.lon},{origin.lat}",
            "limit": tier.limit,
            "apiKey": self.api_key,
        }

    async def _query_tier(
        self,
        client: httpx.AsyncClient,
        category: str,
        origin: Coordinate,
        tier: SearchTier,
    ) -> list[dict[str, Any]]:
        try:
            resp = await client.get(self.url, params=self._params(category, origin, tier))
            resp.raise_for_status()
            body = resp.json()
        except httpx.HTTPStatusError as exc:
            raise _TierFailed(f"places provider returned HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise _TierFailed(f"places request failed: {exc.__class__.__name__}") from exc
        except ValueError as exc:
            raise _TierFailed("places provider returned an undecodable body") from exc
        return _features(body)

    async def search(
        self,
        category: str,
        origin: Coordinate,
        on_notice: NoticeCallback | None = None,
    ) -> SearchOutcome:
        """Run the tier ladder for *category* around *origin*.

        *on_notice* receives the intermediate "searching wider" texts; it may
        be a plain function or a coroutine function.
        """
        if not self.api_key:
            logger.warning("Geoapify key not set; place search disabled")
            return NotConfigured()

        async with provider_client(self._client, self.timeout) as client:
            for index, tier in enumerate(self.tiers):
                try:
                    features = await self._query_tier(client, category, origin, tier)
                except _TierFailed as exc:
                    logger.error(
                        "Error fetching places (%s, %dm): %s", category, tier.radius_m, exc,
                    )
                    return TransportError(str(exc))

                logger.info(
                    "Places %s within %dm of (%.4f, %.4f): %d results",
                    category, tier.radius_m, origin.lat, origin.lon, len(features),
                )
                if features:
                    places = tuple(PlaceRecord.from_feature(f) for f in features[: tier.limit])
                    return Found(places=places, radius_km=tier.radius_km)

                is_last = index == len(self.tiers) - 1
                if not is_last and tier.escalation_notice and on_notice is not None:
                    result = on_notice(tier.escalation_notice)
                    if inspect.isawaitable(result):
                        await result

        return NotFoundAtMaxRadius(radius_km=self.max_radius_km)
