"""
Assistant configuration.

All settings come from the environment (``.env`` is loaded by the entry
points via python-dotenv). The resulting :class:`AssistantConfig` is passed
explicitly into each component; nothing in the core reads ``os.environ``
after construction.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Provider endpoints
# ---------------------------------------------------------------------------

GEOAPIFY_PLACES_URL = "https://api.geoapify.com/v2/places"
OPENROUTER_CHAT_URL = "https://openrouter.ai/api/v1/chat/completions"
NOMINATIM_SEARCH = "https://nominatim.openstreetmap.org/search"

DEFAULT_ADVICE_MODEL = "anthropic/claude-3-opus"
APP_TITLE = "SafeHer Safety Assistant"
DEFAULT_APP_URL = "http://localhost:8000"

DEFAULT_PLACES_TIMEOUT = 10.0
DEFAULT_ADVICE_TIMEOUT = 30.0
DEFAULT_SESSION_TTL = 1800.0  # 30 minutes idle
DEFAULT_MAX_SESSIONS = 1000


def _env_str(*names: str) -> str | None:
    """Return the first non-blank value among *names*, or None."""
    for name in names:
        value = (os.getenv(name) or "").strip()
        if value:
            return value
    return None


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


@dataclass(frozen=True)
class AssistantConfig:
    """Credentials, endpoints and timeouts for the two providers.

    A missing ``geoapify_key`` or ``openrouter_key`` is a valid state: the
    place search reports "not configured" and the advisor answers with its
    configuration message.
    """

    geoapify_key: str | None = None
    openrouter_key: str | None = None
    advice_model: str = DEFAULT_ADVICE_MODEL
    app_url: str = DEFAULT_APP_URL
    app_title: str = APP_TITLE
    places_url: str = GEOAPIFY_PLACES_URL
    chat_url: str = OPENROUTER_CHAT_URL
    geocode_url: str = NOMINATIM_SEARCH
    places_timeout: float = DEFAULT_PLACES_TIMEOUT
    advice_timeout: float = DEFAULT_ADVICE_TIMEOUT
    session_ttl: float = DEFAULT_SESSION_TTL
    max_sessions: int = DEFAULT_MAX_SESSIONS

    @classmethod
    def from_env(cls) -> "AssistantConfig":
        return cls(
            geoapify_key=_env_str("GEOAPIFY_KEY", "GEOAPIFY_API_KEY"),
            openrouter_key=_env_str("OPENROUTER_KEY", "OPENROUTER_API_KEY"),
            advice_model=_env_str("OPENROUTER_MODEL") or DEFAULT_ADVICE_MODEL,
            app_url=_env_str("ASSISTANT_APP_URL") or DEFAULT_APP_URL,
            places_url=_env_str("GEOAPIFY_PLACES_URL") or GEOAPIFY_PLACES_URL,
            chat_url=_env_str("OPENROUTER_CHAT_URL") or OPENROUTER_CHAT_URL,
            geocode_url=_env_str("NOMINATIM_SEARCH_URL") or NOMINATIM_SEARCH,
            places_timeout=_env_float("PLACES_TIMEOUT", DEFAULT_PLACES_TIMEOUT),
            advice_timeout=_env_float("ADVICE_TIMEOUT", DEFAULT_ADVICE_TIMEOUT),
            session_ttl=_env_float("SESSION_TTL", DEFAULT_SESSION_TTL),
            max_sessions=int(_env_float("MAX_SESSIONS", DEFAULT_MAX_SESSIONS)),
        )

    @property
    def places_enabled(self) -> bool:
        return bool(self.geoapify_key)

    @property
    def advice_enabled(self) -> bool:
        return bool(self.openrouter_key)
