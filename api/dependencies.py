"""FastAPI dependencies shared by the route modules."""

from __future__ import annotations

from functools import lru_cache

from assistant.config import AssistantConfig
from assistant.sessions import SessionRegistry


@lru_cache(maxsize=1)
def get_config() -> AssistantConfig:
    return AssistantConfig.from_env()


@lru_cache(maxsize=1)
def get_registry() -> SessionRegistry:
    return SessionRegistry(get_config())
