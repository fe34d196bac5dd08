"""Exceptions raised to callers of the conversation layer."""

from __future__ import annotations


class AssistantError(Exception):
    """Base class for assistant failures surfaced to the caller."""


class ConversationBusyError(AssistantError):
    """A request is still being processed for this conversation."""


class SessionNotFoundError(AssistantError):
    """No conversation is registered under the given session id."""


class LocationAlreadySetError(AssistantError):
    """The conversation already has a location; it is acquired once."""
