"""
Conversation orchestration.

Owns the mode, the user's coordinate and the append-only message history,
and dispatches each utterance:

    emergency: CategoryResolver -> PlaceSearchEngine -> format_places
    advice:    RemoteAdvisor (-> FallbackAdvisor on any failure)

One request is processed at a time; :attr:`ConversationOrchestrator.busy`
tells the caller when the next one may be issued.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

import httpx

from assistant.advice_fallback import FallbackAdvisor
from assistant.advisor import RemoteAdvisor
from assistant.categories import CategoryResolver, supported_categories_help
from assistant.config import AssistantConfig
from assistant.errors import ConversationBusyError, LocationAlreadySetError
from assistant.formatter import format_places
from assistant.models import Coordinate, Message, Mode, Sender
from assistant.places import (
    Found,
    NotConfigured,
    NotFoundAtMaxRadius,
    PlaceSearchEngine,
    SearchOutcome,
    TransportError,
)

logger = logging.getLogger(__name__)

GREETING = (
    "Hello! I'm here to help. Choose a mode:\n"
    "📍 Emergency Services - Find nearby help\n"
    "💭 Ask for Advice - Get safety guidance"
)
GREETING_NO_LOCATION = (
    "Hello! I'm here to help. Note: Location access is needed for finding emergency services."
)

MODE_CONFIRMATIONS: dict[Mode, str] = {
    Mode.EMERGENCY: (
        "Emergency Services mode activated. You can ask me to find nearby hospitals, "
        "police stations, shelters, and more."
    ),
    Mode.ADVICE: (
        "Advice mode activated. Feel free to ask any safety-related questions, "
        "and I'll provide guidance and support."
    ),
}

LOCATION_REQUIRED = (
    "I need your location to find nearby places. Please enable location services."
)
SEARCH_NOT_CONFIGURED = (
    "Sorry, I can't search for places right now. The service is not properly configured."
)
SEARCH_FAILED = (
    "Sorry, I encountered an error while searching for places. Please try again."
)


def not_found_message(radius_km: float) -> str:
    return (
        "I'm sorry, I couldn't find any locations of that type even within "
        f"{radius_km:g}km radius."
    )


def outcome_text(outcome: SearchOutcome, category: str) -> str:
    """Final chat text for a place-search outcome."""
    if isinstance(outcome, Found):
        return format_places(outcome.places, category, outcome.radius_km)
    if isinstance(outcome, NotFoundAtMaxRadius):
        return not_found_message(outcome.radius_km)
    if isinstance(outcome, NotConfigured):
        return SEARCH_NOT_CONFIGURED
    if isinstance(outcome, TransportError):
        return SEARCH_FAILED
    raise TypeError(f"unknown search outcome: {outcome!r}")


class ConversationOrchestrator:
    def __init__(
        self,
        resolver: CategoryResolver,
        engine: PlaceSearchEngine,
        advisor: RemoteAdvisor,
        *,
        location: Coordinate | None = None,
        mode: Mode = Mode.EMERGENCY,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.resolver = resolver
        self.engine = engine
        self.advisor = advisor
        self._location = location
        self._mode = Mode(mode)
        self._clock = clock
        self._history: tuple[Message, ...] = ()
        self._busy = False

    # ---- state ---- #

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def location(self) -> Coordinate | None:
        return self._location

    @property
    def history(self) -> tuple[Message, ...]:
        return self._history

    @property
    def busy(self) -> bool:
        return self._busy

    def _append(self, sender: Sender, text: str) -> Message:
        message = Message(sender=sender, text=text, timestamp=self._clock())
        self._history = self._history + (message,)
        return message

    # ---- lifecycle ---- #

    def start(self) -> Message:
        """Post the opening greeting."""
        return self._append(
            Sender.BOT, GREETING if self._location is not None else GREETING_NO_LOCATION,
        )

    def set_location(self, location: Coordinate | None) -> None:
        """Supply the location for a conversation that started without one.

        The location is acquired once per conversation; replacing one that
        is already set raises LocationAlreadySetError.
        """
        if self._location is not None and location is not None and location != self._location:
            raise LocationAlreadySetError("location is already set for this conversation")
        self._location = location

    def switch_mode(self, mode: Mode | str) -> Message:
        """Change mode and post a confirmation. History is kept.

        A request already in flight keeps the mode it started with and
        still posts its result.
        """
        self._mode = Mode(mode)
        logger.info("Mode switched to %s", self._mode.value)
        return self._append(Sender.BOT, MODE_CONFIRMATIONS[self._mode])

    # ---- dispatch ---- #

    async def handle(self, utterance: str) -> list[Message]:
        """Process one user utterance and return the bot messages it produced."""
        if not (utterance or "").strip():
            return []
        if self._busy:
            raise ConversationBusyError("a request is already in progress")

        self._busy = True
        mode = self._mode
        replies: list[Message] = []

        def reply(text: str) -> None:
            replies.append(self._append(Sender.BOT, text))

        try:
            self._append(Sender.USER, utterance)
            if mode is Mode.EMERGENCY:
                await self._handle_emergency(utterance, reply)
            else:
                reply(await self.advisor.get_advice(utterance))
        finally:
            self._busy = False
        return replies

    async def _handle_emergency(self, utterance: str, reply: Callable[[str], None]) -> None:
        category = self.resolver.resolve(utterance)
        if category is None:
            reply(supported_categories_help())
            return
        if self._location is None:
            reply(LOCATION_REQUIRED)
            return

        outcome = await self.engine.search(category, self._location, on_notice=reply)
        reply(outcome_text(outcome, category))


def build_orchestrator(
    config: AssistantConfig,
    *,
    location: Coordinate | None = None,
    mode: Mode = Mode.EMERGENCY,
    client: httpx.AsyncClient | None = None,
) -> ConversationOrchestrator:
    """Wire the default components from *config*."""
    return ConversationOrchestrator(
        CategoryResolver(),
        PlaceSearchEngine.from_config(config, client=client),
        RemoteAdvisor.from_config(config, FallbackAdvisor(), client=client),
        location=location,
        mode=mode,
    )
