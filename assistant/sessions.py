"""
In-memory conversation registry for the HTTP surface.

Conversations live only as long as the process; there is no persistence
and no authentication. Sessions idle for longer than ``session_ttl`` are
evicted, and the registry never holds more than ``max_sessions``
(least recently used go first).
"""

from __future__ import annotations

import logging
import time
import uuid
from collections import OrderedDict
from typing import Callable

from assistant.config import AssistantConfig
from assistant.conversation import ConversationOrchestrator, build_orchestrator
from assistant.errors import SessionNotFoundError
from assistant.models import Coordinate, Mode

logger = logging.getLogger(__name__)


class SessionRegistry:
    def __init__(
        self,
        config: AssistantConfig,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config
        self._clock = clock
        # session id -> (orchestrator, last used); oldest use first
        self._sessions: OrderedDict[str, tuple[ConversationOrchestrator, float]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def _evict_idle(self) -> None:
        cutoff = self._clock() - self.config.session_ttl
        for session_id, (convo, last_used) in list(self._sessions.items()):
            if last_used > cutoff:
                break
            if convo.busy:
                continue
            del self._sessions[session_id]
            logger.info("Session %s expired after %.0fs idle", session_id, self.config.session_ttl)

    def _evict_overflow(self) -> None:
        while len(self._sessions) >= self.config.max_sessions:
            session_id, _ = self._sessions.popitem(last=False)
            logger.warning("Session limit reached; dropped %s", session_id)

    def create(
        self,
        location: Coordinate | None = None,
        mode: Mode = Mode.EMERGENCY,
    ) -> tuple[str, ConversationOrchestrator]:
        self._evict_idle()
        self._evict_overflow()

        session_id = uuid.uuid4().hex
        convo = build_orchestrator(self.config, location=location, mode=mode)
        convo.start()
        self._sessions[session_id] = (convo, self._clock())
        logger.info("Session %s created (location=%s)", session_id, location is not None)
        return session_id, convo

    def get(self, session_id: str) -> ConversationOrchestrator:
        self._evict_idle()
        try:
            convo, _ = self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None
        self._sessions[session_id] = (convo, self._clock())
        self._sessions.move_to_end(session_id)
        return convo

    def drop(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is None:
            raise SessionNotFoundError(session_id)
