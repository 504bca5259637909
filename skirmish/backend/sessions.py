"""Registry of live encounter sessions held in process memory."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Callable, Protocol

from .content import ContentStore
from .controller import EncounterController
from .dice import Dice
from .models import EncounterDefinition

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LiveSession:
    session_id: str
    definition: EncounterDefinition
    controller: EncounterController


class SessionRegistry(Protocol):
    async def start(self, definition: EncounterDefinition) -> LiveSession:
        """Initialize an encounter and register its session."""

    def get(self, session_id: str) -> LiveSession | None:
        """Return a live session or None."""

    def end(self, session_id: str) -> bool:
        """Discard a session; return whether it existed."""


@dataclass
class InMemorySessionRegistry:
    content: ContentStore
    dice_factory: Callable[[], Dice] = Dice

    def __post_init__(self) -> None:
        self._sessions: dict[str, LiveSession] = {}

    async def start(self, definition: EncounterDefinition) -> LiveSession:
        # Registered only after initialization succeeds.
        controller = await EncounterController.start(definition, self.content, dice=self.dice_factory())
        session = LiveSession(session_id=str(uuid.uuid4()), definition=definition, controller=controller)
        self._sessions[session.session_id] = session
        logger.info("Session %s started for encounter %s", session.session_id, definition.name)
        return session

    def get(self, session_id: str) -> LiveSession | None:
        return self._sessions.get(session_id)

    def end(self, session_id: str) -> bool:
        removed = self._sessions.pop(session_id, None)
        if removed is not None:
            logger.info("Session %s ended", session_id)
        return removed is not None
