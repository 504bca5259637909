import asyncio

import pytest

from skirmish.backend.content import InMemoryContentStore
from skirmish.backend.dice import Dice
from skirmish.backend.initializer import EncounterInitializationError
from skirmish.backend.models import EncounterDefinition
from skirmish.backend.sessions import InMemorySessionRegistry


def _registry() -> InMemorySessionRegistry:
    return InMemorySessionRegistry(content=InMemoryContentStore.empty(), dice_factory=lambda: Dice.seeded(1))


def test_start_get_and_end_session() -> None:
    registry = _registry()
    definition = EncounterDefinition(id="enc", name="Camp", player_names=("Aria",))

    session = asyncio.run(registry.start(definition))

    assert registry.get(session.session_id) is session
    assert session.controller.round == 1
    assert registry.end(session.session_id) is True
    assert registry.get(session.session_id) is None
    assert registry.end(session.session_id) is False


def test_failed_start_registers_nothing() -> None:
    registry = _registry()
    definition = EncounterDefinition(id="enc", name="Swamp", encounter_table_id="missing")

    with pytest.raises(EncounterInitializationError):
        asyncio.run(registry.start(definition))

    assert registry._sessions == {}
