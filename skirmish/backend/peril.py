"""Per-round peril rolls deciding which bonus deeds the enemies get."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from .dice import Dice
from .models import Combatant, Monster, PerilRecord

logger = logging.getLogger(__name__)

TYRANT_PERIL = (
    "1 Heavy, 1 Light deed",
    "1 Mighty & 1 Light, or 2 Heavy deeds",
    "1 Mighty, 1 Heavy deed",
)
STANDARD_PERIL = (
    "1 Heavy deed",
    "1 Heavy, 1 Mighty deed",
    "2 Heavy, 1 Mighty deed",
)


def has_tyrant(roster: Iterable[Combatant]) -> bool:
    return any(isinstance(c, Monster) and c.template == "Tyrant" for c in roster)


def peril_text(roll: int, tyrant: bool) -> str:
    table = TYRANT_PERIL if tyrant else STANDARD_PERIL
    if roll <= 6:
        return table[0]
    if roll <= 9:
        return table[1]
    return table[2]


@dataclass
class PerilEngine:
    dice: Dice = field(default_factory=Dice)

    def __post_init__(self) -> None:
        self._records: dict[int, PerilRecord] = {}

    def roll_for(self, round_number: int, roster: Iterable[Combatant]) -> PerilRecord:
        """Return the round's peril, rolling it only the first time."""
        existing = self._records.get(round_number)
        if existing is not None:
            return existing

        roll = self.dice.roll_2d6()
        record = PerilRecord(round=round_number, roll=roll, text=peril_text(roll, has_tyrant(roster)))
        self._records[round_number] = record
        logger.info("Peril for round %s: %s (%s)", round_number, record.roll, record.text)
        return record

    def get(self, round_number: int) -> PerilRecord | None:
        return self._records.get(round_number)
