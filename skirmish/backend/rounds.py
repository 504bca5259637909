"""Per-round roster snapshots for a live encounter."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable

from .models import Combatant, Monster, Player, Roster


def reset_for_new_round(combatant: Combatant) -> Combatant:
    """Players reroll initiative every round; monsters carry over unchanged."""
    if isinstance(combatant, Player):
        return replace(combatant, initiative=0, nat20=False)
    if isinstance(combatant, Monster):
        return combatant
    raise TypeError(f"Unknown combatant variant: {combatant!r}")


@dataclass
class RoundStateStore:
    """Append-only map of round number to roster.

    Rosters are tuples of frozen combatants and are only ever replaced as a
    whole, so no two rounds can share mutable state.
    """

    def __post_init__(self) -> None:
        self._rounds: dict[int, Roster] = {}

    @classmethod
    def starting_with(cls, roster: Iterable[Combatant]) -> "RoundStateStore":
        store = cls()
        store.put(1, roster)
        return store

    def has(self, round_number: int) -> bool:
        return round_number in self._rounds

    def get(self, round_number: int) -> Roster:
        try:
            return self._rounds[round_number]
        except KeyError as e:
            raise KeyError(f"Round not materialized: {round_number}") from e

    def put(self, round_number: int, roster: Iterable[Combatant]) -> Roster:
        if round_number < 1:
            raise ValueError("round_number must be >= 1")
        snapshot = tuple(roster)
        self._rounds[round_number] = snapshot
        return snapshot

    def materialize_next(self, round_number: int) -> Roster:
        """Create round ``round_number + 1`` from ``round_number`` unless it exists."""
        next_round = round_number + 1
        if next_round in self._rounds:
            return self._rounds[next_round]
        previous = self.get(round_number)
        return self.put(next_round, (reset_for_new_round(c) for c in previous))

    def round_numbers(self, minimum: int = 1) -> list[int]:
        return sorted(n for n in self._rounds if n >= minimum)

    def latest_round(self) -> int:
        return max(self._rounds)
