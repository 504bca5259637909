"""Turn order calculation for a single round's roster."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence, TypeVar

from .models import EXTRA_TURN_TEMPLATES, Combatant, Monster, Player, TurnOrderEntry

C = TypeVar("C", Player, Monster)


@dataclass(frozen=True)
class TurnOrder:
    entries: tuple[TurnOrderEntry, ...]
    untracked_players: tuple[Player, ...]

    @property
    def all_players_ready(self) -> bool:
        return not self.untracked_players

    def __len__(self) -> int:
        return len(self.entries)

    def active_entry(self, turn_index: int) -> TurnOrderEntry | None:
        if not self.all_players_ready:
            return None
        if 0 <= turn_index < len(self.entries):
            return self.entries[turn_index]
        return None


def split_roster(roster: Iterable[Combatant]) -> tuple[list[Player], list[Monster]]:
    players: list[Player] = []
    monsters: list[Monster] = []
    for combatant in roster:
        if isinstance(combatant, Player):
            players.append(combatant)
        elif isinstance(combatant, Monster):
            monsters.append(combatant)
        else:
            raise TypeError(f"Unknown combatant variant: {combatant!r}")
    return players, monsters


def is_tracked(player: Player) -> bool:
    return player.initiative > 0 or player.nat20


def _by_initiative(combatants: Sequence[C]) -> list[C]:
    # sorted() is stable, reverse=True included
    return sorted(combatants, key=lambda c: c.initiative, reverse=True)


def _entries(combatants: Iterable[Combatant], suffix: str = "") -> list[TurnOrderEntry]:
    return [TurnOrderEntry(combatant=c, turn_id=f"{c.id}{suffix}") for c in combatants]


def calculate_turn_order(roster: Iterable[Combatant]) -> TurnOrder:
    """Compute the ordered turns for one round.

    Nat20 players act first and again last; players beating every monster's
    initiative act before the monsters, everyone else after them. Paragon and
    Tyrant monsters get one extra turn appended at the very end.
    """
    players, monsters = split_roster(roster)

    untracked = [p for p in players if not is_tracked(p)]
    tracked = [p for p in players if is_tracked(p)]
    nat20_players = [p for p in tracked if p.nat20]
    other_players = [p for p in tracked if not p.nat20]

    max_monster_initiative = max((m.initiative for m in monsters), default=float("-inf"))
    high_players = [p for p in other_players if p.initiative > max_monster_initiative]
    low_players = [p for p in other_players if p.initiative <= max_monster_initiative]

    sorted_nat20 = _by_initiative(nat20_players)
    sorted_monsters = _by_initiative(monsters)
    extra_turns = [m for m in sorted_monsters if m.template in EXTRA_TURN_TEMPLATES]

    entries = (
        _entries(sorted_nat20, "-start")
        + _entries(_by_initiative(high_players))
        + _entries(sorted_monsters)
        + _entries(_by_initiative(low_players))
        + _entries(sorted_nat20, "-end")
        + _entries(extra_turns, "-extra")
    )
    return TurnOrder(entries=tuple(entries), untracked_players=tuple(untracked))
