"""Threat rating lookups for creature templates."""

from __future__ import annotations

from typing import Iterable

from .models import Combatant, Monster

TR_TABLE: dict[str, tuple[int, ...]] = {
    "Normal": (10, 20, 30, 40, 50, 60, 70, 80, 90, 100),
    "Underling": (3, 5, 7, 10, 12, 15, 17, 20, 22, 25),
    "Paragon": (20, 40, 60, 80, 100, 120, 140, 160, 180, 200),
    "Tyrant": (40, 80, 120, 160, 200, 240, 280, 320, 360, 400),
}


def get_tr(template: str, level: int) -> int:
    """Return the threat rating for a template at levels 1-10, else 0."""
    if level < 1 or level > 10:
        return 0
    ratings = TR_TABLE.get(template)
    if ratings is None:
        return 0
    return ratings[level - 1]


def encounter_threat(roster: Iterable[Combatant]) -> int:
    return sum(c.tr for c in roster if isinstance(c, Monster))
