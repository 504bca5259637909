"""Domain models for content records, combatants and per-round session data."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Union

CreatureTemplate = Literal["Normal", "Underling", "Paragon", "Tyrant"]
DeedTier = Literal["light", "heavy", "mighty"]
StateModifier = Literal["bonus", "penalty"]

CREATURE_TEMPLATES: tuple[str, ...] = ("Normal", "Underling", "Paragon", "Tyrant")
EXTRA_TURN_TEMPLATES: frozenset[str] = frozenset({"Paragon", "Tyrant"})

# Attribute names as they appear in stored content and state effects.
NUMERIC_ATTRIBUTES: dict[str, str] = {
    "HP": "hp",
    "Speed": "speed",
    "Initiative": "initiative",
    "Accuracy": "accuracy",
    "Guard": "guard",
    "Resist": "resist",
    "rollBonus": "roll_bonus",
}


@dataclass(frozen=True)
class CreatureAttributes:
    hp: int
    speed: int
    initiative: int
    accuracy: int
    guard: int
    resist: int
    roll_bonus: int
    dmg: str


@dataclass(frozen=True)
class DeedEffects:
    hit: str
    shadow: str
    start: str | None = None
    base: str | None = None
    end: str | None = None


@dataclass(frozen=True)
class Deed:
    id: str
    name: str
    tier: DeedTier
    target: str = ""
    range: str = ""
    effects: DeedEffects = field(default_factory=lambda: DeedEffects(hit="", shadow=""))
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class Creature:
    id: str
    name: str
    level: int
    role: str
    template: CreatureTemplate
    tr: int
    attributes: CreatureAttributes
    deed_ids: tuple[str, ...] = ()
    abilities: str = ""
    description: str = ""
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class EncounterTableEntry:
    creature_id: str
    quantity: str
    weight: float


@dataclass(frozen=True)
class EncounterTable:
    id: str
    name: str
    entries: tuple[EncounterTableEntry, ...]
    total_tr: int = 0

    @property
    def total_weight(self) -> float:
        return sum(entry.weight for entry in self.entries)


@dataclass(frozen=True)
class MonsterGroup:
    monster_id: str
    quantity: int


@dataclass(frozen=True)
class EncounterDefinition:
    id: str
    name: str
    monster_groups: tuple[MonsterGroup, ...] = ()
    encounter_table_id: str | None = None
    player_names: tuple[str, ...] = ()
    scene_description: str = ""
    gm_notes: str = ""


@dataclass(frozen=True)
class StateEffect:
    attribute: str
    modifier: StateModifier


@dataclass(frozen=True)
class CombatantState:
    id: str
    name: str
    intensity: int
    description: str | None = None
    effect: StateEffect | None = None


@dataclass(frozen=True)
class Player:
    id: str
    name: str
    initiative: int = 0
    nat20: bool = False
    kind: Literal["player"] = "player"


@dataclass(frozen=True)
class Monster:
    id: str
    name: str
    monster_id: str
    level: int
    role: str
    template: CreatureTemplate
    tr: int
    attributes: CreatureAttributes
    initiative: int
    current_hp: int
    max_hp: int
    deeds: tuple[Deed, ...] = ()
    states: tuple[CombatantState, ...] = ()
    abilities: str = ""
    description: str = ""
    tags: tuple[str, ...] = ()
    kind: Literal["monster"] = "monster"


Combatant = Union[Player, Monster]
Roster = tuple[Combatant, ...]


@dataclass(frozen=True)
class TurnOrderEntry:
    combatant: Combatant
    turn_id: str


@dataclass(frozen=True)
class PerilRecord:
    round: int
    roll: int
    text: str
