"""Round and turn state machine for one live encounter."""

from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass, field, replace
from typing import Iterable

from .content import ContentStore
from .dice import Dice
from .initializer import initialize_roster
from .models import (
    Combatant,
    CombatantState,
    CreatureAttributes,
    EncounterDefinition,
    Monster,
    PerilRecord,
    Player,
    Roster,
    TurnOrderEntry,
)
from .overlay import effective_attributes
from .peril import PerilEngine
from .rounds import RoundStateStore
from .states import find_common_state
from .turn_order import TurnOrder, calculate_turn_order

logger = logging.getLogger(__name__)

_RELATIVE_HP_RE = re.compile(r"^\s*([+-])\s*(\d+)\s*$")
_ABSOLUTE_HP_RE = re.compile(r"^\s*(\d+)\s*$")


def parse_hp_change(expression: str, current_hp: int) -> int | None:
    """Return the new HP for "+5", "-10" or an absolute "12"; None if unparsable."""
    relative = _RELATIVE_HP_RE.match(expression)
    if relative:
        sign, amount = relative.groups()
        delta = int(amount) if sign == "+" else -int(amount)
        return current_hp + delta
    absolute = _ABSOLUTE_HP_RE.match(expression)
    if absolute:
        return int(absolute.group(1))
    return None


@dataclass
class EncounterController:
    """Owns the per-round rosters, the clock and the peril rolls.

    All roster changes go through ``RoundStateStore.put`` so a round is always
    swapped in as a whole.
    """

    rounds: RoundStateStore
    dice: Dice = field(default_factory=Dice)
    round: int = 1
    turn_index: int = 0
    perils: PerilEngine = field(init=False)

    def __post_init__(self) -> None:
        self.perils = PerilEngine(dice=self.dice)
        self.perils.roll_for(self.round, self.rounds.get(self.round))

    @classmethod
    def from_roster(cls, roster: Iterable[Combatant], dice: Dice | None = None) -> "EncounterController":
        return cls(rounds=RoundStateStore.starting_with(roster), dice=dice or Dice())

    @classmethod
    async def start(
        cls,
        definition: EncounterDefinition,
        content: ContentStore,
        dice: Dice | None = None,
    ) -> "EncounterController":
        dice = dice or Dice()
        roster = await initialize_roster(definition, content, dice)
        return cls.from_roster(roster, dice=dice)

    # --- Queries ----------------------------------------------------------

    def roster(self) -> Roster:
        return self.rounds.get(self.round)

    def order(self) -> TurnOrder:
        return calculate_turn_order(self.roster())

    def turn_order(self) -> tuple[TurnOrderEntry, ...]:
        return self.order().entries

    def active_turn(self) -> TurnOrderEntry | None:
        return self.order().active_entry(self.turn_index)

    def untracked_players(self) -> tuple[Player, ...]:
        return self.order().untracked_players

    def all_players_ready(self) -> bool:
        return self.order().all_players_ready

    def peril(self) -> PerilRecord:
        return self.perils.roll_for(self.round, self.roster())

    def find(self, combatant_id: str) -> Combatant | None:
        for combatant in self.roster():
            if combatant.id == combatant_id:
                return combatant
        return None

    def effective_attributes(self, combatant_id: str) -> CreatureAttributes | None:
        combatant = self.find(combatant_id)
        if not isinstance(combatant, Monster):
            return None
        return effective_attributes(combatant.attributes, combatant.states)

    # --- Clock ------------------------------------------------------------

    def next_turn(self) -> None:
        order = self.order()
        if not order.all_players_ready:
            logger.debug("next_turn ignored: players without initiative")
            return
        if self.turn_index + 1 < len(order):
            self.turn_index += 1
            return

        next_round = self.round + 1
        if not self.rounds.has(next_round):
            roster = self.rounds.materialize_next(self.round)
            self.perils.roll_for(next_round, roster)
        self.round = next_round
        self.turn_index = 0
        logger.info("Round %s begins", self.round)

    def prev_turn(self) -> None:
        if self.turn_index > 0:
            self.turn_index -= 1
        elif self.round > 1:
            # Lands on the start of the previous round, not its last turn.
            self.round -= 1
            self.turn_index = 0

    # --- Roster commands --------------------------------------------------

    def update_combatant(self, updated: Combatant) -> None:
        current = self.roster()
        if not any(c.id == updated.id for c in current):
            logger.debug("update_combatant ignored: %s not in round %s", updated.id, self.round)
            return
        self.rounds.put(self.round, (updated if c.id == updated.id else c for c in current))

        if isinstance(updated, Player):
            for number in self.rounds.round_numbers(minimum=self.round + 1):
                self.rounds.put(number, (_carry_initiative(c, updated) for c in self.rounds.get(number)))
        elif not isinstance(updated, Monster):
            raise TypeError(f"Unknown combatant variant: {updated!r}")

    def add_player(self, name: str) -> Player:
        player = Player(id=str(uuid.uuid4()), name=name)
        for number in self.rounds.round_numbers(minimum=self.round):
            self.rounds.put(number, (*self.rounds.get(number), player))
        logger.info("Player %s joined in round %s", name, self.round)
        return player

    def adjust_hp(self, combatant_id: str, expression: str) -> None:
        monster = self.find(combatant_id)
        if not isinstance(monster, Monster):
            return
        new_hp = parse_hp_change(expression, monster.current_hp)
        if new_hp is None:
            return
        self.update_combatant(replace(monster, current_hp=new_hp))

    def add_state(self, combatant_id: str, name: str, intensity: int = 1) -> CombatantState | None:
        monster = self.find(combatant_id)
        if not isinstance(monster, Monster):
            return None
        common = find_common_state(name)
        state = CombatantState(
            id=str(uuid.uuid4()),
            name=common.name if common else name,
            intensity=max(0, intensity),
            description=common.description if common else None,
            effect=common.effect if common else None,
        )
        self.update_combatant(replace(monster, states=(*monster.states, state)))
        return state

    def remove_state(self, combatant_id: str, state_id: str) -> None:
        monster = self.find(combatant_id)
        if not isinstance(monster, Monster):
            return
        states = tuple(s for s in monster.states if s.id != state_id)
        self.update_combatant(replace(monster, states=states))

    def set_state_intensity(self, combatant_id: str, state_id: str, intensity: int) -> None:
        monster = self.find(combatant_id)
        if not isinstance(monster, Monster):
            return
        states = tuple(
            replace(s, intensity=max(0, intensity)) if s.id == state_id else s for s in monster.states
        )
        self.update_combatant(replace(monster, states=states))


def _carry_initiative(combatant: Combatant, source: Player) -> Combatant:
    if isinstance(combatant, Player) and combatant.id == source.id:
        return replace(combatant, initiative=source.initiative, nat20=source.nat20)
    return combatant
