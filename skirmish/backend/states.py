"""Catalog of the common states a combatant can suffer or enjoy."""

from __future__ import annotations

from dataclasses import dataclass

from .models import StateEffect


@dataclass(frozen=True)
class CommonState:
    name: str
    description: str
    effect: StateEffect | None = None


def _bonus(attribute: str) -> StateEffect:
    return StateEffect(attribute=attribute, modifier="bonus")


def _penalty(attribute: str) -> StateEffect:
    return StateEffect(attribute=attribute, modifier="penalty")


COMMON_STATES: tuple[CommonState, ...] = (
    CommonState("Accurate", "You take an intensity bonus to accuracy checks. Cancels out inaccurate.", _bonus("Accuracy")),
    CommonState("Inaccurate", "You take an intensity penalty to accuracy checks. Cancels out accurate.", _penalty("Accuracy")),
    CommonState(
        "Bleeding",
        "You suffer intensity damage when you move, jump, teleport, or are forced to move. "
        "You only take this damage once per instance of movement.",
    ),
    CommonState(
        "Burning",
        "You suffer (intensity)d6 damage at the start of your turn, up to a maximum of three dice. "
        "Then the intensity increases by +1.",
    ),
    CommonState(
        "Delirious",
        "At the start of your turn, roll (intensity)d6, up to a maximum of three dice, "
        "and perform the listed action for each result.",
    ),
    CommonState("Fortified", "Damage you take from attacks is reduced by intensity. Cancels out frail."),
    CommonState("Frail", "Damage you take from attacks is increased by intensity. Cancels out fortified."),
    CommonState("Guarded", "You gain an intensity bonus to guard checks. Cancels out unguarded.", _bonus("Guard")),
    CommonState("Unguarded", "You take an intensity penalty to guard checks. Cancels out guarded.", _penalty("Guard")),
    CommonState("Hastened", "You gain an intensity bonus to initiative checks. Cancels out hindered.", _bonus("Initiative")),
    CommonState("Hindered", "You take an intensity penalty to initiative checks. Cancels out hastened.", _penalty("Initiative")),
    CommonState("Mending", "You regain intensity hit points at the start of your turn. Cancels out poisoned."),
    CommonState("Poisoned", "You suffer intensity damage at the start of your turn. Cancels out mending."),
    CommonState(
        "Provoked",
        "You take an intensity penalty to attacks that do not include the provoking creature as a target.",
    ),
    CommonState(
        "Sleeping",
        "You take no turn, but you make one free prevail against this state at the end of each round. "
        "This state ends immediately if you suffer damage.",
    ),
    CommonState("Slow", "You take an intensity penalty to speed. Cancels out swift.", _penalty("Speed")),
    CommonState("Swift", "You gain an intensity bonus to speed. Cancels out slow.", _bonus("Speed")),
    CommonState("Strong", "You gain an intensity bonus to damage rolls on attacks. Cancels out weak.", _bonus("rollBonus")),
    CommonState("Weak", "You take an intensity penalty to damage rolls on attacks. Cancels out strong.", _penalty("rollBonus")),
    CommonState("Weary", "You take an intensity penalty to resist checks. Cancels out willful.", _penalty("Resist")),
    CommonState("Willful", "You take an intensity bonus to resist checks. Cancels out weary.", _bonus("Resist")),
)

_BY_NAME = {state.name.lower(): state for state in COMMON_STATES}


def find_common_state(name: str) -> CommonState | None:
    return _BY_NAME.get(name.strip().lower())
