"""Effective monster attributes derived from active states."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable

from .models import NUMERIC_ATTRIBUTES, CombatantState, CreatureAttributes


def state_delta(state: CombatantState) -> int:
    if state.effect is None:
        return 0
    sign = 1 if state.effect.modifier == "bonus" else -1
    return state.intensity * sign


def effective_attributes(
    attributes: CreatureAttributes,
    states: Iterable[CombatantState],
) -> CreatureAttributes:
    """Return base attributes with every state effect applied additively.

    States without an effect, or naming a non-numeric attribute such as DMG,
    leave the result untouched. The input is never modified.
    """
    deltas: dict[str, int] = {}
    for state in states:
        if state.effect is None:
            continue
        field_name = NUMERIC_ATTRIBUTES.get(state.effect.attribute)
        if field_name is None:
            continue
        deltas[field_name] = deltas.get(field_name, 0) + state_delta(state)

    if not deltas:
        return attributes
    changes = {name: getattr(attributes, name) + delta for name, delta in deltas.items()}
    return replace(attributes, **changes)
