"""Reducer dispatching host actions onto an encounter controller."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .controller import EncounterController
from .state import combatant_from_dict


@dataclass(frozen=True)
class ActionResult:
    applied: bool
    engine_events: list[dict[str, Any]]


class InvalidActionError(ValueError):
    """Action payload is missing a field the action needs."""


def apply_action(controller: EncounterController, action: dict[str, Any]) -> ActionResult:
    """Apply a host action; unknown action types are ignored."""
    action_type = str(action.get("type", "")).upper()
    if action_type == "NEXT_TURN":
        return _apply_next_turn(controller, action)
    if action_type == "PREV_TURN":
        return _apply_prev_turn(controller, action)
    if action_type == "UPDATE_COMBATANT":
        return _apply_update_combatant(controller, action)
    if action_type == "ADD_PLAYER":
        return _apply_add_player(controller, action)
    if action_type == "ADJUST_HP":
        return _apply_adjust_hp(controller, action)
    if action_type == "ADD_STATE":
        return _apply_add_state(controller, action)
    if action_type == "REMOVE_STATE":
        return _apply_remove_state(controller, action)
    if action_type == "SET_STATE_INTENSITY":
        return _apply_set_state_intensity(controller, action)
    return ActionResult(applied=False, engine_events=[])


def _require_str(action: dict[str, Any], key: str) -> str:
    value = action.get(key)
    if not isinstance(value, str) or value == "":
        raise InvalidActionError(f"{key} is required")
    return value


def _require_int(action: dict[str, Any], key: str) -> int:
    value = action.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidActionError(f"{key} must be an integer")
    return value


def _apply_next_turn(controller: EncounterController, action: dict[str, Any]) -> ActionResult:
    previous_round = controller.round
    previous_index = controller.turn_index
    controller.next_turn()
    if (controller.round, controller.turn_index) == (previous_round, previous_index):
        return ActionResult(
            applied=False,
            engine_events=[{"kind": "blocked", "reason": "players_not_ready", "action": action}],
        )

    events: list[dict[str, Any]] = []
    if controller.round != previous_round:
        events.append({"kind": "timing", "timing": "round_end", "round": previous_round})
        events.append({"kind": "timing", "timing": "round_start", "round": controller.round})
        peril = controller.peril()
        events.append({"kind": "peril", "round": peril.round, "roll": peril.roll, "text": peril.text})
    active = controller.active_turn()
    events.append({"kind": "timing", "timing": "turn_start", "turnId": active.turn_id if active else None})
    return ActionResult(applied=True, engine_events=events)


def _apply_prev_turn(controller: EncounterController, action: dict[str, Any]) -> ActionResult:
    previous = (controller.round, controller.turn_index)
    controller.prev_turn()
    if (controller.round, controller.turn_index) == previous:
        return ActionResult(applied=False, engine_events=[])
    return ActionResult(
        applied=True,
        engine_events=[{"kind": "rewind", "round": controller.round, "turnIndex": controller.turn_index}],
    )


def _apply_update_combatant(controller: EncounterController, action: dict[str, Any]) -> ActionResult:
    payload = action.get("combatant")
    if not isinstance(payload, dict):
        raise InvalidActionError("combatant is required")
    combatant_id = _require_str(payload, "id")
    existing = controller.find(combatant_id)
    if existing is None:
        return ActionResult(applied=False, engine_events=[])
    try:
        updated = combatant_from_dict(payload, existing)
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidActionError(f"invalid combatant {combatant_id}: {exc}") from exc
    controller.update_combatant(updated)
    return ActionResult(applied=True, engine_events=[{"kind": "combatant_updated", "combatantId": combatant_id}])


def _apply_add_player(controller: EncounterController, action: dict[str, Any]) -> ActionResult:
    player = controller.add_player(_require_str(action, "name"))
    return ActionResult(applied=True, engine_events=[{"kind": "player_added", "combatantId": player.id}])


def _apply_adjust_hp(controller: EncounterController, action: dict[str, Any]) -> ActionResult:
    combatant_id = _require_str(action, "combatantId")
    controller.adjust_hp(combatant_id, str(action.get("change", "")))
    return ActionResult(applied=True, engine_events=[{"kind": "combatant_updated", "combatantId": combatant_id}])


def _apply_add_state(controller: EncounterController, action: dict[str, Any]) -> ActionResult:
    combatant_id = _require_str(action, "combatantId")
    intensity = action.get("intensity", 1)
    state = controller.add_state(
        combatant_id,
        _require_str(action, "name"),
        intensity=intensity if isinstance(intensity, int) else 1,
    )
    if state is None:
        return ActionResult(applied=False, engine_events=[])
    return ActionResult(
        applied=True,
        engine_events=[{"kind": "state_added", "combatantId": combatant_id, "stateId": state.id}],
    )


def _apply_remove_state(controller: EncounterController, action: dict[str, Any]) -> ActionResult:
    combatant_id = _require_str(action, "combatantId")
    state_id = _require_str(action, "stateId")
    controller.remove_state(combatant_id, state_id)
    return ActionResult(
        applied=True,
        engine_events=[{"kind": "state_removed", "combatantId": combatant_id, "stateId": state_id}],
    )


def _apply_set_state_intensity(controller: EncounterController, action: dict[str, Any]) -> ActionResult:
    combatant_id = _require_str(action, "combatantId")
    state_id = _require_str(action, "stateId")
    controller.set_state_intensity(combatant_id, state_id, _require_int(action, "intensity"))
    return ActionResult(
        applied=True,
        engine_events=[{"kind": "state_updated", "combatantId": combatant_id, "stateId": state_id}],
    )
