"""State builders for live encounter snapshots."""

from __future__ import annotations

from dataclasses import asdict, replace
from datetime import datetime, timezone
from typing import Any

from .content import deed_from_record
from .controller import EncounterController
from .models import (
    Combatant,
    CombatantState,
    CreatureAttributes,
    Deed,
    NUMERIC_ATTRIBUTES,
    Monster,
    Player,
    StateEffect,
)
from .threat import encounter_threat


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def attributes_to_dict(attributes: CreatureAttributes) -> dict[str, Any]:
    return {
        "HP": attributes.hp,
        "Speed": attributes.speed,
        "Initiative": attributes.initiative,
        "Accuracy": attributes.accuracy,
        "Guard": attributes.guard,
        "Resist": attributes.resist,
        "rollBonus": attributes.roll_bonus,
        "DMG": attributes.dmg,
    }


def state_to_dict(state: CombatantState) -> dict[str, Any]:
    return {
        "id": state.id,
        "name": state.name,
        "intensity": state.intensity,
        "description": state.description,
        "effect": asdict(state.effect) if state.effect else None,
    }


def _int_field(payload: dict[str, Any], key: str, default: int) -> int:
    value = payload.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise TypeError(f"{key} must be an integer")
    return int(value)


def _bool_field(payload: dict[str, Any], key: str, default: bool) -> bool:
    value = payload.get(key, default)
    if not isinstance(value, bool):
        raise TypeError(f"{key} must be a boolean")
    return value


def _str_field(payload: dict[str, Any], key: str, default: str) -> str:
    value = payload.get(key, default)
    if not isinstance(value, str):
        raise TypeError(f"{key} must be a string")
    return value


def attributes_from_dict(payload: dict[str, Any], existing: CreatureAttributes) -> CreatureAttributes:
    """Patch ``existing`` with the attributes present in ``payload``."""
    changes: dict[str, Any] = {
        name: _int_field(payload, key, getattr(existing, name))
        for key, name in NUMERIC_ATTRIBUTES.items()
        if key in payload
    }
    if "DMG" in payload:
        changes["dmg"] = _str_field(payload, "DMG", existing.dmg)
    return replace(existing, **changes)


def state_from_dict(payload: dict[str, Any]) -> CombatantState:
    if not isinstance(payload, dict):
        raise TypeError("state must be an object")
    effect = payload.get("effect")
    if effect is not None:
        if not isinstance(effect, dict):
            raise TypeError("effect must be an object")
        if effect.get("attribute") not in NUMERIC_ATTRIBUTES:
            raise ValueError(f"unknown effect attribute: {effect.get('attribute')!r}")
        if effect.get("modifier") not in ("bonus", "penalty"):
            raise ValueError(f"unknown effect modifier: {effect.get('modifier')!r}")
    state_id = _str_field(payload, "id", "")
    if not state_id:
        raise ValueError("state id is required")
    description = payload.get("description")
    return CombatantState(
        id=state_id,
        name=_str_field(payload, "name", ""),
        intensity=max(0, _int_field(payload, "intensity", 0)),
        description=description if isinstance(description, str) else None,
        effect=StateEffect(attribute=effect["attribute"], modifier=effect["modifier"]) if effect else None,
    )


def combatant_to_dict(combatant: Combatant, effective: CreatureAttributes | None = None) -> dict[str, Any]:
    if isinstance(combatant, Player):
        return {
            "id": combatant.id,
            "type": "player",
            "name": combatant.name,
            "initiative": combatant.initiative,
            "nat20": combatant.nat20,
        }
    if isinstance(combatant, Monster):
        return {
            "id": combatant.id,
            "type": "monster",
            "name": combatant.name,
            "monsterId": combatant.monster_id,
            "level": combatant.level,
            "role": combatant.role,
            "template": combatant.template,
            "TR": combatant.tr,
            "initiative": combatant.initiative,
            "currentHp": combatant.current_hp,
            "maxHp": combatant.max_hp,
            "attributes": attributes_to_dict(combatant.attributes),
            "effectiveAttributes": attributes_to_dict(effective or combatant.attributes),
            "deeds": [
                {"id": deed.id, "name": deed.name, "tier": deed.tier, "target": deed.target, "range": deed.range}
                for deed in combatant.deeds
            ],
            "states": [state_to_dict(state) for state in combatant.states],
            "abilities": combatant.abilities,
            "description": combatant.description,
            "tags": list(combatant.tags),
        }
    raise TypeError(f"Unknown combatant variant: {combatant!r}")


def _deed_from_dict(payload: Any) -> Deed:
    if not isinstance(payload, dict) or not isinstance(payload.get("id"), str) or not payload["id"]:
        raise ValueError("deed id is required")
    return deed_from_record(payload)


def _list_field(payload: dict[str, Any], key: str) -> list[Any] | None:
    value = payload.get(key)
    if value is not None and not isinstance(value, list):
        raise TypeError(f"{key} must be a list")
    return value


def combatant_from_dict(payload: dict[str, Any], existing: Combatant) -> Combatant:
    """Overlay client-editable fields from ``payload`` onto ``existing``.

    Identity and content fields (id, creature, template, TR) always come from
    the existing combatant. ``attributes`` is a partial patch. Malformed
    fields raise TypeError or ValueError.
    """
    if isinstance(existing, Player):
        return Player(
            id=existing.id,
            name=_str_field(payload, "name", existing.name),
            initiative=_int_field(payload, "initiative", existing.initiative),
            nat20=_bool_field(payload, "nat20", existing.nat20),
        )
    if isinstance(existing, Monster):
        attributes = payload.get("attributes")
        if attributes is not None and not isinstance(attributes, dict):
            raise TypeError("attributes must be an object")
        deeds = _list_field(payload, "deeds")
        states = _list_field(payload, "states")
        return Monster(
            id=existing.id,
            name=_str_field(payload, "name", existing.name),
            monster_id=existing.monster_id,
            level=existing.level,
            role=existing.role,
            template=existing.template,
            tr=existing.tr,
            attributes=attributes_from_dict(attributes, existing.attributes) if attributes else existing.attributes,
            initiative=_int_field(payload, "initiative", existing.initiative),
            current_hp=_int_field(payload, "currentHp", existing.current_hp),
            max_hp=_int_field(payload, "maxHp", existing.max_hp),
            deeds=tuple(_deed_from_dict(d) for d in deeds) if deeds is not None else existing.deeds,
            states=tuple(state_from_dict(s) for s in states) if states is not None else existing.states,
            abilities=existing.abilities,
            description=existing.description,
            tags=existing.tags,
        )
    raise TypeError(f"Unknown combatant variant: {existing!r}")


def build_session_view(session_id: str, name: str, controller: EncounterController) -> dict[str, Any]:
    """Return a JSON-ready snapshot of the active round."""
    order = controller.order()
    active = order.active_entry(controller.turn_index)
    peril = controller.peril()
    roster = controller.roster()
    return {
        "id": session_id,
        "name": name,
        "round": controller.round,
        "turnIndex": controller.turn_index,
        "turnOrder": [{"turnId": entry.turn_id, "combatantId": entry.combatant.id} for entry in order.entries],
        "activeTurnId": active.turn_id if active else None,
        "allPlayersReady": order.all_players_ready,
        "untrackedPlayers": [player.id for player in order.untracked_players],
        "peril": {"round": peril.round, "roll": peril.roll, "text": peril.text},
        "combatants": [combatant_to_dict(c, controller.effective_attributes(c.id)) for c in roster],
        "totalTR": encounter_threat(roster),
        "meta": {"renderedAt": _utc_now_iso()},
    }
