"""Resolve an encounter definition into the round-one roster."""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Callable

from .content import ContentStore
from .dice import Dice
from .models import (
    Combatant,
    Creature,
    Deed,
    EncounterDefinition,
    Monster,
    MonsterGroup,
    Player,
)

logger = logging.getLogger(__name__)

IdFactory = Callable[[], str]


class EncounterInitializationError(RuntimeError):
    """The encounter cannot start; the caller should close it."""


def _new_id() -> str:
    return str(uuid.uuid4())


async def resolve_monster_groups(
    definition: EncounterDefinition,
    content: ContentStore,
    dice: Dice,
) -> tuple[MonsterGroup, ...]:
    if definition.encounter_table_id is None:
        return definition.monster_groups

    table = await content.get_encounter_table_by_id(definition.encounter_table_id)
    if table is None:
        raise EncounterInitializationError(f"Encounter table not found: {definition.encounter_table_id}")
    if not table.entries or table.total_weight <= 0:
        raise EncounterInitializationError(f"Encounter table has no weight: {definition.encounter_table_id}")

    entry = dice.weighted_choice(table.entries, weight=lambda item: item.weight)
    quantity = dice.resolve_quantity(entry.quantity)
    logger.info(
        "Table %s picked creature %s (quantity %r -> %s)",
        table.id,
        entry.creature_id,
        entry.quantity,
        quantity,
    )
    return (MonsterGroup(monster_id=entry.creature_id, quantity=quantity),)


def instantiate_monsters(
    creature: Creature,
    deeds: list[Deed],
    quantity: int,
    new_id: IdFactory = _new_id,
) -> list[Monster]:
    underling = creature.template == "Underling"
    hp = 1 if underling else creature.attributes.hp
    granted = tuple(deed for deed in deeds if not underling or deed.tier == "light")

    monsters: list[Monster] = []
    for number in range(1, quantity + 1):
        name = f"{creature.name} {number}" if quantity > 1 else creature.name
        monsters.append(
            Monster(
                id=new_id(),
                name=name,
                monster_id=creature.id,
                level=creature.level,
                role=creature.role,
                template=creature.template,
                tr=creature.tr,
                attributes=creature.attributes,
                initiative=creature.attributes.initiative,
                current_hp=hp,
                max_hp=hp,
                deeds=granted,
                abilities=creature.abilities,
                description=creature.description,
                tags=creature.tags,
            )
        )
    return monsters


async def _load_group(
    group: MonsterGroup,
    content: ContentStore,
    new_id: IdFactory,
) -> list[Monster]:
    creature = await content.get_creature_by_id(group.monster_id)
    if creature is None:
        logger.warning("Skipping monster group: creature %s not found", group.monster_id)
        return []
    deeds = await content.get_deeds_by_ids(list(creature.deed_ids))
    return instantiate_monsters(creature, deeds, group.quantity, new_id=new_id)


async def initialize_roster(
    definition: EncounterDefinition,
    content: ContentStore,
    dice: Dice,
    new_id: IdFactory = _new_id,
) -> list[Combatant]:
    """Build round one's combatants.

    Every lookup is awaited before anything is returned, so callers never see
    a partial roster. Raises EncounterInitializationError when a referenced
    encounter table is missing or has zero total weight.
    """
    groups = await resolve_monster_groups(definition, content, dice)
    loaded = await asyncio.gather(*(_load_group(group, content, new_id) for group in groups))

    roster: list[Combatant] = [monster for monsters in loaded for monster in monsters]
    roster.extend(Player(id=new_id(), name=name) for name in definition.player_names)
    logger.info(
        "Encounter %s initialized with %s combatants",
        definition.id,
        len(roster),
    )
    return roster
