"""Read-only access to stored creatures, deeds and encounter tables."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Protocol

from .models import (
    Creature,
    CreatureAttributes,
    Deed,
    DeedEffects,
    EncounterTable,
    EncounterTableEntry,
)
from .threat import get_tr


class ContentStore(Protocol):
    async def get_creature_by_id(self, creature_id: str) -> Creature | None:
        """Return one creature template or None."""

    async def get_creatures_by_ids(self, creature_ids: list[str]) -> list[Creature]:
        """Return the creatures that exist, in request order."""

    async def get_deeds_by_ids(self, deed_ids: list[str]) -> list[Deed]:
        """Return the deeds that exist, in request order."""

    async def get_encounter_table_by_id(self, table_id: str) -> EncounterTable | None:
        """Return one weighted encounter table or None."""


def _int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def attributes_from_record(record: dict[str, Any]) -> CreatureAttributes:
    return CreatureAttributes(
        hp=_int(record.get("HP")),
        speed=_int(record.get("Speed")),
        initiative=_int(record.get("Initiative")),
        accuracy=_int(record.get("Accuracy")),
        guard=_int(record.get("Guard")),
        resist=_int(record.get("Resist")),
        roll_bonus=_int(record.get("rollBonus")),
        dmg=str(record.get("DMG", "d4")),
    )


def creature_from_record(record: dict[str, Any]) -> Creature:
    level = _int(record.get("level"), 1)
    template = record.get("template") or "Normal"
    return Creature(
        id=str(record["id"]),
        name=str(record.get("name", "")),
        level=level,
        role=str(record.get("role", "")),
        template=template,
        tr=_int(record.get("TR")) or get_tr(template, level),
        attributes=attributes_from_record(dict(record.get("attributes", {}))),
        deed_ids=tuple(str(deed_id) for deed_id in record.get("deeds", [])),
        abilities=str(record.get("abilities", "")),
        description=str(record.get("description", "")),
        tags=tuple(record.get("tags", [])),
    )


def deed_from_record(record: dict[str, Any]) -> Deed:
    effects = dict(record.get("effects", {}))
    return Deed(
        id=str(record["id"]),
        name=str(record.get("name", "")),
        tier=str(record.get("tier", "light")).lower(),
        target=str(record.get("target", "")),
        range=str(record.get("range", "")),
        effects=DeedEffects(
            hit=str(effects.get("hit", "")),
            shadow=str(effects.get("shadow", "")),
            start=effects.get("start"),
            base=effects.get("base"),
            end=effects.get("end"),
        ),
        tags=tuple(record.get("tags", [])),
    )


def encounter_table_from_record(record: dict[str, Any]) -> EncounterTable:
    entries = tuple(
        EncounterTableEntry(
            creature_id=str(entry["creatureId"]),
            quantity=str(entry.get("quantity", "1")),
            weight=float(entry.get("weight", 0)),
        )
        for entry in record.get("entries", [])
    )
    return EncounterTable(
        id=str(record["id"]),
        name=str(record.get("name", "")),
        entries=entries,
        total_tr=_int(record.get("totalTR")),
    )


def _ordered(by_id: dict[str, Any], ids: Iterable[str]) -> list[Any]:
    return [by_id[item_id] for item_id in ids if item_id in by_id]


@dataclass
class InMemoryContentStore:
    creatures: dict[str, Creature]
    deeds: dict[str, Deed]
    encounter_tables: dict[str, EncounterTable]

    @classmethod
    def empty(cls) -> "InMemoryContentStore":
        return cls(creatures={}, deeds={}, encounter_tables={})

    @classmethod
    def from_export(cls, payload: dict[str, Any]) -> "InMemoryContentStore":
        creatures = [creature_from_record(item) for item in payload.get("creatures", [])]
        deeds = [deed_from_record(item) for item in payload.get("deeds", [])]
        tables = [encounter_table_from_record(item) for item in payload.get("encounterTables", [])]
        return cls(
            creatures={creature.id: creature for creature in creatures},
            deeds={deed.id: deed for deed in deeds},
            encounter_tables={table.id: table for table in tables},
        )

    @classmethod
    def from_json_file(cls, path: Path) -> "InMemoryContentStore":
        return cls.from_export(json.loads(path.read_text(encoding="utf-8")))

    async def get_creature_by_id(self, creature_id: str) -> Creature | None:
        return self.creatures.get(creature_id)

    async def get_creatures_by_ids(self, creature_ids: list[str]) -> list[Creature]:
        return _ordered(self.creatures, creature_ids)

    async def get_deeds_by_ids(self, deed_ids: list[str]) -> list[Deed]:
        return _ordered(self.deeds, deed_ids)

    async def get_encounter_table_by_id(self, table_id: str) -> EncounterTable | None:
        return self.encounter_tables.get(table_id)


@dataclass
class PostgresContentStore:
    database_url: str

    async def _connect(self) -> Any:
        import psycopg

        return await psycopg.AsyncConnection.connect(self.database_url)

    async def _fetch_records(self, table: str, ids: list[str]) -> dict[str, dict[str, Any]]:
        if not ids:
            return {}
        async with await self._connect() as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    f"SELECT id, data FROM {table} WHERE id = ANY(%s)",
                    (list(ids),),
                )
                rows = await cur.fetchall()

        records: dict[str, dict[str, Any]] = {}
        for row_id, data in rows:
            record = data if isinstance(data, dict) else json.loads(data)
            records[str(row_id)] = {**record, "id": str(row_id)}
        return records

    async def get_creature_by_id(self, creature_id: str) -> Creature | None:
        found = await self.get_creatures_by_ids([creature_id])
        return found[0] if found else None

    async def get_creatures_by_ids(self, creature_ids: list[str]) -> list[Creature]:
        records = await self._fetch_records("creatures", creature_ids)
        return [creature_from_record(record) for record in _ordered(records, creature_ids)]

    async def get_deeds_by_ids(self, deed_ids: list[str]) -> list[Deed]:
        records = await self._fetch_records("deeds", deed_ids)
        return [deed_from_record(record) for record in _ordered(records, deed_ids)]

    async def get_encounter_table_by_id(self, table_id: str) -> EncounterTable | None:
        records = await self._fetch_records("encounter_tables", [table_id])
        record = records.get(table_id)
        if record is None:
            return None
        return encounter_table_from_record(record)


def create_content_store(database_url: str | None, content_path: str | None = None) -> ContentStore:
    if database_url:
        return PostgresContentStore(database_url=database_url)
    if content_path:
        return InMemoryContentStore.from_json_file(Path(content_path))
    return InMemoryContentStore.empty()
