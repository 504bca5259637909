"""Apply the content schema and optionally load a content export into PostgreSQL."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Iterator

from skirmish.backend.config import load_settings
from skirmish.backend.logging_config import setup_logging

logger = logging.getLogger(__name__)

# Export key -> table name
EXPORT_TABLES: dict[str, str] = {
    "creatures": "creatures",
    "deeds": "deeds",
    "encounterTables": "encounter_tables",
}


def content_rows(export: dict[str, Any]) -> Iterator[tuple[str, str, str]]:
    """Yield ``(table, id, json)`` rows for every record in an export."""
    for key, table in EXPORT_TABLES.items():
        for record in export.get(key, []):
            if "id" not in record:
                logger.warning("Skipping %s record without id", key)
                continue
            data = {k: v for k, v in record.items() if k != "id"}
            yield table, str(record["id"]), json.dumps(data)


def import_content(conn: Any, export: dict[str, Any]) -> int:
    count = 0
    with conn.cursor() as cur:
        for table, record_id, data in content_rows(export):
            cur.execute(
                f"INSERT INTO {table} (id, data) VALUES (%s, %s::jsonb) "
                "ON CONFLICT (id) DO UPDATE SET data = EXCLUDED.data",
                (record_id, data),
            )
            count += 1
    return count


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Apply the skirmish content schema")
    parser.add_argument("--content", type=Path, help="JSON content export to upsert after the schema")
    args = parser.parse_args(argv)

    settings = load_settings()
    if not settings.database_url:
        raise RuntimeError("SKIRMISH_DATABASE_URL is required for migration")
    setup_logging(settings.log_level)

    import psycopg

    schema_sql = Path(__file__).with_name("db_schema.sql").read_text(encoding="utf-8")

    with psycopg.connect(settings.database_url) as conn:
        with conn.cursor() as cur:
            cur.execute(schema_sql)
        logger.info("Schema applied")
        if args.content is not None:
            export = json.loads(args.content.read_text(encoding="utf-8"))
            logger.info("Imported %s content records from %s", import_content(conn, export), args.content)
        conn.commit()


if __name__ == "__main__":
    main()
