import json
import logging

import pytest

from skirmish.backend.migrate import content_rows, import_content, main


class _FakeCursor:
    def __init__(self, executed) -> None:
        self.executed = executed

    def __enter__(self):
        return self

    def __exit__(self, *exc) -> None:
        return None

    def execute(self, query, params=None) -> None:
        self.executed.append((query, params))


class _FakeConnection:
    def __init__(self) -> None:
        self.executed: list = []

    def cursor(self) -> _FakeCursor:
        return _FakeCursor(self.executed)


def test_content_rows_maps_export_keys_to_tables(caplog) -> None:
    export = {
        "creatures": [{"id": "ogre", "name": "Ogre"}, {"name": "Nameless"}],
        "encounterTables": [{"id": "swamp", "entries": []}],
    }

    with caplog.at_level(logging.WARNING):
        rows = list(content_rows(export))

    assert rows == [
        ("creatures", "ogre", json.dumps({"name": "Ogre"})),
        ("encounter_tables", "swamp", json.dumps({"entries": []})),
    ]
    assert "without id" in caplog.text


def test_import_content_upserts_each_record() -> None:
    conn = _FakeConnection()

    count = import_content(conn, {"deeds": [{"id": "jab", "tier": "light"}, {"id": "smash", "tier": "heavy"}]})

    assert count == 2
    assert all("ON CONFLICT (id)" in query for query, _ in conn.executed)
    assert conn.executed[0][1] == ("jab", json.dumps({"tier": "light"}))


def test_main_requires_database_url(monkeypatch) -> None:
    monkeypatch.delenv("SKIRMISH_DATABASE_URL", raising=False)

    with pytest.raises(RuntimeError, match="SKIRMISH_DATABASE_URL"):
        main([])
