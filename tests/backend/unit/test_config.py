import pytest

from skirmish.backend.config import load_settings

_VARS = (
    "SKIRMISH_DATABASE_URL",
    "SKIRMISH_CONTENT_PATH",
    "SKIRMISH_HOST",
    "SKIRMISH_PORT",
    "SKIRMISH_LOG_LEVEL",
    "SKIRMISH_SEED",
)


def test_load_settings_reads_expected_env(monkeypatch) -> None:
    monkeypatch.setenv("SKIRMISH_DATABASE_URL", "postgresql://local")
    monkeypatch.setenv("SKIRMISH_CONTENT_PATH", "/srv/content.json")
    monkeypatch.setenv("SKIRMISH_HOST", "localhost")
    monkeypatch.setenv("SKIRMISH_PORT", "9000")
    monkeypatch.setenv("SKIRMISH_LOG_LEVEL", "debug")
    monkeypatch.setenv("SKIRMISH_SEED", "1234")

    settings = load_settings()

    assert settings.database_url == "postgresql://local"
    assert settings.content_path == "/srv/content.json"
    assert settings.host == "localhost"
    assert settings.port == 9000
    assert settings.log_level == "DEBUG"
    assert settings.seed == 1234


def test_load_settings_applies_defaults(monkeypatch) -> None:
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)

    settings = load_settings()

    assert settings.database_url is None
    assert settings.content_path is None
    assert settings.host == "127.0.0.1"
    assert settings.port == 8000
    assert settings.log_level == "INFO"
    assert settings.seed is None


def test_load_settings_rejects_non_numeric_port(monkeypatch) -> None:
    monkeypatch.setenv("SKIRMISH_PORT", "eighty")

    with pytest.raises(ValueError):
        load_settings()
