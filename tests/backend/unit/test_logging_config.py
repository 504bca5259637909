import logging

from rich.logging import RichHandler

from skirmish.backend.__main__ import parse_args
from skirmish.backend.logging_config import setup_logging


def test_setup_logging_installs_rich_handler() -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging("DEBUG")

        assert root.level == logging.DEBUG
        assert any(isinstance(handler, RichHandler) for handler in root.handlers)
        assert logging.getLogger("uvicorn.access").level == logging.WARNING
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


def test_parse_args_defaults_come_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("SKIRMISH_HOST", "0.0.0.0")
    monkeypatch.setenv("SKIRMISH_PORT", "9100")
    monkeypatch.delenv("SKIRMISH_LOG_LEVEL", raising=False)

    defaults = parse_args([])
    overridden = parse_args(["--port", "9200", "--log-level", "warning"])

    assert (defaults.host, defaults.port, defaults.log_level) == ("0.0.0.0", 9100, "INFO")
    assert overridden.port == 9200
    assert overridden.log_level == "warning"
