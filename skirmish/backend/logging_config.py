"""Console logging setup using rich."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: int | str = logging.INFO) -> None:
    """Route the root logger through a RichHandler."""
    handler = RichHandler(
        console=Console(width=120, stderr=True),
        show_time=True,
        show_level=True,
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s - %(message)s", datefmt="[%X]"))

    logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]", handlers=[handler], force=True)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("psycopg").setLevel(logging.WARNING)
