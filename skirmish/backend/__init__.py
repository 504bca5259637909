"""Backend package for the live encounter engine."""

from .config import BackendSettings, load_settings
from .content import ContentStore, InMemoryContentStore, PostgresContentStore, create_content_store
from .controller import EncounterController
from .initializer import EncounterInitializationError, initialize_roster
from .overlay import effective_attributes
from .turn_order import calculate_turn_order

__all__ = [
    "BackendSettings",
    "calculate_turn_order",
    "ContentStore",
    "create_content_store",
    "effective_attributes",
    "EncounterController",
    "EncounterInitializationError",
    "InMemoryContentStore",
    "initialize_roster",
    "load_settings",
    "PostgresContentStore",
]
