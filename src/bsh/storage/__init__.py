"""
Storage layer for combatants and the entities that control them.

Provides:
- CombatantStore protocol and an in-memory implementation
- SQLite database for persistent encounters
"""

from bsh.storage.store import CombatantStore, InMemoryCombatantStore
from bsh.storage.database import Database, SqliteCombatantStore, from_json, SCHEMA_VERSION

__all__ = [
    # Store
    "CombatantStore",
    "InMemoryCombatantStore",
    # Database
    "Database",
    "SqliteCombatantStore",
    "from_json",
    "SCHEMA_VERSION",
]
