"""
SQLite Database Connection Manager and Schema
Handles persistent storage for entities and the combatants of an encounter.
"""

import sqlite3
import json
import logging
from pathlib import Path
from typing import Any, List, Self
from contextlib import contextmanager

from pydantic import TypeAdapter

from bsh.models import Combatant, CriticalFlag, Entity, InitiativeUpdate
from bsh.core.exceptions import StoreUpdateError

logger = logging.getLogger(__name__)

# Schema version for migrations
SCHEMA_VERSION = 1

SCHEMA_SQL = """
-- =============================================================================
-- SCHEMA VERSION TRACKING
-- =============================================================================
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY,
    applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

-- =============================================================================
-- ENTITIES TABLE
-- Player characters and creatures. The full sheet lives in data.
-- =============================================================================
CREATE TABLE IF NOT EXISTS entities (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    kind TEXT NOT NULL CHECK (kind IN ('character', 'creature')),
    data JSON NOT NULL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
CREATE INDEX IF NOT EXISTS idx_entities_kind ON entities(kind);

-- =============================================================================
-- COMBATANTS TABLE
-- Turn order participants. initiative and crit_flag are written by initiative.
-- =============================================================================
CREATE TABLE IF NOT EXISTS combatants (
    position INTEGER PRIMARY KEY AUTOINCREMENT,
    id TEXT NOT NULL UNIQUE,
    entity_id TEXT,                     -- may outlive the entity it points to
    initiative INTEGER,
    crit_flag TEXT CHECK (crit_flag IN ('critSuccess', 'critFailure')),
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
CREATE INDEX IF NOT EXISTS idx_combatants_entity ON combatants(entity_id);

CREATE TRIGGER IF NOT EXISTS update_entities_timestamp
    AFTER UPDATE ON entities
    BEGIN
        UPDATE entities SET updated_at = CURRENT_TIMESTAMP WHERE id = NEW.id;
    END;
"""


class Database:
    """SQLite database connection manager with schema initialization."""

    def __init__(self, db_path: Path | str | None = None):
        """
        Initialize database connection.

        Args:
            db_path: Path to SQLite database file.
                     Use ":memory:" for in-memory database.
                     None defaults to data/bsh.db
        """
        if db_path is None:
            db_path = Path("data") / "bsh.db"

        self.db_path = Path(db_path) if db_path != ":memory:" else db_path
        self._connection: sqlite3.Connection | None = None

        # Ensure data directory exists
        if isinstance(self.db_path, Path):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def connection(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._connection is None:
            self._connection = sqlite3.connect(
                self.db_path,
                detect_types=sqlite3.PARSE_DECLTYPES | sqlite3.PARSE_COLNAMES
            )
            # Enable foreign keys
            self._connection.execute("PRAGMA foreign_keys = ON")
            # Return dicts instead of tuples
            self._connection.row_factory = sqlite3.Row
        return self._connection

    def __enter__(self) -> Self:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()

    def close(self) -> None:
        """Close the database connection."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None

    def execute(self, query: str, params: tuple = ()) -> sqlite3.Cursor:
        return self.connection.execute(query, params)

    def executescript(self, script: str) -> sqlite3.Cursor:
        return self.connection.executescript(script)

    def commit(self) -> None:
        self.connection.commit()

    def rollback(self) -> None:
        self.connection.rollback()

    def fetch_one(self, query: str, params: tuple = ()) -> sqlite3.Row | None:
        """Execute query and fetch one result."""
        cursor = self.execute(query, params)
        return cursor.fetchone()

    def fetch_all(self, query: str, params: tuple = ()) -> list[sqlite3.Row]:
        """Execute query and fetch all results."""
        cursor = self.execute(query, params)
        return cursor.fetchall()

    @contextmanager
    def transaction(self):
        """Context manager for transactions with auto-commit/rollback."""
        try:
            yield
            self.commit()
        except Exception:
            self.rollback()
            raise

    def init_schema(self) -> None:
        """Initialize database schema."""
        self.executescript(SCHEMA_SQL)

        # Record schema version
        self.execute(
            "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
            (SCHEMA_VERSION,)
        )
        self.commit()

    def get_schema_version(self) -> int | None:
        """Get current schema version."""
        try:
            row = self.fetch_one("SELECT version FROM schema_version ORDER BY version DESC LIMIT 1")
            return row["version"] if row else None
        except sqlite3.OperationalError:
            return None

    def table_exists(self, table_name: str) -> bool:
        """Check if a table exists."""
        row = self.fetch_one(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
            (table_name,)
        )
        return row is not None


# ============================================================
# COMBATANT STORE
# ============================================================

_entity_adapter = TypeAdapter(Entity)


class SqliteCombatantStore:
    """CombatantStore backed by the entities and combatants tables."""

    def __init__(self, db: Database):
        self.db = db

    def save_entity(self, entity: Entity) -> None:
        with self.db.transaction():
            self.db.execute(
                """
                INSERT INTO entities (id, name, kind, data) VALUES (?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET name = excluded.name, kind = excluded.kind, data = excluded.data
                """,
                (entity.id, entity.name, entity.kind, entity.model_dump_json())
            )

    def add_combatant(self, combatant: Combatant) -> None:
        flag = combatant.critical_flag.value if combatant.critical_flag else None
        with self.db.transaction():
            self.db.execute(
                "INSERT INTO combatants (id, entity_id, initiative, crit_flag) VALUES (?, ?, ?, ?)",
                (combatant.id, combatant.entity_id, combatant.initiative, flag)
            )

    def get_entity(self, entity_id: str) -> Entity | None:
        row = self.db.fetch_one("SELECT data FROM entities WHERE id = ?", (entity_id,))
        if row is None:
            return None
        return _entity_adapter.validate_python(from_json(row["data"]))

    def find_combatant(self, combatant_id: str) -> Combatant | None:
        row = self.db.fetch_one("SELECT id, entity_id, initiative, crit_flag FROM combatants WHERE id = ?", (combatant_id,))
        return _row_to_combatant(row) if row else None

    def find_controlling_entity(self, combatant: Combatant) -> Entity | None:
        if combatant.entity_id is None:
            return None
        return self.get_entity(combatant.entity_id)

    def list_combatants(self) -> List[Combatant]:
        rows = self.db.fetch_all("SELECT id, entity_id, initiative, crit_flag FROM combatants ORDER BY position")
        return [_row_to_combatant(row) for row in rows]

    def batch_update(self, updates: List[InitiativeUpdate]) -> None:
        """Writes every update in one transaction. Any failure rolls the whole batch back."""
        params = [
            (update.rank, update.critical_flag.value if update.critical_flag else None, update.id)
            for update in updates
        ]
        try:
            with self.db.transaction():
                for param in params:
                    cursor = self.db.execute(
                        "UPDATE combatants SET initiative = ?, crit_flag = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                        param
                    )
                    if cursor.rowcount != 1:
                        raise StoreUpdateError(f"Unknown combatant in batch: {param[2]}")
        except sqlite3.Error as e:
            raise StoreUpdateError(f"Combatant batch update failed: {e}") from e
        logger.info(f"State applied: initiative for {len(updates)} combatant(s)")


def _row_to_combatant(row: sqlite3.Row) -> Combatant:
    return Combatant(
        id=row["id"],
        entity_id=row["entity_id"],
        initiative=row["initiative"],
        critical_flag=CriticalFlag(row["crit_flag"]) if row["crit_flag"] else None,
    )


# Helper function for JSON deserialization
def from_json(json_str: str | None) -> Any:
    """Deserialize JSON string from storage."""
    if json_str is None:
        return None
    return json.loads(json_str)
