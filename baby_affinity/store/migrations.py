"""SQLite schema migrations for the name store.

The schema version is kept in ``PRAGMA user_version``. Each migration's
statements and its version bump commit together or not at all.
"""

import sqlite3
from dataclasses import dataclass

import structlog

from baby_affinity.store.errors import MigrationError


logger = structlog.get_logger()

CURRENT_VERSION = 2


@dataclass(frozen=True)
class Migration:
    """One schema step.

    Attributes:
        version: Schema version after the step.
        description: What the step changes.
        statements: DDL statements, run in order.
    """

    version: int
    description: str
    statements: tuple[str, ...]


MIGRATIONS: list[Migration] = [
    Migration(
        version=1,
        description="names table",
        statements=(
            # rowid keeps insertion order for rank ties
            """
            CREATE TABLE names (
                identity TEXT PRIMARY KEY,
                text TEXT NOT NULL,
                category INTEGER NOT NULL CHECK (category IN (0, 1)),
                rating INTEGER NOT NULL,
                times_evaluated INTEGER NOT NULL DEFAULT 0 CHECK (times_evaluated >= 0),
                is_favorite INTEGER NOT NULL DEFAULT 0,
                UNIQUE (text, category)
            )
            """,
            "CREATE INDEX idx_names_category ON names(category)",
        ),
    ),
    Migration(
        version=2,
        description="leaderboard and unevaluated lookup indexes",
        statements=(
            "CREATE INDEX idx_names_category_rating ON names(category, rating DESC)",
            "CREATE INDEX idx_names_category_evaluated ON names(category, times_evaluated)",
        ),
    ),
]


def pending_migrations(current_version: int) -> list[Migration]:
    """Migrations newer than ``current_version``, oldest first."""
    return sorted(
        (m for m in MIGRATIONS if m.version > current_version),
        key=lambda m: m.version,
    )


class MigrationManager:
    """Brings a connection's schema up to ``CURRENT_VERSION``."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        """Initialize the migration manager.

        Args:
            connection: SQLite connection to migrate.
        """
        self._conn = connection
        self._log = logger.bind(component="store", operation="migration")

    def get_current_version(self) -> int:
        """Schema version of the database; 0 for a new database."""
        return self._conn.execute("PRAGMA user_version").fetchone()[0]

    def _apply(self, migration: Migration) -> None:
        self._conn.execute("BEGIN")
        try:
            for statement in migration.statements:
                self._conn.execute(statement)
            # PRAGMA does not accept bound parameters
            self._conn.execute(f"PRAGMA user_version = {int(migration.version)}")
        except sqlite3.Error:
            self._conn.rollback()
            raise
        self._conn.commit()

    def apply_migrations(self) -> list[int]:
        """Apply every pending migration.

        Returns:
            Versions applied, in order.

        Raises:
            MigrationError: If a migration fails. Its changes are rolled
                back and earlier migrations stay applied.
        """
        current = self.get_current_version()
        pending = pending_migrations(current)
        if not pending:
            self._log.debug("schema_up_to_date", version=current)
            return []

        applied: list[int] = []
        for migration in pending:
            try:
                self._apply(migration)
            except sqlite3.Error as e:
                self._log.error(
                    "migration_failed",
                    version=migration.version,
                    applied=applied,
                    error=str(e),
                )
                raise MigrationError(migration.version, str(e)) from e

            applied.append(migration.version)
            self._log.info(
                "migration_applied",
                version=migration.version,
                description=migration.description,
            )

        return applied
