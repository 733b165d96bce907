"""Unit tests for schema migrations."""

import sqlite3
from collections.abc import Generator

import pytest

from baby_affinity.store.errors import MigrationError
from baby_affinity.store.migrations import (
    CURRENT_VERSION,
    MIGRATIONS,
    Migration,
    MigrationManager,
    pending_migrations,
)


@pytest.fixture
def conn() -> Generator[sqlite3.Connection]:
    """Create an in-memory database connection."""
    connection = sqlite3.connect(":memory:")
    yield connection
    connection.close()


class TestMigrationConstants:
    """Tests for migration constants."""

    def test_migrations_in_order(self) -> None:
        """Test migrations are in ascending version order."""
        versions = [m.version for m in MIGRATIONS]
        assert versions == sorted(versions)

    def test_current_version_matches_latest_migration(self) -> None:
        """Test current version matches the latest migration."""
        assert MIGRATIONS[-1].version == CURRENT_VERSION

    def test_migrations_have_sql(self) -> None:
        """Test every migration carries statements and a description."""
        for migration in MIGRATIONS:
            assert migration.statements
            assert all(s.strip() for s in migration.statements)
            assert migration.description


class TestPendingMigrations:
    """Tests for pending_migrations function."""

    def test_from_zero(self) -> None:
        """Test getting all migrations from version 0."""
        assert pending_migrations(0) == MIGRATIONS

    def test_from_current(self) -> None:
        """Test nothing is pending at the current version."""
        assert pending_migrations(CURRENT_VERSION) == []

    def test_partial(self) -> None:
        """Test only newer migrations are pending."""
        pending = pending_migrations(1)
        assert [m.version for m in pending] == list(range(2, CURRENT_VERSION + 1))


class TestMigrationManager:
    """Tests for MigrationManager."""

    def test_fresh_database_version_zero(self, conn: sqlite3.Connection) -> None:
        """Test a new database reports version 0."""
        assert MigrationManager(conn).get_current_version() == 0

    def test_apply_all(self, conn: sqlite3.Connection) -> None:
        """Test applying migrations creates the names table."""
        manager = MigrationManager(conn)

        applied = manager.apply_migrations()

        assert applied == [m.version for m in MIGRATIONS]
        assert manager.get_current_version() == CURRENT_VERSION
        tables = {
            row[0]
            for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
        }
        assert "names" in tables
        assert conn.execute("PRAGMA user_version").fetchone()[0] == CURRENT_VERSION

    def test_apply_is_idempotent(self, conn: sqlite3.Connection) -> None:
        """Test applying twice does nothing the second time."""
        manager = MigrationManager(conn)
        manager.apply_migrations()
        assert manager.apply_migrations() == []

    def test_unique_text_per_category(self, conn: sqlite3.Connection) -> None:
        """Test the schema rejects a repeated (text, category) pair."""
        MigrationManager(conn).apply_migrations()
        insert = (
            "INSERT INTO names (identity, text, category, rating) VALUES (?, ?, ?, 1200)"
        )
        conn.execute(insert, ("a", "Amara", 0))
        conn.execute(insert, ("b", "Amara", 1))

        with pytest.raises(sqlite3.IntegrityError):
            conn.execute(insert, ("c", "Amara", 0))

    def test_category_constraint(self, conn: sqlite3.Connection) -> None:
        """Test the schema rejects unknown category values."""
        MigrationManager(conn).apply_migrations()
        with pytest.raises(sqlite3.IntegrityError):
            conn.execute(
                "INSERT INTO names (identity, text, category, rating) VALUES ('x', 'Lily', 5, 1200)"
            )

    def test_failed_migration_raises(
        self, conn: sqlite3.Connection, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test a broken migration raises MigrationError with its version."""
        broken = [Migration(version=1, description="broken", statements=("CREATE TABLE (",))]
        monkeypatch.setattr("baby_affinity.store.migrations.MIGRATIONS", broken)

        with pytest.raises(MigrationError) as exc_info:
            MigrationManager(conn).apply_migrations()

        assert exc_info.value.version == 1
        assert MigrationManager(conn).get_current_version() == 0

    def test_failed_migration_is_atomic(
        self, conn: sqlite3.Connection, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test statements before the failing one are rolled back."""
        broken = [
            Migration(
                version=1,
                description="half broken",
                statements=("CREATE TABLE partial (x INTEGER)", "CREATE TABLE ("),
            )
        ]
        monkeypatch.setattr("baby_affinity.store.migrations.MIGRATIONS", broken)

        with pytest.raises(MigrationError):
            MigrationManager(conn).apply_migrations()

        tables = [
            row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
        ]
        assert "partial" not in tables

    def test_earlier_migrations_kept_on_failure(
        self, conn: sqlite3.Connection, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test a failure keeps the migrations applied before it."""
        steps = [
            *MIGRATIONS,
            Migration(version=CURRENT_VERSION + 1, description="broken", statements=("NOPE",)),
        ]
        monkeypatch.setattr("baby_affinity.store.migrations.MIGRATIONS", steps)

        with pytest.raises(MigrationError) as exc_info:
            MigrationManager(conn).apply_migrations()

        assert exc_info.value.version == CURRENT_VERSION + 1
        assert MigrationManager(conn).get_current_version() == CURRENT_VERSION
