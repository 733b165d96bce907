"""SQLite name store implementation."""

import sqlite3
import threading
import time
import uuid
from collections.abc import Callable, Generator, Iterable
from contextlib import contextmanager
from pathlib import Path

import structlog

from baby_affinity.names.errors import NameValidationError
from baby_affinity.names.models import Category, NameRecord, check_rating
from baby_affinity.names.text import canonicalize_name_text
from baby_affinity.store.errors import (
    ConnectionError as StoreConnectionError,
    DuplicateNameError,
    NameNotFoundError,
    NameStoreError,
    PersistenceError,
)
from baby_affinity.store.metrics import StoreMetrics, TransactionContext
from baby_affinity.store.migrations import CURRENT_VERSION, MigrationManager
from baby_affinity.store.models import BulkResult, ItemOutcome, OutcomeStatus


logger = structlog.get_logger()

MEMORY_DB = ":memory:"

# Ties in rating keep insertion order
_RANK_ORDER = "rating DESC, rowid ASC"


class NameStore:
    """SQLite store for name records.

    Every write runs in its own ``BEGIN IMMEDIATE`` transaction while
    holding a store-wide lock, so a read-modify-write of one record is
    atomic against other writers in this process and against other
    connections to the same database file.
    """

    def __init__(self, db_path: Path | str, run_id: str | None = None) -> None:
        """Initialize the name store.

        Args:
            db_path: Path to SQLite database file, or ``":memory:"``.
            run_id: Optional identifier for logging context.
        """
        self._in_memory = str(db_path) == MEMORY_DB
        self._db_path = Path(db_path) if isinstance(db_path, str) else db_path
        self._run_id = run_id or str(uuid.uuid4())
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.RLock()
        self._metrics = StoreMetrics.get_instance()
        self._log = logger.bind(
            component="store",
            run_id=self._run_id,
            db_path=str(self._db_path),
        )

    @property
    def db_path(self) -> Path:
        """Get the database path."""
        return self._db_path

    @property
    def is_connected(self) -> bool:
        """Check if connected to database."""
        return self._conn is not None

    def connect(self) -> None:
        """Open connection to database and apply migrations.

        Creates the database file and parent directories if they don't exist.

        Raises:
            MigrationError: If the schema cannot be brought up to date; the
                connection is closed and the store stays disconnected.
        """
        if self._conn is not None:
            return

        if not self._in_memory:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)

        self._log.info("connecting_to_database")

        conn = sqlite3.connect(
            MEMORY_DB if self._in_memory else str(self._db_path),
            check_same_thread=False,
        )
        conn.row_factory = sqlite3.Row
        try:
            if not self._in_memory:
                conn.execute("PRAGMA journal_mode=WAL")
                conn.execute("PRAGMA synchronous=NORMAL")

            migration_mgr = MigrationManager(conn)
            old_version = migration_mgr.get_current_version()
            applied = migration_mgr.apply_migrations()
        except Exception:
            conn.close()
            raise

        # Transactions are explicit from here on
        conn.isolation_level = None
        self._conn = conn

        self._log.info(
            "database_connected",
            old_version=old_version,
            new_version=CURRENT_VERSION,
            migrations_applied=applied,
        )

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
                self._log.info("database_closed")

    def __enter__(self) -> "NameStore":
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(
        self,
        exc_type: type | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Context manager exit."""
        self.close()

    def _ensure_connected(self) -> sqlite3.Connection:
        """Ensure database is connected.

        Returns:
            The database connection.

        Raises:
            StoreConnectionError: If not connected.
        """
        if self._conn is None:
            raise StoreConnectionError("Database not connected. Call connect() first.")
        return self._conn

    @contextmanager
    def _transaction(
        self, operation: str
    ) -> Generator[tuple[sqlite3.Connection, TransactionContext]]:
        """Context manager for write transactions with timing and logging.

        Args:
            operation: Name of the operation for logging.

        Yields:
            The connection and a transaction context with timing information.

        Raises:
            PersistenceError: If SQLite fails; the transaction is rolled back.
        """
        with self._lock:
            conn = self._ensure_connected()
            tx_id = str(uuid.uuid4())[:8]
            start_ns = time.perf_counter_ns()
            ctx = TransactionContext(
                tx_id=tx_id, start_time_ns=start_ns, operation=operation
            )

            self._log.debug("transaction_started", tx_id=tx_id, op=operation)

            try:
                conn.execute("BEGIN IMMEDIATE")
            except sqlite3.Error as e:
                self._metrics.record_tx_failure()
                self._log.error("transaction_begin_failed", tx_id=tx_id, op=operation, error=str(e))
                raise PersistenceError(operation, str(e)) from e

            try:
                yield conn, ctx
                conn.execute("COMMIT")
            except Exception as e:
                # No-op when SQLite already rolled back (e.g. SQLITE_FULL)
                conn.rollback()
                self._metrics.record_tx_failure()
                duration_ms = (time.perf_counter_ns() - start_ns) / 1_000_000
                self._log.warning(
                    "transaction_rolled_back",
                    tx_id=tx_id,
                    op=operation,
                    duration_ms=round(duration_ms, 2),
                    error_type=type(e).__name__,
                )
                if isinstance(e, sqlite3.Error):
                    raise PersistenceError(operation, str(e)) from e
                raise

            duration_ms = (time.perf_counter_ns() - start_ns) / 1_000_000
            self._metrics.record_tx_duration(duration_ms)
            self._log.debug(
                "transaction_complete",
                tx_id=tx_id,
                op=operation,
                affected_rows=ctx.affected_rows,
                duration_ms=round(duration_ms, 2),
            )

    def _query(self, operation: str, sql: str, params: tuple[object, ...] = ()) -> list[sqlite3.Row]:
        """Run a read query.

        Raises:
            PersistenceError: If SQLite fails.
        """
        with self._lock:
            conn = self._ensure_connected()
            try:
                return conn.execute(sql, params).fetchall()
            except sqlite3.Error as e:
                self._log.error("query_failed", op=operation, error=str(e))
                raise PersistenceError(operation, str(e)) from e

    def _row_to_record(self, row: sqlite3.Row) -> NameRecord:
        """Convert a database row to a NameRecord."""
        return NameRecord(
            identity=row["identity"],
            text=row["text"],
            category=row["category"],
            rating=row["rating"],
            times_evaluated=row["times_evaluated"],
            is_favorite=bool(row["is_favorite"]),
        )

    def _select(
        self,
        operation: str,
        where: str = "",
        params: tuple[object, ...] = (),
        order_by: str = "rowid ASC",
    ) -> list[NameRecord]:
        sql = "SELECT * FROM names"
        if where:
            sql += f" WHERE {where}"
        sql += f" ORDER BY {order_by}"
        return [self._row_to_record(row) for row in self._query(operation, sql, params)]

    # ===== Fetch =====

    def fetch_all(self, category: Category | None = None) -> list[NameRecord]:
        """Fetch all names in insertion order.

        Args:
            category: Optional category filter.

        Returns:
            Matching name records.
        """
        if category is None:
            return self._select("fetch_all")
        return self._select("fetch_all", "category = ?", (category.value,))

    def get(self, identity: str) -> NameRecord | None:
        """Fetch a name by identity.

        Args:
            identity: Record identity.

        Returns:
            The record, or None if not found.
        """
        records = self._select("get", "identity = ?", (identity,))
        return records[0] if records else None

    def fetch_by_text(self, text: str, category: Category) -> NameRecord | None:
        """Fetch a name by text within a category.

        The text is canonicalized first, so lookups ignore case and
        surrounding or repeated whitespace.

        Args:
            text: Name text.
            category: Name category.

        Returns:
            The record, or None if not found.
        """
        canonical = canonicalize_name_text(text)
        records = self._select(
            "fetch_by_text",
            "text = ? AND category = ?",
            (canonical, category.value),
        )

        if len(records) > 1:
            self._log.error(
                "duplicate_names_detected",
                text=canonical,
                category=category.label,
                count=len(records),
            )

        return records[0] if records else None

    def fetch_by_partial_text(self, partial_text: str, category: Category) -> list[NameRecord]:
        """Fetch names whose text contains ``partial_text``, ignoring case.

        Args:
            partial_text: Substring to search for.
            category: Name category.

        Returns:
            Matching records in insertion order.
        """
        return self._select(
            "fetch_by_partial_text",
            "category = ? AND instr(lower(text), lower(?)) > 0",
            (category.value, partial_text.strip()),
        )

    def fetch_by_evaluated_count(self, count: int, category: Category) -> list[NameRecord]:
        """Fetch names evaluated exactly ``count`` times.

        Args:
            count: Evaluation count to match.
            category: Name category.

        Returns:
            Matching records in insertion order.
        """
        return self._select(
            "fetch_by_evaluated_count",
            "category = ? AND times_evaluated = ?",
            (category.value, count),
        )

    def fetch_favorites(self, category: Category) -> list[NameRecord]:
        """Fetch favorite names in a category.

        Args:
            category: Name category.

        Returns:
            Favorite records in insertion order.
        """
        return self._select(
            "fetch_favorites", "category = ? AND is_favorite = 1", (category.value,)
        )

    def fetch_sorted_by_rating(self, category: Category) -> list[NameRecord]:
        """Fetch names in a category by descending rating.

        Equal ratings keep insertion order.

        Args:
            category: Name category.

        Returns:
            Records, highest rating first.
        """
        return self._select(
            "fetch_sorted_by_rating",
            "category = ?",
            (category.value,),
            order_by=_RANK_ORDER,
        )

    def rank(self, record: NameRecord, category: Category | None = None) -> int | None:
        """Get the 1-based rank of a name within its category.

        Uses the same ordering as ``fetch_sorted_by_rating`` and reads the
        current persisted ratings.

        Args:
            record: The name to rank.
            category: Category to rank within; defaults to the record's own.

        Returns:
            The rank, or None if the name is not stored in that category.
        """
        category = record.category if category is None else category
        rows = self._query(
            "rank",
            f"""
            SELECT position FROM (
                SELECT identity,
                       ROW_NUMBER() OVER (ORDER BY {_RANK_ORDER}) AS position
                FROM names
                WHERE category = ?
            )
            WHERE identity = ?
            """,  # noqa: S608
            (category.value, record.identity),
        )
        return rows[0]["position"] if rows else None

    def count(self, category: Category | None = None) -> int:
        """Count stored names.

        Args:
            category: Optional category filter.

        Returns:
            Number of names.
        """
        if category is None:
            rows = self._query("count", "SELECT COUNT(*) FROM names")
        else:
            rows = self._query(
                "count", "SELECT COUNT(*) FROM names WHERE category = ?", (category.value,)
            )
        return rows[0][0]

    def is_empty(self) -> bool:
        """Check whether the store holds no names."""
        return self.count() == 0

    # ===== Insert =====

    def insert(self, record: NameRecord) -> NameRecord:
        """Insert a new name.

        Args:
            record: The record to insert.

        Returns:
            The inserted record.

        Raises:
            DuplicateNameError: If (text, category) or the identity already exists.
            PersistenceError: If SQLite fails.
        """
        with self._transaction("insert") as (conn, ctx):
            existing = conn.execute(
                "SELECT identity FROM names WHERE (text = ? AND category = ?) OR identity = ?",
                (record.text, record.category.value, record.identity),
            ).fetchone()

            if existing is not None:
                self._metrics.record_duplicate()
                self._log.warning(
                    "duplicate_name_rejected",
                    text=record.text,
                    category=record.category.label,
                )
                raise DuplicateNameError(record.text, record.category.label)

            conn.execute(
                """
                INSERT INTO names (identity, text, category, rating, times_evaluated, is_favorite)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    record.identity,
                    record.text,
                    record.category.value,
                    record.rating,
                    record.times_evaluated,
                    1 if record.is_favorite else 0,
                ),
            )
            ctx.add_affected_rows(1)

        self._metrics.record_insert()
        return record

    def insert_many(self, records: Iterable[NameRecord]) -> BulkResult:
        """Insert names one by one, recording each outcome.

        A duplicate or failed item never stops the remaining items.

        Args:
            records: Records to insert.

        Returns:
            Per-item outcomes.
        """
        result = BulkResult(operation="insert_many")

        for record in records:
            try:
                stored = self.insert(record)
            except DuplicateNameError as e:
                result.add(
                    ItemOutcome(record.text, record.category, OutcomeStatus.DUPLICATE, error=e)
                )
            except NameStoreError as e:
                result.add(
                    ItemOutcome(record.text, record.category, OutcomeStatus.FAILED, error=e)
                )
            else:
                result.add(
                    ItemOutcome(record.text, record.category, OutcomeStatus.CREATED, record=stored)
                )

        self._log.info("insert_many_complete", **result.summary())
        return result

    # ===== Update =====

    def _write_mutable_fields(self, conn: sqlite3.Connection, record: NameRecord) -> int:
        check_rating(record.rating)
        if record.times_evaluated < 0:
            raise NameValidationError("times_evaluated", "evaluation count must not be negative")
        cursor = conn.execute(
            """
            UPDATE names
            SET rating = ?, times_evaluated = ?, is_favorite = ?
            WHERE identity = ?
            """,
            (
                record.rating,
                record.times_evaluated,
                1 if record.is_favorite else 0,
                record.identity,
            ),
        )
        return cursor.rowcount

    def update(self, record: NameRecord) -> NameRecord:
        """Persist the rating, evaluation count, and favorite flag of a name.

        Text and category are immutable and are never written.

        Args:
            record: The record with its new values.

        Returns:
            The persisted record.

        Raises:
            NameNotFoundError: If the name is not stored.
            NameValidationError: If the rating is below the floor.
            PersistenceError: If SQLite fails.
        """
        with self._transaction("update") as (conn, ctx):
            affected = self._write_mutable_fields(conn, record)
            if affected == 0:
                raise NameNotFoundError(record.identity)
            ctx.add_affected_rows(affected)

        self._metrics.record_update()
        return record

    def modify(self, identity: str, mutate: Callable[[NameRecord], NameRecord]) -> NameRecord:
        """Atomically read, transform, and write back one name.

        ``mutate`` receives the currently persisted record and returns the
        record to store. No other writer can change the name in between.

        Args:
            identity: Identity of the name to modify.
            mutate: Function from the current record to the new record.

        Returns:
            The persisted record.

        Raises:
            NameNotFoundError: If the name is not stored.
            NameValidationError: If the new rating is below the floor.
            PersistenceError: If SQLite fails.
        """
        with self._transaction("modify") as (conn, ctx):
            row = conn.execute("SELECT * FROM names WHERE identity = ?", (identity,)).fetchone()
            if row is None:
                raise NameNotFoundError(identity)

            current = self._row_to_record(row)
            updated = mutate(current)
            if updated.identity != identity:
                raise NameValidationError("identity", "modify must not change the identity")

            ctx.add_affected_rows(self._write_mutable_fields(conn, updated))

        self._metrics.record_update()
        return updated

    # ===== Delete =====

    def delete(self, record: NameRecord) -> bool:
        """Delete a name. Deleting an absent name is not an error.

        Args:
            record: The record to delete.

        Returns:
            True if a row was removed, False if it was already absent.
        """
        with self._transaction("delete") as (conn, ctx):
            cursor = conn.execute("DELETE FROM names WHERE identity = ?", (record.identity,))
            ctx.add_affected_rows(cursor.rowcount)

        self._metrics.record_deletes(cursor.rowcount)
        return cursor.rowcount > 0

    def delete_many(self, records: Iterable[NameRecord]) -> BulkResult:
        """Delete names one by one, recording each outcome.

        Args:
            records: Records to delete.

        Returns:
            Per-item outcomes.
        """
        result = BulkResult(operation="delete_many")

        for record in records:
            try:
                removed = self.delete(record)
            except NameStoreError as e:
                result.add(ItemOutcome(record.text, record.category, OutcomeStatus.FAILED, error=e))
            else:
                status = OutcomeStatus.DELETED if removed else OutcomeStatus.ABSENT
                result.add(ItemOutcome(record.text, record.category, status, record=record))

        self._log.info("delete_many_complete", **result.summary())
        return result

    def delete_all(self) -> int:
        """Delete every name.

        Returns:
            Number of names deleted.
        """
        with self._transaction("delete_all") as (conn, ctx):
            cursor = conn.execute("DELETE FROM names")
            ctx.add_affected_rows(cursor.rowcount)

        self._metrics.record_deletes(cursor.rowcount)
        self._log.info("names_cleared", count=cursor.rowcount)
        return cursor.rowcount

    # ===== Stats =====

    def get_schema_version(self) -> int:
        """Get current schema version."""
        with self._lock:
            return MigrationManager(self._ensure_connected()).get_current_version()
