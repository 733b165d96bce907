"""Metrics collection for the name store."""

from dataclasses import dataclass, field
from typing import ClassVar


@dataclass
class StoreMetrics:
    """Metrics for name store operations.

    Attributes:
        inserts_total: Names inserted.
        duplicates_total: Inserts rejected as duplicates.
        updates_total: Names updated in place.
        deletes_total: Names deleted.
        tx_duration_ms: Cumulative transaction duration in milliseconds.
        tx_count: Number of committed transactions.
        tx_failures_total: Number of rolled back transactions.
    """

    inserts_total: int = 0
    duplicates_total: int = 0
    updates_total: int = 0
    deletes_total: int = 0
    tx_duration_ms: float = 0.0
    tx_count: int = 0
    tx_failures_total: int = 0

    _instance: ClassVar["StoreMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "StoreMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_insert(self) -> None:
        """Record an inserted name."""
        self.inserts_total += 1

    def record_duplicate(self) -> None:
        """Record a rejected duplicate."""
        self.duplicates_total += 1

    def record_update(self) -> None:
        """Record an updated name."""
        self.updates_total += 1

    def record_deletes(self, count: int) -> None:
        """Record deleted names.

        Args:
            count: Number of names deleted.
        """
        self.deletes_total += count

    def record_tx_duration(self, duration_ms: float) -> None:
        """Record transaction duration.

        Args:
            duration_ms: Duration in milliseconds.
        """
        self.tx_duration_ms += duration_ms
        self.tx_count += 1

    def record_tx_failure(self) -> None:
        """Record a rolled back transaction."""
        self.tx_failures_total += 1

    def to_dict(self) -> dict[str, float | int]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "inserts_total": self.inserts_total,
            "duplicates_total": self.duplicates_total,
            "updates_total": self.updates_total,
            "deletes_total": self.deletes_total,
            "tx_duration_ms": self.tx_duration_ms,
            "tx_count": self.tx_count,
            "tx_failures_total": self.tx_failures_total,
        }

    @property
    def avg_tx_duration_ms(self) -> float:
        """Average committed transaction duration in milliseconds."""
        if self.tx_count == 0:
            return 0.0
        return self.tx_duration_ms / self.tx_count


@dataclass
class TransactionContext:
    """Context for a single transaction with timing.

    Attributes:
        tx_id: Unique transaction identifier.
        start_time_ns: Start time in nanoseconds.
        operation: The operation being performed.
    """

    tx_id: str
    start_time_ns: int
    operation: str
    affected_rows: int = field(default=0)

    def add_affected_rows(self, rows: int) -> None:
        """Add to the affected row count.

        Args:
            rows: Number of rows affected.
        """
        self.affected_rows += rows
