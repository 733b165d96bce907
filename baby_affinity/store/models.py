"""Result models for name store write operations."""

from dataclasses import dataclass, field
from enum import Enum

from baby_affinity.names.models import Category, NameRecord


class OutcomeStatus(str, Enum):
    """What happened to a single item of a write operation.

    - CREATED: Name was inserted
    - UPDATED: Existing name was updated in place
    - DELETED: Name was removed
    - ABSENT: Name was already gone (deletes are idempotent)
    - DUPLICATE: Insert rejected, (text, category) already stored
    - INVALID: Input failed validation before reaching the database
    - FAILED: Database rejected or failed the operation
    """

    CREATED = "CREATED"
    UPDATED = "UPDATED"
    DELETED = "DELETED"
    ABSENT = "ABSENT"
    DUPLICATE = "DUPLICATE"
    INVALID = "INVALID"
    FAILED = "FAILED"


_SUCCESS_STATUSES = frozenset(
    {
        OutcomeStatus.CREATED,
        OutcomeStatus.UPDATED,
        OutcomeStatus.DELETED,
        OutcomeStatus.ABSENT,
    }
)


@dataclass(frozen=True)
class ItemOutcome:
    """Outcome of one item in a bulk operation.

    Attributes:
        text: Name text as supplied.
        category: Name category, if known.
        status: What happened.
        record: The stored record, when the item succeeded.
        error: The error that stopped the item, when it failed.
    """

    text: str
    category: Category | None
    status: OutcomeStatus
    record: NameRecord | None = None
    error: Exception | None = None

    @property
    def succeeded(self) -> bool:
        """Whether the item was applied (or was already in the target state)."""
        return self.status in _SUCCESS_STATUSES


@dataclass
class BulkResult:
    """Per-item outcomes of a bulk operation.

    A bulk operation never aborts on an item failure; every item's
    outcome is recorded here instead.

    Attributes:
        operation: Name of the bulk operation.
        outcomes: One outcome per input item, in input order.
    """

    operation: str
    outcomes: list[ItemOutcome] = field(default_factory=list)

    def add(self, outcome: ItemOutcome) -> None:
        """Append an item outcome."""
        self.outcomes.append(outcome)

    def extend(self, other: "BulkResult") -> None:
        """Append all outcomes of another result."""
        self.outcomes.extend(other.outcomes)

    @property
    def succeeded(self) -> list[ItemOutcome]:
        """Outcomes that were applied."""
        return [o for o in self.outcomes if o.succeeded]

    @property
    def failed(self) -> list[ItemOutcome]:
        """Outcomes that were not applied."""
        return [o for o in self.outcomes if not o.succeeded]

    @property
    def all_succeeded(self) -> bool:
        """Whether every item was applied."""
        return not self.failed

    def count(self, status: OutcomeStatus) -> int:
        """Number of outcomes with the given status."""
        return sum(1 for o in self.outcomes if o.status == status)

    def summary(self) -> dict[str, int]:
        """Outcome counts keyed by status value, omitting zero counts."""
        counts: dict[str, int] = {}
        for outcome in self.outcomes:
            counts[outcome.status.value] = counts.get(outcome.status.value, 0) + 1
        return counts
