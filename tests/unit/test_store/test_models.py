"""Unit tests for store result models and metrics."""

from baby_affinity.names.models import Category, NameRecord
from baby_affinity.store.errors import DuplicateNameError
from baby_affinity.store.metrics import StoreMetrics
from baby_affinity.store.models import BulkResult, ItemOutcome, OutcomeStatus


class TestItemOutcome:
    """Tests for ItemOutcome."""

    def test_success_statuses(self) -> None:
        """Created, updated, deleted, and absent items count as applied."""
        for status in (
            OutcomeStatus.CREATED,
            OutcomeStatus.UPDATED,
            OutcomeStatus.DELETED,
            OutcomeStatus.ABSENT,
        ):
            assert ItemOutcome("Lily", Category.FEMALE, status).succeeded

    def test_failure_statuses(self) -> None:
        """Duplicate, invalid, and failed items are not applied."""
        for status in (OutcomeStatus.DUPLICATE, OutcomeStatus.INVALID, OutcomeStatus.FAILED):
            assert not ItemOutcome("Lily", Category.FEMALE, status).succeeded


class TestBulkResult:
    """Tests for BulkResult."""

    def test_empty(self) -> None:
        """An empty result succeeded trivially."""
        result = BulkResult(operation="insert_many")
        assert result.all_succeeded
        assert result.summary() == {}

    def test_counts_and_summary(self) -> None:
        """Outcomes are counted by status."""
        record = NameRecord.create("Lily", Category.FEMALE)
        result = BulkResult(operation="insert_many")
        result.add(ItemOutcome("Lily", Category.FEMALE, OutcomeStatus.CREATED, record=record))
        result.add(
            ItemOutcome(
                "Lily",
                Category.FEMALE,
                OutcomeStatus.DUPLICATE,
                error=DuplicateNameError("Lily", "female"),
            )
        )
        result.add(ItemOutcome("R2D2", None, OutcomeStatus.INVALID))

        assert result.count(OutcomeStatus.CREATED) == 1
        assert result.count(OutcomeStatus.DELETED) == 0
        assert result.summary() == {"CREATED": 1, "DUPLICATE": 1, "INVALID": 1}
        assert [o.status for o in result.failed] == [
            OutcomeStatus.DUPLICATE,
            OutcomeStatus.INVALID,
        ]
        assert len(result.succeeded) == 1
        assert not result.all_succeeded

    def test_extend_keeps_order(self) -> None:
        """Extending appends the other result's outcomes in order."""
        first = BulkResult(operation="load")
        first.add(ItemOutcome("Amara", Category.FEMALE, OutcomeStatus.INVALID))
        second = BulkResult(operation="insert_many")
        second.add(ItemOutcome("Lily", Category.FEMALE, OutcomeStatus.CREATED))

        first.extend(second)

        assert [o.text for o in first.outcomes] == ["Amara", "Lily"]
        assert first.operation == "load"


class TestStoreMetrics:
    """Tests for StoreMetrics."""

    def test_singleton_and_reset(self) -> None:
        """The instance is shared until reset."""
        StoreMetrics.reset()
        metrics = StoreMetrics.get_instance()
        assert StoreMetrics.get_instance() is metrics

        StoreMetrics.reset()
        assert StoreMetrics.get_instance() is not metrics

    def test_recording(self) -> None:
        """Recorded events show up in to_dict."""
        StoreMetrics.reset()
        metrics = StoreMetrics.get_instance()
        metrics.record_insert()
        metrics.record_duplicate()
        metrics.record_update()
        metrics.record_deletes(3)
        metrics.record_tx_duration(2.0)
        metrics.record_tx_duration(4.0)
        metrics.record_tx_failure()

        assert metrics.to_dict() == {
            "inserts_total": 1,
            "duplicates_total": 1,
            "updates_total": 1,
            "deletes_total": 3,
            "tx_duration_ms": 6.0,
            "tx_count": 2,
            "tx_failures_total": 1,
        }
        assert metrics.avg_tx_duration_ms == 3.0

    def test_average_without_transactions(self) -> None:
        """Average duration is zero before any transaction."""
        StoreMetrics.reset()
        assert StoreMetrics.get_instance().avg_tx_duration_ms == 0.0
