"""Result models for round submission."""

from dataclasses import dataclass, field

from baby_affinity.names.models import NameRecord


@dataclass(frozen=True)
class NameUpdateOutcome:
    """Rating update applied (or not) to one name of a submitted round.

    Attributes:
        record: The name as it was presented in the round.
        is_winner: Whether the user chose the name.
        new_record: The persisted record, when the update succeeded.
        error: The error that prevented the update, when it failed.
    """

    record: NameRecord
    is_winner: bool
    new_record: NameRecord | None = None
    error: Exception | None = None

    @property
    def succeeded(self) -> bool:
        """Whether the new rating was persisted."""
        return self.error is None and self.new_record is not None

    @property
    def new_rating(self) -> int | None:
        """The persisted rating, or None if the update failed."""
        return self.new_record.rating if self.new_record else None


@dataclass
class SubmitResult:
    """Outcome of submitting one round.

    Attributes:
        group_rating: Rating every name in the round was compared against.
        outcomes: One outcome per presented or chosen name.
        reload_error: Why the next round could not be loaded, if it could not.
    """

    group_rating: int | None = None
    outcomes: list[NameUpdateOutcome] = field(default_factory=list)
    reload_error: Exception | None = None

    @property
    def succeeded(self) -> list[NameUpdateOutcome]:
        """Updates that were persisted."""
        return [o for o in self.outcomes if o.succeeded]

    @property
    def failed(self) -> list[NameUpdateOutcome]:
        """Updates that were not persisted."""
        return [o for o in self.outcomes if not o.succeeded]

    @property
    def all_succeeded(self) -> bool:
        """Whether every update was persisted."""
        return not self.failed

    @property
    def winners(self) -> list[NameUpdateOutcome]:
        """Outcomes of the chosen names."""
        return [o for o in self.outcomes if o.is_winner]

    @property
    def losers(self) -> list[NameUpdateOutcome]:
        """Outcomes of the names left unchosen."""
        return [o for o in self.outcomes if not o.is_winner]
