"""Selection session: one user's "pick names" rounds for one category."""

import uuid
from collections.abc import Sequence
from typing import TYPE_CHECKING

import structlog

from baby_affinity.names.errors import NameValidationError
from baby_affinity.names.models import Category, NameRecord
from baby_affinity.rating.calculator import group_rating, update_ratings
from baby_affinity.rating.constants import K_FACTOR, MINIMUM_RATING
from baby_affinity.sampler.constants import DEFAULT_ROUND_SIZE
from baby_affinity.sampler.sampler import CandidateSampler
from baby_affinity.session.constants import DEFAULT_MAX_SELECTIONS
from baby_affinity.session.models import NameUpdateOutcome, SubmitResult
from baby_affinity.session.state_machine import SessionState, SessionStateMachine
from baby_affinity.store.errors import NameStoreError
from baby_affinity.store.store import NameStore


if TYPE_CHECKING:
    from baby_affinity.settings.app import AppSettings

logger = structlog.get_logger()


class SelectionSession:
    """Presents rounds of names and turns the user's picks into ratings.

    The ``presented`` and ``chosen`` lists are owned by the session for the
    whole round; changes made to the store by others during a round do not
    alter what is shown. On submit, every chosen name wins and every
    remaining presented name loses against the round's group rating.

    Implements a state machine flow:
        IDLE -> PRESENTING -> SUBMITTING -> PRESENTING
    """

    def __init__(
        self,
        store: NameStore,
        category: Category,
        sampler: CandidateSampler | None = None,
        max_selections: int = DEFAULT_MAX_SELECTIONS,
        round_size: int = DEFAULT_ROUND_SIZE,
        k_factor: int = K_FACTOR,
        minimum_rating: int = MINIMUM_RATING,
        session_id: str | None = None,
    ) -> None:
        """Initialize the session in IDLE state.

        Args:
            store: Connected name store.
            category: Category every round is drawn from.
            sampler: Candidate sampler; a fresh one when omitted.
            max_selections: Most names the user may choose per round.
            round_size: Names presented per round.
            k_factor: Maximum rating adjustment per comparison.
            minimum_rating: Rating floor; may be raised above the store's
                floor but never lowered below it.
            session_id: Identifier for logging; generated when omitted.
        """
        if max_selections < 1:
            msg = f"max_selections must be at least 1, got {max_selections}"
            raise ValueError(msg)
        if minimum_rating < MINIMUM_RATING:
            msg = f"minimum_rating must be at least {MINIMUM_RATING}, got {minimum_rating}"
            raise ValueError(msg)

        self._store = store
        self._category = category
        self._sampler = sampler or CandidateSampler()
        self._max_selections = max_selections
        self._round_size = round_size
        self._k_factor = k_factor
        self._minimum_rating = minimum_rating
        self._session_id = session_id or str(uuid.uuid4())

        self._state_machine = SessionStateMachine(self._session_id)
        self._presented: list[NameRecord] = []
        self._chosen: list[NameRecord] = []
        self._round_number = 0

        self._log = logger.bind(
            component="session",
            session_id=self._session_id,
            category=category.label,
        )

    @classmethod
    def from_settings(
        cls,
        store: NameStore,
        category: Category,
        settings: "AppSettings",
        sampler: CandidateSampler | None = None,
    ) -> "SelectionSession":
        """Create a session configured from application settings."""
        return cls(
            store,
            category,
            sampler=sampler,
            max_selections=settings.max_selections,
            round_size=settings.round_size,
            k_factor=settings.k_factor,
        )

    @property
    def state(self) -> SessionState:
        """Get current session state."""
        return self._state_machine.state

    @property
    def session_id(self) -> str:
        """Get the session ID."""
        return self._session_id

    @property
    def category(self) -> Category:
        """Get the category rounds are drawn from."""
        return self._category

    @property
    def max_selections(self) -> int:
        """Most names the user may choose per round."""
        return self._max_selections

    @property
    def presented(self) -> tuple[NameRecord, ...]:
        """Names shown and not chosen, in display order."""
        return tuple(self._presented)

    @property
    def chosen(self) -> tuple[NameRecord, ...]:
        """Names chosen this round, in selection order."""
        return tuple(self._chosen)

    @property
    def is_at_capacity(self) -> bool:
        """Whether no more names can be chosen this round."""
        return len(self._chosen) >= self._max_selections

    @property
    def round_number(self) -> int:
        """Number of rounds loaded so far."""
        return self._round_number

    def load(self, population: Sequence[NameRecord] | None = None) -> tuple[NameRecord, ...]:
        """Sample a fresh round, discarding any current selections.

        Args:
            population: Names to sample from; the store's names in this
                category when omitted. Names of other categories are ignored.

        Returns:
            The presented names.

        Raises:
            PersistenceError: If the population cannot be read from the store.
        """
        if population is None:
            population = self._store.fetch_all(self._category)

        candidates = [record for record in population if record.category == self._category]
        if len(candidates) != len(population):
            self._log.warning(
                "foreign_category_names_ignored",
                ignored=len(population) - len(candidates),
            )

        self._presented = self._sampler.select_round(candidates, self._round_size)
        self._chosen = []
        self._round_number += 1
        self._state_machine.transition(SessionState.PRESENTING)

        self._log.info(
            "round_loaded",
            round_number=self._round_number,
            population=len(candidates),
            presented=len(self._presented),
        )
        return self.presented

    @staticmethod
    def _index_of(records: list[NameRecord], name: NameRecord) -> int | None:
        for index, record in enumerate(records):
            if record.identity == name.identity:
                return index
        return None

    def select(self, name: NameRecord) -> bool:
        """Move a presented name to the chosen names.

        Selecting at capacity, or a name that is not presented, does nothing.

        Args:
            name: The name to choose.

        Returns:
            True if the name was moved.
        """
        if not self._state_machine.is_presenting():
            return False

        if self.is_at_capacity:
            self._log.debug("selection_ignored", reason="at_capacity", text=name.text)
            return False

        index = self._index_of(self._presented, name)
        if index is None:
            self._log.debug("selection_ignored", reason="not_presented", text=name.text)
            return False

        self._chosen.append(self._presented.pop(index))
        return True

    def deselect(self, name: NameRecord) -> bool:
        """Move a chosen name back to the presented names.

        Args:
            name: The name to un-choose.

        Returns:
            True if the name was moved.
        """
        if not self._state_machine.is_presenting():
            return False

        index = self._index_of(self._chosen, name)
        if index is None:
            return False

        self._presented.append(self._chosen.pop(index))
        return True

    def submit(self) -> SubmitResult:
        """Apply the round's ratings and load the next round.

        Chosen names win and the remaining presented names lose against
        the group rating: the mean of the winners' and the losers' average
        ratings. With nothing chosen, every presented name loses against
        the average of the presented names.

        Each name is updated independently; a failure on one name is
        recorded in the result and does not stop the others.

        Returns:
            Per-name outcomes and the group rating used.

        Raises:
            SessionStateError: If no round is loaded.
        """
        self._state_machine.transition(SessionState.SUBMITTING)

        winners = list(self._chosen)
        losers = list(self._presented)
        result = SubmitResult()

        if winners or losers:
            result.group_rating = group_rating(
                [w.rating for w in winners], [loser.rating for loser in losers]
            )
            for record in winners:
                result.outcomes.append(self._apply(record, result.group_rating, is_winner=True))
            for record in losers:
                result.outcomes.append(self._apply(record, result.group_rating, is_winner=False))

        self._log.info(
            "round_submitted",
            round_number=self._round_number,
            winners=len(winners),
            losers=len(losers),
            group_rating=result.group_rating,
            updated=len(result.succeeded),
            failed=len(result.failed),
        )

        try:
            self.load()
        except NameStoreError as e:
            self._presented = []
            self._chosen = []
            self._state_machine.transition(SessionState.IDLE)
            result.reload_error = e
            self._log.error("next_round_load_failed", error=str(e))

        return result

    def _apply(self, record: NameRecord, opponent_rating: int, is_winner: bool) -> NameUpdateOutcome:
        """Persist one name's new rating against the group rating."""

        def mutate(current: NameRecord) -> NameRecord:
            if is_winner:
                new_rating = update_ratings(
                    current.rating, opponent_rating, self._k_factor, self._minimum_rating
                ).new_winner_rating
            else:
                new_rating = update_ratings(
                    opponent_rating, current.rating, self._k_factor, self._minimum_rating
                ).new_loser_rating
            return current.model_copy(
                update={
                    "rating": new_rating,
                    "times_evaluated": current.times_evaluated + 1,
                }
            )

        try:
            new_record = self._store.modify(record.identity, mutate)
        except (NameStoreError, NameValidationError) as e:
            self._log.warning(
                "rating_update_failed",
                text=record.text,
                is_winner=is_winner,
                error_type=type(e).__name__,
                error=str(e),
            )
            return NameUpdateOutcome(record=record, is_winner=is_winner, error=e)

        return NameUpdateOutcome(record=record, is_winner=is_winner, new_record=new_record)
