"""Rank queries over the current persisted ratings."""

from dataclasses import dataclass

import structlog

from baby_affinity.names.models import Category, NameRecord
from baby_affinity.store.store import NameStore


logger = structlog.get_logger()


@dataclass(frozen=True)
class RankedName:
    """A name with its 1-based rank in its category.

    Attributes:
        rank: Position by descending rating; 1 is the highest rating.
        record: The ranked name.
    """

    rank: int
    record: NameRecord


class RankQueryService:
    """Answers "where does this name stand" from the store on every call.

    Nothing is cached, so a query made right after a rating update
    reflects it. Equal ratings are ordered by insertion order.
    """

    def __init__(self, store: NameStore) -> None:
        """Initialize the service.

        Args:
            store: Connected name store.
        """
        self._store = store
        self._log = logger.bind(component="ranking")

    def rank(self, record: NameRecord, category: Category | None = None) -> int | None:
        """Get the 1-based rank of a name within a category.

        Args:
            record: The name to rank.
            category: Category to rank within; defaults to the record's own.

        Returns:
            The rank, or None if the name is not stored in that category.
        """
        if category is not None and category != record.category:
            return None

        position = self._store.rank(record, record.category)
        if position is None:
            self._log.debug("rank_not_found", text=record.text, category=record.category.label)
        return position

    def rank_all(self, category: Category) -> list[RankedName]:
        """Rank every name in a category.

        Args:
            category: Category to rank.

        Returns:
            Ranked names, rank 1 first, with ranks 1..N and no gaps.
        """
        return [
            RankedName(rank=position, record=record)
            for position, record in enumerate(self._store.fetch_sorted_by_rating(category), start=1)
        ]

    def top_names(self, category: Category, limit: int | None = None) -> list[RankedName]:
        """Get the highest rated names in a category.

        Args:
            category: Category to rank.
            limit: Maximum number of names; all names when None.

        Returns:
            Ranked names, rank 1 first.
        """
        ranked = self.rank_all(category)
        return ranked if limit is None else ranked[: max(limit, 0)]

    def top_favorites(self, category: Category) -> list[RankedName]:
        """Get favorite names with their overall rank, best first.

        Args:
            category: Category to rank.

        Returns:
            Favorite names with their rank among all names of the category.
        """
        return [ranked for ranked in self.rank_all(category) if ranked.record.is_favorite]
