"""Stratified candidate sampling for selection rounds."""

import random
from collections.abc import Sequence
from dataclasses import dataclass, field

import structlog

from baby_affinity.names.models import NameRecord
from baby_affinity.sampler.constants import (
    DEFAULT_ROUND_SIZE,
    FRESH_TOP_DRAWS,
    FRESH_UNEVALUATED_DRAWS,
    RATED_BELOW_MEDIAN_DRAWS,
    RATED_TOP_DRAWS,
    RATED_UPPER_MIDDLE_DRAWS,
    TOP_STRATUM_PERCENT,
)


logger = structlog.get_logger()


@dataclass(frozen=True)
class Strata:
    """A category's population split for sampling.

    Attributes:
        unevaluated: Names never evaluated, in population order.
        below_median: Evaluated names below the median rating, ascending.
        above_median: Evaluated names at or above the median, ascending.
        top: Highest-rated part of ``above_median``, ascending.
        upper_middle: ``above_median`` without ``top``, ascending.
    """

    unevaluated: list[NameRecord] = field(default_factory=list)
    below_median: list[NameRecord] = field(default_factory=list)
    above_median: list[NameRecord] = field(default_factory=list)
    top: list[NameRecord] = field(default_factory=list)
    upper_middle: list[NameRecord] = field(default_factory=list)


def stratify(population: Sequence[NameRecord]) -> Strata:
    """Split a population into sampling strata.

    Records repeated in ``population`` (same identity) are counted once.

    Args:
        population: Names of one category.

    Returns:
        The population's strata.
    """
    seen: set[str] = set()
    unevaluated: list[NameRecord] = []
    evaluated: list[NameRecord] = []

    for record in population:
        if record.identity in seen:
            continue
        seen.add(record.identity)
        (unevaluated if record.is_unevaluated else evaluated).append(record)

    evaluated.sort(key=lambda r: (r.rating, r.identity))
    median_index = len(evaluated) // 2
    below_median = evaluated[:median_index]
    above_median = evaluated[median_index:]

    top_count = 0
    if above_median:
        top_count = max(1, len(above_median) * TOP_STRATUM_PERCENT // 100)
    split = len(above_median) - top_count

    return Strata(
        unevaluated=unevaluated,
        below_median=below_median,
        above_median=above_median,
        top=above_median[split:],
        upper_middle=above_median[:split],
    )


def _scaled(draws: int, target_size: int) -> int:
    """Scale a per-round draw count from the default round size."""
    return draws * target_size // DEFAULT_ROUND_SIZE


class CandidateSampler:
    """Selects the names to present in the next round.

    While some names are unevaluated, rounds are mostly unseen names plus
    a couple of top-rated ones. Once everything has been evaluated, rounds
    mix one below-median name, a few top names, and the upper middle.
    Short strata are topped up from the rest of the population, so a round
    is only smaller than requested when the population is.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        """Initialize the sampler.

        Args:
            rng: Random source; a fresh ``random.Random`` when omitted.
        """
        self._rng = rng or random.Random()  # noqa: S311
        self._log = logger.bind(component="sampler")

    def _draw(self, pool: Sequence[NameRecord], count: int) -> list[NameRecord]:
        return self._rng.sample(list(pool), min(count, len(pool)))

    def select_round(
        self,
        population: Sequence[NameRecord],
        target_size: int = DEFAULT_ROUND_SIZE,
    ) -> list[NameRecord]:
        """Draw a shuffled round of distinct names.

        The population is never mutated.

        Args:
            population: Names of one category.
            target_size: Maximum number of names to return.

        Returns:
            Up to ``target_size`` distinct names in random order.
        """
        if target_size <= 0 or not population:
            return []

        strata = stratify(population)

        if strata.unevaluated:
            picks = self._draw(strata.top, _scaled(FRESH_TOP_DRAWS, target_size))
            picks += self._draw(
                strata.unevaluated, _scaled(FRESH_UNEVALUATED_DRAWS, target_size)
            )
        else:
            picks = self._draw(
                strata.below_median, _scaled(RATED_BELOW_MEDIAN_DRAWS, target_size)
            )
            picks += self._draw(strata.top, _scaled(RATED_TOP_DRAWS, target_size))
            picks += self._draw(
                strata.upper_middle, _scaled(RATED_UPPER_MIDDLE_DRAWS, target_size)
            )

        picks = picks[:target_size]
        stratified_count = len(picks)

        if len(picks) < target_size:
            picks += self._backfill(strata, picks, target_size - len(picks))

        self._rng.shuffle(picks)

        self._log.debug(
            "round_sampled",
            population=len(population),
            unevaluated=len(strata.unevaluated),
            stratified=stratified_count,
            backfilled=len(picks) - stratified_count,
            round_size=len(picks),
        )
        return picks

    def _backfill(
        self, strata: Strata, picks: list[NameRecord], count: int
    ) -> list[NameRecord]:
        """Pick extra names not yet in the round, unevaluated names first."""
        taken = {record.identity for record in picks}

        unevaluated = [r for r in strata.unevaluated if r.identity not in taken]
        extra = self._draw(unevaluated, count)

        if len(extra) < count:
            evaluated = [
                r
                for r in strata.below_median + strata.above_median
                if r.identity not in taken
            ]
            extra += self._draw(evaluated, count - len(extra))

        return extra
