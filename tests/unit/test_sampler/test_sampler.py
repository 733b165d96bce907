"""Unit tests for the candidate sampler."""

import random

import pytest

from baby_affinity.names.models import Category, NameRecord
from baby_affinity.sampler.constants import DEFAULT_ROUND_SIZE
from baby_affinity.sampler.sampler import CandidateSampler, stratify


def _text(index: int) -> str:
    """Unique letters-only name text for an index."""
    return "Name " + "".join(chr(ord("a") + int(digit)) for digit in str(index))


def make_population(
    evaluated: int = 0,
    unevaluated: int = 0,
    category: Category = Category.FEMALE,
) -> list[NameRecord]:
    """Build evaluated names with distinct ratings, then unevaluated names."""
    records = [
        NameRecord(
            text=_text(i),
            category=category,
            rating=1000 + 10 * i,
            times_evaluated=1 + i % 3,
        )
        for i in range(evaluated)
    ]
    records += [
        NameRecord(text=_text(evaluated + i), category=category)
        for i in range(unevaluated)
    ]
    return records


def identities(records: list[NameRecord]) -> set[str]:
    """Identities of records."""
    return {r.identity for r in records}


class TestStratify:
    """Tests for stratify."""

    def test_empty(self) -> None:
        """An empty population has empty strata."""
        strata = stratify([])
        assert strata.unevaluated == []
        assert strata.above_median == []
        assert strata.top == []

    def test_splits_unevaluated(self) -> None:
        """Unevaluated names are kept apart from evaluated ones."""
        population = make_population(evaluated=4, unevaluated=3)
        strata = stratify(population)

        assert len(strata.unevaluated) == 3
        assert all(r.is_unevaluated for r in strata.unevaluated)
        assert len(strata.below_median) + len(strata.above_median) == 4

    def test_median_split(self) -> None:
        """Evaluated names split at the median, lower half first."""
        population = make_population(evaluated=40)
        strata = stratify(population)

        assert len(strata.below_median) == 20
        assert len(strata.above_median) == 20
        assert max(r.rating for r in strata.below_median) < min(
            r.rating for r in strata.above_median
        )

    def test_top_is_highest_fifth_of_upper_half(self) -> None:
        """Top stratum is the highest 20% of the upper half."""
        population = make_population(evaluated=40)
        strata = stratify(population)

        assert len(strata.top) == 4
        assert len(strata.upper_middle) == 16
        assert {r.rating for r in strata.top} == {1360, 1370, 1380, 1390}

    def test_top_has_at_least_one(self) -> None:
        """A non-empty upper half always has a top name."""
        strata = stratify(make_population(evaluated=2))
        assert len(strata.top) == 1
        assert strata.upper_middle == []

    def test_repeated_records_counted_once(self) -> None:
        """The same record listed twice is stratified once."""
        population = make_population(unevaluated=3)
        strata = stratify(population + population[:1])
        assert len(strata.unevaluated) == 3

    def test_equal_ratings_do_not_fail(self) -> None:
        """Equal ratings are ordered deterministically."""
        population = [
            NameRecord(text=_text(i), category=Category.MALE, rating=1200, times_evaluated=1)
            for i in range(6)
        ]
        first = stratify(population)
        second = stratify(list(reversed(population)))
        assert [r.identity for r in first.above_median] == [
            r.identity for r in second.above_median
        ]


class TestCandidateSampler:
    """Tests for CandidateSampler.select_round."""

    @pytest.fixture
    def sampler(self) -> CandidateSampler:
        """Sampler with a seeded random source."""
        return CandidateSampler(rng=random.Random(42))

    def test_empty_population(self, sampler: CandidateSampler) -> None:
        """An empty population gives an empty round."""
        assert sampler.select_round([]) == []

    def test_zero_target(self, sampler: CandidateSampler) -> None:
        """A non-positive target gives an empty round."""
        assert sampler.select_round(make_population(unevaluated=5), target_size=0) == []

    def test_default_round_size(self, sampler: CandidateSampler) -> None:
        """A large population gives a full round."""
        picks = sampler.select_round(make_population(evaluated=30, unevaluated=30))
        assert len(picks) == DEFAULT_ROUND_SIZE

    def test_small_population_returned_whole(self, sampler: CandidateSampler) -> None:
        """A population smaller than the round is returned in full."""
        population = make_population(evaluated=3, unevaluated=2)
        picks = sampler.select_round(population)
        assert identities(picks) == identities(population)
        assert len(picks) == 5

    def test_small_rated_population_returned_whole(self, sampler: CandidateSampler) -> None:
        """A small fully evaluated population is returned in full."""
        population = make_population(evaluated=5)
        assert identities(sampler.select_round(population)) == identities(population)

    def test_no_duplicates(self, sampler: CandidateSampler) -> None:
        """A round never repeats a name."""
        population = make_population(evaluated=12, unevaluated=4)
        for _ in range(50):
            picks = sampler.select_round(population + population)
            assert len(picks) == len(identities(picks))

    def test_picks_come_from_population(self, sampler: CandidateSampler) -> None:
        """Every pick is a member of the population."""
        population = make_population(evaluated=25, unevaluated=25)
        picks = sampler.select_round(population)
        assert identities(picks) <= identities(population)

    def test_population_not_mutated(self, sampler: CandidateSampler) -> None:
        """The input sequence is left as it was."""
        population = make_population(evaluated=25, unevaluated=5)
        before = list(population)
        sampler.select_round(population)
        assert population == before

    def test_fresh_phase_quotas(self, sampler: CandidateSampler) -> None:
        """With unevaluated names, rounds are 2 top names and 8 unseen."""
        population = make_population(evaluated=30, unevaluated=30)
        strata = stratify(population)

        for _ in range(20):
            picks = sampler.select_round(population)
            assert len(identities(picks) & identities(strata.unevaluated)) == 8
            assert len(identities(picks) & identities(strata.top)) == 2

    def test_rated_phase_quotas(self, sampler: CandidateSampler) -> None:
        """Once all names are evaluated, rounds are 1 low, 3 top, 6 upper middle."""
        population = make_population(evaluated=40)
        strata = stratify(population)

        for _ in range(20):
            picks = identities(sampler.select_round(population))
            assert len(picks & identities(strata.below_median)) == 1
            assert len(picks & identities(strata.top)) == 3
            assert len(picks & identities(strata.upper_middle)) == 6

    def test_backfill_prefers_unevaluated(self, sampler: CandidateSampler) -> None:
        """A short top stratum is topped up with unevaluated names."""
        population = make_population(evaluated=3, unevaluated=20)
        strata = stratify(population)

        picks = identities(sampler.select_round(population))

        assert len(picks) == DEFAULT_ROUND_SIZE
        assert len(picks & identities(strata.top)) == 1
        assert len(picks & identities(strata.unevaluated)) == 9

    def test_backfill_from_evaluated(self, sampler: CandidateSampler) -> None:
        """With few unevaluated names, evaluated names fill the round."""
        population = make_population(evaluated=20, unevaluated=2)
        picks = identities(sampler.select_round(population))

        assert len(picks) == DEFAULT_ROUND_SIZE
        assert identities(stratify(population).unevaluated) <= picks

    def test_quotas_scale_with_round_size(self, sampler: CandidateSampler) -> None:
        """A smaller round scales each stratum's draws."""
        population = make_population(evaluated=30, unevaluated=30)
        strata = stratify(population)

        picks = identities(sampler.select_round(population, target_size=5))

        assert len(picks) == 5
        assert len(picks & identities(strata.top)) == 1
        assert len(picks & identities(strata.unevaluated)) == 4

    def test_seeded_rounds_reproducible(self) -> None:
        """The same seed draws the same round."""
        population = make_population(evaluated=30, unevaluated=30)
        first = CandidateSampler(rng=random.Random(7)).select_round(population)
        second = CandidateSampler(rng=random.Random(7)).select_round(population)
        assert [r.identity for r in first] == [r.identity for r in second]

    def test_every_name_eventually_presented(self, sampler: CandidateSampler) -> None:
        """Repeated rounds reach every unevaluated name."""
        population = make_population(unevaluated=25)
        seen: set[str] = set()
        for _ in range(60):
            seen |= identities(sampler.select_round(population))
        assert seen == identities(population)

    def test_default_rng(self) -> None:
        """The sampler works without an explicit random source."""
        picks = CandidateSampler().select_round(make_population(unevaluated=12))
        assert len(picks) == DEFAULT_ROUND_SIZE
