"""ELO-style affinity rating calculator.

Pure functions with no state and no I/O. A comparison is always one
name against either another name or the average rating of an opposing
group of names.

Rounding:
    - Updated ratings are rounded with the built-in ``round`` (half to even).
    - Averages are truncated toward zero.
"""

from collections.abc import Sequence
from typing import NamedTuple

from baby_affinity.rating.constants import K_FACTOR, MINIMUM_RATING, RATING_SCALE


class EmptyRatingGroupError(ValueError):
    """Raised when an average is requested for an empty group of ratings."""

    def __init__(self) -> None:
        """Initialize the error."""
        super().__init__("Cannot average an empty group of ratings")


class RatingUpdate(NamedTuple):
    """New ratings produced by a single comparison."""

    new_winner_rating: int
    new_loser_rating: int


def win_probability(rating_a: int, rating_b: int) -> float:
    """Probability that a side rated ``rating_a`` beats a side rated ``rating_b``.

    Args:
        rating_a: Rating of the first side.
        rating_b: Rating of the opposing side.

    Returns:
        Expected score of the first side in [0, 1].

    Examples:
        >>> win_probability(1200, 1200)
        0.5
    """
    return 1.0 / (1.0 + 10.0 ** ((rating_b - rating_a) / RATING_SCALE))


def update_ratings(
    winner_rating: int,
    loser_rating: int,
    k_factor: int = K_FACTOR,
    minimum: int = MINIMUM_RATING,
) -> RatingUpdate:
    """Compute the ratings of both sides after the winner beats the loser.

    Args:
        winner_rating: Current rating of the winner.
        loser_rating: Current rating of the loser.
        k_factor: Maximum adjustment for one comparison.
        minimum: Rating floor applied to both results.

    Returns:
        The new winner and loser ratings.

    Examples:
        >>> update_ratings(1200, 1200)
        RatingUpdate(new_winner_rating=1225, new_loser_rating=1175)
    """
    winner_expected = win_probability(winner_rating, loser_rating)
    loser_expected = 1.0 - winner_expected

    new_winner = round(winner_rating + k_factor * (1.0 - winner_expected))
    new_loser = round(loser_rating + k_factor * (0.0 - loser_expected))

    return RatingUpdate(
        new_winner_rating=max(new_winner, minimum),
        new_loser_rating=max(new_loser, minimum),
    )


def average_rating(ratings: Sequence[int]) -> int:
    """Average a non-empty group of ratings, truncated toward zero.

    Args:
        ratings: Ratings to average.

    Returns:
        The integer average.

    Raises:
        EmptyRatingGroupError: If ``ratings`` is empty.
    """
    if not ratings:
        raise EmptyRatingGroupError
    return int(sum(ratings) / len(ratings))


def group_rating(winner_ratings: Sequence[int], loser_ratings: Sequence[int]) -> int:
    """Rating of a round, used as the opponent of every name in it.

    The mean of the winners' average and the losers' average. If one side
    is empty the other side's average is used on its own.

    Args:
        winner_ratings: Ratings of the chosen names.
        loser_ratings: Ratings of the names left unchosen.

    Returns:
        The group rating.

    Raises:
        EmptyRatingGroupError: If both sides are empty.
    """
    if not winner_ratings:
        return average_rating(loser_ratings)
    if not loser_ratings:
        return average_rating(winner_ratings)
    return int((average_rating(winner_ratings) + average_rating(loser_ratings)) / 2)


def update_group_rating(
    individual_rating: int,
    opposing_group_ratings: Sequence[int],
    is_winner: bool,
    k_factor: int = K_FACTOR,
    minimum: int = MINIMUM_RATING,
) -> int:
    """Update one name's rating against the average of an opposing group.

    Args:
        individual_rating: Current rating of the name.
        opposing_group_ratings: Ratings of the opposing group.
        is_winner: Whether the name won the comparison.
        k_factor: Maximum adjustment for one comparison.
        minimum: Rating floor.

    Returns:
        The name's new rating.

    Raises:
        EmptyRatingGroupError: If the opposing group is empty.
    """
    opponent = average_rating(opposing_group_ratings)
    if is_winner:
        return update_ratings(individual_rating, opponent, k_factor, minimum).new_winner_rating
    return update_ratings(opponent, individual_rating, k_factor, minimum).new_loser_rating
