"""ELO-style affinity rating calculations."""

from baby_affinity.rating.calculator import (
    EmptyRatingGroupError,
    RatingUpdate,
    average_rating,
    group_rating,
    update_group_rating,
    update_ratings,
    win_probability,
)
from baby_affinity.rating.constants import (
    DEFAULT_RATING,
    K_FACTOR,
    MINIMUM_RATING,
    RATING_SCALE,
)


__all__ = [
    "DEFAULT_RATING",
    "K_FACTOR",
    "MINIMUM_RATING",
    "RATING_SCALE",
    "EmptyRatingGroupError",
    "RatingUpdate",
    "average_rating",
    "group_rating",
    "update_group_rating",
    "update_ratings",
    "win_probability",
]
