"""Data models for name records."""

import uuid
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from baby_affinity.names.errors import NameValidationError
from baby_affinity.names.text import validate_name_text
from baby_affinity.rating.constants import DEFAULT_RATING, MINIMUM_RATING


class Category(int, Enum):
    """Partition of names by intended sex.

    Ranking and sampling never cross categories.
    """

    FEMALE = 0
    MALE = 1

    @classmethod
    def parse(cls, value: "str | int | Category") -> "Category":
        """Parse a category from a name, a synonym, or its stored value.

        Accepts ``female``/``girl``/``woman`` and ``male``/``boy``/``man``
        in any case, or the stored integer value.

        Raises:
            NameValidationError: If the value is not a known category.
        """
        if isinstance(value, Category):
            return value
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                raise NameValidationError("category", f"unknown category {value!r}") from None
        if not isinstance(value, str):
            raise NameValidationError("category", f"unknown category {value!r}")

        match value.strip().lower():
            case "female" | "girl" | "woman":
                return cls.FEMALE
            case "male" | "boy" | "man":
                return cls.MALE
        raise NameValidationError(
            "category", f"unknown category {value!r}; expected 'female' or 'male'"
        )

    @property
    def label(self) -> str:
        """Lowercase name used in logs and configuration."""
        return self.name.lower()

    @property
    def child_naming(self) -> str:
        """``Girl`` or ``Boy``."""
        return "Girl" if self is Category.FEMALE else "Boy"

    @property
    def adult_naming(self) -> str:
        """``Woman`` or ``Man``."""
        return "Woman" if self is Category.FEMALE else "Man"


def _new_identity() -> str:
    return uuid.uuid4().hex


class NameRecord(BaseModel):
    """A candidate name and the user's affinity for it.

    Records are immutable; every mutation returns a new record with the
    same identity, which the store then persists.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    identity: str = Field(
        default_factory=_new_identity, min_length=1, description="Stable identifier"
    )
    text: Annotated[str, Field(min_length=1, description="Canonical name text")]
    category: Category = Field(description="Female or male")
    rating: Annotated[int, Field(description="Affinity rating")] = DEFAULT_RATING
    times_evaluated: Annotated[int, Field(ge=0, description="Completed comparisons")] = 0
    is_favorite: bool = Field(default=False, description="User-toggled favorite flag")

    @field_validator("text", mode="before")
    @classmethod
    def canonicalize_text(cls, v: Any) -> str:
        """Validate and canonicalize the name text."""
        if not isinstance(v, str):
            raise NameValidationError("text", f"expected a string, got {type(v).__name__}")
        return validate_name_text(v)

    @field_validator("category", mode="before")
    @classmethod
    def coerce_category(cls, v: Any) -> Category:
        """Coerce strings and stored integers to Category."""
        return Category.parse(v)

    @field_validator("rating")
    @classmethod
    def check_rating_floor(cls, v: int) -> int:
        """Reject ratings below the floor."""
        return check_rating(v)

    @classmethod
    def create(
        cls,
        text: str,
        category: "Category | str",
        rating: int = DEFAULT_RATING,
    ) -> "NameRecord":
        """Create a new, never-evaluated name record.

        Args:
            text: Name text; canonicalized before storing.
            category: Category or category synonym.
            rating: Initial rating.

        Returns:
            The new record.

        Raises:
            NameValidationError: If any field is invalid.
        """
        return cls(
            text=text,
            category=Category.parse(category),
            rating=rating,
        )

    @property
    def is_unevaluated(self) -> bool:
        """Whether the name has never taken part in a completed round."""
        return self.times_evaluated == 0

    def with_rating(self, rating: int) -> "NameRecord":
        """Return a copy with a new rating.

        Raises:
            NameValidationError: If the rating is below the floor.
        """
        return self.model_copy(update={"rating": check_rating(rating)})

    def evaluated(self) -> "NameRecord":
        """Return a copy with the evaluation count incremented."""
        return self.model_copy(update={"times_evaluated": self.times_evaluated + 1})

    def toggled_favorite(self) -> "NameRecord":
        """Return a copy with the favorite flag flipped."""
        return self.model_copy(update={"is_favorite": not self.is_favorite})

    def reset(self) -> "NameRecord":
        """Return a copy with rating, evaluation count, and favorite reset."""
        return self.model_copy(
            update={
                "rating": DEFAULT_RATING,
                "times_evaluated": 0,
                "is_favorite": False,
            }
        )


def check_rating(rating: int) -> int:
    """Validate a rating supplied from outside the calculator.

    Raises:
        NameValidationError: If the rating is below the floor.
    """
    if rating < MINIMUM_RATING:
        raise NameValidationError(
            "rating", f"rating {rating} is below the minimum of {MINIMUM_RATING}"
        )
    return rating
