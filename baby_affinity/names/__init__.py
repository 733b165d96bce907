"""Name records: the entities that are rated, sampled, and ranked."""

from baby_affinity.names.errors import NameRecordError, NameValidationError
from baby_affinity.names.models import Category, NameRecord, check_rating
from baby_affinity.names.text import (
    canonicalize_name_text,
    filter_name_text,
    validate_name_text,
)


__all__ = [
    # Errors
    "NameRecordError",
    "NameValidationError",
    # Models
    "Category",
    "NameRecord",
    "check_rating",
    # Text utilities
    "canonicalize_name_text",
    "filter_name_text",
    "validate_name_text",
]
