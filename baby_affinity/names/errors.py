"""Domain exceptions for name records.

Validation errors are raised at the boundary, before any state is
mutated, and always name the offending field.
"""


class NameRecordError(Exception):
    """Base exception for all name record errors."""


class NameValidationError(NameRecordError):
    """Raised when a name record field fails validation.

    Attributes:
        field: The field that failed validation.
        reason: Human-readable, actionable explanation.
    """

    def __init__(self, field: str, reason: str) -> None:
        """Initialize the validation error.

        Args:
            field: The field that failed validation.
            reason: Why the value was rejected.
        """
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")
