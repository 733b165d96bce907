"""Constants for the selection session."""

# Most names a user may choose in one round
DEFAULT_MAX_SELECTIONS: int = 5
