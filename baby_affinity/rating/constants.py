"""Constants for the rating module."""

# Maximum rating adjustment for a single comparison
K_FACTOR: int = 50

# Rating difference at which the stronger side is ten times as likely to win
RATING_SCALE: int = 400

# Rating assigned to a newly created name
DEFAULT_RATING: int = 1200

# Floor that no rating may fall below
MINIMUM_RATING: int = 100
