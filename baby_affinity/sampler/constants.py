"""Constants for the candidate sampler."""

# Names presented per round
DEFAULT_ROUND_SIZE: int = 10

# Share of the above-median names treated as the top stratum
TOP_STRATUM_PERCENT: int = 20

# Per-round draws while some names are still unevaluated (sums to DEFAULT_ROUND_SIZE)
FRESH_TOP_DRAWS: int = 2
FRESH_UNEVALUATED_DRAWS: int = 8

# Per-round draws once every name has been evaluated (sums to DEFAULT_ROUND_SIZE)
RATED_BELOW_MEDIAN_DRAWS: int = 1
RATED_TOP_DRAWS: int = 3
RATED_UPPER_MIDDLE_DRAWS: int = 6
