"""Constants for name records."""

# Characters allowed in name text besides letters
ALLOWED_SPECIAL_CHARACTERS: str = "-' "

# Characters after which the next letter starts a new word
WORD_BREAK_CHARACTERS: frozenset[str] = frozenset({" ", "'", "-"})
