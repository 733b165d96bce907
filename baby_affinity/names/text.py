"""Name text filtering and canonicalization.

Canonical form is what the store compares on, so two inputs that differ
only in case or whitespace refer to the same name.
"""

import re

from baby_affinity.names.constants import ALLOWED_SPECIAL_CHARACTERS, WORD_BREAK_CHARACTERS
from baby_affinity.names.errors import NameValidationError


_WHITESPACE_RE = re.compile(r"\s+")


def _is_allowed(char: str) -> bool:
    return char.isalpha() or char in ALLOWED_SPECIAL_CHARACTERS


def filter_name_text(raw: str) -> str:
    """Drop every character that is not a letter or an allowed special character.

    Args:
        raw: Free-form user input.

    Returns:
        The input with disallowed characters removed.

    Examples:
        >>> filter_name_text("Zo3e!")
        'Zoe'
    """
    return "".join(char for char in raw if _is_allowed(char))


def canonicalize_name_text(raw: str) -> str:
    """Trim, collapse whitespace, and capitalize each word start.

    A word starts at the beginning of the text and after a space,
    apostrophe, or hyphen.

    Args:
        raw: Name text.

    Returns:
        Canonical name text.

    Examples:
        >>> canonicalize_name_text("  mary-KATE   o'neil ")
        "Mary-Kate O'Neil"
    """
    collapsed = _WHITESPACE_RE.sub(" ", raw.strip())

    chars: list[str] = []
    at_word_start = True
    for char in collapsed:
        chars.append(char.upper() if at_word_start else char.lower())
        at_word_start = char in WORD_BREAK_CHARACTERS
    return "".join(chars)


def validate_name_text(raw: str) -> str:
    """Validate name text and return its canonical form.

    Args:
        raw: Name text.

    Returns:
        Canonical name text.

    Raises:
        NameValidationError: If the text is empty or has invalid characters.
    """
    text = canonicalize_name_text(raw)
    if not text:
        raise NameValidationError("text", "name must not be empty")

    invalid = sorted({char for char in text if not _is_allowed(char)})
    if invalid:
        raise NameValidationError(
            "text",
            f"invalid characters {''.join(invalid)!r}; only letters and "
            f"{ALLOWED_SPECIAL_CHARACTERS!r} are allowed",
        )
    return text
