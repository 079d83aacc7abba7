"""Address text canonicalization.

The normalized form is the cache key basis and the input to embedding
generation, so it must be deterministic and idempotent.
"""

import re

_WHITESPACE = re.compile(r"\s+")
_NON_WORD = re.compile(r"[^\w\s]")

# Whole-token replacements, applied in order.
ABBREVIATIONS: tuple[tuple[str, str], ...] = (
    ("rd", "road"),
    ("st", "street"),
    ("ave", "avenue"),
    ("mh", "maharashtra"),
    ("maha", "maharashtra"),
)

_ABBREVIATION_PATTERNS = tuple(
    (re.compile(rf"\b{re.escape(short)}\b"), full) for short, full in ABBREVIATIONS
)


def normalize_address(address: str) -> str:
    """Return the canonical form of an address string.

    Pipeline: lowercase, strip, collapse whitespace, drop punctuation,
    expand abbreviations as whole words.

    Example:
        >>> normalize_address("  12, MG Rd.,  Pune MH ")
        '12 mg road pune maharashtra'
    """
    text = address.lower().strip()
    text = _WHITESPACE.sub(" ", text)
    text = _NON_WORD.sub("", text)
    for pattern, full in _ABBREVIATION_PATTERNS:
        text = pattern.sub(full, text)
    # Punctuation removal can leave double or edge spaces ("a , b")
    return _WHITESPACE.sub(" ", text).strip()
