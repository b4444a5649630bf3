"""
Canonical form for OCR footer text.

Footer text comes from the bottom strip of a card (set code, collector
number, language, artist) and is noisy: mixed case, stray punctuation and
uneven spacing. Every matcher compares against the normalized form.
"""

import re
from typing import Optional

# Punctuation that breaks substring and token matching
_STRIP_PATTERN = re.compile(r'[.,:;]')
_WHITESPACE_PATTERN = re.compile(r'\s+')

# Digit -> letter confusions commonly produced when OCR reads a set code
OCR_CONFUSIONS = {
    '0': 'O',
    '1': 'I',
    '5': 'S',
    '8': 'B',
    '6': 'G',
    '2': 'Z',
}

_CONFUSION_TABLE = str.maketrans(OCR_CONFUSIONS)


def normalize(text: Optional[str]) -> str:
    """
    Normalize raw OCR text.

    Uppercases, removes ``. , : ;`` and collapses whitespace runs to a single
    space. Applying it twice gives the same result as applying it once.

    Args:
        text: Raw OCR text (may be None)

    Returns:
        Normalized text, empty string for empty input

    Examples:
        >>> normalize("mkm  ·  en · 042.")
        'MKM · EN · 042'
    """
    if not text:
        return ""

    cleaned = _STRIP_PATTERN.sub('', text.upper())
    return _WHITESPACE_PATTERN.sub(' ', cleaned).strip()


def apply_confusions(text: str) -> str:
    """Replace confusable digits with the letters OCR usually meant."""
    return text.translate(_CONFUSION_TABLE)


def collapse_whitespace(text: str) -> str:
    """Remove all whitespace (OCR often splits a code: 'O TJ' -> 'OTJ')."""
    return _WHITESPACE_PATTERN.sub('', text)
