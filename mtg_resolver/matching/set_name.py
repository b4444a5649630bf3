"""Keyword overlap between footer text and a set name."""

import string
from typing import List, Optional

from mtg_resolver.matching.text_normalizer import normalize

MAX_KEYWORDS = 2
# Words of this length or shorter are connectors ("of", "the", "and")
MIN_WORD_LENGTH = 3


def set_name_keywords(set_name: Optional[str]) -> List[str]:
    """
    First two words of the set name longer than three characters.

    Examples:
        >>> set_name_keywords("Murders at Karlov Manor")
        ['Murders', 'Karlov']
        >>> set_name_keywords("Kamigawa: Neon Dynasty")
        ['Kamigawa', 'Neon']
    """
    if not set_name:
        return []

    words = [word.strip(string.punctuation) for word in set_name.split()]
    return [word for word in words if len(word) > MIN_WORD_LENGTH][:MAX_KEYWORDS]


class SetNameMatcher:
    """Fraction of set-name keywords found in the footer."""

    def score(self, footer_text: str, set_name: Optional[str]) -> float:
        keywords = set_name_keywords(set_name)
        if not keywords:
            return 0.0

        footer = normalize(footer_text)
        hits = sum(1 for keyword in keywords if normalize(keyword) in footer)
        return hits / len(keywords)
