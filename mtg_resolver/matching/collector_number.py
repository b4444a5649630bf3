"""
Collector number scoring.

Collector numbers print as "042/291", "42" or "0270". OCR drops or misreads
single digits often enough that a near miss still counts for something.
"""

import re
import logging
from typing import List, Optional

from mtg_resolver.config import COLLECTOR_NUMBER_TOLERANCE

logger = logging.getLogger(__name__)

EXACT_SCORE = 1.0
NEAR_SCORE = 0.7

_NUMBER_PATTERN = re.compile(r'\d+')


def parse_collector_number(collector_number: Optional[str]) -> Optional[int]:
    """
    Numeric part of a collector number, ignoring any "/total" suffix.

    Examples:
        >>> parse_collector_number("42/291")
        42
        >>> parse_collector_number("A-130")
        130
        >>> parse_collector_number("") is None
        True
    """
    if not collector_number:
        return None

    prefix = collector_number.split('/', 1)[0]
    match = _NUMBER_PATTERN.search(prefix)
    return int(match.group()) if match else None


def extract_numbers(text: Optional[str]) -> List[int]:
    """All integer tokens in the text, leading zeros dropped."""
    if not text:
        return []
    return [int(token) for token in _NUMBER_PATTERN.findall(text)]


class CollectorNumberMatcher:
    """Scores footer text against a candidate's collector number."""

    def __init__(self, tolerance: int = COLLECTOR_NUMBER_TOLERANCE):
        self.tolerance = tolerance

    def score(self, footer_text: str, collector_number: Optional[str]) -> float:
        """
        1.0 for an exact numeric match, 0.7 for a token within the
        tolerance, otherwise 0.0.
        """
        target = parse_collector_number(collector_number)
        if target is None:
            return 0.0

        numbers = extract_numbers(footer_text)
        if target in numbers:
            return EXACT_SCORE

        if any(abs(number - target) <= self.tolerance for number in numbers):
            logger.debug(f"Collector number near miss: {target} in {numbers}")
            return NEAR_SCORE

        return 0.0
