"""
OCR-tolerant set code scoring.

MTG set codes are short codes (e.g. "MKM", "OTJ", "NEO") printed in the
card footer. OCR regularly misreads them:
- O/0 confusion: "0TJ" -> "OTJ"
- I/1/l confusion: "M1C" -> "MIC"
- S/5, B/8, G/6, Z/2 confusion
- Split codes: "O TJ" -> "OTJ"

Two strategies are available, one per matcher instance:
- graded:  verbatim substring (1.0), a footer piece (or adjacent pieces
           joined, to repair a split code) equal to the code after confusion
           substitution (0.9), else edit-distance similarity of the first
           code-like token, accepted above a floor
- pattern: one tolerant regular expression per set code, binary 1.0/0.0
"""

import re
import logging
from typing import Dict, List, Optional, Pattern

from mtg_resolver.config import SET_CODE_STRATEGY, SET_CODE_SIMILARITY_FLOOR
from mtg_resolver.matching.levenshtein import similarity
from mtg_resolver.matching.text_normalizer import (
    normalize,
    apply_confusions,
    collapse_whitespace,
)

logger = logging.getLogger(__name__)

STRATEGY_GRADED = 'graded'
STRATEGY_PATTERN = 'pattern'
STRATEGIES = (STRATEGY_GRADED, STRATEGY_PATTERN)

VERBATIM_SCORE = 1.0
CONFUSION_SCORE = 0.9

# 3+ alphanumeric characters; the letter count is checked separately
_TOKEN_PATTERN = re.compile(r'[A-Z0-9]{3,}')

# Alphanumeric runs between whitespace and footer separators
_PIECE_PATTERN = re.compile(r'[A-Z0-9]+')

# Character classes for the tolerant pattern strategy
PATTERN_CLASSES = {
    'O': '[O0QDo]',
    '0': '[O0QDo]',
    'I': '[I1l|i]',
    '1': '[I1l|i]',
    'S': '[S5]',
    '5': '[S5]',
    'B': '[B8]',
    '8': '[B8]',
    'Z': '[Z2]',
    '2': '[Z2]',
    'A': '[A4]',
    '4': '[A4]',
    'E': '[E3]',
    '3': '[E3]',
    'G': '[G6]',
    '6': '[G6]',
}


def extract_set_code_guess(footer_text: str) -> Optional[str]:
    """
    Return the first token that looks like a set code.

    A set code guess is 3+ alphanumeric characters with at least 2 letters,
    which skips collector numbers ("042") and language tags ("EN").

    Examples:
        >>> extract_set_code_guess("MKN EN 042")
        'MKN'
        >>> extract_set_code_guess("042 EN") is None
        True
    """
    for token in _TOKEN_PATTERN.findall(normalize(footer_text)):
        if sum(1 for ch in token if ch.isalpha()) >= 2:
            return token
    return None


def code_windows(footer_text: str, length: int) -> List[str]:
    """
    Runs of adjacent footer pieces whose joined length equals ``length``.

    Pieces are the alphanumeric runs of the normalized footer. A window
    never swallows part of a piece, so neighbouring words ("NEO EN") do not
    run together into a different code ("EOE"), while a split code
    ("O TJ") is rejoined.

    Examples:
        >>> code_windows("O TJ · 015", 3)
        ['OTJ', '015']
        >>> code_windows("NEO EN", 3)
        ['NEO']
    """
    pieces = _PIECE_PATTERN.findall(normalize(footer_text))
    windows = []
    for start in range(len(pieces)):
        joined = ""
        for piece in pieces[start:]:
            joined += piece
            if len(joined) >= length:
                break
        if len(joined) == length:
            windows.append(joined)
    return windows


def build_set_code_pattern(set_code: str) -> Pattern:
    """
    Build a tolerant regex for a set code.

    Each character expands to its confusion class, characters may be
    separated by whitespace, and the code must sit between line edges,
    whitespace or non-word characters.

    Examples:
        >>> bool(build_set_code_pattern("OTJ").search("0 TJ · 015"))
        True
    """
    parts = [PATTERN_CLASSES.get(ch, re.escape(ch)) for ch in set_code.upper()]
    body = r'\s*'.join(parts)
    return re.compile(rf'(?:^|\s|\W){body}(?:$|\s|\W)', re.IGNORECASE)


class SetCodeMatcher:
    """
    Scores footer text against a candidate's set code.

    Usage:
        matcher = SetCodeMatcher()
        matcher.score("MKM · EN · 042", "MKM")  # 1.0
    """

    def __init__(
        self,
        strategy: str = SET_CODE_STRATEGY,
        similarity_floor: float = SET_CODE_SIMILARITY_FLOOR
    ):
        """
        Args:
            strategy: 'graded' or 'pattern'
            similarity_floor: Minimum (exclusive) edit-distance similarity
                accepted by the graded fallback
        """
        if strategy not in STRATEGIES:
            raise ValueError(f"Unknown set code strategy '{strategy}', expected one of {STRATEGIES}")

        self.strategy = strategy
        self.similarity_floor = similarity_floor
        self._patterns: Dict[str, Pattern] = {}

    def score(self, footer_text: str, set_code: Optional[str]) -> float:
        """
        Score how strongly the footer supports this set code.

        Args:
            footer_text: Raw OCR footer text
            set_code: Candidate set code (may be None)

        Returns:
            Score in [0, 1]
        """
        code = collapse_whitespace(normalize(set_code))
        footer = normalize(footer_text)

        if not code or not footer:
            return 0.0

        if self.strategy == STRATEGY_PATTERN:
            return self._score_pattern(footer, code)
        return self._score_graded(footer, code)

    def _score_graded(self, footer: str, code: str) -> float:
        # Step 1: verbatim
        if code in footer:
            logger.debug(f"Set code verbatim: {code} in '{footer}'")
            return VERBATIM_SCORE

        # Step 2: after OCR confusion substitution, split codes rejoined
        target = apply_confusions(code)
        if any(apply_confusions(window) == target for window in code_windows(footer, len(code))):
            logger.debug(f"Set code via OCR substitution: {code} in '{footer}'")
            return CONFUSION_SCORE

        # Step 3: edit distance against the first code-like token
        guess = extract_set_code_guess(footer)
        if guess:
            score = similarity(guess, code)
            if score > self.similarity_floor:
                logger.debug(f"Set code fuzzy: {guess} ~ {code} ({score:.3f})")
                return score

        return 0.0

    def _score_pattern(self, footer: str, code: str) -> float:
        pattern = self._patterns.get(code)
        if pattern is None:
            pattern = build_set_code_pattern(code)
            self._patterns[code] = pattern

        if pattern.search(footer):
            logger.debug(f"Set code pattern match: {code} in '{footer}'")
            return VERBATIM_SCORE
        return 0.0
