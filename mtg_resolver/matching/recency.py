"""
Set recency prior.

Cards scanned in the real world skew toward recent print runs, so each
known set code carries a hand-tuned weight (newest sets close to 1.0).
The table lives in a JSON file so it can be updated without code changes:

    {"sets": {"TLA": 1.0, "SPM": 0.98, ...}}

scripts/update_recency_table.py regenerates it from Scryfall's set list.
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from mtg_resolver.config import RECENCY_DEFAULT, RECENCY_TABLE_PATH

logger = logging.getLogger(__name__)

# Set types that reach booster packs and therefore scanning tables
RECENT_SET_TYPES = {'expansion', 'core', 'masters', 'draft_innovation', 'commander'}

# Cache for the configured table
_default_recency_set: Optional["RecencySet"] = None


class RecencySet:
    """
    Read-only lookup of set code -> recency weight.

    Usage:
        recency = RecencySet.from_file(Path("recency_sets.json"))
        recency.score("MKM")   # table weight
        recency.score("ZZZ")   # default 0.3
    """

    def __init__(self, weights: Dict[str, float], default: float = RECENCY_DEFAULT):
        """
        Args:
            weights: Mapping of set code -> weight in [0, 1]
            default: Weight for unknown or missing set codes

        Raises:
            ValueError: If any weight or the default is outside [0, 1]
        """
        if not 0.0 <= default <= 1.0:
            raise ValueError(f"Default recency must be in [0, 1], got {default}")

        table = {}
        for code, weight in weights.items():
            weight = float(weight)
            if not 0.0 <= weight <= 1.0:
                raise ValueError(f"Recency weight for '{code}' must be in [0, 1], got {weight}")
            table[code.strip().upper()] = weight

        self._weights = table
        self.default = default

    @classmethod
    def from_file(cls, path: Union[str, Path], default: float = RECENCY_DEFAULT) -> "RecencySet":
        """
        Load a table from JSON.

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the file is not a valid recency table
        """
        path = Path(path)
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        if not isinstance(data, dict) or not isinstance(data.get('sets'), dict):
            raise ValueError(f"Recency table {path} must contain a 'sets' object")

        recency = cls(data['sets'], default=default)
        logger.info(f"Loaded {len(recency)} set recency weights from {path}")
        return recency

    def score(self, set_code: Optional[str]) -> float:
        if not set_code:
            return self.default
        return self._weights.get(set_code.strip().upper(), self.default)

    def to_dict(self) -> Dict[str, Any]:
        return {'sets': dict(self._weights)}

    def save(self, path: Union[str, Path]) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"Saved {len(self)} set recency weights to {path}")

    def __contains__(self, set_code: str) -> bool:
        return set_code.strip().upper() in self._weights

    def __len__(self) -> int:
        return len(self._weights)


def get_recency_set(reload: bool = False) -> RecencySet:
    """Configured recency table (RECENCY_TABLE_PATH), loaded once."""
    global _default_recency_set
    if _default_recency_set is None or reload:
        _default_recency_set = RecencySet.from_file(RECENCY_TABLE_PATH)
    return _default_recency_set


def build_recency_weights(
    sets: Iterable[Dict[str, Any]],
    today: Optional[date] = None,
    max_sets: int = 40,
    floor: float = RECENCY_DEFAULT
) -> Dict[str, float]:
    """
    Derive recency weights from Scryfall set objects.

    Paper sets of the booster-bearing types that are already released are
    ordered newest first; the newest gets 1.0 and weights decay linearly to
    ``floor`` at the ``max_sets``-th set.

    Args:
        sets: Scryfall set objects (code, set_type, released_at, digital)
        today: Cut-off date for "released" (default: today)
        max_sets: Number of sets to keep
        floor: Weight of the oldest kept set

    Returns:
        Mapping of upper-case set code -> weight
    """
    cutoff = (today or date.today()).isoformat()

    released: List[Dict[str, Any]] = [
        s for s in sets
        if s.get('set_type') in RECENT_SET_TYPES
        and s.get('released_at')
        and s['released_at'] <= cutoff
        and not s.get('digital')
    ]
    released.sort(key=lambda s: s['released_at'], reverse=True)
    released = released[:max_sets]

    if not released:
        return {}

    steps = max(len(released) - 1, 1)
    weights = {}
    for i, set_info in enumerate(released):
        weights[set_info['code'].upper()] = round(1.0 - (1.0 - floor) * i / steps, 3)

    return weights
