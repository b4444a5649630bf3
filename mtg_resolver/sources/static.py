"""In-memory card source over a fixed list of printings."""

import logging
from typing import Iterable, List, Optional

from mtg_resolver.matching.levenshtein import similarity
from mtg_resolver.resolution.models import Candidate
from mtg_resolver.sources.base import BaseNameResolver, BaseCandidateSource

logger = logging.getLogger(__name__)


class StaticCardSource(BaseNameResolver, BaseCandidateSource):
    """
    Name resolver and candidate source backed by a list of candidates.

    Candidates are returned in the order given, which callers should keep
    newest first like the remote source.
    """

    def __init__(self, candidates: Iterable[Candidate], min_similarity: float = 0.6):
        self.candidates = list(candidates)
        self.min_similarity = min_similarity

    def resolve_by_fuzzy_name(self, name: str) -> Optional[str]:
        query = (name or "").strip().lower()
        if not query:
            return None

        best_name = None
        best_score = self.min_similarity
        for candidate in self.candidates:
            for known in (candidate.name, candidate.printed_name):
                if not known:
                    continue
                if known.lower() == query:
                    return candidate.name
                score = similarity(query, known.lower())
                if score > best_score:
                    best_score = score
                    best_name = candidate.name

        if best_name:
            logger.debug(f"Fuzzy name '{name}' -> '{best_name}' ({best_score:.3f})")
        return best_name

    def all_printings(self, canonical_name: str, include_all_languages: bool = True) -> List[Candidate]:
        return [
            c for c in self.candidates
            if c.name == canonical_name and (include_all_languages or c.lang == 'en')
        ]
