"""Scanned title vs. candidate name similarity, used to break set code ties."""

from typing import Optional

from mtg_resolver.matching.levenshtein import similarity


class NameSimilarityMatcher:
    """
    Case-insensitive Levenshtein similarity between two card names.

    Separates printings that tie on everything else, e.g. the English
    and German printing of the same card in the same set.
    """

    def score(self, scanned_title: Optional[str], candidate_name: Optional[str]) -> float:
        return similarity(
            (scanned_title or "").strip().lower(),
            (candidate_name or "").strip().lower()
        )
