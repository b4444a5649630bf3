"""
Per-candidate scoring: runs every matcher and aggregates the results.

Scores are pure functions of (footer text, candidate), so candidates can be
scored in any order or in parallel.
"""

import logging
from typing import List, Optional

from mtg_resolver.matching.set_code import SetCodeMatcher
from mtg_resolver.matching.collector_number import CollectorNumberMatcher
from mtg_resolver.matching.set_name import SetNameMatcher
from mtg_resolver.matching.recency import RecencySet, get_recency_set
from mtg_resolver.matching.aggregator import ConfidenceAggregator
from mtg_resolver.resolution.models import Candidate, CandidateScore

logger = logging.getLogger(__name__)


class CandidateScorer:
    """
    Scores candidates against footer text.

    Usage:
        scorer = CandidateScorer()
        score = scorer.score("MKM · EN · 042", candidate)
        print(score.confidence, score.set_code_score)
    """

    def __init__(
        self,
        set_code_matcher: Optional[SetCodeMatcher] = None,
        collector_number_matcher: Optional[CollectorNumberMatcher] = None,
        set_name_matcher: Optional[SetNameMatcher] = None,
        recency: Optional[RecencySet] = None,
        aggregator: Optional[ConfidenceAggregator] = None
    ):
        """
        Args:
            set_code_matcher: Set code scorer (default: configured strategy)
            collector_number_matcher: Collector number scorer
            set_name_matcher: Set name keyword scorer
            recency: Recency table (default: RECENCY_TABLE_PATH)
            aggregator: Weighted combination (default: configured weights)
        """
        self.set_code_matcher = set_code_matcher or SetCodeMatcher()
        self.collector_number_matcher = collector_number_matcher or CollectorNumberMatcher()
        self.set_name_matcher = set_name_matcher or SetNameMatcher()
        self.recency = recency if recency is not None else get_recency_set()
        self.aggregator = aggregator or ConfidenceAggregator()

    def score(self, footer_text: str, candidate: Candidate) -> CandidateScore:
        set_code_score = self.set_code_matcher.score(footer_text, candidate.set_code)
        collector_number_score = self.collector_number_matcher.score(footer_text, candidate.collector_number)
        recency_score = self.recency.score(candidate.set_code)
        set_name_score = self.set_name_matcher.score(footer_text, candidate.set_name)

        confidence = self.aggregator.aggregate(
            set_code_score,
            collector_number_score,
            recency_score,
            set_name_score
        )

        logger.debug(
            f"{candidate.display_name} ({candidate.set_code} #{candidate.collector_number} {candidate.lang}): "
            f"set={set_code_score:.2f} num={collector_number_score:.2f} "
            f"recency={recency_score:.2f} set_name={set_name_score:.2f} -> {confidence:.3f}"
        )

        return CandidateScore(
            candidate=candidate,
            confidence=confidence,
            set_code_score=set_code_score,
            collector_number_score=collector_number_score,
            recency_score=recency_score,
            set_name_score=set_name_score
        )

    def score_all(self, footer_text: str, candidates: List[Candidate]) -> List[CandidateScore]:
        """Scores in candidate order."""
        return [self.score(footer_text, candidate) for candidate in candidates]
