"""
mtg_resolver/resolution/resolver.py: Printing resolution pipeline

1. Name resolving: fuzzy name guess -> canonical name
2. Candidates fetching: every printing of that name, all languages
3. Scoring: set code (0.4) + collector number (0.3) + recency (0.2) + set name (0.1)
4. Selection: best candidate above ACCEPT_THRESHOLD, ties broken by title
   similarity, alternates when confidence is below ALTERNATES_THRESHOLD

Domain failures come back as ResolutionOutcome values. Transport errors
raised by the collaborators propagate unchanged and are never retried here.
"""

import math
import time
import logging
from dataclasses import replace
from typing import List, Optional, TYPE_CHECKING

from mtg_resolver.config import (
    ACCEPT_THRESHOLD,
    ALTERNATES_THRESHOLD,
    MAX_ALTERNATES,
    FALLBACK_POLICY,
)
from mtg_resolver.matching.name_similarity import NameSimilarityMatcher
from mtg_resolver.resolution.models import (
    CandidateScore,
    ErrorKind,
    ResolutionOutcome,
    ResolutionResult,
    ResolverState,
    ScanObservation,
)
from mtg_resolver.resolution.scorer import CandidateScorer

if TYPE_CHECKING:
    from mtg_resolver.sources.base import BaseNameResolver, BaseCandidateSource

logger = logging.getLogger(__name__)

POLICY_STRICT = 'strict'
POLICY_LENIENT = 'lenient'
FALLBACK_POLICIES = (POLICY_STRICT, POLICY_LENIENT)

# Scores closer than this count as a tie
TIE_TOLERANCE = 1e-9


class CandidateResolver:
    """
    Resolves a scan observation to one specific printing.

    The resolver holds no per-request state; one instance can serve many
    scans, sequentially or from several threads.

    Usage:
        client = ScryfallClient()
        resolver = CandidateResolver(name_resolver=client, candidate_source=client)
        outcome = resolver.resolve(ScanObservation("Lightning Bolt", "MKM · EN · 042"))
        if outcome.ok:
            print(outcome.result.candidate.set_code, outcome.result.confidence)
    """

    def __init__(
        self,
        name_resolver: "BaseNameResolver",
        candidate_source: "BaseCandidateSource",
        scorer: Optional[CandidateScorer] = None,
        name_matcher: Optional[NameSimilarityMatcher] = None,
        accept_threshold: float = ACCEPT_THRESHOLD,
        alternates_threshold: float = ALTERNATES_THRESHOLD,
        max_alternates: int = MAX_ALTERNATES,
        fallback_policy: str = FALLBACK_POLICY
    ):
        """
        Args:
            name_resolver: Fuzzy name lookup collaborator
            candidate_source: Printing list collaborator
            scorer: Per-candidate scorer (default: configured matchers)
            name_matcher: Title similarity used to break ties
            accept_threshold: Candidates must score strictly above this
            alternates_threshold: Alternates are returned below this confidence
            max_alternates: Cap on returned alternates
            fallback_policy: 'strict' (fail) or 'lenient' (newest printing)
                when no candidate passes the threshold
        """
        if fallback_policy not in FALLBACK_POLICIES:
            raise ValueError(f"Unknown fallback policy '{fallback_policy}', expected one of {FALLBACK_POLICIES}")
        if not 0 <= max_alternates <= MAX_ALTERNATES:
            raise ValueError(f"max_alternates must be between 0 and {MAX_ALTERNATES}, got {max_alternates}")

        self.name_resolver = name_resolver
        self.candidate_source = candidate_source
        self.scorer = scorer or CandidateScorer()
        self.name_matcher = name_matcher or NameSimilarityMatcher()
        self.accept_threshold = accept_threshold
        self.alternates_threshold = alternates_threshold
        self.max_alternates = max_alternates
        self.fallback_policy = fallback_policy

    def resolve(self, observation: ScanObservation) -> ResolutionOutcome:
        """
        Run the full pipeline for one observation.

        Args:
            observation: Name guess and footer text from OCR

        Returns:
            ResolutionOutcome with a result or a failure

        Raises:
            requests.RequestException: Collaborator transport failures, unchanged
        """
        start_time = time.perf_counter()

        def elapsed() -> float:
            return time.perf_counter() - start_time

        # Name resolving
        self._log_state(ResolverState.NAME_RESOLVING, observation.recognized_name)
        name_guess = (observation.recognized_name or "").strip()
        canonical_name = self.name_resolver.resolve_by_fuzzy_name(name_guess) if name_guess else None

        if not canonical_name:
            self._log_state(ResolverState.FAILED, ErrorKind.NAME_NOT_FOUND.value)
            return ResolutionOutcome.failed(
                ErrorKind.NAME_NOT_FOUND,
                f'No card found matching "{name_guess}"',
                processing_time=elapsed()
            )

        # Candidates fetching
        self._log_state(ResolverState.CANDIDATES_FETCHING, canonical_name)
        candidates = self.candidate_source.all_printings(canonical_name, include_all_languages=True)

        if not candidates:
            self._log_state(ResolverState.FAILED, ErrorKind.NO_PRINTS_FOUND.value)
            return ResolutionOutcome.failed(
                ErrorKind.NO_PRINTS_FOUND,
                f"No prints found for {canonical_name}",
                canonical_name=canonical_name,
                processing_time=elapsed()
            )

        # Scoring
        self._log_state(ResolverState.SCORING, f"{len(candidates)} candidates")
        scores = self.scorer.score_all(observation.raw_footer_text, candidates)
        ranked = self.rank(scores, observation.recognized_name)

        outcome = self._select(ranked, scores, canonical_name, elapsed)
        if outcome.ok:
            chosen = outcome.result.candidate
            self._log_state(
                ResolverState.SELECTED,
                f"{chosen.display_name} ({chosen.set_code} #{chosen.collector_number} {chosen.lang}) "
                f"confidence={outcome.result.confidence:.3f} exact={outcome.result.exact_match}"
            )
        else:
            self._log_state(ResolverState.FAILED, outcome.failure.kind.value)
        return outcome

    def rank(self, scores: List[CandidateScore], scanned_title: str) -> List[CandidateScore]:
        """
        Order scores best first.

        Candidates tied on the top confidence are ordered by title
        similarity to the scanned name; everything else keeps its
        original order within equal confidence (stable sort).
        """
        if not scores:
            return []

        best = max(s.confidence for s in scores)
        tied = [s for s in scores if math.isclose(s.confidence, best, abs_tol=TIE_TOLERANCE)]
        rest = [s for s in scores if not math.isclose(s.confidence, best, abs_tol=TIE_TOLERANCE)]

        if len(tied) > 1:
            tied = [
                replace(s, name_similarity=self.name_matcher.score(scanned_title, s.candidate.display_name))
                for s in tied
            ]
            tied.sort(key=lambda s: s.name_similarity, reverse=True)
            logger.debug(
                f"Tie on {best:.3f} between {len(tied)} candidates, "
                f"title similarity picks {tied[0].candidate.display_name} ({tied[0].candidate.lang})"
            )

        rest.sort(key=lambda s: s.confidence, reverse=True)
        return tied + rest

    def _select(
        self,
        ranked: List[CandidateScore],
        scores: List[CandidateScore],
        canonical_name: str,
        elapsed
    ) -> ResolutionOutcome:
        """Apply threshold, fallback policy and alternates rules."""
        accepted = [s for s in ranked if s.confidence > self.accept_threshold]

        if accepted:
            chosen = accepted[0]
            confidence = chosen.confidence
        elif self.fallback_policy == POLICY_LENIENT:
            # Newest printing: highest recency, source order (newest first) on ties
            chosen = max(scores, key=lambda s: s.recency_score)
            confidence = 0.0
            logger.info(
                f"No candidate above {self.accept_threshold}, lenient fallback to "
                f"{chosen.candidate.set_code} #{chosen.candidate.collector_number}"
            )
        else:
            return ResolutionOutcome.failed(
                ErrorKind.NO_CONFIDENT_MATCH,
                f'Identified "{canonical_name}", but could not detect set code. Please rescan.',
                canonical_name=canonical_name,
                candidate_count=len(scores),
                processing_time=elapsed()
            )

        alternates = ()
        if confidence < self.alternates_threshold:
            alternates = tuple(
                s.candidate for s in ranked
                if s.candidate.id != chosen.candidate.id
            )[:self.max_alternates]

        result = ResolutionResult(
            candidate=chosen.candidate,
            confidence=confidence,
            alternates=alternates,
            score=chosen
        )
        return ResolutionOutcome.success(
            result,
            canonical_name=canonical_name,
            candidate_count=len(scores),
            processing_time=elapsed()
        )

    @staticmethod
    def _log_state(state: ResolverState, detail: str) -> None:
        logger.info(f"[{state.value}] {detail}")
