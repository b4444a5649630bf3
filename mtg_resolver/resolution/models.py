"""
Data model for printing resolution.

Candidate         one printing fetched from the card database
ScanObservation   the OCR evidence for one scan
CandidateScore    a candidate with its component and aggregated scores
ResolutionResult  the chosen printing, confidence and alternates
ResolutionOutcome either a ResolutionResult or a ResolutionFailure
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from mtg_resolver.config import EXACT_MATCH_THRESHOLD, MAX_ALTERNATES


@dataclass(frozen=True)
class Candidate:
    """One specific printing of a card (set, language, collector number)."""
    id: str
    name: str
    set_code: Optional[str] = None
    set_name: str = ""
    collector_number: str = ""
    lang: str = "en"

    # Localized name as printed on the card (absent for most English printings)
    printed_name: Optional[str] = None

    rarity: Optional[str] = None
    released_at: Optional[str] = None
    image_url: Optional[str] = None

    # Card details for display; the front face of a double-faced card
    mana_cost: Optional[str] = None
    type_line: Optional[str] = None
    oracle_text: Optional[str] = None
    power: Optional[str] = None
    toughness: Optional[str] = None
    artist: Optional[str] = None

    @property
    def display_name(self) -> str:
        """Name as printed on the card."""
        return self.printed_name or self.name

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        return {
            'id': self.id,
            'name': self.name,
            'printed_name': self.printed_name,
            'lang': self.lang,
            'set_code': self.set_code,
            'set_name': self.set_name,
            'collector_number': self.collector_number,
            'rarity': self.rarity,
            'released_at': self.released_at,
            'image_url': self.image_url,
            'mana_cost': self.mana_cost,
            'type_line': self.type_line,
            'oracle_text': self.oracle_text,
            'power': self.power,
            'toughness': self.toughness,
            'artist': self.artist,
        }


@dataclass(frozen=True)
class ScanObservation:
    """Evidence for one resolution attempt, produced by the OCR collaborator."""

    recognized_name: str
    """Card name guess from the title line."""

    raw_footer_text: str = ""
    """OCR text of the footer (set code, collector number, language)."""


@dataclass(frozen=True)
class CandidateScore:
    """Single candidate with scoring details"""
    candidate: Candidate
    confidence: float

    # Individual scores
    set_code_score: float = 0.0
    collector_number_score: float = 0.0
    recency_score: float = 0.0
    set_name_score: float = 0.0

    # Only computed for candidates tied on the top confidence
    name_similarity: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'candidate_id': self.candidate.id,
            'confidence': float(self.confidence),
            'set_code_score': float(self.set_code_score),
            'collector_number_score': float(self.collector_number_score),
            'recency_score': float(self.recency_score),
            'set_name_score': float(self.set_name_score),
            'name_similarity': self.name_similarity,
        }


def is_exact_match(confidence: float) -> bool:
    """A match is exact when confidence reaches EXACT_MATCH_THRESHOLD."""
    return confidence >= EXACT_MATCH_THRESHOLD


@dataclass(frozen=True)
class ResolutionResult:
    """
    Final resolution: chosen printing, confidence and alternates.

    Invariants are checked on construction:
    - confidence is in [0, 1]
    - alternates never contain the chosen candidate
    - at most MAX_ALTERNATES alternates
    """
    candidate: Candidate
    confidence: float
    alternates: Tuple[Candidate, ...] = ()
    score: Optional[CandidateScore] = None

    def __post_init__(self):
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Confidence must be in [0, 1], got {self.confidence}")
        if len(self.alternates) > MAX_ALTERNATES:
            raise ValueError(f"At most {MAX_ALTERNATES} alternates allowed, got {len(self.alternates)}")
        if any(alt.id == self.candidate.id for alt in self.alternates):
            raise ValueError(f"Alternates must not contain the chosen candidate {self.candidate.id}")

    @property
    def exact_match(self) -> bool:
        return is_exact_match(self.confidence)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'candidate': self.candidate.to_dict(),
            'confidence': float(self.confidence),
            'exact_match': self.exact_match,
            'alternates': [alt.to_dict() for alt in self.alternates],
            'score': self.score.to_dict() if self.score else None,
        }


class ErrorKind(str, Enum):
    """Recoverable failure kinds surfaced to the caller"""
    NAME_NOT_FOUND = "NAME_NOT_FOUND"
    NO_PRINTS_FOUND = "NO_PRINTS_FOUND"
    NO_CONFIDENT_MATCH = "NO_CONFIDENT_MATCH"
    TRANSPORT_ERROR = "TRANSPORT_ERROR"


@dataclass(frozen=True)
class ResolutionFailure:
    """Failure kind plus a human-readable message."""
    kind: ErrorKind
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {'kind': self.kind.value, 'message': self.message}


class ResolverState(str, Enum):
    """Pipeline stages of a resolution"""
    NAME_RESOLVING = "name_resolving"
    CANDIDATES_FETCHING = "candidates_fetching"
    SCORING = "scoring"
    SELECTED = "selected"
    FAILED = "failed"


@dataclass(frozen=True)
class ResolutionOutcome:
    """
    Tagged result of one resolution: exactly one of result / failure is set.

    Usage:
        outcome = resolver.resolve(observation)
        if outcome.ok:
            print(outcome.result.candidate.id)
        else:
            print(outcome.failure.kind, outcome.failure.message)
    """
    result: Optional[ResolutionResult] = None
    failure: Optional[ResolutionFailure] = None

    # Canonical name, when name resolution got that far
    canonical_name: Optional[str] = None

    candidate_count: int = 0
    processing_time: float = field(default=0.0, compare=False)

    def __post_init__(self):
        if (self.result is None) == (self.failure is None):
            raise ValueError("ResolutionOutcome needs exactly one of result or failure")

    @classmethod
    def success(cls, result: ResolutionResult, **kwargs) -> "ResolutionOutcome":
        return cls(result=result, **kwargs)

    @classmethod
    def failed(cls, kind: ErrorKind, message: str, **kwargs) -> "ResolutionOutcome":
        return cls(failure=ResolutionFailure(kind=kind, message=message), **kwargs)

    @property
    def ok(self) -> bool:
        return self.result is not None

    @property
    def state(self) -> ResolverState:
        return ResolverState.SELECTED if self.ok else ResolverState.FAILED

    def to_dict(self) -> Dict[str, Any]:
        return {
            'state': self.state.value,
            'canonical_name': self.canonical_name,
            'candidate_count': self.candidate_count,
            'processing_time': float(self.processing_time),
            'result': self.result.to_dict() if self.result else None,
            'error': self.failure.to_dict() if self.failure else None,
        }
