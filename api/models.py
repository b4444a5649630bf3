"""
Pydantic models for API request/response schemas
"""

from pydantic import BaseModel, Field
from typing import Optional, List

from mtg_resolver.resolution.models import Candidate, ResolutionOutcome


class ResolveRequest(BaseModel):
    """OCR evidence for one scan"""
    recognized_name: str = Field(..., description="Card name as recognized from the title line")
    raw_footer_text: str = Field("", description="Raw OCR text of the card footer")


class CandidateInfo(BaseModel):
    """One printing of a card"""
    id: str
    name: str
    printed_name: Optional[str] = None
    lang: str
    set_code: Optional[str] = None
    set_name: str = ""
    collector_number: str = ""
    rarity: Optional[str] = None
    released_at: Optional[str] = None
    image_url: Optional[str] = None
    mana_cost: Optional[str] = None
    type_line: Optional[str] = None
    oracle_text: Optional[str] = None
    power: Optional[str] = None
    toughness: Optional[str] = None
    artist: Optional[str] = None

    @classmethod
    def from_candidate(cls, candidate: Candidate) -> "CandidateInfo":
        return cls(**candidate.to_dict())


class ScoreBreakdown(BaseModel):
    """Component scores of the chosen printing"""
    set_code_score: float = Field(..., ge=0.0, le=1.0)
    collector_number_score: float = Field(..., ge=0.0, le=1.0)
    recency_score: float = Field(..., ge=0.0, le=1.0)
    set_name_score: float = Field(..., ge=0.0, le=1.0)
    name_similarity: Optional[float] = Field(None, description="Only set when a tie was broken on the title")


class ResolutionResponse(BaseModel):
    """Resolved printing with confidence and alternates"""
    canonical_name: Optional[str] = None
    candidate: CandidateInfo
    confidence: float = Field(..., ge=0.0, le=1.0)
    exact_match: bool
    alternates: List[CandidateInfo] = Field(default_factory=list, max_length=5)
    score: Optional[ScoreBreakdown] = None
    candidate_count: int = 0
    processing_time: float = 0.0

    @classmethod
    def from_outcome(cls, outcome: ResolutionOutcome) -> "ResolutionResponse":
        result = outcome.result
        score = None
        if result.score is not None:
            score = ScoreBreakdown(
                set_code_score=result.score.set_code_score,
                collector_number_score=result.score.collector_number_score,
                recency_score=result.score.recency_score,
                set_name_score=result.score.set_name_score,
                name_similarity=result.score.name_similarity,
            )
        return cls(
            canonical_name=outcome.canonical_name,
            candidate=CandidateInfo.from_candidate(result.candidate),
            confidence=result.confidence,
            exact_match=result.exact_match,
            alternates=[CandidateInfo.from_candidate(alt) for alt in result.alternates],
            score=score,
            candidate_count=outcome.candidate_count,
            processing_time=outcome.processing_time,
        )


class ErrorDetail(BaseModel):
    """Failure kind and message"""
    kind: str
    message: str


class ErrorResponse(BaseModel):
    """Error body of the resolution routes"""
    detail: ErrorDetail


class SessionState(BaseModel):
    """Scan session status"""
    session_id: str
    in_flight: bool
    holding_result: bool
    context: int
    dropped: int
