"""
Resolution package: from a scan observation to one specific printing.

- Candidate, ScanObservation, CandidateScore, ResolutionResult: Data model
- ResolutionOutcome, ResolutionFailure, ErrorKind: Tagged outcome
- CandidateScorer: Per-candidate component scoring
- CandidateResolver: Name -> printings -> scores -> selection pipeline
- ScanSession: Single-flight admission control per scanning session
"""

from mtg_resolver.resolution.models import (
    Candidate,
    ScanObservation,
    CandidateScore,
    ResolutionResult,
    ResolutionFailure,
    ResolutionOutcome,
    ResolverState,
    ErrorKind,
    is_exact_match,
)
from mtg_resolver.resolution.scorer import CandidateScorer
from mtg_resolver.resolution.resolver import CandidateResolver, POLICY_STRICT, POLICY_LENIENT
from mtg_resolver.resolution.session import ScanSession, SessionStatus

__all__ = [
    'Candidate',
    'ScanObservation',
    'CandidateScore',
    'ResolutionResult',
    'ResolutionFailure',
    'ResolutionOutcome',
    'ResolverState',
    'ErrorKind',
    'is_exact_match',
    'CandidateScorer',
    'CandidateResolver',
    'POLICY_STRICT',
    'POLICY_LENIENT',
    'ScanSession',
    'SessionStatus',
]
