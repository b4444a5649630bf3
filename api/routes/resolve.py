"""
Resolution routes
Handles stateless resolution and admission-controlled scan sessions
"""

import logging
from dataclasses import asdict

import requests
from fastapi import APIRouter, Depends, HTTPException, Request

from api.models import ErrorDetail, ErrorResponse, ResolveRequest, ResolutionResponse, SessionState
from api.services.rate_limiter import limiter
from api.services.resolution import get_resolver, get_session_registry, SessionRegistry
from mtg_resolver.config import API_RATE_LIMIT
from mtg_resolver.resolution.models import ErrorKind, ResolutionOutcome, ScanObservation
from mtg_resolver.resolution.resolver import CandidateResolver

logger = logging.getLogger(__name__)

router = APIRouter()

FAILURE_STATUS = {
    ErrorKind.NAME_NOT_FOUND: 404,
    ErrorKind.NO_PRINTS_FOUND: 404,
    ErrorKind.NO_CONFIDENT_MATCH: 422,
    ErrorKind.TRANSPORT_ERROR: 502,
}

RESOLVE_ERRORS = {
    404: {"model": ErrorResponse, "description": "Card name or printings not found"},
    422: {"model": ErrorResponse, "description": "No confident match, or an invalid request body"},
    502: {"model": ErrorResponse, "description": "Card database request failed"},
}

SESSION_ERRORS = {
    404: {"model": ErrorResponse, "description": "Session not found"},
}


def _error(status_code: int, kind: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail=ErrorDetail(kind=kind, message=message).model_dump()
    )


def _to_response(outcome: ResolutionOutcome) -> ResolutionResponse:
    """Map an outcome to the response model, or raise the matching HTTP error."""
    if not outcome.ok:
        failure = outcome.failure
        raise _error(FAILURE_STATUS[failure.kind], failure.kind.value, failure.message)
    return ResolutionResponse.from_outcome(outcome)


def _transport_error(error: requests.RequestException) -> HTTPException:
    logger.error(f"Card database request failed: {error}")
    return _error(
        FAILURE_STATUS[ErrorKind.TRANSPORT_ERROR],
        ErrorKind.TRANSPORT_ERROR.value,
        f"Card database request failed: {error}"
    )


def _session_not_found(session_id: str) -> HTTPException:
    return _error(404, 'SESSION_NOT_FOUND', f"Session {session_id} not found")


@router.post("/resolve", response_model=ResolutionResponse, responses=RESOLVE_ERRORS)
@limiter.limit(API_RATE_LIMIT)
def resolve(
    request: Request,  # Required for rate limiter
    body: ResolveRequest,
    resolver: CandidateResolver = Depends(get_resolver)
):
    """Resolve one scan to a specific printing"""
    observation = ScanObservation(body.recognized_name, body.raw_footer_text)
    try:
        outcome = resolver.resolve(observation)
    except requests.RequestException as e:
        raise _transport_error(e)
    return _to_response(outcome)


@router.post(
    "/sessions/{session_id}/scans",
    response_model=ResolutionResponse,
    responses={**RESOLVE_ERRORS, 409: {"model": ErrorResponse, "description": "Observation dropped"}}
)
@limiter.limit(API_RATE_LIMIT)
def submit_scan(
    request: Request,  # Required for rate limiter
    session_id: str,
    body: ResolveRequest,
    resolver: CandidateResolver = Depends(get_resolver),
    registry: SessionRegistry = Depends(get_session_registry)
):
    """
    Submit a scan to a session.

    Answers 409 when the observation is dropped because a resolution is
    still in flight, a result is held, or the session was dismissed while
    this scan was resolving.
    """
    session = registry.get_or_create(session_id, resolver)
    observation = ScanObservation(body.recognized_name, body.raw_footer_text)
    try:
        outcome = session.submit(observation)
    except requests.RequestException as e:
        raise _transport_error(e)

    if outcome is None:
        raise _error(409, 'DROPPED', f"Session {session_id} is busy or holding a result")
    return _to_response(outcome)


@router.get("/sessions/{session_id}", response_model=SessionState, responses=SESSION_ERRORS)
def session_status(session_id: str, registry: SessionRegistry = Depends(get_session_registry)):
    """Current state of a scan session"""
    session = registry.get(session_id)
    if session is None:
        raise _session_not_found(session_id)
    return SessionState(**asdict(session.get_status()))


@router.delete("/sessions/{session_id}", response_model=SessionState, responses=SESSION_ERRORS)
def dismiss_session(session_id: str, registry: SessionRegistry = Depends(get_session_registry)):
    """
    Dismiss the held result and close the session.

    A resolution still in flight finishes against a dismissed context and
    its result is discarded. The next scan under this id opens a new session.
    """
    session = registry.remove(session_id)
    if session is None:
        raise _session_not_found(session_id)
    session.dismiss()
    return SessionState(**asdict(session.get_status()))
