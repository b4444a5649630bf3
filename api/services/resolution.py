"""
Resolver and scan session wiring for the API.

One resolver (and Scryfall client) is shared by all requests; scan
sessions are kept in memory per session id.
"""

import logging
import threading
from typing import Dict, Optional

from mtg_resolver.resolution.resolver import CandidateResolver
from mtg_resolver.resolution.session import ScanSession
from mtg_resolver.sources.scryfall import ScryfallClient

logger = logging.getLogger(__name__)

_resolver: Optional[CandidateResolver] = None
_resolver_lock = threading.Lock()


def get_resolver() -> CandidateResolver:
    """Get or create the shared CandidateResolver"""
    global _resolver
    with _resolver_lock:
        if _resolver is None:
            client = ScryfallClient()
            _resolver = CandidateResolver(name_resolver=client, candidate_source=client)
            logger.info("Created Scryfall-backed resolver")
        return _resolver


class SessionRegistry:
    """In-memory scan sessions keyed by session id."""

    def __init__(self):
        self._sessions: Dict[str, ScanSession] = {}
        self._lock = threading.Lock()

    def get_or_create(self, session_id: str, resolver: CandidateResolver) -> ScanSession:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                session = ScanSession(resolver, session_id=session_id)
                self._sessions[session_id] = session
                logger.info(f"Created scan session {session_id} ({len(self._sessions)} active)")
            return session

    def get(self, session_id: str) -> Optional[ScanSession]:
        with self._lock:
            return self._sessions.get(session_id)

    def remove(self, session_id: str) -> Optional[ScanSession]:
        """Forget a session. Returns the removed session, or None if unknown."""
        with self._lock:
            session = self._sessions.pop(session_id, None)
            if session is not None:
                logger.info(f"Closed scan session {session_id} ({len(self._sessions)} active)")
            return session

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


_session_registry = SessionRegistry()


def get_session_registry() -> SessionRegistry:
    """Shared session registry (dependency)"""
    return _session_registry
