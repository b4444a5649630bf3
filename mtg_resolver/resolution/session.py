"""
Admission control for a scanning session.

A camera delivers observations far faster than a resolution completes.
Per session at most one resolution is in flight; observations arriving
meanwhile are dropped, not queued. While a successful result is held for
the user, new observations are dropped as well until dismiss() is called.
A resolution that finishes after dismiss() belongs to an old scan context
and is discarded.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Optional

from mtg_resolver.resolution.models import ResolutionOutcome, ScanObservation
from mtg_resolver.resolution.resolver import CandidateResolver

logger = logging.getLogger(__name__)


@dataclass
class SessionStatus:
    """Current session status for monitoring."""
    session_id: str
    in_flight: bool
    holding_result: bool
    context: int
    dropped: int


class ScanSession:
    """
    Thread-safe single-flight wrapper around a CandidateResolver.

    Usage:
        session = ScanSession(resolver)
        outcome = session.submit(observation)   # None when dropped or stale
        ...
        session.dismiss()                        # start a new scan context
    """

    def __init__(self, resolver: CandidateResolver, session_id: str = "default"):
        self.resolver = resolver
        self.session_id = session_id
        self._lock = threading.Lock()
        self._in_flight = False
        self._context = 0
        self._current: Optional[ResolutionOutcome] = None
        self._dropped = 0

    def submit(self, observation: ScanObservation) -> Optional[ResolutionOutcome]:
        """
        Resolve an observation unless the session is busy.

        Runs in the caller's thread. Transport errors propagate to the
        caller after the in-flight slot is released.

        Args:
            observation: OCR evidence for this frame

        Returns:
            The outcome, or None if the observation was dropped or the scan
            context changed while it was resolving
        """
        with self._lock:
            if self._in_flight or (self._current is not None and self._current.ok):
                self._dropped += 1
                logger.debug(
                    f"Session {self.session_id}: dropped observation "
                    f"'{observation.recognized_name}' (in_flight={self._in_flight})"
                )
                return None
            self._in_flight = True
            context = self._context

        try:
            outcome = self.resolver.resolve(observation)
        except Exception:
            with self._lock:
                self._in_flight = False
            raise

        # Slot release, context check and store share one lock acquisition
        with self._lock:
            self._in_flight = False
            if context != self._context:
                logger.info(
                    f"Session {self.session_id}: discarding stale result for "
                    f"'{observation.recognized_name}' (context {context} != {self._context})"
                )
                return None
            self._current = outcome

        return outcome

    def dismiss(self) -> None:
        """Drop the held result and start a new scan context."""
        with self._lock:
            self._context += 1
            self._current = None
        logger.info(f"Session {self.session_id}: new scan context {self._context}")

    @property
    def current(self) -> Optional[ResolutionOutcome]:
        """Latest outcome of the current scan context."""
        with self._lock:
            return self._current

    @property
    def busy(self) -> bool:
        with self._lock:
            return self._in_flight

    def get_status(self) -> SessionStatus:
        with self._lock:
            return SessionStatus(
                session_id=self.session_id,
                in_flight=self._in_flight,
                holding_result=self._current is not None and self._current.ok,
                context=self._context,
                dropped=self._dropped
            )
