"""
mtg_resolver/tests/test_session.py: Tests for scan session admission control

Tests:
- Observations are dropped while a resolution is in flight
- A successful result is held until dismiss()
- Results from a dismissed scan context are discarded
- Transport errors release the in-flight slot
- No observation is admitted between slot release and result store
"""

import threading

import pytest
import requests

from mtg_resolver.resolution.models import (
    ErrorKind,
    ResolutionOutcome,
    ResolutionResult,
    ScanObservation,
)
from mtg_resolver.resolution.session import ScanSession

OBSERVATION = ScanObservation("Lightning Bolt", "MKM · EN · 042")


@pytest.fixture
def success_outcome(make_candidate):
    """Factory for a successful outcome (held by the session)"""
    return lambda: ResolutionOutcome.success(ResolutionResult(make_candidate('bolt_mkm'), 0.9))


def failure_outcome():
    return ResolutionOutcome.failed(ErrorKind.NAME_NOT_FOUND, 'No card found matching "x"')


class StubResolver:
    """Returns queued outcomes, optionally blocking until released"""

    def __init__(self, *outcomes, block=False):
        self.outcomes = list(outcomes)
        self.calls = 0
        self.started = threading.Event()
        self.release = threading.Event()
        if not block:
            self.release.set()

    def resolve(self, observation):
        self.calls += 1
        self.started.set()
        assert self.release.wait(timeout=5)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class HookedLock:
    """Lock that runs a callback once, right after its next release"""

    def __init__(self):
        self._lock = threading.Lock()
        self.on_release = None

    def __enter__(self):
        self._lock.acquire()
        return self

    def __exit__(self, *exc_info):
        self._lock.release()
        callback, self.on_release = self.on_release, None
        if callback is not None:
            callback()
        return False


class InterleavingResolver:
    """Arranges for a second submit() to run as soon as the session lock is next released"""

    def __init__(self, outcome):
        self.outcome = outcome
        self.session = None
        self.calls = 0
        self.late_results = []

    def resolve(self, observation):
        self.calls += 1
        if self.calls == 1:
            self.session._lock.on_release = lambda: self.late_results.append(
                self.session.submit(observation)
            )
        return self.outcome


def submit_in_thread(session):
    """Start submit() in a worker thread; returns (thread, results dict)"""
    results = {}
    thread = threading.Thread(target=lambda: results.setdefault('outcome', session.submit(OBSERVATION)))
    thread.start()
    return thread, results


class TestAdmission:
    """Test dropping and holding"""

    def test_drops_while_in_flight(self, success_outcome):
        resolver = StubResolver(success_outcome(), block=True)
        session = ScanSession(resolver, session_id='table-1')

        thread, results = submit_in_thread(session)
        assert resolver.started.wait(timeout=5)

        assert session.busy
        assert session.submit(OBSERVATION) is None
        assert resolver.calls == 1

        resolver.release.set()
        thread.join(timeout=5)

        assert results['outcome'].ok
        assert not session.busy
        assert session.get_status().dropped == 1

    def test_holds_success_until_dismiss(self, success_outcome):
        resolver = StubResolver(success_outcome(), success_outcome())
        session = ScanSession(resolver)

        first = session.submit(OBSERVATION)
        assert first.ok
        assert session.current is first
        assert session.get_status().holding_result

        assert session.submit(OBSERVATION) is None
        assert resolver.calls == 1

        session.dismiss()
        assert session.current is None
        assert session.submit(OBSERVATION).ok
        assert resolver.calls == 2

    def test_failure_is_not_held(self, success_outcome):
        resolver = StubResolver(failure_outcome(), success_outcome())
        session = ScanSession(resolver)

        assert not session.submit(OBSERVATION).ok
        assert not session.get_status().holding_result
        assert session.submit(OBSERVATION).ok

    def test_status(self):
        session = ScanSession(StubResolver(), session_id='table-2')
        status = session.get_status()

        assert status.session_id == 'table-2'
        assert not status.in_flight
        assert status.context == 0
        assert status.dropped == 0


class TestScanContext:
    """Test stale result handling"""

    def test_discards_result_after_dismiss(self, success_outcome):
        resolver = StubResolver(success_outcome(), block=True)
        session = ScanSession(resolver)

        thread, results = submit_in_thread(session)
        assert resolver.started.wait(timeout=5)

        session.dismiss()
        resolver.release.set()
        thread.join(timeout=5)

        assert results['outcome'] is None
        assert session.current is None
        assert session.get_status().context == 1

    def test_transport_error_releases_slot(self, success_outcome):
        resolver = StubResolver(requests.ConnectionError("timeout"), success_outcome())
        session = ScanSession(resolver)

        with pytest.raises(requests.ConnectionError):
            session.submit(OBSERVATION)

        assert not session.busy
        assert session.submit(OBSERVATION).ok

    def test_no_admission_between_release_and_store(self, success_outcome):
        """An observation arriving right after the slot frees sees the held result"""
        first = success_outcome()
        resolver = InterleavingResolver(first)
        session = ScanSession(resolver)
        session._lock = HookedLock()
        resolver.session = session

        assert session.submit(OBSERVATION) is first

        assert resolver.late_results == [None]
        assert resolver.calls == 1
        assert session.current is first
        assert session.get_status().dropped == 1
