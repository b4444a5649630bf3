"""
mtg_resolver/tests/conftest.py: Pytest configuration and shared fixtures

Provides:
- Candidate factory and sample printings
- Fake name resolver / candidate source collaborators
- Small in-memory recency table
- Logging configuration
- Factories for candidates and the fakes, exposed as fixtures
"""

import logging
import shutil
import tempfile
from pathlib import Path

import pytest
import requests

from mtg_resolver.matching.recency import RecencySet
from mtg_resolver.resolution.models import Candidate
from mtg_resolver.resolution.resolver import CandidateResolver
from mtg_resolver.resolution.scorer import CandidateScorer
from mtg_resolver.sources.base import BaseNameResolver, BaseCandidateSource
from mtg_resolver.sources.static import StaticCardSource

# Configure logging for tests
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


def _make_candidate(card_id: str, **overrides) -> Candidate:
    """Candidate with sensible defaults for tests"""
    values = {
        'id': card_id,
        'name': 'Lightning Bolt',
        'set_code': 'MKM',
        'set_name': 'Murders at Karlov Manor',
        'collector_number': '42/291',
        'lang': 'en',
    }
    values.update(overrides)
    return Candidate(**values)


class FakeNameResolver(BaseNameResolver):
    """Returns a fixed canonical name and records lookups"""

    def __init__(self, canonical_name=None):
        self.canonical_name = canonical_name
        self.calls = []

    def resolve_by_fuzzy_name(self, name):
        self.calls.append(name)
        return self.canonical_name


class FakeCandidateSource(BaseCandidateSource):
    """Returns a fixed list of printings and records lookups"""

    def __init__(self, candidates=None):
        self.candidates = list(candidates or [])
        self.calls = []

    def all_printings(self, canonical_name, include_all_languages=True):
        self.calls.append((canonical_name, include_all_languages))
        return list(self.candidates)


class FailingCandidateSource(BaseCandidateSource):
    """Simulates a network failure"""

    def all_printings(self, canonical_name, include_all_languages=True):
        raise requests.ConnectionError("connection refused")


@pytest.fixture
def temp_dir():
    """
    Function-scoped temporary directory

    Yields:
        Path to temporary directory (cleaned up after test)
    """
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path

    # Cleanup
    if temp_path.exists():
        shutil.rmtree(temp_path)


@pytest.fixture
def make_candidate():
    """
    Candidate factory

    Returns:
        Callable(card_id, **overrides) -> Candidate, defaulting to MKM Lightning Bolt
    """
    return _make_candidate


@pytest.fixture
def make_name_resolver():
    """Factory for name resolvers returning a fixed canonical name (None for no match)"""
    return FakeNameResolver


@pytest.fixture
def make_candidate_source():
    """Factory for candidate sources returning a fixed list of printings"""
    return FakeCandidateSource


@pytest.fixture
def failing_source():
    """Candidate source whose every lookup raises requests.ConnectionError"""
    return FailingCandidateSource()


@pytest.fixture
def recency():
    """Small recency table, default 0.3 for everything else"""
    return RecencySet({'MKM': 0.78, 'OTJ': 0.8, 'NEO': 0.62, 'DOM': 0.32, 'EOE': 0.96})


@pytest.fixture
def scorer(recency):
    """Scorer with default matchers and the small recency table"""
    return CandidateScorer(recency=recency)


@pytest.fixture
def bolt_printings():
    """
    Lightning Bolt printings, newest first

    Returns:
        List of Candidates in MKM, OTJ, NEO (English and German) and DOM
    """
    return [
        _make_candidate('bolt_mkm'),
        _make_candidate('bolt_otj', set_code='OTJ', set_name='Outlaws of Thunder Junction',
                        collector_number='15/276'),
        _make_candidate('bolt_neo_en', set_code='NEO', set_name='Kamigawa: Neon Dynasty',
                        collector_number='137/302'),
        _make_candidate('bolt_neo_de', set_code='NEO', set_name='Kamigawa: Neon Dynasty',
                        collector_number='137/302', lang='de', printed_name='Blitzschlag'),
        _make_candidate('bolt_dom', set_code='DOM', set_name='Dominaria',
                        collector_number='129/269'),
    ]


@pytest.fixture
def static_source(bolt_printings):
    """StaticCardSource over the Lightning Bolt printings"""
    return StaticCardSource(bolt_printings)


@pytest.fixture
def make_resolver(scorer):
    """
    Factory for resolvers over fake collaborators

    Returns:
        Callable(candidates, canonical_name='Lightning Bolt', **kwargs) -> CandidateResolver
    """
    def _make(candidates, canonical_name='Lightning Bolt', **kwargs):
        return CandidateResolver(
            name_resolver=FakeNameResolver(canonical_name),
            candidate_source=FakeCandidateSource(candidates),
            scorer=scorer,
            **kwargs
        )
    return _make


# Pytest hooks

def pytest_configure(config):
    """
    Pytest configuration hook

    Args:
        config: Pytest config object
    """
    # Register custom markers
    config.addinivalue_line("markers", "unit: Unit tests (fast, no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (wire several components together)")
    config.addinivalue_line("markers", "slow: Slow tests (> 1 second)")


def pytest_collection_modifyitems(config, items):
    """
    Modify test items during collection

    Args:
        config: Pytest config object
        items: List of collected test items
    """
    # Auto-mark tests based on naming conventions
    for item in items:
        if 'integration' in item.nodeid.lower():
            item.add_marker(pytest.mark.integration)

        if 'slow' in item.nodeid.lower():
            item.add_marker(pytest.mark.slow)
