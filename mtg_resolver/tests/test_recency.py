"""
mtg_resolver/tests/test_recency.py: Tests for the set recency table
"""

import json
from datetime import date

import pytest

from mtg_resolver.matching.recency import RecencySet, build_recency_weights, get_recency_set


class TestRecencySet:
    """Test RecencySet lookups"""

    def test_known_set(self, recency):
        assert recency.score("MKM") == 0.78

    def test_lookup_is_case_insensitive(self, recency):
        assert recency.score("mkm") == 0.78
        assert "otj" in recency

    def test_unknown_set_gets_default(self, recency):
        assert recency.score("ZZZ") == 0.3

    def test_absent_set_code_gets_default(self, recency):
        assert recency.score(None) == 0.3
        assert recency.score("") == 0.3

    def test_rejects_out_of_range_weight(self):
        with pytest.raises(ValueError):
            RecencySet({"MKM": 1.5})

    def test_rejects_out_of_range_default(self):
        with pytest.raises(ValueError):
            RecencySet({}, default=-0.1)


class TestRecencyFile:
    """Test loading and saving the JSON table"""

    def test_save_and_load(self, temp_dir, recency):
        path = temp_dir / "recency.json"
        recency.save(path)

        loaded = RecencySet.from_file(path)
        assert len(loaded) == len(recency)
        assert loaded.score("NEO") == 0.62

    def test_malformed_file(self, temp_dir):
        path = temp_dir / "bad.json"
        path.write_text(json.dumps(["MKM", "NEO"]), encoding="utf-8")

        with pytest.raises(ValueError):
            RecencySet.from_file(path)

    def test_missing_file(self, temp_dir):
        with pytest.raises(FileNotFoundError):
            RecencySet.from_file(temp_dir / "missing.json")

    def test_bundled_table(self):
        """The packaged table loads and knows recent sets"""
        table = get_recency_set(reload=True)
        assert len(table) > 0
        assert "MKM" in table
        assert table.score("ZZZ") == 0.3


class TestBuildRecencyWeights:
    """Test build_recency_weights()"""

    @pytest.fixture
    def scryfall_sets(self):
        return [
            {'code': 'old', 'set_type': 'core', 'released_at': '2020-01-01'},
            {'code': 'new', 'set_type': 'expansion', 'released_at': '2024-02-09'},
            {'code': 'mid', 'set_type': 'masters', 'released_at': '2022-06-10'},
            {'code': 'fut', 'set_type': 'expansion', 'released_at': '2099-01-01'},
            {'code': 'dig', 'set_type': 'expansion', 'released_at': '2023-01-01', 'digital': True},
            {'code': 'tok', 'set_type': 'token', 'released_at': '2024-02-09'},
            {'code': 'nod', 'set_type': 'expansion'},
        ]

    def test_newest_first_linear_decay(self, scryfall_sets):
        weights = build_recency_weights(scryfall_sets, today=date(2024, 6, 1), floor=0.3)

        assert list(weights) == ['NEW', 'MID', 'OLD']
        assert weights['NEW'] == 1.0
        assert weights['MID'] == 0.65
        assert weights['OLD'] == 0.3

    def test_max_sets(self, scryfall_sets):
        weights = build_recency_weights(scryfall_sets, today=date(2024, 6, 1), max_sets=1)
        assert weights == {'NEW': 1.0}

    def test_nothing_released(self, scryfall_sets):
        assert build_recency_weights(scryfall_sets, today=date(2000, 1, 1)) == {}

    def test_weights_fit_recency_set(self, scryfall_sets):
        weights = build_recency_weights(scryfall_sets, today=date(2024, 6, 1))
        table = RecencySet(weights)
        assert table.score("new") == 1.0
