"""
mtg_resolver/tests/test_set_name.py: Tests for set name keyword scoring
"""

from mtg_resolver.matching.set_name import SetNameMatcher, set_name_keywords
from mtg_resolver.matching.name_similarity import NameSimilarityMatcher


class TestSetNameKeywords:
    """Test keyword extraction"""

    def test_skips_short_words(self):
        assert set_name_keywords("Murders at Karlov Manor") == ["Murders", "Karlov"]

    def test_strips_punctuation(self):
        assert set_name_keywords("Kamigawa: Neon Dynasty") == ["Kamigawa", "Neon"]

    def test_empty(self):
        assert set_name_keywords("") == []
        assert set_name_keywords(None) == []
        assert set_name_keywords("M21") == []


class TestSetNameMatcher:
    """Test SetNameMatcher.score()"""

    def test_all_keywords(self):
        assert SetNameMatcher().score("murders karlov 042", "Murders at Karlov Manor") == 1.0

    def test_partial(self):
        assert SetNameMatcher().score("MURDERS 042", "Murders at Karlov Manor") == 0.5

    def test_no_keywords(self):
        assert SetNameMatcher().score("MKM 042", "") == 0.0
        assert SetNameMatcher().score("MKM 042", None) == 0.0


class TestNameSimilarityMatcher:
    """Test title similarity used for tie-breaking"""

    def test_case_insensitive(self):
        assert NameSimilarityMatcher().score("LIGHTNING BOLT", "Lightning Bolt") == 1.0

    def test_english_beats_translation(self):
        matcher = NameSimilarityMatcher()
        assert matcher.score("Lightning Bolt", "Lightning Bolt") > matcher.score("Lightning Bolt", "Blitzschlag")

    def test_missing_names(self):
        assert NameSimilarityMatcher().score(None, None) == 1.0
        assert NameSimilarityMatcher().score("Lightning Bolt", None) == 0.0
