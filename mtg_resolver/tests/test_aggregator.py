"""
mtg_resolver/tests/test_aggregator.py: Tests for confidence aggregation
"""

import pytest

from mtg_resolver.matching.aggregator import ConfidenceAggregator


class TestConfidenceAggregator:
    """Test ConfidenceAggregator"""

    def test_bounds(self):
        aggregator = ConfidenceAggregator()
        assert aggregator.aggregate(1.0, 1.0, 1.0, 1.0) == pytest.approx(1.0)
        assert aggregator.aggregate(0.0, 0.0, 0.0, 0.0) == 0.0

    def test_default_weights(self):
        aggregator = ConfidenceAggregator()
        assert aggregator.aggregate(1.0, 0.0, 0.0, 0.0) == pytest.approx(0.4)
        assert aggregator.aggregate(0.0, 1.0, 0.0, 0.0) == pytest.approx(0.3)
        assert aggregator.aggregate(0.0, 0.0, 1.0, 0.0) == pytest.approx(0.2)
        assert aggregator.aggregate(0.0, 0.0, 0.0, 1.0) == pytest.approx(0.1)

    def test_recency_alone_cannot_pass_threshold(self):
        """Only recency evidence tops out at 0.2"""
        assert ConfidenceAggregator().aggregate(0.0, 0.0, 1.0, 0.0) < 0.4

    def test_rejects_out_of_range_scores(self):
        aggregator = ConfidenceAggregator()
        with pytest.raises(ValueError):
            aggregator.aggregate(1.2, 0.0, 0.0, 0.0)
        with pytest.raises(ValueError):
            aggregator.aggregate(0.0, -0.1, 0.0, 0.0)

    def test_weights_must_sum_to_one(self):
        with pytest.raises(ValueError):
            ConfidenceAggregator(0.5, 0.5, 0.5, 0.5)

    def test_weights_must_be_non_negative(self):
        with pytest.raises(ValueError):
            ConfidenceAggregator(0.5, 0.6, -0.1, 0.0)

    def test_custom_weights(self):
        aggregator = ConfidenceAggregator(0.5, 0.5, 0.0, 0.0)
        assert aggregator.aggregate(1.0, 0.0, 1.0, 1.0) == pytest.approx(0.5)
