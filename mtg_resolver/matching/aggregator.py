"""Weighted combination of component scores into one confidence value."""

import math

from mtg_resolver.config import (
    WEIGHT_SET_CODE,
    WEIGHT_COLLECTOR_NUMBER,
    WEIGHT_RECENCY,
    WEIGHT_SET_NAME,
)


class ConfidenceAggregator:
    """
    Combines set code, collector number, recency and set name scores.

    Weights must sum to 1.0 so that inputs in [0, 1] give an output in [0, 1].
    """

    def __init__(
        self,
        set_code_weight: float = WEIGHT_SET_CODE,
        collector_number_weight: float = WEIGHT_COLLECTOR_NUMBER,
        recency_weight: float = WEIGHT_RECENCY,
        set_name_weight: float = WEIGHT_SET_NAME
    ):
        weights = (set_code_weight, collector_number_weight, recency_weight, set_name_weight)
        if any(w < 0 for w in weights):
            raise ValueError(f"Weights must be non-negative, got {weights}")
        if not math.isclose(sum(weights), 1.0, abs_tol=1e-9):
            raise ValueError(f"Weights must sum to 1.0, got {sum(weights):.6f}")

        self.set_code_weight = set_code_weight
        self.collector_number_weight = collector_number_weight
        self.recency_weight = recency_weight
        self.set_name_weight = set_name_weight

    def aggregate(
        self,
        set_code_score: float,
        collector_number_score: float,
        recency_score: float,
        set_name_score: float
    ) -> float:
        """
        Weighted sum of the component scores.

        Raises:
            ValueError: If any component score is outside [0, 1]
        """
        scores = (set_code_score, collector_number_score, recency_score, set_name_score)
        for value in scores:
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"Component score out of range: {value}")

        total = (
            self.set_code_weight * set_code_score
            + self.collector_number_weight * collector_number_score
            + self.recency_weight * recency_score
            + self.set_name_weight * set_name_score
        )
        # Float error can push the sum a hair outside the unit interval
        return min(1.0, max(0.0, total))
