"""
Matching package for scoring card printings against OCR footer text.

This package provides:
- normalize / apply_confusions: Canonical OCR text and confusion classes
- distance / similarity: Levenshtein edit distance primitives
- SetCodeMatcher: OCR-tolerant set code scoring
- CollectorNumberMatcher: Collector number scoring with near-miss tolerance
- SetNameMatcher: Set name keyword overlap
- NameSimilarityMatcher: Title similarity for tie breaking
- RecencySet: Configurable set recency prior
- ConfidenceAggregator: Weighted combination of component scores
"""

from mtg_resolver.matching.text_normalizer import normalize, apply_confusions, OCR_CONFUSIONS
from mtg_resolver.matching.levenshtein import distance, similarity
from mtg_resolver.matching.set_code import SetCodeMatcher, build_set_code_pattern, extract_set_code_guess
from mtg_resolver.matching.collector_number import CollectorNumberMatcher, parse_collector_number
from mtg_resolver.matching.set_name import SetNameMatcher, set_name_keywords
from mtg_resolver.matching.name_similarity import NameSimilarityMatcher
from mtg_resolver.matching.recency import RecencySet, get_recency_set, build_recency_weights
from mtg_resolver.matching.aggregator import ConfidenceAggregator

__all__ = [
    'normalize',
    'apply_confusions',
    'OCR_CONFUSIONS',
    'distance',
    'similarity',
    'SetCodeMatcher',
    'build_set_code_pattern',
    'extract_set_code_guess',
    'CollectorNumberMatcher',
    'parse_collector_number',
    'SetNameMatcher',
    'set_name_keywords',
    'NameSimilarityMatcher',
    'RecencySet',
    'get_recency_set',
    'build_recency_weights',
    'ConfidenceAggregator',
]
