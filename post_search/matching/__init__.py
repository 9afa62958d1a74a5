"""
Fuzzy matching engine for post search.

Provides Levenshtein similarity and threshold-based candidate matching
used to filter posts by title.
"""

from .fuzzy_matcher import (
    FuzzyMatcher,
    DEFAULT_SIMILARITY_THRESHOLD,
    levenshtein_similarity,
    find_fuzzy_search_matches
)

__all__ = [
    "FuzzyMatcher",
    "DEFAULT_SIMILARITY_THRESHOLD",
    "levenshtein_similarity",
    "find_fuzzy_search_matches"
]
