"""
Post Search System

Search engine behind the forum post listing: fuzzy title matching,
hashtag and category filtering with pagination, and search settings.

This package provides:
- Core data models for posts, match results and settings
- Levenshtein-based fuzzy matching
- Post filtering and pagination
- Configuration management
"""

from .models import (
    # Core data models
    MatchResult,
    Post,
    PostPage,

    # Configuration models
    SearchSettings,

    # Exceptions
    PostSearchError,
    ConfigurationError,
    ValidationError,
    FilteringError
)
from .matching import FuzzyMatcher, levenshtein_similarity, find_fuzzy_search_matches
from .filtering import PostFilter

__version__ = "1.0.0"

__all__ = [
    # Core data models
    "MatchResult",
    "Post",
    "PostPage",

    # Configuration models
    "SearchSettings",

    # Matching and filtering
    "FuzzyMatcher",
    "levenshtein_similarity",
    "find_fuzzy_search_matches",
    "PostFilter",

    # Exceptions
    "PostSearchError",
    "ConfigurationError",
    "ValidationError",
    "FilteringError"
]
