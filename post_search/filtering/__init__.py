"""
Post filtering for the listing page.

Combines hashtag, category and fuzzy title filters with pagination.
"""

from .post_filter import PostFilter, format_relative_time

__all__ = [
    "PostFilter",
    "format_relative_time"
]
