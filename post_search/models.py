"""
Core data models for the post search system.

This module defines the data structures shared by the fuzzy matcher, the
post filtering layer and the configuration manager, including match
results, posts, paged results and search settings.
"""

from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class MatchResult:
    """
    A candidate string that passed the similarity threshold.

    The index is the candidate's position in the caller's input and is
    only used to keep ranking stable for equal scores.
    """
    candidate: str
    score: float
    index: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'candidate': self.candidate,
            'score': self.score
        }


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO 8601 timestamp, accepting a trailing 'Z' for UTC.

    datetime.fromisoformat only understands 'Z' from Python 3.11 on.
    """
    if not value:
        return None
    if not isinstance(value, str):
        raise TypeError(f"Timestamp must be a string, got {type(value).__name__}")
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    return datetime.fromisoformat(value)


@dataclass
class Post:
    """
    Represents a forum post as seen by the listing page.

    Hashtags are attached names, already resolved by the caller.
    """
    id: int
    title: str
    description: str = ""
    user_id: int = 0
    category_id: int = 0
    username: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    like_count: int = 0
    hashtags: List[str] = field(default_factory=list)
    date: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'user_id': self.user_id,
            'category_id': self.category_id,
            'username': self.username,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
            'like_count': self.like_count,
            'hashtags': list(self.hashtags),
            'date': self.date
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Post':
        """
        Create Post from dictionary.

        Raises:
            KeyError: If 'id' or 'title' is missing
            TypeError: If title is not a string or hashtags is not a list of strings
            ValueError: If a number or timestamp cannot be parsed
        """
        title = data['title']
        if not isinstance(title, str):
            raise TypeError(f"Post title must be a string, got {type(title).__name__}")

        hashtags = data.get('hashtags')
        if hashtags is None:
            hashtags = []
        if not isinstance(hashtags, list) or not all(isinstance(tag, str) for tag in hashtags):
            raise TypeError("Post hashtags must be a list of strings")

        return cls(
            id=int(data['id']),
            title=title,
            description=data.get('description', ""),
            user_id=int(data.get('user_id', 0)),
            category_id=int(data.get('category_id', 0)),
            username=data.get('username'),
            created_at=_parse_timestamp(data.get('created_at')),
            updated_at=_parse_timestamp(data.get('updated_at')),
            like_count=int(data.get('like_count', 0)),
            hashtags=list(hashtags),
            date=data.get('date')
        )


@dataclass
class PostPage:
    """One page of filtered posts plus the size of the whole filtered set."""
    posts: List[Post]
    total_count: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'posts': [post.to_dict() for post in self.posts],
            'total_count': self.total_count
        }


@dataclass
class SearchSettings:
    """Configuration settings for searching and listing posts."""
    similarity_threshold: float = 0.6
    items_per_page: int = 5
    all_hashtags_filter: str = "All"
    unknown_user_label: str = "Unknown User"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'similarity_threshold': self.similarity_threshold,
            'items_per_page': self.items_per_page,
            'all_hashtags_filter': self.all_hashtags_filter,
            'unknown_user_label': self.unknown_user_label
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SearchSettings':
        """Create SearchSettings from dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


# Custom exceptions for post search
class PostSearchError(Exception):
    """Base exception for post search operations."""
    pass


class ConfigurationError(PostSearchError):
    """Raised when configuration is invalid or missing."""
    pass


class ValidationError(PostSearchError):
    """Raised when request data validation fails."""
    pass


class FilteringError(PostSearchError):
    """Raised when filtering or formatting posts fails."""
    pass
