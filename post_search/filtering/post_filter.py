"""
Post filtering and pagination for the post listing page.

Narrows a list of posts by hashtag or category, applies the fuzzy title
search, pages the result and formats each post for display.
"""

from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional, Set

from post_search.models import (
    Post, PostPage, SearchSettings, ValidationError, FilteringError
)
from post_search.matching.fuzzy_matcher import FuzzyMatcher

import logging
logger = logging.getLogger(__name__)

MIN_PAGE_NUMBER = 1
MIN_PAGE_SIZE = 1
INVALID_ID = 0


def format_relative_time(created_at: Optional[datetime], now: Optional[datetime] = None) -> str:
    """
    Describe how long ago a post was created.

    Naive datetimes are treated as UTC.

    Args:
        created_at: Creation time of the post
        now: Reference time (current UTC time if None)

    Returns:
        Relative time string such as "5 minutes ago", or a calendar date
        for anything older than 30 days
    """
    if created_at is None:
        return ""

    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    seconds = (now - created_at).total_seconds()
    if seconds < 60:
        return "Just now"

    minutes = int(seconds // 60)
    if minutes < 60:
        return f"{minutes} minute{'s' if minutes != 1 else ''} ago"

    hours = minutes // 60
    if hours < 24:
        return f"{hours} hour{'s' if hours != 1 else ''} ago"

    days = hours // 24
    if days < 30:
        return f"{days} day{'s' if days != 1 else ''} ago"

    return created_at.strftime("%b %d, %Y")


class PostFilter:
    """
    Composes hashtag, category and title filters over an in-memory post list.

    Posts passed in are never modified; formatted copies are returned.
    """

    def __init__(self, matcher: Optional[FuzzyMatcher] = None,
                 settings: Optional[SearchSettings] = None,
                 user_lookup: Optional[Callable[[int], Optional[str]]] = None):
        """
        Initialize post filter.

        Args:
            matcher: Fuzzy matcher used for title search
            settings: Search settings (defaults if None)
            user_lookup: Callable returning a username for a user ID, or None
        """
        self.logger = logging.getLogger(f"{__name__}.PostFilter")
        self.settings = settings or SearchSettings()
        self.matcher = matcher or FuzzyMatcher(self.settings.similarity_threshold)
        self.user_lookup = user_lookup

    def get_filtered_posts(self, posts: Iterable[Post],
                           category_id: Optional[int] = None,
                           selected_hashtags: Optional[List[str]] = None,
                           filter_text: Optional[str] = None,
                           current_page: int = MIN_PAGE_NUMBER,
                           items_per_page: Optional[int] = None) -> PostPage:
        """
        Get one page of filtered and formatted posts.

        Hashtag selection takes precedence over the category; the title
        search is applied to whichever set those produce.

        Args:
            posts: All posts available to the listing
            category_id: Optional category to restrict to
            selected_hashtags: Selected hashtag names; the "All" value disables the filter
            filter_text: Title search text
            current_page: 1-based page number
            items_per_page: Page size (settings default if None)

        Returns:
            PostPage with the requested page and the total filtered count

        Raises:
            ValidationError: If pagination parameters are invalid
            FilteringError: If a post cannot be formatted
        """
        if items_per_page is None:
            items_per_page = self.settings.items_per_page

        if current_page < MIN_PAGE_NUMBER or items_per_page < MIN_PAGE_SIZE:
            raise ValidationError("Invalid pagination parameters.")

        selected_hashtags = selected_hashtags or []
        all_filter = self.settings.all_hashtags_filter

        if selected_hashtags and all_filter not in selected_hashtags:
            filtered = self.filter_by_hashtags(posts, selected_hashtags)
        elif category_id is not None and category_id > INVALID_ID:
            filtered = [post for post in posts if post.category_id == category_id]
        else:
            filtered = list(posts)

        if filter_text:
            filtered = [
                post for post in filtered
                if self.matcher.find_fuzzy_search_matches(
                    filter_text, [post.title], self.settings.similarity_threshold
                )
            ]

        total_count = len(filtered)
        start = (current_page - MIN_PAGE_NUMBER) * items_per_page
        page = filtered[start:start + items_per_page]

        self.logger.info(
            f"Filtered posts: {total_count} total, page {current_page} has {len(page)} "
            f"(category={category_id}, hashtags={selected_hashtags}, text='{filter_text or ''}')"
        )
        return PostPage(posts=[self.format_post(post) for post in page], total_count=total_count)

    def filter_by_hashtags(self, posts: Iterable[Post], hashtags: List[str]) -> List[Post]:
        """
        Keep posts that carry at least one of the given hashtags.

        Blank hashtag names are ignored; if nothing remains, all posts are kept.
        """
        wanted = {tag for tag in hashtags if tag and tag.strip()}
        if not wanted:
            return list(posts)
        return [post for post in posts if wanted.intersection(post.hashtags)]

    def format_post(self, post: Post, now: Optional[datetime] = None) -> Post:
        """
        Return a display copy of a post with username and relative date filled in.

        Raises:
            FilteringError: If the user lookup fails
        """
        username = post.username
        if not username:
            if self.user_lookup is not None:
                try:
                    username = self.user_lookup(post.user_id)
                except Exception as e:
                    self.logger.error(f"User lookup failed for post {post.id}: {e}")
                    raise FilteringError(f"Error formatting post with ID {post.id}: {e}") from e
            username = username or self.settings.unknown_user_label

        return replace(
            post,
            username=username,
            date=format_relative_time(post.created_at, now),
            hashtags=list(post.hashtags)
        )

    def toggle_hashtag_selection(self, current_hashtags: Set[str], hashtag: Optional[str],
                                 all_hashtags_filter: Optional[str] = None) -> Set[str]:
        """
        Toggle a hashtag in the current selection.

        Selecting the "All" value clears every other tag, removing the last
        tag falls back to "All", and adding a tag drops "All".

        Args:
            current_hashtags: Current selection (not modified)
            hashtag: Hashtag to toggle
            all_hashtags_filter: Value meaning "no hashtag filter" (settings default if None)

        Returns:
            Updated selection
        """
        if all_hashtags_filter is None:
            all_hashtags_filter = self.settings.all_hashtags_filter

        if not hashtag:
            return current_hashtags

        updated = set(current_hashtags)

        if hashtag == all_hashtags_filter:
            return {all_hashtags_filter}

        if hashtag in updated:
            updated.remove(hashtag)
            if not updated:
                updated.add(all_hashtags_filter)
        else:
            updated.add(hashtag)
            updated.discard(all_hashtags_filter)

        return updated
