"""
Validation for search settings.

Reports problems with detailed errors, warnings and suggestions rather
than raising, so callers can decide how strict to be.
"""

from typing import Any, Dict, List
from dataclasses import dataclass

from post_search.models import SearchSettings

import logging
logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Result of settings validation."""
    is_valid: bool
    errors: List[str]
    warnings: List[str]
    suggestions: List[str]

    def add_error(self, message: str):
        """Add an error message."""
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str):
        """Add a warning message."""
        self.warnings.append(message)

    def add_suggestion(self, message: str):
        """Add a suggestion message."""
        self.suggestions.append(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'is_valid': self.is_valid,
            'errors': self.errors,
            'warnings': self.warnings,
            'suggestions': self.suggestions
        }


class SettingsValidator:
    """Validates search settings."""

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.SettingsValidator")

    def validate(self, settings: SearchSettings) -> ValidationResult:
        """
        Validate search settings.

        A threshold outside 0.0-1.0 is only a warning: the matcher accepts
        it as-is, matching everything at or below 0 and nothing but exact or
        substring matches above 1.

        Args:
            settings: Search settings to validate

        Returns:
            ValidationResult with validation details
        """
        result = ValidationResult(is_valid=True, errors=[], warnings=[], suggestions=[])

        threshold = settings.similarity_threshold
        if not isinstance(threshold, (int, float)) or isinstance(threshold, bool):
            result.add_error("Similarity threshold must be a number")
        elif threshold <= 0.0:
            result.add_warning("Similarity threshold at or below 0 matches every title")
        elif threshold > 1.0:
            result.add_warning("Similarity threshold above 1 only keeps exact or substring matches")
        elif threshold < 0.4:
            result.add_suggestion("Thresholds below 0.4 tend to return unrelated titles")

        items_per_page = settings.items_per_page
        if not isinstance(items_per_page, int) or isinstance(items_per_page, bool):
            result.add_error("Items per page must be an integer")
        elif items_per_page < 1:
            result.add_error("Items per page must be at least 1")

        if not settings.all_hashtags_filter:
            result.add_error("The all-hashtags filter value is required")

        if not settings.unknown_user_label:
            result.add_warning("Posts without a username will show an empty author")

        if result.errors:
            self.logger.warning(f"Search settings invalid: {'; '.join(result.errors)}")
        return result
