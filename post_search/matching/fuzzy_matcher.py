"""
Fuzzy matching algorithms for post search.

Provides Levenshtein-based string similarity and a candidate matcher that
combines exact, substring and word-level checks with a configurable
similarity threshold. Everything is computed per call; the matcher keeps
no state between calls and is safe to share across threads.
"""

from typing import Iterable, List, Optional

from post_search.models import MatchResult

import logging
logger = logging.getLogger(__name__)

DEFAULT_SIMILARITY_THRESHOLD = 0.6

EXACT_MATCH_SCORE = 1.0
SUBSTRING_MATCH_SCORE = 1.0


class FuzzyMatcher:
    """
    Matches a search query against candidate strings such as post titles.

    A candidate's score is the best of an exact match, a substring match in
    either direction, the Levenshtein similarity of the whole strings and,
    for multi-word candidates, the best score of any single word.
    """

    def __init__(self, default_threshold: float = DEFAULT_SIMILARITY_THRESHOLD):
        """
        Initialize fuzzy matcher.

        Args:
            default_threshold: Similarity threshold used when a call does not
                pass one. Not validated; values outside 0.0-1.0 are accepted.
        """
        self.logger = logging.getLogger(f"{__name__}.FuzzyMatcher")
        self.default_threshold = default_threshold

    def levenshtein_distance(self, s1: str, s2: str) -> int:
        """
        Calculate Levenshtein distance between two strings.

        Args:
            s1: First string
            s2: Second string

        Returns:
            Levenshtein distance (number of edits needed)
        """
        if not s1:
            return len(s2)
        if not s2:
            return len(s1)

        rows = len(s1) + 1
        cols = len(s2) + 1
        matrix = [[0] * cols for _ in range(rows)]

        for i in range(rows):
            matrix[i][0] = i
        for j in range(cols):
            matrix[0][j] = j

        for i in range(1, rows):
            for j in range(1, cols):
                cost = 0 if s1[i - 1] == s2[j - 1] else 1
                matrix[i][j] = min(
                    matrix[i - 1][j] + 1,      # deletion
                    matrix[i][j - 1] + 1,      # insertion
                    matrix[i - 1][j - 1] + cost  # substitution
                )

        return matrix[rows - 1][cols - 1]

    def levenshtein_similarity(self, source: str, target: str) -> float:
        """
        Calculate Levenshtein similarity (0.0 to 1.0).

        Two empty strings are identical (1.0); one empty string against a
        non-empty one is maximally dissimilar (0.0).

        Args:
            source: First string
            target: Second string

        Returns:
            Similarity score (1.0 = identical, 0.0 = completely different)
        """
        if not source and not target:
            return 1.0
        if not source or not target:
            return 0.0

        distance = self.levenshtein_distance(source, target)
        return 1.0 - (distance / max(len(source), len(target)))

    def _substring_or_similarity(self, query: str, text: str) -> float:
        """
        Score text against the query: 1.0 if either contains the other,
        otherwise their Levenshtein similarity.
        """
        if query in text or text in query:
            return SUBSTRING_MATCH_SCORE
        return self.levenshtein_similarity(query, text)

    def score_candidate(self, query: str, candidate: str) -> float:
        """
        Score one candidate against the query.

        Matching is case-sensitive. Empty candidates score 0.0.

        Args:
            query: Non-empty search text
            candidate: Candidate string

        Returns:
            Best score over exact, substring, whole-string and per-word checks
        """
        if not query or not candidate:
            return 0.0

        if candidate == query:
            return EXACT_MATCH_SCORE

        score = self._substring_or_similarity(query, candidate)
        if score >= SUBSTRING_MATCH_SCORE:
            return score

        words = candidate.split()
        if len(words) > 1:
            for word in words:
                score = max(score, self._substring_or_similarity(query, word))

        return score

    def rank_fuzzy_search_matches(self, query: Optional[str],
                                  candidates: Optional[Iterable[str]],
                                  threshold: Optional[float] = None) -> List[MatchResult]:
        """
        Score, filter and rank candidates, keeping their scores.

        Args:
            query: Search text; None or empty yields no matches
            candidates: Candidate strings; None yields no matches
            threshold: Minimum score to keep (uses default if None)

        Returns:
            MatchResult list in descending score order, ties in input order,
            each distinct string listed once at its best position
        """
        if threshold is None:
            threshold = self.default_threshold

        if not query or candidates is None:
            return []

        scored = []
        for index, candidate in enumerate(candidates):
            # Empty candidates never match, whatever the threshold
            if not candidate:
                continue
            score = self.score_candidate(query, candidate)
            self.logger.debug(f"Fuzzy score: '{query}' vs '{candidate}' = {score:.3f}")
            if score >= threshold:
                scored.append(MatchResult(candidate=candidate, score=score, index=index))

        # sorted() is stable, so equal scores keep their input order
        ranked = sorted(scored, key=lambda r: r.score, reverse=True)

        results = []
        seen = set()
        for result in ranked:
            if result.candidate in seen:
                continue
            seen.add(result.candidate)
            results.append(result)

        self.logger.debug(f"Fuzzy search '{query}': {len(results)} matches (threshold: {threshold})")
        return results

    def find_fuzzy_search_matches(self, query: Optional[str],
                                  candidates: Optional[Iterable[str]],
                                  threshold: Optional[float] = None) -> List[str]:
        """
        Find the candidates that fuzzily match the query.

        Never raises: empty or missing queries and candidate lists simply
        produce an empty result.

        Args:
            query: Search text
            candidates: Candidate strings
            threshold: Minimum score to keep (uses default if None)

        Returns:
            Matching candidate strings, best first, without duplicates
        """
        return [r.candidate for r in self.rank_fuzzy_search_matches(query, candidates, threshold)]


_default_matcher = FuzzyMatcher()


def levenshtein_similarity(source: str, target: str) -> float:
    """Levenshtein similarity of two strings using the default matcher."""
    return _default_matcher.levenshtein_similarity(source, target)


def find_fuzzy_search_matches(query: Optional[str], candidates: Optional[Iterable[str]],
                              threshold: float = DEFAULT_SIMILARITY_THRESHOLD) -> List[str]:
    """Fuzzy search over candidates using the default matcher."""
    return _default_matcher.find_fuzzy_search_matches(query, candidates, threshold)
