"""
Unit tests for fuzzy matching algorithms.

Tests Levenshtein distance and similarity, candidate scoring, and the
ranking, threshold and deduplication rules of the fuzzy search.
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from post_search.models import MatchResult
from post_search.matching import fuzzy_matcher
from post_search.matching.fuzzy_matcher import (
    FuzzyMatcher, levenshtein_similarity, find_fuzzy_search_matches
)


TEST_CANDIDATES = [
    "test",          # Exact match
    "tst",           # Similar word
    "testing",       # Contains query
    "hello test",    # Multi-word with exact match
    "hello tst",     # Multi-word with similar word
    "xyz",           # No match
    "te",            # Shorter string contained in query
]


class TestLevenshtein:
    """Test cases for Levenshtein distance and similarity."""

    def setup_method(self):
        """Setup test environment."""
        self.matcher = FuzzyMatcher()

    def test_levenshtein_distance_identical(self):
        """Test Levenshtein distance for identical strings."""
        assert self.matcher.levenshtein_distance("hello", "hello") == 0

    def test_levenshtein_distance_different(self):
        """Test Levenshtein distance for different strings."""
        assert self.matcher.levenshtein_distance("hello", "world") == 4

    def test_levenshtein_distance_insertion_and_deletion(self):
        """Test Levenshtein distance with one insertion or deletion."""
        assert self.matcher.levenshtein_distance("cat", "cats") == 1
        assert self.matcher.levenshtein_distance("cats", "cat") == 1

    def test_levenshtein_distance_empty(self):
        """Test Levenshtein distance with empty strings."""
        assert self.matcher.levenshtein_distance("", "") == 0
        assert self.matcher.levenshtein_distance("hello", "") == 5
        assert self.matcher.levenshtein_distance("", "world") == 5

    def test_similarity_identical(self):
        """Identical strings are fully similar."""
        for s in ["a", "test", "hello world", "Ünïcödé"]:
            assert self.matcher.levenshtein_similarity(s, s) == 1.0

    def test_similarity_empty_strings(self):
        """Both empty is identical, one empty is maximally different."""
        assert self.matcher.levenshtein_similarity("", "") == 1.0
        assert self.matcher.levenshtein_similarity("x", "") == 0.0
        assert self.matcher.levenshtein_similarity("", "test") == 0.0

    def test_similarity_completely_different(self):
        """Disjoint strings of equal length score zero."""
        assert self.matcher.levenshtein_similarity("abc", "xyz") == 0.0

    def test_similarity_normalized_by_longest(self):
        """Distance is normalized by the longer string."""
        assert self.matcher.levenshtein_similarity("hello", "hallo") == 0.8
        assert self.matcher.levenshtein_similarity("kitten", "sitting") == pytest.approx(4 / 7)

    @pytest.mark.parametrize("source,target", [
        ("kitten", "sitting"),
        ("test", "tester"),
        ("abc", ""),
        ("flaw", "lawn"),
        ("Post", "post"),
    ])
    def test_similarity_symmetric(self, source, target):
        """Similarity does not depend on argument order."""
        assert (self.matcher.levenshtein_similarity(source, target)
                == self.matcher.levenshtein_similarity(target, source))

    @pytest.mark.parametrize("source,target,high", [
        ("kitten", "sitting", True),
        ("test", "test", True),
        ("", "", True),
        ("abc", "xyz", False),
        ("test", "", False),
    ])
    def test_similarity_high_or_low(self, source, target, high):
        """Similar strings score above 0.5, dissimilar ones at or below."""
        score = self.matcher.levenshtein_similarity(source, target)
        if high:
            assert score > 0.5
        else:
            assert score <= 0.5


class TestScoreCandidate:
    """Test cases for scoring a single candidate."""

    def setup_method(self):
        """Setup test environment."""
        self.matcher = FuzzyMatcher()

    def test_exact_match(self):
        assert self.matcher.score_candidate("test", "test") == 1.0

    def test_candidate_contains_query(self):
        assert self.matcher.score_candidate("test", "testing") == 1.0

    def test_query_contains_candidate(self):
        assert self.matcher.score_candidate("testing", "ing") == 1.0

    def test_whole_string_similarity(self):
        assert self.matcher.score_candidate("test", "tst") == 0.75

    def test_word_level_similarity(self):
        """A close word inside a longer phrase is not penalized by the phrase length."""
        score = self.matcher.score_candidate("wrld", "hello world")
        assert score == pytest.approx(0.8)
        assert score > self.matcher.levenshtein_similarity("wrld", "hello world")

    def test_case_sensitive(self):
        """Case differences count as edits."""
        assert self.matcher.score_candidate("Test", "test") == 0.75
        assert self.matcher.score_candidate("TEST", "test") == 0.0

    def test_empty_inputs_score_zero(self):
        assert self.matcher.score_candidate("", "test") == 0.0
        assert self.matcher.score_candidate("test", "") == 0.0


class TestFindFuzzySearchMatches:
    """Test cases for the fuzzy search over candidate lists."""

    def setup_method(self):
        """Setup test environment."""
        self.matcher = FuzzyMatcher()

    @pytest.mark.parametrize("query", [None, ""])
    def test_invalid_query_returns_empty(self, query):
        assert self.matcher.find_fuzzy_search_matches(query, TEST_CANDIDATES) == []

    def test_empty_or_missing_candidates_return_empty(self):
        assert self.matcher.find_fuzzy_search_matches("test", []) == []
        assert self.matcher.find_fuzzy_search_matches("test", None) == []

    def test_exact_candidate_found(self):
        results = self.matcher.find_fuzzy_search_matches("test1", ["test1", "test2", "test3"])
        assert "test1" in results
        assert results[0] == "test1"

    def test_matches_in_correct_order(self):
        """Exact and substring matches rank before fuzzy ones."""
        results = self.matcher.find_fuzzy_search_matches("test", TEST_CANDIDATES)

        assert results[0] == "test"
        assert "testing" in results
        assert "hello test" in results
        assert "xyz" not in results
        assert results.index("test") < results.index("tst")
        assert results == ["test", "testing", "hello test", "te", "tst", "hello tst"]

    def test_exact_ranked_before_lower_scores(self):
        results = self.matcher.find_fuzzy_search_matches("test", ["testing", "test", "tester"])
        assert "test" in results
        assert results.index("test") <= results.index("tester")

    def test_word_level_matches(self):
        results = self.matcher.find_fuzzy_search_matches(
            "test", ["hello world", "test world", "world test"]
        )
        assert results == ["test world", "world test"]

    def test_query_contains_candidate(self):
        results = self.matcher.find_fuzzy_search_matches("testing", ["test", "te", "ing"])
        assert "te" in results
        assert "ing" in results

    def test_duplicates_removed(self):
        results = self.matcher.find_fuzzy_search_matches("test", ["test", "test", "testing"])
        assert results.count("test") == 1
        assert results == ["test", "testing"]

    def test_equal_scores_keep_input_order(self):
        assert self.matcher.find_fuzzy_search_matches("test", ["best", "rest"]) == ["best", "rest"]
        assert self.matcher.find_fuzzy_search_matches("test", ["rest", "best"]) == ["rest", "best"]

    def test_mixed_case_variants_are_distinct(self):
        results = self.matcher.find_fuzzy_search_matches("Test", ["test", "Test", "TEST"])
        assert results == ["Test", "test"]

    def test_whitespace_query_not_trimmed(self):
        results = self.matcher.find_fuzzy_search_matches(" ", ["hello world", "hello"])
        assert results == ["hello world"]

    def test_empty_candidates_never_match(self):
        assert self.matcher.find_fuzzy_search_matches("test", ["", "test"], 0.0) == ["test"]

    def test_custom_threshold_respected(self):
        high = self.matcher.find_fuzzy_search_matches("test", TEST_CANDIDATES, 0.9)
        low = self.matcher.find_fuzzy_search_matches("test", TEST_CANDIDATES, 0.3)

        assert len(high) < len(low)
        assert "test" in high
        assert "tst" not in high
        assert "tst" in low

    def test_raising_threshold_never_grows_results(self):
        candidates = TEST_CANDIDATES + ["toast", "taste", "contest", "best of"]
        sizes = [
            len(self.matcher.find_fuzzy_search_matches("test", candidates, t))
            for t in (0.0, 0.3, 0.5, 0.6, 0.75, 0.9, 1.0, 1.5)
        ]
        assert sizes == sorted(sizes, reverse=True)

    def test_threshold_out_of_range_accepted(self):
        assert self.matcher.find_fuzzy_search_matches("test", ["test", "tst"], 1.5) == []
        assert self.matcher.find_fuzzy_search_matches("test", ["abc", "xyz"], -1.0) == ["abc", "xyz"]

    def test_default_threshold_from_instance(self):
        strict = FuzzyMatcher(default_threshold=0.9)
        assert strict.find_fuzzy_search_matches("test", ["test", "tst"]) == ["test"]
        assert FuzzyMatcher().find_fuzzy_search_matches("test", ["test", "tst"]) == ["test", "tst"]

    def test_accepts_any_iterable(self):
        results = self.matcher.find_fuzzy_search_matches("test", (c for c in ["xyz", "test"]))
        assert results == ["test"]


class TestRankFuzzySearchMatches:
    """Test cases for the scored search results."""

    def test_results_carry_scores_and_input_index(self):
        results = FuzzyMatcher().rank_fuzzy_search_matches("test", ["tst", "test", "tst"])

        assert results == [
            MatchResult(candidate="test", score=1.0, index=1),
            MatchResult(candidate="tst", score=0.75, index=0),
        ]
        assert results[1].to_dict() == {'candidate': 'tst', 'score': 0.75}


class TestModuleFunctions:
    """Test cases for the module-level helpers."""

    def test_levenshtein_similarity(self):
        assert levenshtein_similarity("abc", "abc") == 1.0
        assert levenshtein_similarity("abc", "xyz") == 0.0

    def test_find_fuzzy_search_matches_default_threshold(self):
        assert fuzzy_matcher.DEFAULT_SIMILARITY_THRESHOLD == 0.6
        assert find_fuzzy_search_matches("test", ["tst", "xyz"]) == ["tst"]
        assert find_fuzzy_search_matches("test", ["tst", "xyz"], 0.8) == []

    def test_default_matcher_shared_across_threads(self):
        candidates = ["Learning Python", "Python tips", "test", "testing", "tst", "Cooking pasta"]
        queries = ["test", "Python", "pasta", "tips", "Lerning", "xyz"] * 20

        def search(query):
            return (find_fuzzy_search_matches(query, candidates),
                    levenshtein_similarity(query, candidates[0]))

        expected = [search(q) for q in queries]
        with ThreadPoolExecutor(max_workers=8) as executor:
            concurrent = list(executor.map(search, queries))

        assert concurrent == expected
