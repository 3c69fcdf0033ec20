"""Tests for the boolean query engine."""

from __future__ import annotations

import pytest

from log_timeline.search.query import evaluate, extract_terms, tokenize


class TestTokenize:
    def test_parens_are_tokens(self):
        assert tokenize("(a OR b)AND c") == ["(", "a", "OR", "b", ")", "AND", "c"]

    def test_phrases_kept_whole_and_lowercased(self):
        assert tokenize('(a OR "Foo (Bar) baz")') == ["(", "a", "OR", "foo (bar) baz", ")"]

    def test_tabs_split(self):
        assert tokenize("a\tb") == ["a", "b"]


class TestEvaluate:
    """Test query evaluation against lowercased haystacks."""

    @pytest.mark.parametrize(
        "query, haystack, expected",
        [
            ("a AND b", "a b", True),
            ("a AND b", "a", False),
            ("(a OR b) AND c", "b c", True),
            ('"exact phrase"', "an exact phrase here", True),
            ('"exact phrase"', "exact other phrase", False),
            ("x OR y", "y", True),
            ("a b", "a", False),
            ("a b", "b a", True),
            ("ERROR", "an error occurred", True),
            ("a and b", "a b", True),
            ("((a OR b) AND (c OR d))", "b d", True),
            ("((a OR b) AND (c OR d))", "b", False),
        ],
    )
    def test_cases(self, query, haystack, expected):
        assert evaluate(query, haystack) is expected

    def test_empty_query_matches_nothing(self):
        assert evaluate("", "anything") is False
        assert evaluate("   ", "anything") is False

    def test_operator_only_query_matches_nothing(self):
        assert evaluate("AND OR", "and or") is False
        assert evaluate("()", "anything") is False

    def test_left_to_right_without_precedence(self):
        # (a OR b) AND c, not a OR (b AND c)
        assert evaluate("a OR b AND c", "a") is False
        assert evaluate("a OR (b AND c)", "a") is True

    def test_group_after_term_defaults_to_and(self):
        assert evaluate("a (b)", "a") is False
        assert evaluate("a (b)", "a b") is True

    def test_unclosed_group_runs_to_end(self):
        assert evaluate("(a OR b", "b") is True

    def test_stray_close_paren_ignored(self):
        assert evaluate("a ) OR b", "b") is True

    def test_phrase_parens_are_not_structure(self):
        assert evaluate('"fn(x)" AND y', "call fn(x) with y") is True


class TestExtractTerms:
    def test_phrases_then_words(self):
        assert extract_terms('(error OR warn) AND "payment failed"') == [
            "payment failed",
            "error",
            "warn",
        ]

    def test_deduplicated_lowercase(self):
        assert extract_terms("Error error ERROR or AND") == ["error"]

    def test_empty(self):
        assert extract_terms("") == []
        assert extract_terms("( )") == []
