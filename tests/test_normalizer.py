"""
Tests for analysis normalization, the title heuristic and JSON extraction.
"""

import pytest

from knowledge_decay.encoding.normalizer import (
    HeuristicClassifier,
    extract_json_object,
    fallback_analysis,
    normalize_analysis,
)
from knowledge_decay.models.entry import AnalysisResult


MALFORMED_INPUTS = [
    None,
    42,
    "just text",
    [],
    ["concepts"],
    {},
    {"concepts": None, "summary": None, "complexity": None, "domain": None},
    {"concepts": "not a list", "summary": 12, "complexity": "hard", "domain": ["x"]},
    {"concepts": [], "summary": "", "complexity": 0, "domain": ""},
    {"concepts": [None, {}, [], "  "], "complexity": 7.5},
    {"concepts": list(range(20)), "complexity": float("nan")},
    {"complexity": True},
    {"complexity": float("inf")},
]


class TestNormalizeAnalysis:
    """Tests for normalize_analysis."""

    def test_valid_input_passes_through(self):
        """A well-formed analysis is kept as is."""
        result = normalize_analysis({
            "concepts": ["closures", "scope"],
            "summary": "Closures capture variables.",
            "complexity": 4,
            "domain": "programming",
        })

        assert result == AnalysisResult(
            concepts=["closures", "scope"],
            summary="Closures capture variables.",
            complexity=4,
            domain="programming",
        )

    @pytest.mark.parametrize("raw", MALFORMED_INPUTS)
    def test_always_schema_valid(self, raw):
        """Whatever comes in, the result satisfies every invariant."""
        result = normalize_analysis(raw)

        assert 1 <= len(result.concepts) <= 5
        assert all(isinstance(c, str) and c for c in result.concepts)
        assert result.complexity in {1, 2, 3, 4, 5}
        assert isinstance(result.summary, str)
        assert isinstance(result.domain, str)

    def test_concepts_truncated_to_five(self):
        """Only the first five concepts are kept."""
        result = normalize_analysis({"concepts": ["a", "b", "c", "d", "e", "f", "g"]})
        assert result.concepts == ["a", "b", "c", "d", "e"]

    def test_non_list_concepts_use_placeholder(self):
        """Non-sequence concepts become a single placeholder."""
        assert normalize_analysis({"concepts": "a, b"}).concepts == ["General Topic"]

    def test_placeholder_uses_title(self):
        """With a title, the placeholder is the truncated title."""
        title = "A very long page title about distributed consensus algorithms and Raft"
        result = normalize_analysis({"concepts": 5}, title=title)
        assert result.concepts == [title[:50]]

    def test_defaults(self):
        """Missing fields get their defaults."""
        result = normalize_analysis({})
        assert result.summary == "Learning session"
        assert result.complexity == 3
        assert result.domain == "general"

    @pytest.mark.parametrize("value,expected", [
        (1, 1),
        (5, 5),
        (0, 3),
        (6, 3),
        (-2, 3),
        (2.0, 2),
        (2.5, 3),
        ("4", 4),
        ("four", 3),
        (None, 3),
        (True, 3),
    ])
    def test_complexity_coercion(self, value, expected):
        """Complexity must be an integer 1-5, otherwise 3."""
        assert normalize_analysis({"complexity": value}).complexity == expected

    def test_non_string_concepts_are_stringified(self):
        """Scalar concept values are coerced to strings."""
        assert normalize_analysis({"concepts": [1, "two"]}).concepts == ["1", "two"]


class TestFallbackAnalysis:
    """Tests for the title heuristic."""

    @pytest.mark.parametrize("title", [
        "Intro to Python",
        "JavaScript closures explained",
        "Clean Code principles",
    ])
    def test_programming_titles(self, title):
        result = fallback_analysis(title)
        assert result.domain == "programming"
        assert result.complexity == 4

    @pytest.mark.parametrize("title", ["Calculus I", "Linear Algebra basics", "Math for ML"])
    def test_math_titles(self, title):
        result = fallback_analysis(title)
        assert result.domain == "mathematics"
        assert result.complexity == 4

    def test_tutorial_title(self):
        """Tutorial titles keep the general domain at complexity 3."""
        result = fallback_analysis("Watercolor tutorial for beginners")
        assert result.domain == "general"
        assert result.complexity == 3

    def test_unknown_title(self):
        result = fallback_analysis("History of the Roman Empire")
        assert result.domain == "general"
        assert result.complexity == 3

    def test_concept_and_summary_from_title(self):
        title = "X" * 80
        result = fallback_analysis(title)
        assert result.concepts == ["X" * 50]
        assert result.summary == f"Learning session: {title}"

    @pytest.mark.parametrize("title", ["", None, "   "])
    def test_empty_title_still_valid(self, title):
        """The fallback satisfies the normalizer invariants on its own."""
        result = fallback_analysis(title)
        assert result.concepts == ["General Topic"]
        assert result.summary == "Learning session"
        assert result.complexity in {1, 2, 3, 4, 5}

    def test_classifier_is_case_insensitive(self):
        assert HeuristicClassifier().classify("PYTHON") == ("programming", 4)

    @pytest.mark.parametrize("title", [
        "Building trust: a leadership guide",
        "Feeling frustrated at work",
        "Javanese cooking basics",
        "The aftermath of the storm",
        "Postcode lookup for the UK",
        "Mathematician biographies",
    ])
    def test_keywords_inside_words_do_not_match(self, title):
        """Keywords only count as whole tokens."""
        result = fallback_analysis(title)
        assert result.domain == "general"
        assert result.complexity == 3

    @pytest.mark.parametrize("title,expected", [
        ("Learning Rust the hard way", ("programming", 4)),
        ("Java streams in depth", ("programming", 4)),
        ("SQL joins explained", ("programming", 4)),
        ("C++ templates", ("programming", 4)),
        ("Math: limits and continuity", ("mathematics", 4)),
        ("Learning to paint", ("general", 3)),
        ("Gardening tutorials", ("general", 3)),
    ])
    def test_whole_token_matches(self, title, expected):
        assert HeuristicClassifier().classify(title) == expected


class TestExtractJsonObject:
    """Tests for pulling JSON out of free-form LLM text."""

    def test_plain_object(self):
        assert extract_json_object('{"a": 1}') == {"a": 1}

    def test_markdown_fence(self):
        text = 'Here you go:\n```json\n{"complexity": 3, "domain": "math"}\n```\nEnjoy!'
        assert extract_json_object(text) == {"complexity": 3, "domain": "math"}

    def test_first_balanced_object(self):
        """Only the first complete object is parsed."""
        text = '{"a": {"b": 2}} and then {"c": 3}'
        assert extract_json_object(text) == {"a": {"b": 2}}

    def test_braces_inside_strings(self):
        text = '{"summary": "uses {curly} braces", "complexity": 2}'
        assert extract_json_object(text)["summary"] == "uses {curly} braces"

    def test_escaped_quotes(self):
        text = r'{"summary": "say \"hi\" {", "complexity": 1}'
        assert extract_json_object(text)["complexity"] == 1

    def test_skips_invalid_candidate(self):
        text = '{not json} {"ok": true}'
        assert extract_json_object(text) == {"ok": True}

    @pytest.mark.parametrize("text", ["", "no json here", '{"unclosed": 1', None])
    def test_no_object_raises(self, text):
        with pytest.raises(ValueError):
            extract_json_object(text)
