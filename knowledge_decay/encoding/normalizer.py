"""
Analysis normalization.

Anything an LLM returns is untrusted. ``normalize_analysis`` repairs whatever
it is given into a valid ``AnalysisResult`` and never raises;
``fallback_analysis`` classifies a page from its title alone when no LLM
analysis is available.
"""

import json
import re
from typing import Any

from knowledge_decay.models.entry import (
    DEFAULT_COMPLEXITY,
    DEFAULT_DOMAIN,
    DEFAULT_SUMMARY,
    AnalysisResult,
    coerce_complexity,
    coerce_concepts,
    coerce_text,
    placeholder_concept,
)


def normalize_analysis(raw: Any, title: str | None = None) -> AnalysisResult:
    """
    Repair an externally supplied analysis into a valid result.

    Each field is checked independently:
    - concepts: sequence, first five kept, else a placeholder
    - summary: string, else "Learning session"
    - complexity: integer 1-5, else 3
    - domain: string, else "general"

    Args:
        raw: Parsed LLM output (any type, including None)
        title: Page title, used for the placeholder concept

    Returns:
        A fully populated AnalysisResult
    """
    if not isinstance(raw, dict):
        raw = {}

    return AnalysisResult(
        concepts=coerce_concepts(raw.get("concepts"), title),
        summary=coerce_text(raw.get("summary"), DEFAULT_SUMMARY),
        complexity=coerce_complexity(raw.get("complexity")),
        domain=coerce_text(raw.get("domain"), DEFAULT_DOMAIN, strip=True),
    )


class HeuristicClassifier:
    """
    Keyword-based classification from a page title.

    Used when remote analysis is unavailable or fails.
    """

    PROGRAMMING_KEYWORDS = [
        "python", "javascript", "typescript", "java", "rust", "golang",
        "c++", "sql", "code", "coding", "programming",
    ]

    MATH_KEYWORDS = [
        "math", "calculus", "algebra", "geometry", "statistics", "trigonometry",
    ]

    # Matched as word prefixes ("learning", "tutorials")
    LEARNING_KEYWORDS = ["tutorial", "learn", "course", "guide"]

    def classify(self, title: str) -> tuple[str, int]:
        """Return (domain, complexity) for a title."""
        lowered = (title or "").lower()

        if self._matches(lowered, self.PROGRAMMING_KEYWORDS):
            return "programming", 4
        if self._matches(lowered, self.MATH_KEYWORDS):
            return "mathematics", 4
        if self._matches(lowered, self.LEARNING_KEYWORDS, prefix=True):
            return DEFAULT_DOMAIN, 3
        return DEFAULT_DOMAIN, DEFAULT_COMPLEXITY

    @staticmethod
    def _matches(text: str, keywords: list[str], prefix: bool = False) -> bool:
        """
        Check for keywords as whole tokens, so "rust" does not match "trust".

        ``\\b`` is not used because keywords like "c++" end in a non-word character.
        """
        for keyword in keywords:
            pattern = rf"(?<![a-z0-9]){re.escape(keyword)}"
            if not prefix:
                pattern += r"(?![a-z0-9])"
            if re.search(pattern, text):
                return True
        return False


_classifier = HeuristicClassifier()


def fallback_analysis(title: str | None) -> AnalysisResult:
    """
    Build an analysis from the title alone.

    Produces the same guarantees as ``normalize_analysis``.
    """
    title = title if isinstance(title, str) else ""
    domain, complexity = _classifier.classify(title)
    summary = f"Learning session: {title.strip()}" if title.strip() else DEFAULT_SUMMARY

    return AnalysisResult(
        concepts=[placeholder_concept(title)],
        summary=summary,
        complexity=complexity,
        domain=domain,
    )


def extract_json_object(text: str) -> Any:
    """
    Parse the first balanced ``{...}`` object found in free-form text.

    Handles markdown code fences and prose around the JSON. Braces inside
    string literals are ignored when matching.

    Raises:
        ValueError: If no balanced object is found or it does not parse
    """
    if not isinstance(text, str):
        raise ValueError("Response text is not a string")

    # Strip markdown fences
    text = re.sub(r"```(?:json)?", "", text)

    start = text.find("{")
    while start != -1:
        end = _find_object_end(text, start)
        if end == -1:
            break
        try:
            return json.loads(text[start:end + 1])
        except json.JSONDecodeError:
            start = text.find("{", start + 1)

    raise ValueError("No valid JSON object found in response")


def _find_object_end(text: str, start: int) -> int:
    """Index of the brace closing the object opened at ``start``, or -1."""
    depth = 0
    in_string = False
    escaped = False

    for i in range(start, len(text)):
        char = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return i

    return -1
