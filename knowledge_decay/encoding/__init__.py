"""
Encoding module for turning captured content into analysis results.

Provides:
- LLM analyzers (Ollama, Gemini)
- Normalization of untrusted analysis output
- Title-based heuristic fallback
"""

from knowledge_decay.encoding.analyzer import (
    ANALYSIS_PROMPT,
    AnalysisError,
    BaseAnalyzer,
    GeminiAnalyzer,
    OllamaAnalyzer,
    create_analyzer,
)
from knowledge_decay.encoding.normalizer import (
    HeuristicClassifier,
    extract_json_object,
    fallback_analysis,
    normalize_analysis,
)

__all__ = [
    # Analyzers
    "ANALYSIS_PROMPT",
    "AnalysisError",
    "BaseAnalyzer",
    "GeminiAnalyzer",
    "OllamaAnalyzer",
    "create_analyzer",
    # Normalization
    "HeuristicClassifier",
    "extract_json_object",
    "fallback_analysis",
    "normalize_analysis",
]
