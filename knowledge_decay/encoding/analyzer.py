"""
Content analysis using LLMs.

Supports multiple providers:
- Ollama (local, default)
- Gemini

Any failure of the remote call falls back to the title heuristic, so a
capture is never lost because the LLM is unavailable.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from knowledge_decay.config import LLMConfig
from knowledge_decay.encoding.normalizer import (
    extract_json_object,
    fallback_analysis,
    normalize_analysis,
)
from knowledge_decay.models.entry import AnalysisResult


logger = logging.getLogger(__name__)


ANALYSIS_PROMPT = """You are a cognitive learning expert. Analyze this learning content and return a JSON response.

Content Title: {title}
Content: {content}
Time Spent: {time_spent} seconds

Return ONLY a valid JSON object with this exact structure (no markdown, no extra text):
{{
  "concepts": ["concept1", "concept2", "concept3"],
  "summary": "2-3 sentence summary of what was learned",
  "complexity": 3,
  "domain": "programming"
}}

Complexity scale:
1 = Very Simple (basic facts)
2 = Simple (straightforward concepts)
3 = Moderate (requires understanding)
4 = Complex (multiple interconnected ideas)
5 = Very Complex (abstract/advanced concepts)

Extract 3-5 key concepts maximum."""


class AnalysisError(Exception):
    """Raised when the remote analysis cannot produce a usable object."""

    pass


class BaseAnalyzer(ABC):
    """Abstract base class for LLM content analyzers."""

    def __init__(self, config: LLMConfig, client: httpx.AsyncClient | None = None):
        self.config = config
        self._client = client

    @abstractmethod
    async def generate(self, prompt: str) -> str:
        """Generate text from a prompt."""
        pass

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.config.timeout_seconds)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def build_prompt(self, title: str, content: str, time_spent: int) -> str:
        excerpt = (content or "")[: self.config.content_excerpt_chars]
        return ANALYSIS_PROMPT.format(title=title, content=excerpt, time_spent=time_spent)

    async def request_analysis(
        self,
        title: str,
        content: str,
        time_spent: int,
    ) -> Any:
        """
        Ask the LLM to analyze content.

        Returns:
            The raw parsed JSON object (untrusted)

        Raises:
            AnalysisError: On network errors, bad status, or unparsable output
        """
        prompt = self.build_prompt(title, content, time_spent)
        try:
            text = await self.generate(prompt)
        except httpx.HTTPError as e:
            raise AnalysisError(f"Analysis request failed: {e}") from e
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise AnalysisError(f"Invalid API response: {e}") from e

        try:
            return extract_json_object(text)
        except ValueError as e:
            raise AnalysisError(str(e)) from e

    async def analyze(
        self,
        title: str,
        content: str,
        time_spent: int,
    ) -> AnalysisResult:
        """
        Analyze content, falling back to the title heuristic on any failure.

        Never raises.
        """
        try:
            raw = await self.request_analysis(title, content, time_spent)
        except Exception as e:
            logger.warning(f"LLM analysis failed, using fallback: {e}")
            return fallback_analysis(title)

        return normalize_analysis(raw, title)

    async def __aenter__(self) -> "BaseAnalyzer":
        await self._get_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


class OllamaAnalyzer(BaseAnalyzer):
    """
    Ollama-based analyzer for local LLM operations.

    Uses Ollama's generate API with models like:
    - llama3.2 (fast, good quality)
    - mistral (good balance)
    - qwen2.5:7b
    """

    def __init__(self, config: LLMConfig, client: httpx.AsyncClient | None = None):
        super().__init__(config, client)
        self.base_url = config.ollama_base_url.rstrip("/")

    async def generate(self, prompt: str) -> str:
        """Generate text using Ollama."""
        client = await self._get_client()

        response = await client.post(
            f"{self.base_url}/api/generate",
            json={
                "model": self.config.model,
                "prompt": prompt,
                "stream": False,
                "options": {
                    "temperature": self.config.temperature,
                    "num_predict": self.config.max_tokens,
                },
            },
        )
        response.raise_for_status()

        data = response.json()
        return data["response"].strip()


class GeminiAnalyzer(BaseAnalyzer):
    """
    Gemini-based analyzer.

    Uses the generateContent API with models like:
    - gemini-1.5-flash (fast, cost-effective)
    - gemini-1.5-pro
    """

    def __init__(self, config: LLMConfig, client: httpx.AsyncClient | None = None):
        super().__init__(config, client)
        self.base_url = config.gemini_base_url.rstrip("/")

    async def generate(self, prompt: str) -> str:
        """Generate text using Gemini."""
        if not self.config.gemini_api_key:
            raise AnalysisError("Gemini API key not set")

        client = await self._get_client()

        response = await client.post(
            f"{self.base_url}/models/{self.config.model}:generateContent",
            params={"key": self.config.gemini_api_key},
            json={
                "contents": [{"parts": [{"text": prompt}]}],
                "generationConfig": {
                    "temperature": self.config.temperature,
                    "maxOutputTokens": self.config.max_tokens,
                },
            },
        )
        response.raise_for_status()

        data = response.json()
        candidates = data.get("candidates")
        if not candidates:
            raise AnalysisError("Invalid API response: no candidates")
        return candidates[0]["content"]["parts"][0]["text"]


def create_analyzer(config: LLMConfig | None = None) -> BaseAnalyzer | None:
    """
    Factory function to create the appropriate analyzer.

    Args:
        config: LLM configuration. Uses defaults if None.

    Returns:
        Configured analyzer, or None when analysis is disabled
    """
    if config is None:
        config = LLMConfig()

    if config.provider == "none":
        return None

    providers = {
        "ollama": OllamaAnalyzer,
        "gemini": GeminiAnalyzer,
    }

    analyzer_class = providers.get(config.provider)
    if analyzer_class is None:
        raise ValueError(f"Unknown LLM provider: {config.provider}")

    return analyzer_class(config)
