"""
Configuration management for the Knowledge Decay tracker.

Provides centralized configuration for:
- Retention (forgetting curve) parameters
- History store limits
- Storage backends
- LLM analysis providers
- Capture policy
"""

import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field


class RetentionConfig(BaseModel):
    """Configuration for the forgetting curve."""

    # Half-life in hours keyed by complexity (1 = very simple, 5 = very complex)
    half_life_hours: dict[int, float] = Field(
        default={1: 72.0, 2: 48.0, 3: 36.0, 4: 24.0, 5: 18.0},
        description="Hours for retention to halve, by complexity",
    )
    default_half_life_hours: float = Field(
        default=36.0,
        description="Half-life used for complexities missing from the table",
        gt=0.0,
    )

    # Bucket thresholds
    strong_threshold: float = Field(
        default=80.0,
        description="Scores at or above this are 'strong'",
        ge=0.0,
        le=100.0,
    )
    review_threshold: float = Field(
        default=50.0,
        description="Scores at or above this (and below strong) need review",
        ge=0.0,
        le=100.0,
    )


class HistoryConfig(BaseModel):
    """Configuration for the learning history store."""

    capacity: int = Field(
        default=100,
        description="Maximum number of top-level entries kept",
        ge=1,
    )
    duplicate_window_ms: int = Field(
        default=300_000,  # 5 minutes
        description="Repeat captures of a URL inside this window are skipped",
        ge=0,
    )
    storage_key: str = Field(
        default="learningHistory",
        description="Key of the history slot in the key-value store",
    )


class StorageConfig(BaseModel):
    """Configuration for persistence backends."""

    backend: Literal["memory", "sqlite"] = Field(
        default="sqlite",
        description="Key-value backend type",
    )
    sqlite_path: Path = Field(
        default=Path("./data/knowledge_decay.db"),
        description="Path to SQLite database file",
    )


class LLMConfig(BaseModel):
    """Configuration for the content analysis LLM."""

    provider: Literal["ollama", "gemini", "none"] = Field(
        default="ollama",
        description="LLM provider used to summarize captured content",
    )
    model: str = Field(
        default="llama3.2",
        description="Model name (e.g., llama3.2 for Ollama, gemini-1.5-flash for Gemini)",
    )
    temperature: float = Field(
        default=0.3,
        description="Temperature for LLM responses",
        ge=0.0,
        le=2.0,
    )
    max_tokens: int = Field(
        default=500,
        description="Maximum output tokens for LLM responses",
    )
    timeout_seconds: float = Field(
        default=30.0,
        description="Request timeout for the analysis call",
        gt=0.0,
    )
    content_excerpt_chars: int = Field(
        default=2000,
        description="Characters of page content included in the prompt",
        ge=0,
    )

    # Ollama-specific settings
    ollama_base_url: str = Field(
        default="http://localhost:11434",
        description="Ollama server base URL",
    )

    # Gemini-specific settings
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Gemini API base URL",
    )
    gemini_api_key: str | None = Field(
        default_factory=lambda: os.environ.get("GEMINI_API_KEY"),
        description="Gemini API key (defaults to $GEMINI_API_KEY)",
    )


class CaptureConfig(BaseModel):
    """Configuration for deciding which browsing sessions are learning."""

    learning_domains: list[str] = Field(
        default=[
            "youtube.com/watch",
            "coursera.org",
            "udemy.com",
            "khanacademy.org",
            "edx.org",
            "medium.com",
            "stackoverflow.com",
            "github.com",
            "wikipedia.org",
            "freecodecamp.org",
        ],
        description="URL fragments that mark a page as a learning resource",
    )
    min_time_spent_seconds: int = Field(
        default=30,
        description="Minimum engagement before a session is tracked",
        ge=0,
    )
    min_content_chars: int = Field(
        default=100,
        description="Captured text must be longer than this",
        ge=0,
    )
    max_content_chars: int = Field(
        default=3000,
        description="Captured text is clipped to this length",
        ge=1,
    )


class KnowledgeDecayConfig(BaseModel):
    """Master configuration for the Knowledge Decay tracker."""

    # Sub-configurations
    retention: RetentionConfig = Field(default_factory=RetentionConfig)
    history: HistoryConfig = Field(default_factory=HistoryConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    capture: CaptureConfig = Field(default_factory=CaptureConfig)

    debug: bool = Field(
        default=False,
        description="Enable debug logging",
    )

    @classmethod
    def from_file(cls, path: Path) -> "KnowledgeDecayConfig":
        """Load configuration from a JSON file."""
        import json

        if path.suffix == ".json":
            with open(path) as f:
                data = json.load(f)
            return cls.model_validate(data)
        else:
            raise ValueError(f"Unsupported config file format: {path.suffix}")

    def to_file(self, path: Path) -> None:
        """Save configuration to a JSON file."""
        import json

        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.model_dump(mode="json"), f, indent=2)
