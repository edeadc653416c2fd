"""
Learning entry models.

A learning entry records one captured learning session: what page was read,
what the analysis said about it, and when it was learned. Retention is never
stored on the entry; it is derived from ``learned_at`` at display time.
"""

import time
from enum import Enum
from numbers import Real
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from ulid import ULID


DEFAULT_CONCEPT = "General Topic"
DEFAULT_SUMMARY = "Learning session"
DEFAULT_DOMAIN = "general"
DEFAULT_COMPLEXITY = 3

MAX_CONCEPTS = 5
CONCEPT_TITLE_CHARS = 50


def now_ms() -> int:
    """Current time in milliseconds since the epoch."""
    return int(time.time() * 1000)


def new_entry_id() -> str:
    """Generate a unique entry identifier (ULID for time-ordering)."""
    return f"learn_{ULID()}"


def placeholder_concept(title: str | None = None) -> str:
    """Concept used when no usable concepts are available."""
    if isinstance(title, str) and title.strip():
        return title.strip()[:CONCEPT_TITLE_CHARS]
    return DEFAULT_CONCEPT


def coerce_complexity(value: Any) -> int:
    """
    Coerce an untrusted complexity value into 1-5.

    Integers (and integral floats or digit strings) in range are kept,
    anything else becomes the default of 3.
    """
    if isinstance(value, bool):
        return DEFAULT_COMPLEXITY
    if isinstance(value, str):
        value = value.strip()
        if not value.isdigit():
            return DEFAULT_COMPLEXITY
        value = int(value)
    if isinstance(value, Real):
        if not float(value).is_integer():
            return DEFAULT_COMPLEXITY
        value = int(value)
        if 1 <= value <= 5:
            return value
    return DEFAULT_COMPLEXITY


def coerce_concepts(value: Any, title: str | None = None) -> list[str]:
    """
    Coerce an untrusted concept list into 1-5 non-empty strings.

    Only the first five elements are considered. Non-sequences, and sequences
    with nothing usable in them, become a single placeholder concept.
    """
    if not isinstance(value, (list, tuple)):
        return [placeholder_concept(title)]

    concepts = []
    for item in value[:MAX_CONCEPTS]:
        if item is None or isinstance(item, (dict, list, tuple)):
            continue
        text = str(item).strip()
        if text:
            concepts.append(text)

    return concepts or [placeholder_concept(title)]


def coerce_text(value: Any, default: str, strip: bool = False) -> str:
    """Keep a non-blank string, otherwise use the default."""
    if not isinstance(value, str) or not value.strip():
        return default
    return value.strip() if strip else value


class MemoryBucket(str, Enum):
    """Retention buckets used for review."""

    STRONG = "strong"  # score >= 80
    REVIEW = "review"  # 50 <= score < 80
    FORGOTTEN = "forgotten"  # score < 50


class ImportMode(str, Enum):
    """How an imported history is combined with the stored one."""

    REPLACE = "replace"
    MERGE = "merge"


class InsertOutcome(str, Enum):
    """Result of inserting an entry into the history."""

    INSERTED = "inserted"
    SKIPPED_DUPLICATE = "skipped_duplicate"


class AnalysisResult(BaseModel):
    """Validated analysis of captured content."""

    model_config = ConfigDict(frozen=True)

    concepts: list[str] = Field(min_length=1, max_length=MAX_CONCEPTS)
    summary: str
    complexity: int = Field(ge=1, le=5)
    domain: str


class TopicEntry(BaseModel):
    """
    A learned topic.

    Used directly for subtopics; top-level entries extend it with
    a list of subtopics. Field aliases match the export file format.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(
        default_factory=new_entry_id,
        description="Stable unique identifier",
    )
    title: str = Field(default="", description="Page title")
    url: str = Field(default="", description="Page URL, used for duplicate detection")

    concepts: list[str] = Field(
        default_factory=list,
        description="Key concepts (1-5), derived from the title when missing",
        validate_default=True,
    )
    summary: str = Field(default=DEFAULT_SUMMARY)
    domain: str = Field(default=DEFAULT_DOMAIN)
    complexity: int = Field(default=DEFAULT_COMPLEXITY, description="1 (simple) to 5 (complex)")

    time_spent: int = Field(
        default=0,
        alias="timeSpent",
        description="Seconds of observed engagement",
        ge=0,
    )
    learned_at: int = Field(
        default_factory=now_ms,
        alias="learnedAt",
        description="Capture time in ms since epoch, the anchor for decay",
    )

    @field_validator("complexity", mode="before")
    @classmethod
    def _normalize_complexity(cls, value: Any) -> int:
        return coerce_complexity(value)

    @field_validator("concepts", mode="before")
    @classmethod
    def _normalize_concepts(cls, value: Any, info: ValidationInfo) -> list[str]:
        return coerce_concepts(value, info.data.get("title"))

    @field_validator("summary", mode="before")
    @classmethod
    def _normalize_summary(cls, value: Any) -> str:
        return coerce_text(value, DEFAULT_SUMMARY)

    @field_validator("domain", mode="before")
    @classmethod
    def _normalize_domain(cls, value: Any) -> str:
        return coerce_text(value, DEFAULT_DOMAIN, strip=True)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the persisted/exported dictionary shape."""
        return self.model_dump(by_alias=True)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TopicEntry":
        """Create an entry from its dictionary shape."""
        return cls.model_validate(data)

    def __str__(self) -> str:
        return f"{self.id}: {self.title[:50]}"


class LearningEntry(TopicEntry):
    """A top-level learned topic, optionally grouping related captures."""

    subtopics: list[TopicEntry] = Field(
        default_factory=list,
        description="Related captures grouped under this topic (one level deep)",
    )

    @field_validator("subtopics", mode="before")
    @classmethod
    def _flatten_subtopics(cls, value: Any) -> Any:
        # Subtopics never carry their own subtopics
        if not isinstance(value, list):
            return value
        flattened = []
        for item in value:
            if isinstance(item, LearningEntry):
                item = item.model_dump(exclude={"subtopics"})
            elif isinstance(item, dict):
                item = {k: v for k, v in item.items() if k != "subtopics"}
            flattened.append(item)
        return flattened

    def to_dict(self) -> dict[str, Any]:
        data = self.model_dump(by_alias=True)
        if not data["subtopics"]:
            data.pop("subtopics")
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LearningEntry":
        return cls.model_validate(data)

    def iter_ids(self) -> list[str]:
        """IDs of this entry and all its subtopics."""
        return [self.id] + [sub.id for sub in self.subtopics]


class ExportSnapshot(BaseModel):
    """A point-in-time export of the whole history."""

    model_config = ConfigDict(populate_by_name=True)

    version: str = "1.0"
    export_date: str = Field(alias="exportDate", description="ISO-8601 export time")
    total_topics: int = Field(alias="totalTopics")
    data: list[LearningEntry] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "exportDate": self.export_date,
            "totalTopics": self.total_topics,
            "data": [entry.to_dict() for entry in self.data],
        }
