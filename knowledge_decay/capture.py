"""
Capture events and the policy deciding which sessions count as learning.
"""

from pydantic import BaseModel, Field

from knowledge_decay.config import CaptureConfig
from knowledge_decay.models.entry import now_ms


class CaptureEvent(BaseModel):
    """A finished browsing session reported by the capture side."""

    title: str = ""
    url: str = ""
    content: str = ""
    time_spent: int = Field(default=0, description="Seconds of engagement", ge=0)
    timestamp: int = Field(default_factory=now_ms, description="Capture time in ms since epoch")


class CapturePolicy:
    """
    Decides whether a session qualifies for tracking.

    A session qualifies when the page is a known learning resource, enough
    time was spent on it, and enough text was captured.
    """

    def __init__(self, config: CaptureConfig | None = None):
        self.config = config or CaptureConfig()

    def is_learning_page(self, url: str) -> bool:
        return any(domain in url for domain in self.config.learning_domains)

    def clip_content(self, content: str) -> str:
        """Limit captured text to the configured maximum."""
        return (content or "")[: self.config.max_content_chars].strip()

    def qualifies(self, event: CaptureEvent) -> bool:
        if event.time_spent < self.config.min_time_spent_seconds:
            return False
        if not self.is_learning_page(event.url):
            return False
        return len(self.clip_content(event.content)) > self.config.min_content_chars
