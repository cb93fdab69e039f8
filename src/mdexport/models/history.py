"""HistoryItem model for saved document snapshots."""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, model_validator

TITLE_MAX_LENGTH = 50


def derive_title(content: str) -> str:
    """Truncate content to a display title.

    Example:
        >>> derive_title("Short note")
        'Short note'
        >>> len(derive_title("x" * 80))
        53
    """
    if len(content) > TITLE_MAX_LENGTH:
        return content[:TITLE_MAX_LENGTH] + "..."
    return content


class HistoryItem(BaseModel):
    """One persisted snapshot of a document."""

    id: str = Field(
        ...,
        description="Opaque unique identifier (random UUID string)"
    )

    content: str = Field(
        ...,
        description="Full Markdown document text"
    )

    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation instant (kept when the item is moved to front)"
    )

    title: str = Field(
        default="",
        description="First 50 characters of content, with '...' when truncated"
    )

    @model_validator(mode="before")
    @classmethod
    def fill_title(cls, data: Any) -> Any:
        """Derive title from content when it is not supplied."""
        if isinstance(data, dict) and not data.get("title") and "content" in data:
            data = {**data, "title": derive_title(data["content"])}
        return data

    model_config = {"frozen": True}
