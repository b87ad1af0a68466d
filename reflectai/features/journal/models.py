"""
Journal domain models.

Attribute names match the `entries` table columns (snake_case). The HTTP
API serialises the camelCase aliases (`userId`, `createdAt`, `aiAnalysis`).
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

UNTITLED_ENTRY = "Untitled Entry"


class Sentiment(str, Enum):
    POSITIVE = "Positive"
    NEUTRAL = "Neutral"
    NEGATIVE = "Negative"
    MIXED = "Mixed"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AIAnalysis(_CamelModel):
    """AI reflection attached to an entry. Replaced wholesale on re-analysis."""

    sentiment: Sentiment
    summary: str
    advice: str
    tags: List[str] = Field(default_factory=list)


class JournalEntry(_CamelModel):
    id: str
    user_id: str
    title: str
    content: str
    created_at: datetime
    updated_at: datetime
    ai_analysis: Optional[AIAnalysis] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "JournalEntry":
        """Build an entry from a snake_case storage row."""
        return cls.model_validate(row)

    def to_row(self) -> Dict[str, Any]:
        """Snake_case, JSON-safe representation for storage."""
        return self.model_dump(mode="json")


class EditorState(_CamelModel):
    """Snapshot of the editor for clients."""

    selected_id: Optional[str] = None
    title: str = ""
    content: str = ""
    last_saved: Optional[datetime] = None
    entries: List[JournalEntry] = Field(default_factory=list)


def sort_newest_first(entries: List[JournalEntry]) -> List[JournalEntry]:
    """Entries ordered by created_at descending."""
    return sorted(entries, key=lambda e: e.created_at, reverse=True)
