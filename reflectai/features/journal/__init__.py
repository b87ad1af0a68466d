"""Journal entries: models, Supabase repository and the editor controller."""

from reflectai.features.journal.editor import EditorController
from reflectai.features.journal.models import AIAnalysis, EditorState, JournalEntry, Sentiment
from reflectai.features.journal.repository import EntryRepository

__all__ = [
    "AIAnalysis",
    "EditorController",
    "EditorState",
    "EntryRepository",
    "JournalEntry",
    "Sentiment",
]
