"""
Entry Editor Controller.

Owns one user's working copy of the entry list, the current selection and
the draft being edited, and drives save / delete / analyze against the
repository and the analysis client.

Selection axis:
    NoSelection (new draft)  --select(id)-->  Selected(id)
    Selected(id)  --new() / delete()-->  NoSelection

The draft mirrors the selected entry whenever a selection is made and is
cleared with it. Switching selection discards unsaved draft edits.

Backend calls run in a worker thread; their results are applied to the
in-memory state after the await. All state-changing operations on one
controller are serialized by a lock, so rapid repeated saves or analyses
apply one after another.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable, List, Optional, Protocol

from reflectai.features.auth.models import User
from reflectai.features.journal.models import (
    UNTITLED_ENTRY,
    AIAnalysis,
    EditorState,
    JournalEntry,
    sort_newest_first,
)
from reflectai.shared.errors import AnalysisError, NotFoundError, RepositoryError

if TYPE_CHECKING:
    from reflectai.features.analysis.client import AnalysisClient

logger = logging.getLogger("Reflect.Journal.Editor")

DELETE_CONFIRMATION = "Are you sure you want to delete this entry?"


class EntryStore(Protocol):
    def get_entries(self, user_id: str) -> List[JournalEntry]: ...

    def save_entry(self, entry: JournalEntry) -> JournalEntry: ...

    def delete_entry(self, entry_id: str) -> None: ...


def _now() -> datetime:
    return datetime.now(timezone.utc)


class EditorController:
    """Editing state and actions for one user's journal."""

    def __init__(self, user: User, repository: EntryStore, analyzer: AnalysisClient):
        self.user = user
        self.repository = repository
        self.analyzer = analyzer

        self.entries: List[JournalEntry] = []
        self.selected_id: Optional[str] = None
        self.title = ""
        self.content = ""
        self.last_saved: Optional[datetime] = None

        self._lock = asyncio.Lock()

    # =========================================================================
    # LOOKUP
    # =========================================================================

    def _find(self, entry_id: Optional[str]) -> Optional[JournalEntry]:
        if entry_id is None:
            return None
        return next((e for e in self.entries if e.id == entry_id), None)

    @property
    def selected_entry(self) -> Optional[JournalEntry]:
        return self._find(self.selected_id)

    def state(self) -> EditorState:
        return EditorState(
            selected_id=self.selected_id,
            title=self.title,
            content=self.content,
            last_saved=self.last_saved,
            entries=list(self.entries),
        )

    def _merge(self, saved: JournalEntry) -> None:
        """Put the persisted record into the list, replacing any older copy."""
        others = [e for e in self.entries if e.id != saved.id]
        self.entries = sort_newest_first([saved] + others)

    # =========================================================================
    # LOAD
    # =========================================================================

    async def load(self) -> None:
        """
        Replace the list with the user's entries. Failures leave it empty.

        A selection that is no longer in the list is dropped along with its
        draft.
        """
        async with self._lock:
            try:
                entries = await asyncio.to_thread(self.repository.get_entries, self.user.id)
            except RepositoryError:
                logger.exception("Failed to load entries", extra={"user_id": self.user.id})
                entries = []
            else:
                logger.info("Loaded %s entries", len(entries), extra={"user_id": self.user.id})

            self.entries = entries
            if self.selected_id is not None and self.selected_entry is None:
                logger.info("Selected entry %s is gone, starting a new draft", self.selected_id)
                self.new()

    # =========================================================================
    # SELECTION & DRAFT
    # =========================================================================

    def select(self, entry_id: str) -> bool:
        """
        Select a loaded entry and copy it into the draft.

        An id that is not in the loaded list is ignored and nothing changes.
        """
        entry = self._find(entry_id)
        if entry is None:
            logger.debug("Ignoring selection of unknown entry %s", entry_id)
            return False

        self.selected_id = entry.id
        self.title = entry.title
        self.content = entry.content
        self.last_saved = entry.updated_at
        return True

    def new(self) -> None:
        self.selected_id = None
        self.title = ""
        self.content = ""
        self.last_saved = None

    def update_draft(self, title: Optional[str] = None, content: Optional[str] = None) -> None:
        if title is not None:
            self.title = title
        if content is not None:
            self.content = content

    # =========================================================================
    # ACTIONS
    # =========================================================================

    async def save(self) -> Optional[JournalEntry]:
        """
        Persist the draft as a new entry or over the selected one.

        Returns None without touching the repository when the draft is blank.
        On failure the list, selection and draft stay as they were. The draft
        itself is never rewritten by a save.
        """
        async with self._lock:
            if not self.title.strip() and not self.content.strip():
                return None

            now = _now()
            existing = self.selected_entry
            if self.selected_id is not None and existing is None:
                raise NotFoundError(
                    "The selected entry is no longer loaded",
                    details={"resource_type": "entry", "resource_id": self.selected_id},
                )

            entry = JournalEntry(
                id=self.selected_id or str(uuid.uuid4()),
                user_id=self.user.id,
                title=self.title if self.title.strip() else UNTITLED_ENTRY,
                content=self.content,
                created_at=existing.created_at if existing else now,
                updated_at=now,
                ai_analysis=existing.ai_analysis if existing else None,
            )

            try:
                saved = await asyncio.to_thread(self.repository.save_entry, entry)
            except RepositoryError:
                logger.exception("Save failed", extra={"entry_id": entry.id})
                raise

            self._merge(saved)
            self.selected_id = saved.id
            self.last_saved = _now()
            return saved

    async def delete(self, confirm: Callable[[str], bool]) -> bool:
        """
        Delete the selected entry after the user confirms.

        Args:
            confirm: Blocking yes/no prompt, called with the question text

        Returns:
            True if the entry was deleted
        """
        async with self._lock:
            entry_id = self.selected_id
            if entry_id is None:
                return False
            if not confirm(DELETE_CONFIRMATION):
                return False

            try:
                await asyncio.to_thread(self.repository.delete_entry, entry_id)
            except RepositoryError:
                logger.exception("Delete failed", extra={"entry_id": entry_id})
                raise

            self.entries = [e for e in self.entries if e.id != entry_id]
            self.new()
            return True

    async def analyze(self) -> Optional[AIAnalysis]:
        """
        Analyze the draft content and attach the result to the selected entry.

        The draft is analyzed as typed, unsaved edits included. The analysis
        replaces any previous one on the persisted entry. On failure the
        entry keeps its previous analysis.
        """
        async with self._lock:
            if not self.content.strip() or self.selected_id is None:
                return None

            if not self.analyzer.is_configured:
                logger.error("Analysis requested without an AI credential")
                raise AnalysisError.missing_credential()

            entry_id = self.selected_id
            try:
                analysis = await asyncio.to_thread(self.analyzer.analyze_entry, self.content)
            except AnalysisError:
                logger.exception("Analysis failed", extra={"entry_id": entry_id})
                raise

            entry = self._find(entry_id)
            if entry is None:
                return analysis

            try:
                saved = await asyncio.to_thread(
                    self.repository.save_entry,
                    entry.model_copy(update={"ai_analysis": analysis}),
                )
            except RepositoryError:
                logger.exception("Saving analysis failed", extra={"entry_id": entry_id})
                raise

            self._merge(saved)
            return saved.ai_analysis
