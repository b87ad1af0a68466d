"""
Entries Repository - journal entry data access.

Handles all entry operations against the Supabase `entries` table:
- Listing a user's entries, newest first
- Upserting an entry by id
- Deleting an entry by id

Row-level security on the table restricts every query to the session's
user; the owner filter here only narrows the query, it is not the
authorization boundary.
"""

import logging
from datetime import datetime, timezone
from typing import List

from reflectai.core.config import settings
from reflectai.features.journal.models import JournalEntry
from reflectai.shared.errors import RepositoryError

logger = logging.getLogger("Reflect.Database.Entries")


class EntryRepository:
    """Repository for journal entries stored in Supabase."""

    def __init__(self, client, table: str = settings.ENTRIES_TABLE):
        """Initialize with a session-scoped Supabase client."""
        self.client = client
        self.table = table

    def get_entries(self, user_id: str) -> List[JournalEntry]:
        """All entries owned by user_id, ordered by created_at descending."""
        try:
            result = (
                self.client.table(self.table)
                .select("*")
                .eq("user_id", user_id)
                .order("created_at", desc=True)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error fetching entries: {e}")
            raise RepositoryError(
                "Could not load entries", details={"operation": "select"}
            ) from e

        try:
            return [JournalEntry.from_row(row) for row in result.data or []]
        except ValueError as e:
            logger.error(f"Malformed entry row: {e}")
            raise RepositoryError(
                "Stored entries are malformed", details={"operation": "select"}
            ) from e

    def save_entry(self, entry: JournalEntry) -> JournalEntry:
        """
        Upsert an entry by id.

        updated_at is stamped here; created_at is passed through as given.

        Returns:
            The entry as persisted by the backend
        """
        payload = entry.to_row()
        payload["updated_at"] = datetime.now(timezone.utc).isoformat()

        try:
            result = self.client.table(self.table).upsert(payload).execute()
        except Exception as e:
            logger.error(f"Error saving entry {entry.id}: {e}")
            raise RepositoryError(
                "Could not save entry", details={"operation": "upsert"}
            ) from e

        if not result.data:
            logger.error(f"Upsert of entry {entry.id} returned no row")
            raise RepositoryError(
                "Could not save entry", details={"operation": "upsert"}
            )

        try:
            saved = JournalEntry.from_row(result.data[0])
        except ValueError as e:
            logger.error(f"Malformed row echoed for entry {entry.id}: {e}")
            raise RepositoryError(
                "Could not save entry", details={"operation": "upsert"}
            ) from e

        logger.info(f"Entry saved: {saved.id}")
        return saved

    def delete_entry(self, entry_id: str) -> None:
        """Delete an entry. Deleting an entry that is already gone succeeds."""
        try:
            self.client.table(self.table).delete().eq("id", entry_id).execute()
        except Exception as e:
            logger.error(f"Error deleting entry {entry_id}: {e}")
            raise RepositoryError(
                "Could not delete entry", details={"operation": "delete"}
            ) from e

        logger.info(f"Entry deleted: {entry_id}")
