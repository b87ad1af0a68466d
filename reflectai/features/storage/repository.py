"""Entry repository backed by LocalStorage, for running without Supabase."""

import logging
import threading
from datetime import datetime, timezone
from typing import Dict, List

from reflectai.features.journal.models import JournalEntry, sort_newest_first
from reflectai.features.storage.local import LocalStorage, StorageKeys
from reflectai.shared.errors import RepositoryError

logger = logging.getLogger("Reflect.Storage.Entries")


class LocalEntryRepository:
    """Same contract as EntryRepository, stored under StorageKeys.ENTRIES."""

    def __init__(self, storage: LocalStorage):
        self.storage = storage
        self._lock = threading.Lock()

    def _rows(self) -> Dict[str, dict]:
        rows = self.storage.get_item(StorageKeys.ENTRIES, {})
        if not isinstance(rows, dict):
            logger.warning("Ignoring stored entries that are not a mapping")
            return {}
        kept = {key: row for key, row in rows.items() if isinstance(row, dict)}
        if len(kept) != len(rows):
            logger.warning("Skipping %s stored entries that are not objects", len(rows) - len(kept))
        return kept

    def get_entries(self, user_id: str) -> List[JournalEntry]:
        with self._lock:
            rows = self._rows()
        try:
            entries = [
                JournalEntry.from_row(row)
                for row in rows.values()
                if row.get("user_id") == user_id
            ]
        except ValueError as e:
            raise RepositoryError(
                "Stored entries are malformed", details={"operation": "select"}
            ) from e
        return sort_newest_first(entries)

    def save_entry(self, entry: JournalEntry) -> JournalEntry:
        row = entry.to_row()
        row["updated_at"] = datetime.now(timezone.utc).isoformat()

        with self._lock:
            rows = self._rows()
            existing = rows.get(entry.id)
            if existing and existing.get("user_id") != entry.user_id:
                raise RepositoryError(
                    "Entry belongs to another user",
                    details={"operation": "upsert"},
                )
            rows[entry.id] = row
            if not self.storage.set_item(StorageKeys.ENTRIES, rows):
                raise RepositoryError(
                    "Could not save entry", details={"operation": "upsert"}
                )

        logger.info(f"Entry saved locally: {entry.id}")
        return JournalEntry.from_row(row)

    def delete_entry(self, entry_id: str) -> None:
        with self._lock:
            rows = self._rows()
            if rows.pop(entry_id, None) is None:
                return
            if not self.storage.set_item(StorageKeys.ENTRIES, rows):
                raise RepositoryError(
                    "Could not delete entry", details={"operation": "delete"}
                )
        logger.info(f"Entry deleted locally: {entry_id}")
