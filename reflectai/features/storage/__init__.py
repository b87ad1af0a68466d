"""
Local fallback storage.

A JSON key-value store on disk, plus an entry repository built on it for
running without Supabase (STORAGE_BACKEND=local).
"""

from reflectai.features.storage.local import LocalStorage, StorageKeys
from reflectai.features.storage.repository import LocalEntryRepository

__all__ = [
    "LocalStorage",
    "StorageKeys",
    "LocalEntryRepository",
]
