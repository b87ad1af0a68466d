import json
import logging
import os
from pathlib import Path
from typing import Any, Union

logger = logging.getLogger("Reflect.Storage.Local")


class StorageKeys:
    USERS = "reflectai_users"
    CURRENT_USER = "reflectai_current_user"
    ENTRIES = "reflectai_entries"


class LocalStorage:
    """
    JSON key-value storage, one file per key under a directory.

    Reads and writes never raise: a missing or unreadable key yields the
    default, and a failed write is logged and reported by set_item's
    return value.
    """

    keys = StorageKeys

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get_item(self, key: str, default: Any = None) -> Any:
        path = self._path(key)
        if not path.exists():
            return default
        try:
            with path.open("r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Error reading {key} from local storage: {e}")
            return default

    def set_item(self, key: str, value: Any) -> bool:
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding="utf-8") as f:
                json.dump(value, f)
            os.replace(tmp_path, path)
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Error writing {key} to local storage: {e}")
            tmp_path.unlink(missing_ok=True)
            return False

    def remove_item(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)
