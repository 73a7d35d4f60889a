"""
File-backed key-value storage for client-side state.

LocalStorage keeps a JSON object on disk mapping namespaced keys (e.g.
"favorite-recipes") to JSON values. Every write rewrites the whole file, so
the file always holds the latest state of every key.

# NOTE: There is no locking. One LocalStorage file belongs to one Streamlit
    session; two writers on the same file simply overwrite each other.
"""

import json
import logging
import uuid
from pathlib import Path
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)


def is_valid_session_id(session_id: Any) -> bool:
    """Session ids are UUID strings (they become file names)."""
    try:
        return str(uuid.UUID(str(session_id))) == str(session_id).lower()
    except ValueError:
        return False


class LocalStorage:
    """JSON file mapping string keys to JSON-serializable values."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable storage file %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        tmp_path.replace(self.path)

    def get_item(self, key: str, default: Optional[Any] = None) -> Any:
        return self._read().get(key, default)

    def set_item(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self._write(data)
        logger.debug("Stored key %s in %s", key, self.path)

    def remove_item(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)

    def clear(self) -> None:
        self._write({})

    def keys(self):
        return list(self._read().keys())

    @classmethod
    def for_session(cls, storage_dir: Union[str, Path], session_id: str) -> "LocalStorage":
        """
        Storage file <storage_dir>/<session_id>.json for one browser session.

        Raises:
            ValueError: If session_id is not a UUID string
        """
        if not is_valid_session_id(session_id):
            raise ValueError(f"Invalid session id {session_id!r}")
        return cls(Path(storage_dir) / f"{str(session_id).lower()}.json")
