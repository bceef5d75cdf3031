"""
Key/value store - the persisted preferences behind the skill library.

Values are plain strings (JSON-encoded where structured), matching how the
enabled set, storage roots and routing model are kept.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Optional, Protocol

from loguru import logger


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStore:
    """In-process store, used by tests and embedders that persist elsewhere."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = str(value)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore:
    """
    Flat JSON object on disk.

    The file is re-read on every access; nothing is cached between calls.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path).expanduser()

    @property
    def backup_path(self) -> Path:
        return self.path.with_name(self.path.name + ".corrupt")

    def _load(self, for_write: bool = False) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except Exception as e:
            logger.warning(f"Failed to read store file {self.path}: {e}")
            return self._discard(for_write)
        if not isinstance(data, dict):
            logger.warning(f"Ignoring store file {self.path}: not a JSON object")
            return self._discard(for_write)
        return {str(k): v if isinstance(v, str) else json.dumps(v) for k, v in data.items()}

    def _discard(self, for_write: bool) -> Dict[str, str]:
        # Keep the unreadable file around before it is replaced.
        if for_write:
            self.path.replace(self.backup_path)
            logger.warning(f"Moved unreadable store file to {self.backup_path}")
        return {}

    def _persist(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load(for_write=True)
        data[key] = str(value)
        self._persist(data)

    def remove(self, key: str) -> None:
        data = self._load(for_write=True)
        if key in data:
            del data[key]
            self._persist(data)
