"""
SkillSettings - storage roots and the routing model preference.

Both are kept in the key/value store and re-read on every call.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Optional

from loguru import logger

from skillshelf.config.store import KeyValueStore
from skillshelf.skills.errors import NotConfiguredError
from skillshelf.skills.models import StorageRoot

SKILLS_FOLDER_KEY = "skills_folder"
ENABLED_SKILLS_KEY = "enabled_skills"
ROUTING_MODEL_KEY = "routing_model"


def default_storage_root() -> StorageRoot:
    return StorageRoot(path=str(Path.home() / ".claude" / "skills"))


def _coerce_root(item: Any) -> Optional[StorageRoot]:
    try:
        if isinstance(item, str):
            return StorageRoot(path=item)
        if isinstance(item, dict):
            return StorageRoot.model_validate(item)
    except Exception as e:
        logger.debug(f"Skipping malformed storage root {item!r}: {e}")
    return None


class SkillSettings:
    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    @property
    def store(self) -> KeyValueStore:
        return self._store

    # -- storage roots -------------------------------------------------

    def storage_roots(self) -> List[StorageRoot]:
        """
        Configured roots in search order.

        Accepts the JSON list format as well as the legacy bare path string.
        Falls back to ~/.claude/skills when nothing usable is configured.
        """
        raw = self._store.get(SKILLS_FOLDER_KEY)
        if raw:
            try:
                parsed = json.loads(raw)
            except ValueError:
                return [StorageRoot(path=raw)]

            if isinstance(parsed, str):
                parsed = [parsed]
            if isinstance(parsed, list):
                roots = [r for r in (_coerce_root(item) for item in parsed) if r is not None]
                if roots:
                    return roots

        return [default_storage_root()]

    def storage_root_paths(self) -> List[str]:
        return [r.path for r in self.storage_roots()]

    def primary_storage_root(self) -> str:
        paths = self.storage_root_paths()
        return paths[0] if paths else default_storage_root().path

    def _save_roots(self, roots: List[StorageRoot]) -> None:
        self._store.set(SKILLS_FOLDER_KEY, json.dumps([r.to_dict() for r in roots]))

    def add_storage_root(self, path: str, label: Optional[str] = None) -> None:
        roots = self.storage_roots()
        if any(r.path == path for r in roots):
            return
        roots.append(StorageRoot(path=path, label=label))
        self._save_roots(roots)
        logger.info(f"Added skills folder {path}")

    def remove_storage_root(self, path: str) -> None:
        roots = [r for r in self.storage_roots() if r.path != path]
        self._save_roots(roots)

    def update_storage_root(self, old_path: str, new_path: str, label: Optional[str] = None) -> bool:
        roots = self.storage_roots()
        for i, root in enumerate(roots):
            if root.path == old_path:
                roots[i] = StorageRoot(path=new_path, label=label)
                self._save_roots(roots)
                return True
        return False

    def set_storage_root(self, path: str) -> None:
        """Replace every configured root with a single one."""
        self._save_roots([StorageRoot(path=path)])

    # -- routing model ---------------------------------------------------

    def routing_model(self) -> Optional[str]:
        """The configured routing model, or None when unconfigured (no default)."""
        return self._store.get(ROUTING_MODEL_KEY) or None

    def require_routing_model(self) -> str:
        model = self.routing_model()
        if not model:
            raise NotConfiguredError("No routing model configured")
        return model

    def set_routing_model(self, model: str) -> None:
        self._store.set(ROUTING_MODEL_KEY, model)

    def clear_routing_model(self) -> None:
        self._store.remove(ROUTING_MODEL_KEY)
