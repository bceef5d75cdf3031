"""
EnablementStore - which skills the router may pick.

The enabled set is a JSON array of skill directory names in the key/value
store, kept in insertion order.
"""

from __future__ import annotations

import json
from typing import List

from loguru import logger

from skillshelf.config.store import KeyValueStore
from skillshelf.skills.models import Skill
from skillshelf.skills.repository import SkillRepository
from skillshelf.skills.settings import ENABLED_SKILLS_KEY


class EnablementStore:
    def __init__(self, store: KeyValueStore, repository: SkillRepository) -> None:
        self._store = store
        self._repository = repository

    def list_enabled(self) -> List[str]:
        raw = self._store.get(ENABLED_SKILLS_KEY)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.warning(f"Ignoring unreadable enabled skills list: {e}")
            return []
        if not isinstance(data, list):
            return []
        return [str(name) for name in data]

    def _persist(self, names: List[str]) -> None:
        self._store.set(ENABLED_SKILLS_KEY, json.dumps(names))

    def is_enabled(self, name: str) -> bool:
        return name in self.list_enabled()

    def enable(self, name: str) -> None:
        enabled = self.list_enabled()
        if name not in enabled:
            enabled.append(name)
            self._persist(enabled)
            logger.debug(f"Enabled skill {name}")

    def disable(self, name: str) -> None:
        enabled = self.list_enabled()
        filtered = [n for n in enabled if n != name]
        self._persist(filtered)
        if len(filtered) != len(enabled):
            logger.debug(f"Disabled skill {name}")

    def list_enabled_skills(self) -> List[Skill]:
        enabled = set(self.list_enabled())
        return [skill for skill in self._repository.list_skills() if skill.name in enabled]
