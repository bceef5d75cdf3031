"""
Skills subsystem - SKILL.md libraries, enablement and routing.

Skills are discovered from every configured storage root:
- <root>/<skill-dir>/SKILL.md
- default root: ~/.claude/skills
"""

from __future__ import annotations

from skillshelf.skills.enablement import EnablementStore
from skillshelf.skills.models import Skill, SkillMetadata, StorageRoot
from skillshelf.skills.repository import SkillRepository
from skillshelf.skills.router import RouteOutcome, SkillRouteDecision, SkillRouter
from skillshelf.skills.settings import SkillSettings

__all__ = [
    "EnablementStore",
    "RouteOutcome",
    "Skill",
    "SkillMetadata",
    "SkillRepository",
    "SkillRouteDecision",
    "SkillRouter",
    "SkillSettings",
    "StorageRoot",
]
