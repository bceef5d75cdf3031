"""
SkillShelf - a personal library of SKILL.md skills with LLM routing.

Skills live as directories under one or more storage roots; enabled skills
are matched to a request by a single classification call.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "0.1.0"

if TYPE_CHECKING:
    from skillshelf.core.app import SkillShelfApp as SkillShelfApp

__all__ = ["SkillShelfApp", "__version__"]


def __getattr__(name: str):
    # Lazy import so `skillshelf.skills.*` can be used without the LLM stack.
    if name == "SkillShelfApp":
        from skillshelf.core.app import SkillShelfApp  # local import

        return SkillShelfApp
    raise AttributeError(name)
