"""
SkillRepository - discover, read, create, update and delete skills on disk.

Each skill is a directory under one of the configured storage roots:

    <root>/<skill-dir>/SKILL.md
    <root>/<skill-dir>/<supporting files...>

Nothing is cached; every call walks the roots again.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Iterable, List, Optional

from loguru import logger

from skillshelf.skills import frontmatter
from skillshelf.skills.errors import (
    SkillNotFoundError,
    SkillValidationError,
    StorageFailureError,
    soft_read,
)
from skillshelf.skills.models import Skill, SkillMetadata, StorageRoot
from skillshelf.skills.settings import SkillSettings

SKILL_FILE = "SKILL.md"
LOWERCASE_SKILL_FILE = "skill.md"


def resolve_skill(skills: Iterable[Skill], identifier: str) -> Optional[Skill]:
    """Directory-name match first, then declared name."""
    candidates = list(skills)
    for skill in candidates:
        if skill.name == identifier:
            return skill
    for skill in candidates:
        if skill.metadata.name == identifier:
            return skill
    return None


def _supporting_files(skill_dir: Path) -> List[str]:
    return sorted(p.name for p in skill_dir.iterdir() if p.name != SKILL_FILE and p.is_file())


class SkillRepository:
    """
    Skill records across every configured storage root.

    Reads degrade to empty results instead of raising. Writes raise
    StorageFailureError when the filesystem refuses them.
    """

    def __init__(self, settings: SkillSettings) -> None:
        self._settings = settings

    @property
    def settings(self) -> SkillSettings:
        return self._settings

    def list_storage_roots(self) -> List[StorageRoot]:
        return self._settings.storage_roots()

    @soft_read(list)
    def list_skills(self) -> List[Skill]:
        skills: List[Skill] = []
        for root in self.list_storage_roots():
            skills.extend(self._load_skills_from_root(Path(root.path).expanduser()))
        return skills

    def _load_skills_from_root(self, root: Path) -> List[Skill]:
        if not root.exists():
            return []

        skills: List[Skill] = []
        for entry in sorted(root.iterdir(), key=lambda p: p.name):
            if not entry.is_dir():
                continue
            skill = self._load_skill_dir(entry)
            if skill is not None:
                skills.append(skill)
        return skills

    def _load_skill_dir(self, skill_dir: Path) -> Optional[Skill]:
        skill_md = skill_dir / SKILL_FILE
        if not skill_md.exists():
            if (skill_dir / LOWERCASE_SKILL_FILE).exists():
                # Lower-case skill.md is not accepted as a skill document.
                logger.debug(f"Skipping {skill_dir}: found {LOWERCASE_SKILL_FILE}, expected {SKILL_FILE}")
            return None

        parsed = frontmatter.parse(skill_md.read_text(encoding="utf-8", errors="replace"))
        if parsed is None:
            logger.debug(f"Skipping {skill_dir}: unparsable {SKILL_FILE}")
            return None

        metadata, content = parsed
        if not metadata.is_complete:
            logger.debug(f"Skipping {skill_dir}: name and description are required")
            return None

        return Skill(
            name=skill_dir.name,
            path=skill_dir,
            skill_md_path=skill_md,
            metadata=metadata,
            content=content,
            supporting_files=_supporting_files(skill_dir),
        )

    @soft_read(lambda: None)
    def find_skill(self, identifier: str) -> Optional[Skill]:
        return resolve_skill(self.list_skills(), identifier)

    def read_supporting_file(self, skill_identifier: str, file_name: str) -> str:
        skill = self.find_skill(skill_identifier)
        if skill is None:
            raise SkillNotFoundError(f'Skill "{skill_identifier}" not found')

        skill_dir = skill.path.resolve()
        file_path = (skill_dir / file_name).resolve()
        if skill_dir not in file_path.parents or not file_path.is_file():
            raise SkillNotFoundError(f'File "{file_name}" not found in skill "{skill_identifier}"')

        try:
            return file_path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise StorageFailureError(f"Failed to read {file_path}: {e}", path=str(file_path)) from e

    def create_skill(
        self,
        name: str,
        description: str,
        content: str,
        allowed_tools: Optional[List[str]] = None,
        model: Optional[str] = None,
        root: Optional[str] = None,
        *,
        overwrite: bool = True,
    ) -> Skill:
        """
        Write a new skill directory and its SKILL.md.

        An existing skill with the same directory name is overwritten unless
        `overwrite=False`, in which case SkillValidationError is raised.
        """
        root_path = Path(root or self._settings.primary_storage_root()).expanduser()
        skill_dir = root_path / name
        skill_md = skill_dir / SKILL_FILE

        if not overwrite and skill_md.exists():
            raise SkillValidationError(f'Skill "{name}" already exists at {skill_dir}')

        metadata = SkillMetadata(
            name=name,
            description=description,
            allowed_tools=allowed_tools or [],
            model=model,
        )

        try:
            skill_dir.mkdir(parents=True, exist_ok=True)
            skill_md.write_text(frontmatter.serialize(metadata, content), encoding="utf-8")
            supporting = _supporting_files(skill_dir)
        except OSError as e:
            raise StorageFailureError(f"Failed to write {skill_md}: {e}", path=str(skill_md)) from e

        logger.info(f"Created skill {name} at {skill_dir}")
        return Skill(
            name=name,
            path=skill_dir,
            skill_md_path=skill_md,
            metadata=metadata,
            content=content,
            supporting_files=supporting,
        )

    def update_skill(
        self,
        identifier: str,
        *,
        description: Optional[str] = None,
        content: Optional[str] = None,
        allowed_tools: Optional[List[str]] = None,
        model: Optional[str] = None,
    ) -> Optional[Skill]:
        """
        Merge the given fields into the skill's SKILL.md.

        Fields left as None keep their current value; an empty list or string
        clears `allowed_tools` / `model`. Returns None when the skill is
        unknown or its current document no longer parses.
        """
        skill = self.find_skill(identifier)
        if skill is None:
            return None

        try:
            current_text = skill.skill_md_path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise StorageFailureError(
                f"Failed to read {skill.skill_md_path}: {e}", path=str(skill.skill_md_path)
            ) from e

        parsed = frontmatter.parse(current_text)
        if parsed is None:
            return None
        current, body = parsed

        changes = {
            key: value
            for key, value in (
                ("description", description),
                ("allowed_tools", allowed_tools),
                ("model", model),
            )
            if value is not None
        }
        metadata = SkillMetadata.model_validate({**current.model_dump(), **changes})
        new_content = content if content is not None else body

        try:
            skill.skill_md_path.write_text(frontmatter.serialize(metadata, new_content), encoding="utf-8")
        except OSError as e:
            raise StorageFailureError(
                f"Failed to write {skill.skill_md_path}: {e}", path=str(skill.skill_md_path)
            ) from e

        updated_fields = sorted(changes) + (["content"] if content is not None else [])
        logger.info(f"Updated skill {skill.name} ({', '.join(updated_fields) or 'no changes'})")
        return skill.model_copy(update={"metadata": metadata, "content": new_content})

    def delete_skill(self, identifier: str) -> bool:
        skill = self.find_skill(identifier)
        if skill is None:
            return False

        try:
            shutil.rmtree(skill.path)
        except FileNotFoundError:
            pass
        except OSError as e:
            raise StorageFailureError(f"Failed to delete {skill.path}: {e}", path=str(skill.path)) from e

        logger.info(f"Deleted skill {skill.name} ({skill.path})")
        return True
