"""
Skill Tools - create, edit, route, list, read and delete skills.

These are the user-facing wrappers around the skill library: every failure
comes back as a ToolResult with a readable error, never as an exception.
"""

import re
from typing import Any, Dict, List, Optional

from loguru import logger

from skillshelf.skills.enablement import EnablementStore
from skillshelf.skills.errors import SkillError, SkillNotFoundError, SkillValidationError
from skillshelf.skills.repository import SkillRepository
from skillshelf.skills.router import SkillRouter
from skillshelf.tools.base import BaseTool, ToolCategory, ToolDefinition, ToolPermission, ToolResult

NAME_PATTERN = re.compile(r"^[a-z0-9-]+$")
MAX_NAME_LENGTH = 64
MAX_DESCRIPTION_LENGTH = 1024


def validate_name(name: Optional[str]) -> str:
    if not name or not name.strip():
        raise SkillValidationError("Skill name is required.")
    if not NAME_PATTERN.match(name):
        raise SkillValidationError(
            f'Invalid skill name "{name}". Skill names must use lowercase letters, numbers, '
            f"and hyphens only (max {MAX_NAME_LENGTH} characters)."
        )
    if len(name) > MAX_NAME_LENGTH:
        raise SkillValidationError(f"Skill name too long. Maximum {MAX_NAME_LENGTH} characters allowed.")
    return name


def validate_description(description: Optional[str], *, required: bool) -> None:
    if description is None:
        if required:
            raise SkillValidationError("Description is required.")
        return
    if not description.strip():
        raise SkillValidationError("Description is required." if required else "Description cannot be empty.")
    if len(description) > MAX_DESCRIPTION_LENGTH:
        raise SkillValidationError(
            f"Description too long. Maximum {MAX_DESCRIPTION_LENGTH} characters allowed "
            f"(currently {len(description)} characters)."
        )


def validate_content(content: Optional[str], *, required: bool) -> None:
    if content is None:
        if required:
            raise SkillValidationError("Content is required.")
        return
    if not content.strip():
        raise SkillValidationError("Content is required." if required else "Content cannot be empty.")


_ALLOWED_TOOLS_SCHEMA = {
    "type": "array",
    "items": {"type": "string"},
    "description": "Tools the AI can use without asking while this skill is active (optional)",
}


class AddSkillTool(BaseTool):
    """Create a new skill directory with a SKILL.md."""

    def __init__(self, repository: SkillRepository) -> None:
        self._repository = repository

    @property
    def definition(self) -> ToolDefinition:
        return ToolDefinition(
            name="add_skill",
            description=(
                "Create a new skill: a directory with a SKILL.md holding its name, description "
                "and instructions. Names use lowercase letters, numbers and hyphens only."
            ),
            category=ToolCategory.SKILLS,
            permissions=[ToolPermission.WRITE],
            parameters={
                "type": "object",
                "properties": {
                    "name": {
                        "type": "string",
                        "description": "Skill name (lowercase, numbers and hyphens, max 64 chars)",
                    },
                    "description": {
                        "type": "string",
                        "description": "What the skill does and when to use it (max 1024 chars)",
                    },
                    "content": {
                        "type": "string",
                        "description": "Markdown instructions (the body after the metadata block)",
                    },
                    "allowed_tools": _ALLOWED_TOOLS_SCHEMA,
                    "model": {"type": "string", "description": "Model to use while this skill is active (optional)"},
                    "overwrite": {
                        "type": "boolean",
                        "description": "Replace an existing skill with the same name (default: true)",
                        "default": True,
                    },
                },
                "required": ["name", "description", "content"],
            },
        )

    async def execute(
        self,
        name: str,
        description: str,
        content: str,
        allowed_tools: Optional[List[str]] = None,
        model: Optional[str] = None,
        overwrite: bool = True,
        **kwargs,
    ) -> ToolResult:
        try:
            validate_name(name)
            validate_description(description, required=True)
            validate_content(content, required=True)
        except SkillValidationError as e:
            return ToolResult(success=False, error=str(e))

        try:
            skill = self._repository.create_skill(
                name, description, content, allowed_tools, model, overwrite=overwrite
            )
        except SkillError as e:
            logger.error(f"add_skill failed: {e}")
            return ToolResult(success=False, error=f"Failed to create skill: {e}")

        lines = [f'✅ Successfully created skill "{skill.metadata.name}"', "", f"Directory: {skill.path}"]
        if allowed_tools:
            lines.append(f"- Allowed Tools: {', '.join(allowed_tools)}")
        if model:
            lines.append(f"- Model: {model}")
        lines += [
            "",
            f"Description: {skill.metadata.description}",
            "",
            "Enable it to make it available for routing.",
        ]
        return ToolResult(success=True, data="\n".join(lines), metadata={"path": str(skill.path)})


class EditSkillTool(BaseTool):
    """Update fields of an existing skill. Only the provided fields change."""

    def __init__(self, repository: SkillRepository) -> None:
        self._repository = repository

    @property
    def definition(self) -> ToolDefinition:
        return ToolDefinition(
            name="edit_skill",
            description="Update an existing skill's SKILL.md. Only provide the fields you want to change.",
            category=ToolCategory.SKILLS,
            permissions=[ToolPermission.WRITE],
            parameters={
                "type": "object",
                "properties": {
                    "name": {"type": "string", "description": "The name of the skill to update"},
                    "description": {"type": "string", "description": "New description (optional)"},
                    "content": {"type": "string", "description": "New instructions (optional)"},
                    "allowed_tools": _ALLOWED_TOOLS_SCHEMA,
                    "model": {"type": "string", "description": "New model (optional)"},
                },
                "required": ["name"],
            },
        )

    async def execute(
        self,
        name: str,
        description: Optional[str] = None,
        content: Optional[str] = None,
        allowed_tools: Optional[List[str]] = None,
        model: Optional[str] = None,
        **kwargs,
    ) -> ToolResult:
        if not name or not name.strip():
            return ToolResult(success=False, error="Skill name is required.")

        if self._repository.find_skill(name) is None:
            return ToolResult(
                success=False,
                error=f'Skill "{name}" not found. Use list_skills to see all available skills.',
            )

        try:
            validate_description(description, required=False)
            validate_content(content, required=False)
        except SkillValidationError as e:
            return ToolResult(success=False, error=str(e))

        try:
            updated = self._repository.update_skill(
                name,
                description=description,
                content=content,
                allowed_tools=allowed_tools,
                model=model,
            )
        except SkillError as e:
            logger.error(f"edit_skill failed: {e}")
            return ToolResult(success=False, error=f"Failed to update skill: {e}")

        if updated is None:
            return ToolResult(success=False, error=f'Failed to update skill "{name}"')

        changes: Dict[str, Any] = {
            "description": description,
            "content": "(updated)" if content is not None else None,
            "allowed_tools": ", ".join(allowed_tools) if allowed_tools is not None else None,
            "model": model,
        }
        change_lines = [f"  - {key}: {value}" for key, value in changes.items() if value is not None]

        message = "\n".join(
            [
                f'✅ Successfully updated skill "{updated.metadata.name}"',
                "",
                "Changes:",
                *(change_lines or ["  (none)"]),
                "",
                f"Description: {updated.metadata.description}",
            ]
        )
        return ToolResult(success=True, data=message, metadata={"path": str(updated.path)})


class UseSkillsTool(BaseTool):
    """Pick the enabled skill that best fits a request and return its instructions."""

    def __init__(self, router: SkillRouter) -> None:
        self._router = router

    @property
    def definition(self) -> ToolDefinition:
        return ToolDefinition(
            name="use_skills",
            description=(
                "Select the most relevant enabled skill for the user's request and return its "
                "instructions, or guidance when no skill fits."
            ),
            category=ToolCategory.ROUTING,
            permissions=[ToolPermission.READ, ToolPermission.NETWORK],
            parameters={
                "type": "object",
                "properties": {
                    "request": {
                        "type": "string",
                        "description": "The user's request or question, used to select the skill",
                    }
                },
                "required": ["request"],
            },
        )

    async def execute(self, request: str, **kwargs) -> ToolResult:
        decision = await self._router.route(request)
        metadata: Dict[str, Any] = {"outcome": decision.outcome.value}
        if decision.skill is not None:
            metadata["skill"] = decision.skill.name
        return ToolResult(success=True, data=decision.message, metadata=metadata)


class ListSkillsTool(BaseTool):
    """List every skill across the storage roots."""

    def __init__(self, repository: SkillRepository, enablement: EnablementStore) -> None:
        self._repository = repository
        self._enablement = enablement

    @property
    def definition(self) -> ToolDefinition:
        return ToolDefinition(
            name="list_skills",
            description="List all skills with their descriptions, enabled state and supporting files.",
            category=ToolCategory.SKILLS,
            permissions=[ToolPermission.READ],
            parameters={"type": "object", "properties": {}},
        )

    async def execute(self, **kwargs) -> ToolResult:
        skills = self._repository.list_skills()
        if not skills:
            roots = ", ".join(r.path for r in self._repository.list_storage_roots())
            return ToolResult(success=True, data=f"No skills found in: {roots}", metadata={"count": 0})

        enabled = set(self._enablement.list_enabled())
        lines = [f"# Skills ({len(skills)})", ""]
        for skill in skills:
            state = "enabled" if skill.name in enabled else "disabled"
            lines.append(f"- **{skill.name}** ({state}) - {skill.metadata.description}")
            if skill.metadata.name != skill.name:
                lines.append(f"  - declared name: {skill.metadata.name}")
            if skill.supporting_files:
                lines.append(f"  - files: {', '.join(skill.supporting_files)}")
        return ToolResult(success=True, data="\n".join(lines), metadata={"count": len(skills)})


class ReadSkillFileTool(BaseTool):
    """Read a supporting file that ships with a skill."""

    def __init__(self, repository: SkillRepository) -> None:
        self._repository = repository

    @property
    def definition(self) -> ToolDefinition:
        return ToolDefinition(
            name="read_skill_file",
            description="Read one of a skill's supporting files (templates, examples, references).",
            category=ToolCategory.SKILLS,
            permissions=[ToolPermission.READ],
            parameters={
                "type": "object",
                "properties": {
                    "skill": {"type": "string", "description": "Skill name"},
                    "file_name": {"type": "string", "description": "File name inside the skill directory"},
                },
                "required": ["skill", "file_name"],
            },
        )

    async def execute(self, skill: str, file_name: str, **kwargs) -> ToolResult:
        try:
            content = self._repository.read_supporting_file(skill, file_name)
        except SkillNotFoundError as e:
            return ToolResult(success=False, error=str(e))
        except SkillError as e:
            return ToolResult(success=False, error=f"Failed to read file: {e}")
        return ToolResult(success=True, data=content, metadata={"skill": skill, "file": file_name})


class DeleteSkillTool(BaseTool):
    """Delete a skill directory and drop it from the enabled set."""

    def __init__(self, repository: SkillRepository, enablement: EnablementStore) -> None:
        self._repository = repository
        self._enablement = enablement

    @property
    def definition(self) -> ToolDefinition:
        return ToolDefinition(
            name="delete_skill",
            description="Delete a skill and all of its files.",
            category=ToolCategory.SKILLS,
            permissions=[ToolPermission.WRITE],
            parameters={
                "type": "object",
                "properties": {"name": {"type": "string", "description": "Skill name"}},
                "required": ["name"],
            },
        )

    async def execute(self, name: str, **kwargs) -> ToolResult:
        skill = self._repository.find_skill(name)
        if skill is None:
            return ToolResult(success=False, error=f'Skill "{name}" not found.')

        try:
            self._repository.delete_skill(skill.name)
        except SkillError as e:
            logger.error(f"delete_skill failed: {e}")
            return ToolResult(success=False, error=f"Failed to delete skill: {e}")

        self._enablement.disable(skill.name)
        return ToolResult(success=True, data=f'✅ Deleted skill "{skill.name}" ({skill.path})')


class ToggleSkillTool(BaseTool):
    """Enable or disable a skill for routing."""

    def __init__(self, repository: SkillRepository, enablement: EnablementStore) -> None:
        self._repository = repository
        self._enablement = enablement

    @property
    def definition(self) -> ToolDefinition:
        return ToolDefinition(
            name="toggle_skill",
            description="Enable or disable a skill so the router can (or cannot) select it.",
            category=ToolCategory.SKILLS,
            permissions=[ToolPermission.WRITE],
            parameters={
                "type": "object",
                "properties": {
                    "name": {"type": "string", "description": "Skill name"},
                    "enabled": {"type": "boolean", "description": "True to enable, false to disable"},
                },
                "required": ["name", "enabled"],
            },
        )

    async def execute(self, name: str, enabled: bool, **kwargs) -> ToolResult:
        skill = self._repository.find_skill(name)
        if skill is None:
            return ToolResult(success=False, error=f'Skill "{name}" not found.')

        # The enabled set is keyed by directory name.
        if enabled:
            self._enablement.enable(skill.name)
        else:
            self._enablement.disable(skill.name)

        state = "enabled" if enabled else "disabled"
        return ToolResult(success=True, data=f'✅ Skill "{skill.name}" {state}', metadata={"enabled": bool(enabled)})
