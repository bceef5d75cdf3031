"""Built-in tools."""

from skillshelf.tools.builtin.skills import (
    AddSkillTool,
    DeleteSkillTool,
    EditSkillTool,
    ListSkillsTool,
    ReadSkillFileTool,
    ToggleSkillTool,
    UseSkillsTool,
)

__all__ = [
    "AddSkillTool",
    "DeleteSkillTool",
    "EditSkillTool",
    "ListSkillsTool",
    "ReadSkillFileTool",
    "ToggleSkillTool",
    "UseSkillsTool",
]
