"""
Skill models (Pydantic).

These models describe a skill as read from disk: the SKILL.md metadata block,
its instruction body, and where it lives.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

# Well-known metadata keys, in their on-disk spelling.
KNOWN_KEYS = {
    "name": "name",
    "description": "description",
    "allowedTools": "allowed_tools",
    "model": "model",
}


class SkillMetadata(BaseModel):
    name: str = ""
    description: str = ""
    allowed_tools: List[str] = Field(default_factory=list)
    model: Optional[str] = None

    # Unrecognised keys, camel-normalised, in document order.
    extra: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("name", "description", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v)

    @field_validator("allowed_tools", mode="before")
    @classmethod
    def _coerce_tools(cls, v: Any) -> List[str]:
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return [str(t) for t in v]

    @field_validator("model", mode="before")
    @classmethod
    def _coerce_model(cls, v: Any) -> Optional[str]:
        if v is None or v == "":
            return None
        return str(v)

    @classmethod
    def from_mapping(cls, data: Dict[str, Any]) -> "SkillMetadata":
        """Build from a camel-normalised mapping, routing unknown keys to `extra`."""
        fields: Dict[str, Any] = {}
        extra: Dict[str, Any] = {}
        for key, value in data.items():
            field_name = KNOWN_KEYS.get(key)
            if field_name:
                fields[field_name] = value
            else:
                extra[key] = value
        return cls(**fields, extra=extra)

    @property
    def is_complete(self) -> bool:
        return bool(self.name) and bool(self.description)


class StorageRoot(BaseModel):
    path: str
    label: Optional[str] = None

    @field_validator("path")
    @classmethod
    def _validate_path(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("storage root path cannot be empty")
        return v

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class Skill(BaseModel):
    """A skill directory resolved on disk. `name` is the directory name."""

    name: str
    path: Path
    skill_md_path: Path
    metadata: SkillMetadata
    content: str = ""
    supporting_files: List[str] = Field(default_factory=list)

    def matches(self, identifier: str) -> bool:
        return self.name == identifier or self.metadata.name == identifier
