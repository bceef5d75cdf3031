"""
Base Tool - Abstract base class for the skill tools exposed to an agent.
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from loguru import logger
from pydantic import BaseModel, Field


class ToolCategory(str, Enum):
    """Tool categories."""
    SKILLS = "skills"
    ROUTING = "routing"


class ToolPermission(str, Enum):
    """Tool permission levels."""
    READ = "read"
    WRITE = "write"
    NETWORK = "network"


@dataclass
class ToolResult:
    """Result from tool execution. `message` is what the agent gets to read."""

    success: bool
    data: Any = None
    error: Optional[str] = None
    execution_time_ms: float = 0
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def message(self) -> str:
        if self.success:
            return str(self.data if self.data is not None else "")
        return f"❌ {self.error}" if self.error else "❌ Unknown error"


class ToolDefinition(BaseModel):
    """Tool definition for registration."""

    name: str
    description: str
    category: ToolCategory = ToolCategory.SKILLS
    permissions: List[ToolPermission] = Field(default_factory=list)
    parameters: Dict[str, Any] = Field(default_factory=dict)  # JSON Schema
    returns: str = "string"


class BaseTool(ABC):
    """
    Abstract base class for SkillShelf tools.

    All tools must implement:
    - definition: Tool metadata
    - execute: Core execution logic
    """

    @property
    @abstractmethod
    def definition(self) -> ToolDefinition:
        """Get tool definition."""
        pass

    @abstractmethod
    async def execute(self, **kwargs) -> ToolResult:
        """
        Execute the tool.

        Args:
            **kwargs: Tool-specific parameters

        Returns:
            ToolResult with execution outcome
        """
        pass

    def validate_params(self, params: Dict[str, Any]) -> Optional[str]:
        """
        Check that every required parameter is present.

        Returns:
            Error message if invalid, None if valid
        """
        schema = self.definition.parameters
        required = schema.get("required", [])

        for param in required:
            if param not in params:
                return f"Missing required parameter: {param}"

        return None

    async def safe_execute(self, **kwargs) -> ToolResult:
        """Execute with validation; never raises."""
        start_time = time.time()

        error = self.validate_params(kwargs)
        if error:
            return ToolResult(
                success=False,
                error=error,
                execution_time_ms=(time.time() - start_time) * 1000
            )

        try:
            result = await self.execute(**kwargs)
            result.execution_time_ms = (time.time() - start_time) * 1000
            return result
        except Exception as e:
            logger.error(f"Tool {self.definition.name} failed: {e}")
            return ToolResult(
                success=False,
                error=str(e) or type(e).__name__,
                execution_time_ms=(time.time() - start_time) * 1000
            )
