"""
Tool Registry - the skill tools, executable by name or as LangChain tools.
"""

import asyncio
from typing import Any, Dict, List, Optional, Set

from langchain_core.tools import BaseTool as LangChainBaseTool
from langchain_core.tools import StructuredTool
from loguru import logger
from pydantic import Field, create_model

from skillshelf.skills.enablement import EnablementStore
from skillshelf.skills.repository import SkillRepository
from skillshelf.skills.router import SkillRouter
from skillshelf.tools.base import BaseTool, ToolDefinition, ToolResult
from skillshelf.tools.builtin.skills import (
    AddSkillTool,
    DeleteSkillTool,
    EditSkillTool,
    ListSkillsTool,
    ReadSkillFileTool,
    ToggleSkillTool,
    UseSkillsTool,
)

_JSON_TYPES: Dict[str, Any] = {
    "string": str,
    "integer": int,
    "number": float,
    "boolean": bool,
    "array": List[str],
}


class ToolRegistry:
    """
    Registry for the SkillShelf tools.

    Features:
    - Built-in skill tool registration
    - Execution by name (errors come back as ToolResult)
    - LangChain tool conversion
    """

    def __init__(
        self,
        repository: SkillRepository,
        enablement: EnablementStore,
        router: SkillRouter,
    ):
        self.repository = repository
        self.enablement = enablement
        self.router = router

        self._tools: Dict[str, BaseTool] = {}
        self._lc_tool_cache: Dict[str, LangChainBaseTool] = {}

    def register_builtin_tools(self) -> None:
        for tool in (
            AddSkillTool(self.repository),
            EditSkillTool(self.repository),
            UseSkillsTool(self.router),
            ListSkillsTool(self.repository, self.enablement),
            ReadSkillFileTool(self.repository),
            DeleteSkillTool(self.repository, self.enablement),
            ToggleSkillTool(self.repository, self.enablement),
        ):
            self.register(tool)
        logger.debug(f"Registered {len(self._tools)} skill tools")

    def register(self, tool: BaseTool) -> None:
        name = tool.definition.name
        if name in self._tools:
            logger.warning(f"Replacing already registered tool {name}")
        self._tools[name] = tool
        self._lc_tool_cache.pop(name, None)

    async def execute(self, name: str, params: Optional[Dict[str, Any]] = None) -> ToolResult:
        """Execute a tool by name. Unknown tools and failures become error results."""
        tool = self._tools.get(name)
        if not tool:
            return ToolResult(success=False, error=f"Tool not found: {name}")
        return await tool.safe_execute(**(params or {}))

    def get_langchain_tools(self, *, allowlist: Optional[Set[str]] = None) -> List[LangChainBaseTool]:
        """Convert registered tools to LangChain StructuredTools."""
        wanted = set(allowlist) if allowlist is not None else set(self._tools.keys())
        out: List[LangChainBaseTool] = []

        for name in sorted(wanted):
            internal_tool = self._tools.get(name)
            if not internal_tool:
                continue

            cached = self._lc_tool_cache.get(name)
            if cached is None:
                cached = self._to_langchain(internal_tool)
                self._lc_tool_cache[name] = cached
            out.append(cached)

        return out

    @staticmethod
    def _args_schema(definition: ToolDefinition) -> Any:
        props = definition.parameters.get("properties", {}) or {}
        required = set(definition.parameters.get("required", []) or [])

        fields: Dict[str, Any] = {}
        for prop_name, prop_info in props.items():
            prop_info = prop_info if isinstance(prop_info, dict) else {}
            prop_type: Any = _JSON_TYPES.get(prop_info.get("type", "string"), str)

            default_val = prop_info.get("default", ...)
            if prop_name not in required and default_val is ...:
                default_val = None
                prop_type = Optional[prop_type]

            fields[prop_name] = (prop_type, Field(default=default_val, description=prop_info.get("description", "")))

        return create_model(f"{definition.name}Args", **fields)

    def _to_langchain(self, tool: BaseTool) -> LangChainBaseTool:
        definition = tool.definition

        async def executor(**kwargs):
            # Drop unset optionals so tool defaults apply.
            params = {k: v for k, v in kwargs.items() if v is not None}
            result = await tool.safe_execute(**params)
            return result.message

        def sync_executor(**kwargs):
            try:
                asyncio.get_running_loop()
            except RuntimeError:
                return asyncio.run(executor(**kwargs))
            raise RuntimeError("Synchronous tool execution is not supported in an active event loop")

        return StructuredTool.from_function(
            func=sync_executor,
            coroutine=executor,
            name=definition.name,
            description=definition.description,
            args_schema=self._args_schema(definition),
        )
