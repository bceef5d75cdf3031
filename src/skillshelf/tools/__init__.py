"""Tools module - skill tools and their registry."""

from skillshelf.tools.base import BaseTool, ToolResult
from skillshelf.tools.registry import ToolRegistry

__all__ = ["ToolRegistry", "BaseTool", "ToolResult"]
