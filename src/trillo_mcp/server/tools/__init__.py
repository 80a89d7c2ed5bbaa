"""MCP Tool definitions."""

from typing import List

from mcp.types import Tool

from trillo_mcp.server.tools.project_tools import get_project_tools
from trillo_mcp.server.tools.suggestion_tools import get_suggestion_tools
from trillo_mcp.server.tools.task_tools import get_task_tools


def get_all_tools() -> List[Tool]:
    """Get all available MCP tools."""
    tools = []
    tools.extend(get_project_tools())
    tools.extend(get_task_tools())
    tools.extend(get_suggestion_tools())
    return tools


__all__ = [
    "get_all_tools",
    "get_project_tools",
    "get_suggestion_tools",
    "get_task_tools",
]
