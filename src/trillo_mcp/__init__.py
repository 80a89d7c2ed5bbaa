"""Trillo MCP - Project boards with epics, tasks and suggested tasks.

Project and task management via MCP protocol.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
