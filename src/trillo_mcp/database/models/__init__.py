"""Database models."""

from trillo_mcp.database.models.base import Base, generate_id, get_current_timestamp
from trillo_mcp.database.models.project import Project
from trillo_mcp.database.models.task import Task

__all__ = [
    "Base",
    "generate_id",
    "get_current_timestamp",
    "Project",
    "Task",
]
