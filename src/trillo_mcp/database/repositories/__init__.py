"""Database repositories."""

from trillo_mcp.database.repositories.project_repository import ProjectRepository
from trillo_mcp.database.repositories.task_repository import TaskRepository

__all__ = [
    "ProjectRepository",
    "TaskRepository",
]
