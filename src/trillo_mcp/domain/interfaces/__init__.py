"""Domain interfaces - Protocol-based repository and generator contracts."""

from trillo_mcp.domain.interfaces.project_repository import IProjectRepository
from trillo_mcp.domain.interfaces.task_repository import ITaskRepository
from trillo_mcp.domain.interfaces.task_suggestion_generator import ITaskSuggestionGenerator

__all__ = [
    "IProjectRepository",
    "ITaskRepository",
    "ITaskSuggestionGenerator",
]
