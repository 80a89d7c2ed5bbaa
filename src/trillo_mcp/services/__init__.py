"""Service layer - Business logic orchestration."""

from trillo_mcp.services.project_service import ProjectService
from trillo_mcp.services.project_task_suggestion_service import ProjectTaskSuggestionService
from trillo_mcp.services.service_factory import ServiceFactory, get_service_factory
from trillo_mcp.services.task_service import TaskService

__all__ = [
    "ProjectService",
    "ProjectTaskSuggestionService",
    "TaskService",
    "ServiceFactory",
    "get_service_factory",
]
