"""
Service Factory - Dependency injection for services.

Provides a centralized factory for creating service instances with
proper dependency injection.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Optional

from trillo_mcp.config import Settings, load_settings
from trillo_mcp.database.orm_manager import ORMManager, get_orm_manager
from trillo_mcp.database.repositories import ProjectRepository, TaskRepository
from trillo_mcp.domain.interfaces import ITaskSuggestionGenerator

if TYPE_CHECKING:
    from trillo_mcp.services.project_service import ProjectService
    from trillo_mcp.services.project_task_suggestion_service import ProjectTaskSuggestionService
    from trillo_mcp.services.task_service import TaskService

logger = logging.getLogger(__name__)

# Module-level singleton
_global_factory: Optional["ServiceFactory"] = None
_global_lock = threading.Lock()


def get_service_factory(
    orm_manager: Optional[ORMManager] = None,
    settings: Optional[Settings] = None,
) -> "ServiceFactory":
    """
    Get the singleton service factory instance.

    Args:
        orm_manager: Optional ORM manager instance. Uses singleton if not provided.
        settings: Optional settings. Loaded from the environment if not provided.

    Returns:
        ServiceFactory singleton instance.
    """
    global _global_factory

    with _global_lock:
        if _global_factory is None:
            _global_factory = ServiceFactory(orm_manager, settings)
        return _global_factory


def reset_service_factory() -> None:
    """Reset the global service factory (for testing)."""
    global _global_factory

    with _global_lock:
        if _global_factory is not None:
            _global_factory.close()
        _global_factory = None


class ServiceFactory:
    """
    Factory for creating service instances with dependency injection.

    Creates and caches service instances, ensuring they share the same
    ORM manager and repositories.
    """

    def __init__(
        self,
        orm_manager: Optional[ORMManager] = None,
        settings: Optional[Settings] = None,
        suggestion_generator: Optional[ITaskSuggestionGenerator] = None,
    ):
        """
        Initialize the service factory.

        Args:
            orm_manager: ORM manager instance. Built from ``settings.db_path``
                (through the singleton) if not provided.
            settings: Process settings. Loaded from the environment if not provided.
            suggestion_generator: Generator override; by default an
                OpenAI-compatible generator is built when ``LLM_API_KEY`` is set.
        """
        self._settings = settings or load_settings()
        self._orm_manager = orm_manager or get_orm_manager(self._settings.db_path)
        self._lock = threading.RLock()  # RLock allows reentrant locking

        # Repository cache
        self._project_repo: Optional[ProjectRepository] = None
        self._task_repo: Optional[TaskRepository] = None

        self._suggestion_generator = suggestion_generator
        self._owns_generator = False

        # Service cache
        self._project_service: Optional["ProjectService"] = None
        self._task_service: Optional["TaskService"] = None
        self._suggestion_service: Optional["ProjectTaskSuggestionService"] = None

    @property
    def orm_manager(self) -> ORMManager:
        """Get the ORM manager."""
        return self._orm_manager

    @property
    def settings(self) -> Settings:
        return self._settings

    # Repository getters
    def get_project_repository(self) -> ProjectRepository:
        """Get or create the project repository."""
        with self._lock:
            if self._project_repo is None:
                self._project_repo = ProjectRepository(self._orm_manager)
            return self._project_repo

    def get_task_repository(self) -> TaskRepository:
        """Get or create the task repository."""
        with self._lock:
            if self._task_repo is None:
                self._task_repo = TaskRepository(self._orm_manager)
            return self._task_repo

    def get_suggestion_generator(self) -> Optional[ITaskSuggestionGenerator]:
        """Get the configured suggestion generator, or None without an API key."""
        from trillo_mcp.services.openai_suggestion_generator import (
            OpenAiTaskSuggestionGenerator,
        )

        with self._lock:
            if self._suggestion_generator is None and self._settings.llm.enabled:
                self._suggestion_generator = OpenAiTaskSuggestionGenerator.from_settings(
                    self._settings.llm
                )
                self._owns_generator = True
            elif self._suggestion_generator is None:
                logger.debug("LLM_API_KEY is not set; task suggestions are disabled")
            return self._suggestion_generator

    # Service getters
    def get_project_service(self) -> "ProjectService":
        """Get or create the project service."""
        from trillo_mcp.services.project_service import ProjectService

        with self._lock:
            if self._project_service is None:
                self._project_service = ProjectService(
                    project_repo=self.get_project_repository(),
                    task_repo=self.get_task_repository(),
                )
            return self._project_service

    def get_task_service(self) -> "TaskService":
        """Get or create the task service."""
        from trillo_mcp.services.task_service import TaskService

        with self._lock:
            if self._task_service is None:
                self._task_service = TaskService(
                    task_repo=self.get_task_repository(),
                    project_repo=self.get_project_repository(),
                )
            return self._task_service

    def get_suggestion_service(self) -> "ProjectTaskSuggestionService":
        """Get or create the task suggestion service."""
        from trillo_mcp.services.project_task_suggestion_service import (
            ProjectTaskSuggestionService,
        )

        with self._lock:
            if self._suggestion_service is None:
                self._suggestion_service = ProjectTaskSuggestionService(
                    project_repo=self.get_project_repository(),
                    task_repo=self.get_task_repository(),
                    generator=self.get_suggestion_generator(),
                    timeout_seconds=self._settings.llm.timeout_seconds,
                )
            return self._suggestion_service

    def close(self) -> None:
        """Release worker threads held by cached services."""
        with self._lock:
            if self._suggestion_service is not None:
                self._suggestion_service.shutdown()
                self._suggestion_service = None
            if self._owns_generator and self._suggestion_generator is not None:
                self._suggestion_generator.close()
                self._suggestion_generator = None
                self._owns_generator = False
