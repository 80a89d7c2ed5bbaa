"""
Project Task Suggestion Service - Generate and apply suggested tasks.

Preview asks an external generator for a small batch of tasks and returns
it validated but unpersisted. Apply re-validates a batch and materializes
it in two passes: epics first, then the tasks that point at them through
batch-local suggestion ids.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from trillo_mcp.database.models.base import generate_id, get_current_timestamp
from trillo_mcp.domain.entities.project import ProjectDTO
from trillo_mcp.domain.entities.result_types import DomainResult, DomainSuccess
from trillo_mcp.domain.entities.task import TaskDTO
from trillo_mcp.domain.entities.task_suggestion import (
    ExistingTaskContext,
    TaskSuggestion,
    TaskSuggestionContext,
)
from trillo_mcp.domain.errors import (
    InvalidTaskSuggestionsError,
    ProjectDescriptionRequiredError,
    TaskDomainError,
    TaskGenerationUnavailableError,
)
from trillo_mcp.domain.interfaces import (
    IProjectRepository,
    ITaskRepository,
    ITaskSuggestionGenerator,
)
from trillo_mcp.domain.task_types import DEFAULT_TASK_STATUS
from trillo_mcp.services.suggestion_validator import MAX_SUGGESTIONS, SuggestionBatchValidator

logger = logging.getLogger(__name__)

DEFAULT_GENERATION_TIMEOUT_SECONDS = 20.0


class ProjectTaskSuggestionService:
    """
    Service orchestrating task suggestions for a project.

    Both operations require an owned project with a non-empty description.
    The generator is untrusted: its output goes through the same batch
    validation as client-supplied suggestions, and anything it raises that
    is not a domain error becomes ``task_generation_unavailable``.
    """

    def __init__(
        self,
        project_repo: IProjectRepository,
        task_repo: ITaskRepository,
        generator: Optional[ITaskSuggestionGenerator],
        now: Callable[[], datetime] = get_current_timestamp,
        timeout_seconds: float = DEFAULT_GENERATION_TIMEOUT_SECONDS,
    ):
        """
        Initialize service.

        Args:
            project_repo: Project repository.
            task_repo: Task repository.
            generator: Suggestion generator; ``None`` when no provider is
                configured, in which case preview is always unavailable.
            now: Clock.
            timeout_seconds: Upper bound for one generator call.
        """
        self.project_repo = project_repo
        self.task_repo = task_repo
        self.generator = generator
        self._now = now
        self.timeout_seconds = timeout_seconds
        self._executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="task-suggestions")

    # --- Helper Methods ---

    def _get_project_with_description(
        self, owner_user_id: str, project_id: str
    ) -> DomainResult[ProjectDTO]:
        project_result = self.project_repo.get(project_id, owner_user_id)
        if project_result.is_failure:
            return project_result

        if not project_result.data.description:
            return ProjectDescriptionRequiredError(project_id).to_result()

        return project_result

    def _build_context(self, project: ProjectDTO, tasks: List[TaskDTO]) -> TaskSuggestionContext:
        return TaskSuggestionContext(
            project_id=project.id,
            project_name=project.name,
            project_description=project.description or "",
            limit=MAX_SUGGESTIONS,
            existing_tasks=[ExistingTaskContext.from_task(task) for task in tasks],
        )

    def _generate(self, context: TaskSuggestionContext) -> List[TaskSuggestion]:
        """
        Call the generator under the configured deadline.

        Raises:
            TaskDomainError: Domain errors raised by the generator pass
                through; every other failure, including the deadline, is
                raised as ``TaskGenerationUnavailableError``.
        """
        if self.generator is None:
            raise TaskGenerationUnavailableError("No task suggestion provider is configured.")

        future = self._executor.submit(self.generator.generate_suggestions, context)
        try:
            return future.result(timeout=self.timeout_seconds)
        except TaskDomainError:
            raise
        except FutureTimeoutError:
            future.cancel()
            logger.warning(
                "Task suggestion generator timed out after %.1fs for project %s",
                self.timeout_seconds,
                context.project_id,
            )
            raise TaskGenerationUnavailableError()
        except Exception as e:
            logger.warning(
                "Task suggestion generator failed for project %s: %s", context.project_id, e
            )
            raise TaskGenerationUnavailableError() from e

    def _create_from_suggestion(
        self,
        project_id: str,
        suggestion: TaskSuggestion,
        epic_id: Optional[str],
        created_at: datetime,
    ) -> DomainResult[TaskDTO]:
        return self.task_repo.create(
            {
                "id": generate_id(),
                "board_id": project_id,
                "title": suggestion.title,
                "description": suggestion.description,
                "category": suggestion.category,
                "priority": suggestion.priority,
                "status": DEFAULT_TASK_STATUS,
                "task_type": suggestion.task_type,
                "epic_id": epic_id,
                "created_at": created_at,
                "updated_at": created_at,
            }
        )

    # --- Public Operations ---

    def preview_suggestions(
        self, owner_user_id: str, project_id: str
    ) -> DomainResult[List[TaskSuggestion]]:
        """
        Generate a validated, unpersisted batch of suggestions.

        The generator is not called when the project has no description.
        """
        project_result = self._get_project_with_description(owner_user_id, project_id)
        if project_result.is_failure:
            return project_result
        project = project_result.data

        tasks_result = self.task_repo.list_by_board(project.id, owner_user_id)
        if tasks_result.is_failure:
            return tasks_result

        try:
            generated = self._generate(self._build_context(project, tasks_result.data or []))
        except TaskDomainError as e:
            return e.to_result()

        return SuggestionBatchValidator(generated, MAX_SUGGESTIONS).validate()

    def apply_suggestions(
        self, owner_user_id: str, project_id: str, suggestions: Any
    ) -> DomainResult[List[TaskDTO]]:
        """
        Create real tasks from a suggestion batch.

        Pass 1 creates the epics and records ``suggestion_id -> task``.
        Pass 2 creates everything else, resolving ``epic_suggestion_id``
        through that map. The batch is validated before anything is written.

        Returns:
            DomainResult with the created tasks in the batch's original order.
        """
        project_result = self._get_project_with_description(owner_user_id, project_id)
        if project_result.is_failure:
            return project_result
        project = project_result.data

        validated = SuggestionBatchValidator(suggestions, MAX_SUGGESTIONS).validate()
        if validated.is_failure:
            return validated
        batch: List[TaskSuggestion] = validated.data

        created_at = self._now()
        created: Dict[str, TaskDTO] = {}

        for suggestion in batch:
            if not suggestion.is_epic:
                continue
            result = self._create_from_suggestion(project.id, suggestion, None, created_at)
            if result.is_failure:
                return result
            created[suggestion.suggestion_id] = result.data

        for suggestion in batch:
            if suggestion.is_epic:
                continue

            epic_id = None
            if suggestion.epic_suggestion_id:
                epic = created.get(suggestion.epic_suggestion_id)
                if epic is None:
                    return InvalidTaskSuggestionsError(
                        f"Task suggestion {suggestion.suggestion_id} references missing "
                        f"epic suggestion {suggestion.epic_suggestion_id}."
                    ).to_result()
                epic_id = epic.id

            result = self._create_from_suggestion(project.id, suggestion, epic_id, created_at)
            if result.is_failure:
                return result
            created[suggestion.suggestion_id] = result.data

        logger.info("Applied %d task suggestion(s) to project %s", len(created), project.id)
        return DomainSuccess.create(data=[created[s.suggestion_id] for s in batch])

    def shutdown(self) -> None:
        """Release the generator worker threads."""
        self._executor.shutdown(wait=False)
