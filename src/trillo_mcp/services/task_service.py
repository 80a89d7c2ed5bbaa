"""
Task Service - Business logic for task operations.

Owns the task lifecycle and the epic graph: an epic never references
another task, a non-epic may only reference an epic on its own board, and
an epic with linked tasks cannot be deleted or retyped.
"""

import logging
from datetime import datetime
from typing import Any, Callable, List, Optional

from trillo_mcp.database.models.base import generate_id, get_current_timestamp
from trillo_mcp.domain.entities.result_types import DomainError, DomainResult
from trillo_mcp.domain.entities.task import (
    TaskDTO,
    normalize_board_id,
    normalize_epic_id,
    normalize_task_category,
    normalize_task_description,
    normalize_task_priority,
    normalize_task_status,
    normalize_task_title,
    normalize_task_type,
)
from trillo_mcp.domain.errors import (
    EpicHasLinkedTasksError,
    InvalidEpicReferenceError,
    InvalidTaskStatusError,
    TaskDomainError,
)
from trillo_mcp.domain.interfaces import IProjectRepository, ITaskRepository
from trillo_mcp.domain.task_types import DEFAULT_TASK_STATUS, EPIC_TASK_TYPE

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = ("title", "description", "category", "priority", "task_type", "epic_id")


class TaskService:
    """
    Service for task business logic.

    All reads and writes are scoped by the acting user through board
    ownership; a task on someone else's board is reported as not found.
    """

    def __init__(
        self,
        task_repo: ITaskRepository,
        project_repo: IProjectRepository,
        now: Callable[[], datetime] = get_current_timestamp,
    ):
        """Initialize service with repositories and clock."""
        self.task_repo = task_repo
        self.project_repo = project_repo
        self._now = now

    # --- Graph checks ---

    def _check_epic_reference(
        self,
        owner_user_id: str,
        task_id: Optional[str],
        board_id: str,
        task_type: str,
        epic_id: Optional[str],
    ) -> Optional[DomainResult[Any]]:
        """
        Validate the epic a task points at.

        Self-reference is rejected before the lookup, so a task naming
        itself reports the self-reference even when the id does not exist.

        Returns:
            None when the reference is valid, otherwise a failed result.
        """
        if task_type == EPIC_TASK_TYPE:
            if epic_id:
                return InvalidEpicReferenceError(
                    "Epic tasks cannot reference another epic."
                ).to_result()
            return None

        if not epic_id:
            return None

        if task_id and task_id == epic_id:
            return InvalidEpicReferenceError("Task cannot reference itself as epic.").to_result()

        epic_result = self.task_repo.get(epic_id, owner_user_id)
        if epic_result.is_failure:
            if epic_result.error_code == "task_not_found":
                return InvalidEpicReferenceError(f"Epic {epic_id} was not found.").to_result()
            return epic_result

        epic = epic_result.data
        if epic.board_id != board_id:
            return InvalidEpicReferenceError(
                f"Epic {epic_id} belongs to another board."
            ).to_result()
        if not epic.is_epic:
            return InvalidEpicReferenceError(f"Task {epic_id} is not an epic.").to_result()

        return None

    def _check_epic_has_no_linked_tasks(
        self, owner_user_id: str, board_id: str, epic_id: str
    ) -> Optional[DomainResult[Any]]:
        count_result = self.task_repo.count_by_epic_id(board_id, epic_id, owner_user_id)
        if count_result.is_failure:
            return count_result
        if count_result.data:
            return EpicHasLinkedTasksError(epic_id, count_result.data).to_result()
        return None

    # --- Queries ---

    def list_board_tasks(self, owner_user_id: str, board_id: Any) -> DomainResult[List[TaskDTO]]:
        """List tasks on an owned board (``project_not_found`` otherwise)."""
        try:
            normalized_board_id = normalize_board_id(board_id)
        except TaskDomainError as e:
            return e.to_result()

        project_result = self.project_repo.get(normalized_board_id, owner_user_id)
        if project_result.is_failure:
            return project_result

        return self.task_repo.list_by_board(normalized_board_id, owner_user_id)

    def get_task(self, owner_user_id: str, task_id: str) -> DomainResult[TaskDTO]:
        """Get a task on one of the caller's boards."""
        return self.task_repo.get(task_id, owner_user_id)

    # --- Commands ---

    def create_task(
        self,
        owner_user_id: str,
        board_id: Any,
        title: Any,
        category: Any,
        description: Any = None,
        priority: Any = None,
        task_type: Any = None,
        epic_id: Any = None,
    ) -> DomainResult[TaskDTO]:
        """
        Create a task in the ``todo`` column.

        Args:
            owner_user_id: Acting user; must own the board.
            board_id: Target project id.
            title: Raw title (3-140 characters after trimming).
            category: Raw category (2-32 characters after trimming).
            description: Optional description; blank becomes ``None``.
            priority: Optional priority, defaults to ``medium``.
            task_type: Optional type, defaults to ``task``.
            epic_id: Optional id of an epic on the same board.

        Returns:
            DomainResult with the created task.
        """
        try:
            normalized_board_id = normalize_board_id(board_id)
            fields = {
                "title": normalize_task_title(title),
                "description": normalize_task_description(description),
                "category": normalize_task_category(category),
                "priority": normalize_task_priority(priority),
                "task_type": normalize_task_type(task_type),
                "epic_id": normalize_epic_id(epic_id),
            }
        except TaskDomainError as e:
            return e.to_result()

        project_result = self.project_repo.get(normalized_board_id, owner_user_id)
        if project_result.is_failure:
            return project_result

        invalid = self._check_epic_reference(
            owner_user_id, None, normalized_board_id, fields["task_type"], fields["epic_id"]
        )
        if invalid:
            return invalid

        created_at = self._now()
        return self.task_repo.create(
            {
                **fields,
                "id": generate_id(),
                "board_id": normalized_board_id,
                "status": DEFAULT_TASK_STATUS,
                "created_at": created_at,
                "updated_at": created_at,
            }
        )

    def update_task(self, owner_user_id: str, task_id: str, **changes: Any) -> DomainResult[TaskDTO]:
        """
        Apply a partial update.

        Keys absent from ``changes`` keep their current value. The effective
        type and epic id are computed by merging ``changes`` over the current
        task before the epic graph is checked. An epic always ends up with
        ``epic_id = None``.
        """
        unknown = sorted(set(changes) - set(_UPDATABLE_FIELDS))
        if unknown:
            return DomainError.validation_error(
                f"Unsupported task fields: {', '.join(unknown)}",
                details={"fields": unknown},
            )

        current_result = self.task_repo.get(task_id, owner_user_id)
        if current_result.is_failure:
            return current_result
        current = current_result.data

        try:
            task_type = normalize_task_type(changes.get("task_type") or current.task_type)
            has_epic_id = "epic_id" in changes
            epic_id = normalize_epic_id(changes["epic_id"] if has_epic_id else current.epic_id)

            normalized = {}
            if "title" in changes:
                normalized["title"] = normalize_task_title(changes["title"])
            if "description" in changes:
                normalized["description"] = normalize_task_description(changes["description"])
            if "category" in changes:
                normalized["category"] = normalize_task_category(changes["category"])
            if "priority" in changes:
                normalized["priority"] = normalize_task_priority(changes["priority"])
        except TaskDomainError as e:
            return e.to_result()

        if task_type == EPIC_TASK_TYPE:
            if has_epic_id and epic_id:
                return InvalidEpicReferenceError(
                    "Epic tasks cannot reference another epic."
                ).to_result()
            epic_id = None

        if current.is_epic and task_type != EPIC_TASK_TYPE:
            linked = self._check_epic_has_no_linked_tasks(owner_user_id, current.board_id, current.id)
            if linked:
                return linked

        invalid = self._check_epic_reference(
            owner_user_id, task_id, current.board_id, task_type, epic_id
        )
        if invalid:
            return invalid

        normalized["task_type"] = task_type
        normalized["epic_id"] = epic_id
        return self.task_repo.update(task_id, owner_user_id, normalized, self._now())

    def move_task_status(
        self, owner_user_id: str, task_id: str, status: Any
    ) -> DomainResult[TaskDTO]:
        """
        Move a task to another column.

        Any transition between known statuses is allowed. Moving a task to
        its current status returns it unchanged without bumping ``updated_at``.
        A missing target status is rejected.
        """
        if status is None or status == "":
            return InvalidTaskStatusError().to_result()
        try:
            next_status = normalize_task_status(status)
        except TaskDomainError as e:
            return e.to_result()

        current_result = self.task_repo.get(task_id, owner_user_id)
        if current_result.is_failure:
            return current_result

        if current_result.data.status == next_status:
            return current_result

        return self.task_repo.update_status(task_id, owner_user_id, next_status, self._now())

    def delete_task(self, owner_user_id: str, task_id: str) -> DomainResult[Any]:
        """Delete a task; an epic must have no linked tasks left."""
        current_result = self.task_repo.get(task_id, owner_user_id)
        if current_result.is_failure:
            return current_result
        task = current_result.data

        if task.is_epic:
            linked = self._check_epic_has_no_linked_tasks(owner_user_id, task.board_id, task.id)
            if linked:
                return linked

        result = self.task_repo.delete(task_id, owner_user_id)
        if result.is_success:
            logger.debug("Deleted task %s from board %s", task_id, task.board_id)
        return result
