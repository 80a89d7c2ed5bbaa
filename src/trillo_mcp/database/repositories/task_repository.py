"""
Task Repository.

SQLAlchemy ORM-based repository for task operations. Ownership is resolved
through the task's board: a task is visible only when its project belongs
to the acting user.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import case, delete, func, select
from sqlalchemy.exc import SQLAlchemyError

from trillo_mcp.database.models.base import ensure_utc
from trillo_mcp.database.models.project import Project
from trillo_mcp.database.models.task import Task
from trillo_mcp.database.orm_manager import ORMManager, get_orm_manager
from trillo_mcp.domain.entities.result_types import (
    DomainError,
    DomainResult,
    DomainSuccess,
)
from trillo_mcp.domain.entities.task import TaskDTO

_UPDATABLE_FIELDS = ("title", "description", "category", "priority", "task_type", "epic_id")


def _owned_boards(owner_user_id: str):
    return select(Project.id).where(Project.owner_user_id == owner_user_id)


class TaskRepository:
    """
    Task repository using SQLAlchemy ORM.

    Provides owner-scoped CRUD operations for tasks with proper error
    handling via DomainResult pattern.
    """

    def __init__(self, orm_manager: Optional[ORMManager] = None):
        """
        Initialize repository with ORM manager.

        Args:
            orm_manager: ORM manager instance. Uses singleton if not provided.
        """
        self.orm_manager = orm_manager or get_orm_manager()

    def _to_dto(self, task: Task) -> TaskDTO:
        """Convert Task model to TaskDTO."""
        return TaskDTO(
            id=task.id,
            board_id=task.board_id,
            title=task.title,
            description=task.description,
            category=task.category,
            priority=task.priority,
            status=task.status,
            task_type=task.task_type,
            epic_id=task.epic_id,
            created_at=ensure_utc(task.created_at),
            updated_at=ensure_utc(task.updated_at),
        )

    def _owned(self, task_id: str, owner_user_id: str):
        return select(Task).where(
            Task.id == task_id,
            Task.board_id.in_(_owned_boards(owner_user_id)),
        )

    def list_by_board(self, board_id: str, owner_user_id: str) -> DomainResult[List[TaskDTO]]:
        """
        List tasks on a board.

        Ordered by status column (todo, in_progress, done), then most
        recently updated first.
        """
        try:
            with self.orm_manager.get_session() as session:
                tasks = (
                    session.execute(
                        select(Task)
                        .where(
                            Task.board_id == board_id,
                            Task.board_id.in_(_owned_boards(owner_user_id)),
                        )
                        .order_by(
                            case(
                                (Task.status == "todo", 0),
                                (Task.status == "in_progress", 1),
                                else_=2,
                            ),
                            Task.updated_at.desc(),
                        )
                    )
                    .scalars()
                    .all()
                )
                return DomainSuccess.create(data=[self._to_dto(t) for t in tasks])

        except SQLAlchemyError as e:
            return DomainError.operation_failed("list_tasks", str(e))

    def get(self, task_id: str, owner_user_id: str) -> DomainResult[TaskDTO]:
        """
        Get task by ID.

        Args:
            task_id: Task UUID.
            owner_user_id: Acting user; tasks on other owners' boards are not found.

        Returns:
            DomainResult with task data or ``task_not_found`` error.
        """
        try:
            with self.orm_manager.get_session() as session:
                task = session.execute(self._owned(task_id, owner_user_id)).scalar_one_or_none()

                if not task:
                    return DomainError.not_found("Task", task_id)

                return DomainSuccess.create(data=self._to_dto(task))

        except SQLAlchemyError as e:
            return DomainError.operation_failed("get_task", str(e))

    def count_by_epic_id(
        self, board_id: str, epic_id: str, owner_user_id: str
    ) -> DomainResult[int]:
        """Count tasks on a board that reference the given epic."""
        try:
            with self.orm_manager.get_session() as session:
                total = session.execute(
                    select(func.count(Task.id)).where(
                        Task.board_id == board_id,
                        Task.epic_id == epic_id,
                        Task.board_id.in_(_owned_boards(owner_user_id)),
                    )
                ).scalar_one()
                return DomainSuccess.create(data=int(total or 0))

        except SQLAlchemyError as e:
            return DomainError.operation_failed("count_epic_tasks", str(e))

    def create(self, task_data: Dict[str, Any]) -> DomainResult[TaskDTO]:
        """
        Create a new task.

        Args:
            task_data: Fully normalized task fields, including id and timestamps.

        Returns:
            DomainResult with created task data.
        """
        try:
            with self.orm_manager.get_session() as session:
                task = Task(
                    id=task_data["id"],
                    board_id=task_data["board_id"],
                    title=task_data["title"],
                    description=task_data.get("description"),
                    category=task_data["category"],
                    priority=task_data.get("priority", "medium"),
                    status=task_data.get("status", "todo"),
                    task_type=task_data.get("task_type", "task"),
                    epic_id=task_data.get("epic_id"),
                    created_at=task_data["created_at"],
                    updated_at=task_data["updated_at"],
                )
                session.add(task)
                session.flush()

                return DomainSuccess.create(data=self._to_dto(task))

        except SQLAlchemyError as e:
            return DomainError.operation_failed("create_task", str(e))

    def update(
        self,
        task_id: str,
        owner_user_id: str,
        changes: Dict[str, Any],
        updated_at: datetime,
    ) -> DomainResult[TaskDTO]:
        """Update editable task fields and bump ``updated_at``."""
        try:
            with self.orm_manager.get_session() as session:
                task = session.execute(self._owned(task_id, owner_user_id)).scalar_one_or_none()

                if not task:
                    return DomainError.not_found("Task", task_id)

                for field, value in changes.items():
                    if field in _UPDATABLE_FIELDS:
                        setattr(task, field, value)
                task.updated_at = updated_at

                session.flush()
                return DomainSuccess.create(data=self._to_dto(task))

        except SQLAlchemyError as e:
            return DomainError.operation_failed("update_task", str(e))

    def update_status(
        self, task_id: str, owner_user_id: str, status: str, updated_at: datetime
    ) -> DomainResult[TaskDTO]:
        """Move a task to another status column."""
        try:
            with self.orm_manager.get_session() as session:
                task = session.execute(self._owned(task_id, owner_user_id)).scalar_one_or_none()

                if not task:
                    return DomainError.not_found("Task", task_id)

                task.status = status
                task.updated_at = updated_at

                session.flush()
                return DomainSuccess.create(data=self._to_dto(task))

        except SQLAlchemyError as e:
            return DomainError.operation_failed("update_task_status", str(e))

    def delete_by_board(self, board_id: str, owner_user_id: str) -> DomainResult[int]:
        """Delete every task on an owned board."""
        try:
            with self.orm_manager.get_session() as session:
                result = session.execute(
                    delete(Task)
                    .where(
                        Task.board_id == board_id,
                        Task.board_id.in_(_owned_boards(owner_user_id)),
                    )
                    .execution_options(synchronize_session=False)
                )
                return DomainSuccess.create(data=result.rowcount or 0)

        except SQLAlchemyError as e:
            return DomainError.operation_failed("delete_board_tasks", str(e))

    def delete(self, task_id: str, owner_user_id: str) -> DomainResult[Dict[str, Any]]:
        """Delete a task."""
        try:
            with self.orm_manager.get_session() as session:
                task = session.execute(self._owned(task_id, owner_user_id)).scalar_one_or_none()

                if not task:
                    return DomainError.not_found("Task", task_id)

                session.delete(task)
                session.flush()

                return DomainSuccess.create(data={"task_id": task_id, "deleted": True})

        except SQLAlchemyError as e:
            return DomainError.operation_failed("delete_task", str(e))
