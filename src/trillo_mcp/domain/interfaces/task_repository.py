"""Task Repository Interface."""

from datetime import datetime
from typing import Any, Dict, List, Protocol

from trillo_mcp.domain.entities.result_types import DomainResult
from trillo_mcp.domain.entities.task import TaskDTO


class ITaskRepository(Protocol):
    """
    Protocol for task repository operations.

    Every query and mutation is scoped by ``owner_user_id`` through the
    owning board; a task on another user's board reports ``task_not_found``.
    """

    def list_by_board(self, board_id: str, owner_user_id: str) -> DomainResult[List[TaskDTO]]:
        """List all tasks on a board."""
        ...

    def get(self, task_id: str, owner_user_id: str) -> DomainResult[TaskDTO]:
        """Get task by ID."""
        ...

    def count_by_epic_id(
        self, board_id: str, epic_id: str, owner_user_id: str
    ) -> DomainResult[int]:
        """Count tasks on a board that reference an epic."""
        ...

    def create(self, task_data: Dict[str, Any]) -> DomainResult[TaskDTO]:
        """Create a new task from fully normalized data."""
        ...

    def update(
        self,
        task_id: str,
        owner_user_id: str,
        changes: Dict[str, Any],
        updated_at: datetime,
    ) -> DomainResult[TaskDTO]:
        """Update task fields."""
        ...

    def update_status(
        self, task_id: str, owner_user_id: str, status: str, updated_at: datetime
    ) -> DomainResult[TaskDTO]:
        """Update task status."""
        ...

    def delete_by_board(self, board_id: str, owner_user_id: str) -> DomainResult[int]:
        """Delete every task on a board, returning how many were removed."""
        ...

    def delete(self, task_id: str, owner_user_id: str) -> DomainResult[Dict[str, Any]]:
        """Delete a task."""
        ...
