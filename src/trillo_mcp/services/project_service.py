"""
Project Service - Business logic for project operations.

Owns the project lifecycle: create, rename/describe, reorder and
delete-with-cascade. Every operation is scoped by the owning user.
"""

import logging
from datetime import datetime
from typing import Any, Callable, List, Optional

from trillo_mcp.database.models.base import generate_id, get_current_timestamp
from trillo_mcp.domain.entities.project import (
    ProjectDTO,
    normalize_project_description,
    normalize_project_name,
)
from trillo_mcp.domain.entities.result_types import DomainError, DomainResult
from trillo_mcp.domain.errors import (
    InvalidProjectOrderError,
    ProjectNameTakenError,
    TaskDomainError,
)
from trillo_mcp.domain.interfaces import IProjectRepository, ITaskRepository

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = ("name", "description")


class ProjectService:
    """
    Service for project business logic.

    Holds no state between calls; ``now`` is injected so tests can pin
    timestamps.
    """

    def __init__(
        self,
        project_repo: IProjectRepository,
        task_repo: ITaskRepository,
        now: Callable[[], datetime] = get_current_timestamp,
    ):
        """Initialize service with repositories and clock."""
        self.project_repo = project_repo
        self.task_repo = task_repo
        self._now = now

    # --- Helper Methods ---

    def _check_name_available(
        self, owner_user_id: str, name: str, project_id: Optional[str] = None
    ) -> Optional[DomainResult[Any]]:
        """
        Return a failed result if another owned project already uses ``name``.

        The repository's unique constraint still guards the race between this
        check and the write.
        """
        existing = self.project_repo.get_by_name(name, owner_user_id)
        if existing.is_success:
            if existing.data is not None and existing.data.id != project_id:
                return ProjectNameTakenError(name).to_result()
            return None
        if existing.error_code != "project_not_found":
            return existing
        return None

    # --- Queries ---

    def list_projects(self, owner_user_id: str) -> DomainResult[List[ProjectDTO]]:
        """List all projects owned by the caller."""
        return self.project_repo.list_by_owner(owner_user_id)

    def get_project(self, owner_user_id: str, project_id: str) -> DomainResult[ProjectDTO]:
        """Get one owned project."""
        return self.project_repo.get(project_id, owner_user_id)

    # --- Commands ---

    def create_project(
        self,
        owner_user_id: str,
        name: Any,
        description: Any = None,
    ) -> DomainResult[ProjectDTO]:
        """
        Create a project at the end of the owner's list.

        Args:
            owner_user_id: Acting user.
            name: Raw project name; trimmed and whitespace-collapsed.
            description: Raw description; blank becomes ``None``.

        Returns:
            DomainResult with the created project, or ``project_name_taken``.
        """
        try:
            normalized_name = normalize_project_name(name)
            normalized_description = normalize_project_description(description)
        except TaskDomainError as e:
            return e.to_result()

        taken = self._check_name_available(owner_user_id, normalized_name)
        if taken:
            return taken

        current = self.project_repo.list_by_owner(owner_user_id)
        if current.is_failure:
            return current

        created_at = self._now()
        result = self.project_repo.create(
            {
                "id": generate_id(),
                "owner_user_id": owner_user_id,
                "name": normalized_name,
                "description": normalized_description,
                "sort_order": len(current.data or []),
                "created_at": created_at,
                "updated_at": created_at,
            }
        )

        if result.is_success:
            logger.info("Created project %s for owner %s", result.data.id, owner_user_id)
        return result

    def update_project(
        self, owner_user_id: str, project_id: str, **changes: Any
    ) -> DomainResult[ProjectDTO]:
        """
        Rename and/or re-describe a project.

        Only keys present in ``changes`` are touched. ``description=None``
        clears the description.
        """
        unknown = sorted(set(changes) - set(_UPDATABLE_FIELDS))
        if unknown:
            return DomainError.validation_error(
                f"Unsupported project fields: {', '.join(unknown)}",
                details={"fields": unknown},
            )
        if not changes:
            return DomainError.validation_error(
                "At least one of name or description must be provided."
            )

        current_result = self.project_repo.get(project_id, owner_user_id)
        if current_result.is_failure:
            return current_result
        current = current_result.data

        normalized = {}
        try:
            if "name" in changes:
                normalized["name"] = normalize_project_name(changes["name"])
            if "description" in changes:
                normalized["description"] = normalize_project_description(changes["description"])
        except TaskDomainError as e:
            return e.to_result()

        if "name" in normalized and normalized["name"] != current.name:
            taken = self._check_name_available(owner_user_id, normalized["name"], current.id)
            if taken:
                return taken

        return self.project_repo.update(project_id, owner_user_id, normalized, self._now())

    def reorder_projects(
        self, owner_user_id: str, project_ids: List[str]
    ) -> DomainResult[List[ProjectDTO]]:
        """
        Persist an explicit ordering of the owner's projects.

        ``project_ids`` must name every owned project exactly once.
        """
        current = self.project_repo.list_by_owner(owner_user_id)
        if current.is_failure:
            return current
        current_ids = {project.id for project in current.data or []}

        if not isinstance(project_ids, (list, tuple)) or len(project_ids) != len(current_ids):
            return InvalidProjectOrderError(
                "project_ids must include all projects owned by the acting user."
            ).to_result()

        if not all(isinstance(project_id, str) for project_id in project_ids):
            return InvalidProjectOrderError("project_ids must be a list of strings.").to_result()

        if len(set(project_ids)) != len(project_ids):
            return InvalidProjectOrderError(
                "project_ids must not contain duplicated values."
            ).to_result()

        for project_id in project_ids:
            if project_id not in current_ids:
                return DomainError.not_found("Project", project_id)

        result = self.project_repo.reorder_by_owner(owner_user_id, list(project_ids), self._now())
        if result.is_failure:
            return result

        return self.project_repo.list_by_owner(owner_user_id)

    def delete_project(self, owner_user_id: str, project_id: str) -> DomainResult[Any]:
        """
        Delete a project and every task on its board.

        Tasks are purged first, then the project row. The two steps are not
        one transaction; a failure in between leaves an empty, re-deletable
        project.
        """
        existing = self.project_repo.get(project_id, owner_user_id)
        if existing.is_failure:
            return existing

        purged = self.task_repo.delete_by_board(project_id, owner_user_id)
        if purged.is_failure:
            return purged

        result = self.project_repo.delete(project_id, owner_user_id)
        if result.is_failure:
            return result

        logger.info("Deleted project %s with %d task(s)", project_id, purged.data or 0)
        return result
