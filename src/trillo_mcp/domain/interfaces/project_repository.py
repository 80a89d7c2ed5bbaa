"""Project Repository Interface."""

from datetime import datetime
from typing import Any, Dict, List, Protocol

from trillo_mcp.domain.entities.project import ProjectDTO
from trillo_mcp.domain.entities.result_types import DomainResult


class IProjectRepository(Protocol):
    """Protocol for project repository operations, scoped by owner."""

    def list_by_owner(self, owner_user_id: str) -> DomainResult[List[ProjectDTO]]:
        """List the owner's projects in display order."""
        ...

    def get(self, project_id: str, owner_user_id: str) -> DomainResult[ProjectDTO]:
        """Get project by ID."""
        ...

    def get_by_name(self, name: str, owner_user_id: str) -> DomainResult[ProjectDTO]:
        """Get project by its normalized name."""
        ...

    def create(self, project_data: Dict[str, Any]) -> DomainResult[ProjectDTO]:
        """Create a new project. A name collision reports ``project_name_taken``."""
        ...

    def update(
        self,
        project_id: str,
        owner_user_id: str,
        changes: Dict[str, Any],
        updated_at: datetime,
    ) -> DomainResult[ProjectDTO]:
        """Update project name and/or description."""
        ...

    def reorder_by_owner(
        self, owner_user_id: str, project_ids: List[str], updated_at: datetime
    ) -> DomainResult[List[ProjectDTO]]:
        """Persist ``sort_order`` following the given id order."""
        ...

    def delete(self, project_id: str, owner_user_id: str) -> DomainResult[Dict[str, Any]]:
        """Delete a project row. Tasks are purged separately by the caller."""
        ...
