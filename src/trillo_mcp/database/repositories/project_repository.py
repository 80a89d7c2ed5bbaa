"""
Project Repository.

SQLAlchemy ORM-based repository for project operations. Every query is
scoped by the owning user.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from trillo_mcp.database.models.base import ensure_utc
from trillo_mcp.database.models.project import Project
from trillo_mcp.database.orm_manager import ORMManager, get_orm_manager
from trillo_mcp.domain.entities.project import ProjectDTO
from trillo_mcp.domain.entities.result_types import (
    DomainError,
    DomainResult,
    DomainSuccess,
)
from trillo_mcp.domain.errors import ProjectNameTakenError

_UPDATABLE_FIELDS = ("name", "description")


class ProjectRepository:
    """
    Project repository using SQLAlchemy ORM.

    Provides owner-scoped CRUD operations for projects with proper error
    handling via DomainResult pattern.
    """

    def __init__(self, orm_manager: Optional[ORMManager] = None):
        """
        Initialize repository with ORM manager.

        Args:
            orm_manager: ORM manager instance. Uses singleton if not provided.
        """
        self.orm_manager = orm_manager or get_orm_manager()

    def _to_dto(self, project: Project) -> ProjectDTO:
        """Convert Project model to ProjectDTO."""
        return ProjectDTO(
            id=project.id,
            owner_user_id=project.owner_user_id,
            name=project.name,
            description=project.description,
            sort_order=project.sort_order,
            created_at=ensure_utc(project.created_at),
            updated_at=ensure_utc(project.updated_at),
        )

    def _owned(self, project_id: str, owner_user_id: str):
        return select(Project).where(
            Project.id == project_id,
            Project.owner_user_id == owner_user_id,
        )

    def list_by_owner(self, owner_user_id: str) -> DomainResult[List[ProjectDTO]]:
        """List the owner's projects ordered by sort order, then creation."""
        try:
            with self.orm_manager.get_session() as session:
                projects = (
                    session.execute(
                        select(Project)
                        .where(Project.owner_user_id == owner_user_id)
                        .order_by(Project.sort_order.asc(), Project.created_at.asc())
                    )
                    .scalars()
                    .all()
                )
                return DomainSuccess.create(data=[self._to_dto(p) for p in projects])

        except SQLAlchemyError as e:
            return DomainError.operation_failed("list_projects", str(e))

    def get(self, project_id: str, owner_user_id: str) -> DomainResult[ProjectDTO]:
        """
        Get project by ID.

        Args:
            project_id: Project UUID.
            owner_user_id: Acting user; other owners' projects are not found.

        Returns:
            DomainResult with project data or ``project_not_found`` error.
        """
        try:
            with self.orm_manager.get_session() as session:
                project = session.execute(
                    self._owned(project_id, owner_user_id)
                ).scalar_one_or_none()

                if not project:
                    return DomainError.not_found("Project", project_id)

                return DomainSuccess.create(data=self._to_dto(project))

        except SQLAlchemyError as e:
            return DomainError.operation_failed("get_project", str(e))

    def get_by_name(self, name: str, owner_user_id: str) -> DomainResult[ProjectDTO]:
        """Get project by name within the owner's projects."""
        try:
            with self.orm_manager.get_session() as session:
                project = session.execute(
                    select(Project).where(
                        Project.name == name,
                        Project.owner_user_id == owner_user_id,
                    )
                ).scalar_one_or_none()

                if not project:
                    return DomainError.not_found("Project", name)

                return DomainSuccess.create(data=self._to_dto(project))

        except SQLAlchemyError as e:
            return DomainError.operation_failed("get_project_by_name", str(e))

    def create(self, project_data: Dict[str, Any]) -> DomainResult[ProjectDTO]:
        """
        Create a new project.

        The unique ``(owner_user_id, name)`` constraint is the source of truth
        for name collisions; a violation is reported as ``project_name_taken``.
        """
        try:
            with self.orm_manager.get_session() as session:
                project = Project(
                    id=project_data["id"],
                    owner_user_id=project_data["owner_user_id"],
                    name=project_data["name"],
                    description=project_data.get("description"),
                    sort_order=project_data.get("sort_order", 0),
                    created_at=project_data["created_at"],
                    updated_at=project_data["updated_at"],
                )
                session.add(project)
                session.flush()

                return DomainSuccess.create(data=self._to_dto(project))

        except IntegrityError:
            return ProjectNameTakenError(project_data["name"]).to_result()
        except SQLAlchemyError as e:
            return DomainError.operation_failed("create_project", str(e))

    def update(
        self,
        project_id: str,
        owner_user_id: str,
        changes: Dict[str, Any],
        updated_at: datetime,
    ) -> DomainResult[ProjectDTO]:
        """Update project name and/or description."""
        try:
            with self.orm_manager.get_session() as session:
                project = session.execute(
                    self._owned(project_id, owner_user_id)
                ).scalar_one_or_none()

                if not project:
                    return DomainError.not_found("Project", project_id)

                for field, value in changes.items():
                    if field in _UPDATABLE_FIELDS:
                        setattr(project, field, value)
                project.updated_at = updated_at

                session.flush()
                return DomainSuccess.create(data=self._to_dto(project))

        except IntegrityError:
            return ProjectNameTakenError(str(changes.get("name", ""))).to_result()
        except SQLAlchemyError as e:
            return DomainError.operation_failed("update_project", str(e))

    def reorder_by_owner(
        self, owner_user_id: str, project_ids: List[str], updated_at: datetime
    ) -> DomainResult[List[ProjectDTO]]:
        """Assign ``sort_order`` following the position of each id."""
        try:
            with self.orm_manager.get_session() as session:
                projects = (
                    session.execute(
                        select(Project).where(
                            Project.owner_user_id == owner_user_id,
                            Project.id.in_(project_ids),
                        )
                    )
                    .scalars()
                    .all()
                )
                by_id = {p.id: p for p in projects}

                missing = [project_id for project_id in project_ids if project_id not in by_id]
                if missing:
                    return DomainError.not_found("Project", missing[0])

                for index, project_id in enumerate(project_ids):
                    project = by_id[project_id]
                    if project.sort_order != index:
                        project.sort_order = index
                        project.updated_at = updated_at

                session.flush()
                ordered = [by_id[project_id] for project_id in project_ids]
                return DomainSuccess.create(data=[self._to_dto(p) for p in ordered])

        except SQLAlchemyError as e:
            return DomainError.operation_failed("reorder_projects", str(e))

    def delete(self, project_id: str, owner_user_id: str) -> DomainResult[Dict[str, Any]]:
        """Delete a project row."""
        try:
            with self.orm_manager.get_session() as session:
                project = session.execute(
                    self._owned(project_id, owner_user_id)
                ).scalar_one_or_none()

                if not project:
                    return DomainError.not_found("Project", project_id)

                session.delete(project)
                session.flush()

                return DomainSuccess.create(data={"project_id": project_id, "deleted": True})

        except SQLAlchemyError as e:
            return DomainError.operation_failed("delete_project", str(e))
