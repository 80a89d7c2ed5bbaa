"""
Project SQLAlchemy Model.

Represents a project - the board that holds an owner's tasks.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Column, DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from trillo_mcp.database.models.base import Base, generate_id, get_current_timestamp


class Project(Base):
    """
    Project model owned by exactly one user.

    Tasks are not cascaded by the database; the project service purges them
    before removing the project row.
    """

    __tablename__ = "projects"

    id: str = Column(String(64), primary_key=True, default=generate_id)
    owner_user_id: str = Column(String(64), nullable=False, index=True)
    name: str = Column(String(120), nullable=False)
    description: Optional[str] = Column(Text, nullable=True)
    sort_order: int = Column(Integer, nullable=False, default=0)
    created_at: datetime = Column(DateTime(timezone=True), nullable=False, default=get_current_timestamp)
    updated_at: datetime = Column(DateTime(timezone=True), nullable=False, default=get_current_timestamp)

    __table_args__ = (UniqueConstraint("owner_user_id", "name", name="uq_projects_owner_name"),)

    tasks = relationship("Task", back_populates="project", passive_deletes=True)

    def __repr__(self) -> str:
        return f"<Project(id={self.id!r}, name={self.name!r}, owner={self.owner_user_id!r})>"
