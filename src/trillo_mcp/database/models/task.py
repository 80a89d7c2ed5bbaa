"""
Task SQLAlchemy Model.

Represents a task - an individual unit of work on a project board.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import relationship

from trillo_mcp.database.models.base import (
    EPIC_WITHOUT_PARENT_CONSTRAINT,
    PRIORITY_CONSTRAINT,
    TASK_STATUS_CONSTRAINT,
    TASK_TYPE_CONSTRAINT,
    Base,
    generate_id,
    get_current_timestamp,
)


class Task(Base):
    """
    Task model. Epics are tasks that other tasks on the same board
    reference through ``epic_id``.
    """

    __tablename__ = "tasks"

    id: str = Column(String(64), primary_key=True, default=generate_id)
    board_id: str = Column(String(64), ForeignKey("projects.id"), nullable=False, index=True)
    title: str = Column(String(140), nullable=False)
    description: Optional[str] = Column(Text, nullable=True)
    category: str = Column(String(32), nullable=False)
    priority: str = Column(String(20), nullable=False, default="medium")
    status: str = Column(String(20), nullable=False, default="todo")
    task_type: str = Column(String(20), nullable=False, default="task")
    epic_id: Optional[str] = Column(String(64), nullable=True)
    created_at: datetime = Column(DateTime(timezone=True), nullable=False, default=get_current_timestamp)
    updated_at: datetime = Column(DateTime(timezone=True), nullable=False, default=get_current_timestamp)

    # Table-level constraints
    __table_args__ = (
        TASK_STATUS_CONSTRAINT,
        PRIORITY_CONSTRAINT,
        TASK_TYPE_CONSTRAINT,
        EPIC_WITHOUT_PARENT_CONSTRAINT,
        Index("ix_tasks_board_epic", "board_id", "epic_id"),
    )

    # Relationships
    project = relationship("Project", back_populates="tasks")

    def __repr__(self) -> str:
        return f"<Task(id={self.id!r}, title={self.title!r}, status={self.status!r})>"
