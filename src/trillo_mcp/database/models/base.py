"""
Database Models Base Classes and Utilities.

Shared base classes, utilities, and common functionality for all database models.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import CheckConstraint
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base for all SQLAlchemy models."""

    pass


def generate_id() -> str:
    """Generate a unique ID for records.

    Returns:
        str: UUID4 string suitable for use as primary key.
    """
    return str(uuid.uuid4())


def get_current_timestamp() -> datetime:
    """Get current timestamp in UTC.

    Returns:
        datetime: Current UTC timestamp for record creation/updates.
    """
    return datetime.now(timezone.utc)


# Common check constraints
PRIORITY_CONSTRAINT = CheckConstraint(
    "priority IN ('low', 'medium', 'high')", name="check_priority"
)

TASK_STATUS_CONSTRAINT = CheckConstraint(
    "status IN ('todo', 'in_progress', 'done')",
    name="check_task_status",
)

TASK_TYPE_CONSTRAINT = CheckConstraint(
    "task_type IN ('epic', 'task', 'bug')",
    name="check_task_type",
)

EPIC_WITHOUT_PARENT_CONSTRAINT = CheckConstraint(
    "task_type <> 'epic' OR epic_id IS NULL",
    name="check_epic_without_parent",
)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes read back from SQLite."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)
