"""
Task Domain Entity (DTO) and field normalizers.

The normalizers are the single source of truth for what a valid task field
value is. Enum fields fall back to their default when the value is absent
and raise when a value is present but unrecognized.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from trillo_mcp.domain.errors import (
    InvalidBoardIdError,
    InvalidTaskCategoryError,
    InvalidTaskPriorityError,
    InvalidTaskStatusError,
    InvalidTaskTitleError,
    InvalidTaskTypeError,
)
from trillo_mcp.domain.task_types import (
    DEFAULT_TASK_PRIORITY,
    DEFAULT_TASK_STATUS,
    DEFAULT_TASK_TYPE,
    EPIC_TASK_TYPE,
    is_task_priority,
    is_task_status,
    is_task_type,
)

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 140
CATEGORY_MIN_LENGTH = 2
CATEGORY_MAX_LENGTH = 32
BOARD_ID_MIN_LENGTH = 2
BOARD_ID_MAX_LENGTH = 64


@dataclass
class TaskDTO:
    """
    Task Data Transfer Object.

    Represents a task entity in the domain layer, providing a clean
    interface for task data without ORM dependencies.

    Attributes:
        id: Unique task identifier (UUID)
        board_id: Identifier of the owning project
        title: Task title (3-140 characters)
        description: Optional task description
        category: Free-form category label (2-32 characters)
        priority: Priority level ('low', 'medium', 'high')
        status: Current status ('todo', 'in_progress', 'done')
        task_type: Task type ('epic', 'task', 'bug')
        epic_id: Identifier of the epic this task belongs to (never set on epics)
        created_at: Task creation timestamp
        updated_at: Last modification timestamp
    """

    id: str
    board_id: str
    title: str
    category: str
    description: Optional[str] = None
    priority: str = DEFAULT_TASK_PRIORITY
    status: str = DEFAULT_TASK_STATUS
    task_type: str = DEFAULT_TASK_TYPE
    epic_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_epic(self) -> bool:
        """Whether this task groups other tasks."""
        return self.task_type == EPIC_TASK_TYPE

    def to_dict(self) -> Dict[str, Any]:
        """Convert DTO to dictionary representation."""
        return {
            "id": self.id,
            "board_id": self.board_id,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "priority": self.priority,
            "status": self.status,
            "task_type": self.task_type,
            "epic_id": self.epic_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


def _strip(raw: Any) -> Optional[str]:
    return raw.strip() if isinstance(raw, str) else None


def normalize_task_title(raw_title: Any) -> str:
    title = _strip(raw_title)
    if title is None or not TITLE_MIN_LENGTH <= len(title) <= TITLE_MAX_LENGTH:
        raise InvalidTaskTitleError()
    return title


def normalize_task_category(raw_category: Any) -> str:
    category = _strip(raw_category)
    if category is None or not CATEGORY_MIN_LENGTH <= len(category) <= CATEGORY_MAX_LENGTH:
        raise InvalidTaskCategoryError()
    return category


def normalize_board_id(raw_board_id: Any) -> str:
    """Normalize a board (project) id. Also used for project ids."""
    board_id = _strip(raw_board_id)
    if board_id is None or not BOARD_ID_MIN_LENGTH <= len(board_id) <= BOARD_ID_MAX_LENGTH:
        raise InvalidBoardIdError()
    return board_id


def normalize_task_description(raw_description: Any) -> Optional[str]:
    description = _strip(raw_description)
    return description or None


def normalize_task_priority(raw_priority: Any) -> str:
    if raw_priority is None or raw_priority == "":
        return DEFAULT_TASK_PRIORITY
    priority = _strip(raw_priority)
    if not is_task_priority(priority):
        raise InvalidTaskPriorityError()
    return priority  # type: ignore[return-value]


def normalize_task_type(raw_task_type: Any) -> str:
    if raw_task_type is None or raw_task_type == "":
        return DEFAULT_TASK_TYPE
    task_type = _strip(raw_task_type)
    if not is_task_type(task_type):
        raise InvalidTaskTypeError()
    return task_type  # type: ignore[return-value]


def normalize_task_status(raw_status: Any) -> str:
    if raw_status is None or raw_status == "":
        return DEFAULT_TASK_STATUS
    status = _strip(raw_status)
    if not is_task_status(status):
        raise InvalidTaskStatusError()
    return status  # type: ignore[return-value]


def normalize_epic_id(raw_epic_id: Any) -> Optional[str]:
    epic_id = _strip(raw_epic_id)
    return epic_id or None
