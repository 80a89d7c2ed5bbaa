"""
Task Suggestion Domain Entities.

Suggestions are an unpersisted staging structure: ``suggestion_id`` and
``epic_suggestion_id`` are batch-local tokens, never real task ids.
"""

from dataclasses import asdict, dataclass, field, is_dataclass
from typing import Any, Dict, List, Mapping, Optional

from trillo_mcp.domain.entities.task import (
    TaskDTO,
    normalize_task_category,
    normalize_task_description,
    normalize_task_priority,
    normalize_task_title,
    normalize_task_type,
)
from trillo_mcp.domain.errors import InvalidTaskSuggestionsError
from trillo_mcp.domain.task_types import EPIC_TASK_TYPE

SUGGESTION_ID_MAX_LENGTH = 64


@dataclass
class TaskSuggestion:
    """A proposed task, validated but not yet created."""

    suggestion_id: str
    title: str
    category: str
    description: Optional[str] = None
    priority: str = "medium"
    task_type: str = "task"
    epic_suggestion_id: Optional[str] = None

    @property
    def is_epic(self) -> bool:
        return self.task_type == EPIC_TASK_TYPE

    def to_dict(self) -> Dict[str, Any]:
        """Convert suggestion to dictionary representation."""
        return asdict(self)


@dataclass
class ExistingTaskContext:
    """Summary of a task already on the board, shown to the generator."""

    id: str
    title: str
    category: str
    priority: str
    status: str
    task_type: str
    epic_id: Optional[str] = None

    @classmethod
    def from_task(cls, task: TaskDTO) -> "ExistingTaskContext":
        return cls(
            id=task.id,
            title=task.title,
            category=task.category,
            priority=task.priority,
            status=task.status,
            task_type=task.task_type,
            epic_id=task.epic_id,
        )


@dataclass
class TaskSuggestionContext:
    """Everything a suggestion generator may use about the target project."""

    project_id: str
    project_name: str
    project_description: str
    limit: int
    existing_tasks: List[ExistingTaskContext] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def normalize_suggestion_id(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise InvalidTaskSuggestionsError(f"{field_name} must be a string.")

    suggestion_id = value.strip()
    if not 1 <= len(suggestion_id) <= SUGGESTION_ID_MAX_LENGTH:
        raise InvalidTaskSuggestionsError(
            f"{field_name} must contain between 1 and {SUGGESTION_ID_MAX_LENGTH} characters."
        )
    return suggestion_id


def normalize_task_suggestion(item: Any, index: int) -> TaskSuggestion:
    """
    Normalize one raw suggestion (mapping or ``TaskSuggestion``).

    Field values go through the same normalizers as real tasks, so a
    suggestion that would be an invalid task is an invalid suggestion.

    Raises:
        TaskDomainError: ``invalid_task_suggestions`` for suggestion-specific
            problems, or the field's own code (``invalid_title``, ...).
    """
    if is_dataclass(item) and not isinstance(item, type):
        item = asdict(item)
    if not isinstance(item, Mapping):
        raise InvalidTaskSuggestionsError(f"suggestions[{index}] must be an object.")

    suggestion_id = normalize_suggestion_id(
        item.get("suggestion_id"), f"suggestions[{index}].suggestion_id"
    )
    task_type = normalize_task_type(item.get("task_type"))

    raw_epic_suggestion_id = item.get("epic_suggestion_id")
    epic_suggestion_id = None
    if raw_epic_suggestion_id is not None:
        epic_suggestion_id = normalize_suggestion_id(
            raw_epic_suggestion_id, f"suggestions[{index}].epic_suggestion_id"
        )

    if task_type == EPIC_TASK_TYPE and epic_suggestion_id:
        raise InvalidTaskSuggestionsError(
            f'Suggestion "{suggestion_id}" cannot define epic_suggestion_id when task_type is epic.'
        )

    return TaskSuggestion(
        suggestion_id=suggestion_id,
        title=normalize_task_title(item.get("title")),
        category=normalize_task_category(item.get("category")),
        description=normalize_task_description(item.get("description")),
        priority=normalize_task_priority(item.get("priority")),
        task_type=task_type,
        epic_suggestion_id=epic_suggestion_id,
    )
