"""Enumerated task field values."""

TASK_STATUSES = ("todo", "in_progress", "done")
TASK_PRIORITIES = ("low", "medium", "high")
TASK_TYPES = ("epic", "task", "bug")

DEFAULT_TASK_STATUS = "todo"
DEFAULT_TASK_PRIORITY = "medium"
DEFAULT_TASK_TYPE = "task"
EPIC_TASK_TYPE = "epic"


def is_task_status(value: object) -> bool:
    return isinstance(value, str) and value in TASK_STATUSES


def is_task_priority(value: object) -> bool:
    return isinstance(value, str) and value in TASK_PRIORITIES


def is_task_type(value: object) -> bool:
    return isinstance(value, str) and value in TASK_TYPES
