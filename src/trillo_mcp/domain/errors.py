"""
Domain error taxonomy.

Every error carries a stable machine-readable ``code``. Normalizers raise
these exceptions; services turn them into failed ``DomainResult`` values
with ``to_result()`` so adapters can branch on the code.
"""

from typing import Any, Dict, Optional

from trillo_mcp.domain.entities.result_types import DomainError, DomainErrorType, DomainResult

# Transport status per error code, consumed by HTTP-style adapters.
_HTTP_STATUS_BY_TYPE = {
    DomainErrorType.VALIDATION_ERROR: 400,
    DomainErrorType.UNAUTHORIZED: 401,
    DomainErrorType.NOT_FOUND: 404,
    DomainErrorType.ALREADY_EXISTS: 409,
    DomainErrorType.BUSINESS_RULE_VIOLATION: 409,
    DomainErrorType.PRECONDITION_FAILED: 409,
    DomainErrorType.DEPENDENCY_ERROR: 503,
}


class TaskDomainError(Exception):
    """Base class for task and project domain errors."""

    code = "task_domain_error"
    error_type = DomainErrorType.VALIDATION_ERROR
    default_message = "Task domain error."

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def to_result(self) -> DomainResult[Any]:
        """Convert the error into a failed domain result."""
        return DomainError.create(self.error_type, self.code, self.message, self.details)


# --- Validation ---


class InvalidTaskTitleError(TaskDomainError):
    code = "invalid_title"
    default_message = "Task title must have between 3 and 140 characters."


class InvalidTaskCategoryError(TaskDomainError):
    code = "invalid_category"
    default_message = "Task category must have between 2 and 32 characters."


class InvalidBoardIdError(TaskDomainError):
    code = "invalid_board_id"
    default_message = "Board id must have between 2 and 64 characters."


class InvalidProjectNameError(TaskDomainError):
    code = "invalid_project_name"
    default_message = "Project name must have between 2 and 120 characters."


class InvalidProjectDescriptionError(TaskDomainError):
    code = "invalid_project_description"
    default_message = "Project description must have at most 4000 characters."


class InvalidProjectOrderError(TaskDomainError):
    code = "invalid_project_order"
    default_message = "Project order is invalid."


class InvalidTaskTypeError(TaskDomainError):
    code = "invalid_task_type"
    default_message = "Task type must be one of: epic, task, bug."


class InvalidTaskPriorityError(TaskDomainError):
    code = "invalid_priority"
    default_message = "Task priority must be one of: low, medium, high."


class InvalidTaskStatusError(TaskDomainError):
    code = "invalid_status"
    default_message = "Task status must be one of: todo, in_progress, done."


class InvalidEpicReferenceError(TaskDomainError):
    code = "invalid_epic_reference"
    default_message = "Epic reference is invalid."


class InvalidTaskSuggestionsError(TaskDomainError):
    code = "invalid_task_suggestions"
    default_message = "Task suggestions are invalid."


# --- Not found ---


class ProjectNotFoundError(TaskDomainError):
    code = "project_not_found"
    error_type = DomainErrorType.NOT_FOUND

    def __init__(self, project_id: str):
        super().__init__(f"Project {project_id} was not found.", {"id": project_id})


class TaskNotFoundError(TaskDomainError):
    code = "task_not_found"
    error_type = DomainErrorType.NOT_FOUND

    def __init__(self, task_id: str):
        super().__init__(f"Task {task_id} was not found.", {"id": task_id})


# --- Conflicts ---


class ProjectNameTakenError(TaskDomainError):
    code = "project_name_taken"
    error_type = DomainErrorType.ALREADY_EXISTS

    def __init__(self, project_name: str):
        super().__init__(f"Project {project_name} already exists.", {"name": project_name})


class EpicHasLinkedTasksError(TaskDomainError):
    code = "epic_has_linked_tasks"
    error_type = DomainErrorType.BUSINESS_RULE_VIOLATION

    def __init__(self, epic_id: str, linked_tasks: int = 0):
        super().__init__(
            f"Epic {epic_id} still has linked tasks.",
            {"epic_id": epic_id, "linked_tasks": linked_tasks},
        )


# --- Preconditions and upstream ---


class ProjectDescriptionRequiredError(TaskDomainError):
    code = "project_description_required"
    error_type = DomainErrorType.PRECONDITION_FAILED

    def __init__(self, project_id: str):
        super().__init__(
            f"Project {project_id} needs a description before generating task suggestions.",
            {"id": project_id},
        )


class TaskGenerationUnavailableError(TaskDomainError):
    code = "task_generation_unavailable"
    error_type = DomainErrorType.DEPENDENCY_ERROR
    default_message = "Task suggestion generation is currently unavailable."


def http_status_for(error_type: Optional[DomainErrorType]) -> int:
    """Map a domain error category onto an HTTP status code."""
    if error_type is None:
        return 500
    return _HTTP_STATUS_BY_TYPE.get(error_type, 500)
