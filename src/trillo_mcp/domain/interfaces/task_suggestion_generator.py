"""Task Suggestion Generator Interface."""

from typing import List, Protocol

from trillo_mcp.domain.entities.task_suggestion import TaskSuggestion, TaskSuggestionContext


class ITaskSuggestionGenerator(Protocol):
    """
    Anything that proposes up to ``context.limit`` tasks for a project.

    Implementations are untrusted: their output is normalized and validated
    before use, and any exception they raise is treated as an outage.
    """

    def generate_suggestions(self, context: TaskSuggestionContext) -> List[TaskSuggestion]:
        """Generate task suggestions for a project."""
        ...
