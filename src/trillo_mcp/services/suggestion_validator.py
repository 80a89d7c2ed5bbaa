"""
Suggestion Batch Validator - Validation of a suggestion batch's epic graph.

A batch is a two-level graph: epics at the top, other suggestions pointing
at an epic of the same batch through ``epic_suggestion_id``. Validation
covers:
- Batch size (1 to the batch limit)
- Field normalization (same rules as real tasks)
- suggestion_id uniqueness
- Reference validation (target exists, is another suggestion, is an epic)
"""

from typing import Any, Dict, List, Sequence

from trillo_mcp.domain.entities.result_types import DomainResult, DomainSuccess
from trillo_mcp.domain.entities.task_suggestion import TaskSuggestion, normalize_task_suggestion
from trillo_mcp.domain.errors import InvalidTaskSuggestionsError, TaskDomainError

MAX_SUGGESTIONS = 3


class SuggestionBatchValidator:
    """
    Validates a raw suggestion batch.

    Used identically by preview and apply: apply never trusts a batch that
    was previously previewed.
    """

    def __init__(self, suggestions: Any, limit: int = MAX_SUGGESTIONS):
        """
        Initialize validator with a raw batch.

        Args:
            suggestions: Sequence of mappings or ``TaskSuggestion`` objects.
            limit: Maximum batch size.
        """
        self.suggestions = suggestions
        self.limit = limit

    def validate_size(self) -> None:
        if (
            not isinstance(self.suggestions, Sequence)
            or isinstance(self.suggestions, (str, bytes))
            or not 1 <= len(self.suggestions) <= self.limit
        ):
            raise InvalidTaskSuggestionsError(
                f"Suggestions must contain between 1 and {self.limit} items."
            )

    def validate_suggestion_ids(self, normalized: List[TaskSuggestion]) -> Dict[str, TaskSuggestion]:
        by_id: Dict[str, TaskSuggestion] = {}
        for suggestion in normalized:
            if suggestion.suggestion_id in by_id:
                raise InvalidTaskSuggestionsError(
                    f'Duplicate suggestion_id "{suggestion.suggestion_id}".'
                )
            by_id[suggestion.suggestion_id] = suggestion
        return by_id

    def validate_references(
        self, normalized: List[TaskSuggestion], by_id: Dict[str, TaskSuggestion]
    ) -> None:
        """Check every ``epic_suggestion_id`` points at another epic of the batch."""
        for suggestion in normalized:
            target_id = suggestion.epic_suggestion_id
            if not target_id:
                continue

            if target_id == suggestion.suggestion_id:
                raise InvalidTaskSuggestionsError(
                    f'Suggestion "{suggestion.suggestion_id}" cannot reference itself as epic.'
                )

            referenced = by_id.get(target_id)
            if referenced is None:
                raise InvalidTaskSuggestionsError(
                    f'Suggestion "{suggestion.suggestion_id}" references unknown epic "{target_id}".'
                )
            if not referenced.is_epic:
                raise InvalidTaskSuggestionsError(
                    f'Suggestion "{suggestion.suggestion_id}" references non-epic '
                    f'suggestion "{target_id}".'
                )

    def validate(self) -> DomainResult[List[TaskSuggestion]]:
        """
        Perform full validation.

        Returns:
            DomainResult containing:
            - On success: normalized suggestions in their original order
            - On failure: the first validation error found
        """
        try:
            self.validate_size()
            normalized = [
                normalize_task_suggestion(item, index)
                for index, item in enumerate(self.suggestions)
            ]
            by_id = self.validate_suggestion_ids(normalized)
            self.validate_references(normalized, by_id)
        except TaskDomainError as e:
            return e.to_result()

        return DomainSuccess.create(data=normalized)
