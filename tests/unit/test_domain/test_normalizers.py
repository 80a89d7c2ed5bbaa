"""Tests for task, project and suggestion field normalizers."""

import pytest

from trillo_mcp.domain.entities.project import (
    normalize_project_description,
    normalize_project_name,
)
from trillo_mcp.domain.entities.task import (
    normalize_board_id,
    normalize_epic_id,
    normalize_task_category,
    normalize_task_description,
    normalize_task_priority,
    normalize_task_status,
    normalize_task_title,
    normalize_task_type,
)
from trillo_mcp.domain.entities.task_suggestion import (
    TaskSuggestion,
    normalize_task_suggestion,
)
from trillo_mcp.domain.errors import (
    InvalidBoardIdError,
    InvalidProjectDescriptionError,
    InvalidProjectNameError,
    InvalidTaskCategoryError,
    InvalidTaskPriorityError,
    InvalidTaskStatusError,
    InvalidTaskSuggestionsError,
    InvalidTaskTitleError,
    InvalidTaskTypeError,
)


class TestTaskNormalizers:
    def test_title_is_trimmed(self):
        assert normalize_task_title("  Draft plan  ") == "Draft plan"

    @pytest.mark.parametrize("raw", ["ab", "  ab  ", "x" * 141, None, 42])
    def test_title_out_of_bounds(self, raw):
        with pytest.raises(InvalidTaskTitleError) as exc_info:
            normalize_task_title(raw)
        assert exc_info.value.code == "invalid_title"

    def test_title_bounds_are_inclusive(self):
        assert normalize_task_title("abc") == "abc"
        assert normalize_task_title("x" * 140) == "x" * 140

    def test_category(self):
        assert normalize_task_category(" Ops ") == "Ops"
        with pytest.raises(InvalidTaskCategoryError):
            normalize_task_category("O")
        with pytest.raises(InvalidTaskCategoryError):
            normalize_task_category("x" * 33)

    def test_board_id(self):
        assert normalize_board_id(" board-1 ") == "board-1"
        with pytest.raises(InvalidBoardIdError):
            normalize_board_id("b")
        with pytest.raises(InvalidBoardIdError):
            normalize_board_id(None)

    def test_description_blank_becomes_none(self):
        assert normalize_task_description("   ") is None
        assert normalize_task_description(None) is None
        assert normalize_task_description("  notes ") == "notes"

    def test_enum_defaults_on_absence(self):
        assert normalize_task_priority(None) == "medium"
        assert normalize_task_priority("") == "medium"
        assert normalize_task_type(None) == "task"
        assert normalize_task_status(None) == "todo"

    def test_enum_values_are_trimmed(self):
        assert normalize_task_priority(" high ") == "high"
        assert normalize_task_type("epic") == "epic"
        assert normalize_task_status("in_progress") == "in_progress"

    def test_enum_rejects_unknown_values(self):
        with pytest.raises(InvalidTaskPriorityError):
            normalize_task_priority("urgent")
        with pytest.raises(InvalidTaskTypeError) as exc_info:
            normalize_task_type("story")
        assert exc_info.value.code == "invalid_task_type"
        with pytest.raises(InvalidTaskStatusError):
            normalize_task_status("blocked")

    def test_enum_rejects_non_strings(self):
        with pytest.raises(InvalidTaskPriorityError):
            normalize_task_priority(3)

    def test_epic_id(self):
        assert normalize_epic_id(None) is None
        assert normalize_epic_id("  ") is None
        assert normalize_epic_id(" e-1 ") == "e-1"


class TestProjectNormalizers:
    def test_name_collapses_whitespace(self):
        assert normalize_project_name("  Big \t  Launch\n") == "Big Launch"

    @pytest.mark.parametrize("raw", ["L", " ", "x" * 121, None])
    def test_name_out_of_bounds(self, raw):
        with pytest.raises(InvalidProjectNameError):
            normalize_project_name(raw)

    def test_description(self):
        assert normalize_project_description(None) is None
        assert normalize_project_description("   ") is None
        assert normalize_project_description(" Ship v1 ") == "Ship v1"
        assert normalize_project_description("x" * 4000) == "x" * 4000

    def test_description_too_long(self):
        with pytest.raises(InvalidProjectDescriptionError) as exc_info:
            normalize_project_description("x" * 4001)
        assert exc_info.value.code == "invalid_project_description"


class TestSuggestionNormalizer:
    def test_defaults(self):
        result = normalize_task_suggestion(
            {"suggestion_id": " s1 ", "title": "Write docs", "category": "Docs"}, 0
        )

        assert result == TaskSuggestion(
            suggestion_id="s1",
            title="Write docs",
            category="Docs",
            description=None,
            priority="medium",
            task_type="task",
            epic_suggestion_id=None,
        )

    def test_accepts_task_suggestion_objects(self):
        original = TaskSuggestion(suggestion_id="s1", title="Write docs", category="Docs")
        assert normalize_task_suggestion(original, 0) == original

    def test_rejects_non_objects(self):
        with pytest.raises(InvalidTaskSuggestionsError, match=r"suggestions\[2\]"):
            normalize_task_suggestion("s1", 2)

    @pytest.mark.parametrize("raw_id", [None, "", "   ", "x" * 65, 7])
    def test_rejects_bad_suggestion_id(self, raw_id):
        with pytest.raises(InvalidTaskSuggestionsError):
            normalize_task_suggestion(
                {"suggestion_id": raw_id, "title": "Write docs", "category": "Docs"}, 0
            )

    def test_epic_cannot_reference_epic(self):
        with pytest.raises(InvalidTaskSuggestionsError, match="epic_suggestion_id"):
            normalize_task_suggestion(
                {
                    "suggestion_id": "e1",
                    "title": "Big epic",
                    "category": "Product",
                    "task_type": "epic",
                    "epic_suggestion_id": "e2",
                },
                0,
            )

    def test_field_rules_match_tasks(self):
        with pytest.raises(InvalidTaskTitleError):
            normalize_task_suggestion({"suggestion_id": "s1", "title": "ab", "category": "Docs"}, 0)
