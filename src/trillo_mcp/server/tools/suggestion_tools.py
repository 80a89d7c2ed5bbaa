"""Task suggestion MCP tool definitions."""

from typing import List

from mcp.types import Tool

from trillo_mcp.domain.task_types import TASK_PRIORITIES, TASK_TYPES


def get_suggestion_tools() -> List[Tool]:
    """Get task suggestion MCP tools."""
    return [
        Tool(
            name="preview_task_suggestions",
            description="""Generate up to 3 suggested tasks for a project WITHOUT creating them.

The project must have a description; it is the context the suggestions
are generated from, together with the tasks already on the board.

WORKFLOW:
1. preview_task_suggestions(project_id) -> review / edit the suggestions
2. apply_task_suggestions(project_id, suggestions) -> create them

Parameters:
- project_id (required): Project ID

Errors: project_description_required, task_generation_unavailable""",
            inputSchema={
                "type": "object",
                "properties": {"project_id": {"type": "string"}},
                "required": ["project_id"],
            },
        ),
        Tool(
            name="apply_task_suggestions",
            description="""Create real tasks from a batch of 1 to 3 suggestions.

suggestion_id values are batch-local tokens. A non-epic suggestion may
set epic_suggestion_id to the suggestion_id of an epic in the same batch;
the created task is linked to the created epic.

Parameters:
- project_id (required): Project ID
- suggestions (required): List of suggestions as returned by preview_task_suggestions

Returns: Created tasks, in the order of the suggestions.

Errors: invalid_task_suggestions, project_description_required""",
            inputSchema={
                "type": "object",
                "properties": {
                    "project_id": {"type": "string"},
                    "suggestions": {
                        "type": "array",
                        "minItems": 1,
                        "maxItems": 3,
                        "items": {
                            "type": "object",
                            "properties": {
                                "suggestion_id": {"type": "string", "maxLength": 64},
                                "title": {"type": "string"},
                                "category": {"type": "string"},
                                "description": {"type": ["string", "null"]},
                                "priority": {"type": "string", "enum": list(TASK_PRIORITIES)},
                                "task_type": {"type": "string", "enum": list(TASK_TYPES)},
                                "epic_suggestion_id": {"type": ["string", "null"]},
                            },
                            "required": ["suggestion_id", "title", "category"],
                        },
                    },
                },
                "required": ["project_id", "suggestions"],
            },
        ),
    ]
