"""Project MCP tool definitions."""

from typing import List

from mcp.types import Tool


def get_project_tools() -> List[Tool]:
    """Get project management MCP tools."""
    return [
        Tool(
            name="list_projects",
            description="""List the acting user's projects.

Projects are returned in the user's explicit order (see reorder_projects).
A project id is also the board id used by the task tools.

RESPONSE FORMAT:
```yaml
data:
  - id: <project-id>      # ← Use as board_id for list_tasks / create_task
    name: Launch
    description: Ship v1
    sort_order: 0
meta:
  count: 1
```""",
            inputSchema={"type": "object", "properties": {}},
        ),
        Tool(
            name="create_project",
            description="""Create a new project (board) at the end of the list.

Parameters:
- name (required): 2-120 characters, unique per user. Inner whitespace is collapsed.
- description (optional): Up to 4000 characters. Needed later for task suggestions.

Returns: Created project.

Errors: invalid_project_name, invalid_project_description, project_name_taken""",
            inputSchema={
                "type": "object",
                "properties": {
                    "name": {"type": "string", "minLength": 2, "maxLength": 120},
                    "description": {"type": ["string", "null"], "maxLength": 4000},
                },
                "required": ["name"],
            },
        ),
        Tool(
            name="update_project",
            description="""Rename a project and/or change its description.

Only the fields you pass are changed. Pass description=null to clear it.

Parameters:
- project_id (required): Project ID
- name (optional): New name, unique per user
- description (optional): New description or null

Errors: project_not_found, project_name_taken, validation_error""",
            inputSchema={
                "type": "object",
                "properties": {
                    "project_id": {"type": "string"},
                    "name": {"type": "string", "minLength": 2, "maxLength": 120},
                    "description": {"type": ["string", "null"], "maxLength": 4000},
                },
                "required": ["project_id"],
            },
        ),
        Tool(
            name="reorder_projects",
            description="""Persist a new order for ALL of the user's projects.

Parameters:
- project_ids (required): Every project id exactly once, in the desired order

Returns: Projects in their new order.

Errors: invalid_project_order (missing or duplicated ids), project_not_found""",
            inputSchema={
                "type": "object",
                "properties": {
                    "project_ids": {"type": "array", "items": {"type": "string"}},
                },
                "required": ["project_ids"],
            },
        ),
        Tool(
            name="delete_project",
            description="""Delete a project and every task on its board.

This cannot be undone.

Parameters:
- project_id (required): Project ID""",
            inputSchema={
                "type": "object",
                "properties": {"project_id": {"type": "string"}},
                "required": ["project_id"],
            },
        ),
    ]
