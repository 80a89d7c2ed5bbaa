"""Task MCP tool definitions."""

from typing import List

from mcp.types import Tool

from trillo_mcp.domain.task_types import TASK_PRIORITIES, TASK_STATUSES, TASK_TYPES


def get_task_tools() -> List[Tool]:
    """Get task management MCP tools."""
    return [
        Tool(
            name="list_tasks",
            description="""List the tasks on a board.

Tasks are grouped by status column (todo, in_progress, done), most
recently updated first within a column.

Parameters:
- board_id (required): Project ID (see list_projects)

Errors: project_not_found""",
            inputSchema={
                "type": "object",
                "properties": {"board_id": {"type": "string"}},
                "required": ["board_id"],
            },
        ),
        Tool(
            name="create_task",
            description="""Create a task in the todo column of a board.

EPIC SEMANTICS:
- A task with task_type="epic" groups other tasks and never has an epic_id
- Any other task may set epic_id to an epic on the SAME board
- An epic cannot be deleted or retyped while tasks still reference it

Parameters:
- board_id (required): Project ID
- title (required): 3-140 characters
- category (required): 2-32 characters, free-form label
- description (optional): Task description
- priority (optional): "low", "medium" (default), or "high"
- task_type (optional): "task" (default), "bug", or "epic"
- epic_id (optional): ID of an epic on the same board

RESPONSE FORMAT:
```yaml
data:
  id: <task-id>           # ← Use for update_task, move_task_status, epic_id, ...
  board_id: <project-id>
  status: todo
  task_type: task
  epic_id: null
```

Errors: invalid_title, invalid_category, invalid_priority, invalid_task_type,
invalid_epic_reference, project_not_found""",
            inputSchema={
                "type": "object",
                "properties": {
                    "board_id": {"type": "string"},
                    "title": {"type": "string", "minLength": 3, "maxLength": 140},
                    "category": {"type": "string", "minLength": 2, "maxLength": 32},
                    "description": {"type": "string"},
                    "priority": {"type": "string", "enum": list(TASK_PRIORITIES)},
                    "task_type": {"type": "string", "enum": list(TASK_TYPES)},
                    "epic_id": {"type": ["string", "null"]},
                },
                "required": ["board_id", "title", "category"],
            },
        ),
        Tool(
            name="update_task",
            description="""Update a task. Only the fields you pass are changed.

Pass epic_id=null to detach a task from its epic. Turning a task into an
epic clears its epic_id; turning an epic back into a task requires that no
task references it anymore.

Parameters:
- task_id (required): Task ID
- title, category, priority, task_type (optional)
- description (optional): String or null
- epic_id (optional): Epic ID on the same board, or null

Errors: task_not_found, invalid_epic_reference, epic_has_linked_tasks""",
            inputSchema={
                "type": "object",
                "properties": {
                    "task_id": {"type": "string"},
                    "title": {"type": "string", "minLength": 3, "maxLength": 140},
                    "category": {"type": "string", "minLength": 2, "maxLength": 32},
                    "description": {"type": ["string", "null"]},
                    "priority": {"type": "string", "enum": list(TASK_PRIORITIES)},
                    "task_type": {"type": "string", "enum": list(TASK_TYPES)},
                    "epic_id": {"type": ["string", "null"]},
                },
                "required": ["task_id"],
            },
        ),
        Tool(
            name="move_task_status",
            description="""Move a task to another column.

Any transition is allowed, including moving a done task back to todo.
Moving a task to the column it is already in changes nothing.

Parameters:
- task_id (required): Task ID
- status (required): "todo", "in_progress", or "done\"""",
            inputSchema={
                "type": "object",
                "properties": {
                    "task_id": {"type": "string"},
                    "status": {"type": "string", "enum": list(TASK_STATUSES)},
                },
                "required": ["task_id", "status"],
            },
        ),
        Tool(
            name="delete_task",
            description="""Delete a task.

Epics can only be deleted once no task references them.

Parameters:
- task_id (required): Task ID

Errors: task_not_found, epic_has_linked_tasks""",
            inputSchema={
                "type": "object",
                "properties": {"task_id": {"type": "string"}},
                "required": ["task_id"],
            },
        ),
    ]
