"""CLI application using Typer."""

import json
import sys
from pathlib import Path
from typing import Any, List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from trillo_mcp.domain.entities.result_types import DomainResult
from trillo_mcp.services import get_service_factory

console = Console()
app = typer.Typer(
    name="trillo",
    help="Trillo - Project boards with epics and tasks",
    no_args_is_help=True,
)

STATUS_ICONS = {"done": "[green]✓", "in_progress": "[yellow]→", "todo": "[dim]○"}


@app.callback()
def main_callback(
    ctx: typer.Context,
    user: Optional[str] = typer.Option(
        None,
        "--user",
        "-u",
        envvar="TRILLO_ACTOR_USER_ID",
        help="Acting user id",
    ),
) -> None:
    """Trillo command line."""
    ctx.obj = {"user": user}


def _actor(ctx: typer.Context) -> str:
    user = (ctx.obj or {}).get("user")
    if not user or not user.strip():
        console.print("[red]Error:[/red] Acting user required (--user or TRILLO_ACTOR_USER_ID).")
        raise typer.Exit(2)
    return user.strip()


def _to_plain(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, list):
        return [_to_plain(item) for item in value]
    return value


def _fail(result: DomainResult[Any], format: str = "text") -> None:
    if format == "json":
        json.dump(
            {"error": {"code": result.error_code, "message": result.error_message}},
            sys.stdout,
            default=str,
        )
        sys.stdout.write("\n")
    else:
        console.print(f"[red]Error[/red] ({result.error_code}): {result.error_message}")
    raise typer.Exit(1)


def _print_json(data: Any) -> None:
    json.dump({"data": _to_plain(data)}, sys.stdout, default=str)
    sys.stdout.write("\n")


# Project commands
project_app = typer.Typer(help="Project management commands")
app.add_typer(project_app, name="project")


@project_app.command("list")
def project_list(
    ctx: typer.Context,
    format: str = typer.Option("text", "--format", "-f", help="Output format (text/json)"),
) -> None:
    """List your projects."""
    service = get_service_factory().get_project_service()
    result = service.list_projects(_actor(ctx))

    if result.is_failure:
        _fail(result, format)

    projects = result.data or []
    if format == "json":
        _print_json(projects)
        return
    if not projects:
        console.print("No projects found.")
        return

    table = Table(title="Projects")
    table.add_column("#", justify="right")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="green")
    table.add_column("Description")

    for p in projects:
        table.add_row(str(p.sort_order), p.id, p.name, p.description or "")

    console.print(table)


@project_app.command("create")
def project_create(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Project name"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Description"),
) -> None:
    """Create a new project."""
    service = get_service_factory().get_project_service()
    result = service.create_project(_actor(ctx), name, description)

    if result.is_failure:
        _fail(result)

    console.print(f"[green]Project created:[/green] {result.data.id}")
    console.print(f"Name: {result.data.name}")


@project_app.command("update")
def project_update(
    ctx: typer.Context,
    project_id: str = typer.Argument(..., help="Project ID"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="New name"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="New description"),
    clear_description: bool = typer.Option(
        False, "--clear-description", help="Remove the description"
    ),
) -> None:
    """Rename a project or change its description."""
    changes = {}
    if name is not None:
        changes["name"] = name
    if clear_description:
        changes["description"] = None
    elif description is not None:
        changes["description"] = description

    if not changes:
        console.print("[yellow]No updates specified[/yellow]")
        return

    service = get_service_factory().get_project_service()
    result = service.update_project(_actor(ctx), project_id, **changes)

    if result.is_failure:
        _fail(result)
    console.print(f"[green]Project updated:[/green] {result.data.name}")


@project_app.command("reorder")
def project_reorder(
    ctx: typer.Context,
    project_ids: List[str] = typer.Argument(..., help="Every project ID, in the new order"),
) -> None:
    """Reorder all of your projects."""
    service = get_service_factory().get_project_service()
    result = service.reorder_projects(_actor(ctx), project_ids)

    if result.is_failure:
        _fail(result)
    for p in result.data or []:
        console.print(f"{p.sort_order}. {p.name}")


@project_app.command("delete")
def project_delete(
    ctx: typer.Context,
    project_id: str = typer.Argument(..., help="Project ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a project and all of its tasks."""
    if not yes:
        typer.confirm(f"Delete project {project_id} and all of its tasks?", abort=True)

    service = get_service_factory().get_project_service()
    result = service.delete_project(_actor(ctx), project_id)

    if result.is_failure:
        _fail(result)
    console.print(f"[green]Project deleted:[/green] {project_id}")


# Task commands
task_app = typer.Typer(help="Task management commands")
app.add_typer(task_app, name="task")


@task_app.command("list")
def task_list(
    ctx: typer.Context,
    board_id: str = typer.Argument(..., help="Project (board) ID"),
    format: str = typer.Option("text", "--format", "-f", help="Output format (text/json)"),
) -> None:
    """List the tasks on a board."""
    service = get_service_factory().get_task_service()
    result = service.list_board_tasks(_actor(ctx), board_id)

    if result.is_failure:
        _fail(result, format)

    tasks = result.data or []
    if format == "json":
        _print_json(tasks)
        return
    if not tasks:
        console.print("No tasks found.")
        return

    table = Table(title="Tasks")
    table.add_column("", no_wrap=True)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Title", style="green")
    table.add_column("Type")
    table.add_column("Priority")
    table.add_column("Category")
    table.add_column("Epic", no_wrap=True)

    for t in tasks:
        table.add_row(
            f"{STATUS_ICONS.get(t.status, '[dim]○')}[/]",
            t.id,
            t.title,
            t.task_type,
            t.priority,
            t.category,
            t.epic_id or "",
        )

    console.print(table)


@task_app.command("create")
def task_create(
    ctx: typer.Context,
    board_id: str = typer.Argument(..., help="Project (board) ID"),
    title: str = typer.Argument(..., help="Task title"),
    category: str = typer.Option(..., "--category", "-c", help="Category"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Description"),
    priority: Optional[str] = typer.Option(None, "--priority", "-p", help="low/medium/high"),
    task_type: Optional[str] = typer.Option(None, "--type", "-t", help="task/bug/epic"),
    epic_id: Optional[str] = typer.Option(None, "--epic", "-e", help="Epic task ID"),
) -> None:
    """Create a new task."""
    service = get_service_factory().get_task_service()
    result = service.create_task(
        _actor(ctx),
        board_id=board_id,
        title=title,
        category=category,
        description=description,
        priority=priority,
        task_type=task_type,
        epic_id=epic_id,
    )

    if result.is_failure:
        _fail(result)
    console.print(f"[green]Task created:[/green] {result.data.id}")
    console.print(f"Title: {result.data.title}")


@task_app.command("update")
def task_update(
    ctx: typer.Context,
    task_id: str = typer.Argument(..., help="Task ID"),
    title: Optional[str] = typer.Option(None, "--title", help="New title"),
    category: Optional[str] = typer.Option(None, "--category", "-c", help="New category"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="New description"),
    priority: Optional[str] = typer.Option(None, "--priority", "-p", help="New priority"),
    task_type: Optional[str] = typer.Option(None, "--type", "-t", help="New type"),
    epic_id: Optional[str] = typer.Option(None, "--epic", "-e", help="New epic ID"),
    detach: bool = typer.Option(False, "--detach", help="Remove the task from its epic"),
) -> None:
    """Update a task."""
    changes = {
        key: value
        for key, value in {
            "title": title,
            "category": category,
            "description": description,
            "priority": priority,
            "task_type": task_type,
            "epic_id": epic_id,
        }.items()
        if value is not None
    }
    if detach:
        changes["epic_id"] = None

    if not changes:
        console.print("[yellow]No updates specified[/yellow]")
        return

    service = get_service_factory().get_task_service()
    result = service.update_task(_actor(ctx), task_id, **changes)

    if result.is_failure:
        _fail(result)
    console.print(f"[green]Task updated:[/green] {result.data.title}")


@task_app.command("move")
def task_move(
    ctx: typer.Context,
    task_id: str = typer.Argument(..., help="Task ID"),
    status: str = typer.Argument(..., help="todo/in_progress/done"),
) -> None:
    """Move a task to another column."""
    service = get_service_factory().get_task_service()
    result = service.move_task_status(_actor(ctx), task_id, status)

    if result.is_failure:
        _fail(result)
    icon = STATUS_ICONS.get(result.data.status, "[dim]○")
    console.print(f"{icon}[/] {escape(result.data.title)}")


@task_app.command("delete")
def task_delete(
    ctx: typer.Context,
    task_id: str = typer.Argument(..., help="Task ID"),
) -> None:
    """Delete a task."""
    service = get_service_factory().get_task_service()
    result = service.delete_task(_actor(ctx), task_id)

    if result.is_failure:
        _fail(result)
    console.print(f"[green]Task deleted:[/green] {task_id}")


# Suggestion commands
suggest_app = typer.Typer(help="AI task suggestion commands")
app.add_typer(suggest_app, name="suggest")


@suggest_app.command("preview")
def suggest_preview(
    ctx: typer.Context,
    project_id: str = typer.Argument(..., help="Project ID"),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the suggestions as JSON for `suggest apply`"
    ),
) -> None:
    """Generate task suggestions without creating them."""
    service = get_service_factory().get_suggestion_service()
    result = service.preview_suggestions(_actor(ctx), project_id)

    if result.is_failure:
        _fail(result)

    suggestions = result.data or []
    for s in suggestions:
        parent = f" (epic: {s.epic_suggestion_id})" if s.epic_suggestion_id else ""
        console.print(f"[cyan]{s.suggestion_id}[/cyan] \\[{s.task_type}] {escape(s.title)}{parent}")
        if s.description:
            console.print(f"    {s.description}")

    if output is not None:
        output.write_text(json.dumps(_to_plain(suggestions), indent=2))
        console.print(f"Saved {len(suggestions)} suggestion(s) to {output}")


@suggest_app.command("apply")
def suggest_apply(
    ctx: typer.Context,
    project_id: str = typer.Argument(..., help="Project ID"),
    file: Path = typer.Argument(..., help="JSON file with a list of suggestions ('-' for stdin)"),
) -> None:
    """Create tasks from a list of suggestions."""
    raw = sys.stdin.read() if str(file) == "-" else file.read_text()
    try:
        suggestions = json.loads(raw)
    except ValueError as e:
        console.print(f"[red]Error:[/red] Invalid JSON: {e}")
        raise typer.Exit(1)

    service = get_service_factory().get_suggestion_service()
    result = service.apply_suggestions(_actor(ctx), project_id, suggestions)

    if result.is_failure:
        _fail(result)
    for t in result.data or []:
        console.print(f"[green]Task created:[/green] {t.id} \\[{t.task_type}] {escape(t.title)}")


def create_app() -> typer.Typer:
    """Create and return the Typer app."""
    return app
