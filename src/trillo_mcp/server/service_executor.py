"""
Service Executor - Direct service layer execution for MCP tools.

Maps MCP tool names to service calls made on behalf of a pre-resolved
acting user, and renders every outcome as a YAML document: ``{data, meta?}``
on success, ``{error: {code, message, details?}}`` on failure.
"""

import asyncio
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, Optional

import yaml

from trillo_mcp.domain.entities.result_types import DomainResult
from trillo_mcp.domain.errors import TaskDomainError
from trillo_mcp.server.arguments import (
    PayloadValidationError,
    parse_args_record,
    parse_object_list,
    parse_optional_string,
    parse_optional_string_or_null,
    parse_required_string,
    parse_string_list,
)
from trillo_mcp.services import ServiceFactory, get_service_factory

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Unexpected error while executing the tool."


def _serialize(value: Any) -> Any:
    """Convert DTOs (anything with ``to_dict``) and containers to plain data."""
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, list):
        return [_serialize(item) for item in value]
    if isinstance(value, dict):
        return {key: _serialize(item) for key, item in value.items()}
    return value


class ServiceExecutor:
    """
    Executes MCP tool calls directly via service layer.

    Handlers parse arguments, call one service method and return its
    ``DomainResult``; formatting and logging happen in ``execute_tool``.
    """

    def __init__(self, actor_user_id: str, factory: Optional[ServiceFactory] = None):
        """
        Initialize the service executor.

        Args:
            actor_user_id: User every tool call acts as.
            factory: Service factory. Uses the singleton if not provided.
        """
        self.actor_user_id = actor_user_id
        self._factory = factory or get_service_factory()
        self._executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="mcp-service-")

        # Tool to service method mapping
        self._tool_handlers: Dict[str, Callable[[Dict[str, Any]], DomainResult[Any]]] = {}
        self._register_handlers()

    def _register_handlers(self) -> None:
        """Register tool name to handler mappings."""
        # Project tools
        self._tool_handlers.update(
            {
                "list_projects": self._handle_list_projects,
                "create_project": self._handle_create_project,
                "update_project": self._handle_update_project,
                "reorder_projects": self._handle_reorder_projects,
                "delete_project": self._handle_delete_project,
            }
        )

        # Task tools
        self._tool_handlers.update(
            {
                "list_tasks": self._handle_list_tasks,
                "create_task": self._handle_create_task,
                "update_task": self._handle_update_task,
                "move_task_status": self._handle_move_task_status,
                "delete_task": self._handle_delete_task,
            }
        )

        # Suggestion tools
        self._tool_handlers.update(
            {
                "preview_task_suggestions": self._handle_preview_suggestions,
                "apply_task_suggestions": self._handle_apply_suggestions,
            }
        )

    @property
    def tool_names(self):
        return sorted(self._tool_handlers)

    async def execute_tool(self, tool_name: str, arguments: Any) -> str:
        """
        Execute a tool and return YAML-formatted result.

        Args:
            tool_name: Name of the tool to execute.
            arguments: Raw tool arguments (expected to be a JSON object).

        Returns:
            YAML-formatted result string.
        """
        started = time.perf_counter()
        handler = self._tool_handlers.get(tool_name)

        if not handler:
            output = self._format_error(
                "validation_error",
                "Unknown tool name.",
                {"name": "Tool name is required and must match a registered tool."},
            )
            self._log_call(tool_name, started, "validation_error")
            return output

        try:
            # Run handler in thread pool to avoid blocking event loop
            loop = asyncio.get_running_loop()
            result = await loop.run_in_executor(self._executor, self._run_handler, handler, arguments)
        except Exception as e:
            logger.error("Error executing tool %s: %s", tool_name, e, exc_info=True)
            self._log_call(tool_name, started, "internal_error")
            return self._format_error("internal_error", INTERNAL_ERROR_MESSAGE)

        if result.is_success:
            self._log_call(tool_name, started, None)
            return self._format_result(result.data)

        self._log_call(tool_name, started, result.error_code)
        return self._format_error(
            result.error_code or "internal_error",
            result.error_message or INTERNAL_ERROR_MESSAGE,
            result.error_details,
        )

    def _run_handler(
        self, handler: Callable[[Dict[str, Any]], DomainResult[Any]], arguments: Any
    ) -> DomainResult[Any]:
        try:
            return handler(parse_args_record(arguments))
        except TaskDomainError as e:
            return e.to_result()

    def _log_call(self, tool_name: str, started: float, error_code: Optional[str]) -> None:
        duration_ms = (time.perf_counter() - started) * 1000
        if error_code is None:
            logger.info("tool=%s outcome=success duration_ms=%.1f", tool_name, duration_ms)
        else:
            logger.info(
                "tool=%s outcome=error code=%s duration_ms=%.1f",
                tool_name,
                error_code,
                duration_ms,
            )

    def _format_result(self, data: Any) -> str:
        """Format result as YAML."""
        result: Dict[str, Any] = {"data": _serialize(data)}
        if isinstance(data, list):
            result["meta"] = {"count": len(data)}
        return yaml.safe_dump(result, default_flow_style=False, allow_unicode=True, sort_keys=False)

    def _format_error(
        self, code: str, message: str, details: Optional[Dict[str, Any]] = None
    ) -> str:
        """Format error as YAML."""
        error: Dict[str, Any] = {"code": code, "message": message}
        if details:
            error["details"] = _serialize(details)
        return yaml.safe_dump(
            {"error": error}, default_flow_style=False, allow_unicode=True, sort_keys=False
        )

    # --- Project Handlers ---

    def _handle_list_projects(self, args: Dict[str, Any]) -> DomainResult[Any]:
        """Handle list_projects tool."""
        service = self._factory.get_project_service()
        return service.list_projects(self.actor_user_id)

    def _handle_create_project(self, args: Dict[str, Any]) -> DomainResult[Any]:
        """Handle create_project tool."""
        service = self._factory.get_project_service()
        return service.create_project(
            self.actor_user_id,
            name=parse_required_string(args.get("name"), "name"),
            description=parse_optional_string_or_null(args.get("description"), "description"),
        )

    def _handle_update_project(self, args: Dict[str, Any]) -> DomainResult[Any]:
        """Handle update_project tool."""
        service = self._factory.get_project_service()
        project_id = parse_required_string(args.get("project_id"), "project_id")

        changes: Dict[str, Any] = {}
        if "name" in args:
            changes["name"] = parse_required_string(args["name"], "name")
        if "description" in args:
            changes["description"] = parse_optional_string_or_null(
                args["description"], "description"
            )
        if not changes:
            raise PayloadValidationError(
                "body", "At least one field is required: name, description."
            )

        return service.update_project(self.actor_user_id, project_id, **changes)

    def _handle_reorder_projects(self, args: Dict[str, Any]) -> DomainResult[Any]:
        """Handle reorder_projects tool."""
        service = self._factory.get_project_service()
        return service.reorder_projects(
            self.actor_user_id, parse_string_list(args.get("project_ids"), "project_ids")
        )

    def _handle_delete_project(self, args: Dict[str, Any]) -> DomainResult[Any]:
        """Handle delete_project tool."""
        service = self._factory.get_project_service()
        return service.delete_project(
            self.actor_user_id, parse_required_string(args.get("project_id"), "project_id")
        )

    # --- Task Handlers ---

    def _handle_list_tasks(self, args: Dict[str, Any]) -> DomainResult[Any]:
        """Handle list_tasks tool."""
        service = self._factory.get_task_service()
        return service.list_board_tasks(
            self.actor_user_id, parse_required_string(args.get("board_id"), "board_id")
        )

    def _handle_create_task(self, args: Dict[str, Any]) -> DomainResult[Any]:
        """Handle create_task tool."""
        service = self._factory.get_task_service()
        return service.create_task(
            self.actor_user_id,
            board_id=parse_required_string(args.get("board_id"), "board_id"),
            title=parse_required_string(args.get("title"), "title"),
            category=parse_required_string(args.get("category"), "category"),
            description=parse_optional_string(args.get("description"), "description"),
            priority=parse_optional_string(args.get("priority"), "priority"),
            task_type=parse_optional_string(args.get("task_type"), "task_type"),
            epic_id=parse_optional_string_or_null(args.get("epic_id"), "epic_id"),
        )

    def _handle_update_task(self, args: Dict[str, Any]) -> DomainResult[Any]:
        """Handle update_task tool."""
        service = self._factory.get_task_service()
        task_id = parse_required_string(args.get("task_id"), "task_id")

        changes: Dict[str, Any] = {}
        for field in ("title", "category", "priority", "task_type"):
            if field in args:
                changes[field] = parse_required_string(args[field], field)
        for field in ("description", "epic_id"):
            if field in args:
                changes[field] = parse_optional_string_or_null(args[field], field)
        if not changes:
            raise PayloadValidationError(
                "body",
                "At least one field is required: title, description, category, "
                "priority, task_type, epic_id.",
            )

        return service.update_task(self.actor_user_id, task_id, **changes)

    def _handle_move_task_status(self, args: Dict[str, Any]) -> DomainResult[Any]:
        """Handle move_task_status tool."""
        service = self._factory.get_task_service()
        return service.move_task_status(
            self.actor_user_id,
            parse_required_string(args.get("task_id"), "task_id"),
            parse_required_string(args.get("status"), "status"),
        )

    def _handle_delete_task(self, args: Dict[str, Any]) -> DomainResult[Any]:
        """Handle delete_task tool."""
        service = self._factory.get_task_service()
        return service.delete_task(
            self.actor_user_id, parse_required_string(args.get("task_id"), "task_id")
        )

    # --- Suggestion Handlers ---

    def _handle_preview_suggestions(self, args: Dict[str, Any]) -> DomainResult[Any]:
        """Handle preview_task_suggestions tool."""
        service = self._factory.get_suggestion_service()
        return service.preview_suggestions(
            self.actor_user_id, parse_required_string(args.get("project_id"), "project_id")
        )

    def _handle_apply_suggestions(self, args: Dict[str, Any]) -> DomainResult[Any]:
        """Handle apply_task_suggestions tool."""
        service = self._factory.get_suggestion_service()
        return service.apply_suggestions(
            self.actor_user_id,
            parse_required_string(args.get("project_id"), "project_id"),
            parse_object_list(args.get("suggestions"), "suggestions"),
        )

    def close(self) -> None:
        """Shutdown the executor."""
        self._executor.shutdown(wait=True)
