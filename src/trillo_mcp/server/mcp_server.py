"""
Trillo MCP Server Implementation.

This module provides the TrilloMCPServer class that implements the Model Context
Protocol (MCP) server for Trillo. Every tool call acts as the user named by
``TRILLO_ACTOR_USER_ID``.
"""

import asyncio
import atexit
import logging
from typing import Any, Dict, List, Optional

from mcp.server import Server
from mcp.types import TextContent, Tool

from trillo_mcp import __version__
from trillo_mcp.config import Settings, load_settings, require_actor_user_id
from trillo_mcp.database.orm_manager import get_orm_manager
from trillo_mcp.server.service_executor import ServiceExecutor
from trillo_mcp.server.tools import get_all_tools
from trillo_mcp.services import get_service_factory

logger = logging.getLogger(__name__)

INSTRUCTIONS = """Trillo - Project boards with epics and tasks

OVERVIEW:
1. PROJECTS: Boards owned by you. A project id is the board_id of its tasks.
2. TASKS: Cards in one of three columns (todo, in_progress, done). A task is
   a "task", a "bug", or an "epic" that groups other tasks of the same board.

GETTING STARTED:
1. create_project(name="Launch", description="Ship v1")
2. create_task(board_id="...", title="Q1", category="Product", task_type="epic")
3. create_task(board_id="...", title="Draft plan", category="Ops", epic_id="<epic-id>")
4. move_task_status(task_id="...", status="in_progress")

SUGGESTIONS:
- preview_task_suggestions(project_id) proposes up to 3 tasks from the
  project description without creating anything
- apply_task_suggestions(project_id, suggestions) creates them, epics first

RESPONSES:
- Success: `data` (plus `meta.count` for lists)
- Failure: `error.code` is stable; branch on it, not on `error.message`
"""


def configure_logging(debug: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


class TrilloMCPServer:
    """
    MCP server implementation for Trillo.

    Uses direct service layer calls through ``ServiceExecutor``.
    """

    def __init__(self, settings: Optional[Settings] = None):
        """Initialize the Trillo MCP server."""
        self._settings = settings or load_settings()
        actor_user_id = require_actor_user_id(self._settings)

        # Create MCP Server instance
        self._server = Server(
            name="trillo-mcp",
            version=__version__,
            instructions=INSTRUCTIONS,
        )

        # Initialize database
        logger.info("Initializing database...")
        try:
            self._orm_manager = get_orm_manager(self._settings.db_path)
            health = self._orm_manager.perform_health_check()
            if health.get("healthy"):
                logger.info(
                    "Database initialized: %s tables",
                    health.get("table_count", 0),
                )
            else:
                logger.warning("Database health check failed: %s", health.get("error"))
        except Exception as e:
            logger.error("Failed to initialize database: %s", e, exc_info=True)
            raise RuntimeError(f"Database initialization failed: {e}") from e

        # Create service executor
        factory = get_service_factory(self._orm_manager, self._settings)
        self._service_executor = ServiceExecutor(actor_user_id, factory)

        # Pre-cache tools
        self._tools = get_all_tools()
        logger.info("Loaded %d tools", len(self._tools))

        # Register protocol handlers
        self._register_handlers()

        # Register cleanup handler
        atexit.register(self.cleanup)

        logger.info("TrilloMCPServer initialized for actor %s", actor_user_id)

    def _register_handlers(self) -> None:
        """Register MCP protocol handlers."""

        @self._server.list_tools()
        async def handle_list_tools() -> List[Tool]:
            """Handle list_tools request."""
            logger.debug("Handling list_tools request")
            return self._tools

        @self._server.call_tool()
        async def handle_call_tool(name: str, arguments: Dict[str, Any]) -> List[TextContent]:
            """Handle call_tool request."""
            logger.debug("Handling call_tool: %s", name)

            result_text = await self._service_executor.execute_tool(name, arguments)

            if self._settings.debug:
                preview = result_text[:200] + "..." if len(result_text) > 200 else result_text
                logger.debug("Tool result preview: %s", preview)

            return [TextContent(type="text", text=result_text)]

        logger.debug("MCP protocol handlers registered")

    async def run(self, read_stream: Any, write_stream: Any, initialization_options: Any) -> None:
        """Run the MCP server with the provided streams."""
        logger.info("Starting MCP server main loop")

        try:
            await self._server.run(read_stream, write_stream, initialization_options)
        except Exception as e:
            logger.error("Error in MCP server main loop: %s", e, exc_info=True)
            raise
        finally:
            logger.info("MCP server main loop ended")
            self.cleanup()

    def create_initialization_options(self) -> Any:
        """Create initialization options for the MCP server."""
        return self._server.create_initialization_options()

    def cleanup(self) -> None:
        """Cleanup resources on shutdown."""
        try:
            if getattr(self, "_service_executor", None):
                self._service_executor.close()
                self._service_executor = None

            if getattr(self, "_orm_manager", None):
                self._orm_manager.close()
                self._orm_manager = None

            logger.info("Cleanup complete")
        except Exception as e:
            logger.error("Error during cleanup: %s", e, exc_info=True)


async def run_server() -> None:
    """Run the MCP server with stdio transport."""
    from mcp.server.stdio import stdio_server

    settings = load_settings()
    configure_logging(settings.debug)
    server = TrilloMCPServer(settings)

    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )


def main() -> None:
    """Entry point for the MCP server."""
    try:
        asyncio.run(run_server())
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except Exception as e:
        logger.error("Server error: %s", e, exc_info=True)
        raise


if __name__ == "__main__":
    main()
