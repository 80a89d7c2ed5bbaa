"""Integration tests for ServiceExecutor."""

import pytest
import yaml

from trillo_mcp.server.service_executor import ServiceExecutor
from trillo_mcp.services import ServiceFactory

USER_ALPHA = "user-alpha"
USER_BETA = "user-beta"


@pytest.fixture
def factory(orm_manager, settings, fake_generator):
    factory = ServiceFactory(orm_manager, settings, suggestion_generator=fake_generator)
    yield factory
    factory.close()


@pytest.fixture
def service_executor(factory):
    """Create a service executor acting as USER_ALPHA."""
    executor = ServiceExecutor(USER_ALPHA, factory)
    yield executor
    executor.close()


async def _call(executor, name, arguments=None):
    return yaml.safe_load(await executor.execute_tool(name, arguments or {}))


async def _create_project(executor, name="Launch", description="Ship v1"):
    result = await _call(executor, "create_project", {"name": name, "description": description})
    return result["data"]


class TestProjectTools:
    """Test project tool execution via ServiceExecutor."""

    @pytest.mark.asyncio
    async def test_create_project(self, service_executor):
        """Test creating a project via executor."""
        data = await _call(
            service_executor, "create_project", {"name": "  Launch  ", "description": "Ship v1"}
        )

        assert "error" not in data
        project = data["data"]
        assert project["name"] == "Launch"
        assert project["owner_user_id"] == USER_ALPHA
        assert project["sort_order"] == 0
        assert isinstance(project["created_at"], str)

    @pytest.mark.asyncio
    async def test_list_projects_has_count(self, service_executor):
        await _create_project(service_executor, "First")
        await _create_project(service_executor, "Second")

        data = await _call(service_executor, "list_projects")

        assert [p["name"] for p in data["data"]] == ["First", "Second"]
        assert data["meta"] == {"count": 2}

    @pytest.mark.asyncio
    async def test_list_projects_empty(self, service_executor):
        data = await _call(service_executor, "list_projects")

        assert data == {"data": [], "meta": {"count": 0}}

    @pytest.mark.asyncio
    async def test_update_project_requires_a_field(self, service_executor):
        project = await _create_project(service_executor)

        data = await _call(service_executor, "update_project", {"project_id": project["id"]})

        assert data["error"]["code"] == "validation_error"
        assert "body" in data["error"]["details"]

    @pytest.mark.asyncio
    async def test_update_project_clears_description(self, service_executor):
        project = await _create_project(service_executor)

        data = await _call(
            service_executor, "update_project", {"project_id": project["id"], "description": None}
        )

        assert data["data"]["description"] is None

    @pytest.mark.asyncio
    async def test_name_taken(self, service_executor):
        await _create_project(service_executor)

        data = await _call(service_executor, "create_project", {"name": "Launch"})

        assert data["error"]["code"] == "project_name_taken"
        assert "data" not in data

    @pytest.mark.asyncio
    async def test_reorder_projects(self, service_executor):
        first = await _create_project(service_executor, "First")
        second = await _create_project(service_executor, "Second")

        data = await _call(
            service_executor, "reorder_projects", {"project_ids": [second["id"], first["id"]]}
        )

        assert [p["id"] for p in data["data"]] == [second["id"], first["id"]]
        assert data["meta"]["count"] == 2

    @pytest.mark.asyncio
    async def test_reorder_requires_string_list(self, service_executor):
        data = await _call(service_executor, "reorder_projects", {"project_ids": "abc"})

        assert data["error"]["code"] == "validation_error"
        assert "project_ids" in data["error"]["details"]

    @pytest.mark.asyncio
    async def test_delete_project(self, service_executor):
        project = await _create_project(service_executor)

        data = await _call(service_executor, "delete_project", {"project_id": project["id"]})

        assert data["data"]["deleted"] is True
        listed = await _call(service_executor, "list_projects")
        assert listed["meta"]["count"] == 0


class TestTaskTools:
    """Test task tool execution via ServiceExecutor."""

    @pytest.mark.asyncio
    async def test_task_lifecycle(self, service_executor):
        project = await _create_project(service_executor)
        epic = (
            await _call(
                service_executor,
                "create_task",
                {"board_id": project["id"], "title": "Q1 epic", "category": "Product", "task_type": "epic"},
            )
        )["data"]
        task = (
            await _call(
                service_executor,
                "create_task",
                {
                    "board_id": project["id"],
                    "title": "Draft plan",
                    "category": "Ops",
                    "priority": "high",
                    "epic_id": epic["id"],
                },
            )
        )["data"]

        assert task["status"] == "todo"
        assert task["epic_id"] == epic["id"]

        moved = await _call(
            service_executor, "move_task_status", {"task_id": task["id"], "status": "done"}
        )
        assert moved["data"]["status"] == "done"

        blocked = await _call(service_executor, "delete_task", {"task_id": epic["id"]})
        assert blocked["error"]["code"] == "epic_has_linked_tasks"

        detached = await _call(
            service_executor, "update_task", {"task_id": task["id"], "epic_id": None}
        )
        assert detached["data"]["epic_id"] is None

        deleted = await _call(service_executor, "delete_task", {"task_id": epic["id"]})
        assert deleted["data"] == {"task_id": epic["id"], "deleted": True}

        listed = await _call(service_executor, "list_tasks", {"board_id": project["id"]})
        assert [t["id"] for t in listed["data"]] == [task["id"]]
        assert listed["meta"]["count"] == 1

    @pytest.mark.asyncio
    async def test_create_task_missing_title(self, service_executor):
        project = await _create_project(service_executor)

        data = await _call(
            service_executor, "create_task", {"board_id": project["id"], "category": "Ops"}
        )

        assert data["error"]["code"] == "validation_error"
        assert data["error"]["message"] == "Invalid request payload."
        assert "title" in data["error"]["details"]

    @pytest.mark.asyncio
    async def test_create_task_domain_validation(self, service_executor):
        project = await _create_project(service_executor)

        data = await _call(
            service_executor,
            "create_task",
            {"board_id": project["id"], "title": "ab", "category": "Ops"},
        )

        assert data["error"]["code"] == "invalid_title"

    @pytest.mark.asyncio
    async def test_update_task_rejects_null_priority(self, service_executor):
        project = await _create_project(service_executor)
        task = (
            await _call(
                service_executor,
                "create_task",
                {"board_id": project["id"], "title": "Draft plan", "category": "Ops"},
            )
        )["data"]

        data = await _call(service_executor, "update_task", {"task_id": task["id"], "priority": None})

        assert data["error"]["code"] == "validation_error"

    @pytest.mark.asyncio
    async def test_update_task_requires_a_field(self, service_executor):
        data = await _call(service_executor, "update_task", {"task_id": "some-task"})

        assert data["error"]["code"] == "validation_error"

    @pytest.mark.asyncio
    async def test_other_owner_sees_not_found(self, service_executor, factory):
        project = await _create_project(service_executor)
        other = ServiceExecutor(USER_BETA, factory)
        try:
            data = await _call(other, "list_tasks", {"board_id": project["id"]})
        finally:
            other.close()

        assert data["error"]["code"] == "project_not_found"


class TestSuggestionTools:
    @pytest.mark.asyncio
    async def test_preview_and_apply(self, service_executor, fake_generator):
        project = await _create_project(service_executor)
        fake_generator.suggestions = [
            {"suggestion_id": "e1", "title": "Onboarding", "category": "Product", "task_type": "epic"},
            {"suggestion_id": "t1", "title": "Write guide", "category": "Docs", "epic_suggestion_id": "e1"},
        ]

        preview = await _call(
            service_executor, "preview_task_suggestions", {"project_id": project["id"]}
        )
        assert preview["meta"]["count"] == 2
        assert preview["data"][1]["epic_suggestion_id"] == "e1"

        applied = await _call(
            service_executor,
            "apply_task_suggestions",
            {"project_id": project["id"], "suggestions": preview["data"]},
        )
        epic, task = applied["data"]
        assert task["epic_id"] == epic["id"]
        assert applied["meta"]["count"] == 2

    @pytest.mark.asyncio
    async def test_preview_requires_description(self, service_executor, fake_generator):
        project = await _create_project(service_executor, description=None)

        data = await _call(service_executor, "preview_task_suggestions", {"project_id": project["id"]})

        assert data["error"]["code"] == "project_description_required"
        assert fake_generator.contexts == []

    @pytest.mark.asyncio
    async def test_apply_requires_object_list(self, service_executor):
        project = await _create_project(service_executor)

        data = await _call(
            service_executor,
            "apply_task_suggestions",
            {"project_id": project["id"], "suggestions": ["e1"]},
        )

        assert data["error"]["code"] == "validation_error"
        assert "suggestions[0]" in data["error"]["details"]


class TestErrorHandling:
    @pytest.mark.asyncio
    async def test_unknown_tool(self, service_executor):
        data = await _call(service_executor, "archive_board")

        assert data["error"]["code"] == "validation_error"
        assert data["error"]["message"] == "Unknown tool name."

    @pytest.mark.asyncio
    async def test_arguments_must_be_an_object(self, service_executor):
        result = await service_executor.execute_tool("list_projects", ["not", "an", "object"])

        assert yaml.safe_load(result)["error"]["code"] == "validation_error"

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_internal_error(self, service_executor, factory, monkeypatch):
        def explode(owner_user_id):
            raise RuntimeError("database on fire")

        monkeypatch.setattr(factory.get_project_service(), "list_projects", explode)

        data = await _call(service_executor, "list_projects")

        assert data["error"] == {
            "code": "internal_error",
            "message": "Unexpected error while executing the tool.",
        }

    def test_tool_names(self, service_executor):
        assert service_executor.tool_names == sorted(
            [
                "list_projects",
                "create_project",
                "update_project",
                "reorder_projects",
                "delete_project",
                "list_tasks",
                "create_task",
                "update_task",
                "move_task_status",
                "delete_task",
                "preview_task_suggestions",
                "apply_task_suggestions",
            ]
        )
