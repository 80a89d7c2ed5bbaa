"""Tests for project service."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

from trillo_mcp.domain.entities.project import ProjectDTO
from trillo_mcp.domain.entities.result_types import DomainError, DomainSuccess
from trillo_mcp.services import ProjectService

USER_ALPHA = "user-alpha"
USER_BETA = "user-beta"


class TestCreateProject:
    def test_create_project(self, project_service, clock):
        result = project_service.create_project(USER_ALPHA, "  Launch  ", "Ship v1")

        assert result.is_success
        project = result.data
        assert project.name == "Launch"
        assert project.description == "Ship v1"
        assert project.owner_user_id == USER_ALPHA
        assert project.sort_order == 0
        assert project.created_at == project.updated_at == clock.current

    def test_sort_order_appends(self, project_service):
        project_service.create_project(USER_ALPHA, "First")
        second = project_service.create_project(USER_ALPHA, "Second")

        assert second.data.sort_order == 1

    def test_name_taken_for_same_owner(self, project_service):
        project_service.create_project(USER_ALPHA, "Launch")
        result = project_service.create_project(USER_ALPHA, "Launch")

        assert result.is_failure
        assert result.error_code == "project_name_taken"

    def test_same_name_for_other_owner(self, project_service):
        project_service.create_project(USER_ALPHA, "Launch")
        result = project_service.create_project(USER_BETA, "Launch")

        assert result.is_success

    def test_invalid_name(self, project_service):
        result = project_service.create_project(USER_ALPHA, "L")

        assert result.is_failure
        assert result.error_code == "invalid_project_name"

    def test_storage_uniqueness_violation_is_name_taken(self, clock):
        """A race past the pre-check is still reported as project_name_taken."""
        from trillo_mcp.domain.errors import ProjectNameTakenError

        project_repo = MagicMock()
        project_repo.get_by_name.return_value = DomainError.not_found("Project", "Launch")
        project_repo.list_by_owner.return_value = DomainSuccess.create(data=[])
        project_repo.create.return_value = ProjectNameTakenError("Launch").to_result()
        service = ProjectService(project_repo, MagicMock(), now=clock)

        result = service.create_project(USER_ALPHA, "Launch")

        assert result.error_code == "project_name_taken"


class TestListAndGet:
    def test_list_is_owner_scoped(self, project_service):
        project_service.create_project(USER_ALPHA, "Alpha project")
        project_service.create_project(USER_BETA, "Beta project")

        result = project_service.list_projects(USER_ALPHA)

        assert [p.name for p in result.data] == ["Alpha project"]

    def test_get_other_owner_is_not_found(self, project_service, project):
        result = project_service.get_project(USER_BETA, project.id)

        assert result.error_code == "project_not_found"

    def test_timestamps_are_timezone_aware(self, project_service, project):
        fetched = project_service.get_project(USER_ALPHA, project.id).data

        assert fetched.created_at.tzinfo is not None
        assert fetched.created_at == project.created_at


class TestUpdateProject:
    def test_rename(self, project_service, project):
        result = project_service.update_project(USER_ALPHA, project.id, name="Relaunch")

        assert result.is_success
        assert result.data.name == "Relaunch"
        assert result.data.description == "Ship v1"
        assert result.data.updated_at > project.updated_at

    def test_clear_description(self, project_service, project):
        result = project_service.update_project(USER_ALPHA, project.id, description=None)

        assert result.data.description is None
        assert result.data.name == "Launch"

    def test_rename_to_own_name_is_allowed(self, project_service, project):
        result = project_service.update_project(USER_ALPHA, project.id, name=" Launch ")

        assert result.is_success

    def test_rename_to_taken_name(self, project_service, project):
        project_service.create_project(USER_ALPHA, "Other")

        result = project_service.update_project(USER_ALPHA, project.id, name="Other")

        assert result.error_code == "project_name_taken"

    def test_requires_a_field(self, project_service, project):
        result = project_service.update_project(USER_ALPHA, project.id)

        assert result.error_code == "validation_error"

    def test_rejects_unknown_fields(self, project_service, project):
        result = project_service.update_project(USER_ALPHA, project.id, sort_order=3)

        assert result.error_code == "validation_error"
        assert result.error_details["fields"] == ["sort_order"]

    def test_other_owner_cannot_update(self, project_service, project):
        result = project_service.update_project(USER_BETA, project.id, name="Stolen")

        assert result.error_code == "project_not_found"


class TestReorderProjects:
    def _create(self, project_service, *names):
        return [project_service.create_project(USER_ALPHA, name).data.id for name in names]

    def test_reorder(self, project_service):
        first, second, third = self._create(project_service, "One", "Two", "Three")

        result = project_service.reorder_projects(USER_ALPHA, [third, first, second])

        assert result.is_success
        assert [p.id for p in result.data] == [third, first, second]
        assert [p.sort_order for p in result.data] == [0, 1, 2]
        listed = project_service.list_projects(USER_ALPHA).data
        assert [p.id for p in listed] == [third, first, second]

    def test_incomplete_list(self, project_service):
        first, _ = self._create(project_service, "One", "Two")

        result = project_service.reorder_projects(USER_ALPHA, [first])

        assert result.error_code == "invalid_project_order"

    def test_duplicates(self, project_service):
        first, _ = self._create(project_service, "One", "Two")

        result = project_service.reorder_projects(USER_ALPHA, [first, first])

        assert result.error_code == "invalid_project_order"

    def test_non_string_ids(self, project_service):
        first, _ = self._create(project_service, "One", "Two")

        result = project_service.reorder_projects(USER_ALPHA, [first, {"id": first}])

        assert result.error_code == "invalid_project_order"

    def test_unknown_id(self, project_service):
        first, _ = self._create(project_service, "One", "Two")

        result = project_service.reorder_projects(USER_ALPHA, [first, "missing-id"])

        assert result.error_code == "project_not_found"

    def test_other_owners_project_is_unknown(self, project_service):
        (mine,) = self._create(project_service, "Mine")
        theirs = project_service.create_project(USER_BETA, "Theirs").data.id

        result = project_service.reorder_projects(USER_ALPHA, [theirs])

        assert result.error_code == "project_not_found"
        assert project_service.get_project(USER_ALPHA, mine).is_success


class TestDeleteProject:
    def test_delete_purges_tasks(self, project_service, task_service, task_repo, project):
        epic = task_service.create_task(
            USER_ALPHA, project.id, "Q1 epic", "Product", task_type="epic"
        ).data
        task_service.create_task(USER_ALPHA, project.id, "Draft plan", "Ops", epic_id=epic.id)

        result = project_service.delete_project(USER_ALPHA, project.id)

        assert result.is_success
        assert project_service.get_project(USER_ALPHA, project.id).error_code == "project_not_found"
        assert task_repo.get(epic.id, USER_ALPHA).error_code == "task_not_found"

    def test_delete_unknown(self, project_service):
        result = project_service.delete_project(USER_ALPHA, "missing-id")

        assert result.error_code == "project_not_found"

    def test_other_owner_cannot_delete(self, project_service, task_service, project):
        task_service.create_task(USER_ALPHA, project.id, "Draft plan", "Ops")

        result = project_service.delete_project(USER_BETA, project.id)

        assert result.error_code == "project_not_found"
        assert len(task_service.list_board_tasks(USER_ALPHA, project.id).data) == 1

    def test_purge_runs_before_project_delete(self, clock):
        calls = []
        project = ProjectDTO(
            id="p-1",
            owner_user_id=USER_ALPHA,
            name="Launch",
            created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
        )
        project_repo = MagicMock()
        project_repo.get.return_value = DomainSuccess.create(data=project)
        project_repo.delete.side_effect = lambda *args: calls.append("project") or DomainSuccess.create(
            data={"deleted": True}
        )
        task_repo = MagicMock()
        task_repo.delete_by_board.side_effect = lambda *args: calls.append("tasks") or DomainSuccess.create(
            data=3
        )

        result = ProjectService(project_repo, task_repo, now=clock).delete_project(USER_ALPHA, "p-1")

        assert result.is_success
        assert calls == ["tasks", "project"]
        task_repo.delete_by_board.assert_called_once_with("p-1", USER_ALPHA)
