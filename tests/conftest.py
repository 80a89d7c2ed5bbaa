"""Pytest configuration and fixtures."""

import contextlib
import os
import shutil
import tempfile
from datetime import datetime, timedelta, timezone
from typing import Any, Generator, List, Optional

import pytest

from trillo_mcp.config import load_settings
from trillo_mcp.database.orm_manager import ORMManager, reset_orm_manager
from trillo_mcp.domain.entities.task_suggestion import TaskSuggestionContext
from trillo_mcp.services.service_factory import reset_service_factory

USER_ALPHA = "user-alpha"


class FixedClock:
    """Deterministic clock; every call advances by one second."""

    def __init__(self, start: Optional[datetime] = None):
        self.current = start or datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.current = self.current + timedelta(seconds=1)
        return self.current


class FakeSuggestionGenerator:
    """In-memory generator returning a canned batch or raising a canned error."""

    def __init__(self, suggestions: Optional[List[Any]] = None, error: Optional[Exception] = None):
        self.suggestions = suggestions if suggestions is not None else []
        self.error = error
        self.contexts: List[TaskSuggestionContext] = []

    def generate_suggestions(self, context: TaskSuggestionContext) -> List[Any]:
        self.contexts.append(context)
        if self.error is not None:
            raise self.error
        return self.suggestions


@pytest.fixture(scope="function", autouse=True)
def reset_singletons():
    """Reset singletons and set up test database before each test."""
    # Create a unique temp database for this test
    tmpdir = tempfile.mkdtemp()
    db_path = os.path.join(tmpdir, "test.db")

    # Store old env var
    old_db_path = os.environ.get("TRILLO_DB_PATH")

    # Set env var BEFORE resetting singletons
    os.environ["TRILLO_DB_PATH"] = db_path

    # Now reset singletons - they will pick up the test database path
    reset_orm_manager()
    reset_service_factory()

    yield

    # Cleanup after test
    reset_orm_manager()
    reset_service_factory()

    # Restore old env var
    if old_db_path is not None:
        os.environ["TRILLO_DB_PATH"] = old_db_path
    elif "TRILLO_DB_PATH" in os.environ:
        del os.environ["TRILLO_DB_PATH"]

    # Clean up temp directory
    with contextlib.suppress(Exception):
        shutil.rmtree(tmpdir)


@pytest.fixture
def temp_db_path() -> Generator[str, None, None]:
    """Get the test database path."""
    # Return the path set by reset_singletons fixture
    yield os.environ["TRILLO_DB_PATH"]


@pytest.fixture
def settings(temp_db_path: str):
    """Settings pointing at the test database, without an LLM provider."""
    return load_settings({"TRILLO_DB_PATH": temp_db_path, "TRILLO_ACTOR_USER_ID": USER_ALPHA})


@pytest.fixture
def orm_manager(temp_db_path: str) -> Generator[ORMManager, None, None]:
    """Create an ORM manager with a temporary database."""
    manager = ORMManager(temp_db_path)
    yield manager
    manager.close()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def project_repo(orm_manager: ORMManager):
    """Create a project repository."""
    from trillo_mcp.database.repositories import ProjectRepository

    return ProjectRepository(orm_manager)


@pytest.fixture
def task_repo(orm_manager: ORMManager):
    """Create a task repository."""
    from trillo_mcp.database.repositories import TaskRepository

    return TaskRepository(orm_manager)


@pytest.fixture
def project_service(project_repo, task_repo, clock):
    """Create a project service with all dependencies."""
    from trillo_mcp.services import ProjectService

    return ProjectService(project_repo=project_repo, task_repo=task_repo, now=clock)


@pytest.fixture
def task_service(task_repo, project_repo, clock):
    """Create a task service with all dependencies."""
    from trillo_mcp.services import TaskService

    return TaskService(task_repo=task_repo, project_repo=project_repo, now=clock)


@pytest.fixture
def fake_generator() -> FakeSuggestionGenerator:
    return FakeSuggestionGenerator()


@pytest.fixture
def suggestion_service(project_repo, task_repo, fake_generator, clock):
    """Create a suggestion service backed by the fake generator."""
    from trillo_mcp.services import ProjectTaskSuggestionService

    service = ProjectTaskSuggestionService(
        project_repo=project_repo,
        task_repo=task_repo,
        generator=fake_generator,
        now=clock,
        timeout_seconds=2.0,
    )
    yield service
    service.shutdown()


@pytest.fixture
def project(project_service):
    """A project owned by USER_ALPHA, with a description."""
    return project_service.create_project(USER_ALPHA, "Launch", "Ship v1").get_data_or_raise()
