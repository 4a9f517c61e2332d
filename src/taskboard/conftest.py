"""Pytest configuration and shared fixtures."""

from collections.abc import Iterator
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient

from taskboard.auth.dependencies import get_current_principal
from taskboard.auth.models import Principal
from taskboard.database.models import Task, TaskCreate
from taskboard.database.repositories import get_task_repository
from taskboard.main import app
from taskboard.services.rate_limiter import limiter


class InMemoryTaskRepository:
    """
    Stand-in for TaskRepository backed by a dict.

    ``created_at`` advances by one second per insert so recency ordering is
    deterministic. Set ``fail_with`` to make every call raise.
    """

    def __init__(self) -> None:
        self.rows: dict[str, Task] = {}
        self.fail_with: Exception | None = None
        self._clock = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)

    def _check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    def list_tasks(self) -> list[Task]:
        self._check()
        return sorted(self.rows.values(), key=lambda task: task.created_at, reverse=True)

    def get_task(self, task_id: UUID | str) -> Task | None:
        self._check()
        return self.rows.get(str(task_id))

    def create_task(self, data: TaskCreate) -> Task:
        self._check()
        self._clock += timedelta(seconds=1)
        task = Task(id=uuid4(), created_at=self._clock, **data.model_dump())
        self.rows[str(task.id)] = task
        return task

    def update_task(self, task_id: UUID | str, changes: dict[str, Any]) -> Task | None:
        self._check()
        existing = self.rows.get(str(task_id))
        if existing is None:
            return None
        updated = existing.model_copy(update=changes)
        self.rows[str(task_id)] = updated
        return updated

    def delete_task(self, task_id: UUID | str) -> bool:
        self._check()
        return self.rows.pop(str(task_id), None) is not None


@pytest.fixture(autouse=True)
def disable_rate_limits() -> Iterator[None]:
    """Keep slowapi limits from tripping across the test session."""
    previous = limiter.enabled
    limiter.enabled = False
    yield
    limiter.enabled = previous


@pytest.fixture
def client() -> TestClient:
    """
    Provide FastAPI test client for API testing.

    Example:
        >>> def test_health(client):
        >>>     response = client.get("/health")
        >>>     assert response.status_code == 200
    """
    return TestClient(app)


@pytest.fixture
def principal() -> Principal:
    """Authenticated caller used by API tests."""
    return Principal(
        email="test@example.com",
        user_id=UUID("123e4567-e89b-12d3-a456-426614174000"),
        subject="auth-user-1",
        name="Test User",
        image="https://avatars.example.com/test.png",
    )


@pytest.fixture
def task_repository() -> InMemoryTaskRepository:
    return InMemoryTaskRepository()


@pytest.fixture
def store_only(task_repository: InMemoryTaskRepository) -> Iterator[InMemoryTaskRepository]:
    """Swap in the in-memory store but leave authentication real."""
    app.dependency_overrides[get_task_repository] = lambda: task_repository
    yield task_repository
    app.dependency_overrides.clear()


@pytest.fixture
def api_client(
    store_only: InMemoryTaskRepository, principal: Principal
) -> Iterator[TestClient]:
    """Test client with a signed-in principal and the in-memory store."""
    app.dependency_overrides[get_current_principal] = lambda: principal
    yield TestClient(app)
    app.dependency_overrides.clear()
