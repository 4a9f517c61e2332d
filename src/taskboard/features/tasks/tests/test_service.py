"""Tests for TaskService."""

from unittest.mock import Mock
from uuid import uuid4

import pytest

from taskboard.auth.models import Principal
from taskboard.features.tasks.exceptions import TaskNotFoundError, TaskValidationError
from taskboard.features.tasks.schemas import Present, TaskCreateRequest, TaskPatch
from taskboard.features.tasks.service import TaskService


@pytest.fixture
def analytics() -> Mock:
    return Mock()


@pytest.fixture
def service(task_repository, analytics: Mock) -> TaskService:
    return TaskService(task_repository, analytics=analytics)


@pytest.fixture
def other_principal() -> Principal:
    return Principal(email="someone-else@example.com")


class TestCreate:
    def test_create_assigns_id_and_timestamp(self, service: TaskService, principal) -> None:
        task = service.create_task(
            principal, TaskCreateRequest(title="Buy milk", description="2%")
        )

        assert task.completed is False
        assert task.id is not None
        assert task.created_at is not None

    def test_null_completed_defaults_to_false(self, service: TaskService, principal) -> None:
        task = service.create_task(
            principal, TaskCreateRequest(title="Buy milk", description="2%", completed=None)
        )

        assert task.completed is False

    def test_whitespace_title_is_accepted(self, service: TaskService, principal) -> None:
        # Only missing/empty values are rejected server-side
        task = service.create_task(principal, TaskCreateRequest(title="  ", description="2%"))

        assert task.title == "  "

    @pytest.mark.parametrize(
        "title, description",
        [("", "2%"), (None, "2%"), ("Buy milk", ""), ("Buy milk", None)],
    )
    def test_missing_fields_raise_validation_error(
        self, service: TaskService, principal, task_repository, title, description
    ) -> None:
        with pytest.raises(TaskValidationError, match="Title and description are required"):
            service.create_task(
                principal, TaskCreateRequest(title=title, description=description)
            )

        assert task_repository.rows == {}

    def test_create_tracks_event(self, service: TaskService, principal, analytics: Mock) -> None:
        task = service.create_task(principal, TaskCreateRequest(title="a", description="b"))

        analytics.capture.assert_called_once_with(
            distinct_id=principal.email,
            event="task_created",
            properties={"task_id": str(task.id)},
        )


class TestVisibility:
    def test_tasks_are_visible_to_every_principal(
        self, service: TaskService, principal, other_principal
    ) -> None:
        created = service.create_task(principal, TaskCreateRequest(title="a", description="b"))

        assert [task.id for task in service.list_tasks(other_principal)] == [created.id]

        service.update_task(other_principal, str(created.id), TaskPatch(completed=Present(True)))
        service.delete_task(other_principal, str(created.id))

        assert service.list_tasks(principal) == []


class TestUpdate:
    def test_unknown_task_raises_not_found(self, service: TaskService, principal) -> None:
        with pytest.raises(TaskNotFoundError):
            service.update_task(principal, str(uuid4()), TaskPatch(title=Present("x")))

    def test_only_present_fields_are_written(
        self, service: TaskService, principal, task_repository
    ) -> None:
        created = service.create_task(principal, TaskCreateRequest(title="a", description="b"))
        task_repository.update_task = Mock(wraps=task_repository.update_task)

        service.update_task(principal, str(created.id), TaskPatch(completed=Present(True)))

        task_repository.update_task.assert_called_once_with(str(created.id), {"completed": True})

    def test_present_field_with_same_value_is_still_written(
        self, service: TaskService, principal, task_repository
    ) -> None:
        created = service.create_task(principal, TaskCreateRequest(title="a", description="b"))
        task_repository.update_task = Mock(wraps=task_repository.update_task)

        service.update_task(principal, str(created.id), TaskPatch(title=Present("a")))

        task_repository.update_task.assert_called_once_with(str(created.id), {"title": "a"})

    def test_empty_patch_skips_write(
        self, service: TaskService, principal, task_repository
    ) -> None:
        created = service.create_task(principal, TaskCreateRequest(title="a", description="b"))
        task_repository.update_task = Mock(wraps=task_repository.update_task)

        result = service.update_task(principal, str(created.id), TaskPatch())

        assert result == created
        task_repository.update_task.assert_not_called()

    def test_row_deleted_mid_update_raises_not_found(
        self, service: TaskService, principal, task_repository
    ) -> None:
        created = service.create_task(principal, TaskCreateRequest(title="a", description="b"))
        task_repository.update_task = Mock(return_value=None)

        with pytest.raises(TaskNotFoundError):
            service.update_task(principal, str(created.id), TaskPatch(title=Present("x")))


class TestDelete:
    def test_delete_twice_raises_not_found(self, service: TaskService, principal) -> None:
        created = service.create_task(principal, TaskCreateRequest(title="a", description="b"))

        service.delete_task(principal, str(created.id))

        with pytest.raises(TaskNotFoundError):
            service.delete_task(principal, str(created.id))

    def test_store_errors_propagate(self, service: TaskService, principal, task_repository) -> None:
        task_repository.fail_with = ConnectionError("connection refused")

        with pytest.raises(ConnectionError):
            service.list_tasks(principal)
