"""Task operations on behalf of an authenticated principal."""

import logging

from fastapi import Depends

from taskboard.auth.models import Principal
from taskboard.database.models import Task, TaskCreate
from taskboard.database.repositories import TaskRepository, get_task_repository
from taskboard.features.tasks.exceptions import TaskNotFoundError, TaskValidationError
from taskboard.features.tasks.schemas import TaskCreateRequest, TaskPatch
from taskboard.services import PostHogService

logger = logging.getLogger(__name__)


class TaskService:
    """
    Create, list, update and delete tasks.

    Every operation takes the caller's principal explicitly. Tasks are not
    scoped to their creator: any principal sees and may change every task.
    Store errors are not caught here; the HTTP handlers turn them into 500s.
    """

    def __init__(self, tasks: TaskRepository, analytics: PostHogService | None = None) -> None:
        self.tasks = tasks
        self.analytics = analytics or PostHogService()

    def list_tasks(self, principal: Principal) -> list[Task]:
        """All tasks, newest first."""
        return self.tasks.list_tasks()

    def create_task(self, principal: Principal, request: TaskCreateRequest) -> Task:
        """
        Persist a new task.

        Raises:
            TaskValidationError: If title or description is missing or empty
        """
        if not request.title or not request.description:
            raise TaskValidationError("Title and description are required")

        task = self.tasks.create_task(
            TaskCreate(
                title=request.title,
                description=request.description,
                completed=bool(request.completed),
            )
        )

        logger.info(f"Task {task.id} created by {principal.email}")
        self.analytics.capture(
            distinct_id=principal.email,
            event="task_created",
            properties={"task_id": str(task.id)},
        )
        return task

    def update_task(self, principal: Principal, task_id: str, patch: TaskPatch) -> Task:
        """
        Apply a partial update; only fields present in ``patch`` are written.

        Raises:
            TaskNotFoundError: If the task does not exist
        """
        existing = self.tasks.get_task(task_id)
        if existing is None:
            raise TaskNotFoundError(task_id)

        if patch.is_empty():
            return existing

        updated = self.tasks.update_task(task_id, patch.changes())
        if updated is None:
            # Deleted between the lookup and the write
            raise TaskNotFoundError(task_id)

        self.analytics.capture(
            distinct_id=principal.email,
            event="task_updated",
            properties={"task_id": task_id, "fields": sorted(patch.changes())},
        )
        return updated

    def delete_task(self, principal: Principal, task_id: str) -> None:
        """
        Remove a task.

        Raises:
            TaskNotFoundError: If the task does not exist
        """
        if self.tasks.get_task(task_id) is None:
            raise TaskNotFoundError(task_id)

        if not self.tasks.delete_task(task_id):
            raise TaskNotFoundError(task_id)

        logger.info(f"Task {task_id} deleted by {principal.email}")
        self.analytics.capture(
            distinct_id=principal.email,
            event="task_deleted",
            properties={"task_id": task_id},
        )


def get_task_service(tasks: TaskRepository = Depends(get_task_repository)) -> TaskService:
    """FastAPI dependency wiring the service to the task repository."""
    return TaskService(tasks)
