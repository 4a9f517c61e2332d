"""Client for the taskboard API and the task list view."""

from taskboard.client.api import ApiError, TasksApiClient
from taskboard.client.models import Session, Task
from taskboard.client.view import SessionStatus, TaskBoardView

__all__ = [
    "ApiError",
    "TasksApiClient",
    "Session",
    "Task",
    "SessionStatus",
    "TaskBoardView",
]
