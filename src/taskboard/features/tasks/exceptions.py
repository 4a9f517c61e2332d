"""Custom exceptions for the task service."""


class TaskError(Exception):
    """Base exception for all task-related errors."""

    pass


class TaskValidationError(TaskError):
    """Raised when a create payload is missing required fields."""

    pass


class TaskNotFoundError(TaskError):
    """Raised when no task exists for the given identifier."""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id
