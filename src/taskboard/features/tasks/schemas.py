"""Request/response schemas for the task API."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from taskboard.database.models import Task

T = TypeVar("T")

PATCHABLE_FIELDS = ("title", "description", "completed")


class TaskCreateRequest(BaseModel):
    """
    Request body for POST /tasks.

    Fields are optional at the schema level so that missing or empty values
    reach the service and fail with a 400 rather than a schema error.
    """

    title: str | None = Field(None, description="Task title (required, non-empty)")
    description: str | None = Field(None, description="Task description (required, non-empty)")
    completed: bool | None = Field(None, description="Defaults to false")

    model_config = ConfigDict(
        json_schema_extra={"example": {"title": "Buy milk", "description": "2%"}}
    )


class TaskUpdateRequest(BaseModel):
    """Request body for PATCH /tasks/{id}: any subset of the mutable fields."""

    title: str | None = None
    description: str | None = None
    completed: bool | None = None

    model_config = ConfigDict(json_schema_extra={"example": {"completed": True}})

    @field_validator("title", "description", "completed")
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        # Only runs for supplied values; omitted fields keep their default.
        if value is None:
            raise ValueError("field may be omitted but not null")
        return value


@dataclass(frozen=True)
class Present(Generic[T]):
    """A field value that was explicitly supplied in a request."""

    value: T


@dataclass(frozen=True)
class TaskPatch:
    """
    Partial update for a task.

    A field left as None was absent from the request and must not be
    written; a ``Present`` field is written even if its value equals the
    stored one.
    """

    title: Present[str] | None = None
    description: Present[str] | None = None
    completed: Present[bool] | None = None

    @classmethod
    def from_request(cls, request: TaskUpdateRequest) -> "TaskPatch":
        supplied = request.model_fields_set
        return cls(
            **{
                name: Present(getattr(request, name))
                for name in PATCHABLE_FIELDS
                if name in supplied
            }
        )

    def changes(self) -> dict[str, Any]:
        """Column values to write, limited to the supplied fields."""
        changes = {}
        for name in PATCHABLE_FIELDS:
            field = getattr(self, name)
            if field is not None:
                changes[name] = field.value
        return changes

    def is_empty(self) -> bool:
        return not self.changes()


class TaskResponse(BaseModel):
    """Task as returned by the API."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    description: str
    completed: bool
    created_at: datetime = Field(alias="createdAt")

    @classmethod
    def from_task(cls, task: Task) -> "TaskResponse":
        return cls(
            id=str(task.id),
            title=task.title,
            description=task.description,
            completed=task.completed,
            created_at=task.created_at,
        )


class TaskDeleteResponse(BaseModel):
    """Confirmation returned by DELETE /tasks/{id}."""

    message: str = "Task deleted successfully"
