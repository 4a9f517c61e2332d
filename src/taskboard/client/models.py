"""Client-side models for API payloads."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Task(BaseModel):
    """Task as received from the API."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    description: str
    completed: bool = False
    created_at: datetime = Field(alias="createdAt")


class SessionUser(BaseModel):
    id: str | None = None
    name: str | None = None
    email: str
    image: str | None = None


class Session(BaseModel):
    """Signed-in session as reported by GET /api/auth/session."""

    user: SessionUser
