"""Pydantic models for database entities."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class User(BaseModel):
    """Local user record, created lazily on first sign-in."""

    id: UUID
    name: str | None = None
    email: str = Field(max_length=320)
    image: str | None = None
    created_at: datetime | None = None


class Task(BaseModel):
    """Task row as stored in the ``tasks`` table."""

    id: UUID
    title: str
    description: str
    completed: bool = Field(default=False)
    created_at: datetime


class TaskCreate(BaseModel):
    """Schema for inserting a task; id and created_at are assigned by the database."""

    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    completed: bool = False
