"""Table-level access for tasks and users."""

import logging
from typing import Any
from uuid import UUID

from taskboard.database.models import Task, TaskCreate, User
from taskboard.database.utils import SupabaseQueryBuilder, get_query_builder

logger = logging.getLogger(__name__)

TASKS_TABLE = "tasks"
USERS_TABLE = "users"


def _is_uuid(value: UUID | str) -> bool:
    if isinstance(value, UUID):
        return True
    try:
        UUID(value)
    except (TypeError, ValueError):
        return False
    return True


class TaskRepository:
    """
    CRUD access to the ``tasks`` table.

    Tasks are not scoped to a user: every query sees every row.
    Identifiers that are not UUIDs are treated as unknown rows so that
    PostgREST never gets a chance to reject them with a cast error.
    """

    def __init__(self, db: SupabaseQueryBuilder | None = None) -> None:
        self._db = db

    @property
    def db(self) -> SupabaseQueryBuilder:
        # Resolved on first use so store misconfiguration surfaces inside handlers
        if self._db is None:
            self._db = get_query_builder()
        return self._db

    def list_tasks(self) -> list[Task]:
        """Return all tasks, newest first."""
        records = self.db.list_records(TASKS_TABLE, order_by="created_at", order_desc=True)
        return [Task(**record) for record in records]

    def get_task(self, task_id: UUID | str) -> Task | None:
        if not _is_uuid(task_id):
            return None
        record = self.db.get_by_id(TASKS_TABLE, task_id)
        return Task(**record) if record else None

    def create_task(self, data: TaskCreate) -> Task:
        record = self.db.insert_record(TASKS_TABLE, data.model_dump())
        if not record:
            raise RuntimeError("Insert into tasks returned no row")
        return Task(**record)

    def update_task(self, task_id: UUID | str, changes: dict[str, Any]) -> Task | None:
        """Write ``changes`` to the task and return the updated row, or None if it is gone."""
        if not _is_uuid(task_id):
            return None
        record = self.db.update_record(TASKS_TABLE, task_id, changes)
        return Task(**record) if record else None

    def delete_task(self, task_id: UUID | str) -> bool:
        if not _is_uuid(task_id):
            return False
        return self.db.delete_record(TASKS_TABLE, task_id)


class UserRepository:
    """Access to the ``users`` table, keyed by email."""

    def __init__(self, db: SupabaseQueryBuilder | None = None) -> None:
        self._db = db

    @property
    def db(self) -> SupabaseQueryBuilder:
        if self._db is None:
            self._db = get_query_builder()
        return self._db

    def get_by_email(self, email: str) -> User | None:
        record = self.db.get_by_field(USERS_TABLE, "email", email)
        return User(**record) if record else None

    def ensure_user(self, name: str | None, email: str, image: str | None) -> User:
        """
        Create the user if no row with this email exists, else leave it unchanged.

        Uses ON CONFLICT (email) DO NOTHING so concurrent first sign-ins cannot
        produce duplicates, then re-reads the row to return the stored values.

        Raises:
            RuntimeError: If the row cannot be read back after the upsert
        """
        inserted = self.db.upsert_record(
            USERS_TABLE,
            {"name": name, "email": email, "image": image},
            conflict_columns=["email"],
            ignore_duplicates=True,
        )
        if inserted:
            logger.info(f"Created user for {email}")
            return User(**inserted)

        user = self.get_by_email(email)
        if user is None:
            raise RuntimeError(f"User {email} missing after upsert")
        return user


def get_task_repository() -> TaskRepository:
    """FastAPI dependency returning a repository bound to the admin client."""
    return TaskRepository()


def get_user_repository() -> UserRepository:
    """FastAPI dependency returning a user repository bound to the admin client."""
    return UserRepository()
