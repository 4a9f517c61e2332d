"""Database connection, models and repositories."""

from taskboard.database.connection import get_supabase_admin_client
from taskboard.database.repositories import (
    TaskRepository,
    UserRepository,
    get_task_repository,
    get_user_repository,
)
from taskboard.database.utils import SupabaseQueryBuilder, get_query_builder

__all__ = [
    "get_supabase_admin_client",
    "SupabaseQueryBuilder",
    "get_query_builder",
    "TaskRepository",
    "UserRepository",
    "get_task_repository",
    "get_user_repository",
]
