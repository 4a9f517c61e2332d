"""Task list feature: CRUD endpoints over the tasks table."""

from taskboard.features.tasks.handlers import router

__all__ = ["router"]
