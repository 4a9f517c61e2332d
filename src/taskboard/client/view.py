"""Single-page task list view driven by the session status."""

import logging
from enum import Enum
from typing import Protocol

from taskboard.client.api import TasksApiClient
from taskboard.client.models import Session, Task

logger = logging.getLogger(__name__)

DEFAULT_DESCRIPTION = "Task description"


class SessionStatus(str, Enum):
    """Session lifecycle as seen by the view."""

    LOADING = "loading"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


class Navigator(Protocol):
    """Where the view sends the browser (e.g. the sign-in route)."""

    def push(self, route: str) -> None: ...


class TaskBoardView:
    """
    View state for the task list page.

    Status moves from ``loading`` to ``authenticated`` or
    ``unauthenticated``. On the first transition into ``authenticated`` the
    view reports the sign-in (so the server provisions the local user) and
    fetches the task list once. Mutations change local state only
    after the server confirms them; failures are logged and leave the list
    at its last confirmed value.
    """

    def __init__(
        self,
        api: TasksApiClient,
        navigator: Navigator,
        signin_route: str = "/auth/signin",
    ) -> None:
        self.api = api
        self.navigator = navigator
        self.signin_route = signin_route

        self.status = SessionStatus.LOADING
        self.session: Session | None = None
        self.title = ""
        self.tasks: list[Task] = []
        self.loading = True
        self.adding_task = False
        self._signed_in = False

    async def refresh_session(self) -> None:
        """Ask the API for the current session and apply the resulting status."""
        try:
            session = await self.api.get_session()
        except Exception as e:
            # Status stays as-is; no redirect on a transport failure
            logger.error(f"Error checking session: {e}")
            return

        if session is None:
            await self.set_status(SessionStatus.UNAUTHENTICATED)
        else:
            await self.set_status(SessionStatus.AUTHENTICATED, session)

    async def set_status(self, status: SessionStatus, session: Session | None = None) -> None:
        self.status = status
        self.session = session

        if status is SessionStatus.UNAUTHENTICATED:
            self.navigator.push(self.signin_route)
        elif status is SessionStatus.AUTHENTICATED and not self._signed_in:
            self._signed_in = True
            await self.record_sign_in()
            await self.load_tasks()

    async def record_sign_in(self) -> None:
        """Have the server provision the local user, then adopt the returned session."""
        try:
            self.session = await self.api.sign_in()
        except Exception as e:
            # The board still works; the session just has no local user id
            logger.error(f"Error recording sign-in: {e}")

    async def load_tasks(self) -> None:
        if self.status is not SessionStatus.AUTHENTICATED:
            return

        try:
            self.loading = True
            self.tasks = await self.api.fetch_tasks()
        except Exception as e:
            logger.error(f"Error loading tasks: {e}")
        finally:
            self.loading = False

    @property
    def can_add(self) -> bool:
        return not self.adding_task and self.title.strip() != ""

    async def add_task(self) -> None:
        if not self.can_add:
            return

        try:
            self.adding_task = True
            new_task = await self.api.create_task(self.title, DEFAULT_DESCRIPTION, False)
            self.tasks = [*self.tasks, new_task]
            self.title = ""
        except Exception as e:
            logger.error(f"Error adding task: {e}")
        finally:
            self.adding_task = False

    async def delete_task(self, task_id: str) -> None:
        try:
            await self.api.delete_task(task_id)
            self.tasks = [task for task in self.tasks if task.id != task_id]
        except Exception as e:
            logger.error(f"Error deleting task: {e}")

    async def toggle_task(self, task_id: str, completed: bool) -> None:
        try:
            await self.api.toggle_task_completion(task_id, completed)
            self.tasks = [
                task.model_copy(update={"completed": completed}) if task.id == task_id else task
                for task in self.tasks
            ]
        except Exception as e:
            logger.error(f"Error toggling task: {e}")

    async def sign_out(self) -> None:
        try:
            await self.api.sign_out()
        except Exception as e:
            logger.error(f"Error signing out: {e}")

        self.session = None
        self.tasks = []
        self.status = SessionStatus.UNAUTHENTICATED
        self.navigator.push(self.signin_route)

    def render(self) -> str | None:
        """
        Plain-text rendering of the page.

        Returns None when unauthenticated (the redirect is in flight).
        """
        if self.status is SessionStatus.LOADING:
            return "Loading..."
        if self.status is SessionStatus.UNAUTHENTICATED or self.session is None:
            return None

        lines = ["Task Manager", f"Signed in as {self.session.user.name or self.session.user.email}"]
        if self.loading:
            lines.append("Loading tasks...")
        elif not self.tasks:
            lines.extend(["No tasks yet!", "Add a task to get started"])
        else:
            lines.extend(f"[{'x' if task.completed else ' '}] {task.title}" for task in self.tasks)
        return "\n".join(lines)
