"""Product analytics through PostHog."""

import logging

import posthog

from taskboard.config import settings

logger = logging.getLogger(__name__)


class PostHogService:
    """
    Sends auth and task events to PostHog.

    Every call is a no-op when ``posthog_api_key`` is unset, which is the
    case in local runs and tests.
    """

    def __init__(self) -> None:
        self.enabled = bool(settings.posthog_api_key)
        if self.enabled:
            posthog.api_key = settings.posthog_api_key
            posthog.host = settings.posthog_host

    def capture(self, distinct_id: str, event: str, properties: dict | None = None) -> None:
        if self.enabled:
            posthog.capture(distinct_id=distinct_id, event=event, properties=properties or {})

    def identify(self, distinct_id: str, properties: dict | None = None) -> None:
        """Attach profile properties (name, local user id) to ``distinct_id``."""
        if self.enabled:
            posthog.identify(distinct_id=distinct_id, properties=properties or {})
