"""Shared services module for external integrations."""

from taskboard.services.posthog import PostHogService

__all__ = [
    "PostHogService",
]
