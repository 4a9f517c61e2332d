"""Tests for the PostHog analytics service."""

from unittest.mock import patch

import pytest

from taskboard.services.posthog import PostHogService


@pytest.fixture
def mock_posthog():
    with patch("taskboard.services.posthog.posthog") as mock:
        yield mock


def test_without_api_key_nothing_is_sent(monkeypatch, mock_posthog) -> None:
    monkeypatch.setattr("taskboard.services.posthog.settings.posthog_api_key", None)

    service = PostHogService()
    service.capture("user@example.com", "task_created", {"task_id": "abc"})
    service.identify("user@example.com", {"name": "User"})

    assert service.enabled is False
    mock_posthog.capture.assert_not_called()
    mock_posthog.identify.assert_not_called()


def test_with_api_key_events_are_forwarded(monkeypatch, mock_posthog) -> None:
    monkeypatch.setattr("taskboard.services.posthog.settings.posthog_api_key", "phc_test")

    service = PostHogService()
    service.capture("user@example.com", "task_deleted")
    service.identify("user@example.com", {"name": "User"})

    assert mock_posthog.api_key == "phc_test"
    mock_posthog.capture.assert_called_once_with(
        distinct_id="user@example.com", event="task_deleted", properties={}
    )
    mock_posthog.identify.assert_called_once_with(
        distinct_id="user@example.com", properties={"name": "User"}
    )
