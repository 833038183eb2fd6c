"""Shared pytest fixtures and configuration.

Fixture Categories:
1. Configuration: settings
2. Test doubles: recording_message_service, recording_messaging_service
3. Services: messenger_service
4. Applications: test_client (recording doubles), facebook_test_client (real transport)
5. Logging: logfire_capture
"""

import os
from unittest.mock import Mock, patch

import pytest

# Logfire is not configured in tests; silence the "not configured" warning
os.environ.setdefault("LOGFIRE_IGNORE_NO_CONFIG", "1")

import logfire  # noqa: E402

from src.config import Settings  # noqa: E402
from src.services.message_service import SampleMessageService  # noqa: E402
from src.services.messenger_service import MessengerService  # noqa: E402


# =============================================================================
# Test Doubles
# =============================================================================


class RecordingMessageService(SampleMessageService):
    """Sample responder that records every request it receives."""

    def __init__(self):
        super().__init__()
        self.requests = []

    def handle_event(self, request):
        self.requests.append(request)
        return super().handle_event(request)


class RecordingMessagingService:
    """MessagingService double that records deliveries.

    Optionally raises ``error`` after recording, to simulate failed deliveries.
    """

    def __init__(self, error: Exception | None = None):
        self.deliveries = []
        self.error = error

    async def send_delivery(self, delivery) -> None:
        self.deliveries.append(delivery)
        if self.error is not None:
            raise self.error


# =============================================================================
# Configuration
# =============================================================================


@pytest.fixture
def settings():
    """Settings with fixed tokens and default Graph API endpoint."""
    return Settings(
        token="test-verify-token",
        access_token="test-page-token",
        env="local",
        logfire_token=None,
        sentry_dsn=None,
    )


# =============================================================================
# Services
# =============================================================================


@pytest.fixture
def recording_message_service():
    return RecordingMessageService()


@pytest.fixture
def recording_messaging_service():
    return RecordingMessagingService()


@pytest.fixture
def messenger_service(settings, recording_message_service, recording_messaging_service):
    """MessengerService wired to recording doubles."""
    return MessengerService(
        verify_token=settings.token,
        message_service=recording_message_service,
        messaging_service=recording_messaging_service,
    )


# =============================================================================
# Applications
# =============================================================================


@pytest.fixture
def test_client(settings, recording_message_service, recording_messaging_service):
    """FastAPI TestClient whose deliveries go to the recording double."""
    from fastapi.testclient import TestClient

    from src.main import create_app

    app = create_app(
        settings,
        message_service=recording_message_service,
        messaging_service=recording_messaging_service,
    )
    return TestClient(app)


@pytest.fixture
def facebook_test_client(settings):
    """FastAPI TestClient using the real Facebook transport (mock it with respx)."""
    from fastapi.testclient import TestClient

    from src.main import create_app

    return TestClient(create_app(settings))


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture
def logfire_capture():
    """
    Capture Logfire calls for assertion.

    Yields a list of ``(level, args, kwargs)`` tuples.
    """
    captured_logs = []

    def recorder(level):
        def record(*args, **kwargs):
            captured_logs.append((level, args, kwargs))

        return Mock(side_effect=record)

    with (
        patch.object(logfire, "debug", recorder("debug")),
        patch.object(logfire, "info", recorder("info")),
        patch.object(logfire, "warn", recorder("warn")),
        patch.object(logfire, "error", recorder("error")),
    ):
        yield captured_logs


def logs_with_message(captured_logs, message: str, level: str | None = None):
    """Filter captured logfire calls by message template and level."""
    return [
        log
        for log in captured_logs
        if log[1] and log[1][0] == message and (level is None or log[0] == level)
    ]


@pytest.fixture
def find_logs():
    return logs_with_message
