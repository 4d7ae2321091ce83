"""Shared pytest fixtures and configuration.

Fixture Categories:
1. Settings: mock_settings
2. Relay state: registry, recording_sender
3. Infrastructure: mock_logfire, logfire_capture, respx_mock
4. Application: app, test_client, sender_client
"""

import os
from contextlib import contextmanager
from unittest.mock import MagicMock, Mock, patch

import pytest

# Suppress "logfire not configured" warnings, tests never ship logs
os.environ.setdefault("LOGFIRE_IGNORE_NO_CONFIG", "1")

import logfire
import respx

from src.api.dependencies import get_message_sender, get_recipient_registry
from src.config import Settings, get_settings
from src.db.recipient_registry import InMemoryRecipientRegistry
from src.services.messaging_protocol import RecordingMessageSender

# Modules holding a module-level ``logfire`` reference
LOGFIRE_MODULES = [
    "src.services.facebook_service",
    "src.services.event_ingestor",
    "src.services.notifier",
    "src.db.recipient_registry",
    "src.middleware.correlation_id",
    "src.logging_config",
    "src.main",
]


@pytest.fixture
def respx_mock():
    """Respx mock fixture for HTTP mocking."""
    with respx.mock(assert_all_called=False) as mock:
        yield mock


# =============================================================================
# Settings
# =============================================================================


@pytest.fixture
def mock_settings(monkeypatch):
    """Mock application settings with both secrets configured."""
    settings = Settings(
        page_access_token="test-page-token",
        verify_token="test-verify-token",
        env="local",
        auto_reply_enabled=True,
        notify_max_concurrency=1,
        sentry_dsn=None,
        logfire_token=None,
    )
    get_settings.cache_clear()
    monkeypatch.setattr("src.main.get_settings", lambda: settings)
    monkeypatch.setattr("src.cli.relay_cli.get_settings", lambda: settings)
    return settings


# =============================================================================
# Relay State
# =============================================================================


@pytest.fixture
def registry():
    """Fresh, empty recipient registry."""
    return InMemoryRecipientRegistry()


@pytest.fixture
def recording_sender():
    """Sender that records calls instead of hitting the Graph API."""
    return RecordingMessageSender()


# =============================================================================
# Logfire
# =============================================================================


@pytest.fixture
def mock_logfire(monkeypatch):
    """
    Mock Logfire for testing without actual logging.

    Useful for tests that don't need to verify logging behavior.
    """

    @contextmanager
    def mock_span(*args, **kwargs):
        yield {}

    mock_logfire_module = MagicMock()
    mock_logfire_module.info = Mock()
    mock_logfire_module.warning = Mock()
    mock_logfire_module.warn = Mock()
    mock_logfire_module.error = Mock()
    mock_logfire_module.span = mock_span
    mock_logfire_module.configure = Mock()
    mock_logfire_module.instrument_fastapi = Mock()
    mock_logfire_module.instrument_pydantic = Mock()

    for module in LOGFIRE_MODULES:
        monkeypatch.setattr(f"{module}.logfire", mock_logfire_module)

    return mock_logfire_module


@pytest.fixture
def logfire_capture():
    """
    Capture Logfire logs for testing.

    Yields a list of (level, args, kwargs) tuples.
    """
    captured_logs = []

    def _capture(level):
        def _inner(*args, **kwargs):
            captured_logs.append((level, args, kwargs))

        return _inner

    with (
        patch.object(logfire, "info", side_effect=_capture("info")),
        patch.object(logfire, "warning", side_effect=_capture("warning")),
        patch.object(logfire, "error", side_effect=_capture("error")),
    ):
        yield captured_logs


# =============================================================================
# Application
# =============================================================================


@pytest.fixture
def app(mock_settings, registry):
    """Fresh application wired to mock settings and a fresh registry.

    The real FacebookMessageSender stays in place, so HTTP calls must be
    mocked with respx (see sender_client for the recording variant).
    """
    from src.main import create_app

    application = create_app()
    application.dependency_overrides[get_settings] = lambda: mock_settings
    application.dependency_overrides[get_recipient_registry] = lambda: registry
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def test_client(app, mock_logfire):
    """FastAPI TestClient for E2E tests."""
    from fastapi.testclient import TestClient

    return TestClient(app)


@pytest.fixture
def sender_client(app, mock_logfire, recording_sender):
    """TestClient whose outbound sends go to recording_sender."""
    from fastapi.testclient import TestClient

    app.dependency_overrides[get_message_sender] = lambda: recording_sender
    return TestClient(app)


def page_envelope(*sender_ids, object_type="page"):
    """Build a webhook envelope with one messaging event per sender id.

    ``None`` produces an event without a sender.
    """
    events = []
    for index, sender_id in enumerate(sender_ids):
        event = {
            "recipient": {"id": "page-123"},
            "timestamp": 1700000000000 + index,
            "message": {"mid": f"m_{index}", "text": "hello"},
        }
        if sender_id is not None:
            event["sender"] = {"id": sender_id}
        events.append(event)
    return {
        "object": object_type,
        "entry": [{"id": "page-123", "time": 1700000000000, "messaging": events}],
    }


@pytest.fixture
def make_envelope():
    """Factory fixture for webhook envelopes (see page_envelope)."""
    return page_envelope
