"""
Fixtures for API tests: a fresh app per test wired to SQLite.

Notifications are replaced by a Mock so tests can assert on wake events,
and last_used_at updates are disabled to keep SQLite single-threaded.
"""

from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from core.app_context import AppContext
from core.config_loader import (
    AppConfig, AuthConfig, NotificationConfig, PaymentConfig, RateLimitConfig
)
from web.backend.app import create_app
from web.backend.dependencies import get_app_context

WEBHOOK_SECRET = 'whsec_test'


@pytest.fixture
def api_config():
    return AppConfig(
        auth=AuthConfig(bcrypt_rounds=4),
        rate_limit=RateLimitConfig(max_requests=100, window_seconds=60),
        notifications=NotificationConfig(enabled=False),
        payments=PaymentConfig(webhook_secret=WEBHOOK_SECRET),
    )


@pytest.fixture
def notifier():
    mock = Mock()
    mock.get_queue_status.return_value = {"status": "thread_mode", "queue_length": 0}
    return mock


@pytest.fixture
def app_context(api_config, session_factory, notifier, fixed_now):
    ctx = AppContext.build(api_config, session_factory=session_factory)
    ctx.credentials.recorder.shutdown()
    ctx.credentials.recorder = None
    ctx.notification_service = notifier
    ctx.admission.notifier = notifier
    ctx.admission.clock = lambda: fixed_now
    return ctx


@pytest.fixture
def client(app_context):
    app = create_app()
    app.dependency_overrides[get_app_context] = lambda: app_context
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(app_context):
    """Issue a key for user_id and return the Authorization header."""
    def make(user_id):
        secret, _ = app_context.credentials.issue(user_id, 'test')
        return {'Authorization': f'Bearer {secret}'}
    return make
