"""Shared fixtures for watch action tests."""

from datetime import datetime, timezone

import pytest

from tests.helpers.email_service import RecordingEmailService
from watch_actions.execution import Payload, WatchExecutionContext
from watch_actions.logging.context import clear_log_context
from watch_actions.mail import EmailActionFactory, HtmlSanitizer
from watch_actions.templates import JinjaTemplateEngine

EXECUTION_TIME = datetime(2025, 11, 4, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def clean_log_context():
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def email_service():
    return RecordingEmailService()


@pytest.fixture
def engine():
    return JinjaTemplateEngine()


@pytest.fixture
def factory(email_service, engine):
    return EmailActionFactory(email_service, engine, sanitizer=HtmlSanitizer())


@pytest.fixture
def ctx():
    """Execution of watch1 with an empty payload and some metadata."""
    return WatchExecutionContext.create(
        "watch1",
        payload=Payload.empty(),
        metadata={"_key": "_val"},
        execution_time=EXECUTION_TIME,
    )


@pytest.fixture
def ctx_with_payload():
    return WatchExecutionContext.create(
        "watch1",
        payload=Payload({"hits": {"total": 3}, "host": "db-1"}),
        metadata={"team": "ops"},
        execution_time=EXECUTION_TIME,
    )
