from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from leadgen_chat.ai.response_generator import ResponseGenerator
from leadgen_chat.ai.retry import RetryPolicy
from leadgen_chat.ai.text_backend import ScriptedTextBackend
from leadgen_chat.api.app import create_app
from leadgen_chat.application.conversation import ConversationEngine
from leadgen_chat.config.settings import Settings, get_settings
from tests.helpers.fakes import FakeTextBackend, RecordingAnalytics, RecordingSleep


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        environment="test",
        llm_enabled=False,
        analytics_backend="none",
        generator_backoff_seconds=0.0,
    )


@pytest.fixture()
def backend() -> FakeTextBackend:
    return FakeTextBackend()


@pytest.fixture()
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture()
def analytics() -> RecordingAnalytics:
    return RecordingAnalytics()


@pytest.fixture()
def generator(backend: FakeTextBackend, sleep: RecordingSleep) -> ResponseGenerator:
    return ResponseGenerator(backend, RetryPolicy(), sleep=sleep)


@pytest.fixture()
def engine(generator: ResponseGenerator, analytics: RecordingAnalytics) -> ConversationEngine:
    return ConversationEngine(generator, analytics, session_id="session-under-test")


@pytest.fixture()
def client(settings: Settings, analytics: RecordingAnalytics):
    app = create_app(settings, backend=ScriptedTextBackend(), analytics=analytics)
    with TestClient(app) as test_client:
        yield test_client
