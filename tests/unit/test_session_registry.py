"""Testes do registro de sessões em memória."""

from __future__ import annotations

import pytest

from leadgen_chat.ai.response_generator import ResponseGenerator
from leadgen_chat.application.conversation import ConversationEngine
from leadgen_chat.application.session_registry import (
    InMemorySessionRegistry,
    SessionNotFoundError,
)


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def registry(clock: FakeClock) -> InMemorySessionRegistry:
    return InMemorySessionRegistry(idle_timeout_seconds=60, clock=clock)


def _engine(generator: ResponseGenerator, session_id: str) -> ConversationEngine:
    return ConversationEngine(generator, session_id=session_id)


class TestInMemorySessionRegistry:
    def test_add_and_get(
        self, registry: InMemorySessionRegistry, generator: ResponseGenerator
    ) -> None:
        engine = _engine(generator, "abc")
        registry.add(engine)

        assert registry.get("abc") is engine
        assert len(registry) == 1

    def test_unknown_session(self, registry: InMemorySessionRegistry) -> None:
        with pytest.raises(SessionNotFoundError):
            registry.get("missing")

    def test_expired_session_is_removed(
        self,
        registry: InMemorySessionRegistry,
        clock: FakeClock,
        generator: ResponseGenerator,
    ) -> None:
        registry.add(_engine(generator, "abc"))
        clock.advance(61)

        with pytest.raises(SessionNotFoundError):
            registry.get("abc")
        assert len(registry) == 0

    def test_get_refreshes_idle_deadline(
        self,
        registry: InMemorySessionRegistry,
        clock: FakeClock,
        generator: ResponseGenerator,
    ) -> None:
        engine = _engine(generator, "abc")
        registry.add(engine)

        clock.advance(50)
        registry.get("abc")
        clock.advance(50)

        assert registry.get("abc") is engine

    def test_delete(
        self, registry: InMemorySessionRegistry, generator: ResponseGenerator
    ) -> None:
        registry.add(_engine(generator, "abc"))

        assert registry.delete("abc") is True
        assert registry.delete("abc") is False
        with pytest.raises(SessionNotFoundError):
            registry.get("abc")

    def test_purge_expired_keeps_fresh_sessions(
        self,
        registry: InMemorySessionRegistry,
        clock: FakeClock,
        generator: ResponseGenerator,
    ) -> None:
        registry.add(_engine(generator, "old"))
        clock.advance(40)
        registry.add(_engine(generator, "fresh"))
        clock.advance(30)

        assert registry.purge_expired() == 1
        assert len(registry) == 1
        assert registry.get("fresh").session_id == "fresh"

    def test_not_found_is_key_error(self) -> None:
        assert issubclass(SessionNotFoundError, KeyError)
