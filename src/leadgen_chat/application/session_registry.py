"""Registro de sessões em memória (uma ConversationEngine por sessão).

Sem persistência: reiniciar o processo descarta todas as sessões.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from leadgen_chat.application.conversation import ConversationEngine
from leadgen_chat.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)


class SessionNotFoundError(KeyError):
    """Sessão inexistente ou expirada."""


class InMemorySessionRegistry:
    """Mapa session_id → engine com expiração por inatividade."""

    def __init__(
        self,
        idle_timeout_seconds: float = 1800.0,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._idle_timeout = idle_timeout_seconds
        self._clock = clock or time.monotonic
        self._sessions: dict[str, tuple[ConversationEngine, float]] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def add(self, engine: ConversationEngine) -> None:
        self.purge_expired()
        self._sessions[engine.session_id] = (engine, self._clock())
        logger.debug(
            "Session registered (in-memory)",
            extra={"session_id": engine.session_id[:8] + "..."},
        )

    def get(self, session_id: str) -> ConversationEngine:
        """Retorna a engine e renova o prazo de inatividade.

        Raises:
            SessionNotFoundError: sessão desconhecida ou expirada.
        """
        entry = self._sessions.get(session_id)
        if entry is None:
            raise SessionNotFoundError(session_id)

        engine, last_seen = entry
        now = self._clock()
        # Sessão ocupada nunca expira no meio de uma geração
        if now - last_seen > self._idle_timeout and not engine.busy:
            del self._sessions[session_id]
            logger.debug(
                "Session expired (in-memory)",
                extra={"session_id": session_id[:8] + "..."},
            )
            raise SessionNotFoundError(session_id)

        self._sessions[session_id] = (engine, now)
        return engine

    def delete(self, session_id: str) -> bool:
        if self._sessions.pop(session_id, None) is None:
            return False
        logger.debug(
            "Session deleted (in-memory)",
            extra={"session_id": session_id[:8] + "..."},
        )
        return True

    def purge_expired(self) -> int:
        """Remove sessões ociosas; retorna quantas foram removidas."""
        now = self._clock()
        expired = [
            sid
            for sid, (engine, last_seen) in self._sessions.items()
            if now - last_seen > self._idle_timeout and not engine.busy
        ]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.info("sessions_purged", extra={"count": len(expired)})
        return len(expired)
