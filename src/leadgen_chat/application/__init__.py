"""Camada de aplicação: motor da conversa, registro de sessões e fábricas."""

from leadgen_chat.application.conversation import (
    ConversationBusyError,
    ConversationClosedError,
    ConversationEngine,
    ConversationError,
    ConversationNotStartedError,
)
from leadgen_chat.application.session_registry import (
    InMemorySessionRegistry,
    SessionNotFoundError,
)

__all__ = [
    "ConversationEngine",
    "ConversationError",
    "ConversationBusyError",
    "ConversationClosedError",
    "ConversationNotStartedError",
    "InMemorySessionRegistry",
    "SessionNotFoundError",
]
