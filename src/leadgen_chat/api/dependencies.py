"""Dependências injetadas nas rotas."""

from __future__ import annotations

from fastapi import Request

from leadgen_chat.application.factory import ConversationFactory
from leadgen_chat.application.session_registry import InMemorySessionRegistry
from leadgen_chat.config.settings import Settings


def get_settings(request: Request) -> Settings:
    """Retorna settings da aplicação."""

    return request.app.state.settings


def get_session_registry(request: Request) -> InMemorySessionRegistry:
    """Retorna o registro de sessões ativo."""

    return request.app.state.session_registry


def get_conversation_factory(request: Request) -> ConversationFactory:
    """Retorna a fábrica de engines."""

    return request.app.state.conversation_factory
