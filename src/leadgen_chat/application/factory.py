"""Fábricas que montam gerador e engines a partir de Settings."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from leadgen_chat.ai.response_generator import ResponseGenerator
from leadgen_chat.ai.retry import RetryPolicy
from leadgen_chat.ai.text_backend import OpenAITextBackend, ScriptedTextBackend, TextBackend
from leadgen_chat.application.conversation import ConversationEngine
from leadgen_chat.observability.logging import get_logger

if TYPE_CHECKING:
    from leadgen_chat.config.settings import Settings
    from leadgen_chat.infra.analytics import AnalyticsSink

logger: logging.Logger = get_logger(__name__)


def create_text_backend(settings: Settings) -> TextBackend:
    """OpenAI quando LLM_ENABLED, senão roteiro determinístico (fail-safe)."""
    if settings.llm_enabled:
        if not settings.openai_api_key:
            raise ValueError("LLM_ENABLED=true requer OPENAI_API_KEY configurado")
        return OpenAITextBackend(
            settings.openai_api_key,
            model=settings.openai_model,
            timeout_seconds=settings.openai_timeout_seconds,
            temperature=settings.openai_temperature,
            max_tokens=settings.openai_max_tokens,
        )

    logger.info("llm_disabled_using_scripted_backend")
    return ScriptedTextBackend()


def create_response_generator(
    settings: Settings, backend: TextBackend | None = None
) -> ResponseGenerator:
    """Gerador com política de retry vinda das configurações."""
    policy = RetryPolicy(
        max_attempts=settings.generator_max_attempts,
        base_delay_seconds=settings.generator_backoff_seconds,
    )
    return ResponseGenerator(backend or create_text_backend(settings), policy)


class ConversationFactory:
    """Cria uma engine por sessão compartilhando gerador e analytics."""

    def __init__(self, generator: ResponseGenerator, analytics: AnalyticsSink) -> None:
        self._generator = generator
        self._analytics = analytics

    def __call__(self) -> ConversationEngine:
        return ConversationEngine(self._generator, self._analytics)
