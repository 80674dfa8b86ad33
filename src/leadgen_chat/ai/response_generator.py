"""Gerador de respostas: próxima fala do bot + respostas rápidas.

Responsabilidade:
- Montar prompt do passo de destino (instrução + contexto do lead + schema)
- Chamar o TextBackend com retry sequencial e backoff
- Validar a saída contra GeneratedReply
- Retornar fallback técnico quando tudo falha
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

from leadgen_chat.ai.contracts.response_generation import ReplyRequest
from leadgen_chat.ai.parser import ReplyParseError, parse_generated_reply
from leadgen_chat.ai.prompts import format_user_input, get_system_instruction
from leadgen_chat.ai.retry import RetryPolicy
from leadgen_chat.ai.text_backend import CompletionPrompt, TextBackend, TextBackendError
from leadgen_chat.domain.models import GeneratedReply, LeadData
from leadgen_chat.domain.steps import ChatStep
from leadgen_chat.observability.logging import get_logger, log_fallback

logger: logging.Logger = get_logger(__name__)

FALLBACK_TEXT = "Произошла ошибка при обращении к ИИ. Пожалуйста, попробуйте позже."

Sleep = Callable[[float], Awaitable[None]]


def fallback_reply() -> GeneratedReply:
    """Resposta segura usada quando a geração falha."""
    return GeneratedReply(text=FALLBACK_TEXT, options=[], fallback=True)


class ResponseGenerator:
    """Adaptador entre a conversa e o backend de texto."""

    def __init__(
        self,
        backend: TextBackend,
        policy: RetryPolicy | None = None,
        *,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._backend = backend
        self._policy = policy or RetryPolicy()
        self._sleep = sleep

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    async def generate(
        self, step: ChatStep, user_message: str, lead: LeadData
    ) -> GeneratedReply:
        """Gera a fala que abre `step`.

        Contrato:
        - Nunca lança exceção
        - Falhas transitórias (backend/parse) são retentadas
        - Esgotadas as tentativas, retorna fallback_reply()
        """
        started = time.perf_counter()
        try:
            request = ReplyRequest(step=step, user_message=user_message, lead=lead)
            prompt = CompletionPrompt(
                step=step,
                system=get_system_instruction(request),
                user=format_user_input(request),
            )
            reply, reason = await self._attempt_all(prompt)
        except Exception as e:  # noqa: BLE001
            logger.error(
                "response_generation_failed",
                extra={"error_type": type(e).__name__, "step": step.value},
            )
            reply, reason = None, "unexpected_error"

        elapsed_ms = round((time.perf_counter() - started) * 1000, 1)
        if reply is None:
            log_fallback(logger, "response_generation", reason=reason, elapsed_ms=elapsed_ms)
            return fallback_reply()

        logger.debug(
            "Response generated",
            extra={
                "step": step.value,
                "options_count": len(reply.options),
                "elapsed_ms": elapsed_ms,
            },
        )
        return reply

    async def _attempt_all(
        self, prompt: CompletionPrompt
    ) -> tuple[GeneratedReply | None, str | None]:
        """Executa as tentativas em sequência; retorna (reply, motivo da falha)."""
        reason: str | None = None
        for attempt in range(1, self._policy.max_attempts + 1):
            try:
                raw = await self._backend.complete(prompt)
                return parse_generated_reply(raw), None
            except TextBackendError as e:
                reason = "backend_error"
                error_type = str(e)
            except ReplyParseError as e:
                reason = "parse_error"
                error_type = e.reason

            logger.warning(
                "response_generation_attempt_failed",
                extra={
                    "step": prompt.step.value,
                    "attempt": attempt,
                    "max_attempts": self._policy.max_attempts,
                    "reason": reason,
                    "error": error_type,
                    "backend": self._backend.name,
                },
            )
            if self._policy.should_retry(attempt):
                delay = self._policy.delay_for(attempt)
                logger.info(
                    "Aguardando backoff antes de retry",
                    extra={"backoff_seconds": delay, "next_attempt": attempt + 1},
                )
                await self._sleep(delay)

        logger.error(
            "Esgotou tentativas de geração",
            extra={"step": prompt.step.value, "total_attempts": self._policy.max_attempts},
        )
        return None, f"{reason}_retries_exhausted"
