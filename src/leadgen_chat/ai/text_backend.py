"""Backends de geração de texto.

- TextBackend: protocolo opaco (prompt → texto bruto JSON)
- OpenAITextBackend: ChatGPT via AsyncOpenAI em modo JSON
- ScriptedTextBackend: respostas determinísticas por passo (dev/offline)

Backends não fazem retry: a política fica no ResponseGenerator.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Protocol

from openai import APIError, APITimeoutError, AsyncOpenAI

from leadgen_chat.domain.steps import ChatStep
from leadgen_chat.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)


class TextBackendError(Exception):
    """Falha transitória do backend (rede, API, timeout)."""

    def __init__(self, message: str, *, backend: str) -> None:
        super().__init__(message)
        self.backend = backend


@dataclass(frozen=True, slots=True)
class CompletionPrompt:
    """Prompt pronto para o backend."""

    step: ChatStep
    system: str
    user: str


class TextBackend(Protocol):
    """Capacidade externa de geração de texto."""

    name: str

    async def complete(self, prompt: CompletionPrompt) -> str:
        """Retorna o texto bruto (esperado JSON) ou lança TextBackendError."""
        ...


class OpenAITextBackend:
    """Backend OpenAI (chat completions, saída em JSON)."""

    name = "openai"

    def __init__(
        self,
        api_key: str | None = None,
        *,
        model: str = "gpt-4o-mini",
        timeout_seconds: float = 10.0,
        temperature: float = 0.7,
        max_tokens: int = 400,
        client: AsyncOpenAI | None = None,
    ) -> None:
        # max_retries=0: retries são sequenciais e controlados pelo RetryPolicy
        self._client = client or AsyncOpenAI(api_key=api_key, max_retries=0)
        self._model = model
        self._timeout = timeout_seconds
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def complete(self, prompt: CompletionPrompt) -> str:
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": prompt.system},
                    {"role": "user", "content": prompt.user},
                ],
                temperature=self._temperature,
                max_tokens=self._max_tokens,
                response_format={"type": "json_object"},
                timeout=self._timeout,
            )
        except (APIError, APITimeoutError) as e:
            logger.warning(
                "openai_completion_error",
                extra={"error_type": type(e).__name__, "step": prompt.step.value},
            )
            raise TextBackendError(type(e).__name__, backend=self.name) from e

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""


# Roteiro offline: (texto, opções). `{answer}` recebe a última mensagem.
SCRIPTED_REPLIES: dict[ChatStep, tuple[str, list[str]]] = {
    ChatStep.WELCOME: (
        "Здравствуйте! 👋 Это Smart LeadGen — мы создаём чат-лендинги с высокой "
        "конверсией. Готовы увеличить продажи?",
        ["Да, интересно", "Расскажите подробнее"],
    ),
    ChatStep.BENEFITS: (
        "Наш чат-лендинг работает 24/7, мгновенно квалифицирует заявки и "
        "интегрируется с вашей CRM. Подберём решение для вашего бизнеса?",
        ["Да, давайте", "Конечно"],
    ),
    ChatStep.QUALIFICATION_NICHE: (
        "Отлично! В какой нише работает ваш бизнес?",
        ["Недвижимость", "Онлайн-школа", "E-commerce", "Услуги"],
    ),
    ChatStep.QUALIFICATION_BUDGET: (
        "Понял: «{answer}». Какой у вас примерный ежемесячный рекламный бюджет?",
        ["до 50 000 ₽", "50–150 000 ₽", "150 000+ ₽"],
    ),
    ChatStep.QUALIFICATION_PLANS: (
        "Спасибо! Какие у вас основные цели на ближайший месяц?",
        ["Больше заявок", "Снизить стоимость лида", "Масштабирование"],
    ),
    ChatStep.NAME_COLLECTION: (
        "Отличные планы! Как к вам обращаться?",
        [],
    ),
    ChatStep.CONTACT_COLLECTION: (
        "Приятно познакомиться, {answer}! Оставьте номер телефона — стратег "
        "свяжется с вами с персональным предложением.",
        [],
    ),
    ChatStep.COMPLETED: (
        "Спасибо! Менеджер свяжется с вами в ближайшее время по номеру {answer}. "
        "Хорошего дня! 🚀",
        [],
    ),
}


class ScriptedTextBackend:
    """Backend determinístico (sem LLM) com o mesmo contrato JSON."""

    name = "scripted"

    def __init__(self, replies: dict[ChatStep, tuple[str, list[str]]] | None = None) -> None:
        self._replies = replies or SCRIPTED_REPLIES

    async def complete(self, prompt: CompletionPrompt) -> str:
        text, options = self._replies[prompt.step]
        answer = prompt.user.strip()[:100]
        return json.dumps(
            {"text": text.replace("{answer}", answer), "options": options},
            ensure_ascii=False,
        )
