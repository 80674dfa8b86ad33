"""Máquina de estados da conversa de qualificação.

Responsabilidades:
- Dono do passo atual, dos dados do lead e do histórico (append-only)
- Gate de validação antes de qualquer avanço
- Chamada ao gerador de respostas sob o guard `busy`
- Emissão de eventos de analytics (fire-and-forget)

Uma instância por sessão; todas as mutações passam por start()/submit().
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager

from leadgen_chat.ai.prompts import START_TRIGGER
from leadgen_chat.ai.response_generator import ResponseGenerator
from leadgen_chat.domain.models import GeneratedReply, LeadData, Turn
from leadgen_chat.domain.progress import progress_percent
from leadgen_chat.domain.steps import INITIAL_STEP, ChatStep, is_terminal, next_transition
from leadgen_chat.domain.validation import normalize_phone, validate
from leadgen_chat.infra.analytics import (
    EVENT_CHAT_START,
    EVENT_LEAD_SUBMITTED,
    EVENT_MESSAGE_SENT,
    EVENT_STEP_COMPLETE,
    AnalyticsSink,
    EventParams,
    NullAnalyticsSink,
)
from leadgen_chat.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)


class ConversationError(Exception):
    """Uso indevido do motor pelo chamador."""


class ConversationBusyError(ConversationError):
    """Submissão enquanto uma geração está em andamento."""


class ConversationClosedError(ConversationError):
    """Submissão após o lead ter sido enviado."""


class ConversationNotStartedError(ConversationError):
    """Submissão antes de start()."""


class ConversationEngine:
    """Motor da conversa (uma sessão)."""

    def __init__(
        self,
        generator: ResponseGenerator,
        analytics: AnalyticsSink | None = None,
        *,
        session_id: str | None = None,
    ) -> None:
        self._generator = generator
        self._analytics = analytics or NullAnalyticsSink()
        self.session_id = session_id or uuid.uuid4().hex
        self._step: ChatStep = INITIAL_STEP
        self._lead = LeadData()
        self._history: list[Turn] = []
        self._busy = False
        self._started = False
        self._completed = False
        self._has_error = False

    # ------------------------------------------------------------------
    # Estado observável
    # ------------------------------------------------------------------
    @property
    def step(self) -> ChatStep:
        return self._step

    @property
    def progress(self) -> int:
        return progress_percent(self._step)

    @property
    def history(self) -> tuple[Turn, ...]:
        """Snapshot ordenado do histórico."""
        return tuple(self._history)

    @property
    def lead(self) -> LeadData:
        return self._lead

    @property
    def final_lead(self) -> LeadData | None:
        """Dados do lead somente após a conclusão."""
        return self._lead if self._completed else None

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def started(self) -> bool:
        return self._started

    @property
    def completed(self) -> bool:
        return self._completed

    @property
    def has_error(self) -> bool:
        """True se o último turno do bot veio do fallback técnico."""
        return self._has_error

    @property
    def quick_replies(self) -> tuple[str, ...]:
        """Opções do último turno, se ele for do bot."""
        if self._history and self._history[-1].role == "bot":
            return self._history[-1].options
        return ()

    # ------------------------------------------------------------------
    # Entradas
    # ------------------------------------------------------------------
    async def start(self) -> Turn:
        """Inicia (ou reinicia) a sessão e gera a saudação."""
        if self._busy:
            raise ConversationBusyError("generation in flight")

        self._step = INITIAL_STEP
        self._lead = LeadData()
        self._history = []
        self._completed = False
        self._has_error = False
        self._started = True
        self._track(EVENT_CHAT_START, {})

        with self._busy_guard():
            reply = await self._generator.generate(self._step, START_TRIGGER, self._lead)

        logger.info(
            "conversation_started",
            extra={"session_id": self._short_id, "fallback": reply.fallback},
        )
        return self._append_bot_reply(reply)

    async def submit(self, raw_answer: str) -> list[Turn]:
        """Processa uma resposta do visitante.

        Returns:
            Turnos adicionados ao histórico (vazio para entrada em branco).

        Raises:
            ConversationNotStartedError, ConversationClosedError,
            ConversationBusyError: uso indevido pelo chamador.
        """
        if not raw_answer or not raw_answer.strip():
            return []
        self._ensure_accepting()

        appended = [self._append(Turn.from_user(raw_answer))]
        current = self._step
        self._track(
            EVENT_MESSAGE_SENT,
            {"step": current.value, "message_length": len(raw_answer)},
        )

        transition = next_transition(current)
        result = validate(current, raw_answer)
        if transition is None or not result.accepted:
            logger.debug(
                "answer_rejected",
                extra={"session_id": self._short_id, "step": current.value},
            )
            self._has_error = False
            appended.append(self._append(Turn.from_bot(result.error_message or "")))
            return appended

        updated_lead = self._lead
        if transition.lead_field is not None:
            value = (
                normalize_phone(raw_answer)
                if transition.lead_field == "phone"
                else raw_answer.strip()
            )
            updated_lead = self._lead.with_field(transition.lead_field, value)

        with self._busy_guard():
            reply = await self._generator.generate(
                transition.next_step, raw_answer, updated_lead
            )

        # Commit: passo + lead + turno do bot
        self._step = transition.next_step
        self._lead = updated_lead
        appended.append(self._append_bot_reply(reply))
        self._track(
            EVENT_STEP_COMPLETE,
            {"step": current.value, "next_step": self._step.value},
        )
        logger.info(
            "step_advanced",
            extra={
                "session_id": self._short_id,
                "from_step": current.value,
                "to_step": self._step.value,
                "fallback": reply.fallback,
            },
        )

        if is_terminal(self._step):
            self._completed = True
            self._track(
                EVENT_LEAD_SUBMITTED,
                {
                    "niche": self._lead.niche,
                    "budget": self._lead.budget,
                    "name": self._lead.name,
                },
            )
            logger.info(
                "lead_submitted",
                extra={"session_id": self._short_id, "lead_complete": self._lead.is_complete()},
            )

        return appended

    async def select_quick_reply(self, text: str) -> list[Turn]:
        """Resposta rápida: equivalente a submit()."""
        return await self.submit(text)

    # ------------------------------------------------------------------
    # Internos
    # ------------------------------------------------------------------
    @property
    def _short_id(self) -> str:
        return self.session_id[:8] + "..."

    def _ensure_accepting(self) -> None:
        if not self._started:
            raise ConversationNotStartedError("start() must be called first")
        if self._completed:
            raise ConversationClosedError("conversation already completed")
        if self._busy:
            raise ConversationBusyError("generation in flight")

    @contextmanager
    def _busy_guard(self) -> Iterator[None]:
        """Marca `busy` durante a geração; libera em qualquer saída."""
        self._busy = True
        try:
            yield
        finally:
            self._busy = False

    def _append(self, turn: Turn) -> Turn:
        self._history.append(turn)
        return turn

    def _append_bot_reply(self, reply: GeneratedReply) -> Turn:
        self._has_error = reply.fallback
        return self._append(Turn.from_bot(reply.text, reply.options))

    def _track(self, event: str, params: EventParams) -> None:
        try:
            self._analytics.track(event, params, session_id=self.session_id)
        except Exception as e:  # noqa: BLE001
            logger.warning(
                "analytics_track_failed",
                extra={"event": event, "error_type": type(e).__name__},
            )
