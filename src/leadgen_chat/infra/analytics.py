"""Sinks de analytics (fire-and-forget).

Eventos emitidos pela conversa:
- chat_start
- message_sent {step, message_length}
- step_complete {step, next_step}
- lead_submitted {niche, budget, name}

Nenhum sink pode bloquear ou alterar o estado da conversa.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Protocol

import httpx

from leadgen_chat.observability.logging import get_logger

if TYPE_CHECKING:
    from leadgen_chat.config.settings import Settings

logger: logging.Logger = get_logger(__name__)

EventParams = Mapping[str, str | int | float | bool | None]

EVENT_CHAT_START = "chat_start"
EVENT_MESSAGE_SENT = "message_sent"
EVENT_STEP_COMPLETE = "step_complete"
EVENT_LEAD_SUBMITTED = "lead_submitted"

# Params sem dados pessoais; demais valores nunca vão para o log
LOGGABLE_PARAMS = frozenset({"step", "next_step", "message_length"})


class AnalyticsSink(Protocol):
    """Destino de eventos de analytics."""

    def track(self, event: str, params: EventParams, *, session_id: str) -> None:
        """Registra evento; não deve bloquear."""
        ...


class NullAnalyticsSink:
    """Descarta todos os eventos."""

    def track(self, event: str, params: EventParams, *, session_id: str) -> None:
        return None


class LoggingAnalyticsSink:
    """Registra eventos como log estruturado (modo debug/dev).

    Dados do lead (nicho, orçamento, nome) aparecem só como chaves em
    `redacted_params`; os valores ficam restritos a LOGGABLE_PARAMS.
    """

    def __init__(self, level: int = logging.INFO) -> None:
        self._level = level

    def track(self, event: str, params: EventParams, *, session_id: str) -> None:
        logger.log(
            self._level,
            "analytics_event",
            extra={
                "event": event,
                "session_id": session_id[:8] + "...",
                "params": {k: v for k, v in params.items() if k in LOGGABLE_PARAMS},
                "redacted_params": sorted(k for k in params if k not in LOGGABLE_PARAMS),
            },
        )


class MeasurementProtocolSink:
    """Envia eventos ao GA4 Measurement Protocol em background.

    `track` agenda o POST no loop corrente e retorna imediatamente.
    Sem loop ativo, o evento é descartado.
    """

    def __init__(
        self,
        measurement_id: str,
        api_secret: str,
        *,
        endpoint: str,
        timeout_seconds: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._measurement_id = measurement_id
        self._api_secret = api_secret
        self._endpoint = endpoint
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout_seconds))
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        """Quantidade de envios ainda em andamento."""
        return len(self._pending)

    def track(self, event: str, params: EventParams, *, session_id: str) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("analytics_dropped_no_loop", extra={"event": event})
            return

        payload = {
            "client_id": session_id,
            "events": [
                {
                    "name": event,
                    "params": {k: v for k, v in params.items() if v is not None},
                }
            ],
        }
        task = loop.create_task(self._send(event, payload))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _send(self, event: str, payload: dict) -> None:
        try:
            response = await self._client.post(
                self._endpoint,
                params={
                    "measurement_id": self._measurement_id,
                    "api_secret": self._api_secret,
                },
                json=payload,
            )
            if response.status_code >= 400:
                logger.warning(
                    "analytics_rejected",
                    extra={"event": event, "status_code": response.status_code},
                )
        except httpx.HTTPError as e:
            logger.warning(
                "analytics_send_failed",
                extra={"event": event, "error_type": type(e).__name__},
            )

    async def flush(self) -> None:
        """Aguarda envios pendentes."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def aclose(self) -> None:
        """Aguarda pendentes e fecha o cliente HTTP."""
        await self.flush()
        await self._client.aclose()


def create_analytics_sink(settings: Settings) -> AnalyticsSink:
    """Cria sink conforme ANALYTICS_BACKEND."""
    backend = settings.analytics_backend.lower()

    if backend == "measurement_protocol":
        if not (settings.analytics_measurement_id and settings.analytics_api_secret):
            raise ValueError(
                "analytics_backend=measurement_protocol requer measurement_id e api_secret"
            )
        return MeasurementProtocolSink(
            settings.analytics_measurement_id,
            settings.analytics_api_secret,
            endpoint=settings.analytics_endpoint,
            timeout_seconds=settings.analytics_timeout_seconds,
        )
    if backend == "none":
        return NullAnalyticsSink()
    return LoggingAnalyticsSink()
