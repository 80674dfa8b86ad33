"""Rotas HTTP da conversa (startSession / submitAnswer / selectQuickReply)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status

from leadgen_chat.api.dependencies import (
    get_conversation_factory,
    get_session_registry,
    get_settings,
)
from leadgen_chat.api.schemas import MessageIn, SessionView, SubmitResult
from leadgen_chat.application.conversation import (
    ConversationBusyError,
    ConversationClosedError,
    ConversationEngine,
    ConversationError,
)
from leadgen_chat.application.factory import ConversationFactory
from leadgen_chat.application.session_registry import (
    InMemorySessionRegistry,
    SessionNotFoundError,
)
from leadgen_chat.config.settings import Settings
from leadgen_chat.observability.logging import get_logger
from leadgen_chat.observability.middleware import bind_session_id, get_correlation_id

logger = get_logger(__name__)

router = APIRouter()


def _load_session(registry: InMemorySessionRegistry, session_id: str) -> ConversationEngine:
    bind_session_id(session_id)
    try:
        return registry.get(session_id)
    except SessionNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="session_not_found"
        ) from exc


def _conflict(exc: ConversationError) -> HTTPException:
    if isinstance(exc, ConversationBusyError):
        detail = "session_busy"
    elif isinstance(exc, ConversationClosedError):
        detail = "session_completed"
    else:
        detail = "session_not_started"
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail={"error": detail, "correlation_id": get_correlation_id()},
    )


async def _submit(engine: ConversationEngine, text: str, *, quick_reply: bool) -> SubmitResult:
    try:
        if quick_reply:
            appended = await engine.select_quick_reply(text)
        else:
            appended = await engine.submit(text)
    except ConversationError as exc:
        logger.info(
            "submission_refused",
            extra={"error_type": type(exc).__name__, "step": engine.step.value},
        )
        raise _conflict(exc) from exc
    return SubmitResult(appended=appended, session=SessionView.from_engine(engine))


@router.get("/health")
def health(settings: Settings = Depends(get_settings)) -> dict[str, str]:
    """Healthcheck simples."""
    return {"status": "ok", "service": settings.service_name, "version": settings.version}


@router.post("/sessions", status_code=status.HTTP_201_CREATED)
async def start_session(
    registry: InMemorySessionRegistry = Depends(get_session_registry),
    factory: ConversationFactory = Depends(get_conversation_factory),
) -> SessionView:
    """Cria sessão e gera a saudação inicial."""
    engine = factory()
    bind_session_id(engine.session_id)
    registry.add(engine)
    await engine.start()
    return SessionView.from_engine(engine)


@router.get("/sessions/{session_id}")
def get_session(
    session_id: str,
    registry: InMemorySessionRegistry = Depends(get_session_registry),
) -> SessionView:
    """Estado atual da sessão."""
    return SessionView.from_engine(_load_session(registry, session_id))


@router.post("/sessions/{session_id}/messages")
async def submit_answer(
    session_id: str,
    body: MessageIn,
    registry: InMemorySessionRegistry = Depends(get_session_registry),
) -> SubmitResult:
    """Resposta em texto livre."""
    engine = _load_session(registry, session_id)
    return await _submit(engine, body.text, quick_reply=False)


@router.post("/sessions/{session_id}/quick-replies")
async def select_quick_reply(
    session_id: str,
    body: MessageIn,
    registry: InMemorySessionRegistry = Depends(get_session_registry),
) -> SubmitResult:
    """Resposta rápida (equivalente a mensagem)."""
    engine = _load_session(registry, session_id)
    return await _submit(engine, body.text, quick_reply=True)


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_session(
    session_id: str,
    registry: InMemorySessionRegistry = Depends(get_session_registry),
) -> Response:
    """Descarta a sessão."""
    if not registry.delete(session_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="session_not_found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
