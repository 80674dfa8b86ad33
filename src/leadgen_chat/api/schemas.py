"""Schemas HTTP (entrada/saída das rotas de sessão)."""

from __future__ import annotations

from pydantic import BaseModel, Field

from leadgen_chat.application.conversation import ConversationEngine
from leadgen_chat.domain.models import LeadData, Turn
from leadgen_chat.domain.steps import ChatStep


class MessageIn(BaseModel):
    """Resposta do visitante (texto livre ou resposta rápida)."""

    text: str = Field(..., max_length=2000)


class SessionView(BaseModel):
    """Estado observável de uma sessão."""

    session_id: str
    step: ChatStep
    progress: int
    busy: bool
    completed: bool
    has_error: bool
    quick_replies: list[str]
    history: list[Turn]
    lead: LeadData
    final_lead: LeadData | None = None
    summary: list[tuple[str, str]] = Field(default_factory=list)

    @classmethod
    def from_engine(cls, engine: ConversationEngine) -> SessionView:
        return cls(
            session_id=engine.session_id,
            step=engine.step,
            progress=engine.progress,
            busy=engine.busy,
            completed=engine.completed,
            has_error=engine.has_error,
            quick_replies=list(engine.quick_replies),
            history=list(engine.history),
            lead=engine.lead,
            final_lead=engine.final_lead,
            summary=engine.final_lead.as_summary() if engine.final_lead is not None else [],
        )


class SubmitResult(BaseModel):
    """Turnos adicionados por uma submissão + estado resultante."""

    appended: list[Turn]
    session: SessionView
