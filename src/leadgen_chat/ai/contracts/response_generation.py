"""Contrato Pydantic para geração da próxima fala do bot."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from leadgen_chat.domain.models import GeneratedReply, LeadData
from leadgen_chat.domain.steps import ChatStep


class ReplyRequest(BaseModel):
    """Input para o gerador de respostas."""

    model_config = ConfigDict(frozen=True)

    step: ChatStep
    """Passo de destino (a fala gerada abre este passo)."""

    user_message: str
    """Última mensagem do visitante (ou gatilho sintético no início)."""

    lead: LeadData = Field(default_factory=LeadData)
    """Snapshot dos dados do lead já atualizados."""


# Esquema exigido do modelo; `fallback` é interno e não é exposto.
REPLY_JSON_SCHEMA: dict = {
    "type": "object",
    "properties": {
        "text": {"type": "string", "minLength": 1},
        "options": {
            "type": "array",
            "items": {"type": "string", "maxLength": 64},
            "maxItems": 4,
        },
    },
    "required": ["text"],
    "additionalProperties": False,
}

__all__ = ["ReplyRequest", "GeneratedReply", "REPLY_JSON_SCHEMA"]
