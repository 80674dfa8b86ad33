"""Contratos Pydantic do gerador de respostas."""

from leadgen_chat.ai.contracts.response_generation import (
    REPLY_JSON_SCHEMA,
    GeneratedReply,
    ReplyRequest,
)

__all__ = [
    "ReplyRequest",
    "GeneratedReply",
    "REPLY_JSON_SCHEMA",
]
