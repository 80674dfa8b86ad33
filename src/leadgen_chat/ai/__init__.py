"""Geração de respostas: prompts, parser, retry e backends de texto."""

from leadgen_chat.ai.response_generator import FALLBACK_TEXT, ResponseGenerator, fallback_reply
from leadgen_chat.ai.retry import RetryPolicy
from leadgen_chat.ai.text_backend import (
    CompletionPrompt,
    OpenAITextBackend,
    ScriptedTextBackend,
    TextBackend,
    TextBackendError,
)

__all__ = [
    "ResponseGenerator",
    "RetryPolicy",
    "FALLBACK_TEXT",
    "fallback_reply",
    "CompletionPrompt",
    "TextBackend",
    "TextBackendError",
    "OpenAITextBackend",
    "ScriptedTextBackend",
]
