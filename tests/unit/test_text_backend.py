"""Testes dos backends de texto."""

from __future__ import annotations

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from openai import APIConnectionError, APITimeoutError

from leadgen_chat.ai.text_backend import (
    CompletionPrompt,
    OpenAITextBackend,
    ScriptedTextBackend,
    TextBackendError,
)
from leadgen_chat.domain.steps import ChatStep

_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def _prompt(step: ChatStep = ChatStep.WELCOME, user: str = "Начни диалог") -> CompletionPrompt:
    return CompletionPrompt(step=step, system="system prompt", user=user)


def _client_returning(content: str | None) -> MagicMock:
    response = SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))]
    )
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=response)
    return client


class TestOpenAITextBackend:
    @pytest.mark.asyncio
    async def test_returns_message_content(self) -> None:
        client = _client_returning('{"text": "Привет"}')
        backend = OpenAITextBackend(model="gpt-test", timeout_seconds=3.0, client=client)

        raw = await backend.complete(_prompt())

        assert raw == '{"text": "Привет"}'
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-test"
        assert kwargs["timeout"] == 3.0
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["messages"][0] == {"role": "system", "content": "system prompt"}
        assert kwargs["messages"][1] == {"role": "user", "content": "Начни диалог"}

    @pytest.mark.asyncio
    async def test_none_content_becomes_empty_string(self) -> None:
        backend = OpenAITextBackend(client=_client_returning(None))
        assert await backend.complete(_prompt()) == ""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [APITimeoutError(request=_REQUEST), APIConnectionError(request=_REQUEST)],
    )
    async def test_api_errors_wrapped(self, error: Exception) -> None:
        client = MagicMock()
        client.chat.completions.create = AsyncMock(side_effect=error)
        backend = OpenAITextBackend(client=client)

        with pytest.raises(TextBackendError) as exc_info:
            await backend.complete(_prompt())

        assert exc_info.value.backend == "openai"
        assert exc_info.value.__cause__ is error


class TestScriptedTextBackend:
    @pytest.mark.asyncio
    async def test_embeds_answer_in_personalised_steps(self) -> None:
        backend = ScriptedTextBackend()

        raw = await backend.complete(_prompt(ChatStep.CONTACT_COLLECTION, "Иван"))

        data = json.loads(raw)
        assert "Иван" in data["text"]
        assert data["options"] == []

    @pytest.mark.asyncio
    async def test_niche_step_offers_quick_replies(self) -> None:
        data = json.loads(
            await ScriptedTextBackend().complete(_prompt(ChatStep.QUALIFICATION_NICHE, "Да"))
        )
        assert 1 <= len(data["options"]) <= 4
