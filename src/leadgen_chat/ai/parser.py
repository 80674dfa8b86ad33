"""Parser estrito da saída do gerador de texto."""

from __future__ import annotations

import json
import re

from pydantic import ValidationError

from leadgen_chat.domain.models import GeneratedReply

_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


class ReplyParseError(Exception):
    """Payload do modelo não pôde ser convertido em GeneratedReply."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


def _strip_code_fence(raw: str) -> str:
    text = raw.strip()
    match = _CODE_FENCE.match(text)
    return match.group(1) if match else text


def parse_generated_reply(raw: str | None) -> GeneratedReply:
    """Converte texto bruto em GeneratedReply.

    Aceita JSON puro ou envolto em bloco ```json. Campos extras são ignorados;
    `fallback` nunca é lido do modelo.

    Raises:
        ReplyParseError: payload vazio, não-JSON, não-objeto ou fora do schema.
    """
    if not raw or not raw.strip():
        raise ReplyParseError("empty_payload")

    try:
        data = json.loads(_strip_code_fence(raw))
    except json.JSONDecodeError as exc:
        raise ReplyParseError("invalid_json") from exc

    if not isinstance(data, dict):
        raise ReplyParseError("not_an_object")

    options = data.get("options")
    try:
        return GeneratedReply.model_validate(
            {"text": data.get("text"), "options": [] if options is None else options}
        )
    except ValidationError as exc:
        raise ReplyParseError("schema_mismatch") from exc
