"""Modelos de domínio (contratos principais da conversa)."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from leadgen_chat.domain.steps import LeadField

MAX_REPLY_OPTIONS = 4
MAX_OPTION_LENGTH = 64
MAX_REPLY_TEXT_LENGTH = 4096

TurnRole = Literal["bot", "user"]


class LeadData(BaseModel):
    """Acumulador dos dados do lead.

    Imutável: cada atualização devolve uma nova instância (copy-on-write).
    Campos só são preenchidos, nunca limpos, dentro de uma sessão.
    """

    model_config = ConfigDict(frozen=True)

    niche: str | None = None
    budget: str | None = None
    plans: str | None = None
    name: str | None = None
    phone: str | None = None

    def with_field(self, field: LeadField, value: str) -> LeadData:
        """Retorna cópia com `field` preenchido."""
        return self.model_copy(update={field: value})

    def is_complete(self) -> bool:
        """True quando todos os campos foram coletados."""
        return all(
            getattr(self, f) is not None for f in ("niche", "budget", "plans", "name", "phone")
        )

    def filled_fields(self) -> dict[str, str]:
        """Somente os campos preenchidos (usado como contexto do prompt)."""
        return self.model_dump(exclude_none=True)

    def as_summary(self) -> list[tuple[str, str]]:
        """Linhas do resumo final exibido ao visitante."""
        rows = [
            ("Ниша", self.niche),
            ("Бюджет", self.budget),
            ("Имя", self.name),
            ("Телефон", self.phone),
        ]
        return [(label, value) for label, value in rows if value]


class Turn(BaseModel):
    """Uma entrada do histórico. Nunca é alterada após criada."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:9])
    role: TurnRole
    content: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(tz=UTC))
    options: tuple[str, ...] = ()

    @classmethod
    def from_user(cls, content: str) -> Turn:
        return cls(role="user", content=content)

    @classmethod
    def from_bot(cls, content: str, options: list[str] | tuple[str, ...] = ()) -> Turn:
        return cls(role="bot", content=content, options=tuple(options))


class GeneratedReply(BaseModel):
    """Resposta gerada: texto + até 4 respostas rápidas."""

    text: str = Field(..., min_length=1, max_length=MAX_REPLY_TEXT_LENGTH)
    """Texto do próximo turno do bot."""

    options: list[str] = Field(default_factory=list, max_length=MAX_REPLY_OPTIONS)
    """Respostas rápidas sugeridas (0–4, curtas)."""

    fallback: bool = False
    """True quando a resposta veio do fallback técnico (não do gerador)."""

    @field_validator("text")
    @classmethod
    def _text_not_blank(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("text vazio")
        return stripped

    @field_validator("options")
    @classmethod
    def _options_short(cls, value: list[str]) -> list[str]:
        cleaned: list[str] = []
        for option in value:
            option = option.strip()
            if not option:
                raise ValueError("opção vazia")
            if len(option) > MAX_OPTION_LENGTH:
                raise ValueError(f"opção excede {MAX_OPTION_LENGTH} caracteres")
            cleaned.append(option)
        return cleaned


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Resultado da validação de uma resposta (efêmero)."""

    accepted: bool
    error_message: str | None = None

    @classmethod
    def ok(cls) -> ValidationResult:
        return cls(accepted=True)

    @classmethod
    def reject(cls, message: str) -> ValidationResult:
        return cls(accepted=False, error_message=message)
