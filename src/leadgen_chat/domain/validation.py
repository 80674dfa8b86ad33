"""Validação das respostas do visitante por passo.

Funções puras e síncronas: nunca lançam exceção. Rejeição é um resultado
normal (o visitante recebe a mensagem e responde de novo no mesmo passo).
"""

from __future__ import annotations

import re
from collections.abc import Callable

from leadgen_chat.domain.models import ValidationResult
from leadgen_chat.domain.steps import ChatStep

PHONE_MIN_DIGITS = 7
PHONE_MAX_DIGITS = 15

# Somente 0-9: `\D` em str também casaria dígitos Unicode (full-width, árabes)
_NON_DIGIT = re.compile(r"[^0-9]")

MSG_NICHE = "Пожалуйста, укажите корректную нишу (минимум 2 символа)."
MSG_BUDGET = "Пожалуйста, укажите ваш бюджет."
MSG_PLANS = "Пожалуйста, опишите ваши планы чуть подробнее."
MSG_NAME = "Пожалуйста, введите корректное имя."
MSG_PHONE = "Пожалуйста, введите корректный номер телефона."
MSG_COMPLETED = "Диалог уже завершён."


def digits_only(text: str) -> str:
    """Projeção somente-dígitos do texto."""
    return _NON_DIGIT.sub("", text or "")


def normalize_phone(text: str) -> str:
    """Telefone como armazenado no lead: `+` inicial (se houver) + dígitos."""
    stripped = (text or "").strip()
    prefix = "+" if stripped.startswith("+") else ""
    return prefix + digits_only(stripped)


def _min_length(minimum: int, message: str) -> Callable[[str], ValidationResult]:
    def check(answer: str) -> ValidationResult:
        if len((answer or "").strip()) < minimum:
            return ValidationResult.reject(message)
        return ValidationResult.ok()

    return check


def validate_phone(answer: str) -> ValidationResult:
    """Telefone: 7 a 15 dígitos, ignorando formatação (+, espaços, parênteses)."""
    count = len(digits_only(answer))
    if count < PHONE_MIN_DIGITS or count > PHONE_MAX_DIGITS:
        return ValidationResult.reject(MSG_PHONE)
    return ValidationResult.ok()


def _accept_any(_answer: str) -> ValidationResult:
    return ValidationResult.ok()


def _reject_completed(_answer: str) -> ValidationResult:
    return ValidationResult.reject(MSG_COMPLETED)


validate_niche = _min_length(2, MSG_NICHE)
validate_budget = _min_length(1, MSG_BUDGET)
validate_plans = _min_length(3, MSG_PLANS)
validate_name = _min_length(2, MSG_NAME)

# Regra por passo
STEP_VALIDATORS: dict[ChatStep, Callable[[str], ValidationResult]] = {
    ChatStep.WELCOME: _accept_any,
    ChatStep.BENEFITS: _accept_any,
    ChatStep.QUALIFICATION_NICHE: validate_niche,
    ChatStep.QUALIFICATION_BUDGET: validate_budget,
    ChatStep.QUALIFICATION_PLANS: validate_plans,
    ChatStep.NAME_COLLECTION: validate_name,
    ChatStep.CONTACT_COLLECTION: validate_phone,
    ChatStep.COMPLETED: _reject_completed,
}


def validate(step: ChatStep, raw_answer: str) -> ValidationResult:
    """Valida a resposta bruta contra a regra do passo atual."""
    return STEP_VALIDATORS[step](raw_answer)
