"""Testes do validador por passo."""

from __future__ import annotations

import pytest

from leadgen_chat.domain.steps import ChatStep
from leadgen_chat.domain.validation import (
    MSG_BUDGET,
    MSG_NAME,
    MSG_NICHE,
    MSG_PHONE,
    MSG_PLANS,
    digits_only,
    normalize_phone,
    validate,
)


class TestFreeTextSteps:
    """WELCOME e BENEFITS aceitam qualquer texto não vazio."""

    @pytest.mark.parametrize("step", [ChatStep.WELCOME, ChatStep.BENEFITS])
    @pytest.mark.parametrize("answer", ["a", "Да, интересно", "?", "123"])
    def test_any_non_empty_input_accepted(self, step: ChatStep, answer: str) -> None:
        result = validate(step, answer)
        assert result.accepted is True
        assert result.error_message is None

    def test_budget_accepts_single_char(self) -> None:
        assert validate(ChatStep.QUALIFICATION_BUDGET, "5").accepted is True


class TestLengthRules:
    def test_niche_too_short_rejected(self) -> None:
        result = validate(ChatStep.QUALIFICATION_NICHE, "A")
        assert result.accepted is False
        assert result.error_message == MSG_NICHE

    def test_niche_two_chars_accepted(self) -> None:
        assert validate(ChatStep.QUALIFICATION_NICHE, "IT").accepted is True

    def test_niche_is_trimmed_before_check(self) -> None:
        assert validate(ChatStep.QUALIFICATION_NICHE, "  A  ").accepted is False

    def test_budget_whitespace_rejected(self) -> None:
        result = validate(ChatStep.QUALIFICATION_BUDGET, "   ")
        assert result.accepted is False
        assert result.error_message == MSG_BUDGET

    def test_plans_need_three_chars(self) -> None:
        assert validate(ChatStep.QUALIFICATION_PLANS, "ab").error_message == MSG_PLANS
        assert validate(ChatStep.QUALIFICATION_PLANS, "abc").accepted is True

    def test_name_need_two_chars(self) -> None:
        assert validate(ChatStep.NAME_COLLECTION, "И").error_message == MSG_NAME
        assert validate(ChatStep.NAME_COLLECTION, "Иван").accepted is True


class TestPhone:
    def test_formatted_russian_number_accepted(self) -> None:
        # 11 dígitos
        assert validate(ChatStep.CONTACT_COLLECTION, "+7 (999) 123-45-67").accepted is True

    def test_five_digits_rejected(self) -> None:
        result = validate(ChatStep.CONTACT_COLLECTION, "12345")
        assert result.accepted is False
        assert result.error_message == MSG_PHONE

    @pytest.mark.parametrize(
        ("answer", "accepted"),
        [
            ("1234567", True),
            ("123456", False),
            ("123456789012345", True),
            ("1234567890123456", False),
            ("позвоните мне", False),
            ("１２３４５６７", False),
            ("٠١٢٣٤٥٦٧٨٩", False),
            ("+7 １２３ 4567", False),
        ],
    )
    def test_digit_bounds(self, answer: str, accepted: bool) -> None:
        assert validate(ChatStep.CONTACT_COLLECTION, answer).accepted is accepted

    def test_digits_only_projection(self) -> None:
        assert digits_only("+7 (999) 123-45-67") == "79991234567"
        assert digits_only("") == ""
        assert digits_only("１２３") == ""

    @pytest.mark.parametrize(
        ("answer", "stored"),
        [
            ("+7 (999) 123-45-67", "+79991234567"),
            ("  +79991234567 ", "+79991234567"),
            ("8 999 123 45 67", "89991234567"),
            ("тел. 8-999-123-45-67", "89991234567"),
        ],
    )
    def test_normalize_phone(self, answer: str, stored: str) -> None:
        assert normalize_phone(answer) == stored


def test_completed_step_never_accepts() -> None:
    assert validate(ChatStep.COMPLETED, "ещё что-то").accepted is False


def test_validation_never_raises_on_empty() -> None:
    for step in ChatStep:
        result = validate(step, "")
        assert isinstance(result.accepted, bool)
