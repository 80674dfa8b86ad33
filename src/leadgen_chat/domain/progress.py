"""Política de progresso: passo → porcentagem exibida."""

from __future__ import annotations

from leadgen_chat.domain.steps import ChatStep

PROGRESS_BY_STEP: dict[ChatStep, int] = {
    ChatStep.WELCOME: 15,
    ChatStep.BENEFITS: 30,
    ChatStep.QUALIFICATION_NICHE: 45,
    ChatStep.QUALIFICATION_BUDGET: 60,
    ChatStep.QUALIFICATION_PLANS: 75,
    ChatStep.NAME_COLLECTION: 85,
    ChatStep.CONTACT_COLLECTION: 95,
    ChatStep.COMPLETED: 100,
}


def progress_percent(step: ChatStep) -> int:
    """Porcentagem (0–100) do passo; apenas apresentação, sem estado."""
    return PROGRESS_BY_STEP[step]
