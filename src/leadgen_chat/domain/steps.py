"""Passos canônicos do roteiro de qualificação e tabela de transições.

- A ordem dos passos é total e fixa: cada passo tem exatamente 1 sucessor
- COMPLETED é terminal (sem transições de saída)
- Cada transição declara o campo do lead preenchido pelo passo de origem
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Literal

LeadField = Literal["niche", "budget", "plans", "name", "phone"]


class ChatStep(StrEnum):
    """8 passos canônicos da conversa."""

    WELCOME = "WELCOME"
    """Saudação inicial."""

    BENEFITS = "BENEFITS"
    """Apresentação dos benefícios do serviço."""

    QUALIFICATION_NICHE = "QUALIFICATION_NICHE"
    """Coleta do nicho do negócio."""

    QUALIFICATION_BUDGET = "QUALIFICATION_BUDGET"
    """Coleta do orçamento mensal de publicidade."""

    QUALIFICATION_PLANS = "QUALIFICATION_PLANS"
    """Coleta dos planos/objetivos."""

    NAME_COLLECTION = "NAME_COLLECTION"
    """Coleta do nome do contato."""

    CONTACT_COLLECTION = "CONTACT_COLLECTION"
    """Coleta do telefone."""

    COMPLETED = "COMPLETED"
    """Lead enviado; conversa encerrada."""


STEP_ORDER: tuple[ChatStep, ...] = tuple(ChatStep)
"""Ordem total dos passos (ordem de declaração do enum)."""

INITIAL_STEP = ChatStep.WELCOME
TERMINAL_STEP = ChatStep.COMPLETED


@dataclass(frozen=True, slots=True)
class StepTransition:
    """Aresta única saindo de um passo."""

    next_step: ChatStep
    lead_field: LeadField | None = None


# Tabela de transições: passo atual → (sucessor, campo do lead preenchido)
STEP_TRANSITIONS: dict[ChatStep, StepTransition] = {
    ChatStep.WELCOME: StepTransition(ChatStep.BENEFITS),
    ChatStep.BENEFITS: StepTransition(ChatStep.QUALIFICATION_NICHE),
    ChatStep.QUALIFICATION_NICHE: StepTransition(ChatStep.QUALIFICATION_BUDGET, "niche"),
    ChatStep.QUALIFICATION_BUDGET: StepTransition(ChatStep.QUALIFICATION_PLANS, "budget"),
    ChatStep.QUALIFICATION_PLANS: StepTransition(ChatStep.NAME_COLLECTION, "plans"),
    ChatStep.NAME_COLLECTION: StepTransition(ChatStep.CONTACT_COLLECTION, "name"),
    ChatStep.CONTACT_COLLECTION: StepTransition(ChatStep.COMPLETED, "phone"),
    # COMPLETED: terminal, sem transição de saída
}


def is_terminal(step: ChatStep) -> bool:
    """True se o passo não tem sucessor."""
    return step not in STEP_TRANSITIONS


def next_transition(step: ChatStep) -> StepTransition | None:
    """Retorna a transição do passo ou None se terminal.

    Nunca lança exceção; apenas consulta a tabela.
    """
    return STEP_TRANSITIONS.get(step)
