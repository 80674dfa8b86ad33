"""Domínio da conversa: passos, modelos, validação e progresso.

Exporta:
- ChatStep: 8 passos canônicos
- STEP_TRANSITIONS: tabela passo → (sucessor, campo do lead)
- LeadData, Turn, GeneratedReply, ValidationResult
- validate: validador puro por passo
- progress_percent: política de progresso
"""

from leadgen_chat.domain.models import GeneratedReply, LeadData, Turn, ValidationResult
from leadgen_chat.domain.progress import progress_percent
from leadgen_chat.domain.steps import (
    STEP_ORDER,
    STEP_TRANSITIONS,
    TERMINAL_STEP,
    ChatStep,
    StepTransition,
    is_terminal,
)
from leadgen_chat.domain.validation import validate

__all__ = [
    "ChatStep",
    "STEP_ORDER",
    "STEP_TRANSITIONS",
    "TERMINAL_STEP",
    "StepTransition",
    "is_terminal",
    "LeadData",
    "Turn",
    "GeneratedReply",
    "ValidationResult",
    "validate",
    "progress_percent",
]
