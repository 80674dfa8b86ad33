"""Política de retry com backoff linear para o gerador de respostas."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Máximo de tentativas + atraso por tentativa.

    O atraso após a tentativa `n` (1-based) é `n * base_delay_seconds`,
    limitado por `max_delay_seconds`. Não há espera após a última tentativa.
    """

    max_attempts: int = 3
    base_delay_seconds: float = 1.0
    max_delay_seconds: float = 30.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts deve ser >= 1")
        if self.base_delay_seconds < 0:
            raise ValueError("base_delay_seconds não pode ser negativo")

    def delay_for(self, attempt: int) -> float:
        """Segundos de espera após a tentativa `attempt` falhar."""
        return min(attempt * self.base_delay_seconds, self.max_delay_seconds)

    def should_retry(self, attempt: int) -> bool:
        """True se ainda há tentativas após `attempt`."""
        return attempt < self.max_attempts
