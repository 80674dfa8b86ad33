"""Configurações da aplicação via variáveis de ambiente.

Todas as configurações são carregadas de env vars.
Nunca hardcode secrets ou valores sensíveis.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

# GA4 Measurement Protocol
MEASUREMENT_PROTOCOL_URL: str = "https://www.google-analytics.com/mp/collect"

ANALYTICS_BACKENDS = frozenset({"none", "log", "measurement_protocol"})


class Settings(BaseSettings):
    """Configurações lidas do ambiente."""

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False)

    # Aplicação
    service_name: str = "leadgen_chat"
    version: str = "0.1.0"
    environment: str = "development"
    log_level: str = "INFO"

    # LLM / OpenAI
    llm_enabled: bool = False  # Feature flag: fail-safe usa backend roteirizado
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o-mini"
    openai_timeout_seconds: float = 10.0  # Timeout por tentativa
    openai_temperature: float = 0.7
    openai_max_tokens: int = 400

    # Gerador de respostas (retry/backoff)
    generator_max_attempts: int = 3
    generator_backoff_seconds: float = 1.0  # atraso = tentativa * backoff

    # Analytics (fire-and-forget)
    analytics_backend: str = "log"  # none | log | measurement_protocol
    analytics_measurement_id: str | None = None
    analytics_api_secret: str | None = None
    analytics_endpoint: str = MEASUREMENT_PROTOCOL_URL
    analytics_timeout_seconds: float = 5.0

    # Sessão
    session_idle_timeout_minutes: int = 30

    @property
    def is_production(self) -> bool:
        """True em produção."""
        return self.environment.lower() in ("production", "prod")

    @property
    def is_development(self) -> bool:
        """True em dev/local."""
        return self.environment.lower() in ("development", "dev", "local")

    def validate_llm_config(self) -> list[str]:
        """Valida configuração do LLM.

        Se llm_enabled=True, verifica se OPENAI_API_KEY está configurado.
        Retorna lista de erros (vazia = OK).
        """
        errors: list[str] = []
        if self.llm_enabled and not self.openai_api_key:
            errors.append("LLM_ENABLED=true requer OPENAI_API_KEY configurado")
        if self.openai_timeout_seconds <= 0:
            errors.append("OPENAI_TIMEOUT_SECONDS deve ser positivo")
        return errors

    def validate_generator_config(self) -> list[str]:
        """Valida política de retry do gerador."""
        errors: list[str] = []
        if self.generator_max_attempts < 1:
            errors.append("GENERATOR_MAX_ATTEMPTS deve ser >= 1")
        if self.generator_backoff_seconds < 0:
            errors.append("GENERATOR_BACKOFF_SECONDS não pode ser negativo")
        return errors

    def validate_analytics_config(self) -> list[str]:
        """Valida backend de analytics."""
        errors: list[str] = []
        backend = self.analytics_backend.lower()
        if backend not in ANALYTICS_BACKENDS:
            errors.append(
                f"ANALYTICS_BACKEND '{backend}' inválido. "
                f"Valores válidos: {sorted(ANALYTICS_BACKENDS)}"
            )
        if backend == "measurement_protocol" and not (
            self.analytics_measurement_id and self.analytics_api_secret
        ):
            errors.append(
                "ANALYTICS_BACKEND=measurement_protocol requer "
                "ANALYTICS_MEASUREMENT_ID e ANALYTICS_API_SECRET"
            )
        return errors

    def validate_session_config(self) -> list[str]:
        """Valida timeout de sessão."""
        if self.session_idle_timeout_minutes <= 0:
            return ["SESSION_IDLE_TIMEOUT_MINUTES deve ser positivo"]
        return []

    def validate_all(self) -> list[str]:
        """Agrega todas as validações."""
        errors: list[str] = []
        errors.extend(self.validate_llm_config())
        errors.extend(self.validate_generator_config())
        errors.extend(self.validate_analytics_config())
        errors.extend(self.validate_session_config())
        return errors


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Retorna uma instância cacheada de Settings.

    A cache garante que mesmo múltiplas injeções não criam novos objetos.
    """
    return Settings()
