"""Fábrica da aplicação FastAPI."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from leadgen_chat.ai.text_backend import TextBackend
from leadgen_chat.api.routes import router
from leadgen_chat.application.factory import ConversationFactory, create_response_generator
from leadgen_chat.application.session_registry import InMemorySessionRegistry
from leadgen_chat.config.settings import Settings, get_settings
from leadgen_chat.infra.analytics import AnalyticsSink, create_analytics_sink
from leadgen_chat.observability.logging import configure_logging, get_logger
from leadgen_chat.observability.middleware import CorrelationIdMiddleware

logger = get_logger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    analytics = app.state.analytics
    close = getattr(analytics, "aclose", None)
    if close is not None:
        await close()
    logger.info("app_shutdown", extra={"sessions": len(app.state.session_registry)})


def create_app(
    settings: Settings | None = None,
    *,
    backend: TextBackend | None = None,
    analytics: AnalyticsSink | None = None,
) -> FastAPI:
    """Cria a aplicação FastAPI.

    `backend` e `analytics` permitem substituir as integrações (testes).
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.service_name)

    validation_errors = settings.validate_all()
    if backend is not None:
        # Backend injetado dispensa a configuração do LLM
        validation_errors = [e for e in validation_errors if not e.startswith("LLM_ENABLED")]
    if validation_errors:
        error_msg = "; ".join(validation_errors)
        raise ValueError(f"Configuração inválida: {error_msg}")

    app = FastAPI(title=settings.service_name, version=settings.version, lifespan=_lifespan)
    app.add_middleware(CorrelationIdMiddleware)
    app.include_router(router)

    generator = create_response_generator(settings, backend)
    app.state.settings = settings
    app.state.analytics = analytics or create_analytics_sink(settings)
    app.state.session_registry = InMemorySessionRegistry(
        idle_timeout_seconds=settings.session_idle_timeout_minutes * 60
    )
    app.state.conversation_factory = ConversationFactory(generator, app.state.analytics)

    logger.info(
        "app_created",
        extra={
            "environment": settings.environment,
            "llm_enabled": settings.llm_enabled,
            "analytics_backend": settings.analytics_backend,
        },
    )
    return app
