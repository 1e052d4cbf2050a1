"""
Application entry point.

Creates the FastAPI application and wires together:
- Routers
- Error translation (classification, recording, emission)
- Security middleware (headers)
- Logging configuration

No business logic belongs here.
"""

from typing import Mapping

from fastapi import FastAPI

from errorshield.application.classification import ExceptionClassifier
from errorshield.core.config import settings
from errorshield.domain.message_decorator import ExceptionMessageDecorator
from errorshield.interfaces.health import router as health_router
from errorshield.shared.errors.handlers import register_error_handlers
from errorshield.shared.errors.translator import ExceptionTranslator
from errorshield.shared.logging import configure_logging
from errorshield.shared.security.headers import SecurityHeadersMiddleware


def build_translator(
    additional_messages: Mapping[type[BaseException], str] | None = None,
) -> ExceptionTranslator:
    """Build the shared translator from settings.

    Args:
        additional_messages: Operator guidance appended to client messages
            per exception type. Ignored when disabled in settings.
    """
    decorator = ExceptionMessageDecorator(
        additional_messages if settings.additional_messages_enabled else None
    )
    classifier = ExceptionClassifier(
        decorator=decorator,
        access_denied_message=settings.access_denied_message,
        fallback_message=settings.fallback_error_message,
    )
    return ExceptionTranslator(classifier=classifier)


def create_app(translator: ExceptionTranslator | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Registers routers, the error-translation dispatcher, and security
    middleware. This is the composition root of the application.

    Args:
        translator: Translator to install; built from settings if omitted.

    Returns:
        A fully configured FastAPI application instance.
    """
    configure_logging(
        level=settings.log_level, translation_level=settings.translation_log_level
    )

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    # --- Error Translation ---
    register_error_handlers(app, translator or build_translator())

    # --- Security Middleware (outermost, so error responses get headers too) ---
    app.add_middleware(SecurityHeadersMiddleware)

    # --- Routers ---
    app.include_router(health_router, prefix="/api/v1")

    return app


app = create_app()
