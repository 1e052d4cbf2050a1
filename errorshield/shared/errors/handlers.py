"""
FastAPI wiring for the error-translation layer.

ErrorTranslationMiddleware is the dispatcher: it owns the per-request
diagnostic scope, catches anything a route raises, and delegates to
ExceptionTranslator. HTTPException and request validation errors are
still answered by FastAPI's own handlers, which run closer to the route.
"""

import logging

from fastapi import FastAPI
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from errorshield.domain.diagnostics import DiagnosticScope
from errorshield.shared.errors.attributes import build_error_attributes
from errorshield.shared.errors.channel import BufferedResponseChannel
from errorshield.shared.errors.translator import ExceptionTranslator

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class ErrorTranslationMiddleware(BaseHTTPMiddleware):
    """Translates exceptions escaping routes into plain-text error responses."""

    def __init__(self, app: ASGIApp, translator: ExceptionTranslator | None = None) -> None:
        super().__init__(app)
        self.translator = translator or ExceptionTranslator()

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Run the route; on failure, translate the exception."""
        request_id = request.headers.get(REQUEST_ID_HEADER)
        scope = DiagnosticScope(request_id=request_id) if request_id else DiagnosticScope()
        request.state.diagnostics = scope
        try:
            try:
                return await call_next(request)
            except Exception as exc:
                channel = BufferedResponseChannel()
                result = self.translator.handle(exc, scope, channel)
                if logger.isEnabledFor(logging.DEBUG):
                    logger.debug(
                        "Error attributes: %s",
                        build_error_attributes(scope, result.status_code, request.url.path),
                    )
                return channel.to_response()
        finally:
            scope.finalize()


def register_error_handlers(
    app: FastAPI, translator: ExceptionTranslator | None = None
) -> None:
    """Register the error-translation dispatcher on the FastAPI application.

    Args:
        app: The FastAPI application instance.
        translator: Translator to use; a default one is built if omitted.
    """
    app.add_middleware(ErrorTranslationMiddleware, translator=translator)
