"""
errorshield — centralized exception-to-HTTP translation for FastAPI services.

Application package root. Every exception that escapes a route is
classified into a fixed status/message policy, recorded on the request's
diagnostic scope, and emitted as a plain-text error response.

Layers:
    - domain: Error taxonomy, declared statuses, message decoration, diagnostic scope.
    - application: Exception classification.
    - infrastructure: Upstream (httpx) failure inspection.
    - interfaces: FastAPI routers, Pydantic schemas.
    - shared: Cross-cutting concerns (error translation, security, logging).
"""
