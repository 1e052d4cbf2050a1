"""
Liveness endpoint.

Reports the service identity and whether operator guidance is being
appended to client error messages, so a deployment can be checked
without provoking an error.
"""

from fastapi import APIRouter

from errorshield.core.config import settings
from errorshield.interfaces.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse, summary="Health check")
def health_check() -> HealthResponse:
    return HealthResponse(
        status="ok",
        service=settings.project_name,
        version=settings.version,
        additional_messages_enabled=settings.additional_messages_enabled,
    )
