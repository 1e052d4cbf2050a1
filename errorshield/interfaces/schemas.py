"""
Pydantic schemas for the service's own API responses.
"""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Liveness payload, including how client error messages are rendered."""

    status: str
    service: str
    version: str
    additional_messages_enabled: bool
