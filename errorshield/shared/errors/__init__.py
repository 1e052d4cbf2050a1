"""
Shared error handling package.

Centralizes exception-to-HTTP translation so that every error leaving
a route is turned into a consistent status code and sanitized message.
"""

from errorshield.shared.errors.channel import BufferedResponseChannel, ResponseChannel
from errorshield.shared.errors.translator import ExceptionTranslator

__all__ = [
    "BufferedResponseChannel",
    "ExceptionTranslator",
    "ResponseChannel",
]
