"""
Shared module package.

Contains cross-cutting concerns:
- Error translation (classification, recording, emission)
- Security middleware
- Logging configuration
"""
