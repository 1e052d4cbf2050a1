"""
Application configuration.

Loads settings from environment variables and .env file.
All configuration is centralized here — no scattered magic strings.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        debug: Enable debug mode. Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        translation_log_level: Level for the error-translation loggers.
            Falls back to log_level when unset.
        access_denied_message: Static message sent for every 403.
            Never derived from the exception.
        fallback_error_message: Message sent at 500 when the exception
            carries none.
        additional_messages_enabled: Append operator guidance configured
            on the message decorator to client messages.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="ERRORSHIELD_"
    )

    project_name: str = "errorshield"
    version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    translation_log_level: str | None = None
    access_denied_message: str = "Access is denied"
    fallback_error_message: str = "Internal Server Error"
    additional_messages_enabled: bool = True


settings = Settings()
