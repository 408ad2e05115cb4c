"""
Error layer settings, loaded from ``FAULTLINE_*`` environment variables.

Several flags are tri-state (``None`` means "derive from the environment");
read the effective value through the ``should_*`` properties, never the raw
field:

    sanitize_errors=None      -> on in production only
    include_stack_trace=None  -> on in development only, never while sanitizing
    log_json=None             -> off in development only

Usage:
    from faultline.core.config import settings

    if settings.should_sanitize:
        # Production-like behavior
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from faultline.core.enums import Environment

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    """
    Flat settings for the error layer.

    Environment variables (``FAULTLINE_LOG_LEVEL``, ...) override the defaults
    below. Unknown ``FAULTLINE_*`` variables are ignored.
    """

    # Environment detection
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment (development, testing, ci, production)",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging)",
    )

    # Logging configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_json: bool | None = Field(
        default=None,
        description="Render logs as JSON. Defaults to True outside development.",
    )
    log_errors: bool = Field(
        default=True,
        description="Emit a log record for every handled error",
    )

    # Error response configuration
    sanitize_errors: bool | None = Field(
        default=None,
        description="Redact sensitive data from responses. Defaults to True in production.",
    )
    include_stack_trace: bool | None = Field(
        default=None,
        description="Include stack traces in responses. Defaults to True in development. "
        "Never honored while sanitizing.",
    )
    generic_error_message: str = Field(
        default="An internal error occurred",
        description="Message shown for non-operational errors while sanitizing",
    )
    rate_limit_retry_after: int = Field(
        default=900,
        description="Fallback Retry-After (seconds) for rate limit responses",
    )

    # Audit configuration
    audit_enabled: bool = Field(
        default=True,
        description="Forward security and authentication errors to the audit sink",
    )

    model_config = SettingsConfigDict(
        env_prefix="FAULTLINE_",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """
        Normalize and validate the log level name.

        Args:
            v: Log level name.

        Returns:
            str: Upper-cased log level.

        Raises:
            ValueError: If the level is not a standard logging level.
        """
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}")
        return level

    @field_validator("rate_limit_retry_after")
    @classmethod
    def validate_retry_after(cls, v: int) -> int:
        """
        Validate the fallback Retry-After value.

        Args:
            v: Seconds.

        Returns:
            int: Validated seconds.

        Raises:
            ValueError: If not positive.
        """
        if v <= 0:
            raise ValueError("rate_limit_retry_after must be positive")
        return v

    @property
    def is_development(self) -> bool:
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION

    @property
    def should_sanitize(self) -> bool:
        """Effective sanitize flag (explicit value wins over environment)."""
        if self.sanitize_errors is not None:
            return self.sanitize_errors
        return self.is_production

    @property
    def should_include_stack_trace(self) -> bool:
        """Effective stack trace flag. Always False while sanitizing."""
        if self.should_sanitize:
            return False
        if self.include_stack_trace is not None:
            return self.include_stack_trace
        return self.is_development

    @property
    def should_log_json(self) -> bool:
        """Effective log renderer choice."""
        if self.log_json is not None:
            return self.log_json
        return not self.is_development


@lru_cache
def get_settings() -> Settings:
    """Process-wide Settings. Call ``get_settings.cache_clear()`` to reload."""
    return Settings()


settings = get_settings()
