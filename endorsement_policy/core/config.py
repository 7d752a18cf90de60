"""Codec configuration using Pydantic Settings.

Configuration is loaded from environment variables. Optionally, point
`ENV_FILE` at a local env file for development.
"""

import os
from enum import Enum

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppEnvironment(str, Enum):
    """Application environment values."""

    LOCAL = "local"
    TEST = "test"
    PROD = "prod"


def _parse_bool(v: bool | str) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, str):
        return v.strip().lower() in ("true", "1", "yes", "on")
    return bool(v)


class Settings(BaseSettings):
    """
    Codec settings with type validation.

    All fields have defaults, so importing the package never requires any
    environment to be present.
    """

    model_config = SettingsConfigDict(
        env_file=os.getenv("ENV_FILE") or None, env_prefix="", extra="ignore"
    )

    # Application
    app_env: AppEnvironment = AppEnvironment.LOCAL
    app_name: str = "endorsement-policy-codec"
    app_log_level: str = "INFO"

    # Observability
    observability_structured_logs: bool = True
    metrics_enabled: bool = True

    # Decoder behaviour
    # Reproduce the ADMIN/CLIENT -> PEER collapse of older decoders.
    codec_legacy_role_collapse: bool = False
    # Log a warning when And/Or could equally have been an explicit AtLeast.
    codec_warn_on_ambiguity: bool = False

    # Encoder behaviour
    codec_validate_on_encode: bool = True
    codec_max_depth: int = Field(default=64, ge=1)
    codec_max_nodes: int = Field(default=10_000, ge=1)

    # Deserialization limits
    codec_max_payload_bytes: int = Field(default=4 * 1024 * 1024, ge=1)

    @field_validator(
        "observability_structured_logs",
        "metrics_enabled",
        "codec_legacy_role_collapse",
        "codec_warn_on_ambiguity",
        "codec_validate_on_encode",
        mode="before",
    )
    @classmethod
    def parse_bool_flags(cls, v: bool | str) -> bool:
        """Parse boolean flags from string or bool."""
        return _parse_bool(v)

    @field_validator("app_env", mode="before")
    @classmethod
    def validate_app_env(cls, v: str | AppEnvironment) -> AppEnvironment:
        """Validate and parse app_env to AppEnvironment enum."""
        if isinstance(v, AppEnvironment):
            return v
        try:
            return AppEnvironment(v.lower())
        except ValueError:
            raise ValueError(
                f"app_env must be one of {[e.value for e in AppEnvironment]}, got '{v}'"
            )

    @field_validator("app_log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalise and validate the log level name."""
        level = v.strip().upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"app_log_level must be a standard logging level, got '{v}'")
        return level

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """
        Validate production-specific settings.

        Encoding unvalidated expressions is only allowed outside production.
        """
        if self.app_env == AppEnvironment.PROD and not self.codec_validate_on_encode:
            raise ValueError("CODEC_VALIDATE_ON_ENCODE cannot be disabled in production")

        return self


settings = Settings()
