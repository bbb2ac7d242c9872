"""Configuration surface for aligned-proofs."""
from __future__ import annotations

from decimal import Decimal
from functools import lru_cache
from typing import Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError

DEFAULT_SUBMISSION_THRESHOLD = Decimal("0.004")
DEFAULT_SETTLEMENT_DELAY_SECONDS = 5.0


class AlignedSettings(BaseSettings):
    """Deployment configuration, read from ``ALIGNED_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ALIGNED_",
        env_file=".env",
        extra="ignore",
    )

    environment: Literal["dev", "sandbox", "prod"] = "dev"

    # Remote proof network
    api_base_url: str = "https://api.alignedlayer.com"
    api_key: str = ""
    timeout: float = 30.0
    max_retries: int = 3

    # Optional fixed billing identifier (hex, 0x optional)
    identifier: Optional[str] = None

    # Balance policy
    submission_threshold: Decimal = DEFAULT_SUBMISSION_THRESHOLD
    settlement_delay_seconds: float = DEFAULT_SETTLEMENT_DELAY_SECONDS
    require_settled_balance: bool = False

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    @field_validator("identifier", mode="before")
    @classmethod
    def blank_identifier_is_unset(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("submission_threshold")
    @classmethod
    def validate_threshold(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("submission_threshold must be non-negative")
        return v

    @field_validator("settlement_delay_seconds", "timeout")
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("must be non-negative")
        return v

    @field_validator("max_retries")
    @classmethod
    def validate_retries(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_retries must be at least 1")
        return v

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


@lru_cache
def get_settings() -> AlignedSettings:
    return AlignedSettings()


def validate_settings(settings: AlignedSettings) -> AlignedSettings:
    """Check the settings a live client needs are present.

    Raises:
        ConfigurationError: If the API key or base URL is missing.
    """
    missing = []
    if not settings.api_key:
        missing.append("ALIGNED_API_KEY")
    if not settings.api_base_url:
        missing.append("ALIGNED_API_BASE_URL")
    if missing:
        raise ConfigurationError(
            f"Proof network configuration is incomplete: {', '.join(missing)} not set",
            details={"missing": missing},
        )
    return settings


__all__ = [
    "DEFAULT_SUBMISSION_THRESHOLD",
    "DEFAULT_SETTLEMENT_DELAY_SECONDS",
    "AlignedSettings",
    "get_settings",
    "validate_settings",
]
