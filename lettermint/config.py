"""
SDK Configuration

Loads defaults from LETTERMINT_* environment variables. Values passed
explicitly to the client or to the webhook helpers always take precedence.
"""

from datetime import timedelta
from functools import lru_cache
from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_BASE_URL = "https://api.lettermint.co/v1"
DEFAULT_TIMEOUT = 30.0
DEFAULT_WEBHOOK_TOLERANCE = timedelta(minutes=5)
VERSION = "1.0.0"


class LettermintSettings(BaseSettings):
    """Environment-backed SDK settings"""
    api_token: Optional[SecretStr] = Field(
        default=None,
        description="API token from the Lettermint dashboard",
    )
    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        description="Lettermint API base URL",
    )
    timeout: float = Field(
        default=DEFAULT_TIMEOUT,
        description="HTTP timeout in seconds",
        gt=0,
    )
    webhook_secret: Optional[SecretStr] = Field(
        default=None,
        description="Webhook signing secret",
    )
    webhook_tolerance: int = Field(
        default=int(DEFAULT_WEBHOOK_TOLERANCE.total_seconds()),
        description="Maximum webhook timestamp age in seconds",
        ge=0,
    )

    model_config = SettingsConfigDict(
        env_prefix="LETTERMINT_",
        extra="ignore",
        case_sensitive=False,
    )

    @property
    def webhook_tolerance_delta(self) -> timedelta:
        return timedelta(seconds=self.webhook_tolerance)


@lru_cache()
def get_settings() -> LettermintSettings:
    return LettermintSettings()
