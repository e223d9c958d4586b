"""Client configuration via environment variables."""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ReconnectPolicy(BaseModel):
    """Bounded exponential backoff for the push channel."""

    max_attempts: int = Field(default=5, ge=0)
    base_delay: float = Field(default=1.0, gt=0)
    max_delay: float = Field(default=30.0, gt=0)

    def delay_for(self, attempt: int) -> float:
        return min(self.base_delay * (2**attempt), self.max_delay)


class ShepherdSettings(BaseSettings):
    # Backend REST API
    api_url: str = "http://localhost:5000"
    request_timeout: float = 10.0

    # Notification push channel
    socket_url: str = "http://localhost:5000"
    reconnect: ReconnectPolicy = Field(default_factory=ReconnectPolicy)

    # Member look-up
    search_debounce_ms: int = Field(default=300, ge=0)
    search_limit: int = Field(default=10, ge=1)

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="SHEPHERD_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @property
    def search_debounce(self) -> float:
        """Quiet period in seconds."""
        return self.search_debounce_ms / 1000
