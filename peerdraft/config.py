from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Service configuration loaded from environment variables with validation."""

    model_config = SettingsConfigDict(
        env_file=(str(Path(__file__).resolve().parents[1] / ".env"), ".env"),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    app_name: str = Field(default="Peerdraft Settings", alias="APP_NAME")
    app_env: Literal["development", "staging", "production", "test"] = Field(
        default="production",
        alias="APP_ENV",
    )
    app_debug: bool = Field(default=False, alias="APP_DEBUG")
    api_v1_prefix: str = Field(default="/api/v1", alias="API_V1_PREFIX")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    data_file: Path = Field(default=Path("data") / "settings.json", alias="PEERDRAFT_DATA_FILE")

    # Operator-controlled endpoints. These seed the defaults and are forced on every migration.
    base_path: str = Field(default="https://www.peerdraft.app/cm/", alias="PEERDRAFT_BASE_PATH")
    subscription_api: str = Field(
        default="https://www.peerdraft.app/subscription",
        alias="PEERDRAFT_SUBSCRIPTION_API",
    )
    connect_api: str = Field(
        default="https://www.peerdraft.app/subscription/connect",
        alias="PEERDRAFT_CONNECT_API",
    )
    signaling: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["wss://www.peerdraft.app/signal"],
        alias="PEERDRAFT_SIGNALING",
    )

    checkout_url: str = Field(default="https://peerdraft.app/checkout", alias="PEERDRAFT_CHECKOUT_URL")
    support_email: str = Field(default="dominik@peerdraft.app", alias="PEERDRAFT_SUPPORT_EMAIL")

    http_timeout_seconds: float = Field(default=30.0, ge=1, le=120, alias="HTTP_TIMEOUT_SECONDS")

    @field_validator("api_v1_prefix")
    @classmethod
    def validate_api_prefix(cls, value: str) -> str:
        """Ensure the API prefix starts with a slash and has no trailing slash."""
        normalized = value.strip()
        if not normalized.startswith("/"):
            raise ValueError("API_V1_PREFIX must start with '/'.")
        if len(normalized) > 1 and normalized.endswith("/"):
            normalized = normalized.rstrip("/")
        return normalized

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"LOG_LEVEL {value!r} is not a logging level.")
        return normalized

    @field_validator("base_path", "subscription_api", "connect_api", "checkout_url")
    @classmethod
    def validate_http_url(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized.lower().startswith(("http://", "https://")):
            raise ValueError("Endpoint URLs must start with http:// or https://")
        return normalized

    @field_validator("signaling", mode="before")
    @classmethod
    def parse_signaling(cls, value: str | list[str]) -> list[str]:
        """Support comma-separated signaling servers from environment variables."""
        if isinstance(value, str):
            return [server.strip() for server in value.split(",") if server.strip()]
        return value

    @field_validator("signaling")
    @classmethod
    def validate_signaling(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("PEERDRAFT_SIGNALING must name at least one server.")
        for server in value:
            if not server.lower().startswith(("ws://", "wss://")):
                raise ValueError(f"Signaling server {server!r} must start with ws:// or wss://")
        return value


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""
    return Settings()


settings: Settings = get_settings()
