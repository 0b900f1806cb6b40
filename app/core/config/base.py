from __future__ import annotations

from pathlib import Path
from typing import ClassVar, cast

from pydantic import Field, HttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.version import get_app_version


class AppBaseSettings(BaseSettings):
    # --- App ---
    APP_NAME: str = Field(default="Timezone Clock API", description="Human-readable application name")
    DEBUG: bool = Field(default=False, description="Enable debug behaviours like verbose logging")
    ENVIRONMENT: str = Field(default="development", description="Current environment name")
    VERSION: str = Field(default_factory=get_app_version, description="Semantic application version")

    # --- API ---
    API_PREFIX: str = Field(default="/api", pattern=r"^/\S+$", description="Path of the time endpoint and prefix for auxiliary routes")

    # --- Server ---
    HOST: str = Field(default="0.0.0.0", description="Host interface exposed by ASGI server")
    PORT: int = Field(default=8000, description="Port FastAPI listens on")

    # --- Response cache ---
    CACHE_TTL_MS: int = Field(default=1000, ge=0, description="Freshness window of cached time reports in milliseconds")
    CACHE_MAX_ENTRIES: int = Field(default=10_000, ge=1, description="Maximum number of cached reports before LRU eviction")

    # --- Rate limiting ---
    RATE_LIMIT_WINDOW_MS: int = Field(default=60_000, gt=0, description="Length of the fixed rate-limit window in milliseconds")
    RATE_LIMIT_MAX_REQUESTS: int = Field(default=100, ge=1, description="Requests admitted per client per window")
    RATE_LIMIT_MAX_CLIENTS: int = Field(default=10_000, ge=1, description="Maximum tracked clients before LRU eviction")
    CLIENT_IP_HEADER: str = Field(default="CF-Connecting-IP", description="Header carrying the originating client IP")
    RATE_LIMIT_FALLBACK_TO_PEER: bool = Field(
        default=False,
        description="Use the TCP peer address when the client IP header is absent instead of the shared 'unknown' bucket",
    )

    # --- Timezone validation ---
    TIMEZONE_FORMAT_CHECK: bool = Field(
        default=True,
        description="Reject identifiers that are not shaped like an IANA name before the lookup",
    )

    # --- CORS ---
    CORS_ALLOW_ORIGIN: str = Field(default="*", description="Value of Access-Control-Allow-Origin on every response")

    # --- Logging ---
    LOG_LEVEL: str = Field(default="INFO", description="Base log level for the application stack")
    LOG_CONSOLE_ENABLED: bool = Field(default=True, description="Emit structured logs to stdout")

    # --- Tracing ---
    TRACING_ENABLED: bool = Field(default=False, description="Enable OpenTelemetry tracing")
    TRACING_SAMPLE_RATIO: float = Field(
        default=1.0,
        ge=0.0,
        le=1.0,
        description="Probability (0-1) of sampling new root spans",
    )
    OTLP_ENDPOINT: HttpUrl = Field(
        default=cast(HttpUrl, "http://localhost:4318/v1/traces"),
        description="OTLP HTTP endpoint for trace export",
    )
    OTLP_HEADERS: dict[str, str] = Field(default_factory=dict, description="Extra headers sent with exported spans")
    OTLP_TIMEOUT_SECONDS: float = Field(default=5.0, gt=0.0, description="Timeout in seconds for span export requests")

    # Allow subclasses to influence default env files
    default_env_files: ClassVar[tuple[str, ...]] = (".env",)

    model_config = SettingsConfigDict(
        env_file=default_env_files,
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @classmethod
    def with_env_files(cls, env_files: list[Path] | None) -> type["AppBaseSettings"]:
        class ConfiguredSettings(cls):  # type: ignore[misc, valid-type]
            model_config = SettingsConfigDict(
                env_file=tuple(str(path) for path in env_files) if env_files else cls.default_env_files,
                env_file_encoding="utf-8",
                case_sensitive=True,
                extra="ignore",
            )

        ConfiguredSettings.__name__ = f"Configured{cls.__name__}"
        return ConfiguredSettings
