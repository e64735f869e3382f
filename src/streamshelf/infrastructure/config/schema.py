"""Pydantic configuration models with validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from .defaults import DEFAULT_CATALOG_URL, DEFAULT_USER_AGENT

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]
CacheBackendName = Literal["diskcache", "redis"]


def _normalize_path(value: Any) -> Path:
    """
    Normalize a path-like value without causing filesystem side-effects.

    This function MUST NOT create directories or files.
    """
    if isinstance(value, Path):
        return value.expanduser()
    if isinstance(value, str):
        return Path(value).expanduser()
    raise TypeError(f"Expected path-like value, got: {type(value)!r}")


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (catalog/http/logging/cache).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="streamshelf", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # Catalog (YAML section: catalog.default_url)
    catalog_default_url: str = Field(
        default=DEFAULT_CATALOG_URL,
        validation_alias=AliasChoices(
            "catalog_default_url",
            AliasPath("catalog", "default_url"),
        ),
        description="Catalog manifest URL used until the user configures another.",
    )

    # HTTP (YAML section: http.*)
    http_connect_timeout_seconds: float = Field(
        default=10.0,
        validation_alias=AliasChoices(
            "http_connect_timeout_seconds",
            AliasPath("http", "connect_timeout_seconds"),
        ),
        description="TCP connect timeout in seconds.",
    )
    http_read_timeout_seconds: float = Field(
        default=30.0,
        validation_alias=AliasChoices(
            "http_read_timeout_seconds",
            AliasPath("http", "read_timeout_seconds"),
        ),
        description="Read timeout in seconds.",
    )
    http_write_timeout_seconds: float = Field(
        default=30.0,
        validation_alias=AliasChoices(
            "http_write_timeout_seconds",
            AliasPath("http", "write_timeout_seconds"),
        ),
        description="Write timeout in seconds.",
    )
    http_user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="Browser-like User-Agent; providers block non-browser clients.",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    # Cache (YAML section: cache.*)
    cache_backend: CacheBackendName = Field(
        default="diskcache",
        validation_alias=AliasChoices(
            "cache_backend",
            AliasPath("cache", "backend"),
        ),
        description="Cache backend: 'diskcache' (SQLite) or 'redis'.",
    )
    cache_dir: Path = Field(
        default=Path("./.cache/streamshelf"),
        validation_alias=AliasChoices(
            "cache_dir",
            AliasPath("cache", "dir"),
        ),
        description="Diskcache directory.",
    )
    cache_redis_url: str = Field(
        default="redis://localhost:6379/0",
        validation_alias=AliasChoices(
            "cache_redis_url",
            AliasPath("cache", "redis_url"),
        ),
        description="Redis connection URL (only when backend=redis).",
    )

    @field_validator("cache_dir", mode="before")
    @classmethod
    def _validate_paths(cls, v: Any) -> Path:
        return _normalize_path(v)

    @field_validator(
        "http_connect_timeout_seconds",
        "http_read_timeout_seconds",
        "http_write_timeout_seconds",
    )
    @classmethod
    def _validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http timeouts must be > 0")
        return v

    @field_validator("catalog_default_url")
    @classmethod
    def _validate_catalog_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("catalog_default_url must be an http(s) URL")
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    def to_sectioned_dict(self) -> dict[str, Any]:
        """
        Dump configuration in the sectioned shape used by config.yaml/docs.
        """
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "catalog": {"default_url": self.catalog_default_url},
            "http": {
                "connect_timeout_seconds": self.http_connect_timeout_seconds,
                "read_timeout_seconds": self.http_read_timeout_seconds,
                "write_timeout_seconds": self.http_write_timeout_seconds,
                "user_agent": self.http_user_agent,
            },
            "logging": {"level": self.log_level, "format": self.log_format},
            "cache": {
                "backend": self.cache_backend,
                "dir": str(self.cache_dir),
                "redis_url": self.cache_redis_url,
            },
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    Supported env var examples (flat, explicit):
    - STREAMSHELF_CATALOG_DEFAULT_URL
    - STREAMSHELF_HTTP_READ_TIMEOUT_SECONDS
    - STREAMSHELF_LOG_LEVEL
    - STREAMSHELF_CACHE_DIR
    """

    model_config = SettingsConfigDict(
        env_prefix="STREAMSHELF_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    catalog_default_url: Optional[str] = None

    http_connect_timeout_seconds: Optional[float] = None
    http_read_timeout_seconds: Optional[float] = None
    http_write_timeout_seconds: Optional[float] = None
    http_user_agent: Optional[str] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    cache_backend: Optional[CacheBackendName] = None
    cache_dir: Optional[Path] = None
    cache_redis_url: Optional[str] = None

    @field_validator("cache_dir", mode="before")
    @classmethod
    def _validate_paths(cls, v: Any) -> Any:
        if v is None:
            return None
        return _normalize_path(v)

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
