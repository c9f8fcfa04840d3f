"""Pydantic configuration models with validation."""

from __future__ import annotations

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

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]


class TmdbConfig(BaseModel):
    """TMDB metadata provider settings (YAML section: tmdb.*)."""

    api_key: str | None = Field(
        default=None,
        description="TMDB v3 API key (sent as api_key query parameter).",
    )
    access_token: str | None = Field(
        default=None,
        description="TMDB v4 read access token (sent as Bearer header). "
        "Takes precedence over api_key.",
    )
    language: str = Field(
        default="ru-RU",
        description="Locale for localized titles returned by /find.",
    )
    base_url: str = Field(
        default="https://api.themoviedb.org/3",
        description="TMDB API base URL.",
    )


class SourceConfig(BaseModel):
    """Torrent search surface settings (YAML section: source.*)."""

    search_url: str = Field(
        default="https://bitru.org/search.php?search={query}",
        description="Search URL template; {query} is replaced by the encoded query.",
    )

    @field_validator("search_url")
    @classmethod
    def _validate_search_url(cls, v: str) -> str:
        if "{query}" not in v:
            raise ValueError("source.search_url must contain '{query}'")
        if not v.startswith(("http://", "https://")):
            raise ValueError("source.search_url must be an http(s) URL")
        return v


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (http/logging/tmdb/source).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="seedarr", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # HTTP client shared by TMDB and the search surface (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=15.0,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="Timeout in seconds for every outbound request.",
    )
    http_follow_redirects: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "http_follow_redirects",
            AliasPath("http", "follow_redirects"),
        ),
        description="Whether HTTP client follows redirects.",
    )
    http_user_agent: str = Field(
        default="Seedarr/0.1.0",
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="User-Agent for outgoing HTTP requests.",
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

    tmdb: TmdbConfig = Field(default_factory=TmdbConfig)
    source: SourceConfig = Field(default_factory=SourceConfig)

    shutdown_timeout_seconds: float = Field(
        default=10.0,
        description="Max seconds to wait for in-flight requests on shutdown.",
    )

    @field_validator("http_timeout_seconds")
    @classmethod
    def _validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout_seconds must be > 0")
        return v

    @field_validator("shutdown_timeout_seconds")
    @classmethod
    def _validate_shutdown_timeout(cls, v: float) -> float:
        if v < 0:
            raise ValueError("shutdown_timeout_seconds must be >= 0")
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
            "http": {
                "timeout_seconds": self.http_timeout_seconds,
                "follow_redirects": self.http_follow_redirects,
                "user_agent": self.http_user_agent,
            },
            "logging": {"level": self.log_level, "format": self.log_format},
            "tmdb": self.tmdb.model_dump(),
            "source": self.source.model_dump(),
            "shutdown_timeout_seconds": self.shutdown_timeout_seconds,
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    load.py creates EnvOverrides() to read SEEDARR_* variables, converts the
    set values to a dict, merges it over YAML/defaults, then validates AppConfig.

    Supported env var examples (flat, explicit):
    - SEEDARR_HTTP_TIMEOUT_SECONDS
    - SEEDARR_LOG_LEVEL
    - SEEDARR_TMDB_API_KEY / SEEDARR_TMDB_ACCESS_TOKEN
    - SEEDARR_SOURCE_SEARCH_URL
    """

    model_config = SettingsConfigDict(
        env_prefix="SEEDARR_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    http_timeout_seconds: Optional[float] = None
    http_follow_redirects: Optional[bool] = None
    http_user_agent: Optional[str] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    tmdb_api_key: Optional[str] = None
    tmdb_access_token: Optional[str] = None
    tmdb_language: Optional[str] = None

    source_search_url: Optional[str] = None

    shutdown_timeout_seconds: Optional[float] = None

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
