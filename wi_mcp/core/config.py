from functools import lru_cache
from typing import Annotated, Any, Literal
from urllib.parse import urlparse

from pydantic import ConfigDict, Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, NoDecode

from .errors import ErrorCode, WIError


DEFAULT_GRAPHQL_ENDPOINT = "https://api.wildlifeinsights.org/graphql"


class Settings(BaseSettings):
    model_config = ConfigDict(env_prefix="WI_", extra="ignore", frozen=True)

    # Upstream
    graphql_endpoint: str = Field(default=DEFAULT_GRAPHQL_ENDPOINT)
    bearer_token: str | None = None
    user_agent: str = Field(default="wi-mcp/0.2.1")
    timeout_ms: int = Field(default=60000, description="Upstream request timeout (ms)")

    # Retry policy
    retries: int = Field(default=3, description="Max attempts per upstream request, including the first")
    retry_base_delay_ms: int = Field(default=1000)
    no_retry_tools: Annotated[list[str], NoDecode] = Field(
        default_factory=list, description="Tool names that never retry (comma separated)"
    )

    # Runtime
    environment: Literal["development", "production", "test"] = "development"
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["json", "text"] = "text"
    log_colors: bool = Field(default=False, description="ANSI colors in text logs")
    port: int = Field(default=3000, description="Declared for parity with HTTP transports; unused on stdio")
    graceful_shutdown_timeout_ms: int = Field(default=10000)

    @field_validator(
        "timeout_ms",
        "retries",
        "retry_base_delay_ms",
        "port",
        "graceful_shutdown_timeout_ms",
        mode="before",
    )
    @classmethod
    def _fallback_on_bad_number(cls, value: Any, info: ValidationInfo) -> Any:
        default = cls.model_fields[info.field_name].default
        if value is None or value == "":
            return default
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    @field_validator("retries")
    @classmethod
    def _at_least_one_attempt(cls, value: int) -> int:
        return max(1, value)

    @field_validator("no_retry_tools", mode="before")
    @classmethod
    def _split_tool_names(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [name.strip() for name in value.split(",") if name.strip()]
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip().lower()
            return "warn" if value == "warning" else value
        return value

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0


def load_settings(**overrides: Any) -> Settings:
    """Build a fresh snapshot from the current environment."""
    return Settings(**overrides)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()


def validate_config(settings: Settings) -> None:
    """Fail fast on configuration the server cannot run with.

    The endpoint must be provided explicitly even though a default exists, and
    production deployments must carry a bearer token.
    """
    if "graphql_endpoint" not in settings.model_fields_set or not settings.graphql_endpoint:
        raise WIError(
            code=ErrorCode.CONFIG_MISSING_REQUIRED,
            message="WI_GRAPHQL_ENDPOINT is required",
            user_message="⚙️ Configuration error: WI_GRAPHQL_ENDPOINT is required.",
            context={"setting": "WI_GRAPHQL_ENDPOINT"},
        )

    parsed = urlparse(settings.graphql_endpoint)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise WIError(
            code=ErrorCode.CONFIG_INVALID,
            message=f"WI_GRAPHQL_ENDPOINT is not an http(s) URL: {settings.graphql_endpoint}",
            user_message="⚙️ Configuration error: WI_GRAPHQL_ENDPOINT must be an http(s) URL.",
            context={"setting": "WI_GRAPHQL_ENDPOINT"},
        )

    if settings.is_production and not settings.bearer_token:
        raise WIError(
            code=ErrorCode.CONFIG_MISSING_REQUIRED,
            message="WI_BEARER_TOKEN is required in production environment",
            user_message="⚙️ Configuration error: WI_BEARER_TOKEN is required in production.",
            context={"setting": "WI_BEARER_TOKEN"},
        )
