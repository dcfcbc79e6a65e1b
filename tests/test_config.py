from __future__ import annotations

import pytest

from wi_mcp.core.config import DEFAULT_GRAPHQL_ENDPOINT, get_settings, load_settings, validate_config
from wi_mcp.core.errors import ErrorCode, WIError


def test_defaults() -> None:
    settings = load_settings()
    assert settings.graphql_endpoint == DEFAULT_GRAPHQL_ENDPOINT
    assert settings.bearer_token is None
    assert settings.timeout_ms == 60000
    assert settings.timeout_seconds == 60.0
    assert settings.retries == 3
    assert settings.retry_base_delay_ms == 1000
    assert settings.no_retry_tools == []
    assert settings.environment == "development"
    assert settings.is_development is True
    assert settings.log_level == "info"
    assert settings.log_format == "text"
    assert settings.log_colors is False
    assert settings.port == 3000
    assert settings.graceful_shutdown_timeout_ms == 10000


def test_reads_prefixed_environment(monkeypatch) -> None:
    monkeypatch.setenv("WI_GRAPHQL_ENDPOINT", "https://example.org/graphql")
    monkeypatch.setenv("WI_BEARER_TOKEN", "env-token-123")
    monkeypatch.setenv("WI_TIMEOUT_MS", "5000")
    monkeypatch.setenv("WI_RETRIES", "5")
    monkeypatch.setenv("WI_NO_RETRY_TOOLS", "getProjects, getDeployments ,")
    monkeypatch.setenv("WI_ENVIRONMENT", "production")
    monkeypatch.setenv("WI_LOG_LEVEL", "WARNING")
    monkeypatch.setenv("WI_LOG_FORMAT", "json")
    monkeypatch.setenv("WI_LOG_COLORS", "true")

    settings = get_settings()

    assert settings.graphql_endpoint == "https://example.org/graphql"
    assert settings.bearer_token == "env-token-123"
    assert settings.timeout_ms == 5000
    assert settings.retries == 5
    assert settings.no_retry_tools == ["getProjects", "getDeployments"]
    assert settings.is_production is True
    assert settings.log_level == "warn"
    assert settings.log_format == "json"
    assert settings.log_colors is True


def test_unparseable_numbers_fall_back_to_defaults(monkeypatch) -> None:
    monkeypatch.setenv("WI_TIMEOUT_MS", "soon")
    monkeypatch.setenv("WI_RETRIES", "")
    monkeypatch.setenv("WI_PORT", "http")

    settings = load_settings()

    assert settings.timeout_ms == 60000
    assert settings.retries == 3
    assert settings.port == 3000


def test_retries_never_below_one() -> None:
    assert load_settings(retries=0).retries == 1


def test_get_settings_is_cached() -> None:
    assert get_settings() is get_settings()


def test_validate_requires_explicit_endpoint() -> None:
    with pytest.raises(WIError) as excinfo:
        validate_config(load_settings())
    assert excinfo.value.code is ErrorCode.CONFIG_MISSING_REQUIRED


def test_validate_rejects_non_http_endpoint() -> None:
    with pytest.raises(WIError) as excinfo:
        validate_config(load_settings(graphql_endpoint="ftp://wi.test/graphql"))
    assert excinfo.value.code is ErrorCode.CONFIG_INVALID


def test_validate_requires_token_in_production() -> None:
    settings = load_settings(graphql_endpoint="https://wi.test/graphql", environment="production")
    with pytest.raises(WIError) as excinfo:
        validate_config(settings)
    assert excinfo.value.code is ErrorCode.CONFIG_MISSING_REQUIRED
    assert "WI_BEARER_TOKEN" in excinfo.value.message


def test_validate_accepts_complete_configuration(monkeypatch) -> None:
    monkeypatch.setenv("WI_GRAPHQL_ENDPOINT", "https://wi.test/graphql")
    monkeypatch.setenv("WI_BEARER_TOKEN", "prod-token-1234")
    monkeypatch.setenv("WI_ENVIRONMENT", "production")
    validate_config(load_settings())
