"""Integration tests for configuration loading with layered precedence.

Tests the real load_config() function with actual YAML files, .env files,
environment variables, and CLI overrides to verify precedence:
defaults < YAML < ENV < CLI.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from seedarr.infrastructure.config.load import load_config

pytestmark = pytest.mark.integration


@pytest.fixture()
def yaml_config(tmp_path: Path) -> Path:
    """Write a minimal YAML config and return its path."""
    config = {
        "app_name": "seedarr-test",
        "environment": "test",
        "http": {
            "timeout_seconds": 20.0,
            "user_agent": "TestAgent/1.0",
        },
        "logging": {"level": "DEBUG", "format": "console"},
        "tmdb": {"api_key": "yaml-key", "language": "en-US"},
        "source": {"search_url": "https://mirror.example/search.php?search={query}"},
    }
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump(config), encoding="utf-8")
    return path


@pytest.fixture()
def dotenv_cleanup() -> Iterator[None]:
    """load_dotenv writes straight into os.environ; undo that after the test."""
    yield
    os.environ.pop("SEEDARR_TMDB_ACCESS_TOKEN", None)


class TestDefaultsOnly:
    """Load with no YAML, no ENV, no CLI: pure defaults."""

    def test_defaults_produce_valid_config(self) -> None:
        config = load_config()
        assert config.app_name == "seedarr"
        assert config.environment == "dev"
        assert config.http_timeout_seconds == 15.0
        assert config.http_follow_redirects is True
        assert config.log_level == "INFO"
        assert config.log_format == "console"
        assert config.tmdb.language == "ru-RU"
        assert config.tmdb.api_key is None
        assert config.source.search_url == "https://bitru.org/search.php?search={query}"
        assert config.shutdown_timeout_seconds == 10.0

    def test_defaults_derive_log_format_from_environment(self) -> None:
        config = load_config(cli_overrides={"environment": "prod"})
        assert config.log_format == "json"


class TestYamlOverrides:
    """YAML values override defaults."""

    def test_yaml_overrides_defaults(self, yaml_config: Path) -> None:
        config = load_config(config_path=yaml_config)
        assert config.app_name == "seedarr-test"
        assert config.environment == "test"
        assert config.http_timeout_seconds == 20.0
        assert config.http_user_agent == "TestAgent/1.0"
        assert config.log_level == "DEBUG"
        assert config.tmdb.api_key == "yaml-key"
        assert config.tmdb.language == "en-US"
        assert config.source.search_url.startswith("https://mirror.example/")

    def test_yaml_partial_section_keeps_other_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "partial.yaml"
        path.write_text(yaml.dump({"tmdb": {"access_token": "tok"}}), encoding="utf-8")

        config = load_config(config_path=path)
        assert config.tmdb.access_token == "tok"
        assert config.tmdb.language == "ru-RU"
        assert config.tmdb.base_url == "https://api.themoviedb.org/3"

    def test_yaml_file_not_found_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(config_path=tmp_path / "nonexistent.yaml")

    def test_empty_yaml_is_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(config_path=path).app_name == "seedarr"

    def test_yaml_must_be_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValueError, match="mapping"):
            load_config(config_path=path)

    def test_search_url_without_placeholder_is_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text(
            yaml.dump({"source": {"search_url": "https://bitru.org/search.php"}}),
            encoding="utf-8",
        )
        with pytest.raises(ValidationError):
            load_config(config_path=path)

    def test_non_positive_timeout_is_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.dump({"http": {"timeout_seconds": 0}}), encoding="utf-8")
        with pytest.raises(ValidationError):
            load_config(config_path=path)


class TestEnvOverrides:
    """Environment variables override YAML and defaults."""

    def test_env_overrides_yaml(
        self, yaml_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SEEDARR_LOG_LEVEL", "WARNING")
        monkeypatch.setenv("SEEDARR_HTTP_TIMEOUT_SECONDS", "60.0")
        monkeypatch.setenv("SEEDARR_TMDB_API_KEY", "env-key")

        config = load_config(config_path=yaml_config)
        assert config.log_level == "WARNING"
        assert config.http_timeout_seconds == 60.0
        assert config.tmdb.api_key == "env-key"
        # YAML values not overridden by ENV stay
        assert config.app_name == "seedarr-test"
        assert config.tmdb.language == "en-US"

    def test_env_overrides_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SEEDARR_ENVIRONMENT", "prod")
        monkeypatch.setenv("SEEDARR_SOURCE_SEARCH_URL", "https://alt.example/?s={query}")

        config = load_config()
        assert config.environment == "prod"
        assert config.log_format == "json"
        assert config.source.search_url == "https://alt.example/?s={query}"

    def test_dotenv_file(self, tmp_path: Path, dotenv_cleanup: None) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("SEEDARR_TMDB_ACCESS_TOKEN=dotenv-token\n", encoding="utf-8")

        config = load_config(dotenv_path=env_file)
        assert config.tmdb.access_token == "dotenv-token"

    def test_dotenv_not_found_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(dotenv_path=tmp_path / "missing.env")


class TestCliOverrides:
    """CLI overrides beat everything (highest precedence)."""

    def test_cli_overrides_yaml_and_env(
        self, yaml_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SEEDARR_LOG_LEVEL", "WARNING")

        config = load_config(
            config_path=yaml_config,
            cli_overrides={"log_level": "ERROR"},
        )
        assert config.log_level == "ERROR"

    def test_cli_overrides_with_sectioned_format(self, yaml_config: Path) -> None:
        config = load_config(
            config_path=yaml_config,
            cli_overrides={"http": {"timeout_seconds": 5.0}},
        )
        assert config.http_timeout_seconds == 5.0
        assert config.http_user_agent == "TestAgent/1.0"

    def test_to_sectioned_dict_round_trips(self, yaml_config: Path) -> None:
        config = load_config(config_path=yaml_config)
        again = load_config(cli_overrides=config.to_sectioned_dict())
        assert again == config
