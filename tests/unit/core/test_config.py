"""
Unit Tests for Configuration Management.

Black box tests against the public interface of config.py.
Settings tests run against the real YAML files shipped with the package.
User store and environment tests use tmp_path (HOME is redirected there
by the root conftest).
"""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from arcana.core.config import (
    AppConfig,
    ConfigStore,
    EnvironmentSettings,
    default_config_path,
    get_app_config,
    home_dir,
    load_yaml_config,
    resolve_session_config,
)
from arcana.core.config_schema import ApplicationSchema, LoggingSchema
from arcana.core.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def _clear_config_cache():
    """Clear lru_cache between tests so each test gets a fresh load."""
    get_app_config.cache_clear()
    yield
    get_app_config.cache_clear()


@pytest.fixture
def config_store(tmp_path) -> ConfigStore:
    return ConfigStore(tmp_path / "arcanacli.json")


# =============================================================================
# YAML settings
# =============================================================================


class TestAppConfig:
    """Tests for the packaged YAML settings."""

    def test_loads_application_settings(self):
        config = get_app_config()
        assert isinstance(config, AppConfig)
        assert isinstance(config.application, ApplicationSchema)
        assert config.application.name == "Arcana CLI"

    def test_defaults(self):
        application = get_app_config().application
        assert application.defaults.base_url == "http://localhost:8000/arcana"
        assert application.defaults.user_id == "cli-user-123"
        assert application.config_file == ".arcanacli.json"

    def test_polling_interval(self):
        assert get_app_config().application.polling.interval_seconds == 3

    def test_request_timeout(self):
        assert get_app_config().application.timeouts.request == 30

    def test_loads_logging_settings(self):
        logging_config = get_app_config().logging
        assert isinstance(logging_config, LoggingSchema)
        assert logging_config.handlers.file.enabled is False

    def test_is_cached(self):
        assert get_app_config() is get_app_config()

    def test_missing_yaml_raises(self):
        with pytest.raises(FileNotFoundError) as exc_info:
            load_yaml_config("does-not-exist.yaml")
        assert "does-not-exist.yaml" in str(exc_info.value)

    def test_invalid_yaml_raises_configuration_error(self):
        raw = load_yaml_config("application.yaml")
        raw["polling"] = {"interval_seconds": 0}

        with patch("arcana.core.config.load_yaml_config", return_value=raw):
            with pytest.raises(ConfigurationError) as exc_info:
                AppConfig()

        assert "application.yaml" in exc_info.value.message

    def test_unknown_yaml_keys_are_rejected(self):
        raw = load_yaml_config("application.yaml")
        raw["unexpected"] = True

        with patch("arcana.core.config.load_yaml_config", return_value=raw):
            with pytest.raises(ConfigurationError):
                AppConfig()


# =============================================================================
# Home directory
# =============================================================================


class TestHomeDirectory:
    """Tests for home directory resolution."""

    def test_default_config_path_is_in_home(self, tmp_path):
        assert default_config_path() == tmp_path / ".arcanacli.json"

    def test_missing_home_raises_configuration_error(self):
        with patch.object(Path, "home", side_effect=RuntimeError("no home")):
            with pytest.raises(ConfigurationError) as exc_info:
                home_dir()

        assert "home directory" in exc_info.value.message


# =============================================================================
# ConfigStore
# =============================================================================


class TestConfigStore:
    """Tests for the JSON user store."""

    def test_missing_file_reads_as_empty(self, config_store):
        assert config_store.read() == {}
        assert config_store.get("api_key") is None

    def test_set_then_get(self, config_store):
        config_store.set("api_key", "sk-123")
        assert config_store.get("api_key") == "sk-123"

    def test_set_preserves_other_keys(self, config_store):
        config_store.set("api_key", "sk-123")
        config_store.set("user_id", "alice")
        assert config_store.read() == {"api_key": "sk-123", "user_id": "alice"}

    def test_file_is_pretty_printed_json(self, config_store):
        config_store.set("base_url", "https://example.test")
        content = config_store.path.read_text(encoding="utf-8")
        assert content == json.dumps({"base_url": "https://example.test"}, indent=2)

    def test_delete_existing_key(self, config_store):
        config_store.set("user_id", "alice")
        assert config_store.delete("user_id") is True
        assert config_store.get("user_id") is None

    def test_delete_is_idempotent(self, config_store):
        config_store.set("api_key", "sk-123")
        config_store.delete("user_id")
        first = config_store.read()
        config_store.delete("user_id")
        assert config_store.read() == first == {"api_key": "sk-123"}

    def test_delete_missing_key_reports_absent(self, config_store):
        assert config_store.delete("nothing") is False

    def test_items(self, config_store):
        config_store.set("a", "1")
        config_store.set("b", "2")
        assert config_store.items() == [("a", "1"), ("b", "2")]

    def test_malformed_json_raises(self, config_store):
        config_store.path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigurationError) as exc_info:
            config_store.read()
        assert "Malformed config file" in exc_info.value.message

    def test_non_object_json_raises(self, config_store):
        config_store.path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            config_store.read()

    def test_default_path_is_home(self, tmp_path):
        store = ConfigStore()
        store.set("user_id", "alice")
        assert (tmp_path / ".arcanacli.json").exists()


# =============================================================================
# Session config resolution
# =============================================================================


class TestResolveSessionConfig:
    """Tests for environment > user store > defaults precedence."""

    def test_defaults_when_nothing_is_set(self, config_store):
        config = resolve_session_config(config_store, EnvironmentSettings())
        assert config.api_key is None
        assert config.base_url == "http://localhost:8000/arcana"
        assert config.user_id == "cli-user-123"

    def test_store_overrides_defaults(self, config_store):
        config_store.set("api_key", "stored-key")
        config_store.set("base_url", "https://stored.test")
        config_store.set("user_id", "stored-user")

        config = resolve_session_config(config_store, EnvironmentSettings())

        assert config.api_key == "stored-key"
        assert config.base_url == "https://stored.test"
        assert config.user_id == "stored-user"

    def test_environment_overrides_store(self, config_store, monkeypatch):
        config_store.set("api_key", "stored-key")
        config_store.set("user_id", "stored-user")
        monkeypatch.setenv("ARCANA_API_KEY", "env-key")
        monkeypatch.setenv("VAREON_API_BASE_URL", "https://env.test")

        config = resolve_session_config(config_store)

        assert config.api_key == "env-key"
        assert config.base_url == "https://env.test"
        assert config.user_id == "stored-user"

    def test_dotenv_file_is_read(self, config_store, tmp_path):
        (tmp_path / ".env").write_text("ARCANA_USER_ID=dotenv-user\n", encoding="utf-8")

        config = resolve_session_config(config_store)

        assert config.user_id == "dotenv-user"

    def test_empty_stored_key_counts_as_unset(self, config_store):
        config_store.set("api_key", "")
        config = resolve_session_config(config_store, EnvironmentSettings())
        assert config.api_key is None

    def test_result_is_frozen(self, config_store):
        config = resolve_session_config(config_store, EnvironmentSettings())
        with pytest.raises(ValidationError):
            config.user_id = "someone-else"

    def test_malformed_store_raises(self, config_store):
        config_store.path.write_text("oops", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            resolve_session_config(config_store, EnvironmentSettings())
