"""
Configuration Management.

Three layers, resolved once at startup:

Settings (YAML, shipped with the package):
    application.yaml   - App identity, defaults, timeouts, polling cadence
    logging.yaml       - Logging configuration

Environment (pydantic-settings, also reads ./.env):
    ARCANA_API_KEY, VAREON_API_BASE_URL, ARCANA_USER_ID

User store (JSON, ~/.arcanacli.json):
    api_key, base_url, user_id and any other key set with `arcana config set`

Each session setting resolves as environment, then user store, then the
defaults in application.yaml.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from arcana.core.config_schema import ApplicationSchema, LoggingSchema
from arcana.core.exceptions import ConfigurationError

SETTINGS_DIR = Path(__file__).resolve().parent.parent / "settings"


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML configuration file from arcana/settings/."""
    config_path = SETTINGS_DIR / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


def _load_validated(schema_cls: type, filename: str) -> Any:
    """Load YAML and validate against schema. Returns typed model instance."""
    raw = load_yaml_config(filename)
    try:
        return schema_cls(**raw)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration in {filename}:\n{e}"
        ) from e


class AppConfig:
    """
    Application configuration loaded from YAML files.

    Each YAML file is validated against its Pydantic schema at load time.
    Properties return typed Pydantic model instances with attribute access.
    """

    def __init__(self) -> None:
        self._application = _load_validated(ApplicationSchema, "application.yaml")
        self._logging = _load_validated(LoggingSchema, "logging.yaml")

    @property
    def application(self) -> ApplicationSchema:
        """Application settings."""
        return self._application

    @property
    def logging(self) -> LoggingSchema:
        """Logging settings."""
        return self._logging


@lru_cache
def get_app_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()


class EnvironmentSettings(BaseSettings):
    """Values taken from the process environment or a local .env file."""

    arcana_api_key: str | None = None
    vareon_api_base_url: str | None = None
    arcana_user_id: str | None = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def home_dir() -> Path:
    """
    Return the user's home directory.

    Raises:
        ConfigurationError: If no home directory can be determined
    """
    try:
        return Path.home()
    except RuntimeError as e:
        raise ConfigurationError(f"Could not determine home directory: {e}") from e


def default_config_path() -> Path:
    """Path of the user config store (~/.arcanacli.json by default)."""
    return home_dir() / get_app_config().application.config_file


class ConfigStore:
    """
    Key-value JSON document persisted in the user's home directory.

    Every operation re-reads the file so separate invocations never see
    stale values.

    Usage:
        store = ConfigStore()
        store.set("api_key", "sk-...")
        store.get("api_key")
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = path if path is not None else default_config_path()

    def read(self) -> dict[str, Any]:
        """
        Read the whole document.

        Returns:
            The stored mapping, or an empty dict if the file does not exist

        Raises:
            ConfigurationError: If the file is not a JSON object
        """
        if not self.path.exists():
            return {}
        try:
            content = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Malformed config file {self.path}: {e}") from e
        if not isinstance(content, dict):
            raise ConfigurationError(f"Malformed config file {self.path}: expected a JSON object")
        return content

    def write(self, config: dict[str, Any]) -> None:
        """Replace the whole document."""
        self.path.write_text(json.dumps(config, indent=2), encoding="utf-8")

    def get(self, key: str) -> Any | None:
        return self.read().get(key)

    def set(self, key: str, value: Any) -> None:
        config = self.read()
        config[key] = value
        self.write(config)

    def delete(self, key: str) -> bool:
        """Remove a key. Returns whether it was present."""
        config = self.read()
        existed = key in config
        config.pop(key, None)
        self.write(config)
        return existed

    def items(self) -> list[tuple[str, Any]]:
        return list(self.read().items())


class SessionConfig(BaseModel):
    """Connection settings for one process lifetime."""

    model_config = ConfigDict(frozen=True)

    api_key: str | None
    base_url: str
    user_id: str


def resolve_session_config(
    store: ConfigStore | None = None,
    environment: EnvironmentSettings | None = None,
) -> SessionConfig:
    """
    Resolve api_key, base_url and user_id.

    Args:
        store: User config store. Defaults to ~/.arcanacli.json.
        environment: Environment values. Defaults to the live environment.

    Returns:
        Frozen SessionConfig.

    Raises:
        ConfigurationError: If the user store is malformed or no home directory exists
    """
    store = store if store is not None else ConfigStore()
    environment = environment if environment is not None else EnvironmentSettings()
    stored = store.read()
    defaults = get_app_config().application.defaults

    return SessionConfig(
        api_key=environment.arcana_api_key or stored.get("api_key") or None,
        base_url=environment.vareon_api_base_url or stored.get("base_url") or defaults.base_url,
        user_id=environment.arcana_user_id or stored.get("user_id") or defaults.user_id,
    )
