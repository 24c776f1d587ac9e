"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Every test runs with HOME and the working directory pointed at a fresh
tmp_path and with the ARCANA_* / VAREON_* variables removed, so the
user's real ~/.arcanacli.json, .env and log directory are never touched.
Handlers installed by setup_logging are removed after each test.
"""

import logging
from logging.handlers import RotatingFileHandler

import pytest

from arcana.core.config import SessionConfig

ENVIRONMENT_KEYS = ("ARCANA_API_KEY", "VAREON_API_BASE_URL", "ARCANA_USER_ID")


# =============================================================================
# Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Point HOME and the working directory at tmp_path and clear the environment."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    for key in ENVIRONMENT_KEYS:
        monkeypatch.delenv(key, raising=False)
    return tmp_path


@pytest.fixture(autouse=True)
def reset_logging():
    """setup_logging replaces the root handlers; drop what it installed afterwards."""
    root_logger = logging.getLogger()
    level = root_logger.level
    yield
    for handler in root_logger.handlers[:]:
        if isinstance(handler, RotatingFileHandler) or type(handler) is logging.StreamHandler:
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(level)


# =============================================================================
# Session Config
# =============================================================================


@pytest.fixture
def session_config() -> SessionConfig:
    """Resolved config with an API key, pointing at a fake backend."""
    return SessionConfig(
        api_key="test-key",
        base_url="http://backend.test/arcana",
        user_id="tester",
    )


@pytest.fixture
def anonymous_config() -> SessionConfig:
    """Resolved config without an API key."""
    return SessionConfig(
        api_key=None,
        base_url="http://backend.test/arcana",
        user_id="tester",
    )
