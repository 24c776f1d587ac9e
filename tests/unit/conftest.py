"""
Unit Test Fixtures.

Fixtures for unit tests that mock the backend.
The gateway is replaced by a spec'd MagicMock whose coroutine methods
are AsyncMocks, so no HTTP client is ever created.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from arcana.cli.gateway import CommandGateway, CommandResult
from arcana.session.dispatcher import CommandDispatcher
from arcana.session.input import InputController
from arcana.session.poller import JobPoller
from arcana.session.state import SessionState
from arcana.session.store import SessionStore


# =============================================================================
# Mock Gateway
# =============================================================================


@pytest.fixture
def mock_gateway() -> MagicMock:
    """
    Create a mock CommandGateway.

    submit() succeeds with an empty result unless a test overrides it.
    """
    gateway = MagicMock(spec=CommandGateway)
    gateway.submit = AsyncMock(return_value=CommandResult(status="success", message="ok"))
    gateway.fetch_job_status = AsyncMock()
    gateway.fetch_model_details = AsyncMock(return_value={"model": "arcana-1"})
    gateway.fetch_version = AsyncMock(return_value="1.0.0")
    gateway.close = AsyncMock()
    return gateway


# =============================================================================
# Session Components
# =============================================================================


@pytest.fixture
def store() -> SessionStore:
    """Store holding a fresh session state."""
    return SessionStore(SessionState(working_directory="/work"))


@pytest.fixture
def poller(store: SessionStore, mock_gateway: MagicMock) -> JobPoller:
    """Poller with a short interval so polling tests finish quickly."""
    return JobPoller(store, mock_gateway, interval=0.01)


@pytest.fixture
def dispatcher(store: SessionStore, mock_gateway: MagicMock, poller: JobPoller) -> CommandDispatcher:
    return CommandDispatcher(store, mock_gateway, poller)


@pytest.fixture
def controller(store: SessionStore, dispatcher: CommandDispatcher) -> InputController:
    return InputController(store, dispatcher)
