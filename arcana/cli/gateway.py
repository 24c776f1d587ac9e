"""
Remote Command Gateway.

Wraps every outbound call to the backend:

    submit(command, args)       POST /cli/execute
    fetch_job_status(job_id)    GET  /arcana/jobs/{job_id}/status
    fetch_model_details()       GET  /cognisys/cli/model-details
    fetch_version()             GET  /version

Transport and remote faults are translated into the GatewayError family
(arcana.core.exceptions) so no raw httpx exception escapes. submit()
goes one step further and always returns a CommandResult, with
status="error" on failure. No automatic retries.
"""

import json
from collections.abc import Sequence
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from arcana.cli.client import APIClient
from arcana.core.config import SessionConfig
from arcana.core.exceptions import (
    ApplicationError,
    AuthenticationError,
    GatewayError,
    NetworkError,
    RemoteError,
    RequestSetupError,
)
from arcana.core.logging import get_logger, log_with_source

logger = get_logger(__name__)

MISSING_API_KEY_MESSAGE = (
    "ARCANA_API_KEY is not set. Please set it via environment variable, "
    ".env file, or `arcana config set api_key <YOUR_KEY>`."
)
NO_RESPONSE_MESSAGE = "Network Error: No response received from API. Check VAREON_API_BASE_URL."


class CommandResult(BaseModel):
    """Uniform result of a backend command: {status, message, output?, job_id?, error?}."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    status: str
    message: str | None = ""
    output: Any = None
    job_id: str | None = None
    error: Any = None

    @property
    def is_error(self) -> bool:
        return self.status == "error"

    @property
    def output_text(self) -> str | None:
        if self.output is None or self.output == "":
            return None
        if isinstance(self.output, str):
            return self.output
        return json.dumps(self.output, indent=2)

    @property
    def text(self) -> str:
        """What the transcript shows: output if present, else message."""
        return self.output_text or self.message or ""

    @classmethod
    def from_error(cls, exc: ApplicationError) -> "CommandResult":
        return cls(status="error", message=exc.message, error=exc.message)


class JobStatus(BaseModel):
    """Status payload of a backend job. Unknown fields are kept."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    status: str
    progress: float | None = None
    final_result: Any = None
    error: Any = None


def _error_detail(response: httpx.Response) -> str:
    """Extract the backend's error text: `detail` when present, else the body."""
    try:
        payload = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(payload, dict) and payload.get("detail"):
        detail = payload["detail"]
        return detail if isinstance(detail, str) else json.dumps(detail)
    return json.dumps(payload)


class CommandGateway:
    """
    Backend calls for both the one-shot commands and the interactive session.

    Usage:
        gateway = CommandGateway(APIClient(config.base_url, config.api_key), config)
        result = await gateway.submit("generate-code", ["sort a list"])
        if result.job_id:
            status = await gateway.fetch_job_status(result.job_id)
    """

    def __init__(self, client: APIClient, config: SessionConfig) -> None:
        self.client = client
        self.config = config

    def _require_api_key(self) -> str:
        if not self.config.api_key:
            raise AuthenticationError(MISSING_API_KEY_MESSAGE)
        return self.config.api_key

    async def _send(self, method: str, path: str, **kwargs: Any) -> Any:
        """
        Perform a request and return the decoded JSON body.

        Raises:
            NetworkError: No response was received
            RemoteError: The backend answered with an error status or unreadable body
            RequestSetupError: The request could not be built
        """
        try:
            response = await self.client.request(method, path, **kwargs)
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
            raise RequestSetupError(f"Request Setup Error: {e}") from e
        except httpx.RequestError as e:
            raise NetworkError(NO_RESPONSE_MESSAGE) from e
        except (TypeError, ValueError) as e:
            raise RequestSetupError(f"Request Setup Error: {e}") from e

        if response.is_error:
            raise RemoteError(_error_detail(response))

        try:
            return response.json()
        except ValueError as e:
            raise RemoteError(f"Invalid response from API: {response.text[:200]}") from e

    @staticmethod
    def _parse(model: type[BaseModel], payload: Any) -> Any:
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise RemoteError(f"Unexpected response from API: {json.dumps(payload)}") from e

    async def submit(self, command: str, args: Sequence[str]) -> CommandResult:
        """
        Execute a backend command.

        Args:
            command: Backend command name (e.g., generate-code, agent-execute)
            args: Positional arguments for the command

        Returns:
            CommandResult. Failures come back as status="error", never raised.
        """
        try:
            api_key = self._require_api_key()
            payload = await self._send(
                "POST",
                "/cli/execute",
                json={
                    "api_key": api_key,
                    "command": command,
                    "args": list(args),
                    "user_id": self.config.user_id,
                },
            )
            return self._parse(CommandResult, payload)
        except GatewayError as e:
            log_with_source(
                logger, "cli", "info", "Command failed",
                command=command, error_type=type(e).__name__, error=e.message,
            )
            return CommandResult.from_error(e)

    async def fetch_job_status(self, job_id: str) -> JobStatus:
        """
        Fetch the status of a backend job.

        Raises:
            GatewayError: On missing key, transport or remote failure
        """
        self._require_api_key()
        payload = await self._send("GET", f"/arcana/jobs/{job_id}/status")
        return self._parse(JobStatus, payload)

    async def fetch_model_details(self) -> Any:
        """
        Fetch details of the backend's active model.

        Raises:
            GatewayError: On missing key, transport or remote failure
        """
        self._require_api_key()
        return await self._send("GET", "/cognisys/cli/model-details")

    async def fetch_version(self) -> str:
        """
        Fetch the backend version string.

        Raises:
            GatewayError: On transport or remote failure
        """
        payload = await self._send("GET", "/version")
        if isinstance(payload, dict) and "version" in payload:
            return str(payload["version"])
        raise RemoteError(f"Unexpected response from API: {json.dumps(payload)}")

    async def close(self) -> None:
        await self.client.close()


def build_gateway(config: SessionConfig, transport: httpx.AsyncBaseTransport | None = None) -> CommandGateway:
    """Create a gateway with its own HTTP client for the given session config."""
    client = APIClient(base_url=config.base_url, api_key=config.api_key, transport=transport)
    return CommandGateway(client, config)
