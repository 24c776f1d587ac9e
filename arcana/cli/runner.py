"""
One-shot command helpers.

Shared by every command that talks to the backend: resolve the session
config, submit once through the gateway, print the result, and exit 0 on
success or 1 on error.
"""

import asyncio
from typing import NoReturn

import typer
from rich.console import Console
from rich.text import Text

from arcana.cli.gateway import CommandResult, build_gateway
from arcana.core.config import ConfigStore, SessionConfig, resolve_session_config
from arcana.core.exceptions import ConfigurationError

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


def fail(message: str, details: str | None = None) -> NoReturn:
    """Print an error to stderr and exit with status 1."""
    err_console.print(Text(f"Error: {message}", style="red"))
    if details and details != message:
        err_console.print(Text(f"Details: {details}", style="red"))
    raise typer.Exit(1)


def open_config_store() -> ConfigStore:
    try:
        store = ConfigStore()
        store.read()
    except ConfigurationError as e:
        fail(e.message)
    return store


def load_session_config() -> SessionConfig:
    try:
        return resolve_session_config()
    except ConfigurationError as e:
        fail(e.message)


async def submit_once(config: SessionConfig, command: str, args: list[str]) -> CommandResult:
    """Submit one command with a short-lived gateway."""
    gateway = build_gateway(config)
    try:
        return await gateway.submit(command, args)
    finally:
        await gateway.close()


def print_result(result: CommandResult, heading: str | None = None) -> None:
    """
    Print a successful result: the message, then the output.

    With a heading the output is framed:

        --- Generated Code ---
        ...
        ----------------------
    """
    console.print(Text(f"Success: {result.message or ''}", style="green"))
    output = result.output_text
    if not output:
        return
    if heading:
        banner = f"--- {heading} ---"
        console.print()
        console.print(banner, markup=False)
        console.print(output, markup=False, emoji=False, soft_wrap=True)
        console.print("-" * len(banner))
        console.print()
    else:
        console.print(output, markup=False, emoji=False, soft_wrap=True)


def run_remote_command(command: str, args: list[str], heading: str | None = None) -> None:
    """Submit a backend command and report it. Exits 1 if the backend reports an error."""
    config = load_session_config()
    result = asyncio.run(submit_once(config, command, args))
    if result.is_error:
        fail(result.message or "Command failed", str(result.error) if result.error else None)
    print_result(result, heading)
