"""
Arcana CLI entry point.

Usage:
    arcana --help                                   # Show help
    arcana                                          # Interactive session

    # Configuration
    arcana config set api_key <YOUR_KEY>
    arcana config get base_url
    arcana config list
    arcana config delete user_id

    # Backend commands
    arcana code generate "<prompt>"
    arcana shell translate "<instruction>"
    arcana agent run <agent_id> "<task prompt>"
    arcana reason "<prompt>"
    arcana file-operation <operation> <path> [content]

Options:
    --verbose, -v     Echo outgoing requests and responses (DEBUG logging)
    --version, -V     Show CLI and backend versions
    --help            Show help message
"""

import asyncio

import typer

from arcana.cli.commands import agent_app, code_app, config_app, file_operation, reason, shell_app
from arcana.cli.gateway import build_gateway
from arcana.cli.runner import console, err_console, load_session_config
from arcana.core.config import SessionConfig, get_app_config
from arcana.core.exceptions import GatewayError
from arcana.core.logging import setup_logging

app = typer.Typer(
    name="arcana",
    help="Arcana CLI - relay commands to the Arcana backend, or run with no command for an interactive session.",
    rich_markup_mode="rich",
)

app.add_typer(config_app, name="config")
app.add_typer(code_app, name="code")
app.add_typer(shell_app, name="shell")
app.add_typer(agent_app, name="agent")
app.command("reason")(reason)
app.command("file-operation")(file_operation)


async def _backend_version(config: SessionConfig) -> str | None:
    gateway = build_gateway(config)
    try:
        return await gateway.fetch_version()
    except GatewayError:
        return None
    finally:
        await gateway.close()


def _version_callback(value: bool) -> None:
    if not value:
        return
    setup_logging(level="ERROR", format_type="console")
    backend_version = asyncio.run(_backend_version(load_session_config()))
    if backend_version is None:
        err_console.print("Warning: Could not fetch backend version.", style="yellow")
        backend_version = "N/A"
    console.print(f"Arcana CLI Version: {get_app_config().application.version}", markup=False)
    console.print(f"Arcana Backend Version: {backend_version}", markup=False)
    raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Echo outgoing requests and responses (DEBUG level logging).",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show CLI and backend versions.",
    ),
) -> None:
    """
    Arcana CLI.

    Relays commands to the Arcana backend. Without a command, starts the
    interactive session (Ctrl+O toggles the error log, `exit` quits).
    """
    setup_logging(level="DEBUG" if verbose else "ERROR", format_type="console")

    if ctx.invoked_subcommand is None:
        from arcana.tui.app import run_interactive

        run_interactive(load_session_config())


def run() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    run()
