"""
Top-level task commands: reason, file-operation.
"""

import typer

from arcana.cli.runner import run_remote_command


def reason(
    prompt: str = typer.Argument(..., help="The natural language prompt for reasoning generation."),
) -> None:
    """Generates a detailed reasoning trace for a given task."""
    run_remote_command("reason", [prompt], heading="Reasoning Trace")


def file_operation(
    operation: str = typer.Argument(..., help='The file operation to perform (e.g., "read", "write", "delete").'),
    path: str = typer.Argument(..., help="The path to the file."),
    content: str | None = typer.Argument(None, help='Content for "write" operation (optional).'),
) -> None:
    """Performs various file operations (e.g., read, write, delete)."""
    args = [operation, path]
    if content:
        args.append(content)
    run_remote_command("file-operation", args)
