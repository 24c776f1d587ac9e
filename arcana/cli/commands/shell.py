"""
Shell Commands.

Translation of natural language instructions into shell commands.
"""

import typer

from arcana.cli.runner import run_remote_command

app = typer.Typer(help="Commands related to shell command translation.", no_args_is_help=True)


@app.command()
def translate(
    instruction: str = typer.Argument(..., help="The natural language instruction for shell command translation."),
) -> None:
    """
    Translates a natural language instruction into a shell command.

    Examples:
        arcana shell translate "find every log file larger than 10MB"
    """
    run_remote_command("translate-shell", [instruction])
