"""
Code Commands.

Code generation from natural language prompts.
"""

import typer

from arcana.cli.runner import run_remote_command

app = typer.Typer(help="Commands related to code generation.", no_args_is_help=True)


@app.command()
def generate(
    prompt: str = typer.Argument(..., help="The natural language prompt for code generation."),
) -> None:
    """
    Generates code based on a natural language prompt.

    Examples:
        arcana code generate "a python function that merges two sorted lists"
    """
    run_remote_command("generate-code", [prompt], heading="Generated Code")
