"""
Agent Commands.

Task execution by Arcana Agents.
"""

import typer

from arcana.cli.runner import run_remote_command

app = typer.Typer(help="Commands related to Arcana Agents.", no_args_is_help=True)


@app.command()
def run(
    agent_id: str = typer.Argument(..., help="The ID of the Arcana Agent to execute the task."),
    task_prompt: str = typer.Argument(..., help="The prompt for the task to be executed by the agent."),
) -> None:
    """
    Executes a task for a specific Arcana Agent.

    The one-shot form reports the submission only. Use the interactive
    session to follow the job until it finishes.

    Examples:
        arcana agent run researcher-01 "summarise the open issues"
    """
    run_remote_command("agent-execute", [agent_id, task_prompt])
