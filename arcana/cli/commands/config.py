"""
Config Commands.

Manage the local configuration store (~/.arcanacli.json).
"""

import typer
from rich.text import Text

from arcana.cli.runner import console, open_config_store

app = typer.Typer(help="Manage local CLI configurations.", no_args_is_help=True)

MASK = "****************"


@app.command("set")
def set_value(
    key: str = typer.Argument(..., help="The configuration key (e.g., api_key, base_url, user_id)."),
    value: str = typer.Argument(..., help="The value to set for the configuration key."),
) -> None:
    """
    Set a configuration value.

    Examples:
        arcana config set api_key sk-123
        arcana config set base_url https://api.example.com/arcana
    """
    open_config_store().set(key, value)
    console.print(f"Configuration key '{key}' set.", markup=False)


@app.command("get")
def get_value(
    key: str = typer.Argument(..., help="The configuration key to retrieve."),
) -> None:
    """Get a configuration value."""
    value = open_config_store().get(key)
    if value is None:
        console.print(f"Configuration key '{key}' not found.", markup=False)
    else:
        console.print(f"{key}: {value}", markup=False)


@app.command("list")
def list_values() -> None:
    """List all stored configurations. API keys are masked."""
    items = open_config_store().items()
    if not items:
        console.print("No CLI configurations found.")
        return
    console.print("Current CLI Configurations:")
    for key, value in items:
        shown = MASK if "api_key" in key else value
        console.print(Text(f"  {key}: {shown}"))


@app.command("delete")
def delete_value(
    key: str = typer.Argument(..., help="The configuration key to delete."),
) -> None:
    """Delete a configuration value."""
    open_config_store().delete(key)
    console.print(f"Configuration key '{key}' deleted.", markup=False)
