"""
CLI Commands.

Organized by domain/feature area.
"""

from arcana.cli.commands.agent import app as agent_app
from arcana.cli.commands.code import app as code_app
from arcana.cli.commands.config import app as config_app
from arcana.cli.commands.shell import app as shell_app
from arcana.cli.commands.tasks import file_operation, reason

__all__ = [
    "agent_app",
    "code_app",
    "config_app",
    "file_operation",
    "reason",
    "shell_app",
]
