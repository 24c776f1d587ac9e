"""
Command Dispatcher.

Interprets one submitted line of the interactive session. Routing, in
priority order:

    exit                        end the session
    cd <path>                   change the process working directory
    /model                      show the backend's model details
    delete <filename>           ask for confirmation, then file-operation delete
    code generate <prompt>      generate-code
    shell translate <text>      translate-shell
    agent run <id> <prompt>     agent-execute (registers a polled job)
    reason <prompt>             reason
    file-operation <op> <path> [content]

Anything else is reported as an unknown command without touching the
backend. Every gateway failure lands in the transcript and, with a
timestamp, in the error log.
"""

import json
import os
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass

from arcana.cli.gateway import CommandGateway
from arcana.core.exceptions import GatewayError, LocalFilesystemError
from arcana.core.logging import get_logger, log_with_source
from arcana.session.poller import JobPoller
from arcana.session.state import (
    PendingConfirmation,
    TranscriptEntry,
    append_entries,
    clear_confirmation,
    mark_exited,
    register_job,
    report_error,
    request_confirmation,
    set_working_directory,
)
from arcana.session.store import SessionStore

logger = get_logger(__name__)

AGENT_EXECUTE = "agent-execute"


@dataclass(frozen=True)
class RemoteCommand:
    """
    A backend command reachable from the interactive prompt.

    Arguments are `leading` whitespace-separated words followed by one
    free-text remainder, so `agent run a1 fix the build` sends
    ["a1", "fix the build"], the same shape the one-shot CLI sends. The
    remainder is passed through exactly as typed.
    """

    name: str
    usage: str
    leading: int = 0
    remainder_required: bool = True

    def build_args(self, text: str) -> tuple[str, ...] | None:
        """Arguments for the backend, or None when required ones are missing."""
        parts = text.split(maxsplit=self.leading)
        head, rest = tuple(parts[:self.leading]), parts[self.leading:]
        if len(head) < self.leading:
            return None
        if not rest:
            return None if self.remainder_required else head
        return (*head, rest[0])


REMOTE_COMMANDS: dict[tuple[str, ...], RemoteCommand] = {
    ("code", "generate"): RemoteCommand("generate-code", "code generate <prompt>"),
    ("shell", "translate"): RemoteCommand("translate-shell", "shell translate <instruction>"),
    ("agent", "run"): RemoteCommand(AGENT_EXECUTE, "agent run <agent_id> <prompt>", leading=1),
    ("reason",): RemoteCommand("reason", "reason <prompt>"),
    ("file-operation",): RemoteCommand(
        "file-operation",
        "file-operation <operation> <path> [content]",
        leading=2,
        remainder_required=False,
    ),
}


def match_remote_command(line: str) -> tuple[RemoteCommand, str] | None:
    """Find the remote command a line starts with, and the text after its words."""
    for prefix, command in REMOTE_COMMANDS.items():
        words = line.split(maxsplit=len(prefix))
        if tuple(words[:len(prefix)]) == prefix:
            return command, words[len(prefix)] if len(words) > len(prefix) else ""
    return None


def change_directory(path: str) -> str:
    """
    chdir to path (with ~ expanded) and return the resolved working directory.

    Raises:
        LocalFilesystemError: If the directory cannot be entered
    """
    try:
        os.chdir(os.path.expanduser(path))
    except OSError as e:
        raise LocalFilesystemError(str(e)) from e
    return os.getcwd()


class CommandDispatcher:
    """
    Routes submitted lines to local handlers or the backend.

    Usage:
        dispatcher = CommandDispatcher(store, gateway, poller)
        await dispatcher.dispatch("code generate a quicksort in python")
    """

    def __init__(
        self,
        store: SessionStore,
        gateway: CommandGateway,
        poller: JobPoller,
        chdir: Callable[[str], str] = change_directory,
    ) -> None:
        self.store = store
        self.gateway = gateway
        self.poller = poller
        self._chdir = chdir

    async def dispatch(self, line: str) -> None:
        line = line.strip()
        if not line:
            return
        if line == "exit":
            self.store.apply(mark_exited)
            return

        words = line.split()
        head, args = words[0], words[1:]

        if head == "cd":
            self._change_directory(args)
        elif head == "/model":
            await self._show_model_details()
        elif head == "delete":
            self._request_delete(args)
        else:
            match = match_remote_command(line)
            if match is None:
                self._error(f"Unknown command: {line}")
                return
            command, rest = match
            command_args = command.build_args(rest)
            if command_args is None:
                self._error(f"Usage: {command.usage}")
                return
            await self._submit(command.name, command_args)

    def _error(self, text: str) -> None:
        self.store.apply(append_entries(TranscriptEntry("error", text)))

    # -------------------------------------------------------------------------
    # Local commands
    # -------------------------------------------------------------------------

    def _change_directory(self, args: list[str]) -> None:
        if not args:
            self._error("Usage: cd <path>")
            return
        try:
            cwd = self._chdir(args[0])
        except LocalFilesystemError as e:
            self.store.apply(report_error(f"Failed to change directory: {e.message}", f"CD Error: {e.message}"))
            return
        self.store.apply(
            set_working_directory(cwd),
            append_entries(TranscriptEntry("success", f"Changed directory to {cwd}")),
        )

    async def _show_model_details(self) -> None:
        try:
            details = await self.gateway.fetch_model_details()
        except GatewayError as e:
            self.store.apply(report_error(e.message, f"Model Details Error: {e.message}"))
            return
        self.store.apply(append_entries(TranscriptEntry("success", json.dumps(details, indent=2))))

    # -------------------------------------------------------------------------
    # Confirmation
    # -------------------------------------------------------------------------

    def _request_delete(self, args: list[str]) -> None:
        if not args:
            self._error("Usage: delete <filename>")
            return
        filename = args[0]
        self.store.apply(request_confirmation(PendingConfirmation(
            prompt_text=f"Are you sure you want to delete {filename}? (y/n)",
            command="file-operation",
            args=("delete", filename),
            cancel_message="Delete operation cancelled.",
            error_label="Delete Error",
        )))

    def resolve_confirmation(self, confirmed: bool) -> Awaitable[None] | None:
        """
        Consume the pending confirmation.

        The confirmation is cleared before this returns, so it is resolved
        exactly once however many keys arrive afterwards.

        Returns:
            The submission to await when confirmed, otherwise None.
        """
        pending = self.store.state.pending_confirmation
        if pending is None:
            return None
        if not confirmed:
            self.store.apply(clear_confirmation, append_entries(TranscriptEntry("info", pending.cancel_message)))
            return None
        self.store.apply(clear_confirmation)
        return self._submit(pending.command, pending.args, error_label=pending.error_label)

    # -------------------------------------------------------------------------
    # Remote commands
    # -------------------------------------------------------------------------

    async def _submit(self, command: str, args: Sequence[str], error_label: str | None = None) -> None:
        result = await self.gateway.submit(command, args)

        if result.is_error:
            label = error_label or f"Command Error ({command})"
            self.store.apply(report_error(result.text, f"{label}: {result.message}"))
            return

        if command == AGENT_EXECUTE and result.job_id:
            job_id = result.job_id
            self.store.apply(
                register_job(job_id, output=result.output_text or "Job initiated..."),
                append_entries(TranscriptEntry("info", f"Agent job {job_id} initiated. Status updates will follow.")),
            )
            self.poller.start(job_id)
            log_with_source(logger, "session", "info", "Agent job registered", job_id=job_id)
            return

        self.store.apply(append_entries(TranscriptEntry.for_status(result.status, result.text)))
