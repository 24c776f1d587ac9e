"""
Input Controller.

Turns key events into buffer edits, submissions and UI toggles. Two modes,
derived from the session state:

    normal                  line editing; Enter submits the buffer
    awaiting-confirmation   the next key answers the pending y/n prompt

Submissions and confirmed operations run as asyncio tasks so key handling
never waits on the network.
"""

import asyncio
from collections.abc import Awaitable
from dataclasses import dataclass

from arcana.core.logging import get_logger, log_with_source
from arcana.session.dispatcher import CommandDispatcher
from arcana.session.state import (
    TranscriptEntry,
    append_entries,
    append_to_buffer,
    clear_buffer,
    erase_last_character,
    mark_exited,
    toggle_error_log,
)
from arcana.session.store import SessionStore

logger = get_logger(__name__)

SUBMIT_KEYS = frozenset({"enter"})
ERASE_KEYS = frozenset({"backspace", "delete"})
NAVIGATION_KEYS = frozenset({"tab", "up", "down", "left", "right"})
TOGGLE_ERROR_LOG_KEY = "ctrl+o"


@dataclass(frozen=True)
class Keystroke:
    """A key event: Textual-style key name plus the character it types, if any."""

    key: str
    character: str | None = None

    @classmethod
    def of(cls, character: str) -> "Keystroke":
        return cls(key=character, character=character)

    @property
    def is_printable(self) -> bool:
        return bool(self.character) and self.character.isprintable()


class InputController:
    """
    Keystroke state machine for the interactive session.

    Usage:
        controller = InputController(store, dispatcher)
        controller.handle(Keystroke.of("l"))
        controller.handle(Keystroke("enter"))
        await controller.wait_idle()
    """

    def __init__(self, store: SessionStore, dispatcher: CommandDispatcher) -> None:
        self.store = store
        self.dispatcher = dispatcher
        self._tasks: set[asyncio.Task] = set()

    def handle(self, keystroke: Keystroke) -> None:
        state = self.store.state
        if state.exited:
            return

        if state.awaiting_confirmation:
            confirmed = keystroke.character in ("y", "Y")
            follow_up = self.dispatcher.resolve_confirmation(confirmed)
            if follow_up is not None:
                self._spawn(follow_up)
            return

        if keystroke.key in SUBMIT_KEYS:
            self._submit()
        elif keystroke.key in ERASE_KEYS:
            self.store.apply(erase_last_character)
        elif keystroke.key in NAVIGATION_KEYS:
            pass
        elif keystroke.key == TOGGLE_ERROR_LOG_KEY:
            self.store.apply(toggle_error_log)
        elif keystroke.is_printable:
            self.store.apply(append_to_buffer(keystroke.character))

    def type_text(self, text: str) -> None:
        """Feed pasted text one character at a time."""
        for character in text:
            if character in "\r\n":
                continue
            self.handle(Keystroke.of(character))

    def _submit(self) -> None:
        line = self.store.state.buffer.strip()
        if line == "exit":
            self.store.apply(mark_exited)
            return
        if not line:
            self.store.apply(clear_buffer)
            return
        self.store.apply(clear_buffer, append_entries(TranscriptEntry("input", line)))
        log_with_source(logger, "tui", "debug", "Command submitted", line=line)
        self._spawn(self.dispatcher.dispatch(line))

    def _spawn(self, work: Awaitable[None]) -> None:
        task = asyncio.ensure_future(work)
        self._tasks.add(task)
        task.add_done_callback(self._finish)

    def _finish(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            log_with_source(
                logger, "tui", "error", "Submission failed",
                error_type=type(error).__name__, error=str(error),
            )

    async def wait_idle(self) -> None:
        """Wait until every submission started so far (and any it started) has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def close(self) -> None:
        """Cancel outstanding submissions."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
