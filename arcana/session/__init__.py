"""
Interactive Session.

Wires the session components together:

    SessionStore       immutable SessionState + transforms (state.py, store.py)
    JobPoller          one polling task per backend job (poller.py)
    CommandDispatcher  routes submitted lines (dispatcher.py)
    InputController    keystrokes → buffer edits and submissions (input.py)

All of them run on one asyncio event loop; none of them spawn threads.
"""

import os

from arcana.cli.gateway import CommandGateway
from arcana.session.dispatcher import CommandDispatcher
from arcana.session.input import InputController, Keystroke
from arcana.session.poller import JobPoller
from arcana.session.state import SessionState
from arcana.session.store import SessionStore

__all__ = ["Keystroke", "Session"]


class Session:
    """
    One interactive session bound to a gateway.

    Usage:
        session = Session(gateway)
        session.store.subscribe(render)
        session.handle_key(Keystroke("enter"))
        ...
        await session.close()
    """

    def __init__(
        self,
        gateway: CommandGateway,
        working_directory: str | None = None,
        poll_interval: float | None = None,
    ) -> None:
        self.gateway = gateway
        self.store = SessionStore(SessionState(working_directory=working_directory or os.getcwd()))
        self.poller = JobPoller(self.store, gateway, interval=poll_interval)
        self.dispatcher = CommandDispatcher(self.store, gateway, self.poller)
        self.input = InputController(self.store, self.dispatcher)

    @property
    def state(self) -> SessionState:
        return self.store.state

    def handle_key(self, keystroke: Keystroke) -> None:
        self.input.handle(keystroke)

    async def close(self) -> None:
        """Cancel pending submissions and every polling task, then close the HTTP client."""
        await self.input.close()
        await self.poller.shutdown()
        await self.gateway.close()
