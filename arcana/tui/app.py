"""
Interactive Terminal Interface.

Textual front end for the interactive session. The app owns no session
logic: key events become Keystroke values for the InputController, and
every store change re-renders the view from the new SessionState.

Usage:
    arcana            # no subcommand starts the interactive session
    python cli.py
"""

from __future__ import annotations

import asyncio

from textual import events
from textual.app import App, ComposeResult
from textual.containers import VerticalScroll
from textual.widgets import Static

from arcana.cli.gateway import build_gateway
from arcana.core.config import SessionConfig
from arcana.core.logging import get_logger, log_with_source, setup_logging
from arcana.session import Keystroke, Session
from arcana.session.state import SessionState
from arcana.tui.render import (
    render_error_log,
    render_header,
    render_jobs,
    render_prompt,
    render_transcript,
)

logger = get_logger(__name__)


class ArcanaApp(App):
    """Interactive Arcana session."""

    TITLE = "Arcana CLI"

    CSS = """
    Screen {
        layout: vertical;
    }

    #header {
        height: 1;
        padding: 0 1;
    }

    #transcript-container {
        height: 1fr;
        padding: 0 1;
        scrollbar-gutter: stable;
    }

    #error-log, #jobs {
        height: auto;
        max-height: 12;
        margin: 1 1 0 1;
    }

    #prompt {
        height: 1;
        margin: 1 1 0 1;
    }
    """

    def __init__(self, session: Session) -> None:
        super().__init__()
        self.session = session
        self._unsubscribe = None

    def compose(self) -> ComposeResult:
        yield Static(id="header")
        with VerticalScroll(id="transcript-container"):
            yield Static(id="transcript")
        yield Static(id="error-log")
        yield Static(id="jobs")
        yield Static(id="prompt")

    def on_mount(self) -> None:
        self._unsubscribe = self.session.store.subscribe(self._on_state_change)
        self._render_state(self.session.state)

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def on_key(self, event: events.Key) -> None:
        event.stop()
        self.session.handle_key(Keystroke(key=event.key, character=event.character))

    def on_paste(self, event: events.Paste) -> None:
        event.stop()
        self.session.input.type_text(event.text)

    def _on_state_change(self, state: SessionState) -> None:
        if state.exited:
            self.exit()
            return
        self._render_state(state)

    def _render_state(self, state: SessionState) -> None:
        self.query_one("#header", Static).update(render_header(state))
        self.query_one("#transcript", Static).update(render_transcript(state))
        self.query_one("#prompt", Static).update(render_prompt(state))

        for widget_id, panel in (("#error-log", render_error_log(state)), ("#jobs", render_jobs(state))):
            widget = self.query_one(widget_id, Static)
            widget.display = panel is not None
            if panel is not None:
                widget.update(panel)

        self.query_one("#transcript-container", VerticalScroll).scroll_end(animate=False)


async def run_session(config: SessionConfig) -> None:
    """Run the interactive session until the user exits, then release every task."""
    session = Session(build_gateway(config))
    log_with_source(logger, "tui", "info", "Interactive session started", base_url=config.base_url)
    try:
        await ArcanaApp(session).run_async()
    finally:
        await session.close()
        log_with_source(logger, "tui", "info", "Interactive session ended")


def run_interactive(config: SessionConfig) -> None:
    """Start the interactive session. Logs go to the JSONL file, never the screen."""
    setup_logging(format_type="json", enable_console=False, enable_file_logging=True)
    asyncio.run(run_session(config))
