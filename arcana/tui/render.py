"""
Rich renderables for the interactive session.

Pure functions of SessionState; the Textual app calls them on every state
change. Backend text is wrapped in Text objects so it is never parsed as
markup.
"""

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from arcana.session.state import JobRecord, SessionState, TranscriptEntry

ENTRY_STYLES = {
    "input": "yellow",
    "output": "",
    "success": "green",
    "error": "red",
    "info": "cyan",
    "confirmation": "bold magenta",
}


def render_header(state: SessionState) -> Text:
    return Text.assemble(
        ("Arcana CLI", "green"),
        (" - ", "bright_black"),
        (state.working_directory, "cyan"),
        (" (Ctrl+O for logs)", "bright_black"),
    )


def render_entry(entry: TranscriptEntry) -> Text:
    text = f"> {entry.text}" if entry.kind == "input" else entry.text
    return Text(text, style=ENTRY_STYLES.get(entry.kind, ""))


def render_transcript(state: SessionState) -> Group:
    return Group(*(render_entry(entry) for entry in state.transcript))


def render_error_log(state: SessionState) -> Panel | None:
    """Error log panel, or None when hidden or empty."""
    if not state.show_error_log or not state.error_log:
        return None
    return Panel(
        Group(*(Text(str(entry), style="red") for entry in state.error_log)),
        title="Error Logs (Ctrl+O to hide)",
        border_style="red",
    )


def describe_job(job: JobRecord) -> str:
    line = f"Job {job.job_id}: Status - {job.status}"
    if job.progress is not None:
        line += f" ({job.progress:g}%)"
    if job.output:
        line += f" | Output: {str(job.output)[:50]}..."
    if not job.polling and not job.is_terminal:
        line += " [no longer polled]"
    return line


def render_jobs(state: SessionState) -> Panel | None:
    """Active jobs panel, or None when no job was ever registered."""
    if not state.jobs:
        return None
    return Panel(
        Group(*(Text(describe_job(job), style="yellow") for job in state.jobs.values())),
        title="Active Jobs",
        border_style="yellow",
    )


def render_prompt(state: SessionState) -> Text:
    if state.awaiting_confirmation:
        return Text.assemble(("? ", "bold magenta"), ("press y to confirm, any other key to cancel", "magenta"))
    return Text.assemble(("❯ ", "green"), state.buffer)
