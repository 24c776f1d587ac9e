"""
Session State.

Immutable snapshot of an interactive session plus the pure transformations
that produce the next snapshot. Handlers never mutate state in place; they
hand one or more transforms to SessionStore.apply, which runs them against
the state current at apply time. Results that arrive after an await are
therefore applied as deltas, never over a stale copy.

Usage:
    store.apply(
        append_entries(TranscriptEntry("info", "Agent job J1 initiated.")),
        register_job("J1"),
    )
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from arcana.core.utils import iso_timestamp

ENTRY_KINDS = frozenset({"input", "output", "success", "error", "info", "confirmation"})
TERMINAL_JOB_STATUSES = frozenset({"completed", "failed"})

_JOB_FIELDS = frozenset({"status", "progress", "output", "final_result", "error"})


@dataclass(frozen=True)
class TranscriptEntry:
    kind: str
    text: str

    @classmethod
    def for_status(cls, status: str, text: str) -> "TranscriptEntry":
        """Entry for a backend result. Statuses outside ENTRY_KINDS render as info."""
        return cls(status if status in ENTRY_KINDS else "info", text)


@dataclass(frozen=True)
class ErrorLogEntry:
    timestamp: str
    message: str

    def __str__(self) -> str:
        return f"[{self.timestamp}] {self.message}"


@dataclass(frozen=True)
class JobRecord:
    """
    Last known state of a backend job.

    `polling` is True while the poller owns a live task for this job.
    Fields the backend reports beyond the known ones are kept in `extra`.
    """

    job_id: str
    status: str = "pending"
    progress: float | None = None
    output: Any = None
    final_result: Any = None
    error: Any = None
    extra: Mapping[str, Any] = field(default_factory=dict)
    polling: bool = True

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_JOB_STATUSES

    def merged(self, update: Mapping[str, Any]) -> "JobRecord":
        """Shallow merge: reported fields overwrite, unreported fields persist."""
        if self.is_terminal:
            return self
        known = {k: v for k, v in update.items() if k in _JOB_FIELDS}
        extra = {k: v for k, v in update.items() if k not in _JOB_FIELDS and k != "job_id"}
        return replace(self, **known, extra={**self.extra, **extra})


@dataclass(frozen=True)
class PendingConfirmation:
    """
    A destructive command waiting for y/n.

    The resolution target is data: on yes `command args` is submitted, on
    no `cancel_message` is shown. Failures are logged under `error_label`.
    """

    prompt_text: str
    command: str
    args: tuple[str, ...]
    cancel_message: str
    error_label: str


@dataclass(frozen=True)
class SessionState:
    working_directory: str
    transcript: tuple[TranscriptEntry, ...] = ()
    buffer: str = ""
    error_log: tuple[ErrorLogEntry, ...] = ()
    show_error_log: bool = False
    jobs: Mapping[str, JobRecord] = field(default_factory=dict)
    pending_confirmation: PendingConfirmation | None = None
    exited: bool = False

    @property
    def awaiting_confirmation(self) -> bool:
        return self.pending_confirmation is not None


Transform = Callable[[SessionState], SessionState]


# =============================================================================
# Transcript and error log
# =============================================================================


def append_entries(*entries: TranscriptEntry) -> Transform:
    def transform(state: SessionState) -> SessionState:
        return replace(state, transcript=state.transcript + entries)
    return transform


def log_error(message: str, timestamp: str | None = None) -> Transform:
    """Append an ErrorLogEntry stamped now (ISO 8601, UTC)."""
    entry = ErrorLogEntry(timestamp or iso_timestamp(), message)

    def transform(state: SessionState) -> SessionState:
        return replace(state, error_log=state.error_log + (entry,))
    return transform


def report_error(text: str, log_message: str) -> Transform:
    """Error entry in the transcript plus a timestamped error log entry."""
    add_entry = append_entries(TranscriptEntry("error", text))
    add_log = log_error(log_message)

    def transform(state: SessionState) -> SessionState:
        return add_log(add_entry(state))
    return transform


def toggle_error_log(state: SessionState) -> SessionState:
    return replace(state, show_error_log=not state.show_error_log)


# =============================================================================
# Input buffer and session lifecycle
# =============================================================================


def append_to_buffer(text: str) -> Transform:
    def transform(state: SessionState) -> SessionState:
        return replace(state, buffer=state.buffer + text)
    return transform


def erase_last_character(state: SessionState) -> SessionState:
    return replace(state, buffer=state.buffer[:-1])


def clear_buffer(state: SessionState) -> SessionState:
    return replace(state, buffer="")


def set_working_directory(path: str) -> Transform:
    def transform(state: SessionState) -> SessionState:
        return replace(state, working_directory=path)
    return transform


def mark_exited(state: SessionState) -> SessionState:
    return replace(state, exited=True)


# =============================================================================
# Confirmation
# =============================================================================


def request_confirmation(pending: PendingConfirmation) -> Transform:
    """Enter confirmation mode, or refuse if a confirmation is already outstanding."""
    def transform(state: SessionState) -> SessionState:
        if state.pending_confirmation is not None:
            return replace(
                state,
                transcript=state.transcript + (
                    TranscriptEntry("error", "Another confirmation is pending. Answer it first (y/n)."),
                ),
            )
        return replace(
            state,
            pending_confirmation=pending,
            transcript=state.transcript + (TranscriptEntry("confirmation", pending.prompt_text),),
        )
    return transform


def clear_confirmation(state: SessionState) -> SessionState:
    return replace(state, pending_confirmation=None)


# =============================================================================
# Jobs
# =============================================================================


def register_job(job_id: str, output: Any = None) -> Transform:
    """Track a new job as pending. A job already being polled is left untouched."""
    def transform(state: SessionState) -> SessionState:
        current = state.jobs.get(job_id)
        if current is not None and current.polling:
            return state
        return replace(state, jobs={**state.jobs, job_id: JobRecord(job_id=job_id, output=output)})
    return transform


def merge_job_status(job_id: str, update: Mapping[str, Any]) -> Transform:
    def transform(state: SessionState) -> SessionState:
        current = state.jobs.get(job_id)
        if current is None:
            return state
        return replace(state, jobs={**state.jobs, job_id: current.merged(update)})
    return transform


def stop_polling(job_id: str) -> Transform:
    def transform(state: SessionState) -> SessionState:
        current = state.jobs.get(job_id)
        if current is None or not current.polling:
            return state
        return replace(state, jobs={**state.jobs, job_id: replace(current, polling=False)})
    return transform
