"""
Unit tests for session state transforms.

Transforms are pure: each test builds a state, applies a transform and
checks the new snapshot (and that the old one is untouched).
"""

import re

import pytest

from arcana.session.state import (
    ErrorLogEntry,
    JobRecord,
    PendingConfirmation,
    SessionState,
    TranscriptEntry,
    append_entries,
    append_to_buffer,
    clear_buffer,
    clear_confirmation,
    erase_last_character,
    log_error,
    mark_exited,
    merge_job_status,
    register_job,
    report_error,
    request_confirmation,
    set_working_directory,
    stop_polling,
    toggle_error_log,
)

ISO_UTC = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


@pytest.fixture
def state() -> SessionState:
    return SessionState(working_directory="/work")


def delete_confirmation(filename: str = "foo.txt") -> PendingConfirmation:
    return PendingConfirmation(
        prompt_text=f"Are you sure you want to delete {filename}? (y/n)",
        command="file-operation",
        args=("delete", filename),
        cancel_message="Delete operation cancelled.",
        error_label="Delete Error",
    )


class TestTranscript:
    """Tests for transcript and error log transforms."""

    def test_append_keeps_order(self, state):
        new = append_entries(TranscriptEntry("input", "ls"), TranscriptEntry("error", "Unknown command: ls"))(state)
        assert [e.kind for e in new.transcript] == ["input", "error"]
        assert state.transcript == ()

    def test_for_status_keeps_known_kinds(self):
        assert TranscriptEntry.for_status("success", "ok").kind == "success"
        assert TranscriptEntry.for_status("error", "bad").kind == "error"

    def test_for_status_maps_unknown_to_info(self):
        assert TranscriptEntry.for_status("queued", "later") == TranscriptEntry("info", "later")

    def test_log_error_is_timestamped(self, state):
        new = log_error("CD Error: nope")(state)
        entry = new.error_log[0]
        assert entry.message == "CD Error: nope"
        assert ISO_UTC.match(entry.timestamp)
        assert new.transcript == ()

    def test_error_log_entry_renders_with_timestamp(self):
        assert str(ErrorLogEntry("2024-05-01T12:30:00.123Z", "boom")) == "[2024-05-01T12:30:00.123Z] boom"

    def test_report_error_writes_both(self, state):
        new = report_error("Failed", "Command Error (reason): Failed")(state)
        assert new.transcript == (TranscriptEntry("error", "Failed"),)
        assert new.error_log[0].message == "Command Error (reason): Failed"

    def test_toggle_error_log(self, state):
        shown = toggle_error_log(state)
        assert shown.show_error_log is True
        assert toggle_error_log(shown).show_error_log is False


class TestBufferAndLifecycle:
    """Tests for the input buffer and session flags."""

    def test_buffer_edits(self, state):
        new = append_to_buffer("ab")(state)
        new = erase_last_character(new)
        assert new.buffer == "a"
        assert clear_buffer(new).buffer == ""

    def test_erase_on_empty_buffer(self, state):
        assert erase_last_character(state).buffer == ""

    def test_set_working_directory(self, state):
        assert set_working_directory("/tmp")(state).working_directory == "/tmp"

    def test_mark_exited(self, state):
        assert mark_exited(state).exited is True


class TestConfirmation:
    """Tests for the confirmation transforms."""

    def test_request_enters_confirmation_mode(self, state):
        new = request_confirmation(delete_confirmation())(state)

        assert new.awaiting_confirmation
        assert new.transcript == (
            TranscriptEntry("confirmation", "Are you sure you want to delete foo.txt? (y/n)"),
        )

    def test_second_request_is_refused(self, state):
        first = request_confirmation(delete_confirmation("a.txt"))(state)
        second = request_confirmation(delete_confirmation("b.txt"))(first)

        assert second.pending_confirmation.args == ("delete", "a.txt")
        assert second.transcript[-1].kind == "error"

    def test_clear(self, state):
        new = clear_confirmation(request_confirmation(delete_confirmation())(state))
        assert not new.awaiting_confirmation


class TestJobs:
    """Tests for job registration and status merging."""

    def test_register_job(self, state):
        new = register_job("J1", output="Job initiated...")(state)
        assert new.jobs["J1"] == JobRecord(job_id="J1", output="Job initiated...")
        assert new.jobs["J1"].status == "pending"
        assert new.jobs["J1"].polling is True

    def test_register_is_idempotent_while_polling(self, state):
        first = register_job("J1", output="first")(state)
        second = register_job("J1", output="second")(first)
        assert second is first

    def test_register_replaces_stopped_job(self, state):
        stopped = stop_polling("J1")(register_job("J1", output="first")(state))
        again = register_job("J1", output="second")(stopped)
        assert again.jobs["J1"].output == "second"
        assert again.jobs["J1"].polling is True

    def test_merge_is_shallow(self, state):
        new = register_job("J1", output="Job initiated...")(state)
        new = merge_job_status("J1", {"status": "running", "progress": 40})(new)
        new = merge_job_status("J1", {"status": "running", "current_step": "plan"})(new)

        job = new.jobs["J1"]
        assert job.status == "running"
        assert job.progress == 40
        assert job.output == "Job initiated..."
        assert job.extra == {"current_step": "plan"}

    def test_terminal_job_is_frozen(self, state):
        new = register_job("J1")(state)
        new = merge_job_status("J1", {"status": "completed", "final_result": "done"})(new)
        new = merge_job_status("J1", {"status": "running", "progress": 10})(new)

        assert new.jobs["J1"].status == "completed"
        assert new.jobs["J1"].progress is None

    def test_merge_unknown_job_is_ignored(self, state):
        assert merge_job_status("nope", {"status": "running"})(state) is state

    def test_stop_polling(self, state):
        new = stop_polling("J1")(register_job("J1")(state))
        assert new.jobs["J1"].polling is False
        assert stop_polling("J1")(new) is new

    def test_original_state_is_unchanged(self, state):
        registered = register_job("J1")(state)
        merge_job_status("J1", {"status": "running"})(registered)
        assert registered.jobs["J1"].status == "pending"
        assert state.jobs == {}
