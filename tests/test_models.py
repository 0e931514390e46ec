"""Tests for data models."""

from pathlib import Path

import pytest

from repo_manager.models.operations import (
    CloneOutcome,
    CloneStatus,
    CommitPushOutcome,
    CommitPushStatus,
)
from repo_manager.models.repository import RepositoryEntry
from repo_manager.models.working_tree import (
    CLEAN_DISPLAY_TEXT,
    DivergenceCount,
    DivergenceReport,
    DivergenceState,
    StatusLine,
    WorkingTreeEntry,
)


class TestRepositoryEntry:
    """Test cases for RepositoryEntry model."""

    def test_creation(self):
        entry = RepositoryEntry("hello-world", "git@github.com:octocat/hello-world.git")

        assert entry.name == "hello-world"
        assert entry.has_clone_url
        assert str(entry) == "hello-world"

    def test_without_url(self):
        entry = RepositoryEntry("hello-world")

        assert entry.clone_url == ""
        assert not entry.has_clone_url

    def test_equality_and_hash(self):
        first = RepositoryEntry("a", "url")
        second = RepositoryEntry("a", "url")

        assert first == second
        assert len({first, second}) == 1
        assert first != RepositoryEntry("a", "other")


class TestWorkingTreeEntry:
    """Test cases for WorkingTreeEntry model."""

    def test_clean_sentinel(self):
        entry = WorkingTreeEntry.clean()

        assert entry.is_clean
        assert not entry.is_parsed
        assert entry.get_display_text() == CLEAN_DISPLAY_TEXT

    def test_from_status_line(self):
        status_line = StatusLine("R", " ", "new.txt", original_path="old.txt")

        entry = WorkingTreeEntry.from_status_line(status_line, "R  old.txt -> new.txt")

        assert entry.status_code == "R "
        assert entry.path == "new.txt"
        assert entry.original_path == "old.txt"
        assert entry.is_parsed
        assert not entry.is_clean
        assert entry.get_display_text() == "R  old.txt -> new.txt"

    def test_display_without_raw(self):
        entry = WorkingTreeEntry(status_code="??", path="x.txt")

        assert entry.get_display_text() == "?? x.txt"

    def test_status_line_properties(self):
        assert StatusLine("M", "M", "a").status_code == "MM"
        assert not StatusLine("M", " ", "a").is_rename
        assert StatusLine("R", " ", "b", "a").is_rename


class TestDivergence:
    """Test cases for divergence models."""

    def test_count_up_to_date(self):
        assert DivergenceCount(0, 0).is_up_to_date
        assert not DivergenceCount(1, 0).is_up_to_date

    def test_negative_count_rejected(self):
        with pytest.raises(ValueError):
            DivergenceCount(behind=0, ahead=-3)

    def test_known_report(self):
        report = DivergenceReport.known("main", DivergenceCount(behind=2, ahead=0))

        assert report.state == DivergenceState.KNOWN
        assert report.get_display_text() == "Behind: 2 Ahead: 0"

    def test_unknown_report(self):
        report = DivergenceReport.unknown("", "HEAD detached at 1a2b3c")

        assert report.state == DivergenceState.UNKNOWN
        assert report.count is None
        assert report.get_display_text() == "HEAD detached at 1a2b3c"

    def test_unknown_report_without_text(self):
        report = DivergenceReport.unknown("main", "")

        assert report.get_display_text() == "No tracking information available"


class TestCloneOutcome:
    """Test cases for clone outcomes."""

    def setup_method(self):
        self.entry = RepositoryEntry("demo", "git@github.com:u/demo.git")
        self.target = Path("/base/demo")

    def test_cloned(self):
        outcome = CloneOutcome(self.entry, CloneStatus.CLONED, self.target)

        assert not outcome.is_failure
        assert outcome.get_log_text() == f"Cloned demo into {self.target}"

    def test_failed(self):
        outcome = CloneOutcome(
            self.entry, CloneStatus.FAILED, self.target, "Permission denied (publickey)"
        )

        assert outcome.is_failure
        assert outcome.get_log_text() == (
            "Clone failed for demo: Permission denied (publickey)"
        )

    def test_skipped(self):
        exists = CloneOutcome(self.entry, CloneStatus.SKIPPED_EXISTS, self.target)
        no_url = CloneOutcome(RepositoryEntry("bare"), CloneStatus.SKIPPED_NO_URL)

        assert exists.get_log_text() == f"Already exists: {self.target}"
        assert no_url.get_log_text() == "No SSH URL for bare"
        assert not exists.is_failure and not no_url.is_failure


class TestCommitPushOutcome:
    """Test cases for commit and push outcomes."""

    def test_nothing_to_commit(self):
        outcome = CommitPushOutcome(CommitPushStatus.NOTHING_TO_COMMIT)

        assert outcome.succeeded
        assert outcome.steps_run == []
        assert outcome.get_display_text() == "Nothing to commit"

    def test_failed(self):
        outcome = CommitPushOutcome(
            CommitPushStatus.FAILED,
            ["add", "commit"],
            failed_step="commit",
            output="error: empty ident",
        )

        assert not outcome.succeeded
        assert outcome.get_display_text() == "'commit' failed:\nerror: empty ident"

    def test_success_shows_output(self):
        outcome = CommitPushOutcome(
            CommitPushStatus.COMMITTED_AND_PUSHED,
            ["add", "commit", "push"],
            output="main -> main",
        )

        assert outcome.succeeded
        assert outcome.get_display_text() == "main -> main"

    def test_default_steps_not_shared(self):
        first = CommitPushOutcome(CommitPushStatus.FAILED)
        first.steps_run.append("add")

        assert CommitPushOutcome(CommitPushStatus.FAILED).steps_run == []
