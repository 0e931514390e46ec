"""Tests for the local repository workflows."""

from unittest.mock import Mock

import pytest

from repo_manager.models.operations import CloneStatus, CommitPushStatus
from repo_manager.models.repository import RepositoryEntry
from repo_manager.models.working_tree import DivergenceCount, DivergenceState
from repo_manager.services.base import CommandResult, ProcessFailure
from repo_manager.services.git_service import GitService
from repo_manager.services.local_repository_service import LocalRepositoryService
from repo_manager.utils.exceptions import (
    CommandExecutionError,
    FileSystemError,
    GitError,
    StatusParseError,
    ValidationError,
)


def ok(output=""):
    return CommandResult(success=True, output=output)


def failed(error="", output="", exit_code=1):
    return CommandResult(success=False, output=output, error=error, exit_code=exit_code)


@pytest.fixture
def git_service():
    return Mock(spec=GitService)


@pytest.fixture
def service(git_service, tmp_path):
    return LocalRepositoryService(git_service, tmp_path / "clones")


@pytest.fixture
def local_repo(service):
    path = service.base_dir / "demo"
    path.mkdir(parents=True)
    return path


class TestBaseDirectory:
    def test_repository_path_is_under_base(self, service):
        assert service.repository_path("demo") == service.base_dir / "demo"

    def test_escaping_names_rejected(self, service):
        with pytest.raises(ValidationError):
            service.repository_path("../outside")
        with pytest.raises(ValidationError):
            service.repository_path("")

    def test_set_base_dir(self, service, tmp_path):
        service.set_base_dir(tmp_path / "other")

        assert service.base_dir == tmp_path / "other"

    def test_set_empty_base_dir_rejected(self, service):
        with pytest.raises(ValidationError):
            service.set_base_dir("  ")

    def test_initialize_checks_git(self, service, git_service):
        service.initialize()

        git_service.initialize.assert_called_once()
        assert service.is_initialized()


class TestCloneRepositories:
    def test_clones_and_skips(self, service, git_service):
        existing = service.base_dir / "existing"
        existing.mkdir(parents=True)
        git_service.clone.return_value = ok("Cloning into 'fresh'...\n")
        entries = [
            RepositoryEntry("fresh", "git@github.com:u/fresh.git"),
            RepositoryEntry("existing", "git@github.com:u/existing.git"),
            RepositoryEntry("no-url"),
        ]

        outcomes = service.clone_repositories(entries)

        assert [outcome.status for outcome in outcomes] == [
            CloneStatus.CLONED,
            CloneStatus.SKIPPED_EXISTS,
            CloneStatus.SKIPPED_NO_URL,
        ]
        git_service.clone.assert_called_once_with(
            "git@github.com:u/fresh.git", str(service.base_dir / "fresh")
        )
        assert outcomes[1].get_log_text() == f"Already exists: {existing}"
        assert outcomes[2].get_log_text() == "No SSH URL for no-url"

    def test_failure_does_not_abort_batch(self, service, git_service):
        git_service.clone.side_effect = [
            failed("fatal: repository not found"),
            ok(),
        ]
        entries = [
            RepositoryEntry("broken", "git@github.com:u/broken.git"),
            RepositoryEntry("works", "git@github.com:u/works.git"),
        ]

        outcomes = service.clone_repositories(entries)

        assert outcomes[0].status == CloneStatus.FAILED
        assert outcomes[0].is_failure
        assert "repository not found" in outcomes[0].message
        assert outcomes[1].status == CloneStatus.CLONED
        assert git_service.clone.call_count == 2

    def test_creates_base_dir(self, service, git_service):
        git_service.clone.return_value = ok()

        service.clone_repositories([RepositoryEntry("r", "url")])

        assert service.base_dir.is_dir()

    def test_empty_selection_rejected(self, service):
        with pytest.raises(ValidationError):
            service.clone_repositories([])


class TestRefresh:
    def test_missing_local_directory(self, service, git_service):
        with pytest.raises(FileSystemError) as exc_info:
            service.refresh("demo")

        assert exc_info.value.message.startswith("Local missing: ")
        git_service.status_porcelain.assert_not_called()

    def test_parses_status(self, service, git_service, local_repo):
        git_service.status_porcelain.return_value = ok(" M a.txt\n?? b.txt\n")

        entries = service.refresh("demo")

        git_service.status_porcelain.assert_called_once_with(str(local_repo))
        assert [entry.path for entry in entries] == ["a.txt", "b.txt"]

    def test_clean_tree(self, service, git_service, local_repo):
        git_service.status_porcelain.return_value = ok("")

        entries = service.refresh("demo")

        assert len(entries) == 1 and entries[0].is_clean

    def test_failed_status_raises_git_error(self, service, git_service, local_repo):
        git_service.status_porcelain.return_value = failed(
            "fatal: not a git repository", exit_code=128
        )

        with pytest.raises(GitError) as exc_info:
            service.refresh("demo")

        assert exc_info.value.exit_code == 128

    def test_timed_out_status_raises_execution_error(
        self, service, git_service, local_repo
    ):
        git_service.status_porcelain.return_value = CommandResult(
            success=False,
            error="Timed out after 20 seconds",
            exit_code=-9,
            failure=ProcessFailure.TIMED_OUT,
        )

        with pytest.raises(CommandExecutionError):
            service.refresh("demo")


class TestCheckUpdates:
    def test_known_divergence(self, service, git_service, local_repo):
        git_service.fetch.return_value = ok()
        git_service.current_branch.return_value = ok("main\n")
        git_service.divergence.return_value = ok("2\t1\n")

        report = service.check_updates("demo")

        git_service.divergence.assert_called_once_with(str(local_repo), "main")
        assert report.state == DivergenceState.KNOWN
        assert report.branch == "main"
        assert report.count == DivergenceCount(behind=2, ahead=1)
        assert report.get_display_text() == "Behind: 2 Ahead: 1"
        git_service.status_untracked_hidden.assert_not_called()

    def test_rev_list_failure_falls_back_to_status(
        self, service, git_service, local_repo
    ):
        git_service.fetch.return_value = ok()
        git_service.current_branch.return_value = ok("feature\n")
        git_service.divergence.return_value = failed(
            "fatal: ambiguous argument 'origin/feature...HEAD'"
        )
        git_service.status_untracked_hidden.return_value = ok(
            "On branch feature\nnothing to commit\n"
        )

        report = service.check_updates("demo")

        assert report.state == DivergenceState.UNKNOWN
        assert report.count is None
        assert report.get_display_text() == "On branch feature\nnothing to commit"

    def test_unparseable_count_falls_back(self, service, git_service, local_repo):
        git_service.fetch.return_value = ok()
        git_service.current_branch.return_value = ok("main\n")
        git_service.divergence.return_value = ok("garbage")
        git_service.status_untracked_hidden.return_value = ok("status text")

        report = service.check_updates("demo")

        assert report.state == DivergenceState.UNKNOWN
        assert report.raw_text == "status text"

    def test_detached_head_skips_rev_list(self, service, git_service, local_repo):
        git_service.fetch.return_value = ok()
        git_service.current_branch.return_value = ok("HEAD\n")
        git_service.status_untracked_hidden.return_value = ok("HEAD detached at abc")

        report = service.check_updates("demo")

        git_service.divergence.assert_not_called()
        assert report.state == DivergenceState.UNKNOWN

    def test_status_failure_uses_fetch_output(self, service, git_service, local_repo):
        git_service.fetch.return_value = failed("fatal: could not read from remote")
        git_service.current_branch.return_value = failed("fatal: bad")
        git_service.status_untracked_hidden.return_value = failed("fatal: bad")

        report = service.check_updates("demo")

        assert report.raw_text == "fatal: could not read from remote"

    def test_fetch_output_kept_on_report(self, service, git_service, local_repo):
        git_service.fetch.return_value = CommandResult(
            success=True,
            output="",
            error="From github.com:u/demo\n   1a2b..3c4d  main\n",
        )
        git_service.current_branch.return_value = ok("main\n")
        git_service.divergence.return_value = ok("1\t0\n")

        report = service.check_updates("demo")

        assert report.state == DivergenceState.KNOWN
        assert report.fetch_output.startswith("From github.com:u/demo")

    def test_missing_local_directory(self, service):
        with pytest.raises(FileSystemError):
            service.check_updates("demo")


class TestPullAndDiff:
    def test_pull_returns_result(self, service, git_service, local_repo):
        result = ok("Already up to date.\n")
        git_service.pull.return_value = result

        assert service.pull("demo") is result
        git_service.pull.assert_called_once_with(str(local_repo))

    def test_diff_uses_entry_path(self, service, git_service, local_repo):
        git_service.diff.return_value = CommandResult(
            success=True, output="diff --git a/new.txt b/new.txt\n", error="warning\n"
        )
        entry = service_entries(git_service, service, "R  old.txt -> new.txt\n")[0]

        text = service.diff("demo", entry)

        git_service.diff.assert_called_once_with(str(local_repo), "new.txt")
        assert text == "diff --git a/new.txt b/new.txt\nwarning\n"

    def test_diff_accepts_raw_line(self, service, git_service, local_repo):
        git_service.diff.return_value = ok("")

        service.diff("demo", "R  old.txt\tnew.txt")

        git_service.diff.assert_called_once_with(str(local_repo), "new.txt")

    def test_diff_rejects_clean_sentinel(self, service, git_service, local_repo):
        entry = service_entries(git_service, service, "")[0]

        with pytest.raises(ValidationError):
            service.diff("demo", entry)
        git_service.diff.assert_not_called()

    def test_diff_rejects_unparseable_line(self, service, git_service, local_repo):
        with pytest.raises(StatusParseError):
            service.diff("demo", "??")


def service_entries(git_service, service, porcelain):
    git_service.status_porcelain.return_value = ok(porcelain)
    return service.refresh("demo")


class TestCommitAndPush:
    def test_empty_message_rejected_before_any_command(self, service, git_service):
        with pytest.raises(ValidationError):
            service.commit_and_push("demo", "   ")

        git_service.status_porcelain.assert_not_called()

    def test_clean_tree_runs_nothing(self, service, git_service, local_repo):
        git_service.status_porcelain.return_value = ok("")

        outcome = service.commit_and_push("demo", "Update")

        assert outcome.status == CommitPushStatus.NOTHING_TO_COMMIT
        assert outcome.get_display_text() == "Nothing to commit"
        git_service.add_all.assert_not_called()
        git_service.commit.assert_not_called()
        git_service.push.assert_not_called()

    def test_runs_add_commit_push_in_order(self, service, git_service, local_repo):
        calls = []
        git_service.status_porcelain.return_value = ok(" M a.txt\n")
        git_service.add_all.side_effect = lambda path: calls.append("add") or ok()
        git_service.commit.side_effect = (
            lambda path, message: calls.append(f"commit:{message}") or ok()
        )
        git_service.push.side_effect = lambda path: calls.append("push") or ok("pushed")

        outcome = service.commit_and_push("demo", "Fix bug")

        assert calls == ["add", "commit:Fix bug", "push"]
        assert outcome.status == CommitPushStatus.COMMITTED_AND_PUSHED
        assert outcome.steps_run == ["add", "commit", "push"]
        assert outcome.output == "pushed"
        assert outcome.succeeded

    def test_stops_at_first_failure(self, service, git_service, local_repo):
        git_service.status_porcelain.return_value = ok(" M a.txt\n")
        git_service.add_all.return_value = failed("fatal: index.lock exists")

        outcome = service.commit_and_push("demo", "Fix bug")

        assert outcome.status == CommitPushStatus.FAILED
        assert outcome.failed_step == "add"
        assert outcome.steps_run == ["add"]
        assert not outcome.succeeded
        git_service.commit.assert_not_called()
        git_service.push.assert_not_called()

    def test_push_failure_reported(self, service, git_service, local_repo):
        git_service.status_porcelain.return_value = ok(" M a.txt\n")
        git_service.add_all.return_value = ok()
        git_service.commit.return_value = ok("[main 1a2b3c] Fix bug\n")
        git_service.push.return_value = failed("rejected: non-fast-forward")

        outcome = service.commit_and_push("demo", "Fix bug")

        assert outcome.failed_step == "push"
        assert "non-fast-forward" in outcome.get_display_text()

    def test_nothing_to_commit_stops_without_push(
        self, service, git_service, local_repo
    ):
        git_service.status_porcelain.return_value = ok("?? ignored-later.txt\n")
        git_service.add_all.return_value = ok()
        git_service.commit.return_value = failed(
            output="On branch main\nnothing to commit, working tree clean\n"
        )

        outcome = service.commit_and_push("demo", "Update")

        assert outcome.status == CommitPushStatus.NOTHING_COMMITTED
        assert outcome.succeeded
        git_service.push.assert_not_called()

    def test_has_changes_and_pending_files(self, service, git_service, local_repo):
        git_service.status_porcelain.return_value = ok(" M a.txt\n")
        git_service.changed_files.return_value = ok("a.txt\nnew.txt\n\n")

        assert service.has_changes("demo")
        assert service.pending_files("demo") == ["a.txt", "new.txt"]
