"""Workflows over local clones: clone, refresh, update checks, diff, commit."""

import logging
from pathlib import Path

from ..models.operations import (
    CloneOutcome,
    CloneStatus,
    CommitPushOutcome,
    CommitPushStatus,
)
from ..models.repository import RepositoryEntry
from ..models.working_tree import DivergenceReport, WorkingTreeEntry
from ..utils.exceptions import (
    CommandExecutionError,
    FileSystemError,
    GitError,
    ValidationError,
)
from ..utils.path_manager import PathManager
from .base import BaseService, CommandResult
from .divergence_parser import parse_divergence
from .git_service import GitService
from .status_parser import extract_diff_path, parse_porcelain

logger = logging.getLogger(__name__)

NOTHING_TO_COMMIT_MARKER = "nothing to commit"


class LocalRepositoryService(BaseService):
    """
    Runs the multi-step actions of the application against clones located
    under a single local base directory.

    The base directory lives in memory only; changing it affects every
    subsequent action.
    """

    def __init__(self, git_service: GitService, base_dir: Path | str):
        """
        Initialize the service.

        Args:
            git_service: Git service used for every command
            base_dir: Directory holding one clone per repository name
        """
        super().__init__()
        self.git_service = git_service
        self._base_dir = Path(base_dir).expanduser()

    def _do_initialize(self) -> None:
        self.git_service.initialize()
        logger.info(f"Local repository service using base directory {self._base_dir}")

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def set_base_dir(self, base_dir: Path | str) -> Path:
        """
        Change the local base directory.

        Raises:
            ValidationError: If the path is empty
        """
        if not str(base_dir).strip():
            raise ValidationError("Clone directory is required", field="base_dir")
        self._base_dir = Path(base_dir).expanduser()
        logger.info(f"Clone directory set to {self._base_dir}")
        return self._base_dir

    def repository_path(self, name: str) -> Path:
        """Local directory of a repository under the base directory."""
        return PathManager.repository_dir(self._base_dir, name)

    def _require_local(self, name: str) -> Path:
        path = self.repository_path(name)
        if not path.is_dir():
            raise FileSystemError(
                f"Local missing: {path}",
                path=str(path),
                operation="open",
                suggested_action="Clone the repository first.",
            )
        return path

    @staticmethod
    def _raise_for_result(result: CommandResult, action: str) -> None:
        if result.failure is not None:
            raise CommandExecutionError(
                f"{action}: {result.error}",
                command=action,
                exit_code=result.exit_code,
                stderr=result.error,
            )
        if not result.success:
            raise GitError(
                f"{action} failed: {result.error.strip() or result.output.strip()}",
                command=action,
                exit_code=result.exit_code,
                stderr=result.error,
            )

    def clone_repositories(self, entries: list[RepositoryEntry]) -> list[CloneOutcome]:
        """
        Clone every entry that is not already present locally.

        One repository failing never stops the rest of the batch.

        Args:
            entries: Selected repositories

        Returns:
            List[CloneOutcome]: One outcome per entry, in order
        """
        if not entries:
            raise ValidationError("Select a repository to clone", field="selection")

        self._base_dir.mkdir(parents=True, exist_ok=True)
        outcomes = []

        for entry in entries:
            if not entry.has_clone_url:
                outcomes.append(CloneOutcome(entry, CloneStatus.SKIPPED_NO_URL))
                continue

            try:
                target = self.repository_path(entry.name)
            except ValidationError as e:
                outcomes.append(CloneOutcome(entry, CloneStatus.FAILED, message=e.message))
                continue

            if target.exists():
                outcomes.append(CloneOutcome(entry, CloneStatus.SKIPPED_EXISTS, target))
                continue

            result = self.git_service.clone(entry.clone_url, str(target))
            if result.success:
                outcomes.append(
                    CloneOutcome(
                        entry, CloneStatus.CLONED, target, result.combined_output
                    )
                )
            else:
                outcomes.append(
                    CloneOutcome(
                        entry, CloneStatus.FAILED, target, result.error.strip()
                    )
                )

        for outcome in outcomes:
            log = logger.warning if outcome.is_failure else logger.info
            log(outcome.get_log_text())

        return outcomes

    def refresh(self, name: str) -> list[WorkingTreeEntry]:
        """
        Read the working tree status of a local clone.

        Raises:
            FileSystemError: If the clone does not exist
            GitError: If ``git status`` fails
        """
        path = self._require_local(name)
        result = self.git_service.status_porcelain(str(path))
        self._raise_for_result(result, "git status")
        return parse_porcelain(result.output)

    def check_updates(self, name: str) -> DivergenceReport:
        """
        Fetch and compare the current branch with its remote counterpart.

        Returns a KNOWN report with behind/ahead counts, or an UNKNOWN report
        carrying a plain status dump when the counts cannot be determined.
        """
        path = str(self._require_local(name))

        fetch_result = self.git_service.fetch(path)
        if not fetch_result.success:
            logger.warning(f"Fetch failed for {name}: {fetch_result.error.strip()}")

        branch_result = self.git_service.current_branch(path)
        branch = branch_result.output.strip() if branch_result.success else ""

        if branch and branch != "HEAD":
            count_result = self.git_service.divergence(path, branch)
            if count_result.success:
                count = parse_divergence(count_result.output)
                if count is not None:
                    logger.info(f"{name} on {branch}: {count.get_display_text()}")
                    return DivergenceReport.known(
                        branch, count, fetch_result.combined_output
                    )

        status_result = self.git_service.status_untracked_hidden(path)
        raw_text = (
            status_result.combined_output
            if status_result.success
            else fetch_result.combined_output
        )
        logger.info(f"No tracking information for {name}, reporting raw status")
        return DivergenceReport.unknown(
            branch, raw_text.strip(), fetch_result.combined_output
        )

    def pull(self, name: str) -> CommandResult:
        """Pull the local clone; the caller reports the result."""
        path = self._require_local(name)
        return self.git_service.pull(str(path))

    def diff(self, name: str, entry: WorkingTreeEntry | str) -> str:
        """
        Diff a single file of the working tree.

        Args:
            name: Repository name
            entry: File list entry, or the raw text of a status line

        Returns:
            str: Combined output, verbatim

        Raises:
            ValidationError: If the entry is the clean sentinel
            StatusParseError: If no path can be extracted from a raw line
        """
        if isinstance(entry, WorkingTreeEntry):
            if entry.is_clean:
                raise ValidationError("Select a file", field="file")
            file_path = entry.path if entry.is_parsed else extract_diff_path(entry.raw)
        else:
            file_path = extract_diff_path(entry)

        path = self._require_local(name)
        return self.git_service.diff(str(path), file_path).combined_output

    def has_changes(self, name: str) -> bool:
        """Whether ``git status --porcelain`` reports anything."""
        path = self._require_local(name)
        result = self.git_service.status_porcelain(str(path))
        self._raise_for_result(result, "git status")
        return bool(result.output.strip())

    def pending_files(self, name: str) -> list[str]:
        """Modified and untracked files that ``add -A`` would stage."""
        path = self._require_local(name)
        result = self.git_service.changed_files(str(path))
        self._raise_for_result(result, "git ls-files")
        return [line for line in result.output.splitlines() if line.strip()]

    def commit_and_push(self, name: str, message: str) -> CommitPushOutcome:
        """
        Stage everything, commit and push, stopping at the first failure.

        A commit that reports nothing to commit ends the run early without
        pushing and is not treated as a failure.

        Raises:
            ValidationError: If the commit message is empty
        """
        if not message or not message.strip():
            raise ValidationError("Commit message is required", field="message")

        if not self.has_changes(name):
            return CommitPushOutcome(CommitPushStatus.NOTHING_TO_COMMIT)

        path = str(self.repository_path(name))
        steps = [
            ("add", lambda: self.git_service.add_all(path)),
            ("commit", lambda: self.git_service.commit(path, message)),
            ("push", lambda: self.git_service.push(path)),
        ]

        steps_run = []
        output = ""
        for step_name, run_step in steps:
            result = run_step()
            steps_run.append(step_name)
            output = result.combined_output

            if result.success:
                continue

            if step_name == "commit" and NOTHING_TO_COMMIT_MARKER in output.lower():
                logger.info(f"Nothing to commit in {name}, skipping push")
                return CommitPushOutcome(
                    CommitPushStatus.NOTHING_COMMITTED, steps_run, output=output
                )

            logger.warning(f"'{step_name}' failed for {name}: {output.strip()}")
            return CommitPushOutcome(
                CommitPushStatus.FAILED, steps_run, failed_step=step_name, output=output
            )

        logger.info(f"Committed and pushed {name}")
        return CommitPushOutcome(
            CommitPushStatus.COMMITTED_AND_PUSHED, steps_run, output=output
        )
