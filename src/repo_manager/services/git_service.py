"""Git operations service for the repository manager."""

import logging

from ..models.config import UserPreferences
from ..utils.exceptions import GitError, ValidationError
from .base import CommandResult, GitServiceInterface
from .process_runner import ProcessRunner

logger = logging.getLogger(__name__)


class GitService(GitServiceInterface):
    """
    Service for executing Git operations against local clones.

    Every method builds one ``git`` invocation, runs it through the
    ``ProcessRunner`` and returns the ``CommandResult`` unchanged; callers
    decide how to interpret failures.
    """

    def __init__(
        self,
        preferences: UserPreferences | None = None,
        runner: ProcessRunner | None = None,
    ):
        """
        Initialize the Git service.

        Args:
            preferences: Timeouts and executable name (defaults if None)
            runner: Process runner used for every invocation
        """
        super().__init__()
        self.preferences = preferences or UserPreferences()
        self.runner = runner or ProcessRunner()
        self._git_executable = self.preferences.git_executable

    def _do_initialize(self) -> None:
        """Initialize the Git service by checking Git availability."""
        result = self._run_git_command(["--version"])
        if not result.success:
            raise GitError(
                "Git is not available or not properly installed",
                command=f"{self._git_executable} --version",
                exit_code=result.exit_code,
                stderr=result.error,
                suggested_action="Install Git and make sure it is on PATH.",
            )
        logger.info(f"Git service initialized: {result.output.strip()}")

    def _run_git_command(
        self, args: list[str], timeout: int | None = None
    ) -> CommandResult:
        """
        Execute a Git command.

        Args:
            args: Git command arguments (without 'git')
            timeout: Seconds to wait; ``None`` uses the default command timeout,
                ``0`` waits indefinitely

        Returns:
            CommandResult: Result of the command execution
        """
        if timeout is None:
            timeout = self.preferences.command_timeout
        return self.runner.run(self._git_executable, args, timeout=timeout)

    def _run_in_repo(
        self, repo_path: str, args: list[str], timeout: int | None = None
    ) -> CommandResult:
        if not repo_path:
            raise ValidationError("Repository path is required", field="repo_path")
        return self._run_git_command(["-C", str(repo_path)] + args, timeout=timeout)

    def clone(self, clone_url: str, target_dir: str) -> CommandResult:
        """
        Clone a repository. Clones are never timed out.

        Args:
            clone_url: Address of the remote repository
            target_dir: Directory to clone into
        """
        if not clone_url or not target_dir:
            raise ValidationError("Clone URL and target directory are required")
        logger.info(f"Cloning {clone_url} into {target_dir}")
        return self._run_git_command(["clone", clone_url, str(target_dir)], timeout=0)

    def status_porcelain(self, repo_path: str) -> CommandResult:
        """Capture ``git status --porcelain``."""
        return self._run_in_repo(
            repo_path, ["status", "--porcelain"], timeout=self.preferences.status_timeout
        )

    def status_untracked_hidden(self, repo_path: str) -> CommandResult:
        """Capture ``git status -uno``, the human readable tracking summary."""
        return self._run_in_repo(
            repo_path, ["status", "-uno"], timeout=self.preferences.status_timeout
        )

    def changed_files(self, repo_path: str) -> CommandResult:
        """List modified and untracked (non-ignored) files."""
        return self._run_in_repo(
            repo_path,
            ["ls-files", "--modified", "--others", "--exclude-standard"],
            timeout=self.preferences.status_timeout,
        )

    def fetch(self, repo_path: str) -> CommandResult:
        """Fetch from the default remote."""
        return self._run_in_repo(
            repo_path, ["fetch"], timeout=self.preferences.fetch_timeout
        )

    def current_branch(self, repo_path: str) -> CommandResult:
        """Resolve the abbreviated name of HEAD."""
        return self._run_in_repo(repo_path, ["rev-parse", "--abbrev-ref", "HEAD"])

    def divergence(self, repo_path: str, branch: str) -> CommandResult:
        """
        Count commits unique to ``origin/<branch>`` and to HEAD.

        Args:
            repo_path: Path to the local clone
            branch: Current branch name
        """
        if not branch:
            raise ValidationError("Branch name is required", field="branch")
        return self._run_in_repo(
            repo_path,
            ["rev-list", "--left-right", "--count", f"origin/{branch}...HEAD"],
        )

    def pull(self, repo_path: str) -> CommandResult:
        """Pull from the tracking branch."""
        return self._run_in_repo(
            repo_path, ["pull"], timeout=self.preferences.pull_timeout
        )

    def diff(self, repo_path: str, path: str) -> CommandResult:
        """Diff a single path against the index."""
        if not path:
            raise ValidationError("File path is required", field="path")
        return self._run_in_repo(
            repo_path, ["diff", "--", path], timeout=self.preferences.status_timeout
        )

    def add_all(self, repo_path: str) -> CommandResult:
        """Stage every change, including deletions and untracked files."""
        return self._run_in_repo(repo_path, ["add", "-A"])

    def commit(self, repo_path: str, message: str) -> CommandResult:
        """Commit staged changes with a message."""
        if not message or not message.strip():
            raise ValidationError("Commit message is required", field="message")
        return self._run_in_repo(repo_path, ["commit", "-m", message])

    def push(self, repo_path: str) -> CommandResult:
        """Push the current branch."""
        return self._run_in_repo(
            repo_path, ["push"], timeout=self.preferences.pull_timeout
        )
