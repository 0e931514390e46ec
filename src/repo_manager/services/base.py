"""Base interfaces and abstract classes for services."""

from abc import ABC, abstractmethod
from enum import Enum

from ..models.repository import RepositoryEntry


class ProcessFailure(Enum):
    """Why a process produced no exit status of its own."""

    FAILED_TO_START = "failed_to_start"
    TIMED_OUT = "timed_out"


class CommandResult:
    """Result of a command execution."""

    def __init__(
        self,
        success: bool,
        output: str = "",
        error: str = "",
        exit_code: int = 0,
        failure: ProcessFailure | None = None,
    ):
        self.success = success
        self.output = output
        self.error = error
        self.exit_code = exit_code
        self.failure = failure

    @property
    def timed_out(self) -> bool:
        return self.failure == ProcessFailure.TIMED_OUT

    @property
    def failed_to_start(self) -> bool:
        return self.failure == ProcessFailure.FAILED_TO_START

    @property
    def combined_output(self) -> str:
        """Standard output followed by standard error."""
        if self.output and self.error and not self.output.endswith("\n"):
            return f"{self.output}\n{self.error}"
        return f"{self.output}{self.error}"

    def __repr__(self) -> str:
        return (
            f"CommandResult(success={self.success}, exit_code={self.exit_code}, "
            f"failure={self.failure.value if self.failure else None})"
        )


class BaseService(ABC):
    """Base class for all services."""

    def __init__(self):
        self._initialized = False

    def initialize(self) -> None:
        """Initialize the service."""
        if not self._initialized:
            self._do_initialize()
            self._initialized = True

    @abstractmethod
    def _do_initialize(self) -> None:
        """Perform service-specific initialization."""
        pass

    def is_initialized(self) -> bool:
        """Check if the service is initialized."""
        return self._initialized


class RepositorySource(ABC):
    """Capability to list the repositories of a GitHub account."""

    name = "source"

    @abstractmethod
    def list_repositories(self, username: str) -> list[RepositoryEntry]:
        """
        List repositories owned by a user.

        Raises:
            ValidationError: If the username is empty
            RepositorySourceError: If the listing could not be produced
            NetworkError: If the API could not be reached
        """
        pass


class GitServiceInterface(BaseService):
    """Interface for Git operations."""

    @abstractmethod
    def clone(self, clone_url: str, target_dir: str) -> CommandResult:
        """Clone a repository."""
        pass

    @abstractmethod
    def status_porcelain(self, repo_path: str) -> CommandResult:
        """Capture porcelain status."""
        pass

    @abstractmethod
    def fetch(self, repo_path: str) -> CommandResult:
        """Fetch from the remote."""
        pass

    @abstractmethod
    def pull(self, repo_path: str) -> CommandResult:
        """Pull from the remote."""
        pass

    @abstractmethod
    def diff(self, repo_path: str, path: str) -> CommandResult:
        """Diff a single path."""
        pass

    @abstractmethod
    def push(self, repo_path: str) -> CommandResult:
        """Push to the remote."""
        pass
