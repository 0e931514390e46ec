"""Custom exceptions for the application."""

from typing import Any
from enum import Enum


class ErrorSeverity(Enum):
    """Error severity levels."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Where an error originated."""

    GIT_OPERATION = "git_operation"
    FILE_SYSTEM = "file_system"
    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    COMMAND_EXECUTION = "command_execution"
    REPOSITORY_SOURCE = "repository_source"
    NETWORK = "network"
    PARSING = "parsing"


class RepoManagerError(Exception):
    """
    Base exception for the repository manager.

    Subclasses set ``category`` and ``default_severity`` as class attributes
    and record their own context through ``_attach``.
    """

    category = ErrorCategory.GIT_OPERATION
    default_severity = ErrorSeverity.ERROR

    def __init__(
        self,
        message: str,
        category: ErrorCategory | None = None,
        severity: ErrorSeverity | None = None,
        details: dict[str, Any] | None = None,
        user_message: str | None = None,
        suggested_action: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or type(self).category
        self.severity = severity or type(self).default_severity
        self.details = dict(details or {})
        self.user_message = user_message or message
        self.suggested_action = suggested_action

    def _attach(self, key: str, value: Any, /, **related: Any) -> None:
        """
        Store ``key`` and its related context as attributes.

        Everything is copied into ``details`` only when ``value`` is set, so
        the error dialog lists context for errors that actually have it.
        """
        setattr(self, key, value)
        for name, related_value in related.items():
            setattr(self, name, related_value)
        if value is not None:
            self.details[key] = value
            self.details.update(related)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging."""
        return {
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "details": self.details,
            "user_message": self.user_message,
            "suggested_action": self.suggested_action,
            "type": type(self).__name__,
        }


class GitError(RepoManagerError):
    """A git command ran but reported failure."""

    def __init__(
        self,
        message: str,
        command: str | None = None,
        exit_code: int | None = None,
        stderr: str | None = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self._attach("command", command, exit_code=exit_code, stderr=stderr)


class ValidationError(RepoManagerError):
    """Invalid user input or a missing selection."""

    category = ErrorCategory.VALIDATION
    default_severity = ErrorSeverity.WARNING

    def __init__(
        self, message: str, field: str | None = None, value: Any | None = None, **kwargs
    ):
        super().__init__(message, **kwargs)
        self._attach("field", field, value=value)


class ConfigurationError(RepoManagerError):
    """Unusable configuration file or environment override."""

    category = ErrorCategory.CONFIGURATION

    def __init__(self, message: str, config_file: str | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self._attach("config_file", config_file)


class FileSystemError(RepoManagerError):
    """File system problems, such as a missing clone."""

    category = ErrorCategory.FILE_SYSTEM

    def __init__(
        self,
        message: str,
        path: str | None = None,
        operation: str | None = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self._attach("path", path, operation=operation)


class CommandExecutionError(RepoManagerError):
    """An external process timed out or could not be started."""

    category = ErrorCategory.COMMAND_EXECUTION

    def __init__(
        self,
        message: str,
        command: str | None = None,
        exit_code: int | None = None,
        stdout: str | None = None,
        stderr: str | None = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self._attach(
            "command", command, exit_code=exit_code, stdout=stdout, stderr=stderr
        )


class NetworkError(RepoManagerError):
    """The GitHub API could not be reached or answered with an HTTP error."""

    category = ErrorCategory.NETWORK

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self._attach("url", url, status_code=status_code)


class RepositorySourceError(RepoManagerError):
    """A repository listing could not be produced."""

    category = ErrorCategory.REPOSITORY_SOURCE

    def __init__(self, message: str, source: str | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self._attach("source", source)


class StatusParseError(RepoManagerError):
    """A porcelain status line does not match its grammar."""

    category = ErrorCategory.PARSING
    default_severity = ErrorSeverity.WARNING

    def __init__(self, message: str, line: str | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self._attach("line", line)
