"""Centralized error handling system."""

import logging
from collections.abc import Callable

from PyQt6.QtCore import QObject, pyqtSignal
from PyQt6.QtWidgets import QApplication, QMessageBox, QWidget

from .exceptions import (
    ErrorSeverity,
    FileSystemError,
    GitError,
    NetworkError,
    RepoManagerError,
    ValidationError,
)


class ErrorHandler(QObject):
    """
    Centralized error handler for the application.

    Converts foreign exceptions into ``RepoManagerError``, logs them at a level
    matching their severity and shows a modal dialog. No error is fatal; the
    caller keeps running after ``handle_error`` returns.
    """

    error_occurred = pyqtSignal(RepoManagerError)

    def __init__(self, parent: QWidget | None = None):
        super().__init__(parent)
        self.parent_widget = parent
        self.logger = logging.getLogger(__name__)

        # Extra sinks (the log pane) that receive every handled error
        self._listeners: list[Callable[[RepoManagerError], None]] = []

    def add_listener(self, listener: Callable[[RepoManagerError], None]) -> None:
        """Register a callable notified with every handled error."""
        self._listeners.append(listener)

    def handle_error(
        self,
        error: Exception,
        show_dialog: bool = True,
        log_error: bool = True,
    ) -> RepoManagerError:
        """
        Handle an error with logging and user feedback.

        Args:
            error: The exception to handle
            show_dialog: Whether to show error dialog to user
            log_error: Whether to log the error

        Returns:
            RepoManagerError: The (possibly converted) error that was handled
        """
        if not isinstance(error, RepoManagerError):
            error = self.convert_error(error)

        if log_error:
            self._log_error(error)

        self.error_occurred.emit(error)
        for listener in self._listeners:
            listener(error)

        if show_dialog:
            self._show_error_dialog(error)

        return error

    def convert_error(self, error: Exception) -> RepoManagerError:
        """Convert a generic exception to a RepoManagerError."""
        error_message = str(error)

        if isinstance(error, OSError):
            return FileSystemError(
                error_message,
                user_message="A file system error occurred.",
                suggested_action="Check that the clone directory exists and is writable.",
            )
        if isinstance(error, ValueError):
            return ValidationError(
                error_message,
                user_message="Invalid input provided.",
                suggested_action="Please check your input and try again.",
            )
        if "git" in error_message.lower():
            return GitError(
                error_message,
                user_message="A Git operation failed.",
                suggested_action="Please check that Git is installed and the repository is valid.",
            )
        return RepoManagerError(
            error_message,
            user_message=f"An unexpected error occurred: {error_message}",
        )

    def _log_error(self, error: RepoManagerError) -> None:
        """Log the error with appropriate level and details."""
        log_funcs = {
            ErrorSeverity.CRITICAL: self.logger.critical,
            ErrorSeverity.ERROR: self.logger.error,
            ErrorSeverity.WARNING: self.logger.warning,
        }
        log_func = log_funcs.get(error.severity, self.logger.info)
        log_func(
            f"Error in {error.category.value}: {error.message}",
            extra={"error_details": error.to_dict()},
        )

    def _show_error_dialog(self, error: RepoManagerError) -> None:
        """Show user-friendly error dialog."""
        parent = self.parent_widget
        if not parent and QApplication.instance():
            parent = QApplication.instance().activeWindow()

        msg_box = QMessageBox(parent)
        icon, title = self._icon_and_title(error)
        msg_box.setIcon(icon)
        msg_box.setWindowTitle(title)
        msg_box.setText(error.user_message)

        details = self._build_error_details(error)
        if details:
            msg_box.setDetailedText("\n".join(details))

        msg_box.exec()

    @staticmethod
    def _icon_and_title(error: RepoManagerError) -> tuple[QMessageBox.Icon, str]:
        if isinstance(error, NetworkError):
            return QMessageBox.Icon.Warning, "API error"
        severity_config = {
            ErrorSeverity.CRITICAL: (QMessageBox.Icon.Critical, "Critical Error"),
            ErrorSeverity.ERROR: (QMessageBox.Icon.Critical, "Error"),
            ErrorSeverity.WARNING: (QMessageBox.Icon.Warning, "Warning"),
        }
        return severity_config.get(
            error.severity, (QMessageBox.Icon.Information, "Information")
        )

    @staticmethod
    def _build_error_details(error: RepoManagerError) -> list[str]:
        """Build the list of error details for display."""
        details = []

        if error.suggested_action:
            details.append(f"Suggested action: {error.suggested_action}")

        for key, value in error.details.items():
            if value is not None:
                details.append(f"{key.replace('_', ' ').title()}: {value}")

        return details
