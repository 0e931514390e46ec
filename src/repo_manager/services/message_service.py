"""Message service for routing messages to the log pane and dialogs."""

import logging
from enum import Enum
from typing import Protocol

from PyQt6.QtCore import QObject, pyqtSignal
from PyQt6.QtWidgets import QMessageBox, QWidget


logger = logging.getLogger(__name__)


class MessageType(Enum):
    """Types of messages that can be displayed."""

    INFO = "info"
    WARNING = "warning"


class MessageTarget(Enum):
    """Target destinations for messages."""

    LOG_PANE = "log_pane"
    ALERT = "alert"


class LogPaneInterface(Protocol):
    """Interface for the append-only log pane."""

    def append_log(self, message: str) -> None:
        """Append a line to the pane."""
        ...


class MessageService(QObject):
    """
    Routes user-facing messages.

    Everything is written to the log pane; warnings additionally open a
    modal dialog.
    """

    log_message = pyqtSignal(str)
    alert_message = pyqtSignal(str, str, str)  # title, message, type

    def __init__(self, parent: QWidget | None = None):
        super().__init__(parent)
        self.logger = logging.getLogger(__name__)
        self._parent_widget = parent
        self._log_pane: LogPaneInterface | None = None

        self._routing_rules = {
            MessageType.INFO: MessageTarget.LOG_PANE,
            MessageType.WARNING: MessageTarget.ALERT,
        }

    def set_log_pane(self, log_pane: LogPaneInterface) -> None:
        self._log_pane = log_pane
        self.logger.debug("Log pane registered")

    def log(self, message: str) -> None:
        """Write a line to the log pane without any dialog."""
        self._route_message(MessageType.INFO, "Information", message)

    def show_warning(self, title: str, message: str) -> None:
        self._route_message(MessageType.WARNING, title, message)

    def _route_message(self, msg_type: MessageType, title: str, message: str) -> None:
        target = self._routing_rules.get(msg_type, MessageTarget.LOG_PANE)

        self.logger.debug(
            f"Routing {msg_type.value} message to {target.value}: {message}"
        )

        self._append_to_log_pane(message)
        if target == MessageTarget.ALERT:
            self._show_alert_message(msg_type, title, message)

    def _append_to_log_pane(self, message: str) -> None:
        if self._log_pane is None:
            self.logger.info(f"Log: {message}")
            return

        try:
            self._log_pane.append_log(message)
            self.log_message.emit(message)
        except RuntimeError:
            # Pane already deleted during shutdown
            self.logger.warning(f"Log pane deleted, logging message: {message}")

    def _show_alert_message(
        self, msg_type: MessageType, title: str, message: str
    ) -> None:
        if not self._parent_widget:
            self.logger.warning(f"No parent widget for alert: {title} - {message}")
            return

        try:
            QMessageBox.warning(self._parent_widget, title, message)

            self.alert_message.emit(title, message, msg_type.value)
        except RuntimeError:
            self.logger.warning(
                f"Parent widget deleted, logging alert: {title} - {message}"
            )
