"""Append-only, timestamped log pane."""

from PyQt6.QtCore import QDateTime
from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import QPlainTextEdit, QWidget

TIMESTAMP_FORMAT = "yyyy-MM-dd HH:mm:ss"


class LogPanel(QPlainTextEdit):
    """Read-only pane that receives one timestamped line per message."""

    def __init__(self, parent: QWidget | None = None, max_blocks: int = 5000):
        super().__init__(parent)
        self.setReadOnly(True)
        self.setFont(QFont("Consolas, Monaco, monospace", 9))
        self.setMaximumBlockCount(max_blocks)
        self.setAccessibleName("Log")

    @staticmethod
    def format_line(message: str, timestamp: QDateTime | None = None) -> str:
        timestamp = timestamp or QDateTime.currentDateTime()
        return f"[{timestamp.toString(TIMESTAMP_FORMAT)}] {message}"

    def append_log(self, message: str) -> None:
        """Append ``message`` prefixed with the current local time."""
        self.appendPlainText(self.format_line(message.rstrip("\n")))
        scrollbar = self.verticalScrollBar()
        scrollbar.setValue(scrollbar.maximum())

    def lines(self) -> list[str]:
        return self.toPlainText().splitlines()
