"""Main application window."""

import logging

from PyQt6.QtCore import Qt, QSettings, pyqtSignal
from PyQt6.QtGui import QAction, QFont
from PyQt6.QtWidgets import (
    QAbstractItemView,
    QFileDialog,
    QHBoxLayout,
    QInputDialog,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QMessageBox,
    QPlainTextEdit,
    QPushButton,
    QSplitter,
    QVBoxLayout,
    QWidget,
)

from ..models.repository import RepositoryEntry
from ..models.working_tree import WorkingTreeEntry
from .log_panel import LogPanel

DEFAULT_COMMIT_MESSAGE = "Update"
MAX_LISTED_PENDING_FILES = 15
STATUS_MESSAGE_TIMEOUT_MS = 3000


class MainWindow(QMainWindow):
    """
    Fixed-layout form: user search bar on top, repositories / files / diff
    side by side, and the log pane at the bottom.

    The window only renders state and emits requests; the controller decides
    what each request does.
    """

    search_requested = pyqtSignal(str)  # username
    choose_directory_requested = pyqtSignal()
    clone_requested = pyqtSignal()
    repository_selected = pyqtSignal(str)  # repository name, "" when cleared
    refresh_requested = pyqtSignal()
    check_updates_requested = pyqtSignal()
    pull_requested = pyqtSignal()
    diff_requested = pyqtSignal()
    commit_push_requested = pyqtSignal()
    closing = pyqtSignal()

    def __init__(self, title: str = "GitHub Repository Manager"):
        super().__init__()
        self.logger = logging.getLogger(__name__)
        self.settings = QSettings()
        self._busy = False

        self._setup_ui(title)
        self._setup_menu_bar()
        self._setup_connections()
        self._restore_state()

        self.logger.info("Main window initialized")

    def _setup_ui(self, title: str) -> None:
        self.setWindowTitle(title)
        self.setMinimumSize(900, 600)
        self.resize(1100, 700)

        central_widget = QWidget()
        self.setCentralWidget(central_widget)

        main_layout = QVBoxLayout(central_widget)
        main_layout.setContentsMargins(8, 8, 8, 8)
        main_layout.setSpacing(6)

        # Search bar
        top_layout = QHBoxLayout()
        self.username_edit = QLineEdit()
        self.username_edit.setPlaceholderText("GitHub username")
        self.username_edit.setAccessibleName("GitHub username")
        self.search_button = QPushButton("Search Repos")
        self.choose_dir_button = QPushButton("Set Clone Dir")
        self.clone_button = QPushButton("Clone Selected")
        top_layout.addWidget(QLabel("User:"))
        top_layout.addWidget(self.username_edit)
        top_layout.addWidget(self.search_button)
        top_layout.addWidget(self.choose_dir_button)
        top_layout.addWidget(self.clone_button)
        main_layout.addLayout(top_layout)

        self.vertical_splitter = QSplitter(Qt.Orientation.Vertical)
        main_layout.addWidget(self.vertical_splitter)

        self.main_splitter = QSplitter(Qt.Orientation.Horizontal)
        self.vertical_splitter.addWidget(self.main_splitter)

        # Repositories
        left = QWidget()
        left_layout = QVBoxLayout(left)
        left_layout.setContentsMargins(0, 0, 0, 0)
        self.repo_list = QListWidget()
        self.repo_list.setSelectionMode(
            QAbstractItemView.SelectionMode.ExtendedSelection
        )
        self.repo_list.setAccessibleName("Repositories")
        self.refresh_button = QPushButton("Refresh Local")
        self.check_updates_button = QPushButton("Check Updates")
        self.pull_button = QPushButton("Pull")
        left_layout.addWidget(QLabel("Repositories"))
        left_layout.addWidget(self.repo_list)
        left_layout.addWidget(self.refresh_button)
        left_layout.addWidget(self.check_updates_button)
        left_layout.addWidget(self.pull_button)
        self.main_splitter.addWidget(left)

        # Files
        middle = QWidget()
        middle_layout = QVBoxLayout(middle)
        middle_layout.setContentsMargins(0, 0, 0, 0)
        self.file_list = QListWidget()
        self.file_list.setFont(QFont("Consolas, Monaco, monospace", 9))
        self.file_list.setAccessibleName("Files")
        self.diff_button = QPushButton("Show Diff")
        middle_layout.addWidget(QLabel("Files"))
        middle_layout.addWidget(self.file_list)
        middle_layout.addWidget(self.diff_button)
        self.main_splitter.addWidget(middle)

        # Diff
        right = QWidget()
        right_layout = QVBoxLayout(right)
        right_layout.setContentsMargins(0, 0, 0, 0)
        self.diff_view = QPlainTextEdit()
        self.diff_view.setReadOnly(True)
        self.diff_view.setFont(QFont("Consolas, Monaco, monospace", 9))
        self.diff_view.setLineWrapMode(QPlainTextEdit.LineWrapMode.NoWrap)
        self.diff_view.setAccessibleName("Diff")
        self.commit_push_button = QPushButton("Commit & Push")
        right_layout.addWidget(QLabel("Diff"))
        right_layout.addWidget(self.diff_view)
        right_layout.addWidget(self.commit_push_button)
        self.main_splitter.addWidget(right)

        self.main_splitter.setSizes([300, 300, 500])

        # Log
        bottom = QWidget()
        bottom_layout = QVBoxLayout(bottom)
        bottom_layout.setContentsMargins(0, 0, 0, 0)
        self.log_panel = LogPanel()
        bottom_layout.addWidget(QLabel("Log"))
        bottom_layout.addWidget(self.log_panel)
        self.vertical_splitter.addWidget(bottom)

        self.vertical_splitter.setSizes([500, 200])
        self.vertical_splitter.setStretchFactor(0, 1)
        self.vertical_splitter.setStretchFactor(1, 0)

        self.action_buttons = [
            self.choose_dir_button,
            self.clone_button,
            self.refresh_button,
            self.check_updates_button,
            self.pull_button,
            self.diff_button,
            self.commit_push_button,
        ]

    def _setup_menu_bar(self) -> None:
        menubar = self.menuBar()

        file_menu = menubar.addMenu("&File")

        self.choose_dir_action = QAction("Set &Clone Directory...", self)
        self.choose_dir_action.setShortcut("Ctrl+O")
        file_menu.addAction(self.choose_dir_action)

        file_menu.addSeparator()

        exit_action = QAction("E&xit", self)
        exit_action.setShortcut("Ctrl+Q")
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        repo_menu = menubar.addMenu("&Repository")

        self.refresh_action = QAction("&Refresh Local", self)
        self.refresh_action.setShortcut("F5")
        repo_menu.addAction(self.refresh_action)

    def _setup_connections(self) -> None:
        self.search_button.clicked.connect(self._on_search_clicked)
        self.username_edit.returnPressed.connect(self._on_search_clicked)
        self.choose_dir_button.clicked.connect(self.choose_directory_requested)
        self.choose_dir_action.triggered.connect(self.choose_directory_requested)
        self.clone_button.clicked.connect(self.clone_requested)
        self.repo_list.currentItemChanged.connect(self._on_current_repository_changed)
        self.refresh_button.clicked.connect(self.refresh_requested)
        self.refresh_action.triggered.connect(self.refresh_requested)
        self.check_updates_button.clicked.connect(self.check_updates_requested)
        self.pull_button.clicked.connect(self.pull_requested)
        self.diff_button.clicked.connect(self.diff_requested)
        self.commit_push_button.clicked.connect(self.commit_push_requested)

    def _on_search_clicked(self) -> None:
        self.search_requested.emit(self.username_edit.text())

    def _on_current_repository_changed(self, current, _previous) -> None:
        self.repository_selected.emit(current.text() if current else "")

    # Rendering

    def set_repositories(self, entries: list[RepositoryEntry]) -> None:
        """Replace the repository list; each item keeps its entry as user data."""
        self.repo_list.blockSignals(True)
        try:
            self.repo_list.clear()
            for entry in entries:
                item = QListWidgetItem(entry.name)
                item.setData(Qt.ItemDataRole.UserRole, entry)
                if entry.clone_url:
                    item.setToolTip(entry.clone_url)
                self.repo_list.addItem(item)
        finally:
            self.repo_list.blockSignals(False)
        self.clear_files()

    def selected_repositories(self) -> list[RepositoryEntry]:
        return [
            item.data(Qt.ItemDataRole.UserRole)
            for item in self.repo_list.selectedItems()
        ]

    def current_repository_name(self) -> str:
        item = self.repo_list.currentItem()
        return item.text() if item else ""

    def set_files(self, entries: list[WorkingTreeEntry]) -> None:
        self.file_list.clear()
        for entry in entries:
            item = QListWidgetItem(entry.get_display_text())
            item.setData(Qt.ItemDataRole.UserRole, entry)
            if entry.is_clean:
                item.setForeground(Qt.GlobalColor.gray)
            self.file_list.addItem(item)

    def clear_files(self) -> None:
        self.file_list.clear()

    def current_file_entry(self) -> WorkingTreeEntry | None:
        item = self.file_list.currentItem()
        return item.data(Qt.ItemDataRole.UserRole) if item else None

    def set_diff_text(self, text: str) -> None:
        self.diff_view.setPlainText(text)

    def append_log(self, message: str) -> None:
        self.log_panel.append_log(message)

    def set_busy(self, busy: bool) -> None:
        """Enable or disable the action buttons while an operation runs."""
        self._busy = busy
        for button in self.action_buttons:
            button.setEnabled(not busy)
        self.choose_dir_action.setEnabled(not busy)
        self.refresh_action.setEnabled(not busy)
        if busy:
            self.setCursor(Qt.CursorShape.BusyCursor)
        else:
            self.unsetCursor()

    def is_busy(self) -> bool:
        return self._busy

    def show_progress(self, message: str, percentage: int) -> None:
        """Show operation progress in the status bar; finished steps fade out."""
        if percentage >= 100:
            self.statusBar().showMessage(message, STATUS_MESSAGE_TIMEOUT_MS)
        else:
            self.statusBar().showMessage(message)

    # Dialogs

    def ask_directory(self, current: str) -> str:
        """Ask for a clone directory; returns "" when cancelled."""
        return QFileDialog.getExistingDirectory(
            self, "Choose Clone Directory", current
        )

    def ask_commit_message(self, pending_files: list[str]) -> str | None:
        """
        Prompt for a commit message.

        Returns:
            The message, or None if the dialog was cancelled
        """
        label = "Message:"
        if pending_files:
            shown = pending_files[:MAX_LISTED_PENDING_FILES]
            listing = "\n".join(f"  {path}" for path in shown)
            if len(pending_files) > len(shown):
                listing += f"\n  ... and {len(pending_files) - len(shown)} more"
            label = f"Files to commit:\n{listing}\n\nMessage:"

        message, ok = QInputDialog.getText(
            self,
            "Commit message",
            label,
            QLineEdit.EchoMode.Normal,
            DEFAULT_COMMIT_MESSAGE,
        )
        return message if ok else None

    def show_information(self, title: str, text: str) -> None:
        QMessageBox.information(self, title, text)

    # State

    def save_state(self) -> None:
        """Save window state and geometry."""
        self.settings.setValue("geometry", self.saveGeometry())
        self.settings.setValue("windowState", self.saveState())
        self.settings.setValue("splitterSizes", self.main_splitter.sizes())
        self.settings.setValue("verticalSplitterSizes", self.vertical_splitter.sizes())
        self.settings.setValue("lastUsername", self.username_edit.text().strip())

        self.logger.debug("Window state saved")

    def _restore_state(self) -> None:
        geometry = self.settings.value("geometry")
        if geometry:
            self.restoreGeometry(geometry)

        window_state = self.settings.value("windowState")
        if window_state:
            self.restoreState(window_state)

        splitter_sizes = self.settings.value("splitterSizes")
        if splitter_sizes:
            self.main_splitter.setSizes([int(size) for size in splitter_sizes])

        vertical_splitter_sizes = self.settings.value("verticalSplitterSizes")
        if vertical_splitter_sizes:
            self.vertical_splitter.setSizes(
                [int(size) for size in vertical_splitter_sizes]
            )

        last_username = self.settings.value("lastUsername", "", type=str)
        if last_username:
            self.username_edit.setText(last_username)

        self.logger.debug("Window state restored")

    def closeEvent(self, event) -> None:
        self.closing.emit()
        self.save_state()
        self.logger.info("Main window closing")
        event.accept()
