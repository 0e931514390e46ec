"""Main application controller that coordinates all services and UI components."""

import logging

from PyQt6.QtCore import QObject

from ..models.config import AppConfig
from ..models.operations import CloneOutcome, CommitPushOutcome, CommitPushStatus
from ..models.working_tree import DivergenceReport
from ..services.async_service import AsyncRepoService, OperationResult, OperationType
from ..services.base import CommandResult, RepositorySource
from ..services.config_manager import ConfigManager
from ..services.git_service import GitService
from ..services.local_repository_service import LocalRepositoryService
from ..services.message_service import MessageService
from ..services.process_runner import ProcessRunner
from ..services.repository_source import RestRepositorySource, create_repository_source
from ..ui.main_window import MainWindow
from ..utils.error_handler import ErrorHandler
from ..utils.exceptions import (
    FileSystemError,
    NetworkError,
    RepoManagerError,
    ValidationError,
)

# Results of these operations only matter for the latest request
DISCARD_WHEN_STALE = (OperationType.SEARCH, OperationType.REFRESH, OperationType.DIFF)

SOURCE_DESCRIPTIONS = {
    "rest": "GitHub REST API",
    "cli": "GitHub CLI",
}


class ApplicationController(QObject):
    """
    Coordinates the main window with the repository services.

    Every user action is validated here, dispatched to ``AsyncRepoService``
    and rendered when its ``OperationResult`` arrives. Only the selected
    repository and the clone directory outlive a single action.
    """

    def __init__(
        self,
        config_manager: ConfigManager | None = None,
        runner: ProcessRunner | None = None,
        source: RepositorySource | None = None,
        main_window: MainWindow | None = None,
        async_service: AsyncRepoService | None = None,
    ):
        super().__init__()
        self.logger = logging.getLogger(__name__)

        self.config_manager = config_manager or ConfigManager()
        self.config: AppConfig = self.config_manager.config
        self.runner = runner or ProcessRunner()

        preferences = self.config.preferences
        self.git_service = GitService(preferences=preferences, runner=self.runner)
        self.local_service = LocalRepositoryService(
            self.git_service, preferences.get_clone_dir()
        )

        self._source = source
        self._main_window = main_window
        self._async_service = async_service

        self.main_window: MainWindow | None = None
        self.async_service: AsyncRepoService | None = None
        self.message_service: MessageService | None = None
        self.error_handler = ErrorHandler()

        self._selected_repository = ""
        self._operation_context: dict[str, str] = {}

        self.logger.info("Application controller initialized")

    def initialize(self) -> None:
        """Build the window and services, then report startup state."""
        self.logger.info("Initializing application controller...")

        self.main_window = self._main_window or MainWindow()

        self.message_service = MessageService(self.main_window)
        self.message_service.set_log_pane(self.main_window.log_panel)

        self.error_handler = ErrorHandler(self.main_window)
        self.error_handler.add_listener(self._log_error_to_pane)

        source = self._source or self._create_source()
        self.async_service = self._async_service or AsyncRepoService(
            source, self.local_service
        )
        self.async_service.operation_finished.connect(self._on_operation_finished)
        self.async_service.operation_progress.connect(self._on_operation_progress)

        self._connect_ui_signals()

        try:
            self.local_service.initialize()
        except RepoManagerError as e:
            self.error_handler.handle_error(e)

        self._log_startup_state(source)
        self.logger.info("Application controller initialized successfully")

    def _create_source(self) -> RepositorySource:
        try:
            return create_repository_source(self.config, runner=self.runner)
        except RepoManagerError as e:
            self.error_handler.handle_error(e)
            return RestRepositorySource(
                token=self.config.github_token,
                timeout=self.config.preferences.request_timeout,
            )

    def _log_startup_state(self, source: RepositorySource) -> None:
        if source.name == "rest" and not self.config.github_token:
            self.message_service.log(
                "GITHUB_TOKEN not set: requests are unauthenticated and rate limited."
            )
        self.message_service.log(
            f"Default clone directory: {self.local_service.base_dir}"
        )

    def _connect_ui_signals(self) -> None:
        window = self.main_window
        window.search_requested.connect(self._handle_search)
        window.choose_directory_requested.connect(self._handle_choose_directory)
        window.clone_requested.connect(self._handle_clone_selected)
        window.repository_selected.connect(self._handle_repository_selected)
        window.refresh_requested.connect(self._handle_refresh_local)
        window.check_updates_requested.connect(self._handle_check_updates)
        window.pull_requested.connect(self._handle_pull)
        window.diff_requested.connect(self._handle_show_diff)
        window.commit_push_requested.connect(self._handle_commit_push)
        window.closing.connect(self.cleanup)

    def _log_error_to_pane(self, error: RepoManagerError) -> None:
        prefix = "API error" if isinstance(error, NetworkError) else "Error"
        self.message_service.log(f"{prefix}: {error.message}")

    def _start(self, operation_id: str, repository: str = "") -> str:
        self._operation_context[operation_id] = repository
        self._update_busy_state()
        return operation_id

    def _update_busy_state(self) -> None:
        if self.main_window and self.async_service:
            self.main_window.set_busy(
                self.async_service.has_active_operations(exclude=OperationType.SEARCH)
            )

    def _require_repository(self) -> str:
        name = self._selected_repository or self.main_window.current_repository_name()
        if not name:
            self.message_service.show_warning("Select", "Select a repository")
        return name

    # Action handlers

    def _handle_search(self, username: str) -> None:
        username = username.strip()
        if not username:
            self.message_service.show_warning("Input", "Username required")
            return

        description = SOURCE_DESCRIPTIONS.get(
            self.async_service.source.name, self.async_service.source.name
        )
        self.message_service.log(f"Searching repos via {description}...")
        self._start(self.async_service.search_async(username))

    def _handle_choose_directory(self) -> None:
        directory = self.main_window.ask_directory(str(self.local_service.base_dir))
        if not directory:
            return

        try:
            self.local_service.set_base_dir(directory)
        except ValidationError as e:
            self.error_handler.handle_error(e)
            return

        self.message_service.log(f"Clone dir set: {directory}")
        self._handle_refresh_local()

    def _handle_clone_selected(self) -> None:
        entries = self.main_window.selected_repositories()
        if not entries:
            self.message_service.show_warning("Select", "Select a repo")
            return

        self.message_service.log(
            f"Cloning {len(entries)} repositories into {self.local_service.base_dir}..."
        )
        self._start(self.async_service.clone_async(entries))

    def _handle_repository_selected(self, name: str) -> None:
        self._selected_repository = name
        self.main_window.set_diff_text("")
        self._handle_refresh_local()

    def _handle_refresh_local(self) -> None:
        name = self._selected_repository or self.main_window.current_repository_name()
        self.main_window.clear_files()
        if not name:
            return
        self._start(self.async_service.refresh_async(name), name)

    def _handle_check_updates(self) -> None:
        name = self._require_repository()
        if not name:
            return
        self.message_service.log(f"Fetching remote for {name}...")
        self._start(self.async_service.check_updates_async(name), name)

    def _handle_pull(self) -> None:
        name = self._require_repository()
        if not name:
            return
        self.message_service.log(f"Pulling {name}...")
        self._start(self.async_service.pull_async(name), name)

    def _handle_show_diff(self) -> None:
        name = self._selected_repository or self.main_window.current_repository_name()
        entry = self.main_window.current_file_entry()
        if not name or entry is None or entry.is_clean:
            self.message_service.show_warning("Select", "Select file")
            return
        self._start(self.async_service.diff_async(name, entry), name)

    def _handle_commit_push(self) -> None:
        name = self._require_repository()
        if not name:
            return
        self._start(self.async_service.check_changes_async(name), name)

    # Results

    def _on_operation_progress(
        self, _operation_id: str, message: str, percentage: int
    ) -> None:
        self.main_window.show_progress(message, percentage)

    def _on_operation_finished(self, result: OperationResult) -> None:
        repository = self._operation_context.pop(result.operation_id, "")
        self._update_busy_state()

        if result.is_stale and result.operation_type in DISCARD_WHEN_STALE:
            self.logger.debug(f"Discarding stale result {result.operation_id}")
            return

        if not result.success:
            self._on_operation_failed(result)
            return

        handlers = {
            OperationType.SEARCH: self._on_search_finished,
            OperationType.CLONE: self._on_clone_finished,
            OperationType.REFRESH: self._on_refresh_finished,
            OperationType.CHECK_UPDATES: self._on_check_updates_finished,
            OperationType.PULL: self._on_pull_finished,
            OperationType.DIFF: self._on_diff_finished,
            OperationType.CHECK_CHANGES: self._on_check_changes_finished,
            OperationType.COMMIT_PUSH: self._on_commit_push_finished,
        }
        handlers[result.operation_type](repository, result.data)

    def _on_operation_failed(self, result: OperationResult) -> None:
        error = result.exception or RepoManagerError(result.error)

        if result.operation_type == OperationType.REFRESH and isinstance(
            error, FileSystemError
        ):
            self.message_service.log(error.message)
            return

        if result.operation_type == OperationType.SEARCH:
            # Never leave another account's repositories selectable
            self.main_window.set_repositories([])
            self._selected_repository = ""

        self.error_handler.handle_error(error)

    def _on_search_finished(self, _repository: str, entries) -> None:
        self.main_window.set_repositories(entries)
        self._selected_repository = ""
        self.message_service.log(f"Loaded {len(entries)} repos.")

    def _on_clone_finished(self, _repository: str, outcomes: list[CloneOutcome]) -> None:
        for outcome in outcomes:
            self.message_service.log(outcome.get_log_text())
            if outcome.message and not outcome.is_failure:
                self.message_service.log(outcome.message.strip())

        for outcome in outcomes:
            if outcome.is_failure:
                self.message_service.show_warning(
                    "Clone failed", f"{outcome.entry.name}: {outcome.message}"
                )

        self._handle_refresh_local()

    def _on_refresh_finished(self, repository: str, entries) -> None:
        if repository != self._selected_repository and self._selected_repository:
            return
        self.main_window.set_files(entries)
        self.message_service.log(f"Refreshed local state of {repository}.")

    def _on_check_updates_finished(
        self, repository: str, report: DivergenceReport
    ) -> None:
        if report.fetch_output.strip():
            self.message_service.log(report.fetch_output.strip())
        text = report.get_display_text()
        self.message_service.log(f"{repository}: {text}")
        self.main_window.show_information("Remote", text)

    def _on_pull_finished(self, repository: str, result: CommandResult) -> None:
        text = result.combined_output
        self.message_service.log(text.strip() or f"Pulled {repository}")
        if result.success:
            self.main_window.show_information("Pull", text)
        else:
            self.message_service.show_warning("Pull failed", text)
        self._handle_refresh_local()

    def _on_diff_finished(self, repository: str, text: str) -> None:
        if repository != self._selected_repository and self._selected_repository:
            return
        self.main_window.set_diff_text(text)

    def _on_check_changes_finished(self, repository: str, data) -> None:
        has_changes, pending_files = data
        if not has_changes:
            self.main_window.show_information("Clean", "Nothing to commit")
            return

        message = self.main_window.ask_commit_message(pending_files)
        if message is None:
            self.message_service.log("Commit cancelled.")
            return
        if not message.strip():
            self.message_service.show_warning("Commit", "Commit message is required")
            return

        self.message_service.log(f"Committing and pushing {repository}...")
        self._start(
            self.async_service.commit_push_async(repository, message), repository
        )

    def _on_commit_push_finished(
        self, repository: str, outcome: CommitPushOutcome
    ) -> None:
        text = outcome.get_display_text()
        self.message_service.log(f"{repository}: {text.strip()}")

        if outcome.status == CommitPushStatus.FAILED:
            self.message_service.show_warning("Commit & push failed", text)
        else:
            self.main_window.show_information("Commit & push", text)

        self._handle_refresh_local()

    def show_main_window(self) -> None:
        if self.main_window:
            self.main_window.show()

    def get_main_window(self) -> MainWindow | None:
        return self.main_window

    def cleanup(self) -> None:
        """Cancel outstanding operations."""
        if self.async_service:
            self.async_service.shutdown()
        self.logger.info("Application controller cleanup completed")
