"""Asynchronous repository operations using QThread."""

import logging
import time
from collections.abc import Callable
from enum import Enum
from typing import Any

from PyQt6.QtCore import QObject, QThread, pyqtSignal

from ..models.repository import RepositoryEntry
from ..models.working_tree import WorkingTreeEntry
from ..utils.exceptions import RepoManagerError
from .base import RepositorySource
from .local_repository_service import LocalRepositoryService

logger = logging.getLogger(__name__)


class OperationType(Enum):
    """Types of operations that can be performed asynchronously."""

    SEARCH = "search"
    CLONE = "clone"
    REFRESH = "refresh"
    CHECK_UPDATES = "check_updates"
    PULL = "pull"
    DIFF = "diff"
    CHECK_CHANGES = "check_changes"
    COMMIT_PUSH = "commit_push"


class OperationResult:
    """Result of an asynchronous operation."""

    def __init__(
        self,
        operation_type: OperationType,
        success: bool,
        data: Any = None,
        error: str = "",
        operation_id: str = "",
        exception: RepoManagerError | None = None,
    ):
        self.operation_type = operation_type
        self.success = success
        self.data = data
        self.error = error
        self.operation_id = operation_id
        self.exception = exception
        self.is_stale = False
        self.timestamp = time.time()

    def __repr__(self) -> str:
        return (
            f"OperationResult({self.operation_type.value}, id={self.operation_id}, "
            f"success={self.success}, stale={self.is_stale})"
        )


class RepoWorker(QObject):
    """
    Worker that runs one repository operation on a background thread.

    Results are delivered through ``finished``; a cancelled worker delivers
    nothing.
    """

    progress = pyqtSignal(str, int)  # message, percentage
    finished = pyqtSignal(OperationResult)

    def __init__(
        self,
        source: RepositorySource,
        local_service: LocalRepositoryService,
    ):
        super().__init__()
        self.source = source
        self.local_service = local_service
        self._cancelled = False

    def cancel(self):
        """Cancel the current operation."""
        self._cancelled = True
        logger.info("Repository operation cancelled")

    def is_cancelled(self) -> bool:
        return self._cancelled

    def _execute(
        self,
        operation_type: OperationType,
        operation_id: str,
        message: str,
        func: Callable[..., Any],
        *args,
    ):
        if self.is_cancelled():
            return

        self.progress.emit(message, 10)

        try:
            data = func(*args)
            result = OperationResult(
                operation_type=operation_type,
                success=True,
                data=data,
                operation_id=operation_id,
            )
        except RepoManagerError as e:
            logger.error(f"{operation_type.value} failed: {e.message}")
            result = OperationResult(
                operation_type=operation_type,
                success=False,
                error=e.message,
                operation_id=operation_id,
                exception=e,
            )
        except Exception as e:
            logger.exception(f"Unexpected error during {operation_type.value}")
            result = OperationResult(
                operation_type=operation_type,
                success=False,
                error=f"{operation_type.value} failed: {e}",
                operation_id=operation_id,
                exception=RepoManagerError(str(e)),
            )

        if self.is_cancelled():
            return

        self.progress.emit("Complete", 100)
        self.finished.emit(result)

    def search(self, username: str, operation_id: str = ""):
        self._execute(
            OperationType.SEARCH,
            operation_id,
            f"Listing repositories for {username}...",
            self.source.list_repositories,
            username,
        )

    def clone(self, entries: list[RepositoryEntry], operation_id: str = ""):
        self._execute(
            OperationType.CLONE,
            operation_id,
            f"Cloning {len(entries)} repositories...",
            self.local_service.clone_repositories,
            entries,
        )

    def refresh(self, name: str, operation_id: str = ""):
        self._execute(
            OperationType.REFRESH,
            operation_id,
            f"Reading status of {name}...",
            self.local_service.refresh,
            name,
        )

    def check_updates(self, name: str, operation_id: str = ""):
        self._execute(
            OperationType.CHECK_UPDATES,
            operation_id,
            f"Fetching {name}...",
            self.local_service.check_updates,
            name,
        )

    def pull(self, name: str, operation_id: str = ""):
        self._execute(
            OperationType.PULL,
            operation_id,
            f"Pulling {name}...",
            self.local_service.pull,
            name,
        )

    def diff(self, name: str, entry: WorkingTreeEntry | str, operation_id: str = ""):
        self._execute(
            OperationType.DIFF,
            operation_id,
            f"Diffing {name}...",
            self.local_service.diff,
            name,
            entry,
        )

    def check_changes(self, name: str, operation_id: str = ""):
        def check() -> tuple[bool, list[str]]:
            if not self.local_service.has_changes(name):
                return False, []
            return True, self.local_service.pending_files(name)

        self._execute(
            OperationType.CHECK_CHANGES,
            operation_id,
            f"Checking {name} for changes...",
            check,
        )

    def commit_push(self, name: str, message: str, operation_id: str = ""):
        self._execute(
            OperationType.COMMIT_PUSH,
            operation_id,
            f"Committing and pushing {name}...",
            self.local_service.commit_and_push,
            name,
            message,
        )


class AsyncRepoService(QObject):
    """
    Runs repository operations on background threads.

    The service remembers the latest operation id per operation type. A
    result that arrives after a newer operation of the same type was started
    is flagged ``is_stale``.
    """

    operation_started = pyqtSignal(str, str)  # operation_type, operation_id
    operation_progress = pyqtSignal(str, str, int)  # operation_id, message, percentage
    operation_finished = pyqtSignal(OperationResult)

    def __init__(
        self,
        source: RepositorySource,
        local_service: LocalRepositoryService,
    ):
        super().__init__()
        self.source = source
        self.local_service = local_service
        self._active_operations: dict[str, tuple[QThread, RepoWorker]] = {}
        self._latest_by_type: dict[OperationType, str] = {}
        self._operation_types: dict[str, OperationType] = {}
        self._operation_counter = 0

    def _generate_operation_id(self) -> str:
        self._operation_counter += 1
        return f"repo_op_{self._operation_counter}_{int(time.time())}"

    def _start_operation(
        self, operation_type: OperationType, worker_method: str, *args
    ) -> str:
        """
        Start an operation on a fresh worker thread.

        Args:
            operation_type: Type of operation to perform
            worker_method: Name of the worker method to call
            *args: Arguments to pass to the worker method

        Returns:
            str: Operation ID for tracking
        """
        operation_id = self._generate_operation_id()
        self._latest_by_type[operation_type] = operation_id
        self._operation_types[operation_id] = operation_type

        worker = RepoWorker(self.source, self.local_service)
        thread = QThread()
        worker.moveToThread(thread)

        worker.progress.connect(
            lambda msg, pct: self.operation_progress.emit(operation_id, msg, pct)
        )
        worker.finished.connect(self._on_operation_finished)

        thread.started.connect(
            lambda: getattr(worker, worker_method)(*args, operation_id=operation_id)
        )
        thread.finished.connect(thread.deleteLater)

        self._active_operations[operation_id] = (thread, worker)

        thread.start()
        self.operation_started.emit(operation_type.value, operation_id)

        logger.info(f"Started {operation_type.value} operation with ID: {operation_id}")
        return operation_id

    def _on_operation_finished(self, result: OperationResult):
        operation_id = result.operation_id

        if operation_id not in self._active_operations:
            logger.debug(f"Dropping result of cancelled operation {operation_id}")
            return

        thread, _worker = self._active_operations.pop(operation_id)
        self._operation_types.pop(operation_id, None)
        thread.quit()
        thread.wait()

        result.is_stale = self.is_stale(result.operation_type, operation_id)
        self.operation_finished.emit(result)

        logger.info(
            f"Completed {result.operation_type.value} operation "
            f"(ID: {operation_id}, Success: {result.success}, Stale: {result.is_stale})"
        )

    def is_stale(self, operation_type: OperationType, operation_id: str) -> bool:
        """Whether a newer operation of the same type has been started."""
        return self._latest_by_type.get(operation_type) != operation_id

    def search_async(self, username: str) -> str:
        return self._start_operation(OperationType.SEARCH, "search", username)

    def clone_async(self, entries: list[RepositoryEntry]) -> str:
        return self._start_operation(OperationType.CLONE, "clone", list(entries))

    def refresh_async(self, name: str) -> str:
        return self._start_operation(OperationType.REFRESH, "refresh", name)

    def check_updates_async(self, name: str) -> str:
        return self._start_operation(
            OperationType.CHECK_UPDATES, "check_updates", name
        )

    def pull_async(self, name: str) -> str:
        return self._start_operation(OperationType.PULL, "pull", name)

    def diff_async(self, name: str, entry: WorkingTreeEntry | str) -> str:
        return self._start_operation(OperationType.DIFF, "diff", name, entry)

    def check_changes_async(self, name: str) -> str:
        """
        Check for uncommitted changes; the result data is a
        ``(has_changes, pending_files)`` tuple.
        """
        return self._start_operation(
            OperationType.CHECK_CHANGES, "check_changes", name
        )

    def commit_push_async(self, name: str, message: str) -> str:
        return self._start_operation(
            OperationType.COMMIT_PUSH, "commit_push", name, message
        )

    def cancel_operation(self, operation_id: str) -> bool:
        """
        Cancel an active operation.

        Args:
            operation_id: ID of the operation to cancel

        Returns:
            bool: True if operation was found and cancelled
        """
        if operation_id not in self._active_operations:
            return False

        thread, worker = self._active_operations.pop(operation_id)
        worker.cancel()
        self._operation_types.pop(operation_id, None)
        thread.quit()
        thread.wait()

        logger.info(f"Cancelled operation: {operation_id}")
        return True

    def cancel_all_operations(self):
        for operation_id in list(self._active_operations.keys()):
            self.cancel_operation(operation_id)

        logger.info("Cancelled all active operations")

    def get_active_operations(self) -> list[str]:
        return list(self._active_operations.keys())

    def is_operation_active(self, operation_id: str) -> bool:
        return operation_id in self._active_operations

    def has_active_operations(self, exclude: OperationType | None = None) -> bool:
        """
        Whether any operation is in flight.

        Args:
            exclude: Operation type to ignore, e.g. searches for the busy state
        """
        return any(
            self._operation_types.get(operation_id) != exclude
            for operation_id in self._active_operations
        )

    def shutdown(self):
        """Shutdown the service and clean up all operations."""
        self.cancel_all_operations()
        logger.info("AsyncRepoService shutdown complete")
