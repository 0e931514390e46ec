"""Service layer for business logic and operations."""

from .async_service import AsyncRepoService, OperationResult, OperationType
from .config_manager import ConfigManager
from .git_service import GitService
from .local_repository_service import LocalRepositoryService
from .process_runner import ProcessRunner
from .repository_source import (
    CliRepositorySource,
    RestRepositorySource,
    create_repository_source,
)

__all__ = [
    "AsyncRepoService",
    "CliRepositorySource",
    "ConfigManager",
    "GitService",
    "LocalRepositoryService",
    "OperationResult",
    "OperationType",
    "ProcessRunner",
    "RestRepositorySource",
    "create_repository_source",
]
