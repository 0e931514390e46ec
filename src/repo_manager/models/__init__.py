"""Data models for the GitHub Repository Manager application."""

from .config import AppConfig, UserPreferences
from .operations import CloneOutcome, CloneStatus, CommitPushOutcome, CommitPushStatus
from .repository import RepositoryEntry
from .working_tree import (
    DivergenceCount,
    DivergenceReport,
    DivergenceState,
    StatusLine,
    WorkingTreeEntry,
)

__all__ = [
    "AppConfig",
    "CloneOutcome",
    "CloneStatus",
    "CommitPushOutcome",
    "CommitPushStatus",
    "DivergenceCount",
    "DivergenceReport",
    "DivergenceState",
    "RepositoryEntry",
    "StatusLine",
    "UserPreferences",
    "WorkingTreeEntry",
]
