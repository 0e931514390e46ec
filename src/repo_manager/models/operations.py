"""Outcome models for multi-step repository actions."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .repository import RepositoryEntry


class CloneStatus(Enum):
    """Result of cloning a single repository in a batch."""

    CLONED = "cloned"
    SKIPPED_EXISTS = "skipped_exists"
    SKIPPED_NO_URL = "skipped_no_url"
    FAILED = "failed"


@dataclass
class CloneOutcome:
    """
    Attributes:
        entry: Repository that was processed
        status: What happened to it
        target: Local directory the clone was (or would have been) written to
        message: Process output or the reason it was skipped
    """

    entry: RepositoryEntry
    status: CloneStatus
    target: Path | None = None
    message: str = ""

    @property
    def is_failure(self) -> bool:
        return self.status == CloneStatus.FAILED

    def get_log_text(self) -> str:
        if self.status == CloneStatus.SKIPPED_NO_URL:
            return f"No SSH URL for {self.entry.name}"
        if self.status == CloneStatus.SKIPPED_EXISTS:
            return f"Already exists: {self.target}"
        if self.status == CloneStatus.CLONED:
            return f"Cloned {self.entry.name} into {self.target}"
        return f"Clone failed for {self.entry.name}: {self.message}"


class CommitPushStatus(Enum):
    """Overall result of a commit and push run."""

    NOTHING_TO_COMMIT = "nothing_to_commit"
    NOTHING_COMMITTED = "nothing_committed"
    COMMITTED_AND_PUSHED = "committed_and_pushed"
    FAILED = "failed"


@dataclass
class CommitPushOutcome:
    """
    Attributes:
        status: Overall result
        steps_run: Names of the git steps that were executed, in order
        failed_step: Step that stopped the sequence, if any
        output: Combined output of the last step that ran
    """

    status: CommitPushStatus
    steps_run: list[str] = field(default_factory=list)
    failed_step: str | None = None
    output: str = ""

    @property
    def succeeded(self) -> bool:
        return self.status != CommitPushStatus.FAILED

    def get_display_text(self) -> str:
        if self.status == CommitPushStatus.NOTHING_TO_COMMIT:
            return "Nothing to commit"
        if self.status == CommitPushStatus.FAILED:
            return f"'{self.failed_step}' failed:\n{self.output}"
        return self.output
