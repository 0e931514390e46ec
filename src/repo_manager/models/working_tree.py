"""Working tree status and remote divergence data models."""

from dataclasses import dataclass
from enum import Enum

CLEAN_DISPLAY_TEXT = "Working tree clean"


@dataclass(frozen=True)
class StatusLine:
    """
    A single parsed ``git status --porcelain`` line.

    Attributes:
        index_status: Status character for the index (first column)
        worktree_status: Status character for the working tree (second column)
        path: Current path of the file (the destination of a rename)
        original_path: Source path of a rename or copy, if any
    """

    index_status: str
    worktree_status: str
    path: str
    original_path: str | None = None

    @property
    def status_code(self) -> str:
        return f"{self.index_status}{self.worktree_status}"

    @property
    def is_rename(self) -> bool:
        return self.original_path is not None


@dataclass(frozen=True)
class WorkingTreeEntry:
    """
    One displayable row of the working tree file list.

    A clean working tree is represented by a single sentinel entry created with
    ``WorkingTreeEntry.clean()`` so the list always has at least one row.
    """

    status_code: str = ""
    path: str = ""
    original_path: str | None = None
    raw: str = ""
    is_clean: bool = False

    @classmethod
    def clean(cls) -> "WorkingTreeEntry":
        """Create the sentinel for a working tree without changes."""
        return cls(raw=CLEAN_DISPLAY_TEXT, is_clean=True)

    @classmethod
    def from_status_line(cls, status_line: StatusLine, raw: str) -> "WorkingTreeEntry":
        return cls(
            status_code=status_line.status_code,
            path=status_line.path,
            original_path=status_line.original_path,
            raw=raw,
        )

    @property
    def is_parsed(self) -> bool:
        """Whether the entry came from a line matching the porcelain grammar."""
        return bool(self.status_code)

    def get_display_text(self) -> str:
        """Text shown in the file list."""
        return self.raw if self.raw else f"{self.status_code} {self.path}"


@dataclass(frozen=True)
class DivergenceCount:
    """Commits unique to the remote tracking branch (behind) and to HEAD (ahead)."""

    behind: int
    ahead: int

    def __post_init__(self):
        if self.behind < 0 or self.ahead < 0:
            raise ValueError("Divergence counts must be non-negative")

    @property
    def is_up_to_date(self) -> bool:
        return self.behind == 0 and self.ahead == 0

    def get_display_text(self) -> str:
        return f"Behind: {self.behind} Ahead: {self.ahead}"


class DivergenceState(Enum):
    """Whether the divergence against the remote could be determined."""

    KNOWN = "known"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class DivergenceReport:
    """
    Outcome of an update check.

    ``count`` is set only for the KNOWN state. For UNKNOWN, ``raw_text`` holds
    the fallback status dump shown to the user instead. ``fetch_output`` keeps
    whatever ``git fetch`` printed so it can be shown in the log pane.
    """

    state: DivergenceState
    branch: str = ""
    count: DivergenceCount | None = None
    raw_text: str = ""
    fetch_output: str = ""

    @classmethod
    def known(
        cls, branch: str, count: DivergenceCount, fetch_output: str = ""
    ) -> "DivergenceReport":
        return cls(
            state=DivergenceState.KNOWN,
            branch=branch,
            count=count,
            fetch_output=fetch_output,
        )

    @classmethod
    def unknown(
        cls, branch: str, raw_text: str, fetch_output: str = ""
    ) -> "DivergenceReport":
        return cls(
            state=DivergenceState.UNKNOWN,
            branch=branch,
            raw_text=raw_text,
            fetch_output=fetch_output,
        )

    def get_display_text(self) -> str:
        if self.state == DivergenceState.KNOWN and self.count is not None:
            return self.count.get_display_text()
        return self.raw_text or "No tracking information available"
