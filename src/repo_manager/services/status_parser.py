"""Parsing of ``git status --porcelain`` output.

A porcelain line has the grammar ``XY<space><path-spec>`` where ``XY`` is the
two-character status code and ``<path-spec>`` is one of::

    path
    old -> new
    old<TAB>new

Paths containing special characters are C-quoted by git (``"a \\"b\\""``) and
are unquoted here.
"""

import logging
import re

from ..models.working_tree import StatusLine, WorkingTreeEntry
from ..utils.exceptions import StatusParseError

logger = logging.getLogger(__name__)

STATUS_CHARACTERS = frozenset(" MTADRCU?!")
RENAME_ARROW = " -> "

_OCTAL_ESCAPE = re.compile(r"[0-7]{3}")
_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    '"': '"',
    "\\": "\\",
}


def _unquote(value: str) -> str:
    """Undo git's C-style quoting of a path, if present."""
    if len(value) < 2 or not (value.startswith('"') and value.endswith('"')):
        return value

    inner = value[1:-1]
    decoded = bytearray()
    i = 0
    while i < len(inner):
        char = inner[i]
        if char != "\\" or i + 1 == len(inner):
            decoded.extend(char.encode("utf-8"))
            i += 1
            continue

        octal = inner[i + 1 : i + 4]
        if _OCTAL_ESCAPE.fullmatch(octal):
            decoded.append(int(octal, 8))
            i += 4
        else:
            escaped = inner[i + 1]
            decoded.extend(_ESCAPES.get(escaped, escaped).encode("utf-8"))
            i += 2

    return decoded.decode("utf-8", errors="replace")


def parse_status_line(line: str) -> StatusLine:
    """
    Parse one porcelain status line.

    Args:
        line: A single line of ``git status --porcelain`` output

    Returns:
        StatusLine: Status columns and path(s) of the entry

    Raises:
        StatusParseError: If the line does not match the porcelain grammar
    """
    text = line.rstrip("\r\n")

    if len(text) < 4:
        raise StatusParseError(f"Status line too short: {text!r}", line=line)

    code = text[:2]
    if any(char not in STATUS_CHARACTERS for char in code):
        raise StatusParseError(f"Invalid status code {code!r}", line=line)
    if text[2] != " ":
        raise StatusParseError(
            f"Missing separator after status code: {text!r}", line=line
        )

    path_spec = text[3:]
    original_path = None
    if "\t" in path_spec:
        original_path, path_spec = path_spec.split("\t", 1)
    elif RENAME_ARROW in path_spec:
        original_path, path_spec = path_spec.split(RENAME_ARROW, 1)

    path = _unquote(path_spec.strip())
    if not path:
        raise StatusParseError(f"Status line has no path: {text!r}", line=line)

    if original_path is not None:
        original_path = _unquote(original_path.strip()) or None

    return StatusLine(
        index_status=code[0],
        worktree_status=code[1],
        path=path,
        original_path=original_path,
    )


def extract_diff_path(line: str) -> str:
    """
    Get the path to pass to ``git diff`` for a file list entry.

    A tab marks a two-path entry and the part after the first tab wins;
    anything else goes through the porcelain grammar.

    Raises:
        StatusParseError: If no path can be extracted
    """
    if "\t" in line:
        path = _unquote(line.split("\t", 1)[1].strip())
        if path:
            return path
    return parse_status_line(line).path


def parse_porcelain(text: str) -> list[WorkingTreeEntry]:
    """
    Turn porcelain output into displayable file list entries.

    Every non-empty line yields exactly one entry, in order. Lines that do not
    match the grammar are kept as unparsed entries. Output without any change
    lines yields a single clean sentinel.

    Args:
        text: Raw ``git status --porcelain`` output

    Returns:
        List[WorkingTreeEntry]: At least one entry
    """
    entries = []

    for line in text.splitlines():
        if not line.strip():
            continue

        try:
            entries.append(
                WorkingTreeEntry.from_status_line(parse_status_line(line), raw=line)
            )
        except StatusParseError as e:
            logger.warning(f"Keeping unparsed status line: {e.message}")
            entries.append(WorkingTreeEntry(path=line.strip(), raw=line))

    if not entries:
        return [WorkingTreeEntry.clean()]

    return entries
