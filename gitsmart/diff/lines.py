"""
Line classifier — tags every unified-diff line with exactly one kind.
"""

from __future__ import annotations

from enum import Enum

_FILE_START = "diff --git "


class LineKind(Enum):
    FILE_HEADER = "file_header"
    HUNK_HEADER = "hunk_header"
    ADDED = "added"
    REMOVED = "removed"
    CONTEXT = "context"
    NO_NEWLINE = "no_newline"

    @property
    def is_body(self) -> bool:
        return self in (LineKind.ADDED, LineKind.REMOVED, LineKind.CONTEXT)


def classify_line(line: str, in_hunk: bool) -> LineKind:
    """Return the kind of *line*.

    Before the first hunk every line that is not ``@@`` is a file header
    (``diff``, ``index``, ``---``, ``+++`` and git's extended headers such
    as ``new file mode``).  Inside a hunk, ``---``/``+++`` are ordinary
    removed/added lines; only ``diff --git`` opens a new header block.
    """
    if line.startswith("@@"):
        return LineKind.HUNK_HEADER
    if not in_hunk:
        return LineKind.FILE_HEADER

    if line.startswith(_FILE_START):
        return LineKind.FILE_HEADER
    if line.startswith("+"):
        return LineKind.ADDED
    if line.startswith("-"):
        return LineKind.REMOVED
    if line.startswith("\\"):
        return LineKind.NO_NEWLINE
    # " " prefix, or an empty line left behind by whitespace-trimming tools
    return LineKind.CONTEXT


def strip_prefix(line: str) -> str:
    """Drop the one-character ``+``/``-``/space prefix of a body line."""
    return line[1:]


def split_lines(text: str) -> tuple[list[str], bool]:
    """Split diff *text* into lines on ``\\n``.

    Returns ``(lines, ends_with_newline)``.  A ``\\r`` before the newline
    stays on its line; in a CRLF file it is content that ``git apply``
    must see to match the index.
    """
    if not text:
        return [], False
    ends_with_newline = text.endswith("\n")
    if ends_with_newline:
        text = text[:-1]
    return text.split("\n"), ends_with_newline
