"""
Hunk-header codec — the one place that reads and writes ``@@ ... @@`` lines.

Both the patch filter and the diff structurer go through this module so
that what gets staged and what gets displayed agree on every count.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace

# @@ -oldStart[,oldCount] +newStart[,newCount] @@[ section]
_HUNK_HEADER_PATTERN = re.compile(
    r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@(.*)$"
)


class StructuralParseError(ValueError):
    """Raised when a diff line cannot be parsed where structure is required."""

    def __init__(self, line: str, line_number: int | None = None,
                 reason: str = "malformed hunk header"):
        self.line = line
        self.line_number = line_number
        self.reason = reason
        where = f" at line {line_number}" if line_number is not None else ""
        super().__init__(f"{reason}{where}: {line!r}")


@dataclass(frozen=True)
class HunkHeader:
    """The four counts of a unified-diff hunk header."""
    old_start: int
    old_count: int
    new_start: int
    new_count: int
    section: str = ""      # text after the closing @@, e.g. " def foo():"

    def with_new_count(self, new_count: int) -> "HunkHeader":
        return replace(self, new_count=new_count)

    def format(self) -> str:
        return format_hunk_header(self)


def _format_range(start: int, count: int) -> str:
    # git omits the count when it is exactly one
    if count == 1:
        return str(start)
    return f"{start},{count}"


def parse_hunk_header(line: str, line_number: int | None = None) -> HunkHeader:
    """Parse a ``@@ -l,s +l,s @@`` line.

    Missing counts default to 1, following the unified-diff convention.
    Raises :class:`StructuralParseError` if *line* is not a hunk header.
    """
    match = _HUNK_HEADER_PATTERN.match(line.rstrip("\r"))
    if not match:
        raise StructuralParseError(line, line_number)

    old_start, old_count, new_start, new_count, section = match.groups()
    return HunkHeader(
        old_start=int(old_start),
        old_count=int(old_count) if old_count is not None else 1,
        new_start=int(new_start),
        new_count=int(new_count) if new_count is not None else 1,
        section=section,
    )


def format_hunk_header(header: HunkHeader) -> str:
    """Render *header* back into its canonical ``@@`` line."""
    old = _format_range(header.old_start, header.old_count)
    new = _format_range(header.new_start, header.new_count)
    return f"@@ -{old} +{new} @@{header.section}"
