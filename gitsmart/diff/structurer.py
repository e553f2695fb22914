"""
Diff structurer — turns a multi-file unified diff into file/hunk/entry
records for rendering and statistics.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum

from .hunk_header import HunkHeader, parse_hunk_header
from .lines import LineKind, classify_line, split_lines, strip_prefix

logger = logging.getLogger(__name__)

# Split before every "diff --git" that starts a line
_FILE_SPLIT_PATTERN = re.compile(r"^(?=diff --git )", re.MULTILINE)
_GIT_HEADER_PATTERN = re.compile(r"^diff --git a/(.+?) b/(.+)$")
# git ends these lines with a tab when the path contains a space
_NEW_PATH_PATTERN = re.compile(r"^\+\+\+ b/(.+?)(?:\t.*)?$")
_OLD_PATH_PATTERN = re.compile(r"^--- a/(.+?)(?:\t.*)?$")
_RENAME_FROM_PATTERN = re.compile(r"^rename from (.+)$")

_BINARY_MARKERS = ("Binary files", "GIT binary patch")


class ChangeType(Enum):
    MODIFIED = "modified"
    ADDED = "added"
    DELETED = "deleted"


class EntryKind(Enum):
    ADDED = "added"
    REMOVED = "removed"
    CONTEXT = "context"


_ENTRY_KINDS = {
    LineKind.ADDED: EntryKind.ADDED,
    LineKind.REMOVED: EntryKind.REMOVED,
    LineKind.CONTEXT: EntryKind.CONTEXT,
}


@dataclass(frozen=True)
class DiffEntry:
    """One classified body line of a hunk."""
    kind: EntryKind
    content: str           # line text without its +/-/space prefix
    line_number: int       # position in the resulting file

    @property
    def prefix(self) -> str:
        if self.kind is EntryKind.ADDED:
            return "+"
        if self.kind is EntryKind.REMOVED:
            return "-"
        return " "


@dataclass(frozen=True)
class Hunk:
    header: HunkHeader
    header_text: str
    entries: tuple[DiffEntry, ...] = ()

    @property
    def additions(self) -> int:
        return sum(1 for e in self.entries if e.kind is EntryKind.ADDED)

    @property
    def deletions(self) -> int:
        return sum(1 for e in self.entries if e.kind is EntryKind.REMOVED)

    @property
    def context_lines(self) -> int:
        return sum(1 for e in self.entries if e.kind is EntryKind.CONTEXT)


@dataclass(frozen=True)
class FileDiff:
    """All hunks for a single file."""
    file_path: str
    change_type: ChangeType = ChangeType.MODIFIED
    hunks: tuple[Hunk, ...] = ()
    is_binary: bool = False
    old_path: str | None = None

    @property
    def additions(self) -> int:
        return sum(h.additions for h in self.hunks)

    @property
    def deletions(self) -> int:
        return sum(h.deletions for h in self.hunks)


@dataclass
class _HunkBuilder:
    header: HunkHeader
    header_text: str
    next_line: int
    entries: list[DiffEntry] = field(default_factory=list)

    def add(self, kind: LineKind, line: str) -> None:
        entry_kind = _ENTRY_KINDS[kind]
        self.entries.append(DiffEntry(
            kind=entry_kind,
            content=strip_prefix(line).rstrip("\r"),
            line_number=self.next_line,
        ))
        # removed lines take no position in the resulting file
        if entry_kind is not EntryKind.REMOVED:
            self.next_line += 1

    def build(self) -> Hunk:
        return Hunk(self.header, self.header_text, tuple(self.entries))


class DiffStructurer:
    """Parse unified diff text into :class:`FileDiff` records."""

    def structure(self, diff_text: str) -> list[FileDiff]:
        """Parse a (possibly multi-file) diff.

        Returns an empty list for empty or whitespace-only input.
        Raises :class:`~gitsmart.diff.hunk_header.StructuralParseError`
        on a malformed hunk header.
        """
        if not diff_text.strip():
            return []

        files: list[FileDiff] = []
        for segment in split_file_segments(diff_text):
            file_diff = self.structure_file(segment)
            if file_diff is not None:
                files.append(file_diff)

        logger.debug("Structured %d file diff(s)", len(files))
        return files

    def structure_file(self, segment: str) -> FileDiff | None:
        """Parse one file segment; ``None`` if it names no file."""
        lines, _ = split_lines(segment)
        header_lines = _leading_header_lines(lines)

        file_path, old_path = _extract_paths(header_lines)
        if file_path is None:
            logger.warning("Skipping diff segment without a file path")
            return None

        header_text = "\n".join(header_lines)
        change_type = _classify_change(header_text)
        if change_type is ChangeType.ADDED:
            old_path = None

        if any(marker in header_text for marker in _BINARY_MARKERS):
            return FileDiff(
                file_path=file_path,
                change_type=change_type,
                is_binary=True,
                old_path=old_path,
            )

        hunks = self._parse_hunks(lines)
        return FileDiff(
            file_path=file_path,
            change_type=change_type,
            hunks=tuple(hunks),
            old_path=old_path,
        )

    @staticmethod
    def _parse_hunks(lines: list[str]) -> list[Hunk]:
        hunks: list[Hunk] = []
        current: _HunkBuilder | None = None

        for line_number, line in enumerate(lines, start=1):
            kind = classify_line(line, in_hunk=current is not None)

            if kind is LineKind.HUNK_HEADER:
                if current is not None:
                    hunks.append(current.build())
                header = parse_hunk_header(line, line_number)
                current = _HunkBuilder(header, line.rstrip("\r"),
                                       next_line=header.new_start)
            elif kind.is_body:
                current.add(kind, line)
            # file headers and "\ No newline" markers produce no entries

        if current is not None:
            hunks.append(current.build())
        return hunks


def split_file_segments(diff_text: str) -> list[str]:
    """Split a multi-file diff before each ``diff --git`` line.

    Text with no such marker is returned as a single segment.
    """
    return [s for s in _FILE_SPLIT_PATTERN.split(diff_text) if s.strip()]


def _leading_header_lines(lines: list[str]) -> list[str]:
    header: list[str] = []
    for line in lines:
        if line.startswith("@@"):
            break
        header.append(line)
    return header


def _extract_paths(header_lines: list[str]) -> tuple[str | None, str | None]:
    """Return ``(new_path, old_path)`` from a segment's header lines."""
    new_path = old_path = renamed_from = git_new = git_old = None
    for line in header_lines:
        line = line.rstrip("\r")
        new_match = _NEW_PATH_PATTERN.match(line)
        old_match = _OLD_PATH_PATTERN.match(line)
        rename_match = _RENAME_FROM_PATTERN.match(line)
        git_match = _GIT_HEADER_PATTERN.match(line)
        if new_match:
            new_path = new_match.group(1)
        elif old_match:
            old_path = old_match.group(1)
        elif rename_match:
            renamed_from = rename_match.group(1)
        elif git_match:
            git_old, git_new = git_match.group(1), git_match.group(2)

    file_path = new_path or git_new or old_path
    return file_path, renamed_from or old_path or git_old


def _classify_change(header_text: str) -> ChangeType:
    if "new file mode" in header_text:
        return ChangeType.ADDED
    if "deleted file mode" in header_text:
        return ChangeType.DELETED
    return ChangeType.MODIFIED


def structure_diff(diff_text: str) -> list[FileDiff]:
    """Shorthand for ``DiffStructurer().structure(diff_text)``."""
    return DiffStructurer().structure(diff_text)
