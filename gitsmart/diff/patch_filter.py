"""
Patch filter — drops excluded added lines from a unified diff and rewrites
hunk headers so the result can still be applied to the index.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from .hunk_header import HunkHeader, parse_hunk_header
from .lines import LineKind, classify_line, split_lines, strip_prefix
from .rules import ExclusionRuleSet

logger = logging.getLogger(__name__)


class _State(Enum):
    BEFORE_FIRST_HUNK = "before_first_hunk"
    ACCUMULATING_HUNK = "accumulating_hunk"
    END = "end"


@dataclass
class FilteredPatch:
    """Result of one filter pass."""
    text: str
    lines_removed: int = 0
    hunks_kept: int = 0
    hunks_dropped: int = 0

    @property
    def changed(self) -> bool:
        return self.lines_removed > 0

    @property
    def has_hunks(self) -> bool:
        return self.hunks_kept > 0


@dataclass
class _PendingHunk:
    """Body lines collected since the last ``@@`` line."""
    header_line: str
    header: HunkHeader
    body: list[str] = field(default_factory=list)
    skipped: int = 0
    body_entries: int = 0      # kept added/removed/context lines
    last_dropped: bool = False


def _finalize(pending: _PendingHunk) -> list[str] | None:
    """Turn a pending hunk into output lines, or ``None`` to drop it.

    ``old_start``, ``old_count`` and ``new_start`` never change; the new
    side loses exactly the lines that were skipped.
    """
    if pending.body_entries == 0:
        return None
    if pending.skipped == 0:
        header_line = pending.header_line
    else:
        new_count = pending.header.new_count - pending.skipped
        header_line = pending.header.with_new_count(new_count).format()
        if pending.header_line.endswith("\r"):
            header_line += "\r"
    return [header_line, *pending.body]


class PatchFilter:
    """Filter added lines out of a single-file unified diff."""

    def __init__(self, rules: ExclusionRuleSet):
        self.rules = rules

    def filter(self, diff_text: str) -> str:
        """Return *diff_text* with excluded added lines removed."""
        return self.run(diff_text).text

    def run(self, diff_text: str) -> FilteredPatch:
        """Filter *diff_text* and report what was removed.

        Raises :class:`~gitsmart.diff.hunk_header.StructuralParseError`
        if a ``@@`` line cannot be parsed; a half-corrected patch is
        never returned.
        """
        if not diff_text.strip():
            return FilteredPatch(text="")

        lines, ends_with_newline = split_lines(diff_text)
        output: list[str] = []
        result = FilteredPatch(text="")
        state = _State.BEFORE_FIRST_HUNK
        pending: _PendingHunk | None = None

        def flush() -> None:
            if pending is None:
                return
            finalized = _finalize(pending)
            if finalized is None:
                result.hunks_dropped += 1
                logger.debug("Dropping emptied hunk %s", pending.header_line)
                return
            result.hunks_kept += 1
            output.extend(finalized)

        for line_number, line in enumerate(lines, start=1):
            kind = classify_line(line, in_hunk=state is _State.ACCUMULATING_HUNK)

            if kind is LineKind.FILE_HEADER:
                flush()
                pending = None
                state = _State.BEFORE_FIRST_HUNK
                output.append(line)
                continue

            if kind is LineKind.HUNK_HEADER:
                flush()
                header = parse_hunk_header(line, line_number)
                pending = _PendingHunk(header_line=line, header=header)
                state = _State.ACCUMULATING_HUNK
                continue

            if kind is LineKind.NO_NEWLINE:
                # the marker belongs to the line right above it
                if not pending.last_dropped:
                    pending.body.append(line)
                continue

            if kind is LineKind.ADDED and self.rules.matches(strip_prefix(line).strip()):
                pending.skipped += 1
                pending.last_dropped = True
                result.lines_removed += 1
                continue

            pending.body.append(line)
            pending.body_entries += 1
            pending.last_dropped = False

        flush()
        state = _State.END

        text = "\n".join(output)
        if output and ends_with_newline:
            text += "\n"
        result.text = text

        if result.lines_removed:
            logger.info(
                "Filtered %d line(s); %d hunk(s) kept, %d dropped",
                result.lines_removed, result.hunks_kept, result.hunks_dropped,
            )
        return result


def filter_patch(diff_text: str, rules: ExclusionRuleSet) -> str:
    """Shorthand for ``PatchFilter(rules).filter(diff_text)``."""
    return PatchFilter(rules).filter(diff_text)
