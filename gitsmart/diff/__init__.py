"""Unified-diff engine — line filtering for staging and structuring for review."""

from .hunk_header import (
    HunkHeader, StructuralParseError, parse_hunk_header, format_hunk_header,
)
from .lines import LineKind, classify_line
from .rules import ExclusionRuleSet, InvalidRuleError, DEFAULT_FILTER_PATTERNS
from .patch_filter import PatchFilter, FilteredPatch, filter_patch
from .structurer import (
    DiffStructurer, FileDiff, Hunk, DiffEntry, ChangeType, EntryKind,
    structure_diff,
)

__all__ = [
    "HunkHeader", "StructuralParseError", "parse_hunk_header", "format_hunk_header",
    "LineKind", "classify_line",
    "ExclusionRuleSet", "InvalidRuleError", "DEFAULT_FILTER_PATTERNS",
    "PatchFilter", "FilteredPatch", "filter_patch",
    "DiffStructurer", "FileDiff", "Hunk", "DiffEntry", "ChangeType", "EntryKind",
    "structure_diff",
]
