"""
gitsmart — filtered staging and AI-assisted commits (GitSmart).

Public API for library usage::

    from gitsmart import ExclusionRuleSet, filter_patch, structure_diff

    rules = ExclusionRuleSet.from_patterns([r"^\\s*console\\.log\\("])
    patch = filter_patch(diff_text, rules)
    files = structure_diff(staged_diff_text)
"""

from .diff import (
    ExclusionRuleSet, InvalidRuleError, StructuralParseError,
    PatchFilter, FilteredPatch, filter_patch,
    DiffStructurer, FileDiff, Hunk, DiffEntry, ChangeType, EntryKind,
    structure_diff,
)

__all__ = [
    "ExclusionRuleSet", "InvalidRuleError", "StructuralParseError",
    "PatchFilter", "FilteredPatch", "filter_patch",
    "DiffStructurer", "FileDiff", "Hunk", "DiffEntry", "ChangeType", "EntryKind",
    "structure_diff",
]
