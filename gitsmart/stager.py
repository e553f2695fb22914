"""
Smart staging — stages every working-tree change except added lines that
match the exclusion rules.

Files are processed one at a time; the index is a single shared resource
and patches are never applied concurrently.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .diff.hunk_header import StructuralParseError
from .diff.patch_filter import PatchFilter
from .diff.rules import ExclusionRuleSet
from .git_utils import GitError, GitRepository, WorkingTreeChange

logger = logging.getLogger(__name__)

ACTION_PATCHED = "patched"      # filtered patch applied to the index
ACTION_ADDED = "added"          # whole file staged
ACTION_SKIPPED = "skipped"      # nothing left to stage
ACTION_FAILED = "failed"


@dataclass
class FileStageOutcome:
    path: str
    action: str
    lines_removed: int = 0
    detail: str = ""
    patch: str = ""


@dataclass
class StageResult:
    outcomes: list[FileStageOutcome] = field(default_factory=list)

    def _paths(self, *actions: str) -> list[str]:
        return [o.path for o in self.outcomes if o.action in actions]

    @property
    def staged(self) -> list[str]:
        return self._paths(ACTION_PATCHED, ACTION_ADDED)

    @property
    def skipped(self) -> list[str]:
        return self._paths(ACTION_SKIPPED)

    @property
    def failed(self) -> list[str]:
        return self._paths(ACTION_FAILED)

    @property
    def lines_removed(self) -> int:
        return sum(o.lines_removed for o in self.outcomes)


class SmartStager:
    """Stage working-tree changes through the patch filter.

    With ``dry_run=True`` nothing is written to the index; each outcome
    carries the patch that would have been applied.
    """

    def __init__(self, repo: GitRepository, rules: ExclusionRuleSet,
                 dry_run: bool = False):
        self.repo = repo
        self.patch_filter = PatchFilter(rules)
        self.dry_run = dry_run

    def stage_all(self) -> StageResult:
        result = StageResult()
        for change in self.repo.working_tree_changes():
            outcome = self.stage_change(change)
            logger.info("%s: %s %s", outcome.path, outcome.action, outcome.detail)
            result.outcomes.append(outcome)
        return result

    def stage_change(self, change: WorkingTreeChange) -> FileStageOutcome:
        try:
            return self._stage(change)
        except (StructuralParseError, GitError) as e:
            return FileStageOutcome(change.path, ACTION_FAILED, detail=str(e))

    def _stage(self, change: WorkingTreeChange) -> FileStageOutcome:
        if change.is_deleted:
            self._add(change.path)
            return FileStageOutcome(change.path, ACTION_ADDED, detail="deleted")

        diff = self.repo.diff_file(change)
        if not diff.strip():
            if change.is_untracked:
                # empty new file
                self._add(change.path)
                return FileStageOutcome(change.path, ACTION_ADDED, detail="empty file")
            return FileStageOutcome(change.path, ACTION_SKIPPED, detail="no changes")

        filtered = self.patch_filter.run(diff)
        if not filtered.changed:
            # includes binary files, empty new files and mode-only changes
            self._add(change.path)
            return FileStageOutcome(change.path, ACTION_ADDED, patch=diff)

        if not filtered.has_hunks:
            return FileStageOutcome(
                change.path, ACTION_SKIPPED,
                lines_removed=filtered.lines_removed,
                detail="every change was filtered",
            )

        if not self.dry_run:
            self.repo.apply_to_index(filtered.text)
        return FileStageOutcome(
            change.path, ACTION_PATCHED,
            lines_removed=filtered.lines_removed,
            detail=f"{filtered.lines_removed} line(s) filtered",
            patch=filtered.text,
        )

    def _add(self, path: str) -> None:
        if not self.dry_run:
            self.repo.add([path])
