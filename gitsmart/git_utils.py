"""
Git integration — working-tree changes, per-file diffs, index patching and commit.
"""

import logging
import os
import subprocess
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class GitError(RuntimeError):
    """A git command exited with an unexpected status."""


@dataclass
class WorkingTreeChange:
    """One entry of ``git status --porcelain``."""
    path: str
    status: str            # porcelain XY code, e.g. " M", "??", " D"

    @property
    def is_untracked(self) -> bool:
        return self.status == "??"

    @property
    def is_deleted(self) -> bool:
        return self.status[1] == "D"


# non-UTF-8 bytes in file content survive a decode/encode round trip
_GIT_ERRORS = "surrogateescape"


def _run_git(args: list[str], cwd: str | None = None,
             input_text: str | None = None,
             ok_codes: tuple[int, ...] = (0,)) -> tuple[bool, str]:
    """Run a git command and return ``(success, output)``.

    On success *output* is stdout; on failure it is stderr (or stdout if
    stderr is empty).

    Output is decoded by hand rather than in text mode, which would turn
    ``\\r\\n`` into ``\\n`` and break patches of CRLF files.
    """
    data = input_text.encode("utf-8", _GIT_ERRORS) if input_text is not None else None
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            input=data,
            capture_output=True,
            check=False,
        )
    except OSError as e:
        return False, str(e)

    stdout = result.stdout.decode("utf-8", _GIT_ERRORS)
    if result.returncode in ok_codes:
        return True, stdout
    stderr = result.stderr.decode("utf-8", _GIT_ERRORS)
    return False, (stderr or stdout).strip()


class GitRepository:
    """Thin wrapper over the ``git`` CLI for one working tree."""

    def __init__(self, root: str = "."):
        self.root = root

    def _git(self, *args: str, input_text: str | None = None,
             ok_codes: tuple[int, ...] = (0,)) -> str:
        ok, output = _run_git(list(args), cwd=self.root,
                              input_text=input_text, ok_codes=ok_codes)
        if not ok:
            raise GitError(f"git {args[0]} failed: {output}")
        return output

    def is_git_repo(self) -> bool:
        """Return ``True`` if *root* is inside a git repository."""
        ok, _ = _run_git(["rev-parse", "--is-inside-work-tree"], cwd=self.root)
        return ok

    def working_tree_changes(self) -> list[WorkingTreeChange]:
        """Files with unstaged modifications, deletions, or untracked files."""
        output = self._git("status", "--porcelain=v1", "-z",
                           "--untracked-files=all")
        changes: list[WorkingTreeChange] = []
        entries = output.split("\0")
        i = 0
        while i < len(entries):
            entry = entries[i]
            i += 1
            if len(entry) < 4:
                continue
            status, path = entry[:2], entry[3:]
            if status[0] in "RC":
                # rename/copy entries carry the source path as the next field
                i += 1
            if status == "??" or status[1] != " ":
                changes.append(WorkingTreeChange(path=path, status=status))
        return changes

    def diff_file(self, change: WorkingTreeChange) -> str:
        """Diff of *change* against the index.

        Untracked files are diffed against ``/dev/null`` so the result is
        a new-file patch.
        """
        if change.is_untracked:
            # --no-index exits 1 when the files differ
            return self._git("diff", "--no-index", "--", os.devnull, change.path,
                             ok_codes=(0, 1))
        return self._git("diff", "--", change.path)

    def apply_to_index(self, patch: str) -> None:
        """Apply *patch* to the index only (``git apply --cached``)."""
        self._git("apply", "--cached", "--whitespace=nowarn", "-",
                  input_text=patch)

    def add(self, paths: list[str]) -> None:
        """Stage whole files (including deletions)."""
        self._git("add", "--all", "--", *paths)

    def staged_diff(self) -> str:
        return self._git("diff", "--cached")

    def commit(self, message: str) -> str:
        """Commit the index with *message*; returns git's output."""
        return self._git("commit", "-F", "-", input_text=message)
