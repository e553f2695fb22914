"""Tests for SmartStager against an in-memory repository."""

import pytest

from gitsmart.diff.rules import ExclusionRuleSet
from gitsmart.git_utils import GitError, WorkingTreeChange
from gitsmart.stager import (
    ACTION_ADDED, ACTION_FAILED, ACTION_PATCHED, ACTION_SKIPPED, SmartStager,
)

FILTERED_DIFF = """\
diff --git a/app.js b/app.js
index 1111111..2222222 100644
--- a/app.js
+++ b/app.js
@@ -1,2 +1,4 @@
 start();
+console.log('debug');
+run();
 stop();
"""

CLEAN_DIFF = """\
diff --git a/util.py b/util.py
index 1111111..2222222 100644
--- a/util.py
+++ b/util.py
@@ -1 +1 @@
-x = 1
+x = 2
"""

ONLY_DEBUG_DIFF = """\
diff --git a/debug.js b/debug.js
new file mode 100644
index 0000000..3333333
--- /dev/null
+++ b/debug.js
@@ -0,0 +1 @@
+console.log('only');
"""

BINARY_DIFF = """\
diff --git a/logo.png b/logo.png
index 1a2b3c4..5d6e7f8 100644
Binary files a/logo.png and b/logo.png differ
"""


class FakeRepo:
    def __init__(self, diffs, statuses=None):
        self.diffs = diffs
        self.statuses = statuses or {}
        self.applied: list[str] = []
        self.added: list[str] = []

    def working_tree_changes(self):
        return [WorkingTreeChange(path, self.statuses.get(path, " M"))
                for path in self.diffs]

    def diff_file(self, change):
        diff = self.diffs[change.path]
        if isinstance(diff, Exception):
            raise diff
        return diff

    def apply_to_index(self, patch):
        self.applied.append(patch)

    def add(self, paths):
        self.added.extend(paths)


@pytest.fixture
def rules():
    return ExclusionRuleSet.default()


def test_filtered_file_is_patched(rules):
    repo = FakeRepo({"app.js": FILTERED_DIFF})

    result = SmartStager(repo, rules).stage_all()

    outcome = result.outcomes[0]
    assert outcome.action == ACTION_PATCHED
    assert outcome.lines_removed == 1
    assert repo.applied == [outcome.patch]
    assert "@@ -1,2 +1,3 @@" in outcome.patch
    assert "console.log" not in outcome.patch
    assert repo.added == []


def test_untouched_file_is_added_whole(rules):
    repo = FakeRepo({"util.py": CLEAN_DIFF})

    result = SmartStager(repo, rules).stage_all()

    assert result.outcomes[0].action == ACTION_ADDED
    assert repo.added == ["util.py"]
    assert repo.applied == []


def test_binary_file_is_added_whole(rules):
    repo = FakeRepo({"logo.png": BINARY_DIFF})

    SmartStager(repo, rules).stage_all()

    assert repo.added == ["logo.png"]


def test_fully_filtered_file_is_skipped(rules):
    repo = FakeRepo({"debug.js": ONLY_DEBUG_DIFF}, statuses={"debug.js": "??"})

    result = SmartStager(repo, rules).stage_all()

    assert result.skipped == ["debug.js"]
    assert result.lines_removed == 1
    assert repo.added == [] and repo.applied == []


def test_deleted_file_is_added(rules):
    repo = FakeRepo({"gone.txt": ""}, statuses={"gone.txt": " D"})

    result = SmartStager(repo, rules).stage_all()

    assert result.outcomes[0].detail == "deleted"
    assert repo.added == ["gone.txt"]


def test_empty_untracked_file_is_added(rules):
    repo = FakeRepo({"empty.txt": ""}, statuses={"empty.txt": "??"})

    result = SmartStager(repo, rules).stage_all()

    assert result.staged == ["empty.txt"]
    assert repo.added == ["empty.txt"]


def test_empty_tracked_diff_is_skipped(rules):
    repo = FakeRepo({"same.txt": ""})

    assert SmartStager(repo, rules).stage_all().skipped == ["same.txt"]


def test_failure_is_isolated_to_one_file(rules):
    repo = FakeRepo({
        "broken.py": GitError("git diff failed: boom"),
        "util.py": CLEAN_DIFF,
    })

    result = SmartStager(repo, rules).stage_all()

    assert result.failed == ["broken.py"]
    assert result.staged == ["util.py"]
    assert "boom" in result.outcomes[0].detail


def test_malformed_patch_fails_the_file(rules):
    repo = FakeRepo({"app.js": FILTERED_DIFF.replace("@@ -1,2 +1,4 @@", "@@ bad @@")})

    result = SmartStager(repo, rules).stage_all()

    assert result.outcomes[0].action == ACTION_FAILED
    assert repo.applied == []


def test_dry_run_touches_nothing(rules):
    repo = FakeRepo({"app.js": FILTERED_DIFF, "util.py": CLEAN_DIFF})

    result = SmartStager(repo, rules, dry_run=True).stage_all()

    assert [o.action for o in result.outcomes] == [ACTION_PATCHED, ACTION_ADDED]
    assert result.outcomes[0].patch
    assert repo.applied == [] and repo.added == []


def test_no_rules_stages_everything_whole():
    repo = FakeRepo({"app.js": FILTERED_DIFF})

    result = SmartStager(repo, ExclusionRuleSet()).stage_all()

    assert result.outcomes[0].action == ACTION_ADDED
    assert result.outcomes[0].action != ACTION_SKIPPED
