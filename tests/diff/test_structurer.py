"""Tests for the DiffStructurer."""

import pytest

from gitsmart.diff.hunk_header import StructuralParseError
from gitsmart.diff.structurer import (
    ChangeType, DiffStructurer, EntryKind, split_file_segments, structure_diff,
)


MULTI_FILE_DIFF = """\
diff --git a/src/app.js b/src/app.js
index 83db48f..bf269f4 100644
--- a/src/app.js
+++ b/src/app.js
@@ -10,3 +10,4 @@ function start() {
 const a = 1;
-const b = 2;
+const b = 3;
+const c = 4;
 run(a, b);
\\ No newline at end of file
diff --git a/README.md b/README.md
new file mode 100644
index 0000000..3b18e51
--- /dev/null
+++ b/README.md
@@ -0,0 +1,2 @@
+# Project
+diff --git is mentioned here
diff --git a/old.txt b/old.txt
deleted file mode 100644
index 3b18e51..0000000
--- a/old.txt
+++ /dev/null
@@ -1 +0,0 @@
-gone
"""


class TestStructure:
    def test_files_in_input_order(self):
        files = structure_diff(MULTI_FILE_DIFF)

        assert [f.file_path for f in files] == ["src/app.js", "README.md", "old.txt"]

    def test_change_types(self):
        files = structure_diff(MULTI_FILE_DIFF)

        assert [f.change_type for f in files] == [
            ChangeType.MODIFIED, ChangeType.ADDED, ChangeType.DELETED,
        ]

    def test_entries_classified_and_numbered(self):
        hunk = structure_diff(MULTI_FILE_DIFF)[0].hunks[0]

        assert [(e.kind, e.content, e.line_number) for e in hunk.entries] == [
            (EntryKind.CONTEXT, "const a = 1;", 10),
            (EntryKind.REMOVED, "const b = 2;", 11),
            (EntryKind.ADDED, "const b = 3;", 11),
            (EntryKind.ADDED, "const c = 4;", 12),
            (EntryKind.CONTEXT, "run(a, b);", 13),
        ]

    def test_no_newline_marker_not_an_entry(self):
        hunk = structure_diff(MULTI_FILE_DIFF)[0].hunks[0]

        assert all(not e.content.startswith(" No newline") for e in hunk.entries)
        assert len(hunk.entries) == 5

    def test_added_line_mentioning_diff_git_does_not_split(self):
        readme = structure_diff(MULTI_FILE_DIFF)[1]

        assert readme.additions == 2
        assert readme.hunks[0].entries[1].content == "diff --git is mentioned here"

    def test_stats(self):
        app, readme, old = structure_diff(MULTI_FILE_DIFF)

        assert (app.additions, app.deletions) == (2, 1)
        assert (readme.additions, readme.deletions) == (2, 0)
        assert (old.additions, old.deletions) == (0, 1)

    def test_deleted_file_path_and_numbering(self):
        old = structure_diff(MULTI_FILE_DIFF)[2]

        assert old.file_path == "old.txt"
        assert old.old_path == "old.txt"
        assert old.hunks[0].entries[0].line_number == 0

    def test_new_file_has_no_old_path(self):
        assert structure_diff(MULTI_FILE_DIFF)[1].old_path is None

    def test_multiple_hunks_keep_order(self):
        diff = """\
diff --git a/a.py b/a.py
--- a/a.py
+++ b/a.py
@@ -1,2 +1,2 @@
-x = 1
+x = 2
 y = 1
@@ -40,1 +40,2 @@
 z = 1
+w = 1
"""
        hunks = structure_diff(diff)[0].hunks

        assert [h.header.new_start for h in hunks] == [1, 40]
        assert hunks[1].entries[1].line_number == 41


class TestLineNumberingLaw:
    def test_removed_entry_shares_number_with_following_entry(self):
        for file_diff in structure_diff(MULTI_FILE_DIFF):
            for hunk in file_diff.hunks:
                entries = hunk.entries
                for current, following in zip(entries, entries[1:]):
                    if current.kind is EntryKind.REMOVED:
                        assert current.line_number == following.line_number

    def test_positioned_entries_strictly_increase(self):
        for file_diff in structure_diff(MULTI_FILE_DIFF):
            for hunk in file_diff.hunks:
                numbers = [e.line_number for e in hunk.entries
                           if e.kind is not EntryKind.REMOVED]
                assert numbers == sorted(set(numbers))


class TestSpecialSegments:
    def test_new_empty_file_without_hunks(self):
        diff = ("diff --git a/empty.txt b/empty.txt\n"
                "new file mode 100644\n"
                "index 0000000..e69de29\n")

        files = structure_diff(diff)

        assert len(files) == 1
        assert files[0].file_path == "empty.txt"
        assert files[0].change_type is ChangeType.ADDED
        assert files[0].hunks == ()

    def test_binary_file(self):
        diff = ("diff --git a/logo.png b/logo.png\n"
                "index 1a2b3c4..5d6e7f8 100644\n"
                "Binary files a/logo.png and b/logo.png differ\n")

        file_diff = structure_diff(diff)[0]

        assert file_diff.is_binary is True
        assert file_diff.hunks == ()
        assert file_diff.change_type is ChangeType.MODIFIED

    def test_git_binary_patch(self):
        diff = ("diff --git a/font.woff b/font.woff\n"
                "new file mode 100644\n"
                "index 0000000..1234567\n"
                "GIT binary patch\n"
                "literal 12\n"
                "TcmZ?wbhEHbWMp7rU|;|M0E7Sn\n")

        file_diff = structure_diff(diff)[0]

        assert file_diff.is_binary is True
        assert file_diff.change_type is ChangeType.ADDED

    def test_rename_keeps_old_path(self):
        diff = ("diff --git a/old_name.py b/new_name.py\n"
                "similarity index 100%\n"
                "rename from old_name.py\n"
                "rename to new_name.py\n")

        file_diff = structure_diff(diff)[0]

        assert file_diff.file_path == "new_name.py"
        assert file_diff.old_path == "old_name.py"

    def test_path_with_space_drops_trailing_tab(self):
        diff = ("diff --git a/my file.js b/my file.js\n"
                "index 1111111..2222222 100644\n"
                "--- a/my file.js\t\n"
                "+++ b/my file.js\t\n"
                "@@ -1 +1 @@\n"
                "-a\n"
                "+b\n")

        file_diff = structure_diff(diff)[0]

        assert file_diff.file_path == "my file.js"
        assert file_diff.old_path == "my file.js"

    def test_crlf_content_has_no_carriage_returns(self):
        diff = MULTI_FILE_DIFF.replace("\n", "\r\n")

        app = structure_diff(diff)[0]

        assert app.file_path == "src/app.js"
        assert app.hunks[0].header_text == "@@ -10,3 +10,4 @@ function start() {"
        assert [e.content for e in app.hunks[0].entries][:2] == [
            "const a = 1;", "const b = 2;",
        ]

    def test_plain_unified_diff_without_git_header(self):
        diff = "--- a/notes.txt\n+++ b/notes.txt\n@@ -1 +1 @@\n-a\n+b\n"

        files = structure_diff(diff)

        assert len(files) == 1
        assert files[0].file_path == "notes.txt"

    @pytest.mark.parametrize("text", ["", "  \n\t\n"])
    def test_empty_input(self, text):
        assert structure_diff(text) == []

    def test_malformed_hunk_header_raises(self):
        diff = "--- a/x\n+++ b/x\n@@ garbage @@\n+y\n"

        with pytest.raises(StructuralParseError):
            DiffStructurer().structure(diff)


class TestSplitFileSegments:
    def test_split_keeps_marker_line(self):
        segments = split_file_segments(MULTI_FILE_DIFF)

        assert len(segments) == 3
        assert all(s.startswith("diff --git a/") for s in segments)

    def test_marker_must_start_a_line(self):
        text = "diff --git a/x b/x\n+++ b/x\n@@ -0,0 +1 @@\n+ diff --git a/y b/y\n"

        assert len(split_file_segments(text)) == 1
