"""Tests for the review session (console and auto modes)."""

import pytest

from gitsmart.diff.structurer import structure_diff
from gitsmart.review import (
    ReviewSession, ReviewSessionClosed, file_diff_to_text, start_review,
)

DIFF = """\
diff --git a/a.py b/a.py
index 1111111..2222222 100644
--- a/a.py
+++ b/a.py
@@ -1,2 +1,2 @@
 import os
-x = 1
+x = 2
"""


def scripted(*answers):
    """Input function that replays *answers*, then raises EOFError."""
    remaining = list(answers)

    def _input(prompt=""):
        if not remaining:
            raise EOFError
        return remaining.pop(0)

    return _input


@pytest.fixture
def file_diffs():
    return structure_diff(DIFF)


class TestConsoleReview:
    def test_approve(self, file_diffs):
        session = start_review(file_diffs, "fix: x", mode="console",
                               input_fn=scripted("a"))

        decision = session.run()

        assert decision.approved is True
        assert decision.message == "fix: x"

    def test_edit_then_approve(self, file_diffs):
        answers = scripted("e", "feat: better message", "", "A")
        session = ReviewSession(file_diffs, "fix: x", mode="console", input_fn=answers)

        decision = session.run()

        assert decision.approved is True
        assert decision.message == "feat: better message"

    def test_multi_line_edit(self, file_diffs):
        answers = scripted("e", "feat: subject", "more detail", "", "a")
        session = ReviewSession(file_diffs, "fix: x", mode="console", input_fn=answers)

        decision = session.run()

        assert decision.approved is True
        assert decision.message == "feat: subject\nmore detail"

    def test_empty_edit_keeps_message(self, file_diffs):
        session = ReviewSession(file_diffs, "fix: x", mode="console",
                                input_fn=scripted("e", "", "a"))

        assert session.run().message == "fix: x"

    def test_reject(self, file_diffs):
        session = ReviewSession(file_diffs, "fix: x", mode="console",
                                input_fn=scripted("r"))

        assert session.run().approved is False

    def test_invalid_choice_reprompts(self, file_diffs, capsys):
        session = ReviewSession(file_diffs, "fix: x", mode="console",
                                input_fn=scripted("maybe", "a"))

        assert session.run().approved is True
        assert "Invalid choice" in capsys.readouterr().out

    def test_eof_declines(self, file_diffs):
        session = ReviewSession(file_diffs, "fix: x", mode="console",
                                input_fn=scripted())

        assert session.run().approved is False

    def test_diff_printed(self, file_diffs, capsys):
        ReviewSession(file_diffs, "fix: x", mode="console",
                      input_fn=scripted("a")).run()

        out = capsys.readouterr().out
        assert "Modified: a.py" in out
        assert "x = 2" in out


class TestSession:
    def test_auto_mode_approves(self, file_diffs):
        decision = ReviewSession(file_diffs, "fix: x", mode="auto").run()

        assert decision.approved is True
        assert decision.message == "fix: x"

    def test_closed_session_cannot_run(self, file_diffs):
        with start_review(file_diffs, "fix: x", mode="auto") as session:
            session.run()

        assert session.closed
        with pytest.raises(ReviewSessionClosed):
            session.run()

    def test_sessions_are_independent(self, file_diffs):
        first = start_review(file_diffs, "one", mode="auto")
        second = start_review(file_diffs, "two", mode="auto")
        first.close()

        assert second.run().message == "two"

    def test_unknown_mode(self, file_diffs):
        with pytest.raises(ValueError):
            ReviewSession(file_diffs, "m", mode="web")


def test_file_diff_to_text(file_diffs):
    assert file_diff_to_text(file_diffs[0]) == "@@ -1,2 +1,2 @@\n import os\n-x = 1\n+x = 2"
