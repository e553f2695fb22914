"""
Review — shows the staged file diffs with the proposed commit message and
waits for the user to approve (optionally editing the message) or decline.

A review is an explicit :class:`ReviewSession` returned by
:func:`start_review`; callers own it and close it when done.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from .cli_display import format_colored_diff, log
from .diff.structurer import FileDiff
from .report import change_type_label, format_diff_stats

REVIEW_MODES = ("tui", "console", "auto")


@dataclass
class ReviewDecision:
    approved: bool
    message: str


class ReviewSessionClosed(RuntimeError):
    """Raised when a closed review session is used again."""


def file_diff_to_text(file_diff: FileDiff) -> str:
    """Render a structured file diff back into unified-diff body text."""
    if file_diff.is_binary:
        return "Binary file not shown"
    lines: list[str] = []
    for hunk in file_diff.hunks:
        lines.append(hunk.header_text)
        for entry in hunk.entries:
            lines.append(f"{entry.prefix}{entry.content}")
    return "\n".join(lines)


def _file_title(file_diff: FileDiff) -> str:
    stats = format_diff_stats(file_diff)
    title = f"{change_type_label(file_diff.change_type)} {file_diff.file_path}"
    return f"{title}  {stats}" if stats else title


def _format_rich_diff(diff_text: str) -> str:
    """Convert unified diff text to Rich markup for Textual display."""
    markup_lines: list[str] = []
    for line in diff_text.splitlines():
        # Escape Rich markup characters in the line content
        escaped = line.replace("[", "\\[")
        if line.startswith("@@"):
            markup_lines.append(f"[cyan]{escaped}[/cyan]")
        elif line.startswith("+"):
            markup_lines.append(f"[green]{escaped}[/green]")
        elif line.startswith("-"):
            markup_lines.append(f"[red]{escaped}[/red]")
        else:
            markup_lines.append(escaped)
    return "\n".join(markup_lines)


class ReviewSession:
    """One review of staged changes.

    ``run()`` blocks until the user decides; ``close()`` releases the
    session, after which it cannot be run again.
    """

    def __init__(self, file_diffs: list[FileDiff], commit_message: str,
                 mode: str = "tui",
                 input_fn: Callable[[str], str] = input):
        if mode not in REVIEW_MODES:
            raise ValueError(f"Unknown review mode: {mode}")
        self.file_diffs = list(file_diffs)
        self.commit_message = commit_message
        self.mode = mode
        self.decision: ReviewDecision | None = None
        self._input = input_fn
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def run(self) -> ReviewDecision:
        if self._closed:
            raise ReviewSessionClosed("Review session is closed")

        if self.mode == "auto":
            log.info(f"[Review] Auto-approving {len(self.file_diffs)} file(s)")
            self.decision = ReviewDecision(True, self.commit_message)
        elif self.mode == "console":
            self.decision = self._console_review()
        else:
            self.decision = self._textual_review()

        log.info(f"[Review] approved={self.decision.approved}")
        return self.decision

    def close(self) -> None:
        self._closed = True

    def __enter__(self) -> "ReviewSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ── Console ──

    def _console_review(self) -> ReviewDecision:
        print("\n" + "=" * 60)
        print("  CHANGES TO BE COMMITTED")
        print("=" * 60)

        for file_diff in self.file_diffs:
            print(f"\n{'─' * 60}")
            print(f"  {_file_title(file_diff)}")
            print(format_colored_diff(file_diff_to_text(file_diff)))

        message = self.commit_message
        while True:
            print("\n" + "=" * 60)
            print("  COMMIT MESSAGE")
            print("=" * 60)
            print(message)
            print("\n  [A]pprove  |  [E]dit message  |  [R]eject")
            try:
                choice = self._input("  Your choice: ").strip().lower()
            except (EOFError, KeyboardInterrupt):
                return ReviewDecision(False, message)

            if choice in ("a", "approve"):
                return ReviewDecision(True, message)
            elif choice in ("r", "reject"):
                return ReviewDecision(False, message)
            elif choice in ("e", "edit"):
                message = self._read_message() or message
            else:
                print("  Invalid choice. Use A, E or R.")

    def _read_message(self) -> str:
        """Read a multi-line message, terminated by an empty line."""
        print("  Enter the new message (empty line to finish):")
        lines: list[str] = []
        while True:
            try:
                line = self._input("  > ")
            except (EOFError, KeyboardInterrupt):
                break
            if not line.strip():
                break
            lines.append(line)
        return "\n".join(lines).strip()

    # ── Textual ──

    def _textual_review(self) -> ReviewDecision:
        """Launch a Textual app to display diffs and get approval."""
        from textual.app import App, ComposeResult
        from textual.binding import Binding
        from textual.containers import Horizontal, VerticalScroll
        from textual.widgets import Button, Footer, Static, TextArea

        file_diffs = self.file_diffs

        class CommitReviewApp(App):
            """Interactive review with an editable commit message."""

            CSS = """
            Screen {
                background: $surface;
            }
            #title-bar {
                dock: top;
                height: 3;
                background: #1a1a2e;
                color: #e94560;
                text-align: center;
                padding: 1;
                text-style: bold;
            }
            #message {
                height: 8;
                margin: 1 2 0 2;
            }
            #diff-scroll {
                height: 1fr;
                margin: 1 2;
                border: round #444;
                padding: 1;
            }
            .file-header {
                color: #e9c46a;
                text-style: bold;
                margin: 1 0 0 0;
            }
            .diff-content {
                margin: 0 0 1 0;
            }
            #action-buttons {
                dock: bottom;
                height: 3;
                align: center middle;
                padding: 0 2;
            }
            #action-buttons Button {
                margin: 0 2;
                min-width: 20;
            }
            """

            BINDINGS = [
                Binding("ctrl+s", "approve", "Approve"),
                Binding("escape", "reject", "Decline"),
            ]

            def __init__(self, message: str) -> None:
                super().__init__()
                self._message = message
                self.decision = ReviewDecision(False, message)

            def compose(self) -> ComposeResult:
                yield Static(
                    f" ━━  Commit Review — {len(file_diffs)} file(s)  ━━ ",
                    id="title-bar",
                )
                yield TextArea(self._message, id="message")
                with VerticalScroll(id="diff-scroll"):
                    for file_diff in file_diffs:
                        yield Static(
                            f"{'─' * 58}\n  {_file_title(file_diff)}".replace("[", "\\["),
                            classes="file-header",
                        )
                        yield Static(
                            _format_rich_diff(file_diff_to_text(file_diff)),
                            classes="diff-content",
                        )
                with Horizontal(id="action-buttons"):
                    yield Button("✔ Approve and Commit", id="approve-btn", variant="success")
                    yield Button("✕ Decline", id="reject-btn", variant="error")
                yield Footer()

            def _current_message(self) -> str:
                return self.query_one("#message", TextArea).text.strip()

            def on_button_pressed(self, event: Button.Pressed) -> None:
                if event.button.id == "approve-btn":
                    self.action_approve()
                elif event.button.id == "reject-btn":
                    self.action_reject()

            def action_approve(self) -> None:
                self.decision = ReviewDecision(True, self._current_message() or self._message)
                self.exit()

            def action_reject(self) -> None:
                self.decision = ReviewDecision(False, self._current_message() or self._message)
                self.exit()

        app = CommitReviewApp(self.commit_message)
        app.run()
        return app.decision


def start_review(file_diffs: list[FileDiff], commit_message: str,
                 mode: str = "tui",
                 input_fn: Callable[[str], str] = input) -> ReviewSession:
    """Open a review session over *file_diffs* and *commit_message*."""
    return ReviewSession(file_diffs, commit_message, mode=mode, input_fn=input_fn)
