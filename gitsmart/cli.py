"""
CLI entry point — argument parsing and main execution flow.
"""

import argparse

from .cli_display import format_colored_diff, log, setup_logger, token_tracker
from .commit_message import generate_commit_message
from .config import PROVIDERS, Config
from .diff.hunk_header import StructuralParseError
from .diff.rules import InvalidRuleError
from .diff.structurer import structure_diff
from .git_utils import GitError, GitRepository
from .llm import LLMError, create_llm_client
from .report import write_review_html
from .review import start_review
from .stager import ACTION_FAILED, StageResult, SmartStager


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gitsmart",
        description="GitSmart — filtered staging and AI commit messages")
    parser.add_argument("--repo", default=".",
                        help="Path to the git working tree (default: CWD)")
    parser.add_argument("--config", default=None,
                        help="Path to .gitsmart.yaml config file")
    parser.add_argument("--provider", choices=PROVIDERS, default=None,
                        help="The LLM provider to use (default: from config)")
    parser.add_argument("--model", default=None,
                        help="The model name to use (default: from config)")
    parser.add_argument("--message", "-m", default=None,
                        help="Use this commit message instead of generating one")
    parser.add_argument("--no-stream", action="store_true",
                        help="Disable streaming responses")
    parser.add_argument("--dry-run", action="store_true",
                        help="Print the filtered patches without staging anything")
    parser.add_argument("--html", nargs="?", const="", default=None, metavar="PATH",
                        help="Also write an HTML review page "
                             "(default location: report_dir from config)")
    review = parser.add_mutually_exclusive_group()
    review.add_argument("--auto", action="store_true",
                        help="Commit without the interactive review")
    review.add_argument("--console", action="store_true",
                        help="Review in the plain console instead of the TUI")
    return parser


def _print_stage_summary(result: StageResult, show_patches: bool = False) -> None:
    for outcome in result.outcomes:
        marker = "✘" if outcome.action == ACTION_FAILED else "•"
        detail = f" ({outcome.detail})" if outcome.detail else ""
        print(f"  {marker} {outcome.path}: {outcome.action}{detail}")
        if show_patches and outcome.patch:
            print(format_colored_diff(outcome.patch))
    if result.lines_removed:
        print(f"\n  Filtered {result.lines_removed} line(s) out of the staged changes.")


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    # ── 0. Load config ──
    cfg = Config.load(args.config)
    setup_logger(cfg.LOG_DIR)

    try:
        rules = cfg.exclusion_rules()
    except InvalidRuleError as e:
        print(f"\n  [ERROR] {e}\n  Fix filter_patterns in .gitsmart.yaml.\n")
        return 1

    provider = args.provider or cfg.PROVIDER
    needs_llm = args.message is None and not args.dry_run
    if needs_llm and provider == "openai" and not cfg.OPENAI_API_KEY:
        print("\n  [ERROR] OpenAI API key is not configured.\n"
              "  Set OPENAI_API_KEY env var or add it to .gitsmart.yaml.\n")
        return 1

    repo = GitRepository(args.repo)
    if not repo.is_git_repo():
        print(f"\n  [ERROR] {args.repo} is not inside a git repository.\n")
        return 1

    # ── 1. Stage filtered changes ──
    result = SmartStager(repo, rules, dry_run=args.dry_run).stage_all()
    if not result.outcomes:
        print("  No working-tree changes.")
        return 0
    _print_stage_summary(result, show_patches=args.dry_run)
    if args.dry_run:
        return 1 if result.failed else 0

    try:
        staged = repo.staged_diff()
        if not staged.strip():
            print("  No changes to commit after filtering.")
            return 0

        # ── 2. Structure the staged diff for review ──
        file_diffs = structure_diff(staged)

        # ── 3. Commit message ──
        if args.message is not None:
            message = args.message
        else:
            llm = create_llm_client(cfg, provider=provider, model=args.model,
                                    stream=False if args.no_stream else None)
            print("  Generating commit message...")
            message = generate_commit_message(llm, staged, cfg.SYSTEM_MESSAGE_ENHANCEMENT)

        if args.html is not None:
            path = write_review_html(file_diffs, message,
                                     output_path=args.html or None,
                                     output_dir=cfg.REPORT_DIR)
            print(f"  Review page written to {path}")

        # ── 4. Review ──
        mode = "auto" if args.auto else "console" if args.console else "tui"
        with start_review(file_diffs, message, mode=mode) as session:
            decision = session.run()

        if not decision.approved:
            print("  Commit declined — changes remain staged.")
            return 0

        repo.commit(decision.message)
        print("  Changes committed successfully!")
    except (GitError, LLMError, StructuralParseError) as e:
        log.error(f"[CLI] {e}")
        print(f"\n  [ERROR] {e}\n")
        return 1
    finally:
        if token_tracker.call_count:
            print(f"  Tokens used: {token_tracker.total_tokens:,}")

    return 0 if not result.failed else 1
