"""
Commit message generation — asks the configured LLM to describe a staged diff.
"""

import re

from .cli_display import log
from .llm.base import LLMClient

BASE_SYSTEM_MESSAGE = (
    "You are a helpful assistant that generates concise and descriptive git "
    "commit messages based on code changes. Follow conventional commits format."
)

DEFAULT_COMMIT_MESSAGE = "feat: update codebase"

_FENCE_PATTERN = re.compile(r"^```[\w-]*\n(.*?)\n?```$", re.DOTALL)


def build_system_prompt(enhancement: str = "") -> str:
    """Base system prompt plus the user's optional extra instructions."""
    enhancement = (enhancement or "").strip()
    if not enhancement:
        return BASE_SYSTEM_MESSAGE
    return f"{BASE_SYSTEM_MESSAGE}\n\n{enhancement}"


def clean_commit_message(text: str) -> str:
    """Strip whitespace and a surrounding Markdown code fence."""
    text = text.strip()
    match = _FENCE_PATTERN.match(text)
    if match:
        text = match.group(1).strip()
    return text


def generate_commit_message(llm: LLMClient, diff: str, enhancement: str = "") -> str:
    """Return a commit message for *diff*.

    An empty diff (or an empty reply) yields ``DEFAULT_COMMIT_MESSAGE``.
    ``LLMError`` from the client propagates to the caller.
    """
    if not diff.strip():
        return DEFAULT_COMMIT_MESSAGE

    prompt = f"Generate a commit message for the following changes:\n\n{diff}"
    reply = llm.generate_response(prompt, system_prompt=build_system_prompt(enhancement))
    message = clean_commit_message(reply or "")
    if not message:
        log.warning("[Commit] Model returned no message, using default")
        return DEFAULT_COMMIT_MESSAGE
    return message
