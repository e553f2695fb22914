"""
Exclusion rules — regular expressions matched against added-line content.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Pattern

logger = logging.getLogger(__name__)

DEFAULT_FILTER_PATTERNS: tuple[str, ...] = (
    r"^\s*console\.(log|error|warn)\(",
    r"^\s*debugger;",
)


class InvalidRuleError(ValueError):
    """A configured pattern is not a valid regular expression."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid filter pattern {pattern!r}: {reason}")


class ExclusionRuleSet:
    """An ordered, compiled set of exclusion patterns.

    A line is excluded when ANY rule matches it.  Order only affects how
    early the search short-circuits.
    """

    def __init__(self, rules: Iterable[Pattern[str]] = ()):
        self._rules: tuple[Pattern[str], ...] = tuple(rules)

    @classmethod
    def from_patterns(cls, patterns: Iterable[str]) -> "ExclusionRuleSet":
        """Compile *patterns*, failing on the first invalid one."""
        compiled: list[Pattern[str]] = []
        for pattern in patterns:
            try:
                compiled.append(re.compile(pattern))
            except re.error as e:
                raise InvalidRuleError(pattern, str(e)) from e
        logger.debug("Compiled %d exclusion rule(s)", len(compiled))
        return cls(compiled)

    @classmethod
    def default(cls) -> "ExclusionRuleSet":
        return cls.from_patterns(DEFAULT_FILTER_PATTERNS)

    @property
    def patterns(self) -> list[str]:
        return [rule.pattern for rule in self._rules]

    def matches(self, content: str) -> bool:
        """Test already-trimmed *content* against every rule."""
        return any(rule.search(content) for rule in self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __bool__(self) -> bool:
        return bool(self._rules)

    def __repr__(self) -> str:
        return f"ExclusionRuleSet({self.patterns!r})"
