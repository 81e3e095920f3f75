"""Regex table policy: first matching rule decides the new destination."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from mdutils.core.interfaces import ReplacementPolicy
from mdutils.core.models import ReplacementRule

logger = logging.getLogger(__name__)


class RegexTable(ReplacementPolicy):
    """Ordered (pattern, template) pairs tried against the whole destination."""

    def __init__(self, rules: Sequence[ReplacementRule] | None = None) -> None:
        self._rules: list[tuple[re.Pattern[str], str]] = [
            (rule.compile(), rule.replacement) for rule in rules or []
        ]

    @classmethod
    def from_pairs(cls, pairs: Sequence[tuple[str, str]]) -> RegexTable:
        """Build a table from plain (regex, replacement) tuples."""
        return cls([ReplacementRule(regex=r, replacement=t) for r, t in pairs])

    def __len__(self) -> int:
        return len(self._rules)

    def decide(self, link: str) -> str | None:
        """Expand the template of the first rule that matches the whole link.

        A match stops the search even when the expansion equals the input.
        Empty destinations never match.
        """
        if not link:
            return None
        for pattern, template in self._rules:
            match = pattern.fullmatch(link)
            if match is not None:
                logger.debug("Rule %r matched %r", pattern.pattern, link)
                return match.expand(template)
        return None
