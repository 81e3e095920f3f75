"""Regex tables split between local (in-tree) links and everything else."""

from __future__ import annotations

import os
from collections.abc import Sequence
from pathlib import Path

from mdutils.core.errors import PolicyError
from mdutils.core.interfaces import ReplacementPolicy
from mdutils.core.models import ReplacementRule
from mdutils.policies.moves import is_url, normalize_path
from mdutils.policies.regex_table import RegexTable


class LocalLinkPolicy(ReplacementPolicy):
    """Try local rules on root-relative paths, then global rules on the raw link.

    A link counts as local when it has no URL scheme and the chapter
    directory is known. Its destination is resolved against the chapter
    directory, normalized, and matched as a ``/``-separated path relative to
    ``root``; e.g. ``../img/a.png`` in ``root/guide/`` is matched as
    ``img/a.png``.
    """

    def __init__(
        self,
        chapter_dir: Path | None,
        root: Path,
        local_rules: Sequence[ReplacementRule] = (),
        global_rules: Sequence[ReplacementRule] = (),
    ) -> None:
        self.chapter_dir = chapter_dir
        self.root = Path(root)
        self._local = RegexTable(local_rules)
        self._global = RegexTable(global_rules)

    def decide(self, link: str) -> str | None:
        if self.chapter_dir is not None and link and not is_url(link):
            local_path = self.root_relative(link)
            new_link = self._local.decide(local_path)
            if new_link is not None:
                return new_link
        return self._global.decide(link)

    def root_relative(self, link: str) -> str:
        """The link's target as a path relative to the root."""
        if self.chapter_dir is None:
            raise PolicyError(f"Cannot rebase {link!r}: the chapter directory is unknown")
        absolute = normalize_path(self.chapter_dir / link)
        return Path(os.path.relpath(absolute, normalize_path(self.root))).as_posix()
