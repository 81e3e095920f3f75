"""Path rewriting policy aware of a pending batch of file moves."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path

from mdutils.core.errors import PolicyError
from mdutils.core.interfaces import ReplacementPolicy

logger = logging.getLogger(__name__)

# RFC 3986 scheme followed by a colon (https:, mailto:, ...)
_URL_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*:")


def is_url(link: str) -> bool:
    """Whether a link carries a URL scheme and so points outside the tree."""
    return _URL_SCHEME.match(link) is not None


def normalize_path(path: str | os.PathLike[str]) -> Path:
    """Collapse ``.`` and ``..`` components without touching the filesystem.

    ``..`` removes the previously kept component and is dropped when there
    is none, so the result never climbs above its anchor.
    """
    path = Path(path)
    anchor = path.anchor
    parts: list[str] = []
    for part in path.parts[1 if anchor else 0 :]:
        if part == ".":
            continue
        if part == "..":
            if parts:
                parts.pop()
            continue
        parts.append(part)
    return Path(anchor, *parts)


class MoveList:
    """Absolute source paths mapped to their absolute destinations.

    A source registered for a directory also covers everything beneath it.
    Built once per run and not modified afterwards.
    """

    def __init__(
        self, moves: Mapping[Path, Path] | Iterable[tuple[Path, Path]] = ()
    ) -> None:
        items = moves.items() if isinstance(moves, Mapping) else moves
        self._moves: dict[Path, Path] = {Path(src): Path(dst) for src, dst in items}

    def __iter__(self) -> Iterator[tuple[Path, Path]]:
        return iter(self._moves.items())

    def __len__(self) -> int:
        return len(self._moves)

    def __repr__(self) -> str:
        return f"MoveList({self._moves!r})"

    def destination_for(self, path: Path) -> Path | None:
        """Where ``path`` ends up after the moves, or None if it stays put.

        Expects ``path`` to be absolute.
        """
        for source, destination in self._moves.items():
            if path.is_relative_to(source):
                return normalize_path(destination / path.relative_to(source))
        return None


class MoveRewritePolicy(ReplacementPolicy):
    """Rewrites the links of one document so they survive a batch of moves.

    Relative links are re-expressed relative to where the document itself
    will live after the moves; root-absolute links (``/x``) stay
    root-absolute. URLs and fragment-only links are never rewritten.
    """

    def __init__(self, file: Path, moves: MoveList, root: Path) -> None:
        self.file = Path(file)
        self.moves = moves
        self.root = Path(root)
        self.file_dest = moves.destination_for(self.file) or self.file
        self.missing: list[Path] = []

    def decide(self, link: str) -> str | None:
        link_path, sep, fragment = link.partition("#")
        if not link_path or is_url(link_path):
            return None

        was_absolute = link_path.startswith("/")
        if was_absolute:
            target = normalize_path(self.root / link_path.lstrip("/"))
        else:
            target = normalize_path(self.file.parent / link_path)

        if not target.exists():
            logger.warning("'%s' in '%s' doesn't exist", target, self.file)
            self.missing.append(target)
            return None

        moved = self.moves.destination_for(target)
        if moved is None and self.file_dest == self.file:
            return None
        if moved is not None:
            target = moved

        if was_absolute:
            new_link = "/" + self._root_relative(target)
        else:
            new_link = Path(os.path.relpath(target, self.file_dest.parent)).as_posix()
        if sep:
            new_link += "#" + fragment

        return None if new_link == link else new_link

    def _root_relative(self, target: Path) -> str:
        try:
            relative = target.relative_to(self.root)
        except ValueError as e:
            raise PolicyError(
                f"'{target}' linked from '{self.file}' ends up outside the root '{self.root}'"
            ) from e
        return "" if relative == Path(".") else relative.as_posix()
