"""Move Markdown files and directories while keeping links between them intact.

Links are rewritten in memory for every Markdown file under the root before
anything is touched; then the moves are performed and the rewritten files
written to their new locations. A failure part way through leaves the tree
partially moved.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from mdutils.core.errors import MoveError
from mdutils.links import replace_links
from mdutils.policies.moves import MoveList, MoveRewritePolicy, normalize_path

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIXES = frozenset({".md", ".markdown"})

ChangeList = dict[Path, str]


def build_move_list(
    sources: Sequence[Path], destination: Path, cwd: Path | None = None
) -> MoveList:
    """Work out where each source ends up, like ``mv``.

    A single source is moved into ``destination`` if it exists, else renamed
    to it. Several sources require ``destination`` to be a directory.

    Raises:
        MoveError: If a source does not exist or several sources target a
            non-directory.
    """
    if not sources:
        raise MoveError("Nothing to move")
    for source in sources:
        if not Path(source).exists():
            raise MoveError(f"{source} doesn't exist")

    destination = Path(destination)
    if not destination.is_absolute():
        destination = normalize_path((cwd or Path.cwd()) / destination)
    # Sources are canonical, so the destination must be too for prefix matching
    if destination.exists():
        destination = destination.resolve()
    elif destination.parent.exists():
        destination = destination.parent.resolve() / destination.name

    if len(sources) == 1:
        source = Path(sources[0]).resolve()
        target = destination / source.name if destination.exists() else destination
        return MoveList([(source, target)])

    if not destination.is_dir():
        raise MoveError(f"Target {destination} is not a directory")
    moves = []
    for source in sources:
        resolved = Path(source).resolve()
        moves.append((resolved, destination / resolved.name))
    return MoveList(moves)


def collect_changes(root: Path, moves: MoveList) -> ChangeList:
    """Rewrite every Markdown file under ``root`` for the pending moves.

    Returns:
        New content keyed by each changed file's post-move path.
    """
    changes: ChangeList = {}
    _collect(Path(root), moves, Path(root), changes, set())
    return changes


def _collect(
    directory: Path, moves: MoveList, root: Path, changes: ChangeList, seen: set[Path]
) -> None:
    real_dir = directory.resolve()
    if real_dir in seen:
        return
    seen.add(real_dir)

    for entry in sorted(directory.iterdir()):
        path = entry.resolve() if entry.is_symlink() else entry
        if path.is_dir():
            _collect(path, moves, root, changes, seen)
        elif path.is_file():
            change = change_file(path, moves, root)
            if change is not None:
                changes[change[0]] = change[1]


def change_file(file: Path, moves: MoveList, root: Path) -> tuple[Path, str] | None:
    """Rewrite one file's links for the pending moves.

    Returns:
        (post-move path, new content), or None when the file is not Markdown
        or none of its links change.
    """
    if file.suffix not in MARKDOWN_SUFFIXES:
        return None

    content = file.read_text(encoding="utf-8")
    policy = MoveRewritePolicy(file, moves, root)
    new_content = replace_links(content, policy)
    if new_content is content:
        return None
    return policy.file_dest, new_content


def apply_moves(moves: MoveList, changes: ChangeList, dry_run: bool = False) -> None:
    """Perform the moves, then write the rewritten files."""
    for source, destination in moves:
        logger.info("moving %s to %s", source, destination)
        if not dry_run:
            source.rename(destination)

    for path, content in changes.items():
        logger.info("writing changes to %s", path)
        if not dry_run:
            path.write_text(content, encoding="utf-8")


def move(
    sources: Sequence[Path],
    destination: Path,
    root: Path | None = None,
    dry_run: bool = False,
) -> ChangeList:
    """Move ``sources`` to ``destination`` and fix links throughout ``root``."""
    root = (Path(root) if root is not None else Path.cwd()).resolve()
    moves = build_move_list(sources, destination)
    changes = collect_changes(root, moves)
    apply_moves(moves, changes, dry_run=dry_run)
    return changes
