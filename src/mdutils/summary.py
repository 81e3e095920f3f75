"""Summary (table of contents) synthesis from a directory of Markdown files.

Every sub-directory becomes an entry titled by its index file (``README.md``
or ``index.md``) or, lacking a heading there, by its name. Every other
Markdown file becomes a leaf titled by its first level 1 heading or its file
stem. Directories with neither an index nor Markdown descendants are left
out.
"""

from __future__ import annotations

import difflib
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from mdutils.core.errors import DriftError, SummaryError
from mdutils.core.models import SummaryNode
from mdutils.headings import title_from_file

logger = logging.getLogger(__name__)

DEFAULT_SUMMARY_NAME = "SUMMARY.md"
INDEX_NAMES = frozenset({"README.md", "index.md"})
MAX_SYMLINK_HOPS = 40


@dataclass
class Summary:
    """Top-level entries of a summary tree."""

    nodes: list[SummaryNode] = field(default_factory=list)

    def sort(self) -> None:
        """Sort entries by title at every level."""
        self.nodes.sort(key=lambda node: node.title)
        for node in self.nodes:
            node.sort()

    def render(self) -> str:
        """Render as a Markdown nested list under a ``# Summary`` heading."""
        out = ["# Summary\n\n"]
        for node in self.nodes:
            _render_node(node, 0, out)
        return "".join(out)


def _render_node(node: SummaryNode, depth: int, out: list[str]) -> None:
    path = node.path.as_posix() if node.path is not None else ""
    out.append("  " * depth + f"- [{node.title}]({path})\n")
    if node.children:
        for child in node.children:
            _render_node(child, depth + 1, out)
        out.append("\n")


class SummaryBuilder:
    """Walks a directory and builds its summary tree.

    Entry paths are recorded relative to the walked directory, as seen
    through any symlinks; titles are read from the symlink targets.
    """

    def __init__(self, root: Path, summary_name: str = DEFAULT_SUMMARY_NAME) -> None:
        self.root = Path(root)
        self.summary_name = summary_name

    def build(self) -> Summary:
        if not self.root.is_dir():
            raise SummaryError(f"{self.root} is not a directory.")
        entries = _entries(self.root)
        # Top-level indexes are listed as leaves, but there may still be only one
        _check_single_index(self.root, entries)

        ancestors = frozenset({self.root.resolve()})
        nodes = []
        for entry in entries:
            node = self._from_entry(entry, Path(entry.name), ancestors)
            if node is not None:
                nodes.append(node)
        logger.debug("Built summary of %s with %d top-level entries", self.root, len(nodes))
        return Summary(nodes)

    def _from_entry(
        self, path: Path, display: Path, ancestors: frozenset[Path]
    ) -> SummaryNode | None:
        real = resolve_links(path)
        if real.is_dir():
            real_dir = real.resolve()
            if real_dir in ancestors:
                logger.warning("Skipping %s: it links back to %s", path, real_dir)
                return None
            return self._from_dir(
                real, display, default_title=path.name, ancestors=ancestors | {real_dir}
            )
        if path.suffix == ".md" and path.name != self.summary_name:
            return SummaryNode(title=title_from_file(real), path=display)
        return None

    def _from_dir(
        self, directory: Path, display: Path, default_title: str, ancestors: frozenset[Path]
    ) -> SummaryNode | None:
        title = default_title
        index: Path | None = None
        children = []

        entries = _entries(directory)
        _check_single_index(directory, entries)
        for entry in entries:
            if entry.name in INDEX_NAMES:
                index = display / entry.name
                title = title_from_file(resolve_links(entry))
                continue
            child = self._from_entry(entry, display / entry.name, ancestors)
            if child is not None:
                children.append(child)

        if index is None and not children:
            logger.debug("Skipping %s: no index and no markdown files", directory)
            return None
        return SummaryNode(title=title, path=index, children=children)


def _check_single_index(directory: Path, entries: list[Path]) -> None:
    names = [entry.name for entry in entries if entry.name in INDEX_NAMES]
    if len(names) > 1:
        raise SummaryError(f"Two indexes present in {directory}: {' and '.join(names)}")


def resolve_links(path: Path) -> Path:
    """Follow a chain of symlinks to the first path that is not one.

    Raises:
        SummaryError: If the chain is longer than MAX_SYMLINK_HOPS.
    """
    hops = 0
    while path.is_symlink():
        if hops >= MAX_SYMLINK_HOPS:
            raise SummaryError(f"Too many levels of symbolic links: {path}")
        target = Path(os.readlink(path))
        path = target if target.is_absolute() else path.parent / target
        hops += 1
    return path


def _entries(directory: Path) -> list[Path]:
    return sorted(directory.iterdir(), key=lambda p: p.name)


def build_summary(directory: Path, summary_name: str = DEFAULT_SUMMARY_NAME) -> Summary:
    """Build and sort the summary tree of a directory."""
    summary = SummaryBuilder(directory, summary_name).build()
    summary.sort()
    return summary


def write_summary(directory: Path, summary_name: str = DEFAULT_SUMMARY_NAME) -> Path:
    """Render the summary of ``directory`` and overwrite its summary file."""
    rendered = build_summary(directory, summary_name).render()
    summary_path = Path(directory) / summary_name
    logger.info("Writing summary to %s", summary_path)
    summary_path.write_text(rendered, encoding="utf-8")
    return summary_path


def check_summary(directory: Path, summary_name: str = DEFAULT_SUMMARY_NAME) -> list[str]:
    """Diff the on-disk summary against a fresh render without writing.

    Returns:
        Unified diff lines; empty when the file matches byte for byte. A
        missing summary file is reported as a diff against empty content.
    """
    rendered = build_summary(directory, summary_name).render()
    summary_path = Path(directory) / summary_name

    existing = summary_path.read_bytes() if summary_path.exists() else b""
    if existing == rendered.encode("utf-8"):
        return []

    diff = list(
        difflib.unified_diff(
            existing.decode("utf-8", errors="replace").splitlines(keepends=True),
            rendered.splitlines(keepends=True),
            fromfile=str(summary_path),
            tofile=f"{summary_path} (generated)",
        )
    )
    return diff or [f"{summary_path} differs from the generated summary\n"]


def verify_summary(directory: Path, summary_name: str = DEFAULT_SUMMARY_NAME) -> None:
    """Raise DriftError if the on-disk summary is out of date."""
    diff = check_summary(directory, summary_name)
    if diff:
        raise DriftError(f"{Path(directory) / summary_name} is out of date", diff)
