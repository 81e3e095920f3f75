"""Title extraction from Markdown headings."""

from __future__ import annotations

import re
from collections.abc import Iterator
from pathlib import Path

from tree_sitter import Node

from mdutils.adapters.tree_sitter_markdown import MarkdownDocument, parse_markdown

# Optional closing sequence of an ATX heading: `# Title ##`
_CLOSING_SEQUENCE = re.compile(r"(?:^|[ \t]+)#+[ \t]*$")


def get_title(document: MarkdownDocument | str) -> str | None:
    """Raw text of the first level 1 heading at the top level of a document.

    Both ATX (``# Title``) and setext (``Title`` underlined with ``=``)
    headings count; whichever comes first in the document wins. Headings
    nested in block quotes or lists are ignored.
    """
    if isinstance(document, str):
        document = parse_markdown(document)

    for node in _top_level_blocks(document.root):
        title = _level_one_title(document, node)
        if title is not None:
            return title
    return None


def title_from_file(path: Path) -> str:
    """Title of a Markdown file, falling back to its file stem."""
    content = path.read_text(encoding="utf-8")
    title = get_title(content)
    if title is not None:
        return title
    return path.stem


def _top_level_blocks(node: Node) -> Iterator[Node]:
    # Sections group a heading with the blocks under it; they add no nesting.
    for child in node.children:
        if child.type == "section":
            yield from _top_level_blocks(child)
        else:
            yield child


def _level_one_title(document: MarkdownDocument, node: Node) -> str | None:
    child_types = {child.type for child in node.children}

    if node.type == "atx_heading" and "atx_h1_marker" in child_types:
        for child in node.children:
            if child.type == "inline":
                text = document.node_text(child).strip()
                return _CLOSING_SEQUENCE.sub("", text).strip()
        return ""

    if node.type == "setext_heading" and "setext_h1_underline" in child_types:
        for child in node.children:
            if child.type == "paragraph":
                return document.node_text(child).strip()

    return None
