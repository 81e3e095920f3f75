"""Markdown parser adapter built on the tree-sitter Markdown grammars.

The Markdown grammar is split in two: a block grammar describing the
document structure, and an inline grammar that is run separately over the
byte ranges of every ``inline`` block. Both kinds of tree report absolute
byte offsets into the UTF-8 encoded source, which is what the link engine
needs to splice destinations without touching the surrounding syntax.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

import tree_sitter_markdown
from tree_sitter import Language, Node, Parser, Range, Tree

logger = logging.getLogger(__name__)

# Block nodes whose text is handed over to the inline grammar
_INLINE_CONTAINERS = frozenset({"inline", "pipe_table_cell"})


@dataclass
class MarkdownDocument:
    """Immutable source text plus its block tree and inline trees."""

    text: str
    source: bytes
    block_tree: Tree
    inline_trees: list[Tree] = field(default_factory=list)

    @property
    def root(self) -> Node:
        return self.block_tree.root_node

    def block_nodes(self) -> Iterator[Node]:
        """Block tree nodes in document order."""
        return walk(self.block_tree.root_node)

    def inline_nodes(self) -> Iterator[Node]:
        """Inline tree nodes, one inline block after another."""
        for tree in self.inline_trees:
            yield from walk(tree.root_node)

    def node_text(self, node: Node) -> str:
        return self.source[node.start_byte : node.end_byte].decode("utf-8")


class TreeSitterMarkdownParser:
    """Parses Markdown text into a MarkdownDocument."""

    def __init__(self) -> None:
        self._block_language = Language(tree_sitter_markdown.language())
        self._inline_language = Language(tree_sitter_markdown.inline_language())
        self._block_parser = Parser(self._block_language)

    def parse(self, text: str) -> MarkdownDocument:
        source = text.encode("utf-8")
        block_tree = self._block_parser.parse(source)

        inline_trees = []
        for node in walk(block_tree.root_node):
            if node.type not in _INLINE_CONTAINERS:
                continue
            ranges = _inline_ranges(node)
            if not ranges:
                continue
            parser = Parser(self._inline_language, included_ranges=ranges)
            inline_trees.append(parser.parse(source))

        logger.debug(
            "Parsed %d bytes into %d inline trees", len(source), len(inline_trees)
        )
        return MarkdownDocument(
            text=text,
            source=source,
            block_tree=block_tree,
            inline_trees=inline_trees,
        )


@functools.cache
def get_parser() -> TreeSitterMarkdownParser:
    """Shared parser, built on first use."""
    return TreeSitterMarkdownParser()


def parse_markdown(text: str) -> MarkdownDocument:
    """Parse text with the shared parser."""
    return get_parser().parse(text)


def walk(node: Node) -> Iterator[Node]:
    """Pre-order traversal of a node and its descendants."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def _inline_ranges(node: Node) -> list[Range]:
    """Byte ranges of an inline block, minus its block continuation markers.

    Inside block quotes and list items the markers (``>``, indentation) that
    continue a paragraph on the next line are named children of the inline
    node and must not be seen by the inline grammar.
    """
    ranges = []
    start_byte, start_point = node.start_byte, node.start_point
    for child in node.named_children:
        if child.start_byte > start_byte:
            ranges.append(Range(start_point, child.start_point, start_byte, child.start_byte))
        start_byte, start_point = child.end_byte, child.end_point
    if node.end_byte > start_byte:
        ranges.append(Range(start_point, node.end_point, start_byte, node.end_byte))
    return ranges
