"""Link extraction and rewriting over parsed Markdown."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence

from tree_sitter import Node

from mdutils.adapters.tree_sitter_markdown import MarkdownDocument, parse_markdown
from mdutils.core.errors import MdutilsError, ParseError, PolicyError
from mdutils.core.models import LinkKind, ReplacementRule, Span
from mdutils.policies.regex_table import RegexTable

logger = logging.getLogger(__name__)

Decision = Callable[[str], str | None]

# Constructs whose destination is a `link_destination` child node
_DESTINATION_PARENTS = {
    "inline_link": LinkKind.INLINE_LINK,
    "image": LinkKind.IMAGE,
    "link_reference_definition": LinkKind.REFERENCE_DEFINITION,
}


def get_links(document: MarkdownDocument | str) -> list[Span]:
    """Locate every link destination in a document.

    Returns the spans sorted by start offset. Links inside code spans and
    code blocks are never reported.

    Raises:
        ParseError: If a located construct does not have the shape its kind
            implies, or two destinations overlap.
    """
    if isinstance(document, str):
        document = parse_markdown(document)

    spans = []
    for node in document.block_nodes():
        span = _span_from_node(document, node)
        if span is not None:
            spans.append(span)
    for node in document.inline_nodes():
        span = _span_from_node(document, node)
        if span is not None:
            spans.append(span)

    spans.sort(key=lambda s: s.start)
    _check_spans(spans, len(document.source))
    return spans


def _span_from_node(document: MarkdownDocument, node: Node) -> Span | None:
    kind = _DESTINATION_PARENTS.get(node.type)
    if kind is not None:
        for child in node.named_children:
            if child.type == "link_destination":
                return _destination_span(document, child, kind)
        return None

    if node.type == "uri_autolink":
        raw = document.source[node.start_byte : node.end_byte]
        if len(raw) < 2 or not raw.startswith(b"<") or not raw.endswith(b">"):
            raise ParseError(f"Parser Error: {raw.decode('utf-8')!r} is not a valid autolink.")
        return Span(start=node.start_byte + 1, end=node.end_byte - 1, kind=LinkKind.AUTOLINK)

    return None


def _destination_span(document: MarkdownDocument, node: Node, kind: LinkKind) -> Span:
    start, end = node.start_byte, node.end_byte
    raw = document.source[start:end]
    # <dest> form: the brackets are delimiters, not part of the destination
    if raw.startswith(b"<"):
        if len(raw) < 2 or not raw.endswith(b">"):
            raise ParseError(
                f"Parser Error: {raw.decode('utf-8')!r} is not a valid link destination."
            )
        start, end = start + 1, end - 1
    return Span(start=start, end=end, kind=kind)


def _check_spans(spans: Sequence[Span], length: int) -> None:
    previous: Span | None = None
    for span in spans:
        if span.end > length:
            raise ParseError(f"Link span {span.start}..{span.end} is outside the document")
        if previous is not None and previous.overlaps(span):
            raise ParseError(
                f"Link spans overlap: {previous.start}..{previous.end} "
                f"and {span.start}..{span.end}"
            )
        previous = span


def apply_replacements(text: str, spans: Iterable[Span], decide: Decision) -> str:
    """Splice decided replacements into text.

    Each span's destination is trimmed before being passed to ``decide``.
    Text outside accepted spans is copied byte for byte. If no decision
    replaces anything, ``text`` itself is returned (not a copy), so callers
    can test for change with ``is``.

    Raises:
        PolicyError: If ``decide`` raises; no partial output is produced.
    """
    source = text.encode("utf-8")
    pieces: list[bytes] = []
    cursor = 0
    changed = False

    for span in sorted(spans, key=lambda s: s.start):
        link = source[span.start : span.end].decode("utf-8").strip()
        try:
            new_link = decide(link)
        except MdutilsError:
            raise
        except Exception as e:
            raise PolicyError(f"Replacement failed for link {link!r}: {e}") from e
        if new_link is None:
            continue

        logger.debug("Replacing %r with %r", link, new_link)
        pieces.append(source[cursor : span.start])
        pieces.append(new_link.encode("utf-8"))
        cursor = span.end
        changed = True

    if not changed:
        return text
    pieces.append(source[cursor:])
    return b"".join(pieces).decode("utf-8")


def replace_links(
    content: str,
    replacement: Decision,
    document: MarkdownDocument | None = None,
) -> str:
    """Locate the links of ``content`` and rewrite them with ``replacement``.

    Args:
        content: Markdown source text.
        replacement: Decision function; returns the new destination or None.
        document: Already parsed form of ``content``, parsed here if omitted.

    Returns:
        ``content`` itself when nothing changed, otherwise the new text.
    """
    if document is None:
        document = parse_markdown(content)
    return apply_replacements(content, get_links(document), replacement)


def regexreplace_links(content: str, rules: Sequence[ReplacementRule]) -> str:
    """Rewrite link destinations with a first-match-wins regex table."""
    return replace_links(content, RegexTable(rules))
