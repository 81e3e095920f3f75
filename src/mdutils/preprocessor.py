"""mdBook preprocessor that rewrites chapter links with regex tables.

mdBook hands the preprocessor a JSON array ``[context, book]`` on stdin and
expects the (possibly modified) book back on stdout. Only chapter
``content`` is changed; the rest of the book passes through untouched.
"""

from __future__ import annotations

import logging
import posixpath
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from mdutils.config import ReplaceConfig, replace_config_from_table
from mdutils.core.errors import ConfigError
from mdutils.links import replace_links
from mdutils.policies.local_links import LocalLinkPolicy

logger = logging.getLogger(__name__)

SUPPORTED_MDBOOK_VERSION = "0.4"


class LinkReplacePreprocessor:
    """Applies ``link_replacements``/``local_link_replacements`` to every chapter."""

    def __init__(self, name: str = "mdutils") -> None:
        self.name = name

    def supports_renderer(self, renderer: str) -> bool:
        return True

    def run(self, context: dict[str, Any], book: dict[str, Any]) -> dict[str, Any]:
        """Rewrite the links of every chapter in ``book`` in place.

        Returns:
            The same book object.

        Raises:
            ConfigError: If the preprocessor's table is malformed.
        """
        table = context.get("config", {}).get("preprocessor", {}).get(self.name)
        if table is None:
            logger.debug("No [preprocessor.%s] table, leaving book unchanged", self.name)
            return book
        config = replace_config_from_table(table, f"preprocessor.{self.name}")

        root = Path(context.get("root", "."))
        for chapter in iter_chapters(book.get("sections", [])):
            self._rewrite_chapter(chapter, config, root)
        return book

    def _rewrite_chapter(self, chapter: dict[str, Any], config: ReplaceConfig, root: Path) -> None:
        chapter_path = chapter.get("path")
        chapter_dir = root / posixpath.dirname(chapter_path) if chapter_path else None
        policy = LocalLinkPolicy(
            chapter_dir,
            root,
            local_rules=config.local_link_replacements,
            global_rules=config.link_replacements,
        )
        content = chapter.get("content", "")
        new_content = replace_links(content, policy)
        if new_content is not content:
            logger.debug("Rewrote links in chapter %r", chapter.get("name"))
            chapter["content"] = new_content


def iter_chapters(items: list[Any]) -> Iterator[dict[str, Any]]:
    """Yield every chapter dict, depth first, skipping separators and part titles."""
    for item in items:
        if not isinstance(item, dict) or "Chapter" not in item:
            continue
        chapter = item["Chapter"]
        yield chapter
        yield from iter_chapters(chapter.get("sub_items", []))


def check_version(context: dict[str, Any]) -> None:
    """Warn when called from an mdBook release this preprocessor was not built for."""
    version = str(context.get("mdbook_version", ""))
    if version.split(".")[:2] != SUPPORTED_MDBOOK_VERSION.split("."):
        logger.warning(
            "The mdutils preprocessor supports mdbook %s.x, but is being called from version %s",
            SUPPORTED_MDBOOK_VERSION,
            version or "unknown",
        )


def parse_input(payload: Any) -> tuple[dict[str, Any], dict[str, Any]]:
    """Split mdBook's ``[context, book]`` payload.

    Raises:
        ConfigError: If the payload does not have that shape.
    """
    if not isinstance(payload, list) or len(payload) != 2:
        raise ConfigError("Expected a JSON array of [context, book]")
    context, book = payload
    if not isinstance(context, dict) or not isinstance(book, dict):
        raise ConfigError("Expected a JSON array of [context, book] objects")
    return context, book
