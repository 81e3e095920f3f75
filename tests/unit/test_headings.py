"""Tests for title extraction."""

from __future__ import annotations

from pathlib import Path

from mdutils.adapters.tree_sitter_markdown import parse_markdown
from mdutils.headings import get_title, title_from_file


class TestGetTitle:
    """Tests for get_title()."""

    def test_atx_heading(self) -> None:
        assert get_title("# Hello there\n\nBody.\n") == "Hello there"

    def test_keeps_inline_markup(self) -> None:
        assert get_title("# Hello *world*\n") == "Hello *world*"

    def test_closing_sequence_dropped(self) -> None:
        assert get_title("# Closed title ##\n") == "Closed title"

    def test_setext_heading(self) -> None:
        assert get_title("Underlined\n==========\n\nBody.\n") == "Underlined"

    def test_setext_before_atx_wins(self) -> None:
        text = "Setext first\n============\n\n# ATX second\n"
        assert get_title(text) == "Setext first"

    def test_atx_before_setext_wins(self) -> None:
        text = "# ATX first\n\nSetext second\n=============\n"
        assert get_title(text) == "ATX first"

    def test_scans_past_lower_level_headings(self) -> None:
        text = (
            "\n## hello there\n\nnot atx style :(\n----------------\n\n"
            "## sanity returns\n# why at the bottom?"
        )
        assert get_title(text) == "why at the bottom?"

    def test_first_level_one_in_document_order(self) -> None:
        text = (
            "\n## hello there\n\nnot atx style :(\n----------------\n\n"
            "not another one!\n===========\n\n## sanity returns\n# why at the bottom?"
        )
        assert get_title(text) == "not another one!"

    def test_nested_headings_ignored(self) -> None:
        assert get_title("> # Quoted\n\n- # In a list\n\n# Real\n") == "Real"

    def test_no_level_one_heading(self) -> None:
        assert get_title("## Only a subheading\n\nText.\n") is None

    def test_empty_document(self) -> None:
        assert get_title("") is None

    def test_accepts_parsed_document(self) -> None:
        assert get_title(parse_markdown("# Parsed\n")) == "Parsed"


class TestTitleFromFile:
    """Tests for title_from_file()."""

    def test_uses_heading(self, tmp_path: Path) -> None:
        path = tmp_path / "page.md"
        path.write_text("# Page Title\n")
        assert title_from_file(path) == "Page Title"

    def test_falls_back_to_stem(self, tmp_path: Path) -> None:
        path = tmp_path / "getting-started.md"
        path.write_text("No heading.\n")
        assert title_from_file(path) == "getting-started"
