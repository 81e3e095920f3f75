"""Tests for summary synthesis."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path

import pytest

from mdutils.core.errors import DriftError, SummaryError
from mdutils.core.models import SummaryNode
from mdutils.summary import (
    Summary,
    SummaryBuilder,
    build_summary,
    check_summary,
    resolve_links,
    verify_summary,
    write_summary,
)

EXPECTED = """\
# Summary

- [Chapter One](chapter1.md)
- [Introduction](README.md)
- [The Guide](guide/index.md)
  - [Beta](guide/b.md)
  - [a](guide/a.md)

- [nested]()
  - [sub]()
    - [Gamma](nested/sub/c.md)


"""


class TestSummaryBuilder:
    """Tests for building the node tree."""

    def test_index_titles_directory(self, book_dir: Path) -> None:
        summary = build_summary(book_dir)
        guide = next(n for n in summary.nodes if n.path == Path("guide/index.md"))
        assert guide.title == "The Guide"
        assert {c.title for c in guide.children} == {"Beta", "a"}

    def test_directory_without_index_uses_name(self, book_dir: Path) -> None:
        summary = build_summary(book_dir)
        nested = next(n for n in summary.nodes if n.title == "nested")
        assert nested.path is None
        assert nested.children[0].title == "sub"

    def test_directory_without_markdown_elided(self, book_dir: Path) -> None:
        summary = build_summary(book_dir)
        assert "empty" not in {n.title for n in summary.nodes}

    def test_top_level_readme_is_a_leaf(self, book_dir: Path) -> None:
        summary = build_summary(book_dir)
        intro = next(n for n in summary.nodes if n.title == "Introduction")
        assert intro.path == Path("README.md")
        assert intro.children == []

    def test_summary_file_skipped(self, book_dir: Path) -> None:
        (book_dir / "SUMMARY.md").write_text("# Summary\n")
        titles = {n.title for n in build_summary(book_dir).nodes}
        assert "Summary" not in titles

    def test_two_indexes_fail(self, root: Path, write_file: Callable[[Path, str], Path]) -> None:
        write_file(root / "docs" / "part" / "README.md", "# One\n")
        write_file(root / "docs" / "part" / "index.md", "# Two\n")
        with pytest.raises(SummaryError, match="Two indexes present"):
            build_summary(root / "docs")

    def test_two_top_level_indexes_fail(
        self, root: Path, write_file: Callable[[Path, str], Path]
    ) -> None:
        write_file(root / "README.md", "# One\n")
        write_file(root / "index.md", "# Two\n")
        with pytest.raises(SummaryError, match="Two indexes present"):
            build_summary(root)

    def test_symlink_to_ancestor_skipped(
        self,
        root: Path,
        write_file: Callable[[Path, str], Path],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        write_file(root / "d" / "x.md", "# X\n")
        os.symlink("..", root / "d" / "up")
        os.symlink(".", root / "d" / "self")

        with caplog.at_level(logging.WARNING, logger="mdutils.summary"):
            (node,) = build_summary(root).nodes

        assert node.title == "d"
        assert [child.path for child in node.children] == [Path("d/x.md")]
        assert "links back to" in caplog.text

    def test_same_directory_linked_twice(
        self, root: Path, write_file: Callable[[Path, str], Path]
    ) -> None:
        write_file(root / "shared" / "s.md", "# Shared\n")
        os.symlink("shared", root / "alias")

        titles = [node.title for node in build_summary(root).nodes]
        assert titles == ["alias", "shared"]

    def test_not_a_directory(self, root: Path, write_file: Callable[[Path, str], Path]) -> None:
        file = write_file(root / "file.md", "# F\n")
        with pytest.raises(SummaryError, match="not a directory"):
            SummaryBuilder(file).build()

    def test_symlinked_directory(self, root: Path, write_file: Callable[[Path, str], Path]) -> None:
        write_file(root / "outside" / "x.md", "# Linked Page\n")
        (root / "book").mkdir()
        os.symlink("../outside", root / "book" / "linked")

        summary = build_summary(root / "book")
        (linked,) = summary.nodes
        assert linked.title == "linked"
        assert linked.children[0].path == Path("linked/x.md")
        assert linked.children[0].title == "Linked Page"

    def test_symlinked_file(self, root: Path, write_file: Callable[[Path, str], Path]) -> None:
        write_file(root / "real.md", "# Real Title\n")
        (root / "book").mkdir()
        os.symlink(root / "real.md", root / "book" / "alias.md")

        (node,) = build_summary(root / "book").nodes
        assert node.title == "Real Title"
        assert node.path == Path("alias.md")


class TestResolveLinks:
    """Tests for resolve_links()."""

    def test_follows_chain(self, root: Path, write_file: Callable[[Path, str], Path]) -> None:
        target = write_file(root / "target.md", "x")
        os.symlink("target.md", root / "one.md")
        os.symlink("one.md", root / "two.md")
        assert resolve_links(root / "two.md") == target

    def test_plain_path_unchanged(self, root: Path) -> None:
        assert resolve_links(root) == root

    def test_loop_fails(self, root: Path) -> None:
        os.symlink("b", root / "a")
        os.symlink("a", root / "b")
        with pytest.raises(SummaryError, match="Too many levels"):
            resolve_links(root / "a")


class TestRender:
    """Tests for sorting and rendering."""

    def test_render_sorted_tree(self, book_dir: Path) -> None:
        assert build_summary(book_dir).render() == EXPECTED

    def test_render_empty(self) -> None:
        assert Summary().render() == "# Summary\n\n"

    def test_sort_by_title_not_path(self) -> None:
        summary = Summary(
            [
                SummaryNode(title="Zeta", path=Path("a.md")),
                SummaryNode(title="Alpha", path=Path("z.md")),
            ]
        )
        summary.sort()
        assert summary.render() == "# Summary\n\n- [Alpha](z.md)\n- [Zeta](a.md)\n"


class TestWriteAndCheck:
    """Tests for overwrite and drift-check modes."""

    def test_write_overwrites(self, book_dir: Path) -> None:
        (book_dir / "SUMMARY.md").write_text("stale content that is longer than needed\n" * 50)
        path = write_summary(book_dir)
        assert path == book_dir / "SUMMARY.md"
        assert path.read_text() == EXPECTED

    def test_check_identical(self, book_dir: Path) -> None:
        write_summary(book_dir)
        assert check_summary(book_dir) == []
        verify_summary(book_dir)

    def test_check_detects_drift_without_writing(self, book_dir: Path) -> None:
        write_summary(book_dir)
        (book_dir / "chapter1.md").write_text("# Chapter 1 Renamed\n")
        before = (book_dir / "SUMMARY.md").read_bytes()

        diff = check_summary(book_dir)

        assert diff
        assert "-- [Chapter One](chapter1.md)\n" in diff
        assert "+- [Chapter 1 Renamed](chapter1.md)\n" in diff
        assert (book_dir / "SUMMARY.md").read_bytes() == before

    def test_verify_raises_drift_error(self, book_dir: Path) -> None:
        write_summary(book_dir)
        (book_dir / "guide" / "b.md").write_text("# Bravo\n")
        with pytest.raises(DriftError) as exc_info:
            verify_summary(book_dir)
        assert exc_info.value.diff

    def test_missing_summary_is_drift(self, book_dir: Path) -> None:
        diff = check_summary(book_dir)
        assert any(line.startswith("+# Summary") for line in diff)

    def test_custom_summary_name(self, book_dir: Path) -> None:
        write_summary(book_dir, "TOC.md")
        assert (book_dir / "TOC.md").exists()
        assert check_summary(book_dir, "TOC.md") == []
