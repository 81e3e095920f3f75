"""Shared test fixtures for mdutils."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest


def write(path: Path, content: str) -> Path:
    """Write a file, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture()
def write_file() -> Callable[[Path, str], Path]:
    """The write() helper, for tests that build their own trees."""
    return write


@pytest.fixture()
def root(tmp_path: Path) -> Path:
    """Canonical temp directory, so paths compare equal to resolved ones."""
    return tmp_path.resolve()


@pytest.fixture()
def book_dir(root: Path) -> Path:
    """A small documentation tree for summary generation."""
    book = root / "book"
    write(book / "README.md", "# Introduction\n\nWelcome.\n")
    write(book / "chapter1.md", "# Chapter One\n\nSee [guide](guide/index.md).\n")
    write(book / "guide" / "index.md", "# The Guide\n")
    write(book / "guide" / "b.md", "Beta\n====\n\nText.\n")
    write(book / "guide" / "a.md", "No heading here.\n")
    write(book / "empty" / "notes.txt", "not markdown\n")
    write(book / "nested" / "sub" / "c.md", "## Not this\n\n# Gamma\n")
    return book


@pytest.fixture()
def moving_tree(root: Path) -> Path:
    """Notes tree used by the move tests.

    root/
      index.md          links into guide/ (relative and absolute)
      guide/intro.md    links back to index.md
      docs/             empty destination directory
    """
    write(root / "index.md", "[Guide](guide/intro.md)\n[Abs](/guide/intro.md#setup)\n")
    write(root / "guide" / "intro.md", "# Intro\n\n[Home](../index.md)\n")
    (root / "docs").mkdir()
    return root
