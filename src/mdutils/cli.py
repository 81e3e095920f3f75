"""CLI entry points for mdutils."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import TextIO

import click

from mdutils import __version__
from mdutils.core.errors import DriftError, MdutilsError


@click.group()
@click.version_option(version=__version__, prog_name="mdutils")
def main() -> None:
    """Mdutils: rewrite Markdown links and keep SUMMARY.md in sync."""
    pass


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def links(file: Path) -> None:
    """List the link destinations found in FILE."""
    from mdutils.links import get_links

    try:
        content = file.read_text(encoding="utf-8")
        spans = get_links(content)
    except (MdutilsError, OSError) as e:
        click.echo(f"Error reading links: {e}", err=True)
        sys.exit(1)

    source = content.encode("utf-8")
    for span in spans:
        destination = source[span.start : span.end].decode("utf-8")
        click.echo(f"{span.start}..{span.end}\t{span.kind.value}\t{destination}")


@main.command()
@click.argument(
    "files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option(
    "-c",
    "--config",
    "config_path",
    default=None,
    help="Path to config file (default: ./.mdutils.yaml)",
)
@click.option(
    "-r",
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Root that local link replacements are matched against (default: cwd)",
)
@click.option("-n", "--dry-run", is_flag=True, help="Report changes without writing them")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose (DEBUG) logging")
def replace(
    files: tuple[Path, ...],
    config_path: str | None,
    root: Path | None,
    dry_run: bool,
    verbose: bool,
) -> None:
    """Rewrite link destinations in FILES using the configured regex tables."""
    from mdutils.config import load_config
    from mdutils.links import replace_links
    from mdutils.policies.local_links import LocalLinkPolicy

    try:
        config = load_config(config_path)
    except Exception as e:
        click.echo(f"Error loading config: {e}", err=True)
        sys.exit(1)
    _setup_logging(verbose, config.log_level)

    root = (root or Path.cwd()).resolve()
    try:
        for file in files:
            path = file.resolve()
            policy = LocalLinkPolicy(
                path.parent,
                root,
                local_rules=config.local_link_replacements,
                global_rules=config.link_replacements,
            )
            content = path.read_text(encoding="utf-8")
            new_content = replace_links(content, policy)
            if new_content is content:
                continue
            click.echo(f"writing changes to {file}")
            if not dry_run:
                path.write_text(new_content, encoding="utf-8")
    except (MdutilsError, OSError) as e:
        click.echo(f"Replace failed: {e}", err=True)
        sys.exit(1)


@main.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(path_type=Path))
@click.option(
    "-r",
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="The root of the notes (default: cwd)",
)
@click.option("-n", "--dry-run", is_flag=True, help="Print changes but don't perform moves")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose (DEBUG) logging")
def move(paths: tuple[Path, ...], root: Path | None, dry_run: bool, verbose: bool) -> None:
    """Move SOURCE... to DEST, fixing every link under the root."""
    _setup_logging(verbose)

    from mdutils.mover import move as move_paths

    if len(paths) < 2:
        click.echo("Error: expected at least one source and a destination", err=True)
        sys.exit(2)

    *sources, destination = paths
    try:
        move_paths(sources, destination, root=root, dry_run=dry_run)
    except (MdutilsError, OSError) as e:
        click.echo(f"Move failed: {e}", err=True)
        sys.exit(1)


@main.command()
@click.argument(
    "directory",
    required=False,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
@click.option(
    "-c",
    "--config",
    "config_path",
    default=None,
    help="Path to config file (default: ./.mdutils.yaml)",
)
@click.option(
    "--check",
    is_flag=True,
    help="Fail with a diff if the summary is out of date instead of writing it",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose (DEBUG) logging")
def summary(directory: Path | None, config_path: str | None, check: bool, verbose: bool) -> None:
    """Generate DIRECTORY/SUMMARY.md from its Markdown files."""
    from mdutils.config import load_config
    from mdutils.summary import verify_summary, write_summary

    try:
        config = load_config(config_path)
    except Exception as e:
        click.echo(f"Error loading config: {e}", err=True)
        sys.exit(1)
    _setup_logging(verbose, config.log_level)

    directory = directory or Path.cwd()
    try:
        if check:
            verify_summary(directory, config.summary_file)
            click.echo(f"{directory / config.summary_file} is up to date.")
        else:
            write_summary(directory, config.summary_file)
    except DriftError as e:
        click.echo(f"{e}:", err=True)
        click.echo("".join(e.diff), err=True, nl=False)
        sys.exit(1)
    except (MdutilsError, OSError) as e:
        click.echo(f"Summary failed: {e}", err=True)
        sys.exit(1)


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="mdbook-mdutils")
@click.pass_context
def mdbook(ctx: click.Context) -> None:
    """A mdbook preprocessor that rewrites link destinations with regex tables."""
    if ctx.invoked_subcommand is not None:
        return
    _setup_logging(False, stream=sys.stderr)

    from mdutils.preprocessor import LinkReplacePreprocessor, check_version, parse_input

    try:
        context, book = parse_input(json.load(sys.stdin))
        check_version(context)
        book = LinkReplacePreprocessor().run(context, book)
    except (MdutilsError, ValueError) as e:
        click.echo(f"Preprocessing failed: {e}", err=True)
        sys.exit(1)

    click.echo(json.dumps(book))


@mdbook.command()
@click.argument("renderer")
def supports(renderer: str) -> None:
    """Check whether a renderer is supported by this preprocessor."""
    from mdutils.preprocessor import LinkReplacePreprocessor

    sys.exit(0 if LinkReplacePreprocessor().supports_renderer(renderer) else 1)


def _setup_logging(verbose: bool, level: str = "INFO", stream: TextIO | None = None) -> None:
    """Configure logging; records go to stdout unless another stream is given."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        stream=stream or sys.stdout,
    )
