"""Command-line interface for Outline.

This module defines the CLI commands using Click framework.

Commands:
- build: Generate an HTML page for every markdown file in the current directory.
- clean: Remove generated HTML files from the current directory.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from . import __version__


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


@click.group()
@click.version_option(version=__version__, prog_name="outline")
def cli():
    """Outline static site generator."""


@cli.command()
@click.option(
    "--keep-going",
    is_flag=True,
    help="Continue past pages that fail and report them at the end",
)
@click.option(
    "--strict-frontmatter",
    is_flag=True,
    help="Fail pages whose front matter is not valid YAML",
)
@click.option("-v", "--verbose", is_flag=True, help="Log every file processed")
def build(keep_going: bool, strict_frontmatter: bool, verbose: bool):
    """Build HTML pages from the markdown files in the current directory."""
    _configure_logging(verbose)
    project_root = Path.cwd()
    from .build import BuildError, generate_site, load_config

    config = load_config(project_root)
    if strict_frontmatter:
        config["strict_frontmatter"] = True
    try:
        result = generate_site(
            project_root, config=config, keep_going=keep_going or None
        )
    except BuildError as exc:
        _report_failure(project_root, exc)
        raise SystemExit(1) from None

    for path, error in result.cleaned.failed:
        click.echo(
            click.style(f"Could not remove {path.name}: {error}", fg="yellow"),
            err=True,
        )
    if result.errors:
        for error in result.errors:
            _report_failure(project_root, error)
        click.echo(
            f"Built {len(result.written)} pages, {len(result.errors)} failed", err=True
        )
        raise SystemExit(1)
    click.echo(f"Built {len(result.written)} pages in {project_root}")


@cli.command()
@click.option("-v", "--verbose", is_flag=True, help="Log every file removed")
def clean(verbose: bool):
    """Remove generated HTML files from the current directory."""
    _configure_logging(verbose)
    from .build import clean as clean_site

    result = clean_site(Path.cwd())
    for path, error in result.failed:
        click.echo(
            click.style(f"Could not remove {path.name}: {error}", fg="yellow"),
            err=True,
        )
    click.echo(f"Removed {len(result.removed)} files")
    if not result.ok:
        raise SystemExit(1)


def _report_failure(project_root: Path, exc) -> None:
    """Display a build error with its source file."""
    try:
        rel_path = exc.source_path.relative_to(project_root)
    except ValueError:
        rel_path = exc.source_path
    click.echo(click.style("Build failed:", fg="red", bold=True), err=True)
    click.echo(click.style(f"  File: {rel_path}", fg="yellow"), err=True)
    click.echo(click.style(f"  Error: {exc.message}", fg="white"), err=True)


def main():
    """Entry point for the CLI application."""
    cli()
