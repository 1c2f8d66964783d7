"""Utility functions for Outline.

Small path helpers shared by the page generator and the site driver.

Key functions:
    is_markdown: Check if a path is a Markdown source file.
    is_html: Check if a path is a generated HTML file.
    output_path_for: Derive the HTML output path for a Markdown source.
"""

from __future__ import annotations

from pathlib import Path

MARKDOWN_SUFFIX = ".md"
HTML_SUFFIX = ".html"


def is_markdown(path: Path) -> bool:
    """Check if a path is a Markdown file.

    Args:
        path: Path to check.

    Returns:
        True if the file has .md extension (case-insensitive).
    """
    return path.suffix.lower() == MARKDOWN_SUFFIX


def is_html(path: Path) -> bool:
    """Check if a path is an HTML file.

    Args:
        path: Path to check.

    Returns:
        True if the file has .html extension (case-insensitive).
    """
    return path.suffix.lower() == HTML_SUFFIX


def output_path_for(path: Path) -> Path:
    """Return the HTML file written for a Markdown source.

    The output sits next to the source with the same base name.

    Examples:
        >>> output_path_for(Path("docs/intro.md"))
        PosixPath('docs/intro.html')
    """
    return path.with_suffix(HTML_SUFFIX)
