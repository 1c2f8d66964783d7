"""Content model for Outline.

Key classes:
- Heading: Dataclass representing a heading for TOC generation.
- SourceDocument: A markdown source split into front matter and body.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .extractors import split_frontmatter


@dataclass
class Heading:
    """Represents a heading extracted from markdown content for TOC generation.

    Attributes:
        id: Anchor ID for the heading (URL-friendly slug).
        text: The plain text content of the heading.
        level: Heading level (1-6).
    """

    id: str
    text: str
    level: int


@dataclass
class SourceDocument:
    """A markdown source file decomposed into metadata and body.

    Attributes:
        path: Path to the source file.
        body: Markdown text following the front matter.
        frontmatter: Parsed front matter (empty if absent or invalid).
    """

    path: Path
    body: str
    frontmatter: dict[str, Any] = field(default_factory=dict)

    @property
    def layout(self) -> str | None:
        """Layout named in the front matter, or None for the default."""
        layout = self.frontmatter.get("layout")
        return str(layout) if layout else None

    @property
    def title(self) -> str | None:
        """Title from the front matter, if any."""
        title = self.frontmatter.get("title")
        return str(title) if title else None


def load_document(path: Path, strict: bool = False) -> SourceDocument:
    """Read a source file and split off its front matter.

    Args:
        path: Markdown file to read.
        strict: Propagate front matter parse errors.

    Returns:
        SourceDocument for the file.
    """
    raw = path.read_text(encoding="utf-8")
    frontmatter, body = split_frontmatter(raw, strict=strict)
    return SourceDocument(path=path, body=body, frontmatter=frontmatter)
