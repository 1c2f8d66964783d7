"""Front matter extraction for Outline.

A source document may open with a YAML block fenced by ``---`` lines::

    ---
    title: Getting Started
    layout: guide
    ---
    # Body starts here

``split_frontmatter`` separates that block from the markdown body. Text
without a complete block is returned unchanged as the body.
"""

from __future__ import annotations

import logging
from typing import Any

import yaml

logger = logging.getLogger(__name__)

FRONTMATTER_DELIMITER = "---"
_OPENING = FRONTMATTER_DELIMITER + "\n"
_CLOSING = "\n" + FRONTMATTER_DELIMITER + "\n"


class FrontMatterParseError(ValueError):
    """Front matter block is not a valid YAML mapping.

    Attributes:
        source: The raw text between the delimiters.
        reason: Human-readable description of the failure.
    """

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Invalid front matter: {reason}")


def split_frontmatter(text: str, strict: bool = False) -> tuple[dict[str, Any], str]:
    """Split YAML front matter from the document body.

    The opening delimiter must be the very first line. The closing
    delimiter is the first ``---`` line after it; the body starts right
    after that line's newline.

    Args:
        text: Raw file content.
        strict: Raise on a malformed block instead of degrading to
            empty metadata.

    Returns:
        Tuple of (front matter dict, body text).

    Raises:
        FrontMatterParseError: If ``strict`` and the block is not a mapping.
    """
    end = text.find(_CLOSING)
    if not text.startswith(_OPENING) or end == -1:
        return {}, text

    source = text[len(_OPENING) : end + 1]
    body = text[end + len(_CLOSING) :]
    try:
        return _parse_block(source), body
    except FrontMatterParseError as exc:
        if strict:
            raise
        logger.warning("%s; using empty front matter", exc)
        return {}, body


def _parse_block(source: str) -> dict[str, Any]:
    """Parse the text between the delimiters into a mapping."""
    try:
        data = yaml.safe_load(source)
    except yaml.YAMLError as exc:
        raise FrontMatterParseError(source, str(exc)) from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise FrontMatterParseError(
            source, f"expected a mapping, got {type(data).__name__}"
        )
    return data
