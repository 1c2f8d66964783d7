"""Extended markdown processing for Outline.

Markdown is parsed with mistune into a block token stream. Before the
stream is rendered, a table of construct handlers is applied to it: the
heading handler assigns anchor ids and records table of contents entries,
the code block handler swaps in Pygments-highlighted HTML. Every other
construct is rendered by mistune's stock HTML renderer.

Key names:
- ExtendedMarkdown: Parses a body once and exposes its TOC and HTML.
- AnchorRegistry: Hands out unique heading anchor ids.
- default_handlers: Builds the standard handler table.
"""

from __future__ import annotations

import html
import logging
import re
from typing import Any

import mistune
from mistune.util import striptags
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from .content import Heading
from .protocols import ConstructHandler

logger = logging.getLogger(__name__)

MARKDOWN_PLUGINS = ["strikethrough", "footnotes", "table", "url"]
DEFAULT_ANCHOR = "section"
HIGHLIGHT_CSS_CLASS = "highlight"

HandlerTable = dict[str, ConstructHandler]


def generate_heading_id(text: str) -> str:
    """Generate a URL-friendly ID from heading text.

    Args:
        text: The heading text.

    Returns:
        URL-friendly slug suitable for anchor links. Text with no word
        characters yields ``"section"``.
    """
    slug = text.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[-\s]+", "-", slug)
    return slug.strip("-") or DEFAULT_ANCHOR


class AnchorRegistry:
    """Assigns anchor ids that are unique within one document.

    The first heading with a given slug keeps it; repeats get ``-1``,
    ``-2`` and so on, skipping any id already handed out.
    """

    def __init__(self):
        self._counts: dict[str, int] = {}
        self._used: set[str] = set()

    def assign(self, text: str) -> str:
        base = generate_heading_id(text)
        count = self._counts.get(base, 0)
        anchor = base
        while anchor in self._used:
            count += 1
            anchor = f"{base}-{count}"
        self._counts[base] = count
        self._used.add(anchor)
        return anchor


def handle_heading(
    processor: ExtendedMarkdown, token: dict[str, Any], env: dict[str, Any]
) -> dict[str, Any]:
    """Attach an anchor id to a heading and record it for the TOC."""
    attrs = token.setdefault("attrs", {})
    text = processor.plain_text(token.get("text", ""), env)
    anchor = processor.anchors.assign(text)
    attrs["id"] = anchor
    processor.headings.append(Heading(id=anchor, text=text, level=attrs["level"]))
    return token


def handle_block_code(
    processor: ExtendedMarkdown, token: dict[str, Any], env: dict[str, Any]
) -> dict[str, Any]:
    """Replace a fenced code block that names a language with highlighted HTML.

    Blocks without a language, or naming one Pygments does not know,
    are left for the standard renderer.
    """
    info = (token.get("attrs") or {}).get("info")
    if not info:
        return token
    language = info.split()[0]
    try:
        lexer = get_lexer_by_name(language, stripall=True)
    except ClassNotFound:
        logger.debug("No lexer for %r; rendering plain code block", language)
        return token
    formatter = HtmlFormatter(cssclass=HIGHLIGHT_CSS_CLASS)
    return {"type": "block_html", "raw": highlight(token["raw"], lexer, formatter)}


def default_handlers() -> HandlerTable:
    """Return a fresh copy of the standard construct handler table."""
    return {
        "heading": handle_heading,
        "block_code": handle_block_code,
    }


def _without_footnote_refs(tokens: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Drop footnote reference markers from inline tokens."""
    kept = []
    for token in tokens:
        if token["type"] == "footnote_ref":
            continue
        children = token.get("children")
        if isinstance(children, list):
            token = {**token, "children": _without_footnote_refs(children)}
        kept.append(token)
    return kept


class ExtendedMarkdown:
    """Markdown processor with table of contents extraction.

    The body is parsed a single time, on first access; both accessors
    read from that one parse.

    Attributes:
        text: Markdown source.
        handlers: Construct handlers keyed by mistune block token type.
        headings: Headings recorded while parsing, in document order.
        anchors: Registry of anchor ids used in this document.
    """

    def __init__(self, text: str, handlers: HandlerTable | None = None):
        """Initialize the processor.

        Args:
            text: Markdown body to process.
            handlers: Optional handler table; defaults to default_handlers().
        """
        self.text = text
        self.handlers = dict(handlers) if handlers is not None else default_handlers()
        self.headings: list[Heading] = []
        self.anchors = AnchorRegistry()
        self._html: str | None = None
        self._markdown = mistune.create_markdown(
            escape=False, plugins=MARKDOWN_PLUGINS
        )
        self._markdown.before_render_hooks.append(self._apply_handlers)

    def table_of_contents(self) -> list[Heading]:
        """Return the headings of the document in order."""
        self._render()
        return list(self.headings)

    def document(self) -> str:
        """Return the body rendered to HTML."""
        return self._render()

    def plain_text(self, source: str, env: dict[str, Any]) -> str:
        """Render inline markdown and reduce it to plain text.

        Args:
            source: Inline markdown, e.g. the text of a heading.
            env: Parser environment (reference links and the like).

        Returns:
            Text with markup removed and entities decoded.
        """
        tokens = _without_footnote_refs(self._markdown.inline(source, env))
        rendered = self._markdown.renderer(tokens, {})
        return html.unescape(striptags(rendered)).strip()

    def _render(self) -> str:
        if self._html is None:
            self._html, _ = self._markdown.parse(self.text)
            logger.debug("Rendered markdown with %d headings", len(self.headings))
        return self._html

    def _apply_handlers(self, md: mistune.Markdown, state: Any) -> None:
        self._dispatch(state.tokens, state.env)

    def _dispatch(self, tokens: list[dict[str, Any]], env: dict[str, Any]) -> None:
        for index, token in enumerate(tokens):
            handler = self.handlers.get(token["type"])
            if handler is not None:
                token = handler(self, token, env)
                tokens[index] = token
            children = token.get("children")
            if isinstance(children, list):
                self._dispatch(children, env)
