"""Layout resolution and caching for Outline.

Layouts are Jinja2 templates. A LayoutCache reads a layout's source from
a LayoutSource on first use, compiles it, and hands back the same
compiled Layout on every later request for that name.

Key classes:
- Layout: A compiled layout; call it with a context mapping.
- LayoutCache: Resolves layout names to compiled layouts and memoizes them.
- FileLayoutSource: Reads layouts from a site's ``_layouts`` directory.
- DictLayoutSource: Serves layouts from memory.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, Template, select_autoescape
from markupsafe import Markup, escape
from pygments.formatters import HtmlFormatter

from .content import Heading
from .protocols import LayoutSource
from .renderers import HIGHLIGHT_CSS_CLASS

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_LAYOUT_PATH",
    "DictLayoutSource",
    "FileLayoutSource",
    "Layout",
    "LayoutCache",
    "LayoutNotFound",
    "create_environment",
    "pygments_css",
    "render_toc",
]

# Shipped with the package, independent of the site being built
DEFAULT_LAYOUT_PATH = Path(__file__).parent / "layouts" / "default.html.jinja"
LAYOUTS_DIR = "_layouts"
LAYOUT_EXTENSION = ".html.jinja"


class LayoutNotFound(LookupError):
    """A requested layout template does not exist.

    Attributes:
        name: Layout name, or None for the default layout.
        path: Location that was looked up, if file based.
    """

    def __init__(self, name: str | None, path: Path | None = None):
        self.name = name
        self.path = path
        label = f"'{name}'" if name else "default layout"
        where = f" at {path}" if path else ""
        super().__init__(f"Layout {label} not found{where}")


def render_toc(toc: list[Heading]) -> Markup:
    """Render a table of contents as nested HTML.

    Generates properly nested `<ul><li><a href="#id">text</a></li></ul>` structure
    based on heading levels.

    Args:
        toc: List of Heading objects in document order.

    Returns:
        Markup-safe HTML string of the nested TOC, or empty Markup if no headings.
    """
    if not toc:
        return Markup("")

    html_parts: list[str] = []
    level_stack: list[int] = []

    for heading in toc:
        level = heading.level

        # Close nested lists if going to a shallower level
        while level_stack and level_stack[-1] > level:
            level_stack.pop()
            html_parts.append("</li></ul>")

        if level_stack and level_stack[-1] == level:
            html_parts.append("</li>")
        elif not level_stack or level > level_stack[-1]:  # pragma: no branch
            html_parts.append("<ul>")
            level_stack.append(level)

        html_parts.append(
            f'<li><a href="#{escape(heading.id)}">{escape(heading.text)}</a>'
        )

    while level_stack:
        level_stack.pop()
        html_parts.append("</li></ul>")

    return Markup("".join(html_parts))


def pygments_css() -> str:
    """Return Pygments CSS styles for highlighted code blocks."""
    return HtmlFormatter().get_style_defs(f".{HIGHLIGHT_CSS_CLASS}")


def create_environment(search_path: Path | None = None) -> Environment:
    """Create the Jinja2 environment layouts are compiled in.

    Args:
        search_path: Directory used to resolve ``{% extends %}`` and
            ``{% include %}`` inside layouts.

    Returns:
        Configured Jinja2 environment.
    """
    loader = FileSystemLoader([str(search_path)]) if search_path else None
    env = Environment(
        loader=loader,
        autoescape=select_autoescape(["html", "xml", "jinja"]),
        enable_async=False,
    )
    env.globals["render_toc"] = render_toc
    env.globals["pygments_css"] = pygments_css
    return env


class Layout:
    """A compiled layout template.

    Attributes:
        name: Layout name, or None for the default layout.
        template: The compiled Jinja2 template.
    """

    def __init__(self, name: str | None, template: Template):
        self.name = name
        self.template = template

    def __call__(self, context: Mapping[str, Any]) -> str:
        """Render the layout with the given context."""
        return self.template.render(dict(context))

    def __repr__(self) -> str:
        return f"Layout({self.name!r})"


class FileLayoutSource:
    """Reads layout templates from the filesystem.

    Named layouts live in ``{layouts_dir}/{name}{extension}``; the
    default layout is a single file, by default the one packaged with
    Outline.

    Attributes:
        layouts_dir: Directory holding named layouts.
        extension: Template file extension.
        default_path: Path to the default layout.
    """

    def __init__(
        self,
        layouts_dir: Path,
        extension: str = LAYOUT_EXTENSION,
        default_path: Path | None = None,
    ):
        self.layouts_dir = layouts_dir
        self.extension = extension
        self.default_path = default_path or DEFAULT_LAYOUT_PATH

    def path_for(self, name: str | None) -> Path:
        """Return the file a layout name maps to."""
        if not name:
            return self.default_path
        return self.layouts_dir / f"{name}{self.extension}"

    def read(self, name: str | None) -> str:
        path = self.path_for(name)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise LayoutNotFound(name, path) from exc


class DictLayoutSource:
    """Serves layout templates from a mapping.

    The ``None`` key holds the default layout. ``reads`` counts lookups
    per name.
    """

    def __init__(self, layouts: Mapping[str | None, str]):
        self.layouts = dict(layouts)
        self.reads: dict[str | None, int] = {}

    def read(self, name: str | None) -> str:
        key = name or None
        self.reads[key] = self.reads.get(key, 0) + 1
        if key not in self.layouts:
            raise LayoutNotFound(key)
        return self.layouts[key]


class LayoutCache:
    """Resolves layout names to compiled layouts, compiling each once.

    The cache lives as long as the instance; nothing is invalidated.

    Attributes:
        source: Backing store layouts are read from.
        env: Jinja2 environment layouts are compiled in.
    """

    def __init__(self, source: LayoutSource, env: Environment | None = None):
        """Initialize the cache.

        Args:
            source: Backing store for layout sources.
            env: Optional Jinja2 environment; built from the source's
                layouts directory when omitted.
        """
        self.source = source
        if env is None:
            env = create_environment(getattr(source, "layouts_dir", None))
        self.env = env
        self._layouts: dict[str | None, Layout] = {}

    def resolve(self, name: str | None = None) -> Layout:
        """Return the compiled layout for a name.

        Args:
            name: Layout name; None or empty selects the default layout.

        Returns:
            The cached Layout for the name.

        Raises:
            LayoutNotFound: If the backing store has no such layout.
        """
        key = name or None
        layout = self._layouts.get(key)
        if layout is not None:
            logger.debug("Layout cache hit: %s", key or "<default>")
            return layout
        source = self.source.read(key)
        layout = Layout(key, self.env.from_string(source))
        self._layouts[key] = layout
        logger.debug("Compiled layout: %s", key or "<default>")
        return layout

    def clear(self) -> None:
        """Drop every compiled layout."""
        self._layouts.clear()

    def __contains__(self, name: object) -> bool:
        return (name or None) in self._layouts

    def __len__(self) -> int:
        return len(self._layouts)
