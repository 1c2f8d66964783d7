"""Site building functionality for Outline.

This module turns the markdown files of a site directory into HTML pages.
It loads configuration, splits front matter, renders markdown, applies
layouts, and writes one ``.html`` file next to each ``.md`` source.

Key names:
- PageGenerator: Renders a single source file through its layout.
- clean: Removes generated HTML files from the site directory.
- generate_site: Cleans, then generates every page.
- load_config: Loads site configuration from outline.yaml.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from jinja2 import TemplateSyntaxError, UndefinedError
from markupsafe import Markup

from .content import Heading, SourceDocument, load_document
from .extractors import FrontMatterParseError
from .renderers import ExtendedMarkdown
from .templates import (
    LAYOUT_EXTENSION,
    LAYOUTS_DIR,
    FileLayoutSource,
    LayoutCache,
    LayoutNotFound,
)
from .utils import is_html, is_markdown, output_path_for

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "outline.yaml"
DEFAULT_TITLE = "An Outline Generated HTML page."

DEFAULT_CONFIG: dict[str, Any] = {
    "layouts_dir": LAYOUTS_DIR,
    "layout_extension": LAYOUT_EXTENSION,
    "default_layout": "",
    "default_title": DEFAULT_TITLE,
    "strict_frontmatter": False,
    "keep_going": False,
}


class BuildError(Exception):
    """Error during site build with file context.

    Attributes:
        source_path: Path to the source file that caused the error.
        message: Human-readable error message.
        original_error: The original exception that was caught.
    """

    def __init__(
        self,
        source_path: Path,
        message: str,
        original_error: Exception | None = None,
    ):
        self.source_path = source_path
        self.message = message
        self.original_error = original_error
        super().__init__(f"{source_path}: {message}")


@dataclass
class CleanResult:
    """Outcome of removing generated HTML files.

    Attributes:
        removed: Files that were deleted.
        failed: (path, error) pairs for files that could not be deleted.
    """

    removed: list[Path] = field(default_factory=list)
    failed: list[tuple[Path, OSError]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


@dataclass
class BuildResult:
    """Result of a site build operation.

    Attributes:
        root: Directory that was built.
        written: Output files written, in generation order.
        skipped: Entries that were not markdown sources.
        errors: Per-file failures collected when running with keep_going.
        cleaned: Result of the clean step that preceded generation.
    """

    root: Path
    written: list[Path] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)
    errors: list[BuildError] = field(default_factory=list)
    cleaned: CleanResult = field(default_factory=CleanResult)

    @property
    def ok(self) -> bool:
        return not self.errors


def load_config(project_root: Path) -> dict[str, Any]:
    """Load site configuration from outline.yaml.

    Args:
        project_root: Root directory of the site.

    Returns:
        Dictionary containing configuration values, with defaults applied.
    """
    config_path = project_root / CONFIG_FILENAME
    config = DEFAULT_CONFIG.copy()
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
            if isinstance(loaded, dict):
                config.update(loaded)
            else:
                logger.warning("Ignoring %s: not a mapping", config_path)
    return config


def build_context(
    document: SourceDocument,
    toc: list[Heading],
    body: str,
    default_title: str = DEFAULT_TITLE,
) -> dict[str, Any]:
    """Build the template context for a page.

    Front matter keys come first; ``title``, ``toc`` and ``body`` are
    always set by the generator and win over same-named keys.

    Args:
        document: The source document.
        toc: Table of contents entries.
        body: Rendered body HTML.
        default_title: Title used when the front matter has none.

    Returns:
        Context mapping for the layout.
    """
    # YAML allows non-string keys (dates, numbers); templates need names
    context = {str(key): value for key, value in document.frontmatter.items()}
    context.update(
        title=document.title or default_title,
        toc=toc,
        body=Markup(body),
    )
    return context


class PageGenerator:
    """Generates HTML pages from markdown sources.

    Owns the layout cache, so layouts are compiled once per generator.

    Attributes:
        root: Site directory; layouts are looked up relative to it.
        config: Site configuration.
        layouts: Layout cache used to resolve layout names.
    """

    def __init__(
        self,
        root: Path,
        config: dict[str, Any] | None = None,
        layouts: LayoutCache | None = None,
    ):
        """Initialize the generator.

        Args:
            root: Site directory.
            config: Optional configuration; loaded from the site when omitted.
            layouts: Optional layout cache; file based when omitted.
        """
        self.root = root
        self.config = config if config is not None else load_config(root)
        self.layouts = (
            layouts if layouts is not None else LayoutCache(self._layout_source())
        )

    def _layout_source(self) -> FileLayoutSource:
        default_layout = self.config.get("default_layout")
        return FileLayoutSource(
            self.root / self.config.get("layouts_dir", LAYOUTS_DIR),
            extension=self.config.get("layout_extension", LAYOUT_EXTENSION),
            default_path=Path(default_layout) if default_layout else None,
        )

    def render(self, document: SourceDocument) -> str:
        """Render a source document through its layout.

        Args:
            document: Document to render.

        Returns:
            Rendered HTML page.

        Raises:
            LayoutNotFound: If the document names a missing layout.
        """
        processor = ExtendedMarkdown(document.body)
        toc = processor.table_of_contents()
        body = processor.document()
        layout = self.layouts.resolve(document.layout)
        context = build_context(
            document,
            toc,
            body,
            default_title=self.config.get("default_title", DEFAULT_TITLE),
        )
        return layout(context)

    def generate(self, path: Path) -> Path | None:
        """Generate the HTML page for one source file.

        Non-markdown files are skipped.

        Args:
            path: Source file.

        Returns:
            Path of the written HTML file, or None if the file was skipped.
        """
        if not is_markdown(path):
            logger.debug("Skipping %s", path)
            return None
        document = load_document(
            path, strict=bool(self.config.get("strict_frontmatter"))
        )
        rendered = self.render(document)
        target = output_path_for(path)
        with open(target, "w", encoding="utf-8") as f:
            f.write(rendered)
        logger.debug("Wrote %s", target)
        return target


def clean(root: Path) -> CleanResult:
    """Delete the HTML files at the top level of a site directory.

    Deletion failures are recorded in the result rather than raised.

    Args:
        root: Site directory.

    Returns:
        CleanResult listing removed and failed files.
    """
    result = CleanResult()
    for path in sorted(root.iterdir()):
        if not is_html(path) or path.is_dir():
            continue
        try:
            path.unlink()
        except OSError as exc:
            logger.warning("Could not remove %s: %s", path, exc)
            result.failed.append((path, exc))
        else:
            result.removed.append(path)
    return result


def generate_site(
    root: Path,
    config: dict[str, Any] | None = None,
    keep_going: bool | None = None,
    generator: PageGenerator | None = None,
) -> BuildResult:
    """Clean a site directory and generate every page in it.

    Args:
        root: Site directory.
        config: Optional configuration; loaded from the site when omitted.
        keep_going: Collect per-file errors and continue instead of
            stopping at the first one. Defaults to the config value.
        generator: Optional page generator to use.

    Returns:
        BuildResult describing the run.

    Raises:
        BuildError: On the first failing file, unless keep_going.
    """
    config = config if config is not None else load_config(root)
    if keep_going is None:
        keep_going = bool(config.get("keep_going"))
    if generator is None:
        generator = PageGenerator(root, config=config)

    result = BuildResult(root=root)
    result.cleaned = clean(root)
    for path in sorted(root.iterdir()):
        if not path.is_file():
            result.skipped.append(path)
            continue
        try:
            target = generator.generate(path)
        except Exception as exc:
            error = BuildError(path, _format_error_message(exc), exc)
            if not keep_going:
                raise error from exc
            logger.warning("%s", error)
            result.errors.append(error)
            continue
        if target is None:
            result.skipped.append(path)
        else:
            result.written.append(target)
    logger.info(
        "Generated %d pages (%d skipped, %d failed)",
        len(result.written),
        len(result.skipped),
        len(result.errors),
    )
    return result


def _format_error_message(exc: Exception) -> str:
    """Format an exception into a user-friendly error message.

    Args:
        exc: The exception to format.

    Returns:
        A human-readable error message.
    """
    if isinstance(exc, LayoutNotFound):
        return str(exc)
    if isinstance(exc, TemplateSyntaxError):
        return f"Template syntax error on line {exc.lineno}: {exc.message}"
    if isinstance(exc, UndefinedError):
        return f"Undefined variable: {exc}"
    if isinstance(exc, FrontMatterParseError):
        return exc.reason

    error_type = type(exc).__name__
    error_msg = str(exc)

    return f"{error_type}: {error_msg}"
