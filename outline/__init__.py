"""Outline static site generator.

Outline turns a directory of markdown files, each with optional YAML front
matter, into HTML pages rendered through Jinja2 layouts. Every page gets a
table of contents built from its headings.

The main entry points are ``outline.build.generate_site`` and the CLI
module, which wraps it in ``build`` and ``clean`` commands.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
