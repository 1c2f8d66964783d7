"""Protocol definitions for Outline.

These interfaces keep the page generator independent of where layouts
come from and of which markdown constructs get special treatment, so
tests can swap in in-memory stores and handlers.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .renderers import ExtendedMarkdown


@runtime_checkable
class LayoutSource(Protocol):
    """Protocol for reading raw layout template source.

    Implementations back a LayoutCache. A ``None`` name asks for the
    default layout.
    """

    @abstractmethod
    def read(self, name: str | None) -> str:
        """Return the template source of a layout.

        Args:
            name: Layout name, or None for the default layout.

        Returns:
            Template source text.

        Raises:
            LayoutNotFound: If the layout does not exist.
        """
        ...


@runtime_checkable
class ConstructHandler(Protocol):
    """Protocol for a markdown construct handler.

    Handlers receive one parsed block token and return the token to
    render in its place (the same dict, a modified one, or a new one).
    """

    def __call__(
        self, processor: ExtendedMarkdown, token: dict[str, Any], env: dict[str, Any]
    ) -> dict[str, Any]: ...
