"""
Abstract collaborator interfaces for domchain.

A selector chain never touches the DOM itself. It sequences calls to two
collaborators:

- :class:`DocumentAccess` runs a selector against the whole page or against
  a list of element references.
- :class:`ElementInspection` reads the state of a single element reference.

Element references are opaque to the chain; each backend decides what they
are (an lxml element, a CDP remote node, ...).
"""

from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence


class DocumentAccess(ABC):
    """Capability to query elements in the page."""

    @abstractmethod
    async def query_all(
        self,
        selector: str,
        scope: Optional[Sequence[Any]] = None,
    ) -> list[Any]:
        """Find all elements matching ``selector``.

        Args:
            selector: Selector string (see :class:`domchain.locator.Locator`).
            scope: ``None`` to search the whole page, otherwise the element
                references to search within. Results of each scope element
                are concatenated in scope order.

        Returns:
            Matching element references in document order, possibly empty.
        """
        ...


class ElementInspection(ABC):
    """Capability to read the state of a single element reference."""

    @abstractmethod
    async def is_visible(self, element: Any) -> bool:
        """Check if the element is rendered visibly."""
        ...

    @abstractmethod
    async def is_disabled(self, element: Optional[Any]) -> bool:
        """Check if the element is disabled.

        ``None`` stands for "no element" and must map to ``False``.
        """
        ...

    @abstractmethod
    async def text_of(self, element: Any) -> str:
        """Get the rendered text of the element."""
        ...

    @abstractmethod
    async def value_of(self, element: Any) -> str:
        """Get the form value of the element, empty string if it has none."""
        ...

    @abstractmethod
    async def parent_of(self, element: Any) -> Optional[Any]:
        """Get the immediate parent element, or None at the root."""
        ...

    @abstractmethod
    async def attribute_of(self, element: Any, name: str) -> Optional[str]:
        """Get an attribute value, or None if the attribute is absent."""
        ...

    @abstractmethod
    async def is_checked(self, element: Any) -> bool:
        """Check if the element (checkbox/radio) is checked."""
        ...


__all__ = [
    "DocumentAccess",
    "ElementInspection",
]
