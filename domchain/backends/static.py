"""
Static document backend for domchain.

Runs selector chains against HTML parsed with lxml. Useful for HTTP
responses, saved pages and tests. The document can be reloaded with new
markup to stand in for a page that re-renders between two chain replays.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Optional, Sequence, Union

from lxml import html
from lxml.etree import XPathError, _Element

from domchain.config.options import StaticOptions
from domchain.errors import InvalidArgumentError
from domchain.interfaces import DocumentAccess, ElementInspection
from domchain.locator import Locator, css_to_xpath

logger = logging.getLogger(__name__)

_HIDDEN_STYLE = re.compile(r"(display\s*:\s*none|visibility\s*:\s*hidden)", re.I)

_NEVER_RENDERED = frozenset(
    {"head", "script", "style", "template", "title", "meta", "link", "noscript"}
)

_FORM_CONTROLS = frozenset(
    {"button", "input", "select", "textarea", "optgroup", "option", "fieldset"}
)


def _is_element(node: Any) -> bool:
    # Comments and processing instructions are _Element too, with a non-str tag
    return isinstance(node, _Element) and isinstance(node.tag, str)


class StaticDocument(DocumentAccess, ElementInspection):
    """Document access and element inspection over an lxml tree.

    Element references are lxml ``HtmlElement`` objects. References from a
    previous :meth:`load` stay usable but belong to the old tree.

    Example:
        document = StaticDocument('<ul id="list"><li class="item">Done</li></ul>')
        chain = select("#list", document).find(".item").with_text("Done")
        assert await chain.count() == 1
    """

    def __init__(
        self,
        html_content: str = "<html><body></body></html>",
        *,
        options: Optional[StaticOptions] = None,
    ) -> None:
        """Initialize StaticDocument.

        Args:
            html_content: HTML document to parse.
            options: Backend options.
        """
        self._options = options or StaticOptions()
        self._root: _Element = html.document_fromstring(html_content)

    @classmethod
    def from_file(
        cls,
        path: Union[str, Path],
        *,
        options: Optional[StaticOptions] = None,
    ) -> "StaticDocument":
        """Create a StaticDocument from an HTML file."""
        content = Path(path).read_text(encoding="utf-8")
        return cls(content, options=options)

    @property
    def root(self) -> _Element:
        """Root ``<html>`` element of the current tree."""
        return self._root

    def load(self, html_content: str) -> None:
        """Replace the document with new markup."""
        self._root = html.document_fromstring(html_content)
        logger.debug("Static document reloaded")

    # DocumentAccess

    async def query_all(
        self,
        selector: str,
        scope: Optional[Sequence[Any]] = None,
    ) -> list[Any]:
        parsed = Locator.parse(selector)

        if scope is None:
            if parsed.is_xpath:
                return self._xpath(self._root.getroottree(), parsed.value)
            return self._xpath(self._root, css_to_xpath(parsed.value))

        # CSS is matched inside each scope element only, like scoped XPath
        expression = parsed.scoped_xpath()

        results: list[Any] = []
        for element in scope:
            results.extend(self._xpath(element, expression))
        return results

    @staticmethod
    def _xpath(context: Any, expression: str) -> list[Any]:
        try:
            nodes = context.xpath(expression)
        except XPathError as e:
            raise InvalidArgumentError(f"Invalid XPath {expression!r}: {e}") from e
        if not isinstance(nodes, list):
            raise InvalidArgumentError(
                f"XPath {expression!r} does not select elements"
            )
        return [node for node in nodes if _is_element(node)]

    # ElementInspection

    async def is_visible(self, element: Any) -> bool:
        """Heuristic visibility from markup only (no stylesheet is applied)."""
        node = element
        while node is not None:
            if node.tag in _NEVER_RENDERED:
                return False
            if node.get("hidden") is not None:
                return False
            if _HIDDEN_STYLE.search(node.get("style", "")):
                return False
            if node.tag == "input" and node.get("type", "").lower() == "hidden":
                return False
            node = node.getparent()
        return True

    async def is_disabled(self, element: Optional[Any]) -> bool:
        if element is None:
            return False
        if element.get("disabled") is not None:
            return True
        if element.tag not in _FORM_CONTROLS:
            return False
        for ancestor in element.iterancestors("fieldset"):
            if ancestor.get("disabled") is not None:
                return True
        return False

    async def text_of(self, element: Any) -> str:
        text = element.text_content()
        if self._options.normalize_whitespace:
            return " ".join(text.split())
        return text

    async def value_of(self, element: Any) -> str:
        tag = element.tag
        if tag == "textarea":
            return element.text_content()
        if tag == "select":
            selected = element.xpath(".//option[@selected]")
            options = selected or element.xpath(".//option")
            if not options:
                return ""
            option = options[0]
            value = option.get("value")
            return value if value is not None else option.text_content().strip()
        return element.get("value", "")

    async def parent_of(self, element: Any) -> Optional[Any]:
        return element.getparent()

    async def attribute_of(self, element: Any, name: str) -> Optional[str]:
        return element.get(name)

    async def is_checked(self, element: Any) -> bool:
        if element.tag == "option":
            return element.get("selected") is not None
        return element.get("checked") is not None

    def __repr__(self) -> str:
        return f"<StaticDocument {len(self._root.xpath('//*'))} elements>"


__all__ = [
    "StaticDocument",
]
