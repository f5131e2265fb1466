"""
Selector shortcut parser for domchain.

Backends accept the same selector strings. A selector is either handed to
the engine as CSS or translated to XPath:

- `#id`, `.class`, `div > span` and anything unprefixed -> CSS
- `css:selector` or `c:selector` -> explicit CSS
- `t:tag` or `tag:tag` -> tag name (CSS)
- `@attr=value`, `@attr`, `@attr^=value`, `@attr$=value`, `@attr*=value`
  -> CSS attribute selector
- `x:xpath` or `xpath:xpath` -> explicit XPath
- `/xpath`, `//xpath`, `(xpath)`, `.//xpath` -> auto-detected XPath
- `text:content` or `tx:content` -> elements whose own text contains content
- `text=content` -> elements whose own text equals content
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache

from cssselect import HTMLTranslator
from cssselect.parser import SelectorError

from domchain.errors import InvalidArgumentError

_translator = HTMLTranslator()


class SelectorKind(str, Enum):
    """Query language a parsed selector is expressed in."""

    CSS = "css"
    XPATH = "xpath"


@dataclass(frozen=True)
class ParsedLocator:
    """Selector resolved to a query language and expression."""

    kind: SelectorKind
    value: str
    original: str

    @property
    def is_xpath(self) -> bool:
        return self.kind == SelectorKind.XPATH

    def relative_xpath(self) -> str:
        """XPath rewritten to search below a context node.

        Absolute expressions (``//div``, ``/html/body``) are anchored on the
        context node so scoped queries only return descendants. Every branch
        of a union (``//p | //span``) is anchored.
        """
        if not self.is_xpath:
            raise InvalidArgumentError(f"Not an XPath selector: {self.original}")
        return _anchor(self.value)

    def scoped_xpath(self) -> str:
        """XPath searching the descendants of a context node, for CSS or XPath."""
        if self.is_xpath:
            return self.relative_xpath()
        return css_to_xpath(self.value, "descendant::")


def _top_level(xpath: str):
    """Yield (index, char) for characters outside brackets, parens and literals."""
    depth = 0
    quote = None
    for i, ch in enumerate(xpath):
        if quote:
            if ch == quote:
                quote = None
        elif ch in "\"'":
            quote = ch
        elif ch in "[(":
            depth += 1
        elif ch in "])":
            depth -= 1
        elif depth == 0:
            yield i, ch


def _anchor(xpath: str) -> str:
    branches = []
    start = 0
    for i, ch in _top_level(xpath):
        if ch == "|":
            branches.append(xpath[start:i])
            start = i + 1
    branches.append(xpath[start:])
    if len(branches) > 1:
        return " | ".join(_anchor_path(branch.strip()) for branch in branches)
    return _anchor_path(xpath.strip())


def _anchor_path(xpath: str) -> str:
    if xpath.startswith("."):
        return xpath
    if xpath.startswith("("):
        # (//a)[1] -> (.//a)[1]
        close = _closing_paren(xpath)
        return "(" + _anchor(xpath[1:close]) + xpath[close:]
    if xpath.startswith("//"):
        return "." + xpath
    if xpath.startswith("/"):
        return ".//" + xpath[1:]
    return ".//" + xpath


def _closing_paren(xpath: str) -> int:
    depth = 0
    quote = None
    for i, ch in enumerate(xpath):
        if quote:
            if ch == quote:
                quote = None
        elif ch in "\"'":
            quote = ch
        elif ch in "[(":
            depth += 1
        elif ch in "])":
            depth -= 1
            if depth == 0:
                return i
    raise InvalidArgumentError(f"Unbalanced parentheses in XPath {xpath!r}")


@lru_cache(maxsize=256)
def css_to_xpath(css: str, prefix: str = "descendant-or-self::") -> str:
    """Translate a CSS selector to XPath with cssselect."""
    try:
        return _translator.css_to_xpath(css, prefix=prefix)
    except SelectorError as e:
        raise InvalidArgumentError(f"Invalid CSS selector {css!r}: {e}") from e


class Locator:
    """Parser for selector shortcuts.

    Example:
        >>> Locator.parse('#submit')
        ParsedLocator(kind=<SelectorKind.CSS: 'css'>, value='#submit', original='#submit')
        >>> Locator.parse('@name=email').value
        '[name="email"]'
        >>> Locator.parse('text:Login').value
        '//*[contains(text(), "Login")]'
    """

    _CSS_PREFIXES = ("css:", "c:")
    _XPATH_PREFIXES = ("xpath:", "x:")
    _TAG_PREFIXES = ("tag:", "t:")
    _TEXT_PREFIXES = ("text:", "tx:")
    _ATTR_OPERATORS = ("^=", "$=", "*=", "~=", "|=", "=")

    @classmethod
    def parse(cls, selector: str) -> ParsedLocator:
        """Parse a selector string.

        Args:
            selector: Selector string.

        Returns:
            ParsedLocator with the query language and expression.

        Raises:
            InvalidArgumentError: If selector is empty.
        """
        if not selector or not selector.strip():
            raise InvalidArgumentError("Selector cannot be empty")

        original = selector
        selector = selector.strip()
        lowered = selector.lower()

        for prefix in cls._CSS_PREFIXES:
            if lowered.startswith(prefix):
                return cls._css(selector[len(prefix):].strip(), original)

        for prefix in cls._XPATH_PREFIXES:
            if lowered.startswith(prefix):
                return cls._xpath(selector[len(prefix):].strip(), original)

        for prefix in cls._TAG_PREFIXES:
            if lowered.startswith(prefix):
                return cls._css(selector[len(prefix):].strip(), original)

        for prefix in cls._TEXT_PREFIXES:
            if lowered.startswith(prefix):
                text = selector[len(prefix):].strip()
                return cls._xpath(
                    f"//*[contains(text(), {cls.escape_text(text)})]", original
                )

        if selector.startswith("text="):
            text = selector[5:].strip()
            return cls._xpath(f"//*[text()={cls.escape_text(text)}]", original)

        if selector.startswith(("/", "(", ".//")):
            return cls._xpath(selector, original)

        if selector.startswith("@"):
            return cls._css(cls._attribute_css(selector[1:]), original)

        return cls._css(selector, original)

    @classmethod
    def _attribute_css(cls, attr_str: str) -> str:
        """Convert ``attr=value`` style shortcuts to a CSS attribute selector."""
        for op in cls._ATTR_OPERATORS:
            if op in attr_str:
                name, value = attr_str.split(op, 1)
                value = value.strip().strip('"').strip("'")
                return f'[{name.strip()}{op}"{value}"]'
        return f"[{attr_str.strip()}]"

    @staticmethod
    def _css(value: str, original: str) -> ParsedLocator:
        if not value:
            raise InvalidArgumentError(f"Selector cannot be empty: {original!r}")
        return ParsedLocator(kind=SelectorKind.CSS, value=value, original=original)

    @staticmethod
    def _xpath(value: str, original: str) -> ParsedLocator:
        if not value:
            raise InvalidArgumentError(f"Selector cannot be empty: {original!r}")
        return ParsedLocator(kind=SelectorKind.XPATH, value=value, original=original)

    @staticmethod
    def is_xpath(selector: str) -> bool:
        """Check if selector will be evaluated as XPath."""
        return Locator.parse(selector).is_xpath

    @staticmethod
    def escape_text(text: str) -> str:
        """Quote text as an XPath string literal.

        Args:
            text: Text to quote.

        Returns:
            XPath literal, using concat() when text holds both quote kinds.
        """
        if '"' not in text:
            return f'"{text}"'
        if "'" not in text:
            return f"'{text}'"
        parts = text.split('"')
        return "concat(" + ", '\"', ".join(f'"{part}"' for part in parts) + ")"


__all__ = [
    "css_to_xpath",
    "Locator",
    "ParsedLocator",
    "SelectorKind",
]
