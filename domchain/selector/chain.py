"""
Selector chain for domchain.

A fluent, lazily evaluated query over the live document. Composition
methods only record steps; every terminal method replays the whole chain
against the current state of the page, so results follow content that is
rendered late (e.g. after a backend response arrives).
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from domchain.config.options import ChainOptions
from domchain.errors import InvalidArgumentError
from domchain.interfaces import DocumentAccess, ElementInspection
from domchain.selector.steps import (
    Find,
    Nth,
    Parent,
    Query,
    Step,
    WithExactText,
    WithText,
    WithValue,
    run_steps,
)

logger = logging.getLogger(__name__)


class SelectorChain:
    """Replayable chain of DOM query steps.

    Example:
        chain = select("#list", document).find(".item").with_text("Done")

        assert await chain.count() == 2
        assert await chain.exists()

        last = await select("#list", document).find(".item").nth(-1).get_first_or_none()

    The chain is append-only: composition methods add exactly one step and
    return the same instance. Use :meth:`clone` to branch a chain from two
    call sites without sharing steps.
    """

    def __init__(
        self,
        selector: str,
        document: DocumentAccess,
        inspector: Optional[ElementInspection] = None,
        *,
        options: Optional[ChainOptions] = None,
    ) -> None:
        """Initialize SelectorChain.

        Args:
            selector: Selector run against the whole document.
            document: Document access collaborator.
            inspector: Element inspection collaborator. Defaults to
                ``document`` when it also implements ElementInspection.
            options: Chain options.

        Raises:
            InvalidArgumentError: If selector is empty or no inspector is
                available.
        """
        if not isinstance(selector, str) or not selector.strip():
            raise InvalidArgumentError("Selector cannot be empty")

        if inspector is None:
            if not isinstance(document, ElementInspection):
                raise InvalidArgumentError(
                    "An ElementInspection is required when the document does not provide one"
                )
            inspector = document

        self._document = document
        self._inspector = inspector
        self._options = options or ChainOptions()
        self._steps: list[Step] = [Query(selector)]

    @property
    def steps(self) -> tuple[Step, ...]:
        """Recorded steps, in execution order."""
        return tuple(self._steps)

    @property
    def document(self) -> DocumentAccess:
        return self._document

    @property
    def inspector(self) -> ElementInspection:
        return self._inspector

    def _append(self, step: Step) -> "SelectorChain":
        self._steps.append(step)
        return self

    @staticmethod
    def _require(value: Any, name: str) -> None:
        if value is None:
            raise InvalidArgumentError(f"{name} cannot be None")

    # Composition

    def find(self, selector: str) -> "SelectorChain":
        """Find, within every element of the previous step, all descendants matching selector.

        Args:
            selector: Selector string.

        Returns:
            Self for chaining.
        """
        self._require(selector, "selector")
        return self._append(Find(selector))

    def with_text(self, text: str) -> "SelectorChain":
        """Keep, from the previous step, the elements whose text contains ``text``.

        Args:
            text: Substring to look for.

        Returns:
            Self for chaining.
        """
        self._require(text, "text")
        return self._append(WithText(text))

    def with_exact_text(self, text: str) -> "SelectorChain":
        """Keep, from the previous step, the elements whose text is exactly ``text``."""
        self._require(text, "text")
        return self._append(WithExactText(text))

    def with_value(self, text: str) -> "SelectorChain":
        """Keep, from the previous step, the elements whose value contains ``text``.

        Args:
            text: Substring to look for.

        Returns:
            Self for chaining.
        """
        self._require(text, "text")
        return self._append(WithValue(text))

    def parent(self) -> "SelectorChain":
        """Replace every element of the previous step by its parent."""
        return self._append(Parent())

    def nth(self, index: int) -> "SelectorChain":
        """Take the nth element found at the previous step.

        Args:
            index: 1-based index. Negative values count from the end.

        Returns:
            Self for chaining.

        Example:
            nth(1): take the first element found at previous step.
            nth(-1): take the last element found at previous step.

        An index of 0 is accepted here but makes every terminal call raise
        InvalidArgumentError.
        """
        self._require(index, "index")
        return self._append(Nth(index))

    def clone(self) -> "SelectorChain":
        """Create an independent chain with a copy of the current steps."""
        copy = SelectorChain.__new__(SelectorChain)
        copy._document = self._document
        copy._inspector = self._inspector
        copy._options = self._options
        copy._steps = list(self._steps)
        return copy

    # Terminal operations

    async def _execute(self) -> list[Any]:
        if self._options.log_steps:
            logger.debug(f"Running {self.to_string()!r}")
        return await run_steps(
            self._steps,
            self._document,
            self._inspector,
            log_steps=self._options.log_steps,
        )

    async def get_handles(self) -> list[Any]:
        """Execute the search.

        The result may differ from one execution to another, especially if
        the targeted element is rendered late.

        Returns:
            All found elements, empty list if none.
        """
        return await self._execute()

    async def get_first_or_none(self) -> Optional[Any]:
        """Execute the search and return the first found element.

        Returns:
            First found element or None.
        """
        handles = await self._execute()
        if not handles:
            return None
        return handles[0]

    async def count(self) -> int:
        """Get the number of found elements, 0 if none."""
        return len(await self._execute())

    async def is_visible(self) -> bool:
        """Check if the selector is visible.

        If the selector targets multiple elements, only the first one found
        is checked. Returns False when nothing is found.
        """
        handles = await self.get_handles()
        if not handles:
            return False
        return await self._inspector.is_visible(handles[0])

    async def all_visible(self) -> bool:
        """Check that something is found and every found element is visible."""
        handles = await self.get_handles()
        if not handles:
            return False
        for handle in handles:
            if not await self._inspector.is_visible(handle):
                return False
        return True

    async def is_disabled(self) -> bool:
        """Check if the selector is disabled.

        Only the first element found is checked. When nothing is found the
        inspector decides, which for the bundled backends means False.
        """
        handle = await self.get_first_or_none()
        return await self._inspector.is_disabled(handle)

    async def is_checked(self) -> bool:
        """Check if the first element found is checked. False when nothing is found."""
        handle = await self.get_first_or_none()
        if handle is None:
            return False
        return await self._inspector.is_checked(handle)

    async def exists(self) -> bool:
        """Check if the selector matches at least one element."""
        handle = await self.get_first_or_none()
        return handle is not None

    async def not_exists(self) -> bool:
        """Check if the selector matches no element."""
        return not await self.exists()

    async def get_text(self) -> Optional[str]:
        """Get the rendered text of the first element found, None if nothing is found."""
        handle = await self.get_first_or_none()
        if handle is None:
            return None
        return await self._inspector.text_of(handle)

    async def get_value(self) -> Optional[str]:
        """Get the value of the first element found, None if nothing is found."""
        handle = await self.get_first_or_none()
        if handle is None:
            return None
        return await self._inspector.value_of(handle)

    async def get_attribute(self, name: str) -> Optional[str]:
        """Get an attribute of the first element found.

        Args:
            name: Attribute name.

        Returns:
            Attribute value, None if nothing is found or the attribute is absent.
        """
        self._require(name, "name")
        handle = await self.get_first_or_none()
        if handle is None:
            return None
        return await self._inspector.attribute_of(handle, name)

    async def has_attribute(self, name: str, value: Optional[str] = None) -> bool:
        """Check if the first element found has an attribute.

        Args:
            name: Attribute name.
            value: When given, the attribute must also equal this value.

        Returns:
            True if the attribute is present (with the expected value).
        """
        actual = await self.get_attribute(name)
        if actual is None:
            return False
        if value is None:
            return True
        return actual == value

    async def has_class(self, class_name: str) -> bool:
        """Check if the first element found has a CSS class."""
        self._require(class_name, "class_name")
        classes = await self.get_attribute("class")
        if classes is None:
            return False
        return class_name in classes.split()

    # Diagnostics

    def to_string(self) -> str:
        """Describe how the chain was built, one step per line."""
        lines = [step.describe() for step in self._steps]
        return f"\n{self._options.trace_indent}".join(lines)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"<SelectorChain {' '.join(step.describe() for step in self._steps)}>"


def select(
    selector: str,
    document: DocumentAccess,
    inspector: Optional[ElementInspection] = None,
    options: Optional[ChainOptions] = None,
) -> SelectorChain:
    """Start a new selector chain.

    Args:
        selector: Selector run against the whole document.
        document: Document access collaborator.
        inspector: Element inspection collaborator.
        options: Chain options.

    Returns:
        A SelectorChain.
    """
    return SelectorChain(selector, document, inspector, options=options)


__all__ = [
    "SelectorChain",
    "select",
]
