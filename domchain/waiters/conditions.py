"""
Wait conditions for domchain.

Conditions wrap a terminal operation of a selector chain. Each check
replays the chain, so polling a condition follows the live document.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Union

if TYPE_CHECKING:
    from domchain.selector.chain import SelectorChain


def is_satisfied(result: Any) -> bool:
    """Check a condition result. Only None and False mean not satisfied.

    Element references may be falsy (an lxml element without children is),
    so results are never tested for truth.
    """
    return result is not None and result is not False


class WaitCondition(ABC):
    """Abstract base class for wait conditions.

    A wait condition is a predicate that can be polled until it returns a
    value other than None or False.
    """

    @abstractmethod
    async def check(self) -> Any:
        """Check if the condition is satisfied.

        Returns:
            False/None if not satisfied, any other value (such as the
            element found) if satisfied.
        """
        ...

    @property
    def description(self) -> str:
        """Human-readable description of the condition."""
        return self.__class__.__name__


class ChainCondition(WaitCondition):
    """Condition on the result of a selector chain."""

    expectation = "to be satisfied"

    def __init__(self, chain: "SelectorChain") -> None:
        self._chain = chain

    @property
    def chain(self) -> "SelectorChain":
        return self._chain

    @property
    def description(self) -> str:
        return f"{self._chain} {self.expectation}"


class ChainExists(ChainCondition):
    """Wait for the chain to match at least one element."""

    expectation = "to exist"

    async def check(self) -> Any:
        return await self._chain.get_first_or_none()


class ChainNotExists(ChainCondition):
    """Wait for the chain to match nothing."""

    expectation = "to not exist"

    async def check(self) -> bool:
        return await self._chain.not_exists()


class ChainVisible(ChainCondition):
    """Wait for the first match to be visible."""

    expectation = "to be visible"

    async def check(self) -> bool:
        return await self._chain.is_visible()


class ChainHidden(ChainCondition):
    """Wait for the first match to be hidden or gone."""

    expectation = "to be hidden"

    async def check(self) -> bool:
        return not await self._chain.is_visible()


class ChainEnabled(ChainCondition):
    """Wait for the first match to be enabled."""

    expectation = "to be enabled"

    async def check(self) -> bool:
        return await self._chain.exists() and not await self._chain.is_disabled()


class ChainDisabled(ChainCondition):
    """Wait for the first match to be disabled."""

    expectation = "to be disabled"

    async def check(self) -> bool:
        return await self._chain.is_disabled()


class ChainCountEquals(ChainCondition):
    """Wait for the chain to match exactly ``count`` elements."""

    def __init__(self, chain: "SelectorChain", count: int) -> None:
        super().__init__(chain)
        self._count = count

    async def check(self) -> bool:
        return await self._chain.count() == self._count

    @property
    def expectation(self) -> str:  # type: ignore[override]
        return f"to match {self._count} element(s)"


class ChainTextContains(ChainCondition):
    """Wait for the text of the first match to contain a substring."""

    def __init__(self, chain: "SelectorChain", text: str) -> None:
        super().__init__(chain)
        self._text = text

    async def check(self) -> bool:
        text = await self._chain.get_text()
        return text is not None and self._text in text

    @property
    def expectation(self) -> str:  # type: ignore[override]
        return f"to contain text '{self._text}'"


# Custom Condition

class CustomCondition(WaitCondition):
    """Wait for a custom predicate (sync or async) to return a truthy value."""

    def __init__(
        self,
        predicate: Callable[[], Union[bool, Any]],
        description: str = "custom condition",
    ) -> None:
        self._predicate = predicate
        self._description = description

    async def check(self) -> Any:
        result = self._predicate()
        if asyncio.iscoroutine(result):
            return await result
        return result

    @property
    def description(self) -> str:
        return self._description


# Composite Conditions

class AllConditions(WaitCondition):
    """Wait for all conditions to be satisfied."""

    def __init__(self, *conditions: WaitCondition) -> None:
        self._conditions = conditions

    async def check(self) -> bool:
        for condition in self._conditions:
            if not is_satisfied(await condition.check()):
                return False
        return True

    @property
    def description(self) -> str:
        return " and ".join(c.description for c in self._conditions)


class AnyCondition(WaitCondition):
    """Wait for any condition to be satisfied."""

    def __init__(self, *conditions: WaitCondition) -> None:
        self._conditions = conditions

    async def check(self) -> Any:
        for condition in self._conditions:
            result = await condition.check()
            if is_satisfied(result):
                return result
        return False

    @property
    def description(self) -> str:
        return " or ".join(c.description for c in self._conditions)


class NotCondition(WaitCondition):
    """Negate a condition."""

    def __init__(self, condition: WaitCondition) -> None:
        self._condition = condition

    async def check(self) -> bool:
        return not is_satisfied(await self._condition.check())

    @property
    def description(self) -> str:
        return f"not ({self._condition.description})"


__all__ = [
    "is_satisfied",
    "AllConditions",
    "AnyCondition",
    "ChainCondition",
    "ChainCountEquals",
    "ChainDisabled",
    "ChainEnabled",
    "ChainExists",
    "ChainHidden",
    "ChainNotExists",
    "ChainTextContains",
    "ChainVisible",
    "CustomCondition",
    "NotCondition",
    "WaitCondition",
]
