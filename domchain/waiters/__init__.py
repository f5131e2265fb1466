"""
Wait System for domchain.

Selector chains never wait: each terminal call looks at the document once.
Waiters poll a chain until a condition holds or a timeout expires.

Example:
    from domchain.waiters import ChainWaiter

    waiter = ChainWaiter(select("#results", document).find(".row"))
    await waiter.until_count(3)
    first = await waiter.until_exists()
    await waiter.until_hidden(timeout=2.0)
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Any, Optional

from domchain.config.options import WaitOptions
from domchain.errors import InvalidArgumentError
from domchain.waiters.conditions import (
    AllConditions,
    AnyCondition,
    ChainCondition,
    ChainCountEquals,
    ChainDisabled,
    ChainEnabled,
    ChainExists,
    ChainHidden,
    ChainNotExists,
    ChainTextContains,
    ChainVisible,
    CustomCondition,
    NotCondition,
    WaitCondition,
    is_satisfied,
)

if TYPE_CHECKING:
    from domchain.selector.chain import SelectorChain

logger = logging.getLogger(__name__)


class WaitTimeoutError(TimeoutError):
    """Raised when a wait operation times out."""

    def __init__(self, condition: WaitCondition, timeout: float) -> None:
        self.condition = condition
        self.timeout = timeout
        super().__init__(f"Timeout {timeout}s waiting for {condition.description}")


async def wait_for(
    condition: WaitCondition,
    options: Optional[WaitOptions] = None,
    *,
    timeout: Optional[float] = None,
    polling_interval: Optional[float] = None,
) -> Any:
    """Wait for a condition to be satisfied.

    Args:
        condition: The condition to wait for.
        options: Wait options, defaults when omitted.
        timeout: Overrides ``options.timeout``.
        polling_interval: Overrides ``options.polling_interval``.

    Returns:
        The result of the satisfied check (anything but None or False).

    Raises:
        WaitTimeoutError: If the condition is not met within timeout.
        InvalidArgumentError: As soon as a check raises it.
    """
    opts = options or WaitOptions()
    timeout = timeout if timeout is not None else opts.timeout
    interval = polling_interval if polling_interval is not None else opts.polling_interval

    start_time = time.monotonic()
    last_exception: Optional[Exception] = None

    while True:
        try:
            result = await condition.check()
            if is_satisfied(result):
                logger.debug(
                    f"Condition satisfied: {condition.description} "
                    f"(elapsed: {time.monotonic() - start_time:.2f}s)"
                )
                return result
        except InvalidArgumentError:
            raise
        except Exception as e:
            if not opts.ignore_exceptions:
                raise
            last_exception = e
            logger.debug(f"Exception during wait check: {e}")

        remaining = timeout - (time.monotonic() - start_time)
        if remaining <= 0:
            raise WaitTimeoutError(condition, timeout) from last_exception
        await asyncio.sleep(min(interval, remaining))


class ChainWaiter:
    """Waits on the state of a selector chain.

    Example:
        waiter = ChainWaiter(select("#submit", document))
        await waiter.until_enabled()
        await waiter.until_text_contains("Send")
    """

    def __init__(
        self,
        chain: "SelectorChain",
        options: Optional[WaitOptions] = None,
    ) -> None:
        """Initialize chain waiter.

        Args:
            chain: The chain to poll.
            options: Default wait options.
        """
        self._chain = chain
        self._options = options or WaitOptions()

    @property
    def chain(self) -> "SelectorChain":
        return self._chain

    async def until(
        self, condition: WaitCondition, timeout: Optional[float] = None
    ) -> Any:
        """Wait for any condition using this waiter's options."""
        return await wait_for(condition, self._options, timeout=timeout)

    async def until_exists(self, timeout: Optional[float] = None) -> Any:
        """Wait for a match and return the first element found."""
        return await self.until(ChainExists(self._chain), timeout)

    async def until_not_exists(self, timeout: Optional[float] = None) -> bool:
        return await self.until(ChainNotExists(self._chain), timeout)

    async def until_visible(self, timeout: Optional[float] = None) -> bool:
        return await self.until(ChainVisible(self._chain), timeout)

    async def until_hidden(self, timeout: Optional[float] = None) -> bool:
        return await self.until(ChainHidden(self._chain), timeout)

    async def until_enabled(self, timeout: Optional[float] = None) -> bool:
        return await self.until(ChainEnabled(self._chain), timeout)

    async def until_disabled(self, timeout: Optional[float] = None) -> bool:
        return await self.until(ChainDisabled(self._chain), timeout)

    async def until_count(self, count: int, timeout: Optional[float] = None) -> bool:
        return await self.until(ChainCountEquals(self._chain, count), timeout)

    async def until_text_contains(
        self, text: str, timeout: Optional[float] = None
    ) -> bool:
        return await self.until(ChainTextContains(self._chain, text), timeout)


__all__ = [
    "ChainWaiter",
    "WaitTimeoutError",
    "wait_for",
    # Conditions
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
    "is_satisfied",
]
