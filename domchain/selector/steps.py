"""
Chain steps for domchain.

A step is an immutable description of one transformation of the candidate
set. Each step knows how to describe itself for the chain trace and how to
apply itself against the document and inspection collaborators. Replaying a
chain is a fold of its steps over an initially empty candidate set.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence

from domchain.errors import InvalidArgumentError
from domchain.interfaces import DocumentAccess, ElementInspection

logger = logging.getLogger(__name__)


class StepKind(str, Enum):
    """Kind of transformation a step performs."""

    QUERY = "query"
    FIND = "find"
    WITH_TEXT = "with_text"
    WITH_EXACT_TEXT = "with_exact_text"
    WITH_VALUE = "with_value"
    PARENT = "parent"
    NTH = "nth"


class Step(ABC):
    """Base class for chain steps."""

    kind: StepKind

    @abstractmethod
    def describe(self) -> str:
        """Trace line for this step, without indentation."""
        ...

    @abstractmethod
    async def apply(
        self,
        handles: list[Any],
        document: DocumentAccess,
        inspector: ElementInspection,
    ) -> list[Any]:
        """Transform the candidate set.

        Args:
            handles: Output of the previous step (a copy the step may keep).
            document: Document access collaborator.
            inspector: Element inspection collaborator.

        Returns:
            The new candidate set.
        """
        ...


@dataclass(frozen=True)
class Query(Step):
    """Root step: query the whole document, ignoring the incoming set."""

    selector: str
    kind = StepKind.QUERY

    def describe(self) -> str:
        return f"selector({self.selector})"

    async def apply(self, handles, document, inspector):
        return list(await document.query_all(self.selector))


@dataclass(frozen=True)
class Find(Step):
    """Query descendants of every candidate and flatten the results."""

    selector: str
    kind = StepKind.FIND

    def describe(self) -> str:
        return f".find({self.selector})"

    async def apply(self, handles, document, inspector):
        if not handles:
            return []
        return list(await document.query_all(self.selector, scope=handles))


@dataclass(frozen=True)
class WithText(Step):
    """Keep candidates whose rendered text contains ``text``."""

    text: str
    kind = StepKind.WITH_TEXT

    def describe(self) -> str:
        return f".with_text({self.text})"

    async def apply(self, handles, document, inspector):
        matches = []
        for handle in handles:
            if self.text in await inspector.text_of(handle):
                matches.append(handle)
        return matches


@dataclass(frozen=True)
class WithExactText(Step):
    """Keep candidates whose rendered text, stripped, equals ``text``."""

    text: str
    kind = StepKind.WITH_EXACT_TEXT

    def describe(self) -> str:
        return f".with_exact_text({self.text})"

    async def apply(self, handles, document, inspector):
        matches = []
        for handle in handles:
            if (await inspector.text_of(handle)).strip() == self.text:
                matches.append(handle)
        return matches


@dataclass(frozen=True)
class WithValue(Step):
    """Keep candidates whose form value contains ``text``."""

    text: str
    kind = StepKind.WITH_VALUE

    def describe(self) -> str:
        return f".with_value({self.text})"

    async def apply(self, handles, document, inspector):
        matches = []
        for handle in handles:
            value = await inspector.value_of(handle)
            if value is not None and self.text in value:
                matches.append(handle)
        return matches


@dataclass(frozen=True)
class Parent(Step):
    """Map every candidate to its immediate parent. No deduplication."""

    kind = StepKind.PARENT

    def describe(self) -> str:
        return ".parent()"

    async def apply(self, handles, document, inspector):
        parents = []
        for handle in handles:
            parent = await inspector.parent_of(handle)
            if parent is not None:
                parents.append(parent)
        return parents


@dataclass(frozen=True)
class Nth(Step):
    """Take a single candidate by 1-based position.

    Positive indexes count from the front, negative ones from the back
    (``-1`` is the last candidate). An index past either end yields an empty
    set. Zero is rejected when the step runs.
    """

    index: int
    kind = StepKind.NTH

    def describe(self) -> str:
        return f".nth({self.index})"

    async def apply(self, handles, document, inspector):
        return pick_nth(handles, self.index)


def pick_nth(handles: Sequence[Any], index: int) -> list[Any]:
    """Select the 1-based ``index``-th handle as a one-element list.

    Raises:
        InvalidArgumentError: If index is 0.
    """
    if index == 0:
        raise InvalidArgumentError("Index is one-based")
    if abs(index) > len(handles):
        return []
    if index > 0:
        return [handles[index - 1]]
    return [handles[index]]


async def run_steps(
    steps: Sequence[Step],
    document: DocumentAccess,
    inspector: ElementInspection,
    *,
    log_steps: bool = True,
) -> list[Any]:
    """Replay steps in order, feeding each the previous step's output.

    Any exception raised by a step aborts the replay and propagates as is.
    """
    handles: list[Any] = []
    for step in steps:
        handles = await step.apply(list(handles), document, inspector)
        if log_steps:
            logger.debug(f"{step.describe()} -> {len(handles)} element(s)")
    return handles


__all__ = [
    "Find",
    "Nth",
    "Parent",
    "Query",
    "Step",
    "StepKind",
    "WithExactText",
    "WithText",
    "WithValue",
    "pick_nth",
    "run_steps",
]
