"""
Tests for domchain.selector.steps.
"""

from dataclasses import FrozenInstanceError
from unittest.mock import AsyncMock

import pytest

from domchain.errors import InvalidArgumentError
from domchain.interfaces import DocumentAccess, ElementInspection
from domchain.selector.steps import (
    Find,
    Nth,
    Parent,
    Query,
    StepKind,
    WithExactText,
    WithText,
    WithValue,
    pick_nth,
    run_steps,
)


@pytest.fixture
def document():
    return AsyncMock(spec=DocumentAccess)


@pytest.fixture
def inspector():
    return AsyncMock(spec=ElementInspection)


class TestPickNth:
    """Tests for pick_nth()."""

    @pytest.mark.parametrize(
        "index,expected",
        [(1, ["a"]), (3, ["c"]), (4, ["d"]), (-1, ["d"]), (-4, ["a"]), (-2, ["c"])],
    )
    def test_in_range(self, index, expected):
        assert pick_nth(["a", "b", "c", "d"], index) == expected

    @pytest.mark.parametrize("index", [5, -5, 42])
    def test_out_of_range(self, index):
        assert pick_nth(["a", "b", "c", "d"], index) == []

    def test_empty_set(self):
        assert pick_nth([], 1) == []
        assert pick_nth([], -1) == []

    def test_zero_raises(self):
        with pytest.raises(InvalidArgumentError, match="one-based"):
            pick_nth(["a"], 0)
        with pytest.raises(InvalidArgumentError, match="one-based"):
            pick_nth([], 0)

    def test_duplicates_are_positions(self):
        assert pick_nth(["a", "a", "b"], 2) == ["a"]


class TestDescribe:
    """Tests for step trace lines."""

    def test_descriptions(self):
        assert Query("#id").describe() == "selector(#id)"
        assert Find(".child").describe() == ".find(.child)"
        assert WithText("Done").describe() == ".with_text(Done)"
        assert WithExactText("Done").describe() == ".with_exact_text(Done)"
        assert WithValue("abc").describe() == ".with_value(abc)"
        assert Parent().describe() == ".parent()"
        assert Nth(-1).describe() == ".nth(-1)"

    def test_kinds(self):
        assert Query("a").kind == StepKind.QUERY
        assert Find("a").kind == StepKind.FIND
        assert Parent().kind == StepKind.PARENT
        assert Nth(1).kind == StepKind.NTH

    def test_steps_are_immutable(self):
        step = Nth(2)
        with pytest.raises(FrozenInstanceError):
            step.index = 3

    def test_steps_compare_by_value(self):
        assert Find(".a") == Find(".a")
        assert Find(".a") != Find(".b")
        assert Parent() == Parent()


class TestApply:
    """Tests for step application."""

    @pytest.mark.asyncio
    async def test_query_ignores_incoming(self, document, inspector):
        document.query_all.return_value = ["x", "y"]
        result = await Query("#id").apply(["stale"], document, inspector)
        assert result == ["x", "y"]
        document.query_all.assert_awaited_once_with("#id")

    @pytest.mark.asyncio
    async def test_find_scopes_to_candidates(self, document, inspector):
        document.query_all.return_value = ["c1", "c2", "c3"]
        result = await Find(".c").apply(["p1", "p2"], document, inspector)
        assert result == ["c1", "c2", "c3"]
        document.query_all.assert_awaited_once_with(".c", scope=["p1", "p2"])

    @pytest.mark.asyncio
    async def test_find_on_empty_set_skips_query(self, document, inspector):
        assert await Find(".c").apply([], document, inspector) == []
        document.query_all.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_with_text_is_substring(self, document, inspector):
        texts = {"a": "Task Done", "b": "Pending", "c": "Done"}
        inspector.text_of.side_effect = lambda handle: texts[handle]
        result = await WithText("Done").apply(["a", "b", "c"], document, inspector)
        assert result == ["a", "c"]

    @pytest.mark.asyncio
    async def test_with_exact_text_strips(self, document, inspector):
        texts = {"a": "  Done ", "b": "Done!"}
        inspector.text_of.side_effect = lambda handle: texts[handle]
        result = await WithExactText("Done").apply(["a", "b"], document, inspector)
        assert result == ["a"]

    @pytest.mark.asyncio
    async def test_with_value(self, document, inspector):
        values = {"a": "user@example.com", "b": "", "c": None}
        inspector.value_of.side_effect = lambda handle: values[handle]
        result = await WithValue("example").apply(["a", "b", "c"], document, inspector)
        assert result == ["a"]

    @pytest.mark.asyncio
    async def test_parent_maps_without_dedup(self, document, inspector):
        parents = {"a": "p", "b": "p", "root": None}
        inspector.parent_of.side_effect = lambda handle: parents[handle]
        result = await Parent().apply(["a", "b", "root"], document, inspector)
        assert result == ["p", "p"]


class TestRunSteps:
    """Tests for run_steps()."""

    @pytest.mark.asyncio
    async def test_no_steps(self, document, inspector):
        assert await run_steps([], document, inspector) == []

    @pytest.mark.asyncio
    async def test_fold_feeds_previous_output(self, document, inspector):
        document.query_all.side_effect = [["a", "b", "c"], ["a1", "c1", "c2"]]
        result = await run_steps(
            [Query("ul"), Nth(-1), Find("li")], document, inspector
        )
        assert result == ["a1", "c1", "c2"]
        assert document.query_all.await_args_list[1].kwargs == {"scope": ["c"]}

    @pytest.mark.asyncio
    async def test_failure_stops_replay(self, document, inspector):
        document.query_all.return_value = ["a"]
        with pytest.raises(InvalidArgumentError):
            await run_steps([Query("ul"), Nth(0), Find("li")], document, inspector)
        assert document.query_all.await_count == 1
