"""
Selector chaining for domchain.

Example:
    from domchain.selector import select

    chain = select("#list", document).find(".item").with_text("Done").nth(1)
    if await chain.is_visible():
        ...
"""

from domchain.selector.chain import SelectorChain, select
from domchain.selector.steps import (
    Find,
    Nth,
    Parent,
    Query,
    Step,
    StepKind,
    WithExactText,
    WithText,
    WithValue,
    pick_nth,
    run_steps,
)

__all__ = [
    "SelectorChain",
    "select",
    # Steps
    "Step",
    "StepKind",
    "Query",
    "Find",
    "WithText",
    "WithExactText",
    "WithValue",
    "Parent",
    "Nth",
    "pick_nth",
    "run_steps",
]
