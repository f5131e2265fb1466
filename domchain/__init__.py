"""
domchain - fluent, replayable DOM queries for UI tests.

A selector chain records DOM query steps (find descendants, filter by text
or value, walk to the parent, take the nth match) and replays them against
the live document on every terminal call, so assertions follow content that
renders asynchronously.

Example:
    from domchain import StaticDocument, select

    document = StaticDocument(html)
    done = select("#list", document).find(".item").with_text("Done")

    assert await done.count() == 2
    assert await done.nth(1).is_visible()
    print(done)
    # selector(#list)
    #   .find(.item)
    #   .with_text(Done)
    #   .nth(1)

Against a live browser, wrap the page's CDP session:

    from domchain import CDPDocument

    document = CDPDocument(cdp_session)
    assert await select("#submit", document).exists()
"""

__version__ = "0.1.0"

from domchain.backends import CDPDocument, RemoteNode, StaticDocument
from domchain.config import (
    ChainOptions,
    DomChainConfig,
    StaticOptions,
    WaitOptions,
    load_config,
)
from domchain.errors import (
    CDPEvaluationError,
    ConfigurationError,
    DomChainError,
    InvalidArgumentError,
)
from domchain.interfaces import DocumentAccess, ElementInspection
from domchain.locator import Locator, ParsedLocator, SelectorKind
from domchain.selector import SelectorChain, Step, StepKind, select
from domchain.waiters import ChainWaiter, WaitTimeoutError, wait_for

__all__ = [
    # Version
    "__version__",
    # Chain
    "SelectorChain",
    "select",
    "Step",
    "StepKind",
    # Collaborators
    "DocumentAccess",
    "ElementInspection",
    "StaticDocument",
    "CDPDocument",
    "RemoteNode",
    # Locator
    "Locator",
    "ParsedLocator",
    "SelectorKind",
    # Waiting
    "ChainWaiter",
    "WaitTimeoutError",
    "wait_for",
    # Configuration
    "ChainOptions",
    "DomChainConfig",
    "StaticOptions",
    "WaitOptions",
    "load_config",
    # Errors
    "DomChainError",
    "InvalidArgumentError",
    "CDPEvaluationError",
    "ConfigurationError",
]
