"""
Chrome DevTools Protocol backend for domchain.

Runs selector chains against a live page through any CDP session object
exposing ``async send(method, params)``. Element references are remote
JavaScript objects, so they do not depend on DOM node ids that a later
``DOM.getDocument`` call would invalidate.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol, Sequence

from domchain.errors import CDPEvaluationError
from domchain.interfaces import DocumentAccess, ElementInspection
from domchain.locator import Locator, ParsedLocator

logger = logging.getLogger(__name__)

DEFAULT_OBJECT_GROUP = "domchain"

_QUERY_CSS = """function(selector) {
    return Array.from(this.querySelectorAll(selector));
}"""

_QUERY_XPATH = """function(xpath) {
    const result = document.evaluate(xpath, this, null,
        XPathResult.ORDERED_NODE_SNAPSHOT_TYPE, null);
    const nodes = [];
    for (let i = 0; i < result.snapshotLength; i++) {
        const node = result.snapshotItem(i);
        if (node.nodeType === Node.ELEMENT_NODE) nodes.push(node);
    }
    return nodes;
}"""

_IS_VISIBLE = """function() {
    const style = window.getComputedStyle(this);
    return style.display !== 'none' &&
           style.visibility !== 'hidden' &&
           style.opacity !== '0' &&
           this.offsetWidth > 0 &&
           this.offsetHeight > 0;
}"""

_IS_DISABLED = "function() { return !!this.disabled || this.hasAttribute('disabled'); }"
_TEXT = "function() { return this.innerText || this.textContent || ''; }"
_VALUE = "function() { return this.value == null ? '' : String(this.value); }"
_PARENT = "function() { return this.parentElement; }"
_ATTRIBUTE = "function(name) { return this.getAttribute(name); }"
_IS_CHECKED = """function() {
    return !!this.checked || (this.tagName === 'OPTION' && this.selected);
}"""


class CDPSessionLike(Protocol):
    """Anything that can send a CDP command and return its result."""

    async def send(
        self, method: str, params: Optional[dict[str, Any]] = None
    ) -> dict[str, Any]: ...


@dataclass(frozen=True)
class RemoteNode:
    """Reference to a DOM element held as a CDP remote object."""

    object_id: str
    description: Optional[str] = None

    def __repr__(self) -> str:
        return f"<RemoteNode {self.description or self.object_id}>"


class CDPDocument(DocumentAccess, ElementInspection):
    """Document access and element inspection over a CDP session.

    Example:
        document = CDPDocument(page_session)
        chain = select("#list", document).find(".item").nth(-1)
        assert await chain.is_visible()

    Remote objects are created in ``object_group``; call :meth:`release` to
    free them once the references are no longer needed.
    """

    def __init__(
        self,
        cdp_session: CDPSessionLike,
        *,
        object_group: str = DEFAULT_OBJECT_GROUP,
    ) -> None:
        """Initialize CDPDocument.

        Args:
            cdp_session: CDP session for sending commands.
            object_group: Runtime object group for created references.
        """
        self._session = cdp_session
        self._object_group = object_group

    @property
    def session(self) -> CDPSessionLike:
        return self._session

    async def _send(self, method: str, params: dict[str, Any]) -> dict[str, Any]:
        logger.debug(f"CDP {method}")
        result = await self._session.send(method, params)
        if "exceptionDetails" in result:
            details = result["exceptionDetails"]
            exception = details.get("exception", {})
            message = exception.get("description") or details.get("text", "Unknown error")
            raise CDPEvaluationError(f"JavaScript error: {message}", details)
        return result

    async def _call_function(
        self,
        element: RemoteNode,
        function_declaration: str,
        *args: Any,
        return_by_value: bool = True,
    ) -> dict[str, Any]:
        """Call a JavaScript function with the element as ``this``.

        Returns:
            The CDP RemoteObject describing the return value.
        """
        result = await self._send(
            "Runtime.callFunctionOn",
            {
                "objectId": element.object_id,
                "functionDeclaration": function_declaration,
                "arguments": [{"value": arg} for arg in args],
                "returnByValue": return_by_value,
                "awaitPromise": True,
                "objectGroup": self._object_group,
            },
        )
        return result.get("result", {})

    async def _call_value(
        self, element: RemoteNode, function_declaration: str, *args: Any
    ) -> Any:
        remote = await self._call_function(element, function_declaration, *args)
        return remote.get("value")

    async def _elements_of(self, array: dict[str, Any]) -> list[RemoteNode]:
        """Turn a remote JavaScript array of elements into RemoteNodes."""
        object_id = array.get("objectId")
        if array.get("type") != "object" or not object_id:
            return []

        props = await self._send(
            "Runtime.getProperties",
            {"objectId": object_id, "ownProperties": True},
        )
        indexed = []
        for prop in props.get("result", []):
            name = prop.get("name", "")
            value = prop.get("value", {})
            if name.isdigit() and value.get("objectId"):
                indexed.append(
                    (
                        int(name),
                        RemoteNode(value["objectId"], value.get("description")),
                    )
                )
        await self._send("Runtime.releaseObject", {"objectId": object_id})
        return [node for _, node in sorted(indexed, key=lambda item: item[0])]

    # DocumentAccess

    async def query_all(
        self,
        selector: str,
        scope: Optional[Sequence[Any]] = None,
    ) -> list[Any]:
        parsed = Locator.parse(selector)

        if scope is None:
            return await self._query_page(parsed)

        # Whole selector matched below the scope element, ancestors excluded
        expression = parsed.scoped_xpath()

        results: list[Any] = []
        for element in scope:
            array = await self._call_function(
                element, _QUERY_XPATH, expression, return_by_value=False
            )
            results.extend(await self._elements_of(array))
        return results

    async def _query_page(self, parsed: ParsedLocator) -> list[RemoteNode]:
        function = _QUERY_XPATH if parsed.is_xpath else _QUERY_CSS
        result = await self._send(
            "Runtime.evaluate",
            {
                "expression": f"({function}).call(document, {json.dumps(parsed.value)})",
                "returnByValue": False,
                "objectGroup": self._object_group,
            },
        )
        return await self._elements_of(result.get("result", {}))

    # ElementInspection

    async def is_visible(self, element: Any) -> bool:
        return bool(await self._call_value(element, _IS_VISIBLE))

    async def is_disabled(self, element: Optional[Any]) -> bool:
        if element is None:
            return False
        return bool(await self._call_value(element, _IS_DISABLED))

    async def text_of(self, element: Any) -> str:
        return await self._call_value(element, _TEXT) or ""

    async def value_of(self, element: Any) -> str:
        return await self._call_value(element, _VALUE) or ""

    async def parent_of(self, element: Any) -> Optional[Any]:
        remote = await self._call_function(element, _PARENT, return_by_value=False)
        if remote.get("type") == "object" and remote.get("objectId"):
            return RemoteNode(remote["objectId"], remote.get("description"))
        return None

    async def attribute_of(self, element: Any, name: str) -> Optional[str]:
        return await self._call_value(element, _ATTRIBUTE, name)

    async def is_checked(self, element: Any) -> bool:
        return bool(await self._call_value(element, _IS_CHECKED))

    async def release(self) -> None:
        """Release every remote object created by this document."""
        await self._send(
            "Runtime.releaseObjectGroup", {"objectGroup": self._object_group}
        )


__all__ = [
    "CDPDocument",
    "CDPSessionLike",
    "RemoteNode",
]
