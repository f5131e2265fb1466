"""
Collaborator backends for domchain.

- **StaticDocument**: lxml-parsed HTML (offline pages, HTTP responses, tests)
- **CDPDocument**: live page through a Chrome DevTools Protocol session

Both implement DocumentAccess and ElementInspection, so a single object can
be passed to ``select()``.
"""

from domchain.backends.cdp import CDPDocument, CDPSessionLike, RemoteNode
from domchain.backends.static import StaticDocument

__all__ = [
    "CDPDocument",
    "CDPSessionLike",
    "RemoteNode",
    "StaticDocument",
]
