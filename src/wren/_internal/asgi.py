"""Typed ASGI definitions.

Replaces the standard Scope = MutableMapping[str, Any] with a typed
dataclass for internal use. Users never see these.
"""

from collections.abc import Awaitable, Callable, MutableMapping
from dataclasses import dataclass
from typing import Any, TypeAlias

# Raw ASGI types
Scope: TypeAlias = MutableMapping[str, Any]
Receive: TypeAlias = Callable[[], Awaitable[MutableMapping[str, Any]]]
Send: TypeAlias = Callable[[MutableMapping[str, Any]], Awaitable[None]]


@dataclass(frozen=True, slots=True)
class HTTPScope:
    """The parts of an HTTP scope the router needs.

    ``target`` is the request path the router dispatches on. ``raw_path``
    is preferred when it is plain ASCII, so percent-escapes reach the
    router's own decoding step untouched. Servers that pass unescaped
    non-ASCII bytes get the already decoded ``path`` instead.
    """

    method: str
    path: str
    raw_path: bytes

    @property
    def target(self) -> str:
        if self.raw_path and self.raw_path.isascii():
            return self.raw_path.decode("ascii")
        return self.path

    @classmethod
    def from_scope(cls, scope: Scope) -> "HTTPScope":
        """Parse raw ASGI scope into typed object."""
        return cls(
            method=scope["method"],
            path=scope["path"],
            raw_path=scope.get("raw_path") or b"",
        )
