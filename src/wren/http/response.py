"""HTTP response with chainable .with_*() transformation API.

Each transformation returns a new Response. Actions may return one
directly; plain return values are wrapped by ``Response.from_output``.
"""

from collections.abc import Iterable
from dataclasses import dataclass, replace
from typing import Any


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations."""

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/html; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    # -- Chainable transformations --

    def with_status(self, status: int) -> "Response":
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> "Response":
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    # -- Body access --

    @property
    def body_bytes(self) -> bytes:
        if isinstance(self.body, bytes):
            return self.body
        return self.body.encode("utf-8")

    @property
    def text(self) -> str:
        if isinstance(self.body, str):
            return self.body
        return self.body.decode("utf-8", errors="replace")

    def header(self, name: str, default: str | None = None) -> str | None:
        """First value of header *name* (case-insensitive)."""
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return default

    # -- Construction --

    @classmethod
    def from_output(cls, outputs: Iterable[Any], status: int = 200) -> "Response":
        """Build a response from action outputs, sent verbatim in order.

        A single ``Response`` output is used as-is (its status wins over
        *status* unless it is the default 200). ``bytes`` are passed
        through, ``str`` is UTF-8 encoded, anything else goes through
        ``str()``. No outputs means an empty body.
        """
        outputs = tuple(outputs)
        if len(outputs) == 1 and isinstance(outputs[0], Response):
            response = outputs[0]
            if response.status == 200 and status != 200:
                response = response.with_status(status)
            return response

        parts: list[bytes] = []
        for output in outputs:
            if isinstance(output, Response):
                parts.append(output.body_bytes)
            elif isinstance(output, bytes):
                parts.append(output)
            else:
                parts.append(str(output).encode("utf-8"))
        return cls(body=b"".join(parts), status=status)
