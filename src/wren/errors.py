"""Wren exception hierarchy.

Shared across Router, App, and the ASGI handler so every module raises
and catches the same types.
"""

from dataclasses import dataclass


class WrenError(Exception):
    """Base for all wren-specific errors."""


class ConfigurationError(WrenError):
    """Raised when routes or router settings are invalid.

    Malformed patterns and constraint fragments are configuration errors
    of the integrator, so they surface at registration time rather than
    as a route that silently never matches.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(WrenError):
    """An error that maps directly to an HTTP status code.

    Raised by the router when dispatch fails and no hook is registered.
    The ASGI handler catches these and turns them into responses.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — no route structurally matched the request path."""

    def __init__(self, detail: str = "Not Found", *, path: str = "") -> None:
        super().__init__(status=404, detail=detail)
        object.__setattr__(self, "path", path)


class MethodNotAllowed(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """405 — a route matched the path but not the HTTP method.

    Includes an ``Allow`` header listing the methods of every route whose
    pattern matched, and embeds them in the detail string.
    """

    def __init__(
        self,
        allowed: frozenset[str],
        detail: str = "",
        *,
        path: str = "",
        method: str = "",
    ) -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )
        object.__setattr__(self, "allowed", allowed)
        object.__setattr__(self, "path", path)
        object.__setattr__(self, "method", method)
