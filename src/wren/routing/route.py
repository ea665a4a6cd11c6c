"""Route, RouteHandle, RouteMatch and Dispatch."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from wren.routing.tokenizer import placeholder_names

if TYPE_CHECKING:
    from wren.routing.router import Router


@dataclass(frozen=True, slots=True)
class Route:
    """A registered endpoint.

    ``pattern`` is already normalized with any scope prefix applied.
    ``constraints`` holds ``(parameter, fragment)`` pairs; a later pair for
    the same parameter wins, and pairs naming no placeholder are inert.
    """

    pattern: str
    action: Callable[..., Any]
    methods: frozenset[str]
    constraints: tuple[tuple[str, str], ...] = ()

    @property
    def param_names(self) -> tuple[str, ...]:
        return placeholder_names(self.pattern)

    def allows(self, method: str) -> bool:
        return method.upper() in self.methods


@dataclass(frozen=True, slots=True)
class RouteHandle:
    """Identifies one route in a router's table.

    Returned by every registration call so constraints can be attached to
    exactly that route::

        router.get("/items/{id}", show_item).where("id", r"\\d+")
    """

    router: Router
    index: int

    @property
    def route(self) -> Route:
        return self.router.routes[self.index]

    def where(self, parameter: str | Mapping[str, str], constraint: str = "") -> RouteHandle:
        """Constrain one parameter, or several from a mapping."""
        return self.router.constrain(self, parameter, constraint)


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """A route whose pattern and method matched, with its captured values."""

    route: Route
    params: tuple[str, ...]

    @property
    def path_params(self) -> dict[str, str]:
        return dict(zip(self.route.param_names, self.params, strict=True))


@dataclass(frozen=True, slots=True)
class Dispatch:
    """What a dispatch ran and what it produced.

    ``outputs`` holds every non-``None`` action result in invocation order.
    ``status`` is 200 for invoked routes, or 404/405 when a not-found or
    method-not-allowed hook resolved the request.
    """

    method: str
    path: str
    matches: tuple[RouteMatch, ...] = ()
    outputs: tuple[Any, ...] = ()
    status: int = 200

    @property
    def output(self) -> Any:
        """The first output, or ``None`` when nothing was produced."""
        return self.outputs[0] if self.outputs else None

    @property
    def emitted(self) -> bool:
        return bool(self.outputs)
