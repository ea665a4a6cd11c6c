"""Linear-scan router with regex path matching.

Routes are kept in registration order, which is also match priority:
the first route whose pattern and method both match wins, unless
multimatch is enabled. There is no specificity ordering.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import replace
from typing import Any
from urllib.parse import unquote

from wren.config import RouterConfig
from wren.errors import ConfigurationError, MethodNotAllowed, NotFound
from wren.routing.route import Dispatch, Route, RouteHandle, RouteMatch
from wren.routing.tokenizer import (
    CompiledPattern,
    check_constraint,
    compile_pattern,
    normalize_path,
)

logger = logging.getLogger("wren.routing")

Action = Callable[..., Any]
PathNotFoundHook = Callable[[str], Any]
MethodNotAllowedHook = Callable[[str, str], Any]

HTTP_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS")


def _normalize_methods(methods: str | Iterable[str]) -> frozenset[str]:
    if isinstance(methods, str):
        methods = (methods,)
    normalized = frozenset(m.strip().upper() for m in methods)
    if not normalized or "" in normalized:
        msg = f"Routes need at least one non-empty HTTP method, got {methods!r}"
        raise ConfigurationError(msg)
    return normalized


def _request_path(path: str) -> str:
    """Normalized, URL-decoded path of a raw request target."""
    path = path.split("?", 1)[0].split("#", 1)[0]
    return unquote(normalize_path(path))


class Router:
    """Ordered route table plus dispatcher.

    Mutable during setup, frozen by ``compile()``. After that the table is
    safe to share between threads dispatching concurrently.

    Usage::

        router = Router()
        router.get("/users/{id}", show_user).where("id", r"\\d+")
        router.scope("/api", lambda r: r.post("/users", create_user))
        router.compile()
        result = router.dispatch("GET", "/users/42")
    """

    __slots__ = (
        "_compiled",
        "_method_not_allowed",
        "_path_not_found",
        "_prefix",
        "_routes",
        "config",
    )

    def __init__(self, config: RouterConfig | None = None) -> None:
        self.config: RouterConfig = config or RouterConfig()
        check_constraint("*", self.config.default_constraint)
        self._routes: list[Route] = []
        self._prefix = ""
        self._path_not_found: PathNotFoundHook | None = None
        self._method_not_allowed: MethodNotAllowedHook | None = None
        self._compiled = False

    # -- Registration --

    def add(
        self,
        pattern: str,
        action: Action,
        methods: str | Iterable[str] = "GET",
        *,
        constraints: Mapping[str, str] | None = None,
    ) -> RouteHandle:
        """Register *action* for *pattern* under one or more methods.

        An active ``scope()`` prefix is prepended before normalization.
        Returns a handle for attaching constraints to this route.
        """
        self._check_not_compiled()

        if self._prefix:
            pattern = self._prefix + pattern

        route = Route(
            pattern=normalize_path(pattern),
            action=action,
            methods=_normalize_methods(methods),
        )
        self._compile_route(route)
        self._routes.append(route)
        handle = RouteHandle(self, len(self._routes) - 1)

        logger.debug("Registered %s %s", ",".join(sorted(route.methods)), route.pattern)

        if constraints:
            self.constrain(handle, constraints)
        return handle

    def get(self, pattern: str, action: Action) -> RouteHandle:
        """Register a GET route."""
        return self.add(pattern, action, "GET")

    def post(self, pattern: str, action: Action) -> RouteHandle:
        """Register a POST route."""
        return self.add(pattern, action, "POST")

    def put(self, pattern: str, action: Action) -> RouteHandle:
        """Register a PUT route."""
        return self.add(pattern, action, "PUT")

    def patch(self, pattern: str, action: Action) -> RouteHandle:
        """Register a PATCH route."""
        return self.add(pattern, action, "PATCH")

    def delete(self, pattern: str, action: Action) -> RouteHandle:
        """Register a DELETE route."""
        return self.add(pattern, action, "DELETE")

    def head(self, pattern: str, action: Action) -> RouteHandle:
        return self.add(pattern, action, "HEAD")

    def options(self, pattern: str, action: Action) -> RouteHandle:
        return self.add(pattern, action, "OPTIONS")

    def any(self, pattern: str, action: Action) -> RouteHandle:
        """Register a route for every common HTTP method."""
        return self.add(pattern, action, HTTP_METHODS)

    def route(
        self,
        pattern: str,
        *,
        methods: str | Iterable[str] | None = None,
        constraints: Mapping[str, str] | None = None,
    ) -> Callable[[Action], Action]:
        """Register a route via decorator.

        Args:
            pattern: Path pattern. Use ``{param}`` for path parameters.
            methods: HTTP methods. Defaults to ``"GET"``.
            constraints: Parameter name to regex fragment.
        """

        def decorator(func: Action) -> Action:
            self.add(pattern, func, methods or "GET", constraints=constraints)
            return func

        return decorator

    def constrain(
        self,
        handle: RouteHandle,
        parameter: str | Mapping[str, str],
        constraint: str = "",
    ) -> RouteHandle:
        """Attach constraints to the route *handle* names.

        Pass a parameter name and fragment, or a mapping of several.
        Fragments are regular expressions without anchors; one layer of
        enclosing parentheses is accepted and stripped.
        """
        self._check_not_compiled()
        if handle.router is not self:
            msg = "Route handle belongs to a different router."
            raise ConfigurationError(msg)

        pairs = parameter.items() if isinstance(parameter, Mapping) else ((parameter, constraint),)
        route = self._routes[handle.index]
        added: list[tuple[str, str]] = []
        for name, fragment in pairs:
            check_constraint(name, fragment)
            if name not in route.param_names:
                logger.debug("Constraint for %r has no placeholder in %s", name, route.pattern)
            added.append((name, fragment))

        route = replace(route, constraints=(*route.constraints, *added))
        self._compile_route(route)
        self._routes[handle.index] = route
        return handle

    def scope(self, prefix: str, block: Callable[[Router], Any]) -> None:
        """Register the routes *block* adds under *prefix*.

        Scopes do not nest: entering a scope while one is active replaces
        its prefix, and leaving clears the prefix entirely.
        """
        self._check_not_compiled()
        if self._prefix:
            logger.warning(
                "Scope %r replaces active scope %r; scopes do not nest", prefix, self._prefix
            )

        self._prefix = prefix
        try:
            block(self)
        finally:
            self._prefix = ""

    def set_default_constraint(self, constraint: str) -> None:
        """Change the fragment used by unconstrained placeholders."""
        self._check_not_compiled()
        check_constraint("*", constraint)
        config = replace(self.config, default_constraint=constraint)
        for route in self._routes:
            compile_pattern(route.pattern, route.constraints, constraint, config.case_sensitive)
        self.config = config

    def on_path_not_found(self, hook: PathNotFoundHook) -> PathNotFoundHook:
        """Call ``hook(path)`` when no route matches the path."""
        self._check_not_compiled()
        self._path_not_found = hook
        return hook

    def on_method_not_allowed(self, hook: MethodNotAllowedHook) -> MethodNotAllowedHook:
        """Call ``hook(path, method)`` when the path matches but no method does."""
        self._check_not_compiled()
        self._method_not_allowed = hook
        return hook

    @property
    def routes(self) -> tuple[Route, ...]:
        """Registered routes in match order."""
        return tuple(self._routes)

    def compile(self) -> None:
        """Freeze the router. No more routes or constraints can be added."""
        self._compiled = True

    @property
    def compiled(self) -> bool:
        return self._compiled

    # -- Matching --

    def match(
        self,
        method: str,
        path: str,
        *,
        base_path: str | None = None,
        multimatch: bool | None = None,
    ) -> tuple[RouteMatch, ...]:
        """Find the routes a request should run, in registration order.

        Returns the first route whose pattern and method both match, or
        every such route under multimatch.
        Raises ``MethodNotAllowed`` if some pattern matched but no method did.
        Raises ``NotFound`` if no pattern matched.
        """
        if base_path is None:
            base_path = self.config.base_path
        if multimatch is None:
            multimatch = self.config.multimatch

        base = normalize_path(base_path)
        request_path = _request_path(path)
        request_method = method.strip().upper()

        matches: list[RouteMatch] = []
        allowed: set[str] = set()

        for route in self._routes:
            pattern = route.pattern if base == "/" else normalize_path(base + route.pattern)
            params = self._compile_pattern(route, pattern).match(request_path)
            if params is None:
                continue

            if not route.allows(request_method):
                allowed |= route.methods
                continue

            matches.append(RouteMatch(route=route, params=params))
            if not multimatch:
                break

        if matches:
            return tuple(matches)

        if allowed:
            raise MethodNotAllowed(frozenset(allowed), path=request_path, method=request_method)
        raise NotFound(f"No route matches {request_method} {request_path!r}", path=request_path)

    def dispatch(
        self,
        method: str,
        path: str,
        *,
        base_path: str | None = None,
        multimatch: bool | None = None,
    ) -> Dispatch:
        """Match a request and run its action(s).

        Actions receive captured parameters positionally. A ``None``
        return means "no output"; anything else is kept in
        ``Dispatch.outputs``. Action exceptions propagate unchanged.

        Not-found and method-not-allowed are resolved by their hooks when
        registered; otherwise ``NotFound`` / ``MethodNotAllowed`` propagate.
        """
        request_method = method.strip().upper()
        try:
            matches = self.match(method, path, base_path=base_path, multimatch=multimatch)
        except MethodNotAllowed as exc:
            logger.debug("405 %s %s", request_method, exc.path)
            if self._method_not_allowed is None:
                raise
            output = self._method_not_allowed(exc.path, exc.method)
            return Dispatch(request_method, exc.path, outputs=_collect(output), status=405)
        except NotFound as exc:
            logger.debug("404 %s %s", request_method, exc.path)
            if self._path_not_found is None:
                raise
            output = self._path_not_found(exc.path)
            return Dispatch(request_method, exc.path, outputs=_collect(output), status=404)

        outputs: list[Any] = []
        for match in matches:
            logger.debug("%s %s -> %s", request_method, path, match.route.pattern)
            outputs.extend(_collect(match.route.action(*match.params)))

        return Dispatch(
            request_method,
            _request_path(path),
            matches=matches,
            outputs=tuple(outputs),
        )

    # -- Internal --

    def _compile_pattern(self, route: Route, pattern: str) -> CompiledPattern:
        return compile_pattern(
            pattern,
            route.constraints,
            self.config.default_constraint,
            self.config.case_sensitive,
        )

    def _compile_route(self, route: Route) -> None:
        """Compile eagerly so malformed patterns fail at registration."""
        self._compile_pattern(route, route.pattern)

    def _check_not_compiled(self) -> None:
        if self._compiled:
            msg = (
                "Cannot modify the router after it has been compiled. "
                "Register routes and constraints before serving requests."
            )
            raise RuntimeError(msg)


def _collect(output: Any) -> tuple[Any, ...]:
    return () if output is None else (output,)
