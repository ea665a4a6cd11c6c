"""Wren — a small regex HTTP request router.

Routes are matched in registration order; the first route whose pattern
and method match runs its action with the captured path parameters.

Basic usage::

    from wren import App, Router

    router = Router()
    router.get("/", lambda: "Hello, World!")
    router.get("/items/{id}", lambda item_id: f"Item {item_id}").where("id", r"\\d+")

    result = router.dispatch("GET", "/items/7")
    assert result.output == "Item 7"

    App(router).run()
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "ConfigurationError",
    "Dispatch",
    "HTTPError",
    "MethodNotAllowed",
    "NotFound",
    "Response",
    "Route",
    "RouteHandle",
    "RouteMatch",
    "Router",
    "RouterConfig",
    "WrenError",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wren`` fast while providing a clean top-level API.
    """
    if name == "App":
        from wren.app import App

        return App

    if name in ("AppConfig", "RouterConfig"):
        from wren import config as _config

        return getattr(_config, name)

    if name == "Router":
        from wren.routing.router import Router

        return Router

    if name in ("Dispatch", "Route", "RouteHandle", "RouteMatch"):
        from wren.routing import route as _route

        return getattr(_route, name)

    if name == "Response":
        from wren.http.response import Response

        return Response

    if name in ("ConfigurationError", "HTTPError", "MethodNotAllowed", "NotFound", "WrenError"):
        from wren import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
