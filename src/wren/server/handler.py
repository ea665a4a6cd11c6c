"""ASGI handler — translates ASGI scope/messages to a router dispatch.

The only component that touches raw ASGI directly. Takes the method and
path from the scope, dispatches through the router, and sends the
action's output back through ASGI send().

HEAD is an ordinary method to the router: it only matches routes
registered with ``head()``, ``any()`` or an explicit ``"HEAD"``, and a
HEAD request to a GET-only route gets 405. When a HEAD route does match,
its headers are sent without the body.
"""

import anyio.to_thread

from wren._internal.asgi import HTTPScope, Receive, Scope, Send
from wren.errors import HTTPError
from wren.http.response import Response
from wren.routing.router import Router
from wren.server.errors import handle_http_error, handle_internal_error
from wren.server.sender import send_response


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    debug: bool,
) -> None:
    """Process a single HTTP request through the router."""
    if scope["type"] != "http":
        return

    http = HTTPScope.from_scope(scope)

    try:
        # Dispatch is synchronous and actions may block; keep it off the event loop.
        result = await anyio.to_thread.run_sync(router.dispatch, http.method, http.target)
        response = Response.from_output(result.outputs, status=result.status)
    except HTTPError as exc:
        response = handle_http_error(exc, http.method, http.target, debug=debug)
    except Exception as exc:
        response = handle_internal_error(exc, http.method, http.target, debug=debug)

    await send_response(response, send, head=http.method.upper() == "HEAD")
