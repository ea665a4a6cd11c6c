"""Error handling for wren requests.

Maps HTTPError exceptions and unexpected failures to Response objects.
"""

import logging
import traceback

from wren.errors import HTTPError
from wren.http.response import Response

logger = logging.getLogger("wren.server")

_PLAIN = "text/plain; charset=utf-8"


def handle_http_error(exc: HTTPError, method: str, path: str, *, debug: bool) -> Response:
    """Map an HTTPError (404, 405, ...) to a plain-text response."""
    logger.debug("%d %s %s — %s", exc.status, method, path, exc.detail)

    detail = exc.detail or f"Error {exc.status}"
    if debug and exc.detail:
        detail = f"{exc.status}: {exc.detail}"

    resp = Response(body=detail, content_type=_PLAIN).with_status(exc.status)
    for name, value in exc.headers:
        resp = resp.with_header(name, value)
    return resp


def handle_internal_error(exc: Exception, method: str, path: str, *, debug: bool) -> Response:
    """Handle unexpected exceptions as 500 errors."""
    logger.exception("500 %s %s", method, path)

    if debug:
        body = "".join(traceback.format_exception(exc))
        return Response(body=body, status=500, content_type=_PLAIN)

    return Response(body="Internal Server Error", status=500, content_type=_PLAIN)
