"""Wren application class — binds a Router to ASGI.

The router is mutable during setup and frozen when the app starts
serving (lifespan startup or first request).
"""

import logging
import threading

from wren._internal.asgi import Receive, Scope, Send
from wren.config import AppConfig
from wren.routing.router import Router
from wren.server.handler import handle_request

logger = logging.getLogger("wren.server")


class App:
    """ASGI application around a ``Router``.

    Usage::

        router = Router()
        router.get("/", lambda: "Hello, World!")
        app = App(router)
        app.run()

    Thread safety:
        Setup is single-threaded. The freeze transition uses a Lock +
        double-check so exactly one thread compiles the router, even when
        several workers receive their first request at the same time.
    """

    __slots__ = ("_freeze_lock", "_frozen", "config", "router")

    def __init__(self, router: Router | None = None, config: AppConfig | None = None) -> None:
        self.router: Router = router or Router()
        self.config: AppConfig = config or AppConfig()
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

    # -- Server --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Start the server (dev or production based on config.debug).

        Freezes the router and starts serving requests.

        Args:
            host: Override bind host.
            port: Override bind port.
        """
        self._ensure_frozen()
        logging.getLogger("wren").setLevel(self.config.log_level.upper())

        _host = host or self.config.host
        _port = port or self.config.port
        logger.info("Serving %d routes on %s:%d", len(self.router.routes), _host, _port)

        if self.config.debug:
            from wren.server.dev import run_dev_server

            run_dev_server(
                self,
                _host,
                _port,
                reload=self.config.debug,
                reload_include=self.config.reload_include,
                reload_dirs=self.config.reload_dirs,
            )
        else:
            from wren.server.production import run_production_server

            run_production_server(
                self,
                host=_host,
                port=_port,
                workers=self.config.workers,
                log_level=self.config.log_level,
            )

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()

        await handle_request(
            scope,
            receive,
            send,
            router=self.router,
            debug=self.config.debug,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the router at startup, before the first HTTP request.
        """
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    self._ensure_frozen()
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self.router.compile()
            self._frozen = True
