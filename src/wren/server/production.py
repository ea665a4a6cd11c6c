"""Production server.

Starts a pounce server with multiple workers. Every worker dispatches
against the same frozen route table.
"""


def run_production_server(
    app: object,
    host: str = "0.0.0.0",
    port: int = 8000,
    *,
    workers: int = 0,
    log_level: str = "info",
) -> None:
    """Run a wren app in production mode.

    Args:
        app: ASGI callable (wren App instance).
        host: Bind host address.
        port: Bind port number.
        workers: Worker count (0 = auto-detect from CPU count).
        log_level: Server log level.
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = ServerConfig(
        host=host,
        port=port,
        workers=workers,
        log_level=log_level,
    )

    server = Server(config, app)
    server.run()
