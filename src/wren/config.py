"""Router and application configuration.

Both are frozen dataclasses — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass

DEFAULT_CONSTRAINT = r"[\w\-]+"


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Matching behaviour of a ``Router``.

    Override what you need::

        config = RouterConfig(base_path="/app", multimatch=True)
    """

    # Fragment used for placeholders without their own constraint
    default_constraint: str = DEFAULT_CONSTRAINT

    # Prefixed to every pattern at match time (not stored on routes)
    base_path: str = ""

    case_sensitive: bool = False

    # Run every matching route instead of stopping at the first
    multimatch: bool = False


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Server settings for ``App.run()``."""

    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False

    # Reload (development mode — requires debug=True)
    reload_include: tuple[str, ...] = ()  # Extra extensions to watch (e.g. ".html")
    reload_dirs: tuple[str, ...] = ()  # Extra directories to watch alongside cwd

    workers: int = 0  # 0 = auto-detect from CPU count
    log_level: str = "info"
