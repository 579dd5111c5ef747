"""Logging setup shared by the API server and the CLI."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install a single stream handler on the root logger.

    Calling this more than once replaces the level but never stacks handlers.

    Args:
        level: Log level name (e.g. "DEBUG", "INFO")
    """
    root = logging.getLogger()
    root.setLevel(level.upper())
    if not any(getattr(h, "_tally", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._tally = True  # type: ignore[attr-defined]
        root.addHandler(handler)
