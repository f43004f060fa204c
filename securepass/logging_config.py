"""
Logging setup shared by the server and the desktop client.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

# libraries that are chatty at INFO
_NOISY = ("httpx", "urllib3", "flet", "flet_core", "flet_runtime", "sqlalchemy.engine")


def configure_logging(level: str | int = logging.INFO):
    """Install a single stderr handler on the root logger."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_securepass", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._securepass = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(level)

    if level > logging.DEBUG:
        for name in _NOISY:
            logging.getLogger(name).setLevel(logging.WARNING)
