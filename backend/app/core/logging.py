"""Process-wide logging setup."""

from __future__ import annotations

import logging

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: int = logging.INFO) -> None:
    """Install a single stream handler on the root logger.

    Safe to call more than once: an existing handler is reused and only the
    level is updated.
    """
    root = logging.getLogger()
    root.setLevel(level)
    if any(getattr(handler, "_qharvest", False) for handler in root.handlers):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler._qharvest = True  # type: ignore[attr-defined]
    root.addHandler(handler)

    # httpx logs every request line at INFO.
    logging.getLogger("httpx").setLevel(logging.WARNING)
