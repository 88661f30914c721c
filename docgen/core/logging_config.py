"""Logging setup for the application process."""

from __future__ import annotations

import logging
import sys

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Attach a single stdout handler to the ``docgen`` logger hierarchy.

    Repeated calls only adjust the level.
    """

    root = logging.getLogger("docgen")
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    if any(getattr(handler, "_docgen_handler", False) for handler in root.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler._docgen_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)


__all__ = ("configure_logging",)
