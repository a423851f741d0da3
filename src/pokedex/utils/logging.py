"""Logging helpers shared by all pokedex modules."""

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_configured = False


def configure_logging(level: int | str = logging.INFO, stream=None) -> None:
    """
    Configure the root pokedex logger once.

    Later calls only adjust the level, so tests and the CLI can both call it.
    """
    global _configured
    root = logging.getLogger("pokedex")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    root.setLevel(level)
    if _configured:
        return
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    _configured = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger under the pokedex namespace."""
    if not name:
        return logging.getLogger("pokedex")
    if name == "pokedex" or name.startswith("pokedex."):
        return logging.getLogger(name)
    return logging.getLogger(f"pokedex.{name}")
