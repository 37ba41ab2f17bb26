"""Root logger setup for the wellbook CLI."""

from __future__ import annotations

import logging
import os
from typing import Final

from .errors import ConfigurationError

LOG_FORMAT: Final[str] = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_DATE_FORMAT: Final[str] = "%H:%M:%S"


def resolve_log_level(level: int | None = None) -> int:
    """Return ``level`` or the level named by ``WELLBOOK_LOG_LEVEL`` (INFO when unset)."""

    if level is not None:
        return level
    raw = os.getenv("WELLBOOK_LOG_LEVEL", "").strip().upper()
    if not raw:
        return logging.INFO
    resolved = logging.getLevelNamesMapping().get(raw)
    if resolved is None:
        raise ConfigurationError(f"WELLBOOK_LOG_LEVEL is not a logging level: {raw!r}")
    return resolved


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Configure the root logger once; ``force=True`` replaces existing handlers."""

    logging.basicConfig(
        level=resolve_log_level(level),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        force=force,
    )
