"""Shared logging helpers."""

from __future__ import annotations

import logging
from typing import Final

from .env import optional_env_var

LOG_LEVEL_ENV: Final[str] = "CURATORIAL_LOG_LEVEL"

# chatty per-request loggers, only shown when debugging
_QUIET_LOGGERS: Final[tuple[str, ...]] = ("httpx", "httpcore", "hishel")


def resolve_log_level(level: int | None = None) -> int:
    """Return ``level`` or the level named by ``CURATORIAL_LOG_LEVEL`` (INFO by default)."""

    if level is not None:
        return level
    name = optional_env_var(LOG_LEVEL_ENV, "INFO").upper()
    resolved = logging.getLevelNamesMapping().get(name)
    if resolved is None:
        return logging.INFO
    return resolved


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Initialise the root logger once with a terse format suitable for CLI output.

    Pass ``force=True`` to reconfigure during tests or specialised entry points.
    """

    resolved = resolve_log_level(level)
    logging.basicConfig(
        level=resolved,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    quiet_level = logging.DEBUG if resolved <= logging.DEBUG else logging.WARNING
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)
