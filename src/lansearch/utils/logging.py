from __future__ import annotations

import logging
import os
from typing import Literal

import coloredlogs  # type: ignore[import]

LogLevel = Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]

LEVEL_ENV_VAR = "LOGLEVEL"
DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
DEFAULT_DATE_FORMAT = "%H:%M:%S"

# Per-plugin chatter stays out of the console unless explicitly asked for.
QUIET_LOGGERS = ("asyncio", "lansearch.plugins")


def setup_logging(level: LogLevel | None = None, verbose: bool = False) -> None:
    resolved = (level or os.environ.get(LEVEL_ENV_VAR, "INFO")).upper()
    if verbose:
        resolved = "DEBUG"

    coloredlogs.install(
        level=resolved,
        fmt=DEFAULT_FORMAT,
        datefmt=DEFAULT_DATE_FORMAT,
    )

    if resolved != "DEBUG":
        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
