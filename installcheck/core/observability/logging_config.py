"""
Logging configuration — one call at process start, from main.py.

Modules log through ``logging.getLogger(__name__)``.  The console
handler writes to stderr, which is the install check's diagnostic
stream (shared with the heartbeat).  The run's log file is the command
transcript and is not a logging handler.

Level precedence:
    --debug / --verbose / --quiet  >  INSTALLCHECK_LOG_LEVEL  >  INFO

INSTALLCHECK_DEBUG_LOG adds a file handler with full detail, at
INSTALLCHECK_DEBUG_LOG_LEVEL (default: the console level).
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping

ENV_LEVEL = "INSTALLCHECK_LOG_LEVEL"
ENV_DEBUG_LOG = "INSTALLCHECK_DEBUG_LOG"
ENV_DEBUG_LOG_LEVEL = "INSTALLCHECK_DEBUG_LOG_LEVEL"

DEFAULT_LEVEL = "INFO"

# Console: progress lines carry a clock so long installs can be read
# against the heartbeat; debug adds the origin.
_FMT_PLAIN = "%(message)s"
_FMT_PROGRESS = "%(asctime)s %(message)s"
_FMT_DETAIL = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_CLOCK = "%H:%M:%S"
_DATEFMT_FULL = "%Y-%m-%d %H:%M:%S"


def resolve_level(
    *,
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    env: Mapping[str, str] | None = None,
) -> str:
    """Pick the console level from CLI flags, then the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    env = os.environ if env is None else env
    return env.get(ENV_LEVEL) or DEFAULT_LEVEL


def setup_logging(
    level: str = DEFAULT_LEVEL,
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Configure the root logger for the whole process.

    Replaces any handlers installed by an earlier call, so repeated CLI
    invocations in one process (tests) don't stack handlers.
    """
    console_level = _parse_level(level)

    if console_level <= logging.DEBUG:
        console_fmt = logging.Formatter(_FMT_DETAIL, datefmt=_DATEFMT_CLOCK)
    elif console_level <= logging.INFO:
        console_fmt = logging.Formatter(_FMT_PROGRESS, datefmt=_DATEFMT_CLOCK)
    else:
        console_fmt = logging.Formatter(_FMT_PLAIN)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(console_fmt)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root_level = console_level

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FMT_DETAIL, datefmt=_DATEFMT_FULL))
        root.addHandler(fh)
        root_level = min(root_level, file_level)

    root.setLevel(root_level)

    # A broken stderr must not take the run down with it.
    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    """``"debug"`` → ``logging.DEBUG``; unknown names fall back to INFO."""
    numeric = logging.getLevelName((level or DEFAULT_LEVEL).upper())
    return numeric if isinstance(numeric, int) else logging.INFO
