"""Verbosity-controlled logging for scheduling runs.

Slackline reports through one package logger with two extra levels:

- CHANGES (verbosity 1): edits the engine makes to a schedule, such as
  leveling shifts and dropped dependency edges
- CHECKS (verbosity 2): per-phase summaries, such as pass results and
  simulation progress

Verbosity 3 adds per-node traversal output at DEBUG. Errors are always shown
and warnings appear from verbosity 1; both carry a short prefix so they stand
out from the progress lines.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

CHANGES = 25
CHECKS = 15

logging.addLevelName(CHANGES, "CHANGES")
logging.addLevelName(CHECKS, "CHECKS")

# Index is the CLI verbosity (-v count)
VERBOSITY_LEVELS = (logging.ERROR, CHANGES, CHECKS, logging.DEBUG)

LOGGER_NAME = "slackline"


class SlacklineLogger(logging.Logger):
    """Logger with one method per scheduling verbosity level."""

    def changes(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Report a change to the schedule (verbosity 1)."""
        if self.isEnabledFor(CHANGES):
            self._log(CHANGES, msg, args, **kwargs)

    def checks(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Report a phase summary (verbosity 2)."""
        if self.isEnabledFor(CHECKS):
            self._log(CHECKS, msg, args, **kwargs)


class ScheduleFormatter(logging.Formatter):
    """Bare messages for progress output, ``warning: ...`` for problems."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if record.levelno >= logging.WARNING:
            return f"{record.levelname.lower()}: {message}"
        return message


def level_for_verbosity(verbosity: int) -> int:
    """Logging level for a verbosity count, clamped to the supported range."""
    return VERBOSITY_LEVELS[max(0, min(verbosity, len(VERBOSITY_LEVELS) - 1))]


def get_logger() -> SlacklineLogger:
    """Return the package logger, creating it as a ``SlacklineLogger`` on first use."""
    logging.setLoggerClass(SlacklineLogger)
    logger = logging.getLogger(LOGGER_NAME)
    assert isinstance(logger, SlacklineLogger)
    return logger


def setup_logger(verbosity: int, stream: TextIO | None = None) -> None:
    """Point the package logger at ``stream`` (stderr by default) at the given verbosity.

    Safe to call repeatedly; earlier handlers are replaced.
    """
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(level_for_verbosity(verbosity))

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(ScheduleFormatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False


def reset_logger() -> None:
    """Drop handlers and return to the silent level."""
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(VERBOSITY_LEVELS[0])


def debug_enabled() -> bool:
    """Whether per-node traversal output is wanted, so callers can skip building it."""
    return get_logger().isEnabledFor(logging.DEBUG)
