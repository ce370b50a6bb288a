"""Log setup for a single gate run.

Records go to stderr: stdout carries the step output and the workflow
error command, which the runner parses. Level and format come from
config.yaml (logging.level, logging.format) or env (LOGGING_LEVEL,
LOGGING_FORMAT).
"""

import logging
import sys

from ticketgate.config import LoggingConfig

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

DEFAULT_LEVEL = "INFO"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _resolve_level(level: str) -> int | None:
    """Map level name to logging constant; None if the name is unknown."""
    return LEVELS.get(level.upper().strip())


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Configure the root logger for this run.

    Without a config (settings could not be loaded) INFO and the default
    format are used. An unknown level name falls back to INFO and is
    reported once the handler is in place.
    """
    requested = config.level if config is not None else DEFAULT_LEVEL
    level = _resolve_level(requested)
    logging.basicConfig(
        level=level if level is not None else logging.INFO,
        format=(config.format if config is not None else "") or DEFAULT_FORMAT,
        stream=sys.stderr,
        force=True,
    )
    if level is None:
        logging.getLogger("ticketgate.logging").warning(
            "Unknown LOGGING_LEVEL %r, using %s (expected one of %s)",
            requested,
            DEFAULT_LEVEL,
            ", ".join(LEVELS),
        )
