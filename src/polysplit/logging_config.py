"""
Log output for command line runs and scripts.

Library code only calls logging.getLogger(__name__); handlers are attached
here, once, by whoever drives the splitter.
"""
import logging
import sys
from typing import Optional, TextIO, Union

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
DATE_FORMAT = "%H:%M:%S"

# Chatty third-party loggers capped at WARNING
QUIET_LOGGERS = ("matplotlib", "PIL")


def resolve_level(level: Union[int, str]) -> int:
    """Accepts logging constants or names such as 'debug'; unknown names mean INFO."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    return value if isinstance(value, int) else logging.INFO


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None,
                  stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Attaches handlers to the 'polysplit' logger and returns it.

    Args:
        level: Level constant or name, applied to the logger and its handlers.
        log_file: Optional path; the file is rewritten on every run.
        stream: Console stream, stderr by default (stdout carries the WKT output).
    """
    level = resolve_level(level)
    logger = logging.getLogger("polysplit")
    logger.setLevel(level)

    # Calling twice (tests, notebooks) must not duplicate lines
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers = [logging.StreamHandler(stream or sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    logger.debug("Logging at %s%s", logging.getLevelName(level),
                 f", copy in {log_file}" if log_file else "")
    return logger
