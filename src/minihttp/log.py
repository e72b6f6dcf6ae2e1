"""
Timestamped logging for the host program.

Every record is prefixed with a local timestamp down to the microsecond:

    [2026-10-18 12:00:00.123456] INFO minihttp.server: GET /index.html

or, with log_format="json", written as one JSON object per line for log
aggregators.

Modules log through ``logging.getLogger(__name__)``; only the entry point
calls setup_logging(). The message layer (minihttp.http) never logs.
"""

import json
import logging
from datetime import datetime
from typing import IO, Optional


TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S.%f"
TEXT_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"

_handler: Optional[logging.Handler] = None


class TimestampFormatter(logging.Formatter):
    """Formatter whose %(asctime)s carries microseconds."""

    def formatTime(self, record, datefmt=None):
        created = datetime.fromtimestamp(record.created)
        return created.strftime(datefmt or TIMESTAMP_FORMAT)


class JSONFormatter(TimestampFormatter):
    """One JSON object per record: timestamp, level, logger, message."""

    def format(self, record):
        entry = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def setup_logging(
    level: str = "INFO",
    log_format: str = "text",
    stream: Optional[IO[str]] = None,
) -> logging.Logger:
    """
    Configure the ``minihttp`` logger.

    Calling it again replaces the handler installed by the previous call.

    Args:
        level: Logging level name (DEBUG, INFO, ...).
        log_format: "text" or "json".
        stream: Where to write records (default: stderr).

    Returns:
        The configured ``minihttp`` logger.
    """
    global _handler

    logger = logging.getLogger("minihttp")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if _handler is not None:
        logger.removeHandler(_handler)

    _handler = logging.StreamHandler(stream)
    if log_format == "json":
        _handler.setFormatter(JSONFormatter())
    else:
        _handler.setFormatter(TimestampFormatter(TEXT_FORMAT))
    logger.addHandler(_handler)

    return logger
