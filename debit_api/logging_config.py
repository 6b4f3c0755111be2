"""
Logging setup for the API process.

Production writes one JSON object per line to stdout so a log collector can
index the fields. With DEBUG on, plain text is easier to read in a terminal.

Card numbers are never logged anywhere in the application; services log
card and user ids only.
"""

import json
import logging
from datetime import datetime, timezone

from debit_api.config import settings


class JSONFormatter(logging.Formatter):
    """JSON log formatter for production log aggregation."""

    def format(self, record):
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
        }
        if record.exc_info and record.exc_info[0]:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, ensure_ascii=False)


def configure_logging() -> None:
    """
    Attach a stdout handler to the "debit_api" logger tree.

    Safe to call more than once: existing handlers are replaced rather than
    duplicated.
    """
    handler = logging.StreamHandler()
    if settings.LOG_JSON and not settings.DEBUG:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        )

    logger = logging.getLogger("debit_api")
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if settings.DEBUG else settings.LOG_LEVEL.upper())
