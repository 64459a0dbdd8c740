"""Project-wide structured logging for tgpoll.

One ``tgpoll`` logger is configured on first use.  Each record becomes a
single JSON line on stdout and in ``$LOG_DIR/tgpoll.log`` (``logs/`` by
default), rotated at 5 MB with five backups.  Context goes in ``extra``::

    logger.info("Batch published", extra={"count": 3, "offset": 42})
"""

import json
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Optional

LOGGER_NAME = "tgpoll"
LOG_FILE = "tgpoll.log"

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRS: frozenset[str] = frozenset(vars(logging.LogRecord(
    name="", level=0, pathname="", lineno=0, msg="", args=(), exc_info=None,
))) | {"message", "asctime"}


class _JsonFormatter(logging.Formatter):
    """Render a record as one JSON object with its ``extra`` fields inlined."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "func_name": record.funcName,
        }
        entry.update(
            (key, value)
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS and key not in entry
        )
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def _build_handlers(level: int) -> list[logging.Handler]:
    log_dir = os.environ.get("LOG_DIR", "logs")
    os.makedirs(log_dir, exist_ok=True)
    handlers: list[logging.Handler] = [
        logging.StreamHandler(),
        RotatingFileHandler(
            os.path.join(log_dir, LOG_FILE),
            maxBytes=BotLogger.MAX_BYTES,
            backupCount=BotLogger.BACKUP_COUNT,
            encoding="utf-8",
        ),
    ]
    formatter = _JsonFormatter()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


class BotLogger:
    """Owner of the shared ``tgpoll`` logger.

    Modules call :meth:`get_logger` at import time; only the first call
    configures handlers.
    """

    MAX_BYTES: int = 5 * 1024 * 1024
    BACKUP_COUNT: int = 5

    _instance: Optional["BotLogger"] = None

    def __init__(self, level: int) -> None:
        self.logger = logging.getLogger(LOGGER_NAME)
        self.logger.setLevel(level)
        # A reloaded module must not stack a second set of handlers.
        if not self.logger.handlers:
            for handler in _build_handlers(level):
                self.logger.addHandler(handler)

    @classmethod
    def get_logger(cls, level: int = logging.INFO) -> logging.Logger:
        """Return the ``tgpoll`` logger; *level* only applies on first call."""
        if cls._instance is None:
            cls._instance = cls(level)
        return cls._instance.logger

    def cleanup(self) -> None:
        """Flush, close and detach every handler."""
        for handler in list(self.logger.handlers):
            handler.flush()
            handler.close()
            self.logger.removeHandler(handler)
