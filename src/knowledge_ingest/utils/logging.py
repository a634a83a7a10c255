"""Shared logging configuration for knowledge ingestion."""

import logging
import json
from datetime import datetime, timezone

_RESERVED_ATTRS = set(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for better parsing."""

    def format(self, record):
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        # Context passed through `extra=`
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and key not in log_data:
                log_data[key] = value
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, default=str)


def setup_logging(name: str = None, level=logging.INFO, json_format: bool = True) -> logging.Logger:
    """Set up structured logging.

    Attaches a single stream handler; calling it again for the same logger
    does not stack duplicate handlers.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not any(getattr(h, "_knowledge_ingest", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler._knowledge_ingest = True
        if json_format:
            handler.setFormatter(JSONFormatter())
        else:
            handler.setFormatter(
                logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
            )
        logger.addHandler(handler)

    return logger
