import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional, TextIO

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(module)s: %(message)s"
TEXT_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Loggers that narrate every token request and HTTP call at INFO.
_NOISY_LOGGERS = ("azure", "azure.identity", "httpx")


class JsonFormatter(logging.Formatter):
    """
    One JSON object per record, for shipping sample runs to a log pipeline.
    """
    def format(self, record: logging.LogRecord) -> str:
        log_record: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_record)


def configure_logging(
    level: Optional[str] = None,
    log_format: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Configures the root logger once.
    LOG_LEVEL (DEBUG | INFO | WARNING | ERROR, default INFO) and
    LOG_FORMAT (TEXT | JSON, default TEXT) apply when no argument is given.

    Records go to stderr by default; stdout carries the sample output.
    """
    logger = logging.getLogger()

    # idempotent configuration
    if logger.handlers:
        return logger

    level_name = (level or os.environ.get("LOG_LEVEL") or "INFO").strip().upper()
    format_name = (log_format or os.environ.get("LOG_FORMAT") or "TEXT").strip().upper()
    numeric_level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(numeric_level)
    if format_name == "JSON":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATEFMT))

    logger.setLevel(numeric_level)
    logger.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger
