"""Logging setup for the service."""

import json
import logging
from typing import Any

from stratdeck.config import settings


class JsonLineFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage().replace("\n", "\\n"),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info).replace("\n", "\\n")
        return json.dumps(payload, ensure_ascii=True, separators=(",", ":"))


def setup_logging(logger_name: str = "stratdeck") -> logging.Logger:
    """Attach a single stream handler to the package logger."""
    logger = logging.getLogger(logger_name)
    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    logger.handlers.clear()
    logger.propagate = False

    formatter: logging.Formatter
    if settings.log_json:
        formatter = JsonLineFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    return logger
