"""JSON line logging for stage resizing and bitmap import.

Records carry an ``event`` field so the log can be filtered per pipeline step:

- ``stage_size_changed`` / ``stage_size_rejected`` from the stage context
- ``bitmap_decoded`` / ``bitmap_decode_failed`` when a pipeline loads its source
- ``bitmap_resized`` / ``bitmap_passthrough`` once a plan is applied or skipped
- ``backdrop_adapted`` after a multi-frame adaptation
- ``logging_configured`` when the handlers are installed

Loggers live under ``stagefit``; the part after the first dot is written as ``area``.
"""

from __future__ import annotations

import json
import logging
import logging.handlers
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .config import config_root


_LOGGER_NAME = "stagefit"


def log_dir() -> Path:
    path = config_root() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts_utc": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "area": record.name.partition(".")[2] or None,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        if hasattr(record, "event"):
            payload["event"] = getattr(record, "event")
        return json.dumps(payload, ensure_ascii=True)


def configure_logging(
    keep_files: int = 7,
    console: bool = True,
    level: str = "INFO",
    directory: Path | None = None,
) -> logging.Logger:
    logger = logging.getLogger(_LOGGER_NAME)
    if logger.handlers:
        return logger

    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    path = (directory or log_dir()) / "stagefit.log"
    handler = logging.handlers.TimedRotatingFileHandler(
        filename=str(path),
        when="midnight",
        backupCount=max(2, keep_files),
        encoding="utf-8",
    )
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)

    if console:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
        logger.addHandler(stream_handler)

    logger.info("logging configured", extra={"event": "logging_configured"})
    return logger


def get_logger(area: str | None = None) -> logging.Logger:
    if area:
        return logging.getLogger(f"{_LOGGER_NAME}.{area}")
    return logging.getLogger(_LOGGER_NAME)
