from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Optional

from ossgate.config import LOG_FORMAT, LOG_LEVEL


class JsonLogFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def configure_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    log_level = (level or LOG_LEVEL or "INFO").upper()
    level_value = getattr(logging, log_level, logging.INFO)
    fmt = (log_format or LOG_FORMAT or "text").strip().lower()

    root = logging.getLogger()
    root.setLevel(level_value)
    formatter: logging.Formatter
    if fmt == "json":
        formatter = JsonLogFormatter()
    else:
        # Build transcripts read better without the logger name noise
        formatter = logging.Formatter("%(asctime)s %(levelname)s %(message)s")

    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        root.addHandler(handler)
        return

    for handler in root.handlers:
        handler.setFormatter(formatter)
