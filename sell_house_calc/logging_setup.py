"""Structured JSON logging for the command line tool and the web app"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

SERVICE_NAME = "sell-house-calc"


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter that adds a timestamp, the level name and the service"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = SERVICE_NAME


def setup_logging(level: str = "WARNING", force: bool = False) -> None:
    """Send JSON log lines to stderr.

    An existing root configuration is left in place (only the level changes)
    unless ``force`` is set, so test runners and embedding apps keep theirs.
    """
    logger = logging.getLogger()
    logger.setLevel(level)
    if logger.handlers and not force:
        return

    logger.handlers.clear()

    # stderr keeps stdout free for tables and exports
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s"))
    logger.addHandler(handler)
