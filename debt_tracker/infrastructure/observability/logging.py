"""Structured JSON logging"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger
from debt_tracker.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_command(command: str, outcome: str, **fields: Any) -> None:
    """Log a handled command with its outcome and identifiers"""
    logging.getLogger("debt_tracker.commands").info(
        "Command handled",
        extra={"step": command, "outcome": outcome, **fields},
    )


def log_analysis(debt_id: str, outcome: str, tone: str | None, duration_ms: float) -> None:
    """Log the end of an advisory round-trip"""
    logging.getLogger("debt_tracker.advisory").info(
        "Analysis completed",
        extra={
            "debt_id": debt_id,
            "step": "analysis_complete",
            "outcome": outcome,
            "tone": tone,
            "duration_ms": duration_ms,
        },
    )
