"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger.json import JsonFormatter

from creditguard.config import settings


class CustomJsonFormatter(JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str | None = None) -> None:
    """
    Install the JSON handler on the root logger.

    The engine logs through the root logger, so embedding applications
    that call this get every normalization record as one JSON line.
    Defaults to settings.log_level.
    """
    root = logging.getLogger()
    root.setLevel((level or settings.log_level).upper())
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s"))
    root.addHandler(handler)


def log_profile_built(
    shape: str,
    bureau: str | None,
    is_fallback: bool,
    account_count: int,
    derogatory_severity: str,
) -> None:
    """Log structured profile outcome for analysis"""
    logging.info(
        "Credit profile normalized",
        extra={
            "step": "profile_built",
            "payload_shape": shape,
            "bureau": bureau or "all",
            "bureau_fallback": is_fallback,
            "account_count": account_count,
            "derogatory_severity": derogatory_severity,
        },
    )
