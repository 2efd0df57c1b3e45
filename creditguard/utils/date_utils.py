"""Date parsing utilities for bureau payloads"""

import logging
import math
from datetime import datetime, timezone
from typing import Any, Optional

from creditguard.infrastructure.observability.metrics import date_fallback_counter

_FALLBACK_FORMATS = ("%m/%d/%Y", "%Y/%m/%d", "%m-%d-%Y")


def utc_now() -> datetime:
    """Current time in UTC. The only clock read in the engine."""
    return datetime.now(timezone.utc)


def epoch_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def ensure_utc(moment: datetime) -> datetime:
    """Naive datetimes are taken as UTC; aware ones pass through"""
    return moment if moment.tzinfo else moment.replace(tzinfo=timezone.utc)


def parse_bureau_date(value: Any) -> Optional[datetime]:
    """
    Parse a bureau date field.

    Numbers are epoch milliseconds (negative values are dates before 1970),
    strings are ISO-8601 or one of a few US layouts. Naive values are taken
    as UTC. Returns None for anything unparseable.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        try:
            if not math.isfinite(value):
                return None
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    if isinstance(value, datetime):
        return ensure_utc(value)

    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        parsed = None
        for fmt in _FALLBACK_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue

    if parsed is None:
        return None
    return ensure_utc(parsed)


def parse_bureau_date_or_now(value: Any, field: str = "") -> datetime:
    """Parse a required date, substituting the current time when it is missing or garbled"""
    parsed = parse_bureau_date(value)
    if parsed is not None:
        return parsed

    date_fallback_counter.labels(field=field or "unknown").inc()
    if value not in (None, ""):
        logging.debug("Unparseable bureau date, using now", extra={"field": field, "raw_value": repr(value)})
    return utc_now()


def months_between(start: datetime, end: datetime) -> float:
    """Elapsed months using 30-day months"""
    return (end - start).total_seconds() / (60 * 60 * 24 * 30)
