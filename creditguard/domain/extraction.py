"""Safe scalar extraction from loosely typed bureau fields"""

import math
import re
from typing import Any, Mapping, Optional

# Leading decimal number of a string, "12.5 USD" -> "12.5"
_LEADING_NUMBER = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _finite(number: Any) -> Optional[float]:
    """Float value of a number, None when it is NaN, infinite or too large for a float"""
    try:
        number = float(number)
    except OverflowError:
        return None
    return number if math.isfinite(number) else None


def parse_leading_number(text: str) -> Optional[float]:
    """Numeric prefix of a string; trailing units or text are ignored"""
    match = _LEADING_NUMBER.match(text)
    if match is None:
        return None
    return _finite(match.group(0))


def extract_amount(value: Any) -> Optional[float]:
    """
    Normalize a monetary field that arrives either as a bare number or as
    an {"amount": ..., "currency": ...} object.

    A string amount is read up to its first non-numeric character, so
    "12.5 USD" is 12.5. Returns None for None, NaN, booleans, values too
    large for a float, objects without a usable amount, and every other
    shape.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        return _finite(value)

    if isinstance(value, Mapping) and value.get("amount") is not None:
        amount = value["amount"]
        if isinstance(amount, bool):
            return None
        if isinstance(amount, (int, float)):
            return _finite(amount)
        return parse_leading_number(str(amount))

    return None


def extract_count(value: Any) -> int:
    """Non-negative integer count; 0 for anything else"""
    amount = extract_amount(value)
    if amount is None or amount < 0:
        return 0
    return int(amount)


def first_present(*values: Any) -> Any:
    """First value that is not None (and not an empty string)"""
    for value in values:
        if value is not None and value != "":
            return value
    return None


def first_amount(*values: Any) -> Optional[float]:
    """First extractable amount among several field-name variants"""
    for value in values:
        amount = extract_amount(value)
        if amount is not None:
            return amount
    return None


def text_or_none(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (Mapping, list)):
        return None
    text = str(value).strip()
    return text or None


def nested(record: Any, *path: str) -> Any:
    """Walk a chain of mapping keys, None as soon as a hop is missing"""
    current = record
    for key in path:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves rounded up (2.5 -> 3, -2.5 -> -2)"""
    return int(math.floor(value + 0.5))
