"""Payment history parsing from the bureau per-year/per-month layout"""

from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from creditguard.domain.extraction import round_half_up
from creditguard.domain.models import PaymentHistorySummary, PaymentRecord, PaymentStatus

MONTH_NAMES = (
    "january",
    "february",
    "march",
    "april",
    "may",
    "june",
    "july",
    "august",
    "september",
    "october",
    "november",
    "december",
)

UNREPORTED_VALUES = frozenset({"NOT_REPORTED", "UNAVAILABLE"})

# Inverse layout used when handing history back in bureau form
BUREAU_MONTH_CODES: Mapping[PaymentStatus, Tuple[str, str]] = MappingProxyType({
    PaymentStatus.CURRENT: ("POSITIVE", "PAYS_AS_AGREED"),
    PaymentStatus.LATE: ("NEGATIVE", "LATE"),
    PaymentStatus.DEROGATORY: ("NEGATIVE", "CHARGE_OFF"),
    PaymentStatus.UNKNOWN: ("NO_DATA", "NOT_REPORTED"),
})


def convert_month_status(month_type: Any, value: Any) -> PaymentStatus:
    """
    Map a bureau (monthType, value) pair to a canonical status.

    Rules, first match wins:
    - POSITIVE + PAYS_AS_AGREED -> current
    - any NEGATIVE month, or a value mentioning LATE -> late
    - NOT_REPORTED / UNAVAILABLE / NO_DATA -> unknown
    - everything else -> unknown
    """
    month_type = str(month_type) if month_type is not None else ""
    value = str(value) if value is not None else ""

    if month_type == "POSITIVE" and value == "PAYS_AS_AGREED":
        return PaymentStatus.CURRENT
    if month_type == "NEGATIVE" or "LATE" in value:
        return PaymentStatus.LATE
    if value in UNREPORTED_VALUES or month_type == "NO_DATA":
        return PaymentStatus.UNKNOWN
    return PaymentStatus.UNKNOWN


def _coerce_year(raw_year: Any) -> Optional[int]:
    if isinstance(raw_year, bool):
        return None
    try:
        return int(raw_year)
    except (TypeError, ValueError, OverflowError):
        return None


def on_time_percentage(payments: List[PaymentRecord]) -> int:
    """Share of reported (non-unknown) months that were current; 0 with nothing reported"""
    reported = [p for p in payments if p.status != PaymentStatus.UNKNOWN]
    if not reported:
        return 0
    current = sum(1 for p in reported if p.status == PaymentStatus.CURRENT)
    return round_half_up(current / len(reported) * 100)


def parse_payment_history(raw: Any) -> Optional[PaymentHistorySummary]:
    """
    Convert a bureau payment history into canonical month records.

    Input is a list of year entries such as
    {"year": 2023, "january": {"monthType": "POSITIVE", "value": "PAYS_AS_AGREED"}, ...}.
    Only months present with both monthType and value produce a record;
    missing months are not synthesized. Year entries without a usable year
    are skipped. Returns None for a missing or empty history.
    """
    if not isinstance(raw, list) or not raw:
        return None

    payments: List[PaymentRecord] = []
    for year_entry in raw:
        if not isinstance(year_entry, Mapping):
            continue
        year = _coerce_year(year_entry.get("year"))
        if year is None:
            continue

        for month_index, month_name in enumerate(MONTH_NAMES):
            month_data = year_entry.get(month_name)
            if not isinstance(month_data, Mapping):
                continue
            if "monthType" not in month_data or "value" not in month_data:
                continue
            payments.append(
                PaymentRecord(
                    year=year,
                    month=month_index + 1,
                    status=convert_month_status(month_data["monthType"], month_data["value"]),
                )
            )

    return PaymentHistorySummary(
        on_time_payment_percentage=on_time_percentage(payments),
        payments=tuple(payments),
    )


def has_payment_history_data(history: Optional[PaymentHistorySummary]) -> bool:
    return bool(history and history.payments)


def to_bureau_payment_history(history: Optional[PaymentHistorySummary]) -> Optional[List[Dict[str, Any]]]:
    """Rebuild the bureau year/month layout, years ascending; None when there is nothing to emit"""
    if not has_payment_history_data(history):
        return None

    by_year: Dict[int, Dict[str, Any]] = {}
    for payment in history.payments:
        if not 1 <= payment.month <= 12:
            continue
        month_type, value = BUREAU_MONTH_CODES[payment.status]
        year_entry = by_year.setdefault(payment.year, {"year": payment.year})
        year_entry[MONTH_NAMES[payment.month - 1]] = {"monthType": month_type, "value": value}

    return [by_year[year] for year in sorted(by_year)] or None
