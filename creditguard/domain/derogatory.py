"""Derogatory marks - counts, estimated score impact and severity"""

from typing import Any, Iterable, List, Mapping, Optional

from creditguard.domain.extraction import extract_count
from creditguard.domain.models import (
    AccountStatus,
    CanonicalAccount,
    DerogatoryMarksSummary,
    PaymentStatus,
    PublicRecord,
    PublicRecordType,
    Severity,
)

# Approximate score points lost per item
LATE_PAYMENT_WEIGHT = 15
COLLECTION_WEIGHT = 80
CHARGE_OFF_WEIGHT = 100
PUBLIC_RECORD_WEIGHT = 120
MAX_SCORE_IMPACT = 200

NEGATIVE_PAYMENT_STATUSES = frozenset({PaymentStatus.LATE, PaymentStatus.DEROGATORY})
DEROGATORY_ACCOUNT_STATUSES = frozenset({AccountStatus.LATE, AccountStatus.DELINQUENT})

SUMMARY_BUCKETS = ("revolvingAccounts", "installmentAccounts", "mortgageAccounts")

SEVERITY_MESSAGES = {
    Severity.LOW: "Minor negative marks with minimal impact",
    Severity.MODERATE: "Moderate impact on your credit score",
    Severity.SEVERE: "Severely impacting your credit score",
}


def count_late_payments(account: CanonicalAccount) -> int:
    """Late or derogatory months in the account's payment history"""
    if account.payment_history is None:
        return 0
    return sum(1 for p in account.payment_history.payments if p.status in NEGATIVE_PAYMENT_STATUSES)


def has_derogatory(account: CanonicalAccount) -> bool:
    if account.is_negative:
        return True
    if account.status in DEROGATORY_ACCOUNT_STATUSES:
        return True
    return count_late_payments(account) > 0


def derogatory_label(account: CanonicalAccount) -> Optional[str]:
    """Short label for an account's worst mark, None when it has none"""
    if account.status == AccountStatus.DELINQUENT:
        return "Delinquent"
    if account.status == AccountStatus.LATE:
        return "Late Payment"

    late_count = count_late_payments(account)
    if late_count > 0:
        return f"{late_count} Late Payment{'s' if late_count > 1 else ''}"
    return None


def summary_negative_accounts(summary: Any) -> Optional[int]:
    """
    Bureau-reported negative account total.

    Uses totalNegativeAccounts when present (even when 0), otherwise the sum
    over the revolving/installment/mortgage sections. None without a summary.
    """
    if not isinstance(summary, Mapping):
        return None
    if summary.get("totalNegativeAccounts") is not None:
        return extract_count(summary["totalNegativeAccounts"])

    total = 0
    for bucket in SUMMARY_BUCKETS:
        section = summary.get(bucket)
        if isinstance(section, Mapping):
            total += extract_count(section.get("totalNegativeAccounts"))
    return total


def classify_severity(total_count: int, charge_offs: int, collections: int, public_records: int) -> Severity:
    if total_count == 0:
        return Severity.NONE
    if total_count <= 2 and charge_offs == 0 and collections == 0 and public_records == 0:
        return Severity.LOW
    if total_count <= 5 and charge_offs + collections + public_records <= 1:
        return Severity.MODERATE
    return Severity.SEVERE


def estimate_score_impact(late_payments: int, collections: int, charge_offs: int, public_records: int) -> int:
    impact = (
        late_payments * LATE_PAYMENT_WEIGHT
        + collections * COLLECTION_WEIGHT
        + charge_offs * CHARGE_OFF_WEIGHT
        + public_records * PUBLIC_RECORD_WEIGHT
    )
    return min(impact, MAX_SCORE_IMPACT)


def calculate_derogatory_marks(
    accounts: Iterable[CanonicalAccount],
    public_records: Iterable[PublicRecord],
    summary: Any = None,
) -> DerogatoryMarksSummary:
    """
    Combine account, public record and bureau summary data into one summary.

    Counting rules:
    - late payments: late/derogatory months per account, or 1 for a late
      account with no detailed history
    - charge-offs: accounts with delinquent status
    - negative accounts: the bureau summary total when one is given (it is
      authoritative, even when 0), else accounts flagged is_negative
    - collections: public records of type collection

    total_count = negative accounts + collections + public records. Late
    payments and charge-offs feed the score impact only; they are already
    reflected in the negative account total.
    """
    records: List[PublicRecord] = list(public_records)

    late_payments = 0
    charge_offs = 0
    flagged_negative = 0

    for account in accounts:
        if account.is_negative:
            flagged_negative += 1
        if account.status == AccountStatus.DELINQUENT:
            charge_offs += 1

        account_late = count_late_payments(account)
        if account_late == 0 and account.status == AccountStatus.LATE:
            account_late = 1
        late_payments += account_late

    reported_negative = summary_negative_accounts(summary)
    negative_accounts = reported_negative if reported_negative is not None else flagged_negative

    public_record_count = len(records)
    collections = sum(1 for record in records if record.type == PublicRecordType.COLLECTION)

    total_count = negative_accounts + collections + public_record_count

    return DerogatoryMarksSummary(
        total_count=total_count,
        late_payments=late_payments,
        collections=collections,
        public_records=public_record_count,
        charge_offs=charge_offs,
        estimated_score_impact=estimate_score_impact(late_payments, collections, charge_offs, public_record_count),
        severity=classify_severity(total_count, charge_offs, collections, public_record_count),
    )


def derogatory_message(summary: DerogatoryMarksSummary) -> str:
    if summary.total_count == 0:
        return "No derogatory marks found. Excellent!"
    return SEVERITY_MESSAGES.get(summary.severity, "No derogatory marks")
