"""Account-type aggregation - per-bucket balances, limits and debt-to-credit"""

from typing import Any, Dict, Iterable, List, Mapping, Optional

from creditguard.domain.extraction import extract_amount, extract_count, round_half_up
from creditguard.domain.models import (
    AccountDetailsByType,
    AccountStatus,
    AccountType,
    AccountTypeStats,
    CanonicalAccount,
)

REVOLVING_TYPES = frozenset({AccountType.CREDIT_CARD})
MORTGAGE_TYPES = frozenset({AccountType.MORTGAGE})
INSTALLMENT_TYPES = frozenset({AccountType.AUTO_LOAN, AccountType.PERSONAL_LOAN, AccountType.STUDENT_LOAN})

# Bucket name -> key of the bureau summary section
SUMMARY_SECTIONS = (
    ("revolving", "revolvingAccounts"),
    ("mortgage", "mortgageAccounts"),
    ("installment", "installmentAccounts"),
    ("other", "otherAccounts"),
)


def debt_to_credit(total_balance: float, credit_limit: float) -> int:
    """Balance over limit as a rounded integer percent, 0 when there is no limit"""
    if credit_limit <= 0:
        return 0
    return round_half_up(total_balance / credit_limit * 100)


def bucket_for(account_type: Any) -> str:
    if account_type in REVOLVING_TYPES:
        return "revolving"
    if account_type in MORTGAGE_TYPES:
        return "mortgage"
    if account_type in INSTALLMENT_TYPES:
        return "installment"
    return "other"


def stats_from_summary_section(section: Any) -> AccountTypeStats:
    """
    Convert one bureau summary section (e.g. summary.revolvingAccounts).

    The bureau reports totalAccounts for open accounts and its own
    debtToCreditRatio, which is rounded but otherwise taken as given.
    """
    if not isinstance(section, Mapping):
        return AccountTypeStats()

    ratio = extract_amount(section.get("debtToCreditRatio")) or 0.0

    return AccountTypeStats(
        open=extract_count(section.get("totalAccounts")),
        with_balance=extract_count(section.get("totalAccountsWithBalance")),
        total_balance=extract_amount(section.get("balance")) or 0.0,
        available=extract_amount(section.get("available")) or 0.0,
        credit_limit=extract_amount(section.get("creditLimit")) or 0.0,
        debt_to_credit=round_half_up(ratio),
        payment=extract_amount(section.get("monthlyPaymentAmount")) or 0.0,
    )


def stats_from_accounts(accounts: List[CanonicalAccount]) -> AccountTypeStats:
    """Reduce canonical accounts of one bucket into statistics"""
    total_balance = sum(account.balance for account in accounts)
    credit_limit = sum(account.credit_limit or 0.0 for account in accounts)

    return AccountTypeStats(
        open=sum(1 for account in accounts if account.status != AccountStatus.CLOSED),
        with_balance=sum(1 for account in accounts if account.balance > 0),
        total_balance=total_balance,
        available=credit_limit - total_balance,
        credit_limit=credit_limit,
        debt_to_credit=debt_to_credit(total_balance, credit_limit),
        payment=sum(account.monthly_payment or account.minimum_payment or 0.0 for account in accounts),
    )


def aggregate_from_summary(summary: Any) -> Optional[AccountDetailsByType]:
    """Summary mode: bureau pre-aggregated sections; None when there is no summary"""
    if not isinstance(summary, Mapping):
        return None

    buckets = {
        bucket: stats_from_summary_section(summary.get(section))
        for bucket, section in SUMMARY_SECTIONS
    }
    return AccountDetailsByType(source="summary", **buckets)


def aggregate_from_accounts(accounts: Iterable[CanonicalAccount]) -> AccountDetailsByType:
    """Reduction mode: group canonical accounts by bucket and reduce each"""
    grouped: Dict[str, List[CanonicalAccount]] = {bucket: [] for bucket, _ in SUMMARY_SECTIONS}
    for account in accounts:
        grouped[bucket_for(account.type)].append(account)

    return AccountDetailsByType(
        source="accounts",
        **{bucket: stats_from_accounts(members) for bucket, members in grouped.items()},
    )


def aggregate_by_type(
    accounts: Optional[List[CanonicalAccount]] = None,
    summary: Any = None,
) -> AccountDetailsByType:
    """
    Per-bucket statistics from whichever source is available.

    Individual accounts win when present; otherwise the bureau summary is
    converted directly; with neither, every bucket is zero.
    """
    if accounts:
        return aggregate_from_accounts(accounts)

    from_summary = aggregate_from_summary(summary)
    if from_summary is not None:
        return from_summary

    return AccountDetailsByType()


def total_stats(details: AccountDetailsByType) -> AccountTypeStats:
    """
    Elementwise sum across buckets.

    debt_to_credit is re-derived from the summed balance and limit rather
    than combined from the per-bucket percentages.
    """
    buckets = details.buckets()
    total_balance = sum(stats.total_balance for stats in buckets)
    credit_limit = sum(stats.credit_limit for stats in buckets)

    return AccountTypeStats(
        open=sum(stats.open for stats in buckets),
        with_balance=sum(stats.with_balance for stats in buckets),
        total_balance=total_balance,
        available=sum(stats.available for stats in buckets),
        credit_limit=credit_limit,
        debt_to_credit=debt_to_credit(total_balance, credit_limit),
        payment=sum(stats.payment for stats in buckets),
    )
