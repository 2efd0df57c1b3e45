"""Credit profile assembly - the entry point from raw report payload to canonical model"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Mapping, Optional

from creditguard.domain.accounts import normalize_accounts
from creditguard.domain.bureaus import is_all_bureaus, resolve_bureau, select_provider_view
from creditguard.domain.derogatory import calculate_derogatory_marks
from creditguard.domain.extraction import extract_amount, extract_count, nested, round_half_up
from creditguard.domain.models import (
    AccountStatus,
    AccountTypeStats,
    CanonicalAccount,
    CreditProfile,
    DerogatoryMarksSummary,
    PaymentStatus,
    ProviderSelection,
    ReportOverview,
)
from creditguard.domain.payloads import (
    ACCOUNT_SECTIONS,
    PUBLIC_RECORD_SECTIONS,
    LegacyReport,
    ProviderViewsReport,
    classify_report,
    gather_sections,
    list_section,
)
from creditguard.domain.personal import merge_subjects, normalize_personal_info
from creditguard.domain.records import normalize_collections, normalize_inquiries, normalize_public_records
from creditguard.domain.summary import aggregate_by_type, total_stats
from creditguard.infrastructure.observability.logging import log_profile_built
from creditguard.infrastructure.observability.metrics import record_profile
from creditguard.utils.date_utils import ensure_utc, months_between, utc_now


@dataclass
class RawSections:
    """Raw record lists pulled out of whichever payload shape arrived"""

    accounts: list
    public_records: list
    collections: list
    inquiries: list
    summary: Any = None
    subject: Any = None


def _sections_from_views(views: List[Mapping[str, Any]]) -> RawSections:
    # A summary only describes its own bureau, so merged views carry none
    summary = views[0].get("summary") if len(views) == 1 else None
    return RawSections(
        accounts=gather_sections(views, ACCOUNT_SECTIONS),
        public_records=gather_sections(views, PUBLIC_RECORD_SECTIONS),
        collections=gather_sections(views, ("collections",)),
        inquiries=gather_sections(views, ("inquiries",)),
        summary=summary if isinstance(summary, Mapping) else None,
        subject=merge_subjects(views),
    )


def _sections_from_legacy(raw: Mapping[str, Any]) -> RawSections:
    summary = raw.get("summary")
    return RawSections(
        accounts=list_section(raw, "accounts"),
        public_records=list_section(raw, "publicRecords"),
        collections=list_section(raw, "collections"),
        inquiries=list_section(raw, "inquiries"),
        summary=summary if isinstance(summary, Mapping) else None,
        subject=raw.get("personalInfo"),
    )


def _first_positive(*values: Optional[float]) -> Optional[float]:
    for value in values:
        if value is not None and value > 0:
            return value
    return None


def payment_totals(accounts: List[CanonicalAccount]) -> tuple[int, int]:
    """
    Report-level on-time percentage and late month count.

    The percentage averages the on-time percentages of accounts that carry a
    parsed history, 0 when none does. Late and derogatory months both count
    as late; unknown months are not reported.
    """
    histories = [account.payment_history for account in accounts if account.payment_history is not None]
    reported = [
        payment.status
        for history in histories
        for payment in history.payments
        if payment.status != PaymentStatus.UNKNOWN
    ]
    late = sum(1 for status in reported if status in (PaymentStatus.LATE, PaymentStatus.DEROGATORY))

    if not histories:
        return 0, late
    return round_half_up(sum(h.on_time_payment_percentage for h in histories) / len(histories)), late


def build_overview(
    accounts: List[CanonicalAccount],
    totals: AccountTypeStats,
    summary: Any,
    as_of: datetime,
    derogatory: Optional[DerogatoryMarksSummary] = None,
    collection_count: int = 0,
) -> ReportOverview:
    """
    Headline figures, preferring the bureau summary's totalOpenAccounts
    section, then its revolving section, then values derived from accounts.
    """
    as_of = ensure_utc(as_of)
    computed_utilization = totals.total_balance / totals.credit_limit if totals.credit_limit > 0 else 0.0

    summary_account_total = sum(
        extract_count(nested(summary, section, "totalAccounts"))
        for section in ("revolvingAccounts", "installmentAccounts", "mortgageAccounts")
    )

    if accounts:
        ages = [months_between(account.open_date, as_of) for account in accounts]
        computed_age = round_half_up(sum(ages) / len(ages))
    else:
        computed_age = 0

    on_time, late_count = payment_totals(accounts)

    summary_ratio = _first_positive(
        extract_amount(nested(summary, "totalOpenAccounts", "debtToCreditRatio")),
        extract_amount(nested(summary, "revolvingAccounts", "debtToCreditRatio")),
    )

    return ReportOverview(
        total_accounts=len(accounts) or summary_account_total,
        open_accounts=extract_count(nested(summary, "totalOpenAccounts", "totalAccounts"))
        or sum(1 for account in accounts if account.status != AccountStatus.CLOSED),
        total_balance=_first_positive(
            extract_amount(nested(summary, "totalOpenAccounts", "balance")),
            extract_amount(nested(summary, "revolvingAccounts", "balance")),
        )
        or totals.total_balance,
        total_credit_limit=_first_positive(
            extract_amount(nested(summary, "totalOpenAccounts", "creditLimit")),
            extract_amount(nested(summary, "revolvingAccounts", "creditLimit")),
        )
        or totals.credit_limit,
        utilization_rate=summary_ratio / 100 if summary_ratio is not None else computed_utilization,
        average_account_age_months=extract_count(nested(summary, "averageAccountAgeMonths")) or computed_age,
        on_time_payment_percentage=on_time,
        late_payment_count=late_count,
        collection_count=collection_count,
        # the collections list is counted here on top of the derogatory total
        derogatory_mark_count=(derogatory.total_count if derogatory else 0) + collection_count,
    )


def build_credit_profile(
    report: Any,
    bureau: Any = None,
    summary: Optional[Mapping[str, Any]] = None,
    as_of: Optional[datetime] = None,
) -> CreditProfile:
    """
    Normalize one raw report payload into a CreditProfile.

    Flow:
    1. Classify the payload shape
    2. Select the provider view for the bureau (every view when bureau is None or "all")
    3. Normalize accounts, public records, collections, inquiries and personal info
    4. Aggregate by account type and compute derogatory marks
    5. Derive the overview, log and record metrics

    A separately fetched report summary may be passed as summary; it takes
    precedence over the one embedded in the report. A naive as_of is taken
    as UTC.
    """
    as_of = ensure_utc(as_of) if as_of is not None else utc_now()
    payload = classify_report(report)
    selection = ProviderSelection(view=None, requested=resolve_bureau(bureau), resolved=None)

    if isinstance(payload, ProviderViewsReport):
        if is_all_bureaus(bureau):
            sections = _sections_from_views(list(payload.views))
        else:
            selection = select_provider_view(report, bureau)
            sections = _sections_from_views([selection.view] if selection.view is not None else [])
        if sections.subject is None and isinstance(report, Mapping):
            sections.subject = report.get("personalInfo")
    elif isinstance(payload, LegacyReport):
        sections = _sections_from_legacy(payload.raw)
    else:
        sections = RawSections(accounts=[], public_records=[], collections=[], inquiries=[])

    bureau_summary = summary if isinstance(summary, Mapping) else sections.summary

    accounts = normalize_accounts(sections.accounts)
    public_records = normalize_public_records(sections.public_records)
    collections = normalize_collections(sections.collections)
    inquiries = normalize_inquiries(sections.inquiries)

    details = aggregate_by_type(accounts, bureau_summary)
    totals = total_stats(details)
    derogatory = calculate_derogatory_marks(accounts, public_records, bureau_summary)
    overview = build_overview(accounts, totals, bureau_summary, as_of, derogatory, len(collections))
    personal_info = normalize_personal_info(sections.subject, as_of)

    record_profile(payload.kind, derogatory.estimated_score_impact)
    log_profile_built(
        shape=payload.kind,
        bureau=selection.resolved.value if selection.resolved else None,
        is_fallback=selection.is_fallback,
        account_count=len(accounts),
        derogatory_severity=derogatory.severity.value,
    )

    return CreditProfile(
        accounts=accounts,
        inquiries=inquiries,
        public_records=public_records,
        collections=collections,
        account_details=details,
        account_totals=totals,
        derogatory_marks=derogatory,
        overview=overview,
        personal_info=personal_info,
        selection=selection,
        shape=payload.kind,
    )
