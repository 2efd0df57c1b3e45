"""Domain models - pure Python dataclasses representing the canonical credit profile"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple


class AccountType(str, Enum):
    CREDIT_CARD = "credit_card"
    MORTGAGE = "mortgage"
    AUTO_LOAN = "auto_loan"
    PERSONAL_LOAN = "personal_loan"
    STUDENT_LOAN = "student_loan"


class AccountStatus(str, Enum):
    CURRENT = "current"
    LATE = "late"
    DELINQUENT = "delinquent"
    CLOSED = "closed"


class PaymentStatus(str, Enum):
    CURRENT = "current"
    LATE = "late"
    DEROGATORY = "derogatory"
    UNKNOWN = "unknown"


class Severity(str, Enum):
    NONE = "none"
    LOW = "low"
    MODERATE = "moderate"
    SEVERE = "severe"


class PublicRecordType(str, Enum):
    BANKRUPTCY = "bankruptcy"
    TAX_LIEN = "tax_lien"
    CIVIL_JUDGMENT = "civil_judgment"
    FORECLOSURE = "foreclosure"
    COLLECTION = "collection"


class PublicRecordStatus(str, Enum):
    FILED = "filed"
    DISMISSED = "dismissed"
    SATISFIED = "satisfied"
    ACTIVE = "active"


class CollectionStatus(str, Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"
    PAID = "PAID"
    SETTLED = "SETTLED"
    DISPUTED = "DISPUTED"


class InquiryType(str, Enum):
    HARD = "hard"
    SOFT = "soft"


class FactorImpact(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class Bureau(str, Enum):
    EQUIFAX = "equifax"
    TRANSUNION = "transunion"
    EXPERIAN = "experian"


@dataclass(frozen=True)
class PaymentRecord:
    """One reported month of an account's payment history"""

    year: int
    month: int  # 1-12
    status: PaymentStatus


@dataclass(frozen=True)
class PaymentHistorySummary:
    """Parsed payment history, months in the order the bureau reported them"""

    on_time_payment_percentage: int
    payments: Tuple[PaymentRecord, ...] = ()


@dataclass
class CanonicalAccount:
    """Bureau-agnostic tradeline"""

    id: str
    creditor_name: str
    type: AccountType
    account_number: str
    balance: float
    status: AccountStatus
    open_date: datetime
    minimum_payment: float
    credit_limit: Optional[float] = None
    credit_utilization: Optional[float] = None  # percent, only when credit_limit > 0
    last_payment_date: Optional[datetime] = None
    monthly_payment: Optional[float] = None
    payment_history: Optional[PaymentHistorySummary] = None
    is_negative: bool = False
    interest_rate: float = 0.0


@dataclass
class AccountTypeStats:
    """Aggregate statistics for one account bucket"""

    open: int = 0
    with_balance: int = 0
    total_balance: float = 0.0
    available: float = 0.0
    credit_limit: float = 0.0
    debt_to_credit: int = 0  # integer percent
    payment: float = 0.0


@dataclass
class AccountDetailsByType:
    """Per-bucket statistics plus how they were derived"""

    revolving: AccountTypeStats = field(default_factory=AccountTypeStats)
    mortgage: AccountTypeStats = field(default_factory=AccountTypeStats)
    installment: AccountTypeStats = field(default_factory=AccountTypeStats)
    other: AccountTypeStats = field(default_factory=AccountTypeStats)
    source: str = "empty"  # "accounts" | "summary" | "empty"

    def buckets(self) -> Tuple[AccountTypeStats, ...]:
        return (self.revolving, self.mortgage, self.installment, self.other)


@dataclass(frozen=True)
class DerogatoryMarksSummary:
    """Derogatory mark counts with weighted score impact and severity"""

    total_count: int
    late_payments: int
    collections: int
    public_records: int
    charge_offs: int
    estimated_score_impact: int
    severity: Severity


@dataclass
class PublicRecord:
    id: str
    type: PublicRecordType
    status: PublicRecordStatus
    filing_date: datetime
    description: str
    amount: Optional[float] = None
    court: Optional[str] = None
    case_number: Optional[str] = None
    expected_removal_date: Optional[datetime] = None


@dataclass(frozen=True)
class Money:
    amount: float
    currency: str = "USD"


@dataclass
class Collection:
    id: str
    creditor_name: str
    account_number: str
    amount: Money
    status: CollectionStatus
    reported_date: datetime
    assigned_date: Optional[datetime] = None
    agency_client: Optional[str] = None
    balance_date: Optional[datetime] = None
    status_date: Optional[datetime] = None
    account_designator_code: Optional[str] = None
    provider: Optional[str] = None


@dataclass
class CreditInquiry:
    date: datetime
    creditor_name: str
    type: InquiryType


@dataclass(frozen=True)
class ProviderSelection:
    """
    Outcome of picking one bureau's view out of a multi-bureau response.

    is_fallback is True when the requested bureau was absent and the first
    available view was substituted; callers needing strict isolation must
    check it (or select with strict=True, which yields view=None instead).
    """

    view: Optional[dict]
    requested: Optional[Bureau]
    resolved: Optional[Bureau]
    is_fallback: bool = False


@dataclass(frozen=True)
class ScoreFactor:
    code: str
    description: str
    impact: FactorImpact


@dataclass
class CreditScore:
    score: int
    score_date: datetime
    bureau: str  # display name, e.g. "Equifax"
    score_range_min: int
    score_range_max: int
    factors: Tuple[ScoreFactor, ...] = ()


@dataclass(frozen=True)
class ScoreHistoryPoint:
    date: datetime
    score: int
    provider: str


@dataclass(frozen=True)
class Address:
    street: str = "N/A"
    city: str = "N/A"
    state: str = "N/A"
    zip_code: str = "N/A"
    country: str = "US"


@dataclass(frozen=True)
class Employment:
    employer: str
    position: str = "N/A"
    start_date: Optional[datetime] = None
    years_employed: int = 0
    is_current: bool = False


@dataclass
class PersonalInfo:
    """Consumer identity section of a report; ssn is the masked identifier the bureau reports"""

    full_name: str
    ssn: str
    address: Address
    date_of_birth: Optional[datetime] = None
    previous_addresses: Tuple[Address, ...] = ()
    phone: str = "N/A"
    email: str = "N/A"
    employment: Optional[Employment] = None
    previous_employments: Tuple[Employment, ...] = ()


@dataclass
class ReportOverview:
    """Headline figures for the report summary cards"""

    total_accounts: int
    open_accounts: int
    total_balance: float
    total_credit_limit: float
    utilization_rate: float  # 0-1
    average_account_age_months: int
    on_time_payment_percentage: int = 0
    late_payment_count: int = 0  # late or derogatory months across payment histories
    collection_count: int = 0
    # Derogatory total plus the collections list; DerogatoryMarksSummary.total_count excludes those collections
    derogatory_mark_count: int = 0


@dataclass
class CreditProfile:
    """Output of a single normalization call"""

    accounts: List[CanonicalAccount]
    inquiries: List[CreditInquiry]
    public_records: List[PublicRecord]
    collections: List[Collection]
    account_details: AccountDetailsByType
    account_totals: AccountTypeStats
    derogatory_marks: DerogatoryMarksSummary
    overview: ReportOverview
    selection: ProviderSelection
    shape: str
    personal_info: Optional[PersonalInfo] = None
