"""Pydantic schemas for the canonical profile handed to the presentation layer"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from creditguard.domain.models import (
    AccountStatus,
    AccountType,
    Bureau,
    CollectionStatus,
    CreditProfile,
    InquiryType,
    PaymentStatus,
    PublicRecordStatus,
    PublicRecordType,
    Severity,
)


class CamelSchema(BaseModel):
    """Reads domain dataclasses by attribute, writes camelCase JSON"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class PaymentRecordSchema(CamelSchema):
    year: int
    month: int
    status: PaymentStatus


class PaymentHistorySchema(CamelSchema):
    on_time_payment_percentage: int
    payments: List[PaymentRecordSchema]


class AccountSchema(CamelSchema):
    id: str
    creditor_name: str
    type: AccountType
    account_number: str
    balance: float
    credit_limit: Optional[float] = None
    credit_utilization: Optional[float] = None
    status: AccountStatus
    open_date: datetime
    last_payment_date: Optional[datetime] = None
    minimum_payment: float
    monthly_payment: Optional[float] = None
    payment_history: Optional[PaymentHistorySchema] = None
    is_negative: bool
    interest_rate: float


class AccountTypeStatsSchema(CamelSchema):
    open: int
    with_balance: int
    total_balance: float
    available: float
    credit_limit: float
    debt_to_credit: int
    payment: float


class AccountDetailsSchema(CamelSchema):
    revolving: AccountTypeStatsSchema
    mortgage: AccountTypeStatsSchema
    installment: AccountTypeStatsSchema
    other: AccountTypeStatsSchema
    source: str


class DerogatoryMarksSchema(CamelSchema):
    total_count: int
    late_payments: int
    collections: int
    public_records: int
    charge_offs: int
    estimated_score_impact: int
    severity: Severity


class PublicRecordSchema(CamelSchema):
    id: str
    type: PublicRecordType
    status: PublicRecordStatus
    filing_date: datetime
    amount: Optional[float] = None
    court: Optional[str] = None
    case_number: Optional[str] = None
    description: str
    expected_removal_date: Optional[datetime] = None


class MoneySchema(CamelSchema):
    amount: float
    currency: str


class CollectionSchema(CamelSchema):
    id: str
    creditor_name: str
    account_number: str
    amount: MoneySchema
    status: CollectionStatus
    reported_date: datetime
    assigned_date: Optional[datetime] = None
    agency_client: Optional[str] = None
    balance_date: Optional[datetime] = None
    status_date: Optional[datetime] = None
    account_designator_code: Optional[str] = None
    provider: Optional[str] = None


class InquirySchema(CamelSchema):
    date: datetime
    creditor_name: str
    type: InquiryType


class OverviewSchema(CamelSchema):
    total_accounts: int
    open_accounts: int
    total_balance: float
    total_credit_limit: float
    utilization_rate: float
    average_account_age_months: int
    on_time_payment_percentage: int = 0
    late_payment_count: int = 0
    collection_count: int = 0
    derogatory_mark_count: int = 0


class AddressSchema(CamelSchema):
    street: str
    city: str
    state: str
    zip_code: str
    country: str


class EmploymentSchema(CamelSchema):
    employer: str
    position: str
    start_date: Optional[datetime] = None
    years_employed: int
    is_current: bool


class PersonalInfoSchema(CamelSchema):
    full_name: str
    ssn: str
    address: AddressSchema
    date_of_birth: Optional[datetime] = None
    previous_addresses: List[AddressSchema]
    phone: str
    email: str
    employment: Optional[EmploymentSchema] = None
    previous_employments: List[EmploymentSchema]


class SelectionSchema(CamelSchema):
    requested: Optional[Bureau] = None
    resolved: Optional[Bureau] = None
    is_fallback: bool = False


class CreditProfileSchema(CamelSchema):
    """Response shape for a normalized credit profile"""

    accounts: List[AccountSchema]
    inquiries: List[InquirySchema]
    public_records: List[PublicRecordSchema]
    collections: List[CollectionSchema]
    account_details: AccountDetailsSchema
    account_totals: AccountTypeStatsSchema
    derogatory_marks: DerogatoryMarksSchema
    overview: OverviewSchema
    personal_info: Optional[PersonalInfoSchema] = None
    selection: SelectionSchema
    shape: str

    @classmethod
    def from_domain(cls, profile: CreditProfile) -> "CreditProfileSchema":
        return cls.model_validate(profile, from_attributes=True)

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
