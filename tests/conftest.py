"""Pytest fixtures for testing"""

import pytest
from datetime import datetime, timezone

from creditguard.domain.models import (
    AccountStatus,
    AccountType,
    CanonicalAccount,
    PaymentHistorySummary,
    PaymentRecord,
    PaymentStatus,
)

# 2023-01-15T00:00:00Z in epoch milliseconds
JAN_15_2023_MS = 1673740800000


def make_account(**overrides) -> CanonicalAccount:
    """Canonical account with sensible defaults for calculator tests"""
    fields = dict(
        id="acct_1",
        creditor_name="Test Bank",
        type=AccountType.CREDIT_CARD,
        account_number="XXXX1234",
        balance=0.0,
        status=AccountStatus.CURRENT,
        open_date=datetime(2020, 1, 1, tzinfo=timezone.utc),
        minimum_payment=0.0,
    )
    fields.update(overrides)
    return CanonicalAccount(**fields)


def history_of(*statuses: PaymentStatus, year: int = 2023) -> PaymentHistorySummary:
    payments = tuple(
        PaymentRecord(year=year, month=index + 1, status=status) for index, status in enumerate(statuses)
    )
    return PaymentHistorySummary(on_time_payment_percentage=0, payments=payments)


@pytest.fixture
def raw_revolving_account() -> dict:
    """Current-generation Equifax revolving tradeline"""
    return {
        "id": "trade_001",
        "accountName": "CAPITAL ONE",
        "accountNumber": "XXXX4321",
        "accountType": "REVOLVING",
        "balanceAmount": {"amount": 1250, "currency": "USD"},
        "creditLimitAmount": {"amount": 5000, "currency": "USD"},
        "accountOpen": True,
        "paymentStatus": "PAYS_AS_AGREED",
        "dateOpened": JAN_15_2023_MS,
        "lastActivityDate": "2024-03-02",
        "monthlyPayment": {"amount": 35, "currency": "USD"},
        "paymentHistory": [
            {
                "year": 2024,
                "january": {"monthType": "POSITIVE", "value": "PAYS_AS_AGREED"},
                "february": {"monthType": "POSITIVE", "value": "PAYS_AS_AGREED"},
                "march": {"monthType": "NEGATIVE", "value": "LATE_30_DAYS"},
                "april": {"monthType": "NO_DATA", "value": "NOT_REPORTED"},
            }
        ],
    }


@pytest.fixture
def raw_auto_loan() -> dict:
    return {
        "accountId": "trade_002",
        "creditorName": "ALLY FINANCIAL",
        "loanType": {"code": "AUTO_LOAN"},
        "balance": 8000,
        "accountOpen": True,
        "accountStatus": "late_30",
        "openDate": "2021-06-01T00:00:00Z",
        "minimumPayment": 410,
        "isNegative": True,
    }


@pytest.fixture
def raw_closed_mortgage() -> dict:
    return {
        "id": "trade_003",
        "name": "ROCKET MORTGAGE",
        "type": "Mortgage",
        "balanceAmount": {"amount": 0},
        "accountOpen": False,
        "paymentStatus": "PAYS_AS_AGREED",
        "dateOpened": "2015-04-20",
    }


@pytest.fixture
def equifax_summary() -> dict:
    return {
        "totalNegativeAccounts": 1,
        "averageAccountAgeMonths": 48,
        "revolvingAccounts": {
            "totalAccounts": 1,
            "totalAccountsWithBalance": 1,
            "balance": {"amount": 1250, "currency": "USD"},
            "creditLimit": {"amount": 5000, "currency": "USD"},
            "available": {"amount": 3750, "currency": "USD"},
            "debtToCreditRatio": 25,
            "monthlyPaymentAmount": {"amount": 35, "currency": "USD"},
            "totalNegativeAccounts": 0,
        },
        "installmentAccounts": {
            "totalAccounts": 1,
            "totalAccountsWithBalance": 1,
            "balance": {"amount": 8000, "currency": "USD"},
            "monthlyPaymentAmount": {"amount": 410, "currency": "USD"},
            "totalNegativeAccounts": 1,
        },
    }


@pytest.fixture
def multi_bureau_report(raw_revolving_account, raw_auto_loan, raw_closed_mortgage, equifax_summary) -> dict:
    """providerViews report with an Equifax and a TransUnion view"""
    return {
        "id": "report_1",
        "generatedDate": JAN_15_2023_MS,
        "providerViews": [
            {
                "provider": "EFX",
                "summary": equifax_summary,
                "revolvingAccounts": [raw_revolving_account],
                "installmentAccounts": [raw_auto_loan],
                "mortgageAccounts": [raw_closed_mortgage],
                "inquiries": [
                    {
                        "reportedDate": JAN_15_2023_MS,
                        "contactInformation": {"contactName": "CHASE CARD"},
                        "type": "HARD",
                    }
                ],
                "liens": [
                    {
                        "id": "lien_1",
                        "type": "State Tax Lien",
                        "status": {"code": "RELEASED_PAID", "description": "Released - paid"},
                        "filedDate": JAN_15_2023_MS,
                        "amount": {"amount": 2400},
                        "courtName": "COUNTY COURT",
                    }
                ],
                "collections": [
                    {
                        "id": "col_1",
                        "agencyClient": "MIDLAND CREDIT",
                        "accountNumber": "99887766",
                        "amount": {"amount": 540, "currency": "USD"},
                        "status": "OPEN",
                        "reportedDate": JAN_15_2023_MS,
                    }
                ],
            },
            {
                "provider": "TU",
                "revolvingAccounts": [
                    {
                        "id": "tu_trade_1",
                        "creditorName": "DISCOVER",
                        "accountType": "CREDIT_CARD",
                        "balance": 300,
                        "creditLimit": 1000,
                        "paymentStatus": "current",
                        "openDate": "2019-09-09",
                    }
                ],
            },
        ],
    }


@pytest.fixture
def account_factory():
    return make_account


@pytest.fixture
def history_factory():
    return history_of
