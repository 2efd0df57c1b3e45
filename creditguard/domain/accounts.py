"""Account normalization from raw bureau tradelines"""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping

from creditguard.domain.extraction import extract_amount, first_amount, first_present, nested, text_or_none
from creditguard.domain.models import AccountStatus, CanonicalAccount
from creditguard.domain.payment_history import parse_payment_history, to_bureau_payment_history
from creditguard.domain.vocabulary import map_account_type, map_payment_status
from creditguard.utils.date_utils import epoch_millis, parse_bureau_date, parse_bureau_date_or_now, utc_now

UNKNOWN_CREDITOR = "Unknown Creditor"
MISSING_ACCOUNT_NUMBER = "N/A"


def credit_utilization(balance: float, credit_limit: float | None) -> float | None:
    """Balance as a percent of limit; None unless the limit is positive"""
    if credit_limit is None or credit_limit <= 0:
        return None
    return balance / credit_limit * 100


def normalize_account(raw: Mapping[str, Any]) -> CanonicalAccount:
    """
    Build one canonical account from one raw bureau tradeline.

    Field variants across payload generations:
    - balance: balanceAmount | balance
    - limit: creditLimitAmount | creditLimit
    - name: accountName | creditorName | name
    - type: accountType | type | loanType.code
    - status: accountStatus | paymentStatus | status, forced to closed
      when accountOpen is explicitly False

    Never raises; missing identity fields get placeholders.
    """
    if not isinstance(raw, Mapping):
        raw = {}

    balance = first_amount(raw.get("balanceAmount"), raw.get("balance")) or 0.0
    limit = first_amount(raw.get("creditLimitAmount"), raw.get("creditLimit")) or 0.0
    credit_limit = limit if limit > 0 else None

    status = map_payment_status(
        first_present(raw.get("accountStatus"), raw.get("paymentStatus"), raw.get("status"))
    )
    if raw.get("accountOpen") is False:
        status = AccountStatus.CLOSED

    account_type = map_account_type(
        first_present(raw.get("accountType"), raw.get("type"), nested(raw, "loanType", "code"))
    )

    monthly_payment = extract_amount(raw.get("monthlyPayment"))
    minimum_payment = first_amount(raw.get("minimumPayment"), raw.get("monthlyPayment"))

    account_id = text_or_none(first_present(raw.get("id"), raw.get("accountId")))
    creditor_name = text_or_none(
        first_present(raw.get("accountName"), raw.get("creditorName"), raw.get("name"))
    )

    return CanonicalAccount(
        id=account_id or f"account_{epoch_millis(utc_now())}",
        creditor_name=creditor_name or UNKNOWN_CREDITOR,
        type=account_type,
        account_number=text_or_none(raw.get("accountNumber")) or MISSING_ACCOUNT_NUMBER,
        balance=balance,
        credit_limit=credit_limit,
        credit_utilization=credit_utilization(balance, credit_limit),
        status=status,
        open_date=parse_bureau_date_or_now(
            first_present(raw.get("dateOpened"), raw.get("openDate")), field="account.open_date"
        ),
        last_payment_date=parse_bureau_date(
            first_present(raw.get("lastActivityDate"), raw.get("lastPaymentDate"))
        ),
        minimum_payment=minimum_payment if minimum_payment is not None else 0.0,
        monthly_payment=monthly_payment,
        payment_history=parse_payment_history(raw.get("paymentHistory")),
        is_negative=raw.get("isNegative") is True,
        interest_rate=extract_amount(raw.get("interestRate")) or 0.0,
    )


def normalize_accounts(raws: Iterable[Any] | None) -> List[CanonicalAccount]:
    """Normalize every mapping entry, skipping anything that is not a record"""
    return [normalize_account(raw) for raw in raws or () if isinstance(raw, Mapping)]


# Status codes written back when handing an account to the bureau layout
BUREAU_PAYMENT_STATUS = {
    AccountStatus.LATE: "late_30",
    AccountStatus.DELINQUENT: "charge_off",
}


def _iso_or_none(moment: datetime | None) -> str | None:
    return moment.isoformat() if moment is not None else None


def to_bureau_account(account: CanonicalAccount) -> Dict[str, Any]:
    """
    Rebuild a legacy-shaped tradeline from a canonical account.

    Feeding the result back through normalize_account reproduces the
    account's id, name, type, amounts, status and payment history
    (derogatory months come back as late). Closed accounts are written with
    accountOpen False.
    """
    return {
        "id": account.id,
        "creditorName": account.creditor_name,
        "accountType": account.type.value,
        "accountNumber": account.account_number or MISSING_ACCOUNT_NUMBER,
        "balance": account.balance,
        "creditLimit": account.credit_limit,
        "paymentStatus": BUREAU_PAYMENT_STATUS.get(account.status, "current"),
        "accountOpen": account.status != AccountStatus.CLOSED,
        "openDate": _iso_or_none(account.open_date),
        "lastPaymentDate": _iso_or_none(account.last_payment_date),
        "monthsReviewed": 0,
        "monthlyPayment": account.monthly_payment,
        "minimumPayment": account.minimum_payment,
        "paymentHistory": to_bureau_payment_history(account.payment_history),
    }
