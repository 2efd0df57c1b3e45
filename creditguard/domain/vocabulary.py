"""Bureau vocabulary mapping onto the canonical enums"""

import re
from types import MappingProxyType
from typing import Any, Mapping, Optional

from creditguard.domain.models import (
    AccountStatus,
    AccountType,
    CollectionStatus,
    FactorImpact,
    InquiryType,
    PublicRecordStatus,
    PublicRecordType,
)

_SEPARATORS = re.compile(r"[_\s-]")

ACCOUNT_TYPE_ALIASES: Mapping[str, AccountType] = MappingProxyType({
    # Standard formats
    "creditcard": AccountType.CREDIT_CARD,
    "cc": AccountType.CREDIT_CARD,
    "mortgage": AccountType.MORTGAGE,
    "homeloan": AccountType.MORTGAGE,
    "autoloan": AccountType.AUTO_LOAN,
    "auto": AccountType.AUTO_LOAN,
    "carloan": AccountType.AUTO_LOAN,
    "personalloan": AccountType.PERSONAL_LOAN,
    "personal": AccountType.PERSONAL_LOAN,
    "studentloan": AccountType.STUDENT_LOAN,
    "student": AccountType.STUDENT_LOAN,
    # Equifax portfolio and loan type codes
    "revolving": AccountType.CREDIT_CARD,
    "chargeaccount": AccountType.CREDIT_CARD,
    "checkcreditorlineofcredit": AccountType.CREDIT_CARD,
    "realestatejuniorliens": AccountType.MORTGAGE,
    "installment": AccountType.PERSONAL_LOAN,
})

PAYMENT_STATUS_ALIASES: Mapping[str, AccountStatus] = MappingProxyType({
    "current": AccountStatus.CURRENT,
    "ok": AccountStatus.CURRENT,
    "good": AccountStatus.CURRENT,
    "paysasagreed": AccountStatus.CURRENT,
    # Closed accounts frequently report UNAVAILABLE
    "unavailable": AccountStatus.CURRENT,
    "late": AccountStatus.LATE,
    "late30": AccountStatus.LATE,
    "late60": AccountStatus.LATE,
    "late90": AccountStatus.LATE,
    "late30days": AccountStatus.LATE,
    "late60days": AccountStatus.LATE,
    "late90days": AccountStatus.LATE,
    "30dayslate": AccountStatus.LATE,
    "60dayslate": AccountStatus.LATE,
    "90dayslate": AccountStatus.LATE,
    "delinquent": AccountStatus.DELINQUENT,
    "chargeoff": AccountStatus.DELINQUENT,
    "chargedoff": AccountStatus.DELINQUENT,
    "closed": AccountStatus.CLOSED,
})

DEFAULT_ACCOUNT_TYPE = AccountType.PERSONAL_LOAN
DEFAULT_ACCOUNT_STATUS = AccountStatus.CURRENT

# Checked in order, first match wins
PUBLIC_RECORD_TYPE_KEYWORDS = (
    (PublicRecordType.BANKRUPTCY, ("bankruptcy",)),
    (PublicRecordType.TAX_LIEN, ("lien",)),
    (PublicRecordType.CIVIL_JUDGMENT, ("judgment",)),
    (PublicRecordType.FORECLOSURE, ("foreclosure",)),
    (PublicRecordType.COLLECTION, ("collection",)),
)

PUBLIC_RECORD_STATUS_KEYWORDS = (
    (PublicRecordStatus.SATISFIED, ("satisfied", "paid")),
    (PublicRecordStatus.DISMISSED, ("dismissed", "discharged")),
    (PublicRecordStatus.FILED, ("filed",)),
    (PublicRecordStatus.ACTIVE, ("active",)),
)

COLLECTION_STATUS_KEYWORDS = (
    (CollectionStatus.PAID, ("PAID", "SATISFIED")),
    (CollectionStatus.SETTLED, ("SETTLED",)),
    (CollectionStatus.DISPUTED, ("DISPUTED",)),
    (CollectionStatus.CLOSED, ("CLOSED",)),
)

FACTOR_IMPACTS: Mapping[str, FactorImpact] = MappingProxyType({
    "HURTING": FactorImpact.NEGATIVE,
    "HELPING": FactorImpact.POSITIVE,
})


def normalize_vocabulary_key(raw: Any) -> str:
    """Lower-case and strip underscores, hyphens and whitespace"""
    if raw is None or not isinstance(raw, (str, int, float)) or isinstance(raw, bool):
        return ""
    return _SEPARATORS.sub("", str(raw).lower())


def map_account_type(raw: Any) -> AccountType:
    return ACCOUNT_TYPE_ALIASES.get(normalize_vocabulary_key(raw), DEFAULT_ACCOUNT_TYPE)


def map_payment_status(raw: Any) -> AccountStatus:
    return PAYMENT_STATUS_ALIASES.get(normalize_vocabulary_key(raw), DEFAULT_ACCOUNT_STATUS)


def _first_keyword_match(text: str, table) -> Optional[Any]:
    for canonical, keywords in table:
        if any(keyword in text for keyword in keywords):
            return canonical
    return None


def classify_public_record_type(raw_type: Any) -> PublicRecordType:
    """Substring classification of a public record type, collection when nothing matches"""
    text = str(raw_type).lower() if isinstance(raw_type, str) else ""
    return _first_keyword_match(text, PUBLIC_RECORD_TYPE_KEYWORDS) or PublicRecordType.COLLECTION


def classify_public_record_status(raw_status: str) -> PublicRecordStatus:
    text = raw_status.lower() if isinstance(raw_status, str) else ""
    return _first_keyword_match(text, PUBLIC_RECORD_STATUS_KEYWORDS) or PublicRecordStatus.ACTIVE


def classify_collection_status(raw_status: Any) -> CollectionStatus:
    text = raw_status.upper() if isinstance(raw_status, str) else ""
    return _first_keyword_match(text, COLLECTION_STATUS_KEYWORDS) or CollectionStatus.OPEN


def map_inquiry_type(raw: Any) -> InquiryType:
    if isinstance(raw, str) and raw.strip().lower() == "soft":
        return InquiryType.SOFT
    return InquiryType.HARD


def map_score_factor_impact(effect: Any) -> FactorImpact:
    key = effect.upper() if isinstance(effect, str) else ""
    return FACTOR_IMPACTS.get(key, FactorImpact.NEUTRAL)
