"""Public record, inquiry and collection normalization"""

from typing import Any, Iterable, List, Mapping

from creditguard.config import settings
from creditguard.domain.extraction import extract_amount, first_amount, first_present, nested, text_or_none
from creditguard.domain.models import (
    Collection,
    CreditInquiry,
    Money,
    PublicRecord,
    PublicRecordType,
)
from creditguard.domain.vocabulary import (
    classify_collection_status,
    classify_public_record_status,
    classify_public_record_type,
    map_inquiry_type,
)
from creditguard.utils.date_utils import epoch_millis, parse_bureau_date, parse_bureau_date_or_now, utc_now

UNKNOWN_CREDITOR = "Unknown Creditor"


def _placeholder_id(prefix: str, index: int) -> str:
    return f"{prefix}_{epoch_millis(utc_now())}_{index}"


def _record_type(raw: Mapping[str, Any]) -> PublicRecordType:
    # Bankruptcy payloads carry these fields instead of a descriptive type
    if raw.get("bankruptcyType") or raw.get("dispositionStatus"):
        return PublicRecordType.BANKRUPTCY
    return classify_public_record_type(raw.get("type"))


def _status_text(raw: Mapping[str, Any]) -> tuple[str, str]:
    """
    Status text used for classification, plus a human description.

    Bankruptcies report dispositionStatus, liens and judgments report
    status; either may be a plain string or a {code, description} object.
    """
    status_obj = first_present(raw.get("dispositionStatus"), raw.get("status"))
    if isinstance(status_obj, Mapping):
        text = str(first_present(status_obj.get("code"), status_obj.get("description")) or "")
        description = text_or_none(status_obj.get("description")) or text
        return text, description
    text = str(status_obj) if status_obj is not None else ""
    return text, text


def normalize_public_record(raw: Mapping[str, Any], index: int = 0) -> PublicRecord:
    """Canonical public record from a bankruptcy, lien, judgment or generic record entry"""
    if not isinstance(raw, Mapping):
        raw = {}

    record_type = _record_type(raw)
    status_text, status_description = _status_text(raw)
    status = classify_public_record_status(status_text)

    filing_date = parse_bureau_date_or_now(
        first_present(raw.get("filedDate"), raw.get("dateFiled"), raw.get("reportedDate")),
        field="public_record.filing_date",
    )

    amount = first_amount(raw.get("amount"), raw.get("balance"), raw.get("originalAmount"))

    description = text_or_none(raw.get("description"))
    if not description:
        description = (
            text_or_none(raw.get("remarks"))
            or text_or_none(status_description)
            or f"{record_type.value.replace('_', ' ')} - {status.value}"
        )

    return PublicRecord(
        id=text_or_none(raw.get("id")) or _placeholder_id("pr", index),
        type=record_type,
        status=status,
        filing_date=filing_date,
        description=description,
        amount=amount if amount is not None and amount > 0 else None,
        court=text_or_none(first_present(raw.get("court"), raw.get("courtName"))),
        case_number=text_or_none(first_present(raw.get("caseNumber"), raw.get("referenceNumber"))),
        expected_removal_date=parse_bureau_date(
            first_present(raw.get("removalDate"), raw.get("expectedRemovalDate"))
        ),
    )


def normalize_inquiry(raw: Mapping[str, Any]) -> CreditInquiry:
    if not isinstance(raw, Mapping):
        raw = {}

    creditor_name = text_or_none(
        first_present(
            nested(raw, "contactInformation", "contactName"),
            raw.get("creditorName"),
            raw.get("name"),
        )
    )

    return CreditInquiry(
        date=parse_bureau_date_or_now(
            first_present(raw.get("reportedDate"), raw.get("date")), field="inquiry.date"
        ),
        creditor_name=creditor_name or UNKNOWN_CREDITOR,
        type=map_inquiry_type(raw.get("type")),
    )


def normalize_collection(raw: Mapping[str, Any], index: int = 0) -> Collection:
    if not isinstance(raw, Mapping):
        raw = {}

    agency_client = text_or_none(raw.get("agencyClient"))
    currency = text_or_none(nested(raw, "amount", "currency")) or settings.default_currency

    return Collection(
        id=text_or_none(raw.get("id")) or _placeholder_id("collection", index),
        creditor_name=agency_client or text_or_none(raw.get("creditorName")) or UNKNOWN_CREDITOR,
        account_number=text_or_none(raw.get("accountNumber")) or "N/A",
        amount=Money(amount=extract_amount(raw.get("amount")) or 0.0, currency=currency),
        status=classify_collection_status(raw.get("status")),
        reported_date=parse_bureau_date_or_now(raw.get("reportedDate"), field="collection.reported_date"),
        assigned_date=parse_bureau_date(raw.get("assignedDate")),
        agency_client=agency_client,
        balance_date=parse_bureau_date(raw.get("balanceDate")),
        status_date=parse_bureau_date(raw.get("statusDate")),
        account_designator_code=text_or_none(raw.get("accountDesignatorCode")),
        provider=text_or_none(raw.get("provider")),
    )


def normalize_public_records(raws: Iterable[Any] | None) -> List[PublicRecord]:
    records = [raw for raw in raws or () if isinstance(raw, Mapping)]
    return [normalize_public_record(raw, index) for index, raw in enumerate(records)]


def normalize_inquiries(raws: Iterable[Any] | None) -> List[CreditInquiry]:
    return [normalize_inquiry(raw) for raw in raws or () if isinstance(raw, Mapping)]


def normalize_collections(raws: Iterable[Any] | None) -> List[Collection]:
    records = [raw for raw in raws or () if isinstance(raw, Mapping)]
    return [normalize_collection(raw, index) for index, raw in enumerate(records)]
