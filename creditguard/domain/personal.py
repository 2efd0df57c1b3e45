"""
Personal information - consumer identity from the report subject.

Current reports carry the subject in each provider view's summary
(providerViews[].summary.subject) with a currentName/currentAddress layout;
older payloads carry a top-level personalInfo object with name, addresses
and employment fields. Both normalize to PersonalInfo.
"""

from datetime import datetime
from typing import Any, Iterable, Mapping, Optional

from creditguard.domain.bureaus import filter_provider_views, provider_views
from creditguard.domain.extraction import extract_count, first_present, nested, text_or_none
from creditguard.domain.models import Address, Employment, PersonalInfo
from creditguard.utils.date_utils import ensure_utc, months_between, parse_bureau_date, utc_now

MASKED_SSN = "***-**-****"
NOT_AVAILABLE = "N/A"
UNKNOWN_NAME = "Unknown"

# Filled from later bureaus only when the first subject lacks them; employment is never merged
MERGEABLE_SUBJECT_FIELDS = ("previousAddresses", "currentAddress")


def merge_subjects(views: Iterable[Mapping[str, Any]]) -> Optional[dict]:
    """
    Combine the summary subjects of several provider views.

    The first subject wins. Later subjects only fill a missing dateOfBirth
    (a key check, since 0 and negative timestamps are valid),
    currentAddress or previousAddresses.
    """
    merged: Optional[dict] = None
    for view in views:
        subject = nested(view, "summary", "subject")
        if not isinstance(subject, Mapping):
            continue
        if merged is None:
            merged = dict(subject)
            continue
        if "dateOfBirth" in subject and "dateOfBirth" not in merged:
            merged["dateOfBirth"] = subject["dateOfBirth"]
        for key in MERGEABLE_SUBJECT_FIELDS:
            if subject.get(key) is not None and merged.get(key) is None:
                merged[key] = subject[key]
    return merged


def extract_personal_subject(report: Any, bureau: Any = None) -> Optional[Mapping[str, Any]]:
    """Raw subject for one bureau (or merged across all), else the legacy personalInfo object"""
    if not isinstance(report, Mapping):
        return None

    merged = merge_subjects(filter_provider_views(provider_views(report), bureau))
    if merged is not None:
        return merged

    legacy = report.get("personalInfo")
    return legacy if isinstance(legacy, Mapping) else None


def _text(value: Any, default: str = NOT_AVAILABLE) -> str:
    return text_or_none(value) or default


def _subject_address(raw: Any) -> Address:
    if not isinstance(raw, Mapping):
        raw = {}
    return Address(
        street=_text(raw.get("line1")),
        city=_text(raw.get("line3")),
        state=_text(raw.get("line4")),
        zip_code=_text(raw.get("line5")),
        country=_text(nested(raw, "country", "code"), "US"),
    )


def _legacy_address(raw: Any) -> Address:
    if not isinstance(raw, Mapping):
        raw = {}
    return Address(
        street=_text(first_present(raw.get("street"), raw.get("streetAddress"))),
        city=_text(raw.get("city")),
        state=_text(first_present(raw.get("state"), raw.get("stateCode"))),
        zip_code=_text(first_present(raw.get("zipCode"), raw.get("postalCode"))),
        country=_text(raw.get("country"), "US"),
    )


def _years_since(start: Optional[datetime], as_of: datetime) -> int:
    if start is None or start > as_of:
        return 0
    return int(months_between(start, as_of) // 12)


def _subject_employment(history: Any, as_of: datetime) -> tuple[Optional[Employment], tuple]:
    """
    Current employer (or the first, latest, entry) plus everyone else.

    No employment is reported when the selected entry has no employer name.
    """
    entries = [entry for entry in history if isinstance(entry, Mapping)] if isinstance(history, list) else []
    if not entries:
        return None, ()

    selected = next((entry for entry in entries if entry.get("currentEmployer") is True), entries[0])
    if not text_or_none(selected.get("employerName")):
        return None, ()

    start = parse_bureau_date(selected.get("dateOfEmployment"))
    employment = Employment(
        employer=_text(selected.get("employerName")),
        start_date=start,
        years_employed=_years_since(start, as_of),
        is_current=selected.get("currentEmployer") is True,
    )
    previous = tuple(
        Employment(
            employer=_text(entry.get("employerName")),
            start_date=parse_bureau_date(entry.get("dateOfEmployment")),
        )
        for entry in entries
        if entry is not selected
    )
    return employment, previous


def _from_subject(raw: Mapping[str, Any], as_of: datetime) -> PersonalInfo:
    first_name = text_or_none(nested(raw, "currentName", "firstName")) or ""
    last_name = text_or_none(nested(raw, "currentName", "lastName")) or ""
    previous = raw.get("previousAddresses")
    employment, previous_employments = _subject_employment(raw.get("employmentHistory"), as_of)

    return PersonalInfo(
        full_name=f"{first_name} {last_name}".strip() or UNKNOWN_NAME,
        ssn=_text(raw.get("nationalIdentifier"), MASKED_SSN),
        address=_subject_address(raw.get("currentAddress")),
        date_of_birth=parse_bureau_date(raw.get("dateOfBirth")),
        previous_addresses=tuple(_subject_address(a) for a in previous) if isinstance(previous, list) else (),
        employment=employment,
        previous_employments=previous_employments,
    )


def _from_legacy(raw: Mapping[str, Any]) -> PersonalInfo:
    name = raw.get("name") if isinstance(raw.get("name"), Mapping) else {}
    parts = (text_or_none(name.get(key)) for key in ("firstName", "middleName", "lastName"))
    full_name = text_or_none(raw.get("fullName")) or " ".join(part for part in parts if part)

    addresses = raw.get("addresses") if isinstance(raw.get("addresses"), list) else []

    employment = None
    job = raw.get("employment")
    if isinstance(job, Mapping):
        employment = Employment(
            employer=_text(job.get("employer")),
            position=_text(first_present(job.get("position"), job.get("title"))),
            years_employed=extract_count(job.get("yearsEmployed")),
        )

    return PersonalInfo(
        full_name=full_name or UNKNOWN_NAME,
        ssn=_text(first_present(raw.get("ssn"), raw.get("socialSecurityNumber")), MASKED_SSN),
        address=_legacy_address(addresses[0] if addresses else None),
        date_of_birth=parse_bureau_date(first_present(raw.get("dateOfBirth"), raw.get("dob"))),
        # current address plus at most two previous ones
        previous_addresses=tuple(_legacy_address(a) for a in addresses[1:3]),
        phone=_text(first_present(raw.get("phone"), raw.get("phoneNumber"))),
        email=_text(first_present(raw.get("email"), raw.get("emailAddress"))),
        employment=employment,
    )


def normalize_personal_info(raw: Any, as_of: Optional[datetime] = None) -> Optional[PersonalInfo]:
    """PersonalInfo from a report subject or a legacy personalInfo object; None when there is none"""
    if not isinstance(raw, Mapping) or not raw:
        return None
    if isinstance(raw.get("currentName"), Mapping):
        return _from_subject(raw, ensure_utc(as_of) if as_of else utc_now())
    return _from_legacy(raw)
