"""
Known bureau payload shapes.

Raw responses are classified once into one of a closed set of variants so the
normalizer branches on a type instead of on ad hoc key checks:

- ProviderViewsReport: {"providerViews": [{"provider": "EFX", ...}, ...]}
  the current multi-bureau report, one view per bureau
- LegacyReport: a single-bureau report with top-level accounts, summary,
  publicRecords, inquiries and collections
- ScoreResponse: {"providerViews": [{"provider", "score", ...}], "generatedDate"}
- UnknownPayload: anything else, normalized to an empty result
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Tuple, Union

from creditguard.domain.bureaus import provider_views
from creditguard.infrastructure.observability.metrics import unknown_shape_counter

LEGACY_REPORT_KEYS = frozenset({"accounts", "summary", "publicRecords", "inquiries", "collections"})

# Sections of a provider view holding raw tradelines / records
ACCOUNT_SECTIONS = ("revolvingAccounts", "mortgageAccounts", "installmentAccounts", "otherAccounts")
PUBLIC_RECORD_SECTIONS = ("publicRecords", "bankruptcies", "liens", "judgments")


@dataclass(frozen=True)
class ProviderViewsReport:
    views: Tuple[Mapping[str, Any], ...]
    kind: str = field(default="provider_views", init=False)


@dataclass(frozen=True)
class LegacyReport:
    raw: Mapping[str, Any]
    kind: str = field(default="legacy", init=False)


@dataclass(frozen=True)
class ScoreResponse:
    views: Tuple[Mapping[str, Any], ...]
    generated_date: Any = None
    kind: str = field(default="scores", init=False)


@dataclass(frozen=True)
class UnknownPayload:
    raw: Any
    kind: str = field(default="unknown", init=False)


ReportPayload = Union[ProviderViewsReport, LegacyReport, UnknownPayload]
ScorePayload = Union[ScoreResponse, UnknownPayload]


def _unknown(raw: Any, kind: str) -> UnknownPayload:
    unknown_shape_counter.labels(kind=kind).inc()
    logging.warning(
        "Unrecognized bureau payload shape",
        extra={"payload_kind": kind, "payload_type": type(raw).__name__},
    )
    return UnknownPayload(raw=raw)


def classify_report(raw: Any) -> ReportPayload:
    if isinstance(raw, Mapping):
        if isinstance(raw.get("providerViews"), list):
            return ProviderViewsReport(views=tuple(provider_views(raw)))
        if LEGACY_REPORT_KEYS & raw.keys():
            return LegacyReport(raw=raw)
    return _unknown(raw, "report")


def classify_scores(raw: Any) -> ScorePayload:
    if isinstance(raw, Mapping) and isinstance(raw.get("providerViews"), list):
        return ScoreResponse(views=tuple(provider_views(raw)), generated_date=raw.get("generatedDate"))
    return _unknown(raw, "scores")


def list_section(record: Any, key: str) -> list:
    """A list-valued section of a record, [] when missing or not a list"""
    if not isinstance(record, Mapping):
        return []
    value = record.get(key)
    return value if isinstance(value, list) else []


def gather_sections(records: Any, keys: Tuple[str, ...]) -> list:
    """Concatenate the list sections named by keys across records, in order"""
    gathered: list = []
    for record in records:
        for key in keys:
            gathered.extend(list_section(record, key))
    return gathered
