"""Credit score extraction from multi-bureau score responses"""

from typing import Any, Iterable, List, Mapping, Optional

from creditguard.config import settings
from creditguard.domain.bureaus import resolve_bureau, select_provider_view
from creditguard.domain.extraction import extract_amount, text_or_none
from creditguard.domain.models import Bureau, CreditScore, ScoreFactor, ScoreHistoryPoint
from creditguard.domain.payloads import ScoreResponse, classify_scores
from creditguard.domain.vocabulary import map_score_factor_impact
from creditguard.utils.date_utils import parse_bureau_date, parse_bureau_date_or_now

DISPLAY_NAMES = {
    Bureau.EQUIFAX: "Equifax",
    Bureau.TRANSUNION: "TransUnion",
    Bureau.EXPERIAN: "Experian",
}


def bureau_display_name(provider: Any) -> str:
    """Display name for a provider code; unrecognized codes are shown as given"""
    bureau = resolve_bureau(provider)
    if bureau is None:
        return text_or_none(provider) or "Unknown"
    return DISPLAY_NAMES[bureau]


def _score_range(ranges: Any) -> tuple[int, int]:
    if not isinstance(ranges, list) or not ranges:
        return settings.score_range_min, settings.score_range_max
    first = ranges[0] if isinstance(ranges[0], Mapping) else {}
    last = ranges[-1] if isinstance(ranges[-1], Mapping) else {}
    low = extract_amount(first.get("low"))
    high = extract_amount(last.get("high"))
    return (
        int(low) if low else settings.score_range_min,
        int(high) if high else settings.score_range_max,
    )


def score_factors(reasons: Any) -> tuple:
    if not isinstance(reasons, list):
        return ()
    return tuple(
        ScoreFactor(
            code=text_or_none(reason.get("code")) or "",
            description=text_or_none(reason.get("description")) or "",
            impact=map_score_factor_impact(reason.get("creditScoreFactorEffect")),
        )
        for reason in reasons
        if isinstance(reason, Mapping)
    )


def extract_credit_score(response: Any, bureau: Any = None) -> Optional[CreditScore]:
    """
    Credit score for one bureau from a latest-scores response.

    Falls back to the first provider view like the report path does. Returns
    None when the response has no usable view or score.
    """
    payload = classify_scores(response)
    if not isinstance(payload, ScoreResponse):
        return None

    selection = select_provider_view(response, bureau or settings.default_bureau)
    view = selection.view
    if view is None:
        return None

    score = extract_amount(view.get("score"))
    if score is None:
        return None

    range_min, range_max = _score_range(view.get("scoreRanges"))

    return CreditScore(
        score=int(score),
        score_date=parse_bureau_date_or_now(payload.generated_date, field="score.generated_date"),
        bureau=bureau_display_name(view.get("provider")),
        score_range_min=range_min,
        score_range_max=range_max,
        factors=score_factors(view.get("scoreReasons")),
    )


def extract_score_history(entries: Iterable[Any] | None, bureau: Any = None) -> List[ScoreHistoryPoint]:
    """
    One point per history entry that carries the bureau, oldest first.

    Entries without a view for the bureau, a numeric score or a parseable
    date are dropped; there is no first-view fallback in history.
    """
    requested = resolve_bureau(bureau or settings.default_bureau)
    if requested is None:
        return []

    points: List[ScoreHistoryPoint] = []
    for entry in entries or ():
        payload = classify_scores(entry)
        if not isinstance(payload, ScoreResponse):
            continue
        when = parse_bureau_date(payload.generated_date)
        if when is None:
            continue
        for view in payload.views:
            if resolve_bureau(view.get("provider")) != requested:
                continue
            score = extract_amount(view.get("score"))
            if score is not None:
                points.append(ScoreHistoryPoint(date=when, score=int(score), provider=str(view.get("provider"))))
            break

    return sorted(points, key=lambda point: point.date)
