"""Multi-bureau resolution - provider code aliases and provider view selection"""

import logging
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple

from creditguard.config import settings
from creditguard.domain.exceptions import BureauAliasConflictError
from creditguard.domain.models import Bureau, ProviderSelection
from creditguard.infrastructure.observability.metrics import bureau_fallback_counter


class BureauRegistry:
    """
    Bidirectional map between canonical bureaus and provider-code aliases.

    Built once from a declarative table; a provider code registered for two
    bureaus is rejected at construction. Lookups are case-insensitive.
    """

    def __init__(self, aliases: Mapping[Bureau, Tuple[str, ...]]):
        by_code: Dict[str, Bureau] = {}
        for bureau, codes in aliases.items():
            for code in codes:
                key = code.strip().upper()
                owner = by_code.get(key)
                if owner is not None and owner != bureau:
                    raise BureauAliasConflictError(
                        f"Provider code {key!r} registered for both {owner.value} and {bureau.value}"
                    )
                by_code[key] = bureau

        self._by_code: Mapping[str, Bureau] = MappingProxyType(by_code)
        self._aliases: Mapping[Bureau, FrozenSet[str]] = MappingProxyType(
            {bureau: frozenset(code.strip().upper() for code in codes) for bureau, codes in aliases.items()}
        )
        # First alias is the code the report API uses for the bureau
        self._primary: Mapping[Bureau, str] = MappingProxyType(
            {bureau: codes[0].strip().upper() for bureau, codes in aliases.items() if codes}
        )

    def resolve(self, code: Any) -> Optional[Bureau]:
        if not isinstance(code, str):
            return None
        return self._by_code.get(code.strip().upper())

    def aliases(self, bureau: Bureau) -> FrozenSet[str]:
        return self._aliases.get(bureau, frozenset())

    def primary_code(self, bureau: Bureau) -> Optional[str]:
        return self._primary.get(bureau)

    def matches(self, bureau: Bureau, code: Any) -> bool:
        return self.resolve(code) == bureau


BUREAU_REGISTRY = BureauRegistry({
    Bureau.EQUIFAX: ("EFX", "EQUIFAX", "EQ"),
    Bureau.TRANSUNION: ("TU", "TRANSUNION", "TUC"),
    Bureau.EXPERIAN: ("XPN", "EXPERIAN", "EXP", "XP"),
})


def resolve_bureau(code: Any) -> Optional[Bureau]:
    """Canonical bureau for a provider code or bureau name, e.g. "EFX" -> equifax"""
    if isinstance(code, Bureau):
        return code
    return BUREAU_REGISTRY.resolve(code)


def provider_code(bureau: Bureau) -> Optional[str]:
    return BUREAU_REGISTRY.primary_code(bureau)


def provider_views(response: Any) -> List[Mapping[str, Any]]:
    """The providerViews list of a multi-bureau response, mappings only"""
    if not isinstance(response, Mapping):
        return []
    views = response.get("providerViews")
    if not isinstance(views, list):
        return []
    return [view for view in views if isinstance(view, Mapping)]


def is_all_bureaus(bureau: Any) -> bool:
    """None and "all" (any case) select every bureau"""
    return bureau is None or (isinstance(bureau, str) and bureau.strip().lower() == "all")


def filter_provider_views(views: Iterable[Mapping[str, Any]], bureau: Any = None) -> List[Mapping[str, Any]]:
    """Views belonging to one bureau; all views when bureau is None or "all" """
    views = list(views)
    if is_all_bureaus(bureau):
        return views

    resolved = resolve_bureau(bureau)
    if resolved is None:
        return []
    return [view for view in views if BUREAU_REGISTRY.matches(resolved, view.get("provider"))]


def select_provider_view(response: Any, bureau: Any, strict: Optional[bool] = None) -> ProviderSelection:
    """
    Pick the provider view for one bureau out of a multi-bureau response.

    When the bureau is missing (or unrecognized) the first available view is
    substituted and the selection is flagged is_fallback. With strict=True
    (default: settings.strict_bureau_isolation) no substitution happens and
    the selection carries no view.
    """
    if strict is None:
        strict = settings.strict_bureau_isolation

    requested = resolve_bureau(bureau)
    views = provider_views(response)

    if requested is not None:
        for view in views:
            if BUREAU_REGISTRY.matches(requested, view.get("provider")):
                return ProviderSelection(view=dict(view), requested=requested, resolved=requested)

    if strict or not views:
        return ProviderSelection(view=None, requested=requested, resolved=None)

    fallback = views[0]
    requested_label = requested.value if requested else str(bureau)
    bureau_fallback_counter.labels(requested=requested_label).inc()
    logging.warning(
        "Requested bureau not in response, using first provider view",
        extra={
            "requested_bureau": requested_label,
            "fallback_provider": fallback.get("provider"),
        },
    )
    return ProviderSelection(
        view=dict(fallback),
        requested=requested,
        resolved=resolve_bureau(fallback.get("provider")),
        is_fallback=True,
    )


def available_bureaus(response: Any) -> List[Bureau]:
    """Distinct bureaus present in a response, in response order; unknown provider codes are skipped"""
    found: List[Bureau] = []
    for view in provider_views(response):
        bureau = resolve_bureau(view.get("provider"))
        if bureau is not None and bureau not in found:
            found.append(bureau)
    return found
