"""Prometheus metrics for monitoring normalization fallbacks and profile outcomes"""

from prometheus_client import Counter, Histogram

# Profile metrics
profiles_built_counter = Counter(
    "creditguard_profiles_built_total",
    "Credit profiles normalized",
    ["shape"],  # provider_views | legacy | unknown
)

derogatory_impact_histogram = Histogram(
    "creditguard_derogatory_score_impact",
    "Estimated score impact of derogatory marks per profile",
    buckets=[0, 15, 30, 60, 100, 150, 200],
)

# Fallback signals
bureau_fallback_counter = Counter(
    "creditguard_bureau_fallback_total",
    "Requested bureau missing from response, first provider view substituted",
    ["requested"],
)

unknown_shape_counter = Counter(
    "creditguard_unknown_payload_shape_total",
    "Payloads matching no known report or score shape",
    ["kind"],  # report | scores
)

date_fallback_counter = Counter(
    "creditguard_date_fallback_total",
    "Required dates replaced by the current time",
    ["field"],
)


def record_profile(shape: str, estimated_score_impact: int) -> None:
    """Record profile metrics for monitoring payload drift and derogatory distribution"""
    profiles_built_counter.labels(shape=shape).inc()
    derogatory_impact_histogram.observe(estimated_score_impact)
