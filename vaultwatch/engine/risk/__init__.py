"""Risk aggregation module."""

from vaultwatch.engine.risk.aggregator import (
    SORT_KEYS,
    compute_risk_groups,
    matches_criteria,
    score_group,
    sort_risk_groups,
)
from vaultwatch.engine.risk.scores import (
    ScoringBands,
    get_exclude_include_url_params,
    get_impact_score,
    get_longevity_score,
    get_tvl_impact,
    median,
    parse_exclude_include_url_params,
)

__all__ = [
    "SORT_KEYS",
    "compute_risk_groups",
    "matches_criteria",
    "score_group",
    "sort_risk_groups",
    "ScoringBands",
    "get_exclude_include_url_params",
    "get_impact_score",
    "get_longevity_score",
    "get_tvl_impact",
    "median",
    "parse_exclude_include_url_params",
]
