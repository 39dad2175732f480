"""Engine layer: search filters and risk aggregation."""

from vaultwatch.engine.filters import (
    SearchResult,
    deep_find_vault_by_search,
    filter_vaults,
    find_strategy_by_search,
    find_vault,
    summarize_vaults,
)
from vaultwatch.engine.risk import compute_risk_groups, sort_risk_groups

__all__ = [
    "SearchResult",
    "deep_find_vault_by_search",
    "filter_vaults",
    "find_strategy_by_search",
    "find_vault",
    "summarize_vaults",
    "compute_risk_groups",
    "sort_risk_groups",
]
