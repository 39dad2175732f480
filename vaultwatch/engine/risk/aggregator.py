"""Risk group aggregation.

Classifies the strategies of a snapshot into configured groups and derives
per-group risk metrics:

1. Classification - exclude patterns first, then include patterns
2. Per-group scores - longevity, median, TVL impact, impact score
3. Global metric - each group's share of the total grouped debt

Usage:
    groups = compute_risk_groups(snapshot, chain_id=1, criteria=config.groups)
    ranked = sort_risk_groups(groups, "score")
"""

import logging
import time
from typing import Callable, Iterable

from vaultwatch.data.models import Snapshot, Strategy
from vaultwatch.engine.filters import find_strategy_by_search
from vaultwatch.engine.models.risk import RiskGroup, RiskGroupConfig, RiskGroupCriteria
from vaultwatch.engine.risk.scores import (
    SECONDS_PER_DAY,
    ScoringBands,
    get_exclude_include_url_params,
    get_impact_score,
    get_longevity_score,
    get_tvl_impact,
    median,
)

logger = logging.getLogger(__name__)

SORT_KEYS: dict[str, Callable[[RiskGroup], object]] = {
    "name": lambda g: g.name.lower(),
    "tvl": lambda g: g.tvl,
    "score": lambda g: g.impact_score,
    "median": lambda g: g.median_score,
    "likelihood": lambda g: g.median_score,
    "risk": lambda g: g.tvl_impact,
}


def matches_criteria(strategy: Strategy, criteria: RiskGroupCriteria) -> bool:
    """Check if a strategy belongs to a group. Exclusion takes precedence."""
    if any(find_strategy_by_search(strategy, pattern) for pattern in criteria.exclude):
        return False
    return any(find_strategy_by_search(strategy, pattern) for pattern in criteria.include)


def score_group(group: RiskGroup, now: float, bands: ScoringBands) -> None:
    """Fill the derived scores of a classified group.

    A group without any dated member has no history: its longevity score is
    0 instead of the score of an infinitely old group.
    """
    if group.oldest_activation > 0:
        age_days = (now - group.oldest_activation) / SECONDS_PER_DAY
        group.longevity_score = get_longevity_score(age_days, bands)
    else:
        group.longevity_score = 0.0

    group.median_score = median(group.sub_scores)
    group.tvl_impact = get_tvl_impact(group.tvl, bands)
    group.impact_score = get_impact_score(group.tvl_impact, group.median_score)
    group.url_params = get_exclude_include_url_params(group.config.criteria)


def compute_risk_groups(
    snapshot: Snapshot,
    chain_id: int,
    criteria: Iterable[RiskGroupConfig],
    now: float | None = None,
    bands: ScoringBands | None = None,
) -> list[RiskGroup]:
    """Build the risk groups of a chain from a snapshot.

    Args:
        snapshot: Committed snapshot to classify.
        chain_id: Active chain; groups configured for other chains are skipped.
        criteria: Configured group definitions.
        now: Current time in epoch seconds (defaults to the wall clock).
        bands: Scoring thresholds (defaults to ``ScoringBands()``).

    Returns:
        One RiskGroup per group configured for the chain, in config order.
    """
    now = time.time() if now is None else now
    bands = bands or ScoringBands()
    chain_id = chain_id or 1

    groups = [RiskGroup(config=c) for c in criteria if c.network == chain_id]

    for group in groups:
        for strategy in snapshot.strategies():
            if matches_criteria(strategy, group.config.criteria):
                group.add(strategy)
        score_group(group, now, bands)

    total_tvl = sum(group.tvl for group in groups)
    for group in groups:
        group.total_debt_ratio = group.tvl / total_tvl * 100 if total_tvl > 0 else 0.0

    logger.debug(
        f"Computed {len(groups)} risk groups for chain {chain_id}, "
        f"total grouped TVL {total_tvl:,.0f}"
    )
    return groups


def sort_risk_groups(
    groups: Iterable[RiskGroup],
    sort_by: str = "score",
    descending: bool = True,
) -> list[RiskGroup]:
    """Sort groups by one of ``SORT_KEYS``.

    Raises:
        ValueError: Unknown sort key.
    """
    if sort_by not in SORT_KEYS:
        raise ValueError(f"Unknown sort key {sort_by!r}, expected one of {sorted(SORT_KEYS)}")
    return sorted(groups, key=SORT_KEYS[sort_by], reverse=descending)
