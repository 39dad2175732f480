"""Risk scoring functions.

Scores sit on a 0-5 scale. Thresholds are configuration data: the defaults
below can be replaced through ``config/risk/groups.yaml``.
"""

from dataclasses import dataclass, field
from typing import Iterable
from urllib.parse import parse_qs, urlencode

from vaultwatch.engine.models.risk import RiskGroupCriteria

SECONDS_PER_DAY = 60 * 60 * 24


def _default_longevity_bands() -> list[tuple[float, float]]:
    # (minimum age in days, score)
    return [(0, 1), (7, 2), (30, 3), (120, 4), (240, 5)]


def _default_tvl_impact_bands() -> list[tuple[float, int]]:
    # (minimum TVL in USD, impact)
    return [(0, 1), (1_000_000, 2), (10_000_000, 3), (50_000_000, 4), (100_000_000, 5)]


@dataclass
class ScoringBands:
    """Step functions used by the longevity and TVL impact scores.

    Each band list is sorted by its threshold; a value gets the score of the
    last band whose threshold it reaches.
    """

    longevity_bands: list[tuple[float, float]] = field(default_factory=_default_longevity_bands)
    tvl_impact_bands: list[tuple[float, int]] = field(default_factory=_default_tvl_impact_bands)

    def __post_init__(self) -> None:
        self.longevity_bands = sorted((float(t), float(s)) for t, s in self.longevity_bands)
        self.tvl_impact_bands = sorted((float(t), int(s)) for t, s in self.tvl_impact_bands)


def _step(value: float, bands: list[tuple[float, float]]) -> float:
    score = bands[0][1] if bands else 0
    for threshold, band_score in bands:
        if value < threshold:
            break
        score = band_score
    return score


def median(values: Iterable[float]) -> float:
    """Median of a list of values.

    Even-sized inputs average the two middle values. Empty input gives 0.

    Example:
        median([1, 2, 3, 4, 5, 6, 7]) == 4
        median([1, 2, 3, 4]) == 2.5
    """
    ordered = sorted(values)
    if not ordered:
        return 0.0
    mid = len(ordered) // 2
    if len(ordered) % 2:
        return float(ordered[mid])
    return (ordered[mid - 1] + ordered[mid]) / 2


def get_longevity_score(days: float, bands: ScoringBands | None = None) -> float:
    """Score a group by the age of its oldest strategy.

    Non-decreasing in ``days``: an older group never scores below a younger
    one.
    """
    bands = bands or ScoringBands()
    return float(_step(days, bands.longevity_bands))


def get_tvl_impact(tvl: float, bands: ScoringBands | None = None) -> int:
    """Classify exposure size. Zero (or negative) TVL has no impact."""
    if tvl <= 0:
        return 0
    bands = bands or ScoringBands()
    return int(_step(tvl, bands.tvl_impact_bands))


def get_impact_score(tvl_impact: float, median_score: float) -> float:
    """Composite score: exposure size times severity.

    Both inputs are non-negative, so raising either never lowers the result.
    """
    return float(tvl_impact) * float(median_score)


def get_exclude_include_url_params(criteria: RiskGroupCriteria) -> str:
    """Encode group criteria as a query string for deep links.

    Example:
        include=curve,convex&exclude=old
    """
    return urlencode(
        {
            "include": ",".join(criteria.include),
            "exclude": ",".join(criteria.exclude),
        },
        safe=",",
    )


def parse_exclude_include_url_params(query: str) -> RiskGroupCriteria:
    """Decode a query string built by ``get_exclude_include_url_params``."""
    params = parse_qs(query.lstrip("?"), keep_blank_values=True)

    def patterns(key: str) -> tuple[str, ...]:
        joined = ",".join(params.get(key, []))
        return tuple(p for p in joined.split(",") if p)

    return RiskGroupCriteria(include=patterns("include"), exclude=patterns("exclude"))
