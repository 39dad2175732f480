"""Risk group models."""

from dataclasses import dataclass, field
from typing import Any

from vaultwatch.data.models import Strategy


@dataclass(frozen=True)
class RiskGroupCriteria:
    """Name patterns selecting the strategies of a group.

    Exclusion wins: a strategy matching any ``exclude`` pattern never joins
    the group, whatever the ``include`` patterns say.
    """

    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RiskGroupCriteria":
        """Create instance from dictionary. ``nameLike`` is an alias of ``include``."""
        include = data.get("include", data.get("nameLike")) or []
        return cls(
            include=tuple(str(p) for p in include),
            exclude=tuple(str(p) for p in data.get("exclude") or []),
        )

    def to_dict(self) -> dict[str, list[str]]:
        return {"include": list(self.include), "exclude": list(self.exclude)}


@dataclass(frozen=True)
class RiskGroupConfig:
    """Externally curated definition of a risk group.

    Base scores sit on a fixed 1-5 scale where higher means riskier.
    """

    name: str
    network: int
    criteria: RiskGroupCriteria
    audit_score: float = 0.0
    code_review_score: float = 0.0
    testing_score: float = 0.0
    protocol_safety_score: float = 0.0
    complexity_score: float = 0.0
    team_knowledge_score: float = 0.0

    @property
    def base_scores(self) -> list[float]:
        """The six curated sub-scores."""
        return [
            self.audit_score,
            self.code_review_score,
            self.testing_score,
            self.protocol_safety_score,
            self.complexity_score,
            self.team_knowledge_score,
        ]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RiskGroupConfig":
        """Create instance from dictionary (camelCase or snake_case keys)."""

        def score(snake: str, camel: str) -> float:
            return float(data.get(snake, data.get(camel)) or 0.0)

        return cls(
            name=data["name"],
            network=int(data.get("network", 1)),
            criteria=RiskGroupCriteria.from_dict(data.get("criteria") or {}),
            audit_score=score("audit_score", "auditScore"),
            code_review_score=score("code_review_score", "codeReviewScore"),
            testing_score=score("testing_score", "testingScore"),
            protocol_safety_score=score("protocol_safety_score", "protocolSafetyScore"),
            complexity_score=score("complexity_score", "complexityScore"),
            team_knowledge_score=score("team_knowledge_score", "teamKnowledgeScore"),
        )


@dataclass
class RiskGroup:
    """Strategies of one group with their derived risk metrics.

    Rebuilt from scratch on every aggregation pass and never persisted.
    """

    config: RiskGroupConfig
    strategies: list[Strategy] = field(default_factory=list)
    tvl: float = 0.0
    strategies_count: int = 0
    oldest_activation: int = 0  # 0 = no member yet
    longevity_score: float = 0.0
    median_score: float = 0.0
    tvl_impact: int = 0
    impact_score: float = 0.0
    total_debt_ratio: float = 0.0
    url_params: str = ""

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def network(self) -> int:
        return self.config.network

    @property
    def sub_scores(self) -> list[float]:
        """Six curated scores followed by the computed longevity score."""
        return [*self.config.base_scores, self.longevity_score]

    def add(self, strategy: Strategy) -> None:
        """Add a member strategy and update the aggregates."""
        self.strategies.append(strategy)
        self.strategies_count += 1
        self.tvl += strategy.total_debt_usdc
        activation = int(strategy.activation or 0)
        # Undated members leave the oldest activation untouched
        if activation > 0 and (self.oldest_activation == 0 or activation < self.oldest_activation):
            self.oldest_activation = activation

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "name": self.name,
            "network": self.network,
            "criteria": self.config.criteria.to_dict(),
            "strategies": [s.address for s in self.strategies],
            "tvl": self.tvl,
            "strategiesCount": self.strategies_count,
            "oldestActivation": self.oldest_activation,
            "auditScore": self.config.audit_score,
            "codeReviewScore": self.config.code_review_score,
            "testingScore": self.config.testing_score,
            "protocolSafetyScore": self.config.protocol_safety_score,
            "complexityScore": self.config.complexity_score,
            "teamKnowledgeScore": self.config.team_knowledge_score,
            "longevityScore": self.longevity_score,
            "medianScore": self.median_score,
            "tvlImpact": self.tvl_impact,
            "impactScore": self.impact_score,
            "totalDebtRatio": self.total_debt_ratio,
            "urlParams": self.url_params,
        }
