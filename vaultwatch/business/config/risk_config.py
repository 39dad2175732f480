"""
Risk Configuration - risk groups and scoring thresholds

Groups are curated data, not derived: each one names the strategies it
covers through include/exclude name patterns and carries six base scores
on a 1-5 scale (higher = riskier).

YAML layout::

    scoring:
      longevity_bands: [[0, 1], [7, 2], [30, 3], [120, 4], [240, 5]]
      tvl_impact_bands: [[0, 1], [1000000, 2], [10000000, 3], ...]
    groups:
      - name: Curve
        network: 1
        criteria:
          include: [curve, convex]
          exclude: [ib]
        auditScore: 1
        ...
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from vaultwatch.engine.models.risk import RiskGroupConfig
from vaultwatch.engine.risk.scores import ScoringBands

logger = logging.getLogger(__name__)


@dataclass
class RiskConfig:
    """Risk groups of every chain plus the scoring thresholds"""

    groups: list[RiskGroupConfig] = field(default_factory=list)
    scoring: ScoringBands = field(default_factory=ScoringBands)

    def for_chain(self, chain_id: int) -> list[RiskGroupConfig]:
        """Groups configured for one chain"""
        return [g for g in self.groups if g.network == (chain_id or 1)]

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RiskConfig":
        """Load configuration from a YAML file"""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RiskConfig":
        """Create configuration from a dictionary"""
        config = cls()

        scoring = data.get("scoring", {})
        defaults = ScoringBands()
        config.scoring = ScoringBands(
            longevity_bands=[tuple(b) for b in scoring.get("longevity_bands", defaults.longevity_bands)],
            tvl_impact_bands=[tuple(b) for b in scoring.get("tvl_impact_bands", defaults.tvl_impact_bands)],
        )

        config.groups = [RiskGroupConfig.from_dict(g) for g in data.get("groups", [])]
        return config

    @classmethod
    def load(cls, path: str | Path | None = None) -> "RiskConfig":
        """Load ``path`` or the default configuration file"""
        config_file = Path(path) if path else (
            Path(__file__).parent.parent.parent.parent / "config" / "risk" / "groups.yaml"
        )
        if config_file.exists():
            logger.info(f"Loading risk groups from {config_file}")
            return cls.from_yaml(config_file)
        logger.warning(f"Risk config {config_file} not found, no groups configured")
        return cls()
