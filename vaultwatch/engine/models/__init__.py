"""Engine models."""

from vaultwatch.engine.models.risk import RiskGroup, RiskGroupConfig, RiskGroupCriteria

__all__ = [
    "RiskGroup",
    "RiskGroupConfig",
    "RiskGroupCriteria",
]
