"""Configuration management."""

from vaultwatch.business.config.risk_config import RiskConfig
from vaultwatch.business.config.settings import WatchSettings

__all__ = [
    "RiskConfig",
    "WatchSettings",
]
