"""Vault and strategy data models."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

# Queue position reported for strategies outside the withdrawal queue
NOT_IN_QUEUE_INDEX = 21


@dataclass
class Strategy:
    """A strategy allocated by exactly one vault.

    The ``vault`` back-reference is non-owning: it is excluded from equality,
    repr and serialization, and is wired by ``Vault.from_dict``.
    """

    address: str
    name: str
    description: str = ""
    activation: int = 0  # seconds since epoch
    total_debt_usdc: float = 0.0
    index: int = 0
    vault: "Vault | None" = field(default=None, repr=False, compare=False)

    @property
    def is_in_queue(self) -> bool:
        """Check if the strategy sits in the vault's withdrawal queue."""
        return self.index != NOT_IN_QUEUE_INDEX

    def render_description(self, symbol: str) -> str:
        """Resolve the ``{{token}}`` placeholder with a token symbol."""
        return (self.description or "").replace("{{token}}", symbol)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary using wire keys."""
        return {
            "address": self.address,
            "name": self.name,
            "description": self.description,
            "activation": self.activation,
            "totalDebtUSDC": self.total_debt_usdc,
            "index": self.index,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Strategy":
        """Create instance from dictionary."""
        return cls(
            address=data.get("address", ""),
            name=data.get("name", ""),
            description=data.get("description") or "",
            activation=int(data.get("activation") or 0),
            total_debt_usdc=float(data.get("totalDebtUSDC") or 0.0),
            index=int(data.get("index") or 0),
        )


@dataclass
class Vault:
    """Vault data model.

    ``balance_tokens`` holds raw integer token units, so values above the
    53-bit float range stay exact.
    """

    address: str
    name: str
    symbol: str = ""
    decimals: int = 18
    balance_tokens: int = 0
    token_price_usdc: float = 0.0
    strategies: list[Strategy] = field(default_factory=list)
    alerts: list[dict[str, Any]] = field(default_factory=list)
    explorer: str | None = None

    def __post_init__(self) -> None:
        for strategy in self.strategies:
            strategy.vault = self

    @property
    def has_alerts(self) -> bool:
        """Check if the vault carries any alert."""
        return len(self.alerts or []) > 0

    @property
    def total_assets_usdc(self) -> float:
        """Vault balance converted to USD."""
        balance = Decimal(self.balance_tokens or 0).scaleb(-self.decimals)
        return float(balance) * self.token_price_usdc

    @property
    def total_debt_usdc(self) -> float:
        """Sum of the strategies' debt in USD."""
        return sum(s.total_debt_usdc for s in self.strategies)

    @property
    def not_allocated_usdc(self) -> float:
        """Assets held by the vault but not lent to any strategy."""
        return self.total_assets_usdc - self.total_debt_usdc

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary using wire keys."""
        return {
            "address": self.address,
            "name": self.name,
            "symbol": self.symbol,
            "decimals": self.decimals,
            "balanceTokens": self.balance_tokens,
            "tokenPriceUSDC": self.token_price_usdc,
            "strategies": [s.to_dict() for s in self.strategies],
            "alerts": list(self.alerts),
            "explorer": self.explorer,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Vault":
        """Create instance from dictionary.

        Expects big integers to be already decoded to ``int``.
        """
        return cls(
            address=data.get("address", ""),
            name=data.get("name", ""),
            symbol=data.get("symbol", ""),
            decimals=int(data["decimals"]) if data.get("decimals") is not None else 18,
            balance_tokens=int(data.get("balanceTokens") or 0),
            token_price_usdc=float(data.get("tokenPriceUSDC") or 0.0),
            strategies=[Strategy.from_dict(s) for s in data.get("strategies") or []],
            alerts=list(data.get("alerts") or []),
            explorer=data.get("explorer"),
        )
