"""Snapshot data model."""

from dataclasses import dataclass, field
from typing import Any, Iterator

from vaultwatch.data.models.network import NetworkHealth
from vaultwatch.data.models.vault import Strategy, Vault


@dataclass(frozen=True)
class Snapshot:
    """Vaults and network health from one successful fetch cycle.

    Frozen: a new snapshot replaces the previous one as a whole object.
    """

    vaults: tuple[Vault, ...] = ()
    last_update: int = 0  # epoch milliseconds
    network: NetworkHealth = field(default_factory=NetworkHealth)

    @classmethod
    def empty(cls) -> "Snapshot":
        """Snapshot exposed before anything was committed."""
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.vaults

    def strategies(self) -> Iterator[Strategy]:
        """Iterate over every strategy of every vault."""
        for vault in self.vaults:
            yield from vault.strategies

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary using wire keys."""
        return {
            "vaults": [v.to_dict() for v in self.vaults],
            "lastUpdate": self.last_update,
            "network": self.network.to_dict(),
        }

    @classmethod
    def from_payload(cls, payload: dict[str, Any], last_update: int) -> "Snapshot":
        """Build a snapshot from a decoded ``{vaults, network}`` payload."""
        return cls(
            vaults=tuple(Vault.from_dict(v) for v in payload.get("vaults") or []),
            last_update=int(last_update or 0),
            network=NetworkHealth.from_dict(payload.get("network")),
        )
