"""Network health data models."""

from dataclasses import dataclass, field
from typing import Any

from vaultwatch.data.models.enums import DataSource

STATUS_HEALTHY = 1
STATUS_DOWN = 0


@dataclass
class NetworkStatus:
    """Status code per data source (1 = healthy)."""

    rpc: int = STATUS_HEALTHY
    graph: int = STATUS_HEALTHY
    api: int = STATUS_HEALTHY
    meta: int = STATUS_HEALTHY

    def get(self, source: DataSource) -> int:
        """Get the status code for a data source."""
        return getattr(self, source.value)

    def set(self, source: DataSource, code: int) -> None:
        """Set the status code for a data source."""
        setattr(self, source.value, code)

    def to_dict(self) -> dict[str, int]:
        """Convert to dictionary using wire keys."""
        return {
            "rpc": self.rpc,
            "graph": self.graph,
            "yearnApi": self.api,
            "yearnMeta": self.meta,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NetworkStatus":
        """Create instance from dictionary."""
        return cls(
            rpc=int(data.get("rpc", STATUS_HEALTHY)),
            graph=int(data.get("graph", STATUS_HEALTHY)),
            api=int(data.get("yearnApi", data.get("api", STATUS_HEALTHY))),
            meta=int(data.get("yearnMeta", data.get("meta", STATUS_HEALTHY))),
        )


@dataclass
class NetworkHealth:
    """Health of the data sources behind one snapshot."""

    status: NetworkStatus = field(default_factory=NetworkStatus)
    block_number: int = 0
    graph_block_number: int = 0
    has_graph_indexing_errors: bool = False

    @property
    def is_healthy(self) -> bool:
        """Check if every source is up and the index reports no errors."""
        codes = (self.status.get(source) for source in DataSource)
        return all(code == STATUS_HEALTHY for code in codes) and not self.has_graph_indexing_errors

    @property
    def graph_lag(self) -> int:
        """Blocks between the chain head and the indexed head."""
        if not self.block_number or not self.graph_block_number:
            return 0
        return max(self.block_number - self.graph_block_number, 0)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary using wire keys."""
        return {
            "status": self.status.to_dict(),
            "blockNumber": self.block_number,
            "graphBlockNumber": self.graph_block_number,
            "hasGraphIndexingErrors": self.has_graph_indexing_errors,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "NetworkHealth":
        """Create instance from dictionary. An empty mapping yields defaults."""
        data = data or {}
        return cls(
            status=NetworkStatus.from_dict(data.get("status") or {}),
            block_number=int(data.get("blockNumber") or 0),
            graph_block_number=int(data.get("graphBlockNumber") or 0),
            has_graph_indexing_errors=bool(data.get("hasGraphIndexingErrors", False)),
        )
