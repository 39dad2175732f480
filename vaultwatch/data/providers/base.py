"""Abstract base class for snapshot source adapters."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from vaultwatch.data.exceptions import (
    DataProviderError,
    SourcePayloadError,
    SourceTransportError,
)


@dataclass(frozen=True)
class SourceResult:
    """Raw result of one adapter call.

    Attributes:
        payload: Raw ``{"vaults": [...], "network": {...}}`` tree. Big integers
            are still in their wire form.
        access: Server-stamped access timestamp (epoch milliseconds), or None
            when the adapter has no server clock to report.
    """

    payload: dict[str, Any]
    access: int | None = None


class SourceAdapter(ABC):
    """Abstract base class for snapshot sources.

    Implementations must be idempotent for repeated identical calls and must
    never mutate a payload they returned earlier.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Adapter name (e.g., 'remote', 'direct')."""
        pass

    @abstractmethod
    async def fetch(self, chain_id: int, force_revalidate: bool = False) -> SourceResult:
        """Fetch a raw snapshot for a chain.

        Args:
            chain_id: Chain identifier (1 = Ethereum mainnet).
            force_revalidate: Ask the source to bypass any cache it keeps.

        Returns:
            SourceResult with the raw payload.

        Raises:
            SourceTransportError: Network failure or non-2xx response.
            SourcePayloadError: Response body does not have the expected shape.
        """
        pass

