"""Subgraph client for indexed strategy data."""

import logging
from dataclasses import dataclass, field

import requests

from vaultwatch.data.providers.base import SourcePayloadError
from vaultwatch.data.providers.http import DEFAULT_TIMEOUT, request_json, thread_session

logger = logging.getLogger(__name__)

STRATEGIES_QUERY = """
{
  _meta {
    block { number }
    hasIndexingErrors
  }
  strategies(first: 1000) {
    address
    timestamp
  }
}
"""


@dataclass
class SubgraphData:
    """Indexed data merged into a snapshot."""

    block_number: int = 0
    has_indexing_errors: bool = False
    activations: dict[str, int] = field(default_factory=dict)  # address -> seconds


class SubgraphClient:
    """GraphQL client for the vaults subgraph."""

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self._url = url
        self._timeout = timeout
        self._session = session

    def get_data(self) -> SubgraphData:
        """Query indexing metadata and strategy activation times."""
        body = request_json(
            self._session or thread_session(),
            "POST",
            self._url,
            timeout=self._timeout,
            json={"query": STRATEGIES_QUERY},
        )
        if body.get("errors"):
            raise SourcePayloadError(f"Subgraph errors: {body['errors']}")

        data = body.get("data") or {}
        meta = data.get("_meta") or {}
        activations = {}
        for strategy in data.get("strategies") or []:
            timestamp = int(strategy.get("timestamp") or 0)
            # Some deployments index milliseconds
            if timestamp > 10**12:
                timestamp //= 1000
            activations[strategy["address"].lower()] = timestamp

        return SubgraphData(
            block_number=int((meta.get("block") or {}).get("number") or 0),
            has_indexing_errors=bool(meta.get("hasIndexingErrors", False)),
            activations=activations,
        )
