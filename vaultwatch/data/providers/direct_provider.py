"""Source adapter that merges the upstream sources locally."""

import asyncio
import copy
import logging
import time
from typing import Any, Callable

from vaultwatch.data.models.enums import DataSource
from vaultwatch.data.models.network import STATUS_DOWN, NetworkHealth
from vaultwatch.data.providers.base import (
    DataProviderError,
    SourceAdapter,
    SourceResult,
    SourceTransportError,
)
from vaultwatch.data.providers.meta_client import MetaClient
from vaultwatch.data.providers.rpc_client import RpcClient
from vaultwatch.data.providers.subgraph_client import SubgraphClient, SubgraphData
from vaultwatch.data.providers.yearn_api_client import YearnApiClient

logger = logging.getLogger(__name__)


class DirectSourceAdapter(SourceAdapter):
    """Fans out to the Yearn API, metadata service, subgraph and RPC node.

    Source roles:
    - Yearn API → vault list, balances, strategy debt (required)
    - Meta → humanized strategy names and descriptions
    - Subgraph → activation timestamps, indexed block, indexing errors
    - RPC → chain head block number

    An optional source that fails is marked down in the snapshot's network
    health instead of failing the fetch. Only a vault list failure is fatal.

    Usage:
        adapter = DirectSourceAdapter(
            rpc_uris={1: "https://eth.llamarpc.com"},
            subgraph_uris={1: "https://api.thegraph.com/subgraphs/name/..."},
        )
        result = await adapter.fetch(1)
    """

    DEFAULT_CACHE_TTL = 60  # seconds

    def __init__(
        self,
        rpc_uris: dict[int, str] | None = None,
        subgraph_uris: dict[int, str] | None = None,
        api_client: YearnApiClient | None = None,
        meta_client: MetaClient | None = None,
        rpc_client_factory: Callable[[str], RpcClient] = RpcClient,
        subgraph_client_factory: Callable[[str], SubgraphClient] = SubgraphClient,
        use_cache: bool = True,
        cache_ttl: float = DEFAULT_CACHE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize direct adapter.

        Args:
            rpc_uris: RPC endpoint per chain id.
            subgraph_uris: Subgraph endpoint per chain id.
            api_client: Yearn API client. Created with defaults if None.
            meta_client: Metadata client. Created with defaults if None.
            rpc_client_factory: Builds an RPC client from an endpoint.
            subgraph_client_factory: Builds a subgraph client from an endpoint.
            use_cache: Keep merged payloads per chain for ``cache_ttl`` seconds.
            cache_ttl: Cache lifetime in seconds.
            clock: Monotonic clock used for cache expiry.
        """
        self._rpc_uris = rpc_uris or {}
        self._subgraph_uris = subgraph_uris or {}
        self._api = api_client or YearnApiClient()
        self._meta = meta_client or MetaClient()
        self._rpc_client_factory = rpc_client_factory
        self._subgraph_client_factory = subgraph_client_factory
        self._use_cache = use_cache
        self._cache_ttl = cache_ttl
        self._clock = clock
        self._cache: dict[int, tuple[float, dict[str, Any]]] = {}

    @property
    def name(self) -> str:
        return "direct"

    async def fetch(self, chain_id: int, force_revalidate: bool = False) -> SourceResult:
        return await asyncio.to_thread(self._fetch_sync, chain_id or 1, force_revalidate)

    def _fetch_sync(self, chain_id: int, force_revalidate: bool) -> SourceResult:
        if self._use_cache and not force_revalidate:
            cached = self._cache.get(chain_id)
            if cached and self._clock() - cached[0] < self._cache_ttl:
                logger.debug(f"Cache hit for direct snapshot: chain {chain_id}")
                return SourceResult(payload=copy.deepcopy(cached[1]))

        payload = self._build_payload(chain_id)
        if self._use_cache:
            self._cache[chain_id] = (self._clock(), copy.deepcopy(payload))
        return SourceResult(payload=payload)

    def _build_payload(self, chain_id: int) -> dict[str, Any]:
        network = NetworkHealth()

        try:
            vaults = self._api.get_vaults(chain_id)
        except DataProviderError as e:
            raise SourceTransportError(f"Vault list unavailable for chain {chain_id}: {e}") from e

        meta = self._fetch_optional(
            DataSource.META, network, lambda: self._meta.get_strategies_meta(chain_id)
        ) or {}
        subgraph = self._fetch_optional(
            DataSource.GRAPH, network, lambda: self._get_subgraph_data(chain_id)
        ) or SubgraphData()
        block_number = self._fetch_optional(
            DataSource.RPC, network, lambda: self._get_block_number(chain_id)
        ) or 0

        for vault in vaults:
            for strategy in vault["strategies"]:
                self._merge_strategy(strategy, meta, subgraph)

        network.block_number = block_number
        network.graph_block_number = subgraph.block_number
        network.has_graph_indexing_errors = subgraph.has_indexing_errors

        logger.info(
            f"Direct snapshot for chain {chain_id}: {len(vaults)} vaults, "
            f"block {block_number}, graph block {subgraph.block_number}"
        )
        return {"vaults": vaults, "network": network.to_dict()}

    @staticmethod
    def _fetch_optional(
        source: DataSource,
        network: NetworkHealth,
        fetcher: Callable[[], Any],
    ) -> Any:
        try:
            return fetcher()
        except DataProviderError as e:
            logger.warning(f"{source.value} source unavailable: {e}")
            network.status.set(source, STATUS_DOWN)
            return None

    def _get_subgraph_data(self, chain_id: int) -> SubgraphData:
        uri = self._subgraph_uris.get(chain_id)
        if not uri:
            raise SourceTransportError(f"No subgraph endpoint for chain {chain_id}")
        return self._subgraph_client_factory(uri).get_data()

    def _get_block_number(self, chain_id: int) -> int:
        uri = self._rpc_uris.get(chain_id)
        if not uri:
            raise SourceTransportError(f"No RPC endpoint for chain {chain_id}")
        return self._rpc_client_factory(uri).get_block_number()

    @staticmethod
    def _merge_strategy(
        strategy: dict[str, Any],
        meta: dict[str, dict[str, Any]],
        subgraph: SubgraphData,
    ) -> None:
        address = strategy["address"].lower()
        info = meta.get(address) or {}
        if info.get("name"):
            strategy["name"] = info["name"]
        if info.get("description"):
            strategy["description"] = info["description"]
        if not strategy.get("activation"):
            strategy["activation"] = subgraph.activations.get(address, 0)
