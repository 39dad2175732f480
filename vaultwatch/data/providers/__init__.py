"""Snapshot source adapters and their upstream clients."""

from vaultwatch.data.providers.base import (
    DataProviderError,
    SourceAdapter,
    SourcePayloadError,
    SourceResult,
    SourceTransportError,
)
from vaultwatch.data.providers.direct_provider import DirectSourceAdapter
from vaultwatch.data.providers.meta_client import MetaClient
from vaultwatch.data.providers.remote_provider import RemoteSourceAdapter
from vaultwatch.data.providers.rpc_client import RpcClient
from vaultwatch.data.providers.subgraph_client import SubgraphClient, SubgraphData
from vaultwatch.data.providers.yearn_api_client import YearnApiClient

__all__ = [
    "DataProviderError",
    "SourceAdapter",
    "SourcePayloadError",
    "SourceResult",
    "SourceTransportError",
    "DirectSourceAdapter",
    "MetaClient",
    "RemoteSourceAdapter",
    "RpcClient",
    "SubgraphClient",
    "SubgraphData",
    "YearnApiClient",
]
