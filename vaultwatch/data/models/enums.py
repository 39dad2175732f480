"""Data source and storage enumerations."""

from enum import Enum


class DataSource(Enum):
    """Upstream data sources merged into a snapshot."""

    RPC = "rpc"
    GRAPH = "graph"
    API = "api"
    META = "meta"


class StorageBackend(Enum):
    """Local persistence backends."""

    MEMORY = "memory"
    FILE = "file"
    REDIS = "redis"
