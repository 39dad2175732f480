"""Data models for vault and network data."""

from vaultwatch.data.models.enums import DataSource, StorageBackend
from vaultwatch.data.models.network import NetworkHealth, NetworkStatus
from vaultwatch.data.models.snapshot import Snapshot
from vaultwatch.data.models.vault import NOT_IN_QUEUE_INDEX, Strategy, Vault

__all__ = [
    "DataSource",
    "StorageBackend",
    "NetworkHealth",
    "NetworkStatus",
    "Snapshot",
    "Strategy",
    "Vault",
    "NOT_IN_QUEUE_INDEX",
]
