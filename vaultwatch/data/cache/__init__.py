"""Local persistence for committed snapshots."""

from vaultwatch.data.cache.redis_store import RedisStore
from vaultwatch.data.cache.store import (
    LAST_UPDATE_KEY,
    NETWORK_KEY,
    VAULTS_KEY,
    JsonFileStore,
    KeyValueStore,
    MemoryStore,
)

__all__ = [
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "RedisStore",
    "LAST_UPDATE_KEY",
    "NETWORK_KEY",
    "VAULTS_KEY",
]
