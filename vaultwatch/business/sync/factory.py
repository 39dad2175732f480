"""Builds source adapters and stores from settings."""

import logging

from vaultwatch.business.config.settings import WatchSettings
from vaultwatch.data.cache.redis_store import RedisStore
from vaultwatch.data.cache.store import JsonFileStore, KeyValueStore, MemoryStore
from vaultwatch.data.models.enums import StorageBackend
from vaultwatch.data.providers.base import SourceAdapter
from vaultwatch.data.providers.direct_provider import DirectSourceAdapter
from vaultwatch.data.providers.meta_client import MetaClient
from vaultwatch.data.providers.remote_provider import RemoteSourceAdapter
from vaultwatch.data.providers.yearn_api_client import YearnApiClient

logger = logging.getLogger(__name__)


def create_source_adapter(settings: WatchSettings) -> SourceAdapter:
    """Pick the remote or direct adapter according to ``use_remote_fetch``."""
    if settings.use_remote_fetch:
        logger.debug(f"Using remote source {settings.api_base_url}")
        return RemoteSourceAdapter(settings.api_base_url, timeout=settings.request_timeout)

    logger.debug("Using direct sources")
    return DirectSourceAdapter(
        rpc_uris=settings.rpc_uri,
        subgraph_uris=settings.subgraph_uri,
        api_client=YearnApiClient(settings.yearn_api_url, timeout=settings.request_timeout),
        meta_client=MetaClient(settings.meta_url, timeout=settings.request_timeout),
        use_cache=settings.use_cache,
        cache_ttl=settings.cache_ttl,
    )


def create_store(settings: WatchSettings) -> KeyValueStore:
    """Create the configured store. Falls back to memory if Redis is down."""
    if settings.storage == StorageBackend.FILE:
        return JsonFileStore(settings.storage_path)

    if settings.storage == StorageBackend.REDIS:
        store = RedisStore(
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.redis_db,
            password=settings.redis_password,
        )
        if store.is_available:
            return store
        logger.warning("Redis unavailable, keeping the snapshot in memory only")

    return MemoryStore()
