"""Redis-backed key-value store.

Lets several processes share the last committed snapshot, e.g. a CLI run
rendering what a long-running watcher persisted.
"""

import json
import logging
from typing import Any

import redis

from vaultwatch.data.cache.store import KeyValueStore
from vaultwatch.data.exceptions import StoreError

logger = logging.getLogger(__name__)


class RedisStore(KeyValueStore):
    """Redis-based store.

    Values are JSON strings under ``<prefix>:<key>``. ``set_many`` runs in a
    MULTI/EXEC pipeline so the snapshot entries change together.

    Usage:
        store = RedisStore(prefix="vaultwatch:1")
        if store.is_available:
            vaults = store.get("vaults", [])
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        db: int = 0,
        password: str | None = None,
        prefix: str = "vaultwatch",
        client: Any = None,
    ) -> None:
        """Initialize Redis store.

        Args:
            host: Redis server host.
            port: Redis server port.
            db: Redis database number.
            password: Optional Redis password.
            prefix: Key namespace.
            client: Optional pre-configured client (skips connection setup).
        """
        self._prefix = prefix
        self._client: Any = client
        self._available = client is not None

        if client is not None:
            return

        try:
            self._client = redis.Redis(
                host=host,
                port=port,
                db=db,
                password=password,
                decode_responses=True,
                socket_connect_timeout=5,
            )
            self._client.ping()
            self._available = True
            logger.info(f"Redis store connected at {host}:{port}")
        except redis.RedisError as e:
            logger.warning(f"Redis store unavailable: {e}")
            self._client = None
            self._available = False

    @property
    def is_available(self) -> bool:
        return self._available

    def _key(self, key: str) -> str:
        return f"{self._prefix}:{key}"

    def get(self, key: str, default: Any = None) -> Any:
        if not self._available:
            return default
        try:
            data = self._client.get(self._key(key))
        except redis.RedisError as e:
            logger.warning(f"Redis get error for {key}: {e}")
            return default
        if data is None:
            return default
        return json.loads(data)

    def set(self, key: str, value: Any) -> None:
        self.set_many({key: value})

    def set_many(self, values: dict[str, Any]) -> None:
        if not self._available:
            raise StoreError("Redis store is not connected")
        try:
            pipe = self._client.pipeline(transaction=True)
            for key, value in values.items():
                pipe.set(self._key(key), json.dumps(value))
            pipe.execute()
        except redis.RedisError as e:
            raise StoreError(f"Redis write failed: {e}") from e
        logger.debug(f"Redis stored {sorted(values)} under {self._prefix}")
