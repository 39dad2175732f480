"""
Watch Settings - runtime configuration

Fetch mode, upstream endpoints and local storage for the sync controller.

Sources, highest priority first:
    environment variables (.env supported) > YAML file > dataclass defaults

| Variable                         | Field                 |
|----------------------------------|-----------------------|
| VAULTWATCH_API_URL               | api_base_url          |
| VAULTWATCH_REMOTE_FETCH          | use_remote_fetch      |
| VAULTWATCH_RPC_URI_<chain>       | rpc_uri[chain]        |
| VAULTWATCH_SUBGRAPH_URI_<chain>  | subgraph_uri[chain]   |
| VAULTWATCH_STORAGE               | storage               |
| REDIS_PASSWORD                   | redis_password        |
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from vaultwatch.data.models.enums import StorageBackend

logger = logging.getLogger(__name__)

RPC_ENV_PREFIX = "VAULTWATCH_RPC_URI_"
SUBGRAPH_ENV_PREFIX = "VAULTWATCH_SUBGRAPH_URI_"

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _parse_uri_map(data: dict[Any, Any] | None) -> dict[int, str]:
    return {int(chain): str(uri) for chain, uri in (data or {}).items() if uri}


@dataclass
class WatchSettings:
    """Settings of the data synchronization layer"""

    use_remote_fetch: bool = True
    api_base_url: str = "https://watch.yearn.finance"
    rpc_uri: dict[int, str] = field(default_factory=dict)
    subgraph_uri: dict[int, str] = field(default_factory=dict)
    yearn_api_url: str = "https://api.yearn.finance"
    meta_url: str = "https://meta.yearn.network"
    request_timeout: float = 30.0

    # Direct mode in-process cache
    use_cache: bool = True
    cache_ttl: float = 60.0

    # Local storage of the committed snapshot
    storage: StorageBackend = StorageBackend.FILE
    storage_path: str = "~/.vaultwatch/snapshot.json"
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: str | None = None

    @classmethod
    def from_yaml(cls, path: str | Path) -> "WatchSettings":
        """Load settings from a YAML file"""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WatchSettings":
        """Create settings from a dictionary"""
        settings = cls()

        fetch = data.get("fetch", {})
        settings.use_remote_fetch = bool(fetch.get("use_remote_fetch", settings.use_remote_fetch))
        settings.api_base_url = fetch.get("api_base_url", settings.api_base_url)
        settings.request_timeout = float(fetch.get("request_timeout", settings.request_timeout))
        settings.use_cache = bool(fetch.get("use_cache", settings.use_cache))
        settings.cache_ttl = float(fetch.get("cache_ttl", settings.cache_ttl))

        endpoints = data.get("endpoints", {})
        settings.rpc_uri = _parse_uri_map(endpoints.get("rpc"))
        settings.subgraph_uri = _parse_uri_map(endpoints.get("subgraph"))
        settings.yearn_api_url = endpoints.get("yearn_api", settings.yearn_api_url)
        settings.meta_url = endpoints.get("meta", settings.meta_url)

        storage = data.get("storage", {})
        if "backend" in storage:
            settings.storage = StorageBackend(storage["backend"])
        settings.storage_path = storage.get("path", settings.storage_path)
        redis_cfg = storage.get("redis", {})
        settings.redis_host = redis_cfg.get("host", settings.redis_host)
        settings.redis_port = int(redis_cfg.get("port", settings.redis_port))
        settings.redis_db = int(redis_cfg.get("db", settings.redis_db))
        settings.redis_password = redis_cfg.get("password", settings.redis_password)

        return settings

    def apply_env(self, environ: dict[str, str] | None = None) -> "WatchSettings":
        """Apply environment overrides in place"""
        env = os.environ if environ is None else environ

        if env.get("VAULTWATCH_API_URL"):
            self.api_base_url = env["VAULTWATCH_API_URL"]
        if env.get("VAULTWATCH_REMOTE_FETCH"):
            self.use_remote_fetch = env["VAULTWATCH_REMOTE_FETCH"].lower() in _TRUE_VALUES
        if env.get("VAULTWATCH_STORAGE"):
            self.storage = StorageBackend(env["VAULTWATCH_STORAGE"].lower())
        if env.get("REDIS_PASSWORD"):
            self.redis_password = env["REDIS_PASSWORD"]

        for key, value in env.items():
            if not value:
                continue
            if key.startswith(RPC_ENV_PREFIX) and key[len(RPC_ENV_PREFIX):].isdigit():
                self.rpc_uri[int(key[len(RPC_ENV_PREFIX):])] = value
            elif key.startswith(SUBGRAPH_ENV_PREFIX) and key[len(SUBGRAPH_ENV_PREFIX):].isdigit():
                self.subgraph_uri[int(key[len(SUBGRAPH_ENV_PREFIX):])] = value
        return self

    @classmethod
    def load(cls, path: str | Path | None = None) -> "WatchSettings":
        """Load settings from ``path`` or the default file, then the environment"""
        load_dotenv()

        config_file = Path(path) if path else (
            Path(__file__).parent.parent.parent.parent / "config" / "watch" / "settings.yaml"
        )
        if config_file.exists():
            logger.info(f"Loading watch settings from {config_file}")
            settings = cls.from_yaml(config_file)
        else:
            logger.info("Using default watch settings")
            settings = cls()
        return settings.apply_env()
