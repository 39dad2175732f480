"""Tests for watch settings and risk configuration."""

from pathlib import Path

import pytest

from vaultwatch.business.config import RiskConfig, WatchSettings
from vaultwatch.business.sync import create_source_adapter, create_store
from vaultwatch.data.cache import JsonFileStore, MemoryStore
from vaultwatch.data.models.enums import StorageBackend
from vaultwatch.data.providers import DirectSourceAdapter, RemoteSourceAdapter

CONFIG_DIR = Path(__file__).parent.parent.parent / "config"


class TestWatchSettings:
    """Tests for WatchSettings."""

    def test_defaults(self):
        settings = WatchSettings()
        assert settings.use_remote_fetch is True
        assert settings.storage == StorageBackend.FILE
        assert settings.rpc_uri == {}

    def test_from_dict(self):
        settings = WatchSettings.from_dict(
            {
                "fetch": {"use_remote_fetch": False, "cache_ttl": 15},
                "endpoints": {"rpc": {"1": "https://rpc.example"}, "subgraph": {250: "https://graph.example"}},
                "storage": {"backend": "redis", "redis": {"port": "6380"}},
            }
        )

        assert settings.use_remote_fetch is False
        assert settings.cache_ttl == 15.0
        assert settings.rpc_uri == {1: "https://rpc.example"}
        assert settings.subgraph_uri == {250: "https://graph.example"}
        assert settings.storage == StorageBackend.REDIS
        assert settings.redis_port == 6380

    def test_repository_settings_file(self):
        settings = WatchSettings.from_yaml(CONFIG_DIR / "watch" / "settings.yaml")

        assert settings.api_base_url == "https://watch.yearn.finance"
        assert set(settings.rpc_uri) == {1, 250, 42161}
        assert set(settings.subgraph_uri) == {1, 250, 42161}

    def test_env_overrides(self):
        settings = WatchSettings().apply_env(
            {
                "VAULTWATCH_API_URL": "https://staging.example",
                "VAULTWATCH_REMOTE_FETCH": "false",
                "VAULTWATCH_STORAGE": "MEMORY",
                "VAULTWATCH_RPC_URI_10": "https://optimism.example",
                "VAULTWATCH_SUBGRAPH_URI_1": "https://graph.example",
                "VAULTWATCH_RPC_URI_X": "ignored",
                "REDIS_PASSWORD": "secret",
            }
        )

        assert settings.api_base_url == "https://staging.example"
        assert settings.use_remote_fetch is False
        assert settings.storage == StorageBackend.MEMORY
        assert settings.rpc_uri == {10: "https://optimism.example"}
        assert settings.subgraph_uri == {1: "https://graph.example"}
        assert settings.redis_password == "secret"

    def test_unknown_storage_backend(self):
        with pytest.raises(ValueError):
            WatchSettings.from_dict({"storage": {"backend": "sqlite"}})


class TestFactory:
    """Tests for adapter and store factories."""

    def test_remote_adapter(self):
        adapter = create_source_adapter(WatchSettings())
        assert isinstance(adapter, RemoteSourceAdapter)

    def test_direct_adapter(self):
        adapter = create_source_adapter(WatchSettings(use_remote_fetch=False))
        assert isinstance(adapter, DirectSourceAdapter)

    def test_file_store(self, tmp_path):
        store = create_store(WatchSettings(storage_path=str(tmp_path / "s.json")))
        assert isinstance(store, JsonFileStore)

    def test_memory_store(self):
        assert isinstance(create_store(WatchSettings(storage=StorageBackend.MEMORY)), MemoryStore)


class TestRiskConfig:
    """Tests for RiskConfig."""

    def test_repository_groups_file(self):
        config = RiskConfig.load(CONFIG_DIR / "risk" / "groups.yaml")

        curve = next(g for g in config.groups if g.name == "Curve")
        assert curve.network == 1
        assert "curve" in curve.criteria.include
        assert "ibeur" in curve.criteria.exclude
        assert curve.audit_score == 1
        assert all(g.network == 250 for g in config.for_chain(250))
        assert config.for_chain(250)

    def test_from_dict(self):
        config = RiskConfig.from_dict(
            {
                "scoring": {"tvl_impact_bands": [[0, 1], [100, 5]]},
                "groups": [
                    {
                        "name": "Maker",
                        "network": 1,
                        "criteria": {"nameLike": ["maker"]},
                        "audit_score": 2,
                        "complexityScore": 4,
                    }
                ],
            }
        )

        group = config.groups[0]
        assert group.criteria.include == ("maker",)
        assert group.criteria.exclude == ()
        assert group.audit_score == 2.0
        assert group.complexity_score == 4.0
        assert config.scoring.tvl_impact_bands == [(0.0, 1), (100.0, 5)]
        assert config.scoring.longevity_bands[0] == (0.0, 1.0)

    def test_missing_file(self, tmp_path):
        config = RiskConfig.load(tmp_path / "absent.yaml")
        assert config.groups == []
