"""Tests for vault, network and snapshot models."""

import pytest

from vaultwatch.data.models import (
    DataSource,
    NetworkHealth,
    NetworkStatus,
    Snapshot,
    Strategy,
    Vault,
)
from vaultwatch.data.utils.bignumber import decode_bignumbers

from payloads import LARGE_BALANCE


class TestVault:
    """Tests for Vault model."""

    def test_from_dict_wires_back_references(self, vault_payload):
        vault = Vault.from_dict(decode_bignumbers(vault_payload))

        assert vault.name == "USDC yVault"
        assert vault.balance_tokens == LARGE_BALANCE
        assert len(vault.strategies) == 2
        assert all(s.vault is vault for s in vault.strategies)

    def test_total_assets_and_not_allocated(self):
        vault = Vault(
            address="0xabc",
            name="yvDAI",
            decimals=18,
            balance_tokens=1_000 * 10**18,
            token_price_usdc=2.0,
            strategies=[Strategy(address="0x1", name="s1", total_debt_usdc=1_500.0)],
        )

        assert vault.total_assets_usdc == pytest.approx(2_000.0)
        assert vault.total_debt_usdc == pytest.approx(1_500.0)
        assert vault.not_allocated_usdc == pytest.approx(500.0)

    def test_has_alerts(self):
        assert not Vault(address="0x1", name="v").has_alerts
        assert Vault(address="0x1", name="v", alerts=[{"level": "warning"}]).has_alerts

    def test_to_dict_roundtrip(self, vault_payload):
        vault = Vault.from_dict(decode_bignumbers(vault_payload))
        assert Vault.from_dict(vault.to_dict()) == vault


class TestStrategy:
    """Tests for Strategy model."""

    def test_render_description(self):
        strategy = Strategy(address="0x1", name="s", description="Supplies {{token}} to {{token}} pools")
        assert strategy.render_description("DAI") == "Supplies DAI to DAI pools"

    def test_queue_position(self):
        assert Strategy(address="0x1", name="s", index=3).is_in_queue
        assert not Strategy(address="0x1", name="s", index=21).is_in_queue

    def test_repr_excludes_vault(self):
        vault = Vault(address="0x1", name="v", strategies=[Strategy(address="0x2", name="s")])
        assert "vault=" not in repr(vault.strategies[0])


class TestNetworkHealth:
    """Tests for NetworkHealth model."""

    def test_empty_dict_gives_defaults(self):
        network = NetworkHealth.from_dict({})
        assert network.block_number == 0
        assert network.status == NetworkStatus()
        assert network.is_healthy

    def test_wire_keys(self):
        network = NetworkHealth.from_dict(
            {
                "status": {"rpc": 1, "graph": 0, "yearnApi": 1, "yearnMeta": 1},
                "blockNumber": 100,
                "graphBlockNumber": 90,
                "hasGraphIndexingErrors": False,
            }
        )

        assert network.status.get(DataSource.GRAPH) == 0
        assert network.graph_lag == 10
        assert not network.is_healthy
        assert network.to_dict()["status"]["yearnApi"] == 1

    def test_indexing_errors_unhealthy(self):
        assert not NetworkHealth(has_graph_indexing_errors=True).is_healthy


class TestSnapshot:
    """Tests for Snapshot model."""

    def test_empty(self):
        snapshot = Snapshot.empty()
        assert snapshot.is_empty
        assert snapshot.last_update == 0
        assert list(snapshot.strategies()) == []

    def test_from_payload(self, snapshot_payload):
        snapshot = Snapshot.from_payload(decode_bignumbers(snapshot_payload), 1_700_000_000_000)

        assert len(snapshot.vaults) == 1
        assert len(list(snapshot.strategies())) == 2
        assert snapshot.network.block_number == 18_000_100
        assert snapshot.last_update == 1_700_000_000_000

    def test_frozen(self):
        snapshot = Snapshot.empty()
        with pytest.raises(AttributeError):
            snapshot.last_update = 5
