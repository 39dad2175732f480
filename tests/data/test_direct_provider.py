"""Tests for the direct source adapter and its upstream clients."""

import asyncio
from unittest.mock import MagicMock

import pytest

from vaultwatch.data.providers import (
    DirectSourceAdapter,
    RpcClient,
    SourcePayloadError,
    SourceTransportError,
    SubgraphClient,
    SubgraphData,
    YearnApiClient,
)
from vaultwatch.data.utils.bignumber import decode_bignumber

STRATEGY_ADDRESS = "0xAbCd000000000000000000000000000000000001"


def _api_vault() -> dict:
    return {
        "address": "0xvault",
        "name": "yvDAI",
        "symbol": "yvDAI",
        "decimals": 18,
        "balanceTokens": {"type": "BigNumber", "hex": "0x01"},
        "tokenPriceUSDC": 1.0,
        "strategies": [
            {
                "address": STRATEGY_ADDRESS,
                "name": "StrategyRaw",
                "description": "",
                "activation": 0,
                "totalDebtUSDC": 10.0,
                "index": 0,
            }
        ],
        "alerts": [],
    }


def _session_returning(body):
    session = MagicMock()
    session.request.return_value.json.return_value = body
    return session


@pytest.fixture
def api_client():
    client = MagicMock()
    client.get_vaults.side_effect = lambda chain_id: [_api_vault()]
    return client


@pytest.fixture
def meta_client():
    client = MagicMock()
    client.get_strategies_meta.return_value = {
        STRATEGY_ADDRESS.lower(): {"name": "Maker DAI Delegate", "description": "Mints DAI"},
    }
    return client


@pytest.fixture
def subgraph_client():
    client = MagicMock()
    client.get_data.return_value = SubgraphData(
        block_number=90,
        has_indexing_errors=False,
        activations={STRATEGY_ADDRESS.lower(): 1_650_000_000},
    )
    return client


@pytest.fixture
def rpc_client():
    client = MagicMock()
    client.get_block_number.return_value = 100
    return client


@pytest.fixture
def adapter(api_client, meta_client, subgraph_client, rpc_client):
    return DirectSourceAdapter(
        rpc_uris={1: "https://rpc.example"},
        subgraph_uris={1: "https://graph.example"},
        api_client=api_client,
        meta_client=meta_client,
        rpc_client_factory=lambda uri: rpc_client,
        subgraph_client_factory=lambda uri: subgraph_client,
        use_cache=False,
    )


class TestDirectSourceAdapter:
    """Tests for DirectSourceAdapter."""

    def test_merges_sources(self, adapter):
        result = asyncio.run(adapter.fetch(1))

        strategy = result.payload["vaults"][0]["strategies"][0]
        assert strategy["name"] == "Maker DAI Delegate"
        assert strategy["description"] == "Mints DAI"
        assert strategy["activation"] == 1_650_000_000
        network = result.payload["network"]
        assert network["blockNumber"] == 100
        assert network["graphBlockNumber"] == 90
        assert network["status"] == {"rpc": 1, "graph": 1, "yearnApi": 1, "yearnMeta": 1}
        assert result.access is None

    def test_optional_source_failure_marks_status(self, adapter, subgraph_client, meta_client):
        subgraph_client.get_data.side_effect = SourceTransportError("graph down")
        meta_client.get_strategies_meta.side_effect = SourcePayloadError("bad meta")

        result = asyncio.run(adapter.fetch(1))

        network = result.payload["network"]
        assert network["status"]["graph"] == 0
        assert network["status"]["yearnMeta"] == 0
        assert network["status"]["rpc"] == 1
        assert network["graphBlockNumber"] == 0
        strategy = result.payload["vaults"][0]["strategies"][0]
        assert strategy["name"] == "StrategyRaw"
        assert strategy["activation"] == 0

    def test_missing_rpc_endpoint_marks_rpc_down(self, api_client, meta_client, subgraph_client):
        adapter = DirectSourceAdapter(
            subgraph_uris={250: "https://graph.example"},
            api_client=api_client,
            meta_client=meta_client,
            subgraph_client_factory=lambda uri: subgraph_client,
            use_cache=False,
        )

        result = asyncio.run(adapter.fetch(250))

        assert result.payload["network"]["status"]["rpc"] == 0
        assert result.payload["network"]["blockNumber"] == 0

    def test_vault_list_failure_is_fatal(self, adapter, api_client):
        api_client.get_vaults.side_effect = SourcePayloadError("not a list")
        with pytest.raises(SourceTransportError):
            asyncio.run(adapter.fetch(1))

    def test_cache_reused_until_revalidate(self, api_client, meta_client, subgraph_client, rpc_client):
        adapter = DirectSourceAdapter(
            rpc_uris={1: "https://rpc.example"},
            subgraph_uris={1: "https://graph.example"},
            api_client=api_client,
            meta_client=meta_client,
            rpc_client_factory=lambda uri: rpc_client,
            subgraph_client_factory=lambda uri: subgraph_client,
            use_cache=True,
            cache_ttl=60,
            clock=lambda: 1000.0,
        )

        first = asyncio.run(adapter.fetch(1))
        first.payload["vaults"].clear()
        second = asyncio.run(adapter.fetch(1))
        assert api_client.get_vaults.call_count == 1
        assert len(second.payload["vaults"]) == 1

        asyncio.run(adapter.fetch(1, force_revalidate=True))
        assert api_client.get_vaults.call_count == 2


class TestYearnApiClient:
    """Tests for YearnApiClient normalization."""

    def test_normalizes_vault(self):
        body = [
            {
                "address": "0xvault",
                "display_name": "DAI yVault",
                "symbol": "yvDAI",
                "decimals": 18,
                "token": {"symbol": "DAI", "decimals": 18},
                "tvl": {"total_assets": "5000000000000000000000", "price": 1.5},
                "strategies": [
                    {
                        "address": "0xstrat",
                        "name": "StrategyMakerDAI",
                        "details": {
                            "totalDebt": "2000000000000000000000",
                            "activation": "1600000000",
                            "withdrawalQueuePosition": 21,
                        },
                    }
                ],
            },
            {"name": "no address"},
        ]
        client = YearnApiClient(base_url="https://api.example", session=_session_returning(body))

        vaults = client.get_vaults(1)

        assert len(vaults) == 1
        vault = vaults[0]
        assert vault["name"] == "DAI yVault"
        assert decode_bignumber(vault["balanceTokens"]) == 5000 * 10**18
        assert vault["tokenPriceUSDC"] == 1.5
        strategy = vault["strategies"][0]
        assert strategy["totalDebtUSDC"] == pytest.approx(3000.0)
        assert strategy["activation"] == 1_600_000_000
        assert strategy["index"] == 21

    def test_rejects_non_list(self):
        client = YearnApiClient(session=_session_returning({"error": "nope"}))
        with pytest.raises(SourcePayloadError):
            client.get_vaults(1)

    @pytest.mark.parametrize(
        "entry",
        [
            "0xvault",
            {"address": "0xvault", "tvl": {"total_assets": "lots", "price": 1}},
            {"address": "0xvault", "strategies": [{"address": "0xs", "details": {"totalDebt": "n/a"}}]},
            {"address": "0xvault", "tvl": {"price": "free"}},
        ],
    )
    def test_malformed_entry_is_payload_error(self, entry):
        client = YearnApiClient(session=_session_returning([entry]))
        with pytest.raises(SourcePayloadError):
            client.get_vaults(1)

    def test_malformed_vault_list_fails_direct_fetch(self, meta_client, subgraph_client, rpc_client):
        api_client = YearnApiClient(session=_session_returning([{"address": "0xvault", "tvl": {"total_assets": "lots"}}]))
        adapter = DirectSourceAdapter(
            rpc_uris={1: "https://rpc.example"},
            subgraph_uris={1: "https://graph.example"},
            api_client=api_client,
            meta_client=meta_client,
            rpc_client_factory=lambda uri: rpc_client,
            subgraph_client_factory=lambda uri: subgraph_client,
            use_cache=False,
        )

        with pytest.raises(SourceTransportError, match="Vault list unavailable"):
            asyncio.run(adapter.fetch(1))


class TestSubgraphClient:
    """Tests for SubgraphClient."""

    def test_parses_meta_and_activations(self):
        body = {
            "data": {
                "_meta": {"block": {"number": 123}, "hasIndexingErrors": True},
                "strategies": [
                    {"address": "0xAA", "timestamp": "1600000000"},
                    {"address": "0xBB", "timestamp": "1600000000000"},
                ],
            }
        }
        session = _session_returning(body)

        data = SubgraphClient("https://graph.example", session=session).get_data()

        assert data.block_number == 123
        assert data.has_indexing_errors is True
        assert data.activations == {"0xaa": 1_600_000_000, "0xbb": 1_600_000_000}
        assert "query" in session.request.call_args.kwargs["json"]

    def test_graphql_errors_raise(self):
        session = _session_returning({"errors": [{"message": "indexer down"}]})
        with pytest.raises(SourcePayloadError):
            SubgraphClient("https://graph.example", session=session).get_data()


class TestRpcClient:
    """Tests for RpcClient."""

    def test_block_number(self):
        session = _session_returning({"jsonrpc": "2.0", "id": 1, "result": "0x112a880"})
        client = RpcClient("https://rpc.example", session=session)

        assert client.get_block_number() == 18_000_000
        payload = session.request.call_args.kwargs["json"]
        assert payload["method"] == "eth_blockNumber"
        assert payload["params"] == []

    def test_rpc_error(self):
        session = _session_returning({"jsonrpc": "2.0", "id": 1, "error": {"code": -32000}})
        with pytest.raises(SourcePayloadError):
            RpcClient("https://rpc.example", session=session).get_block_number()
