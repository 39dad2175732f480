"""Tests for the vaultwatch CLI."""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from vaultwatch.business.cli.main import cli
from vaultwatch.business.sync import WatchController
from vaultwatch.data.cache import MemoryStore
from vaultwatch.data.exceptions import SourceTransportError
from vaultwatch.data.providers.base import SourceAdapter, SourceResult

from payloads import make_network_payload, make_strategy_payload, make_vault_payload

BUILD_CONTROLLER = "vaultwatch.business.cli.commands.common.build_controller"


class StubAdapter(SourceAdapter):
    """Adapter answering immediately with a fixed payload or error."""

    def __init__(self, payload=None, error=None):
        self._payload = payload
        self._error = error

    @property
    def name(self) -> str:
        return "stub"

    async def fetch(self, chain_id: int, force_revalidate: bool = False) -> SourceResult:
        if self._error is not None:
            raise self._error
        return SourceResult(payload=self._payload, access=1_700_000_000_000)


@pytest.fixture
def payload():
    return {
        "vaults": [
            make_vault_payload(),
            make_vault_payload(
                address="0x0000000000000000000000000000000000000d00",
                name="DAI yVault",
                symbol="yvDAI",
                strategies=[
                    make_strategy_payload("0x0000000000000000000000000000000000000003", "StrategyMakerDAI", 2_000_000.0),
                ],
                alerts=[{"level": "warning"}],
            ),
        ],
        "network": make_network_payload(),
    }


def _invoke(args, controller):
    runner = CliRunner()
    with patch(BUILD_CONTROLLER, return_value=controller):
        return runner.invoke(cli, args)


class TestSnapshotCommand:
    """Tests for the snapshot command."""

    def test_text_output(self, payload):
        controller = WatchController(StubAdapter(payload))

        result = _invoke(["snapshot"], controller)

        assert result.exit_code == 0, result.output
        assert "Vaults: 2 | Strategies: 3" in result.output
        assert "2023-11-14" in result.output

    def test_json_output(self, payload):
        controller = WatchController(StubAdapter(payload))

        result = _invoke(["snapshot", "-o", "json"], controller)

        assert result.exit_code == 0, result.output
        data = json.loads(result.output[result.output.index("{"):])
        assert data["lastUpdate"] == 1_700_000_000_000
        assert len(data["vaults"]) == 2

    def test_failure_without_persisted_snapshot(self):
        controller = WatchController(StubAdapter(error=SourceTransportError("offline")))

        result = _invoke(["snapshot"], controller)

        assert result.exit_code == 1
        assert "Refresh failed" in result.output

    def test_failure_falls_back_to_persisted_snapshot(self, payload):
        store = MemoryStore()
        seeded = WatchController(StubAdapter(payload), store=store)
        _invoke(["snapshot"], seeded)

        controller = WatchController(StubAdapter(error=SourceTransportError("offline")), store=store)
        result = _invoke(["snapshot"], controller)

        assert result.exit_code == 0, result.output
        assert "Vaults: 2" in result.output


class TestRiskCommand:
    """Tests for the risk command."""

    def test_json_groups(self, payload, tmp_path):
        groups_file = tmp_path / "groups.yaml"
        groups_file.write_text(
            "groups:\n"
            "  - name: Maker\n"
            "    network: 1\n"
            "    criteria:\n"
            "      include: [maker]\n"
            "    auditScore: 2\n",
            encoding="utf-8",
        )
        controller = WatchController(StubAdapter(payload))

        result = _invoke(["risk", "-g", str(groups_file), "-o", "json"], controller)

        assert result.exit_code == 0, result.output
        groups = json.loads(result.output[result.output.index("["):])
        assert [g["name"] for g in groups] == ["Maker"]
        assert groups[0]["strategiesCount"] == 1
        assert groups[0]["tvlImpact"] == 2
        assert groups[0]["totalDebtRatio"] == 100.0

    def test_text_table(self, payload):
        controller = WatchController(StubAdapter(payload))

        result = _invoke(["risk", "-s", "tvl"], controller)

        assert result.exit_code == 0, result.output
        assert "Curve" in result.output

    def test_unknown_sort_key(self, payload):
        result = _invoke(["risk", "-s", "colour"], WatchController(StubAdapter(payload)))
        assert result.exit_code == 2


class TestSearchCommand:
    """Tests for the search command."""

    def test_search_by_strategy(self, payload):
        result = _invoke(["search", "maker"], WatchController(StubAdapter(payload)))

        assert result.exit_code == 0, result.output
        assert "Vaults Found: 1  Strategies Found: 1" in result.output
        assert "DAI yVault" in result.output

    def test_only_alerts_and_queue(self, payload):
        result = _invoke(["search", "--only-in-queue"], WatchController(StubAdapter(payload)))

        assert result.exit_code == 0, result.output
        assert "Vaults Found: 2  Strategies Found: 2" in result.output

        result = _invoke(["search", "--only-alerts"], WatchController(StubAdapter(payload)))
        assert "Vaults Found: 1" in result.output
