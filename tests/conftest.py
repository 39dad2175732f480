"""
Shared pytest fixtures.
"""

import pytest

from payloads import make_network_payload, make_vault_payload


@pytest.fixture
def vault_payload() -> dict:
    return make_vault_payload()


@pytest.fixture
def snapshot_payload() -> dict:
    return {"vaults": [make_vault_payload()], "network": make_network_payload()}
