"""Integration tests for the on-chain vault client via RPC.

These tests require a deployed vault and are skipped by default.
Run with: UNIYIELD_RPC_URL=... UNIYIELD_VAULT_ADDRESS=0x... pytest -m requires_rpc
"""

import asyncio
import os

import pytest

from uniyield.vault.onchain import OnchainVaultClient

# Skip all tests in this module unless an RPC and a vault are configured
pytestmark = [
    pytest.mark.requires_rpc,
    pytest.mark.skipif(
        not (os.environ.get("UNIYIELD_RPC_URL") and os.environ.get("UNIYIELD_VAULT_ADDRESS")),
        reason="UNIYIELD_RPC_URL and UNIYIELD_VAULT_ADDRESS must be set",
    ),
]


@pytest.fixture
def vault_client() -> OnchainVaultClient:
    return OnchainVaultClient(
        os.environ["UNIYIELD_VAULT_ADDRESS"], os.environ["UNIYIELD_RPC_URL"]
    )


class TestOnchainReads:
    def test_snapshot(self, vault_client):
        snapshot = asyncio.run(vault_client.get_vault_snapshot())

        assert snapshot.active_strategy_id.startswith("0x")
        assert int(snapshot.total_supply) >= 0

    def test_strategies_mark_one_active(self, vault_client):
        rows = asyncio.run(vault_client.get_strategies())

        assert rows
        assert sum(row.active for row in rows) <= 1

    def test_preview_deposit(self, vault_client):
        shares = asyncio.run(vault_client.preview_deposit(1_000_000))

        assert shares >= 0
