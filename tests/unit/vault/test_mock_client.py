"""Unit tests for the in-memory vault client."""

import asyncio

import pytest

from uniyield.vault.mock import (
    AAVE_STRATEGY_ID,
    COMPOUND_STRATEGY_ID,
    MORPHO_STRATEGY_ID,
    MockVaultClient,
    StrategyState,
    VaultStore,
)
from tests.helpers import HUNDRED_USDC, RECEIVER, USER


class TestReads:
    """Tests for snapshot, position and strategy reads."""

    def test_snapshot_defaults(self, mock_vault):
        snapshot = asyncio.run(mock_vault.get_vault_snapshot())

        assert snapshot.symbol == "uyUSDC"
        assert snapshot.decimals == 6
        assert snapshot.total_assets == "1250000000000"
        assert snapshot.total_supply == "1240000000000"
        assert snapshot.active_strategy_id == MORPHO_STRATEGY_ID

    def test_strategies(self, mock_vault):
        rows = asyncio.run(mock_vault.get_strategies())

        assert [row.name for row in rows] == ["Aave", "Morpho", "Compound"]
        assert [row.rate_bps for row in rows] == [335, 388, 310]
        assert [row.active for row in rows] == [False, True, False]
        assert rows[1].current_assets == "1000000000000"

    def test_unknown_user_has_default_shares(self):
        client = MockVaultClient(VaultStore(default_shares=5))

        position = asyncio.run(client.get_user_position(USER))

        assert position.shares == "5"
        assert position.asset_value == "5"

    def test_owner(self, mock_vault):
        assert asyncio.run(mock_vault.get_owner()) == "0x0000000000000000000000000000000000000002"


class TestWrites:
    """Tests for deposits, withdrawals and rebalancing."""

    def test_deposit_mints_shares_one_to_one(self, mock_vault, vault_store):
        tx_hash = asyncio.run(mock_vault.deposit(HUNDRED_USDC, RECEIVER))

        position = asyncio.run(mock_vault.get_user_position(RECEIVER))
        assert position.shares == str(HUNDRED_USDC)
        assert vault_store.total_assets == 1_250_000_000000 + HUNDRED_USDC
        assert tx_hash.startswith("0x") and len(tx_hash) == 66

    def test_preview_deposit(self, mock_vault):
        assert asyncio.run(mock_vault.preview_deposit(123)) == 123

    def test_deposit_rejects_zero(self, mock_vault):
        with pytest.raises(ValueError):
            asyncio.run(mock_vault.deposit(0, RECEIVER))

    def test_withdraw_and_redeem(self, mock_vault, vault_store):
        asyncio.run(mock_vault.deposit(HUNDRED_USDC, USER))

        asyncio.run(mock_vault.withdraw(40_000_000, USER, USER))
        asyncio.run(mock_vault.redeem(10_000_000, USER, USER))

        assert vault_store.balance_of(USER) == 50_000_000

    def test_withdraw_over_balance(self, mock_vault):
        with pytest.raises(ValueError, match="exceeds balance"):
            asyncio.run(mock_vault.withdraw(1, USER, USER))

    def test_rebalance_moves_to_best_rate(self):
        """With Aave paying the most, rebalance moves Morpho's assets there."""
        store = VaultStore()
        store.strategies[AAVE_STRATEGY_ID].rate_bps = 500
        client = MockVaultClient(store)

        preview = asyncio.run(client.preview_rebalance())
        asyncio.run(client.rebalance())

        assert preview.from_strategy == MORPHO_STRATEGY_ID
        assert preview.to_strategy == AAVE_STRATEGY_ID
        assert preview.assets_to_move == "1000000000000"
        assert store.active_strategy_id == AAVE_STRATEGY_ID
        assert store.strategies[AAVE_STRATEGY_ID].current_assets == 1_250_000_000000
        assert store.strategies[MORPHO_STRATEGY_ID].current_assets == 0

    def test_rebalance_noop_when_best_is_active(self, mock_vault):
        preview = asyncio.run(mock_vault.preview_rebalance())

        assert preview.to_strategy == MORPHO_STRATEGY_ID
        assert preview.assets_to_move == "0"

    def test_disabled_strategy_never_chosen(self):
        store = VaultStore()
        store.strategies[COMPOUND_STRATEGY_ID] = StrategyState(False, 0, 10_000, 0, 9_999)

        preview = asyncio.run(MockVaultClient(store).preview_rebalance())

        assert preview.to_strategy == MORPHO_STRATEGY_ID

    def test_no_enabled_strategy_is_noop(self):
        """With every strategy disabled, rebalance stays where it is."""
        store = VaultStore()
        for state in store.strategies.values():
            state.enabled = False
        client = MockVaultClient(store)

        preview = asyncio.run(client.preview_rebalance())
        asyncio.run(client.rebalance())

        assert preview.from_strategy == preview.to_strategy == MORPHO_STRATEGY_ID
        assert preview.assets_to_move == "0"
        assert store.active_strategy_id == MORPHO_STRATEGY_ID
        assert store.strategies[MORPHO_STRATEGY_ID].current_assets == 1_000_000_000000


class TestStoreIsolation:
    def test_stores_do_not_share_state(self):
        """Each store starts from its own injected state."""
        a, b = VaultStore(), VaultStore()

        asyncio.run(MockVaultClient(a).deposit(HUNDRED_USDC, USER))

        assert a.balance_of(USER) == HUNDRED_USDC
        assert b.balance_of(USER) == 0
        assert a.strategies is not b.strategies

    def test_tx_hashes_are_deterministic(self):
        first = asyncio.run(MockVaultClient(VaultStore()).deposit(1, USER))
        second = asyncio.run(MockVaultClient(VaultStore()).deposit(1, USER))

        assert first == second
