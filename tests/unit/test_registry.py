"""Unit tests for the chain, token and explorer registry."""

import pytest

from uniyield.errors import ConfigurationError
from uniyield.registry import (
    EXPLORER_TX_BY_CHAIN,
    SUPPORTED_CHAIN_IDS,
    chain_display_name,
    chain_id_for_key,
    explorer_tx_link,
    strategy_display_name,
    usdc_address,
)
from tests.helpers import ARBITRUM, BASE, ETHEREUM, UNSUPPORTED_CHAIN, USDC_BASE, USDC_MAINNET


class TestChains:
    @pytest.mark.parametrize(
        ("chain_id", "name"),
        [(ETHEREUM, "Ethereum"), (BASE, "Base"), (ARBITRUM, "Arbitrum"), (56, "BNB Chain")],
    )
    def test_display_name(self, chain_id, name):
        assert chain_display_name(chain_id) == name

    def test_unknown_chain_name(self):
        assert chain_display_name(UNSUPPORTED_CHAIN) == "Chain 999999"

    def test_chain_id_for_key(self):
        assert chain_id_for_key("base") == BASE
        assert chain_id_for_key("Arbitrum") == ARBITRUM

    def test_unknown_key(self):
        with pytest.raises(ConfigurationError, match="Unsupported chain"):
            chain_id_for_key("solana")

    def test_every_supported_chain_has_usdc_and_explorer(self):
        for chain_id in SUPPORTED_CHAIN_IDS:
            assert usdc_address(chain_id).startswith("0x")
            assert chain_id in EXPLORER_TX_BY_CHAIN
            assert chain_display_name(chain_id) != f"Chain {chain_id}"


class TestUsdc:
    def test_known_chains(self):
        assert usdc_address(ETHEREUM) == USDC_MAINNET
        assert usdc_address(BASE) == USDC_BASE

    def test_missing_mapping(self):
        """Unmapped chains fail with a configuration error, never a silent default."""
        with pytest.raises(ConfigurationError) as exc_info:
            usdc_address(UNSUPPORTED_CHAIN)

        assert not exc_info.value.retryable


class TestExplorer:
    def test_chain_specific_link(self):
        assert explorer_tx_link(ARBITRUM, "0xabc") == "https://arbiscan.io/tx/0xabc"

    def test_unknown_chain_uses_etherscan(self):
        assert explorer_tx_link(UNSUPPORTED_CHAIN, "0xabc") == "https://etherscan.io/tx/0xabc"


class TestStrategyNames:
    def test_known_strategy(self):
        assert strategy_display_name("0x" + "B" * 64) == "Morpho"

    def test_unknown_strategy_truncated(self):
        strategy_id = "0x" + "1234" * 16

        assert strategy_display_name(strategy_id) == "0x12341234…"
