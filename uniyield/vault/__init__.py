"""Yield vault access: protocol, in-memory and on-chain clients, unit helpers."""

from uniyield.vault.base import (
    PreviewRebalance,
    StrategyRow,
    UserPosition,
    VaultClient,
    VaultSnapshot,
)
from uniyield.vault.mock import MockVaultClient, StrategyState, VaultStore
from uniyield.vault.onchain import OnchainVaultClient
from uniyield.vault.units import format_rate_bps, format_units, parse_units

__all__ = [
    "MockVaultClient",
    "OnchainVaultClient",
    "PreviewRebalance",
    "StrategyRow",
    "StrategyState",
    "UserPosition",
    "VaultClient",
    "VaultSnapshot",
    "VaultStore",
    "format_rate_bps",
    "format_units",
    "parse_units",
]
