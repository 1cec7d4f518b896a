"""Shared constants for tests.

Usage:
    from tests.helpers import USER, VAULT
    # or
    from tests.helpers.constants import USDC_BASE
"""

# =============================================================================
# Chains
# =============================================================================

ETHEREUM = 1
BASE = 8453
ARBITRUM = 42161
UNSUPPORTED_CHAIN = 999_999

# =============================================================================
# Tokens (USDC as configured in the registry)
# =============================================================================

USDC_MAINNET = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
USDC_BASE = "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"
USDC_ARBITRUM = "0xaf88d065e77c8cC2239327C5EDb3A432268e5831"

# =============================================================================
# Accounts and contracts
# =============================================================================

USER = "0x1111111111111111111111111111111111111111"
RECEIVER = "0x2222222222222222222222222222222222222222"
VAULT = "0x3333333333333333333333333333333333333333"
BRIDGE_SPENDER = "0x1231DEB6f5749EF6cE6943a275A1D3E7486F4EaE"

# =============================================================================
# Common amounts (USDC base units)
# =============================================================================

ONE_USDC = 1_000_000
HUNDRED_USDC = 100_000_000
