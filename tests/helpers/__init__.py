"""Test helpers module for shared test utilities.

- constants: chain ids, USDC addresses, accounts and common amounts
- factories: route, step and quote factory functions
"""

from tests.helpers.constants import (
    ARBITRUM,
    BASE,
    ETHEREUM,
    HUNDRED_USDC,
    ONE_USDC,
    RECEIVER,
    UNSUPPORTED_CHAIN,
    USDC_BASE,
    USDC_MAINNET,
    USER,
    VAULT,
)
from tests.helpers.factories import (
    make_composite,
    make_quote,
    make_route,
    make_step,
    make_token,
    tradeoff_routes,
)

__all__ = [
    # Constants
    "ARBITRUM",
    "BASE",
    "ETHEREUM",
    "HUNDRED_USDC",
    "ONE_USDC",
    "RECEIVER",
    "UNSUPPORTED_CHAIN",
    "USDC_BASE",
    "USDC_MAINNET",
    "USER",
    "VAULT",
    # Factories
    "make_composite",
    "make_quote",
    "make_route",
    "make_step",
    "make_token",
    "tradeoff_routes",
]
