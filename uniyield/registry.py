"""Supported chains, USDC token addresses and block explorers.

Static lookup tables used by the routing client and the deposit flow.
"""

from uniyield.errors import ConfigurationError

# Chain id by UI chain key
CHAIN_ID_BY_KEY: dict[str, int] = {
    "ethereum": 1,
    "base": 8453,
    "arbitrum": 42161,
    "polygon": 137,
    "bnb": 56,
    "optimism": 10,
}

CHAIN_NAME_BY_ID: dict[int, str] = {
    1: "Ethereum",
    8453: "Base",
    42161: "Arbitrum",
    137: "Polygon",
    56: "BNB Chain",
    10: "Optimism",
}

# Native USDC where available
USDC_BY_CHAIN_ID: dict[int, str] = {
    1: "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48",
    8453: "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913",
    42161: "0xaf88d065e77c8cC2239327C5EDb3A432268e5831",
    137: "0x3c499c542cEF5E3811e1192ce70d8cC03d5c3359",
    56: "0x8AC76a51cc950d9822D68b83fE1Ad97B32Cd580d",
    10: "0x0b2C639c533813f4Aa9D7837CAf62653d097Ff85",
}

EXPLORER_TX_BY_CHAIN: dict[int, str] = {
    1: "https://etherscan.io/tx/",
    8453: "https://basescan.org/tx/",
    42161: "https://arbiscan.io/tx/",
    137: "https://polygonscan.com/tx/",
    56: "https://bscscan.com/tx/",
    10: "https://optimistic.etherscan.io/tx/",
}

DEFAULT_EXPLORER_TX = EXPLORER_TX_BY_CHAIN[1]

SUPPORTED_CHAIN_IDS: tuple[int, ...] = tuple(CHAIN_ID_BY_KEY.values())

# Vault strategy ids (bytes32, lowercase) to display names
STRATEGY_DISPLAY_NAMES: dict[str, str] = {
    "0x" + "a" * 64: "Aave",
    "0x" + "b" * 64: "Morpho",
    "0x" + "c" * 64: "Compound",
}


def chain_display_name(chain_id: int) -> str:
    """Display name for a chain id, "Chain <id>" when unknown."""
    return CHAIN_NAME_BY_ID.get(chain_id, f"Chain {chain_id}")


def chain_id_for_key(key: str) -> int:
    """Resolve a UI chain key ("base", "arbitrum", ...) to its chain id.

    Raises:
        ConfigurationError: If the key is not a supported chain
    """
    try:
        return CHAIN_ID_BY_KEY[key.lower()]
    except KeyError:
        raise ConfigurationError(f"Unsupported chain: {key}") from None


def usdc_address(chain_id: int) -> str:
    """USDC token address on a chain.

    Raises:
        ConfigurationError: If USDC is not configured for the chain
    """
    address = USDC_BY_CHAIN_ID.get(chain_id)
    if address is None:
        raise ConfigurationError(f"USDC not configured for chain {chain_id}")
    return address


def explorer_tx_link(chain_id: int, tx_hash: str) -> str:
    """Block explorer link for a transaction, Etherscan for unknown chains."""
    return EXPLORER_TX_BY_CHAIN.get(chain_id, DEFAULT_EXPLORER_TX) + tx_hash


def strategy_display_name(strategy_id: str) -> str:
    """Display name for a strategy id, truncated hex when unknown."""
    name = STRATEGY_DISPLAY_NAMES.get(strategy_id.lower())
    if name is not None:
        return name
    return strategy_id[:10] + "…"
