"""Protocol constants for the UniYield deposit flow.

Centralizes token decimals, ranking defaults and execution-stage layout.
"""

# USDC uses 6 decimals on every supported chain
USDC_DECIMALS = 6

# Chain the vault lives on (Ethereum mainnet)
VAULT_CHAIN_ID = 1

# Ranking defaults
# A route is eligible for "Recommended" when its time is within this factor
# of the fastest route's time
RECOMMENDED_TIME_TOLERANCE = 1.5
# Duration assumed for a step without an execution estimate (seconds)
DEFAULT_STEP_DURATION_SECONDS = 120

# Routing-service defaults
DEFAULT_SLIPPAGE = 0.03
DEFAULT_INTEGRATOR = "UniYield"
LIFI_API_URL = "https://li.quest/v1"

# Gas limit forwarded with the destination deposit call
DEPOSIT_GAS_LIMIT = 250_000

# Fixed execution stages shown while a deposit runs: (id, label)
DEPOSIT_STAGES: tuple[tuple[str, str], ...] = (
    ("wallet", "Wallet confirmation"),
    ("routing", "Cross-chain routing"),
    ("settlement", "Ethereum settlement"),
    ("deposit", "Vault deposit"),
    ("mint", "Shares minted"),
)

# Vault share token symbol
SHARE_SYMBOL = "uyUSDC"
