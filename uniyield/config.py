"""Configuration for ranking, deposit quoting and the routing-service client."""

import os
from dataclasses import dataclass, field

from uniyield.constants import (
    DEFAULT_INTEGRATOR,
    DEFAULT_SLIPPAGE,
    DEFAULT_STEP_DURATION_SECONDS,
    DEPOSIT_GAS_LIMIT,
    LIFI_API_URL,
    RECOMMENDED_TIME_TOLERANCE,
    VAULT_CHAIN_ID,
)
from uniyield.models.types import ZERO_ADDRESS


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class RankingConfig:
    """Tunables for route ranking.

    Attributes:
        time_tolerance: A route is eligible for "Recommended" when its total
            time is at most fastest_time * time_tolerance (default: 1.5)
        default_step_duration: Seconds assumed for a step without an
            execution estimate (default: 120)
    """

    time_tolerance: float = RECOMMENDED_TIME_TOLERANCE
    default_step_duration: int = DEFAULT_STEP_DURATION_SECONDS

    def __post_init__(self) -> None:
        if self.time_tolerance < 1.0:
            raise ValueError(f"time_tolerance must be >= 1.0, got {self.time_tolerance}")
        if self.default_step_duration <= 0:
            raise ValueError(
                f"default_step_duration must be positive, got {self.default_step_duration}"
            )


@dataclass(frozen=True)
class DepositConfig:
    """Destination-side settings for building deposit quotes.

    Attributes:
        vault_address: Vault receiving the deposit call. The zero address
            means "not deployed" and fails quoting with ConfigurationError.
        destination_chain_id: Chain the vault lives on (default: Ethereum)
        slippage: Max slippage forwarded to the routing service (0.03 = 3%)
        integrator: Integrator tag sent with every routing request
        deposit_gas_limit: Gas limit for the destination deposit call
        use_patcher: Build patched calldata instead of negotiating two passes.
            Only valid when the execution engine supports amount patching.
    """

    vault_address: str = ZERO_ADDRESS
    destination_chain_id: int = VAULT_CHAIN_ID
    slippage: float = DEFAULT_SLIPPAGE
    integrator: str = DEFAULT_INTEGRATOR
    deposit_gas_limit: int = DEPOSIT_GAS_LIMIT
    use_patcher: bool = False

    @classmethod
    def from_env(cls) -> "DepositConfig":
        """Build a config from UNIYIELD_* environment variables."""
        return cls(
            vault_address=os.environ.get("UNIYIELD_VAULT_ADDRESS", ZERO_ADDRESS),
            destination_chain_id=int(os.environ.get("UNIYIELD_CHAIN_ID", str(VAULT_CHAIN_ID))),
            slippage=float(os.environ.get("UNIYIELD_SLIPPAGE", str(DEFAULT_SLIPPAGE))),
            use_patcher=_env_flag("UNIYIELD_USE_PATCHER"),
        )


@dataclass(frozen=True)
class LifiConfig:
    """Connection settings for the LI.FI routing service."""

    base_url: str = LIFI_API_URL
    api_key: str | None = field(default=None, repr=False)
    timeout: float = 30.0

    @classmethod
    def from_env(cls) -> "LifiConfig":
        """Build a config from LIFI_* environment variables."""
        return cls(
            base_url=os.environ.get("LIFI_API_URL", LIFI_API_URL),
            api_key=os.environ.get("LIFI_API_KEY") or None,
            timeout=float(os.environ.get("LIFI_TIMEOUT_SECONDS", "30")),
        )


# Default configuration instances
DEFAULT_RANKING_CONFIG = RankingConfig()
DEFAULT_LIFI_CONFIG = LifiConfig()
