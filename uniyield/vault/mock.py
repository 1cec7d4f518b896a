"""In-memory vault for demo mode and tests.

All state lives in an explicit VaultStore passed to the client, so separate
tests (or demo sessions) never share balances. Shares are priced 1:1 against
assets.
"""

import hashlib
from dataclasses import dataclass, field

import structlog

from uniyield.constants import SHARE_SYMBOL, USDC_DECIMALS
from uniyield.models.types import normalize_address
from uniyield.registry import USDC_BY_CHAIN_ID, strategy_display_name
from uniyield.vault.base import PreviewRebalance, StrategyRow, UserPosition, VaultSnapshot

logger = structlog.get_logger()

AAVE_STRATEGY_ID = "0x" + "a" * 64
MORPHO_STRATEGY_ID = "0x" + "b" * 64
COMPOUND_STRATEGY_ID = "0x" + "c" * 64

MOCK_OWNER = "0x0000000000000000000000000000000000000002"


@dataclass
class StrategyState:
    """Mutable per-strategy state."""

    enabled: bool
    target_bps: int
    max_bps: int
    current_assets: int
    rate_bps: int


def _default_strategies() -> dict[str, StrategyState]:
    return {
        AAVE_STRATEGY_ID: StrategyState(True, 0, 10_000, 250_000_000000, 335),
        MORPHO_STRATEGY_ID: StrategyState(True, 0, 10_000, 1_000_000_000000, 388),
        COMPOUND_STRATEGY_ID: StrategyState(True, 0, 10_000, 0, 310),
    }


@dataclass
class VaultStore:
    """Mutable vault state with injectable initial values.

    Attributes:
        balances: Share balances keyed by lowercase address
        default_shares: Shares reported for addresses without a balance entry
    """

    total_assets: int = 1_250_000_000000
    total_supply: int = 1_240_000_000000
    active_strategy_id: str = MORPHO_STRATEGY_ID
    strategies: dict[str, StrategyState] = field(default_factory=_default_strategies)
    balances: dict[str, int] = field(default_factory=dict)
    default_shares: int = 0
    owner: str = MOCK_OWNER
    tx_count: int = 0

    def balance_of(self, address: str) -> int:
        return self.balances.get(normalize_address(address), self.default_shares)

    def next_tx_hash(self, action: str) -> str:
        """Deterministic fake transaction hash."""
        self.tx_count += 1
        return "0x" + hashlib.sha256(f"{action}:{self.tx_count}".encode()).hexdigest()


class MockVaultClient:
    """VaultClient backed by a VaultStore."""

    def __init__(self, store: VaultStore | None = None) -> None:
        self.store = store if store is not None else VaultStore()

    async def get_vault_snapshot(self) -> VaultSnapshot:
        return VaultSnapshot(
            name="UniYield USDC",
            symbol=SHARE_SYMBOL,
            decimals=USDC_DECIMALS,
            asset=USDC_BY_CHAIN_ID[1],
            total_assets=str(self.store.total_assets),
            total_supply=str(self.store.total_supply),
            active_strategy_id=self.store.active_strategy_id,
        )

    async def get_user_position(self, address: str) -> UserPosition:
        shares = self.store.balance_of(address)
        return UserPosition(shares=str(shares), asset_value=str(shares))

    async def get_strategies(self) -> list[StrategyRow]:
        return [
            StrategyRow(
                id=strategy_id,
                name=strategy_display_name(strategy_id),
                enabled=state.enabled,
                target_bps=state.target_bps,
                max_bps=state.max_bps,
                rate_bps=state.rate_bps,
                current_assets=str(state.current_assets),
                active=strategy_id == self.store.active_strategy_id,
            )
            for strategy_id, state in self.store.strategies.items()
        ]

    async def preview_deposit(self, assets: int) -> int:
        return assets

    async def deposit(self, assets: int, receiver: str) -> str:
        if assets <= 0:
            raise ValueError(f"Deposit amount must be positive, got {assets}")
        key = normalize_address(receiver)
        self.store.balances[key] = self.store.balance_of(key) + assets
        self.store.total_assets += assets
        self.store.total_supply += assets
        logger.info("mock_deposit", receiver=key, assets=assets)
        return self.store.next_tx_hash("deposit")

    async def withdraw(self, assets: int, receiver: str, owner: str) -> str:
        key = normalize_address(owner)
        shares = self.store.balance_of(key)
        if assets > shares:
            raise ValueError(f"Withdraw of {assets} exceeds balance {shares}")
        self.store.balances[key] = shares - assets
        self.store.total_assets -= assets
        self.store.total_supply -= assets
        return self.store.next_tx_hash("withdraw")

    async def redeem(self, shares: int, receiver: str, owner: str) -> str:
        key = normalize_address(owner)
        balance = self.store.balance_of(key)
        if shares > balance:
            raise ValueError(f"Redeem of {shares} exceeds balance {balance}")
        self.store.balances[key] = balance - shares
        self.store.total_assets -= shares
        self.store.total_supply -= shares
        return self.store.next_tx_hash("redeem")

    async def preview_rebalance(self) -> PreviewRebalance:
        """Move everything from the active strategy to the best-rate enabled one.

        With no enabled strategy the preview stays on the active one.
        """
        active = self.store.active_strategy_id
        enabled = [sid for sid, s in self.store.strategies.items() if s.enabled]
        if not enabled:
            return PreviewRebalance(from_strategy=active, to_strategy=active, assets_to_move="0")
        best = max(enabled, key=lambda sid: self.store.strategies[sid].rate_bps)
        current = self.store.strategies.get(active)
        assets = 0 if best == active or current is None else current.current_assets
        return PreviewRebalance(from_strategy=active, to_strategy=best, assets_to_move=str(assets))

    async def rebalance(self) -> str:
        preview = await self.preview_rebalance()
        moved = int(preview.assets_to_move)
        if moved:
            self.store.strategies[preview.from_strategy].current_assets -= moved
            self.store.strategies[preview.to_strategy].current_assets += moved
        self.store.active_strategy_id = preview.to_strategy
        return self.store.next_tx_hash("rebalance")

    async def get_owner(self) -> str:
        return self.store.owner
