"""Vault client protocol and read models."""

from typing import Protocol

from pydantic import BaseModel, Field

from uniyield.models.types import Bytes32, Uint256


class VaultSnapshot(BaseModel):
    """Vault-wide state shown on the deposit page."""

    name: str
    symbol: str
    decimals: int
    asset: str
    total_assets: Uint256 = Field(alias="totalAssets")
    total_supply: Uint256 = Field(alias="totalSupply")
    active_strategy_id: Bytes32 = Field(alias="activeStrategyId")

    model_config = {"populate_by_name": True}


class UserPosition(BaseModel):
    """A user's shares and their value in the vault asset."""

    shares: Uint256
    asset_value: Uint256 = Field(alias="assetValue")

    model_config = {"populate_by_name": True}


class StrategyRow(BaseModel):
    """One yield strategy the vault can allocate to."""

    id: Bytes32
    name: str
    enabled: bool
    target_bps: int = Field(alias="targetBps")
    max_bps: int = Field(alias="maxBps")
    rate_bps: int | None = Field(default=None, alias="rateBps")
    current_assets: Uint256 | None = Field(default=None, alias="currentAssets")
    active: bool = False

    model_config = {"populate_by_name": True}


class PreviewRebalance(BaseModel):
    """Where the next rebalance would move assets."""

    from_strategy: Bytes32 = Field(alias="fromStrategy")
    to_strategy: Bytes32 = Field(alias="toStrategy")
    assets_to_move: Uint256 = Field(alias="assetsToMove")

    model_config = {"populate_by_name": True}


class VaultClient(Protocol):
    """Read/write access to the yield vault.

    Write methods return the submitted transaction hash.
    """

    async def get_vault_snapshot(self) -> VaultSnapshot: ...

    async def get_user_position(self, address: str) -> UserPosition: ...

    async def get_strategies(self) -> list[StrategyRow]: ...

    async def preview_deposit(self, assets: int) -> int: ...

    async def deposit(self, assets: int, receiver: str) -> str: ...

    async def withdraw(self, assets: int, receiver: str, owner: str) -> str: ...

    async def redeem(self, shares: int, receiver: str, owner: str) -> str: ...

    async def preview_rebalance(self) -> PreviewRebalance: ...

    async def rebalance(self) -> str: ...

    async def get_owner(self) -> str: ...
