"""Vault client that talks to the deployed vault contract over JSON-RPC."""

from __future__ import annotations

import asyncio
from typing import Any

import structlog
from web3 import AsyncWeb3

from uniyield.constants import SHARE_SYMBOL, USDC_DECIMALS
from uniyield.errors import ConfigurationError, ExecutionError
from uniyield.models.types import ZERO_ADDRESS, is_valid_address
from uniyield.registry import strategy_display_name
from uniyield.vault.base import PreviewRebalance, StrategyRow, UserPosition, VaultSnapshot

logger = structlog.get_logger()


def _fn(
    name: str, inputs: list[tuple[str, str]], outputs: list[str], mutable: bool = False
) -> dict:
    return {
        "type": "function",
        "name": name,
        "inputs": [{"name": n, "type": t} for n, t in inputs],
        "outputs": [{"name": "", "type": t} for t in outputs],
        "stateMutability": "nonpayable" if mutable else "view",
    }


# Subset of the vault ABI this client calls
VAULT_ABI = [
    _fn("asset", [], ["address"]),
    _fn("decimals", [], ["uint8"]),
    _fn("name", [], ["string"]),
    _fn("symbol", [], ["string"]),
    _fn("totalAssets", [], ["uint256"]),
    _fn("totalSupply", [], ["uint256"]),
    _fn("activeStrategyId", [], ["bytes32"]),
    _fn("balanceOf", [("account", "address")], ["uint256"]),
    _fn("convertToAssets", [("shares", "uint256")], ["uint256"]),
    _fn("convertToShares", [("assets", "uint256")], ["uint256"]),
    _fn("getStrategyIds", [], ["bytes32[]"]),
    _fn(
        "getStrategyInfo",
        [("id", "bytes32")],
        ["bool", "uint16", "uint16", "uint256", "uint256"],
    ),
    _fn("previewRebalance", [], ["bytes32", "bytes32", "uint256"]),
    _fn("owner", [], ["address"]),
    _fn("deposit", [("assets", "uint256"), ("receiver", "address")], ["uint256"], mutable=True),
    _fn(
        "withdraw",
        [("assets", "uint256"), ("receiver", "address"), ("owner", "address")],
        ["uint256"],
        mutable=True,
    ),
    _fn(
        "redeem",
        [("shares", "uint256"), ("receiver", "address"), ("owner", "address")],
        ["uint256"],
        mutable=True,
    ),
    _fn("rebalance", [], [], mutable=True),
]

ERC20_ABI = [
    _fn("allowance", [("owner", "address"), ("spender", "address")], ["uint256"]),
    _fn("approve", [("spender", "address"), ("amount", "uint256")], ["bool"], mutable=True),
]


def _hex(value: Any) -> str:
    """Normalize bytes32/HexBytes results to 0x-prefixed lowercase hex."""
    if isinstance(value, str):
        return value.lower()
    return AsyncWeb3.to_hex(value)


class OnchainVaultClient:
    """VaultClient backed by a deployed vault.

    Writes are sent from `account`, which must be unlocked on the RPC node.
    Without an account the client is read-only.
    """

    def __init__(
        self,
        vault_address: str,
        rpc_url: str | None = None,
        *,
        w3: AsyncWeb3 | None = None,
        account: str | None = None,
        asset_address: str | None = None,
    ) -> None:
        if not is_valid_address(vault_address) or vault_address.lower() == ZERO_ADDRESS:
            raise ConfigurationError(f"Vault address is not configured: {vault_address!r}")
        if w3 is None:
            if not rpc_url:
                raise ConfigurationError("An RPC URL is required for the on-chain vault client")
            w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(rpc_url))

        self.w3 = w3
        self.vault_address = AsyncWeb3.to_checksum_address(vault_address)
        self.vault = w3.eth.contract(address=self.vault_address, abi=VAULT_ABI)
        self.account = AsyncWeb3.to_checksum_address(account) if account else None
        self._asset_address = asset_address

    async def _read_or(self, name: str, default: Any) -> Any:
        try:
            return await getattr(self.vault.functions, name)().call()
        except Exception as e:
            logger.warning("vault_read_failed", function=name, default=default, error=str(e))
            return default

    def _require_account(self) -> str:
        if self.account is None:
            raise ConfigurationError("No sending account configured for vault writes")
        return self.account

    async def _send(self, call: Any) -> str:
        account = self._require_account()
        try:
            tx_hash = await call.transact({"from": account})
        except Exception as e:
            raise ExecutionError(str(e) or None) from e
        return AsyncWeb3.to_hex(tx_hash)

    async def _asset(self) -> str:
        if self._asset_address is None:
            self._asset_address = await self.vault.functions.asset().call()
        return self._asset_address

    async def get_vault_snapshot(self) -> VaultSnapshot:
        fns = self.vault.functions
        asset, decimals, name, symbol, total_assets, total_supply, active_id = await asyncio.gather(
            fns.asset().call(),
            self._read_or("decimals", USDC_DECIMALS),
            self._read_or("name", "UniYield USDC"),
            self._read_or("symbol", SHARE_SYMBOL),
            fns.totalAssets().call(),
            fns.totalSupply().call(),
            fns.activeStrategyId().call(),
        )
        return VaultSnapshot(
            name=name,
            symbol=symbol,
            decimals=int(decimals),
            asset=asset,
            total_assets=str(total_assets),
            total_supply=str(total_supply),
            active_strategy_id=_hex(active_id),
        )

    async def get_user_position(self, address: str) -> UserPosition:
        owner = AsyncWeb3.to_checksum_address(address)
        shares = await self.vault.functions.balanceOf(owner).call()
        asset_value = await self.vault.functions.convertToAssets(shares).call()
        return UserPosition(shares=str(shares), asset_value=str(asset_value))

    async def get_strategies(self) -> list[StrategyRow]:
        fns = self.vault.functions
        ids, active_id = await asyncio.gather(
            fns.getStrategyIds().call(), fns.activeStrategyId().call()
        )
        active = _hex(active_id)
        rows = []
        for raw_id in ids:
            enabled, target_bps, max_bps, current_assets, rate_bps = await fns.getStrategyInfo(
                raw_id
            ).call()
            strategy_id = _hex(raw_id)
            rows.append(
                StrategyRow(
                    id=strategy_id,
                    name=strategy_display_name(strategy_id),
                    enabled=enabled,
                    target_bps=int(target_bps),
                    max_bps=int(max_bps),
                    rate_bps=int(rate_bps),
                    current_assets=str(current_assets),
                    active=strategy_id == active,
                )
            )
        return rows

    async def preview_deposit(self, assets: int) -> int:
        return int(await self.vault.functions.convertToShares(assets).call())

    async def deposit(self, assets: int, receiver: str) -> str:
        """Deposit `assets`, approving the vault first if the allowance is short."""
        account = self._require_account()
        token = self.w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(await self._asset()), abi=ERC20_ABI
        )
        allowance = await token.functions.allowance(account, self.vault_address).call()
        if allowance < assets:
            logger.info("vault_approval_required", allowance=allowance, assets=assets)
            approve_hash = await self._send(token.functions.approve(self.vault_address, assets))
            await self.w3.eth.wait_for_transaction_receipt(approve_hash)

        receiver = AsyncWeb3.to_checksum_address(receiver)
        return await self._send(self.vault.functions.deposit(assets, receiver))

    async def withdraw(self, assets: int, receiver: str, owner: str) -> str:
        return await self._send(
            self.vault.functions.withdraw(
                assets,
                AsyncWeb3.to_checksum_address(receiver),
                AsyncWeb3.to_checksum_address(owner),
            )
        )

    async def redeem(self, shares: int, receiver: str, owner: str) -> str:
        return await self._send(
            self.vault.functions.redeem(
                shares,
                AsyncWeb3.to_checksum_address(receiver),
                AsyncWeb3.to_checksum_address(owner),
            )
        )

    async def preview_rebalance(self) -> PreviewRebalance:
        from_id, to_id, assets = await self.vault.functions.previewRebalance().call()
        return PreviewRebalance(
            from_strategy=_hex(from_id), to_strategy=_hex(to_id), assets_to_move=str(assets)
        )

    async def rebalance(self) -> str:
        return await self._send(self.vault.functions.rebalance())

    async def get_owner(self) -> str:
        return await self.vault.functions.owner().call()
