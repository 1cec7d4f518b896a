"""API endpoints for the deposit flow."""

import asyncio
import os
from collections.abc import AsyncIterator
from dataclasses import replace
from decimal import Decimal

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from uniyield.config import DEFAULT_RANKING_CONFIG, DepositConfig, LifiConfig, RankingConfig
from uniyield.models.route import Quote, Route
from uniyield.models.status import TransferStatus
from uniyield.models.types import Address, is_valid_address
from uniyield.quotes.assembler import build_deposit_quote, get_bridge_to_self_routes
from uniyield.quotes.client import LifiClient, RoutingClient
from uniyield.routing.details import (
    approval_info,
    fee_breakdown,
    format_duration,
    route_title,
    step_details,
)
from uniyield.routing.explanation import explanation_for, labels_for
from uniyield.routing.ranking import RouteRanking, compute_rankings
from uniyield.vault.base import (
    PreviewRebalance,
    StrategyRow,
    UserPosition,
    VaultClient,
    VaultSnapshot,
)
from uniyield.vault.mock import MockVaultClient
from uniyield.vault.onchain import OnchainVaultClient
from uniyield.vault.units import parse_units

logger = structlog.get_logger()

router = APIRouter()

_vault_client: VaultClient | None = None


async def get_routing_client() -> AsyncIterator[RoutingClient]:
    """Dependency provider for the routing service client.

    Override this in tests to inject a fake client:
        app.dependency_overrides[get_routing_client] = lambda: fake_client
    """
    async with LifiClient(LifiConfig.from_env()) as client:
        yield client


def get_vault_client() -> VaultClient:
    """Dependency provider for the vault client.

    Uses the on-chain client when UNIYIELD_RPC_URL is set, otherwise a
    process-wide in-memory vault (demo mode).
    """
    global _vault_client
    if _vault_client is None:
        rpc_url = os.environ.get("UNIYIELD_RPC_URL")
        if rpc_url:
            _vault_client = OnchainVaultClient(
                DepositConfig.from_env().vault_address,
                rpc_url,
                account=os.environ.get("UNIYIELD_ACCOUNT") or None,
            )
        else:
            logger.info("vault_demo_mode")
            _vault_client = MockVaultClient()
    return _vault_client


def get_deposit_config() -> DepositConfig:
    """Dependency provider for deposit configuration."""
    return DepositConfig.from_env()


def get_ranking_config() -> RankingConfig:
    """Dependency provider for ranking configuration."""
    return DEFAULT_RANKING_CONFIG


class FeeLineView(BaseModel):
    label: str
    amount_usd: Decimal = Field(alias="amountUSD")

    model_config = {"populate_by_name": True}


class ApprovalView(BaseModel):
    required: bool
    token_symbol: str | None = Field(default=None, alias="tokenSymbol")
    spender_address: str | None = Field(default=None, alias="spenderAddress")
    amount: str | None = None

    model_config = {"populate_by_name": True}


class StepView(BaseModel):
    tool_name: str = Field(alias="toolName")
    token_in: str = Field(alias="tokenIn")
    token_out: str = Field(alias="tokenOut")
    chains: str
    estimated_time: str = Field(alias="estimatedTime")

    model_config = {"populate_by_name": True}


class RankedRoute(BaseModel):
    """A route with everything the route list displays for it."""

    id: str
    title: str
    labels: list[str]
    explanation: str
    total_fee_usd: Decimal = Field(alias="totalFeeUSD")
    total_duration: float = Field(alias="totalDuration")
    estimated_time: str = Field(alias="estimatedTime")
    step_count: int = Field(alias="stepCount")
    to_amount: str = Field(alias="toAmount")
    to_amount_min: str | None = Field(default=None, alias="toAmountMin")
    fees: list[FeeLineView]
    approval: ApprovalView
    steps: list[StepView]

    model_config = {"populate_by_name": True}


class RankRoutesRequest(BaseModel):
    routes: list[Route]


class RankRoutesResponse(BaseModel):
    """Ranking indices (null when there are no routes) and per-route display data."""

    cheapest_index: int | None = Field(alias="cheapestIndex")
    fastest_index: int | None = Field(alias="fastestIndex")
    recommended_index: int | None = Field(alias="recommendedIndex")
    routes: list[RankedRoute]

    model_config = {"populate_by_name": True}


class BridgeToSelfRequest(BaseModel):
    from_chain_id: int = Field(alias="fromChainId")
    amount: str
    from_address: Address = Field(alias="fromAddress")
    to_address: Address | None = Field(default=None, alias="toAddress")

    model_config = {"populate_by_name": True}


class DepositQuoteRequest(BaseModel):
    """Deposit quote request; `amount` is human-readable USDC, e.g. "100.00"."""

    from_chain_id: int = Field(alias="fromChainId")
    amount: str
    user_address: Address = Field(alias="userAddress")
    receiver_address: Address | None = Field(default=None, alias="receiverAddress")
    patched: bool | None = None

    model_config = {"populate_by_name": True}


class DepositQuoteResponse(BaseModel):
    quote: Quote
    guaranteed_amount: str = Field(alias="guaranteedAmount")
    patched: bool

    model_config = {"populate_by_name": True}


class VaultResponse(BaseModel):
    snapshot: VaultSnapshot
    strategies: list[StrategyRow]


def _ranked_view(routes: list[Route], ranking: RouteRanking) -> RankRoutesResponse:
    views = []
    for index, route in enumerate(routes):
        metrics = ranking.metrics[index]
        approval = approval_info(route)
        views.append(
            RankedRoute(
                id=route.id,
                title=route_title(route, index),
                labels=labels_for(index, ranking),
                explanation=explanation_for(index, ranking, route),
                total_fee_usd=metrics.total_fee_usd,
                total_duration=metrics.total_duration,
                estimated_time=format_duration(metrics.total_duration),
                step_count=metrics.step_count,
                to_amount=route.to_amount,
                to_amount_min=route.to_amount_min,
                fees=[
                    FeeLineView(label=line.label, amount_usd=line.amount_usd)
                    for line in fee_breakdown(route)
                ],
                approval=ApprovalView(
                    required=approval.required,
                    token_symbol=approval.token_symbol,
                    spender_address=approval.spender_address,
                    amount=approval.amount,
                ),
                steps=[
                    StepView(
                        tool_name=s.tool_name,
                        token_in=s.token_in,
                        token_out=s.token_out,
                        chains=s.chains_text,
                        estimated_time=format_duration(s.execution_duration),
                    )
                    for s in step_details(route)
                ],
            )
        )
    return RankRoutesResponse(
        cheapest_index=ranking.cheapest_index,
        fastest_index=ranking.fastest_index,
        recommended_index=ranking.recommended_index,
        routes=views,
    )


def _base_units(amount: str) -> int:
    try:
        value = parse_units(amount)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    if value <= 0:
        raise HTTPException(status_code=400, detail="Amount must be greater than zero")
    return value


@router.post("/routes/rank")
async def rank_routes(
    request: RankRoutesRequest,
    ranking_config: RankingConfig = Depends(get_ranking_config),
) -> RankRoutesResponse:
    """Rank caller-supplied routes and attach labels, explanations and details."""
    ranking = compute_rankings(request.routes, ranking_config)
    return _ranked_view(request.routes, ranking)


@router.post("/routes/bridge-to-self")
async def bridge_to_self(
    request: BridgeToSelfRequest,
    client: RoutingClient = Depends(get_routing_client),
    deposit_config: DepositConfig = Depends(get_deposit_config),
    ranking_config: RankingConfig = Depends(get_ranking_config),
) -> RankRoutesResponse:
    """Fetch and rank routes moving USDC into the user's own wallet."""
    source_amount = _base_units(request.amount)
    routes = await get_bridge_to_self_routes(
        client,
        request.from_chain_id,
        source_amount,
        request.from_address,
        request.to_address or request.from_address,
        deposit_config,
    )
    ranking = compute_rankings(routes, ranking_config)
    logger.info(
        "bridge_to_self_routes",
        from_chain_id=request.from_chain_id,
        route_count=len(routes),
        recommended_index=ranking.recommended_index,
    )
    return _ranked_view(routes, ranking)


@router.post("/quotes/deposit", response_model_exclude_none=True)
async def deposit_quote(
    request: DepositQuoteRequest,
    client: RoutingClient = Depends(get_routing_client),
    deposit_config: DepositConfig = Depends(get_deposit_config),
) -> DepositQuoteResponse:
    """Build an executable bridge-and-deposit quote.

    Error Handling:
        - Unmapped chain/token or unset vault: 400
        - Routing service failure or unusable quote: 502
    """
    source_amount = _base_units(request.amount)
    receiver = request.receiver_address or request.user_address
    use_patcher = deposit_config.use_patcher if request.patched is None else request.patched

    logger.info(
        "deposit_quote_requested",
        from_chain_id=request.from_chain_id,
        source_amount=source_amount,
        patched=use_patcher,
    )

    result = await build_deposit_quote(
        client,
        request.from_chain_id,
        source_amount,
        request.user_address,
        receiver,
        replace(deposit_config, use_patcher=use_patcher),
    )
    return DepositQuoteResponse(
        quote=result.quote,
        guaranteed_amount=result.guaranteed_amount,
        patched=result.patched,
    )


@router.get("/status")
async def transfer_status(
    tx_hash: str = Query(alias="txHash"),
    bridge: str | None = None,
    from_chain: int | None = Query(default=None, alias="fromChain"),
    to_chain: int | None = Query(default=None, alias="toChain"),
    client: RoutingClient = Depends(get_routing_client),
) -> TransferStatus:
    """Cross-chain transfer status, passed through from the routing service."""
    return await client.get_status(tx_hash, bridge, from_chain, to_chain)


@router.get("/vault")
async def vault_overview(vault: VaultClient = Depends(get_vault_client)) -> VaultResponse:
    """Vault snapshot and strategy table."""
    snapshot, strategies = await asyncio.gather(vault.get_vault_snapshot(), vault.get_strategies())
    return VaultResponse(snapshot=snapshot, strategies=strategies)


@router.get("/vault/position/{address}")
async def vault_position(
    address: str, vault: VaultClient = Depends(get_vault_client)
) -> UserPosition:
    """A wallet's vault shares and their value in USDC base units."""
    if not is_valid_address(address):
        raise HTTPException(status_code=400, detail=f"Invalid address: {address}")
    return await vault.get_user_position(address)


@router.get("/vault/rebalance/preview")
async def rebalance_preview(vault: VaultClient = Depends(get_vault_client)) -> PreviewRebalance:
    """Strategy move the next rebalance would make."""
    return await vault.preview_rebalance()
