"""Routing-service client.

`RoutingClient` is the seam the deposit flow depends on; `LifiClient` is the
LI.FI implementation over httpx. Tests and alternative services plug in any
object with the same three coroutines.
"""

from __future__ import annotations

from typing import Any, Protocol

import httpx
import structlog
from pydantic import BaseModel, Field, ValidationError

from uniyield.config import DEFAULT_LIFI_CONFIG, LifiConfig
from uniyield.constants import DEFAULT_INTEGRATOR, DEFAULT_SLIPPAGE
from uniyield.errors import QuoteError
from uniyield.models.route import ContractCall, Quote, Route
from uniyield.models.status import TransferStatus
from uniyield.models.types import Uint256

logger = structlog.get_logger()


class RouteOptions(BaseModel):
    """Routing preferences sent with a routes request."""

    order: str = "CHEAPEST"
    slippage: float = DEFAULT_SLIPPAGE
    allow_switch_chain: bool = Field(default=False, alias="allowSwitchChain")
    integrator: str = DEFAULT_INTEGRATOR

    model_config = {"populate_by_name": True}


class RoutesRequest(BaseModel):
    """Request for candidate routes between two chains."""

    from_chain_id: int = Field(alias="fromChainId")
    from_amount: Uint256 = Field(alias="fromAmount")
    from_token_address: str = Field(alias="fromTokenAddress")
    from_address: str = Field(alias="fromAddress")
    to_chain_id: int = Field(alias="toChainId")
    to_token_address: str = Field(alias="toTokenAddress")
    to_address: str = Field(alias="toAddress")
    options: RouteOptions = Field(default_factory=RouteOptions)

    model_config = {"populate_by_name": True}


class ContractCallsQuoteRequest(BaseModel):
    """Request for a single "bridge + contract call" quote."""

    from_chain: int = Field(alias="fromChain")
    from_token: str = Field(alias="fromToken")
    from_address: str = Field(alias="fromAddress")
    from_amount: Uint256 = Field(alias="fromAmount")
    to_chain: int = Field(alias="toChain")
    to_token: str = Field(alias="toToken")
    contract_calls: list[ContractCall] = Field(alias="contractCalls", min_length=1)
    to_fallback_address: str | None = Field(default=None, alias="toFallbackAddress")
    slippage: float = DEFAULT_SLIPPAGE
    integrator: str = DEFAULT_INTEGRATOR

    model_config = {"populate_by_name": True}

    def to_request(self) -> dict[str, Any]:
        """Serialize for the request body, local-only fields stripped."""
        body = self.model_dump(by_alias=True, exclude_none=True, exclude={"contract_calls"})
        body["contractCalls"] = [call.to_request() for call in self.contract_calls]
        return body


class RoutingClient(Protocol):
    """Routing service used to fetch routes, quotes and transfer status."""

    async def get_routes(self, request: RoutesRequest) -> list[Route]:
        """Candidate routes for a transfer. Raises QuoteError if there are none."""
        ...

    async def get_contract_calls_quote(self, request: ContractCallsQuoteRequest) -> Quote:
        """Executable quote bridging funds and running the destination calls."""
        ...

    async def get_status(
        self,
        tx_hash: str,
        bridge: str | None = None,
        from_chain: int | None = None,
        to_chain: int | None = None,
    ) -> TransferStatus:
        """Status of a transfer keyed by its sending transaction hash."""
        ...


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return f"HTTP {response.status_code}"


class LifiClient:
    """LI.FI REST client.

    Usage:
        async with LifiClient(LifiConfig.from_env()) as client:
            routes = await client.get_routes(request)
    """

    def __init__(
        self,
        config: LifiConfig = DEFAULT_LIFI_CONFIG,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Base URL, API key and timeout
            http_client: Pre-built client (e.g. with a mock transport). If None,
                one is created from the config and closed by `aclose()`.
        """
        self.config = config
        self._owns_client = http_client is None
        if http_client is None:
            headers = {"x-lifi-api-key": config.api_key} if config.api_key else {}
            http_client = httpx.AsyncClient(
                base_url=config.base_url,
                headers=headers,
                timeout=config.timeout,
            )
        self._client = http_client

    async def __aenter__(self) -> LifiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as err:
            message = _error_message(err.response)
            logger.warning(
                "routing_request_failed",
                path=path,
                status_code=err.response.status_code,
                message=message,
            )
            raise QuoteError(message, status_code=err.response.status_code) from err
        except httpx.TransportError as err:
            logger.warning("routing_request_unreachable", path=path, error=str(err))
            raise QuoteError(f"Routing service unreachable: {err}") from err
        try:
            return response.json()
        except ValueError as err:
            logger.warning(
                "routing_response_malformed",
                path=path,
                status_code=response.status_code,
                content_type=response.headers.get("content-type"),
            )
            raise QuoteError(f"Malformed response from routing service: {path}") from err

    async def get_routes(self, request: RoutesRequest) -> list[Route]:
        payload = await self._request(
            "POST", "/advanced/routes", json=request.model_dump(by_alias=True)
        )
        raw_routes = payload.get("routes", []) if isinstance(payload, dict) else None
        if not isinstance(raw_routes, list):
            raise QuoteError("Malformed routes response: expected an object with a routes list")
        try:
            routes = [Route.model_validate(r) for r in raw_routes]
        except ValidationError as err:
            raise QuoteError(f"Malformed route in response: {err.errors()[0]['msg']}") from err

        if not routes:
            raise QuoteError("No routes found")

        logger.info(
            "routes_received",
            from_chain_id=request.from_chain_id,
            to_chain_id=request.to_chain_id,
            route_count=len(routes),
        )
        return routes

    async def get_contract_calls_quote(self, request: ContractCallsQuoteRequest) -> Quote:
        payload = await self._request("POST", "/quote/contractCalls", json=request.to_request())
        try:
            quote = Quote.model_validate(payload)
        except ValidationError as err:
            raise QuoteError(f"Malformed quote in response: {err.errors()[0]['msg']}") from err

        logger.info(
            "contract_calls_quote_received",
            quote_id=quote.id,
            from_chain=request.from_chain,
            to_chain=request.to_chain,
            tool=quote.tool,
        )
        return quote

    async def get_status(
        self,
        tx_hash: str,
        bridge: str | None = None,
        from_chain: int | None = None,
        to_chain: int | None = None,
    ) -> TransferStatus:
        params: dict[str, str | int] = {"txHash": tx_hash}
        if bridge is not None:
            params["bridge"] = bridge
        if from_chain is not None:
            params["fromChain"] = from_chain
        if to_chain is not None:
            params["toChain"] = to_chain

        payload = await self._request("GET", "/status", params=params)
        try:
            return TransferStatus.model_validate(payload)
        except ValidationError as err:
            raise QuoteError(f"Malformed status response: {err.errors()[0]['msg']}") from err
