"""Pydantic models for routing-service route and quote payloads.

Based on the LI.FI API schemas (Route, LiFiStep, Estimate, Action):
https://docs.li.fi/api-reference

Estimate amounts are kept as raw strings. Upstream fills them best-effort
(empty, zero or missing values occur), so consumers decide what counts as a
usable amount instead of the parser rejecting the whole payload.
"""

from __future__ import annotations

from collections.abc import Iterator
from decimal import Decimal
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Discriminator, Field, Tag

from uniyield.models.types import Address, Bytes, Uint256


class Token(BaseModel):
    """Token metadata attached to actions and costs."""

    address: str
    chain_id: int = Field(alias="chainId")
    symbol: str
    decimals: int = Field(ge=0, le=77)
    name: str | None = None
    price_usd: Decimal | None = Field(default=None, alias="priceUSD")

    model_config = {"populate_by_name": True}


class FeeCost(BaseModel):
    """A protocol or integrator fee charged by a step."""

    name: str = ""
    description: str | None = None
    percentage: Decimal | None = None
    token: Token | None = None
    amount: str | None = None
    amount_usd: Decimal | None = Field(default=None, alias="amountUSD")
    # Included fees are taken out of the transferred amount rather than paid on top
    included: bool = False

    model_config = {"populate_by_name": True}


class GasCost(BaseModel):
    """Gas paid to execute a step."""

    type: str = "SEND"
    price: str | None = None
    estimate: str | None = None
    limit: str | None = None
    amount: str | None = None
    amount_usd: Decimal | None = Field(default=None, alias="amountUSD")
    token: Token | None = None

    model_config = {"populate_by_name": True}


class Estimate(BaseModel):
    """Execution estimate for a step or quote."""

    tool: str | None = None
    from_amount: str | None = Field(default=None, alias="fromAmount")
    to_amount: str | None = Field(default=None, alias="toAmount")
    to_amount_min: str | None = Field(default=None, alias="toAmountMin")
    approval_address: str | None = Field(default=None, alias="approvalAddress")
    execution_duration: float | None = Field(default=None, alias="executionDuration", ge=0)
    fee_costs: list[FeeCost] = Field(default_factory=list, alias="feeCosts")
    gas_costs: list[GasCost] = Field(default_factory=list, alias="gasCosts")
    from_amount_usd: Decimal | None = Field(default=None, alias="fromAmountUSD")
    to_amount_usd: Decimal | None = Field(default=None, alias="toAmountUSD")

    model_config = {"populate_by_name": True}


class Action(BaseModel):
    """What a step does: which token moves from which chain to which chain."""

    from_chain_id: int | None = Field(default=None, alias="fromChainId")
    to_chain_id: int | None = Field(default=None, alias="toChainId")
    from_token: Token | None = Field(default=None, alias="fromToken")
    to_token: Token | None = Field(default=None, alias="toToken")
    from_amount: str | None = Field(default=None, alias="fromAmount")
    from_address: str | None = Field(default=None, alias="fromAddress")
    to_address: str | None = Field(default=None, alias="toAddress")
    slippage: float | None = None

    model_config = {"populate_by_name": True}


class ToolDetails(BaseModel):
    """Display metadata for the bridge/exchange executing a step."""

    key: str | None = None
    name: str | None = None
    logo_uri: str | None = Field(default=None, alias="logoURI")

    model_config = {"populate_by_name": True}


class _StepBase(BaseModel):
    id: str | None = None
    tool: str = ""
    tool_details: ToolDetails | None = Field(default=None, alias="toolDetails")
    action: Action = Field(default_factory=Action)
    estimate: Estimate = Field(default_factory=Estimate)

    model_config = {"populate_by_name": True}

    @property
    def display_name(self) -> str:
        """Tool display name, falling back to the tool key."""
        if self.tool_details is not None and self.tool_details.name:
            return self.tool_details.name
        return self.tool


class SwapStep(_StepBase):
    """Same-chain token exchange."""

    type: Literal["swap"] = "swap"


class CrossStep(_StepBase):
    """Bridging leg; the source of the guaranteed destination amount."""

    type: Literal["cross"] = "cross"


class CustomStep(_StepBase):
    """Arbitrary destination contract call (e.g. vault deposit)."""

    type: Literal["custom"] = "custom"


class ProtocolStep(_StepBase):
    """Service-internal step such as integrator fee collection."""

    type: Literal["protocol"] = "protocol"


class CompositeStep(_StepBase):
    """Service step bundling several included steps behind one transaction."""

    type: Literal["lifi"] = "lifi"
    included_steps: list[Step] = Field(default_factory=list, alias="includedSteps")
    transaction_request: dict[str, Any] | None = Field(default=None, alias="transactionRequest")


def _get_step_kind(v: Any) -> str:
    """Discriminator function for Step union type."""
    if isinstance(v, dict):
        return str(v.get("type", "lifi"))
    return str(v.type)


# Discriminated union: Pydantic will use the 'type' field to determine the kind
Step = Annotated[
    Annotated[SwapStep, Tag("swap")]
    | Annotated[CrossStep, Tag("cross")]
    | Annotated[CustomStep, Tag("custom")]
    | Annotated[ProtocolStep, Tag("protocol")]
    | Annotated[CompositeStep, Tag("lifi")],
    Discriminator(_get_step_kind),
]

CompositeStep.model_rebuild()


def iter_leaf_steps(steps: list[Step]) -> Iterator[Step]:
    """Yield steps in execution order with composite steps expanded."""
    for step in steps:
        if isinstance(step, CompositeStep) and step.included_steps:
            yield from iter_leaf_steps(step.included_steps)
        else:
            yield step


class Route(BaseModel):
    """One complete plan for moving value from source to destination."""

    id: str
    from_chain_id: int | None = Field(default=None, alias="fromChainId")
    to_chain_id: int | None = Field(default=None, alias="toChainId")
    from_amount: Uint256 | None = Field(default=None, alias="fromAmount")
    from_amount_usd: Decimal | None = Field(default=None, alias="fromAmountUSD")
    from_token: Token | None = Field(default=None, alias="fromToken")
    from_address: str | None = Field(default=None, alias="fromAddress")
    to_amount: Uint256 = Field(alias="toAmount", description="Expected destination amount.")
    to_amount_min: str | None = Field(default=None, alias="toAmountMin")
    to_amount_usd: Decimal | None = Field(default=None, alias="toAmountUSD")
    to_token: Token | None = Field(default=None, alias="toToken")
    to_address: str | None = Field(default=None, alias="toAddress")
    gas_cost_usd: Decimal | None = Field(default=None, alias="gasCostUSD")
    steps: list[Step] = Field(min_length=1)
    tags: list[str] = Field(default_factory=list)
    # Local extension: guaranteed amount the vault deposit is built with
    deposit_amount_out: Uint256 | None = Field(default=None, alias="depositAmountOut")

    model_config = {"populate_by_name": True}

    def leaf_steps(self) -> list[Step]:
        return list(iter_leaf_steps(self.steps))

    def with_deposit_amount(self, amount: str) -> Route:
        """Copy of this route annotated with the guaranteed deposit amount."""
        return self.model_copy(update={"deposit_amount_out": amount})


class Quote(BaseModel):
    """Single executable quote returned for "bridge + contract call" requests."""

    id: str | None = None
    type: str = "lifi"
    tool: str = ""
    tool_details: ToolDetails | None = Field(default=None, alias="toolDetails")
    action: Action = Field(default_factory=Action)
    estimate: Estimate = Field(default_factory=Estimate)
    included_steps: list[Step] = Field(default_factory=list, alias="includedSteps")
    transaction_request: dict[str, Any] | None = Field(default=None, alias="transactionRequest")
    # Local extension: guaranteed amount the vault deposit is built with
    deposit_amount_out: Uint256 | None = Field(default=None, alias="depositAmountOut")

    model_config = {"populate_by_name": True}

    def leaf_steps(self) -> list[Step]:
        return list(iter_leaf_steps(self.included_steps))

    def with_deposit_amount(self, amount: str) -> Quote:
        """Copy of this quote annotated with the guaranteed deposit amount."""
        return self.model_copy(update={"deposit_amount_out": amount})


class ContractCall(BaseModel):
    """Destination-chain call executed with the bridged tokens."""

    from_amount: Uint256 = Field(alias="fromAmount")
    from_token_address: Address = Field(alias="fromTokenAddress")
    to_contract_address: Address = Field(alias="toContractAddress")
    to_contract_call_data: Bytes = Field(alias="toContractCallData")
    to_contract_gas_limit: Uint256 = Field(alias="toContractGasLimit")
    to_approval_address: Address | None = Field(default=None, alias="toApprovalAddress")
    # Local flag: the amount inside the calldata is a sentinel the execution
    # engine replaces with the bridged amount at send time
    patchable: bool = False

    model_config = {"populate_by_name": True}

    def to_request(self) -> dict[str, Any]:
        """Serialize for the routing-service request body."""
        return self.model_dump(by_alias=True, exclude_none=True, exclude={"patchable"})
