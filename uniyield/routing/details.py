"""Display details for a single route: fee lines, approvals, steps.

Formatting helpers here are shared with the explanation text so that a fee
or a duration is written the same way everywhere.
"""

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from uniyield.models.route import Route, iter_leaf_steps
from uniyield.models.types import ZERO_ADDRESS, normalize_address
from uniyield.registry import chain_display_name

# Shown when no step carries a duration estimate
UNKNOWN_DURATION_TEXT = "~2 min"

_CENT = Decimal("0.01")


def format_usd(amount: Decimal) -> str:
    """Format a USD amount with two decimals: Decimal("1.2") -> "$1.20"."""
    return f"${amount.quantize(_CENT, rounding=ROUND_HALF_UP)}"


def format_duration(seconds: float | None) -> str:
    """Approximate duration: "~45s" under a minute, "~3 min" otherwise."""
    if seconds is None:
        return UNKNOWN_DURATION_TEXT
    if seconds < 60:
        return f"~{round(seconds)}s"
    return f"~{math.ceil(seconds / 60)} min"


@dataclass(frozen=True)
class FeeLine:
    """One fee or gas line item of a route."""

    label: str
    amount_usd: Decimal

    @property
    def amount_text(self) -> str:
        return format_usd(self.amount_usd)


@dataclass(frozen=True)
class ApprovalInfo:
    """Token approval the user must sign before the route can execute."""

    required: bool
    token_symbol: str | None = None
    spender_address: str | None = None
    amount: str | None = None


@dataclass(frozen=True)
class StepDetail:
    """Display row for one executed step."""

    tool_name: str
    token_in: str
    token_out: str
    from_chain_id: int | None
    to_chain_id: int | None
    execution_duration: float | None

    @property
    def chains_text(self) -> str:
        if self.from_chain_id is None or self.to_chain_id is None:
            return ""
        from_name = chain_display_name(self.from_chain_id)
        return f"{from_name} → {chain_display_name(self.to_chain_id)}"


def fee_breakdown(route: Route) -> list[FeeLine]:
    """Fee and gas line items across all steps that carry a USD amount."""
    lines: list[FeeLine] = []
    for step in route.steps:
        for fee in step.estimate.fee_costs:
            if fee.amount_usd is None:
                continue
            lines.append(FeeLine(label=fee.name or "Fee", amount_usd=fee.amount_usd))
        for gas in step.estimate.gas_costs:
            if gas.amount_usd is None:
                continue
            chain_id = step.action.from_chain_id
            label = "Gas" if chain_id is None else f"Gas ({chain_display_name(chain_id)})"
            lines.append(FeeLine(label=label, amount_usd=gas.amount_usd))
    return lines


def approval_info(route: Route) -> ApprovalInfo:
    """Approval required by the first step, if any.

    Native-token sources never need an approval.
    """
    step = route.steps[0]
    spender = step.estimate.approval_address
    token = step.action.from_token
    if not spender or token is None:
        return ApprovalInfo(required=False)
    if normalize_address(token.address) == ZERO_ADDRESS:
        return ApprovalInfo(required=False)
    return ApprovalInfo(
        required=True,
        token_symbol=token.symbol,
        spender_address=spender,
        amount=step.action.from_amount,
    )


def step_details(route: Route) -> list[StepDetail]:
    """One detail row per executed step, composite steps expanded."""
    details = []
    for step in iter_leaf_steps(route.steps):
        action = step.action
        details.append(
            StepDetail(
                tool_name=step.display_name or step.type,
                token_in=action.from_token.symbol if action.from_token else "?",
                token_out=action.to_token.symbol if action.to_token else "?",
                from_chain_id=action.from_chain_id,
                to_chain_id=action.to_chain_id,
                execution_duration=step.estimate.execution_duration,
            )
        )
    return details


def tool_names(route: Route) -> list[str]:
    """Display names of the top-level step tools, in order."""
    return [name for name in (step.display_name for step in route.steps) if name]


def route_title(route: Route, index: int) -> str:
    """Tool names joined with arrows, "Route N" when none are known."""
    names = tool_names(route)
    return " → ".join(names) if names else f"Route {index + 1}"
