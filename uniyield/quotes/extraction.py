"""Guaranteed destination amount extraction.

The vault deposit on the destination chain must be built with an exact
amount before the bridge has run. This module picks the amount a quote
guarantees will arrive, in this precedence order (first well-formed,
non-zero value wins):

1. bridge ("cross") step `estimate.toAmountMin` (slippage-adjusted minimum)
2. bridge step `estimate.toAmount`
3. contract-call ("custom") step `action.fromAmount`
4. top-level `toAmountMin`, then top-level `toAmount`

The worst-case amount is preferred over the expected one so the deposit
never tries to move more than actually arrives. When nothing usable is
found, extraction fails; callers must not fall back to zero or to the
user's input amount.
"""

from collections.abc import Iterator
from enum import Enum

import structlog

from uniyield.errors import ExtractionError
from uniyield.models.route import CrossStep, CustomStep, Quote, Route
from uniyield.models.types import parse_base_units

logger = structlog.get_logger()


class AmountSource(str, Enum):
    """Quote field a guaranteed amount was read from."""

    BRIDGE_TO_AMOUNT_MIN = "bridge.toAmountMin"
    BRIDGE_TO_AMOUNT = "bridge.toAmount"
    CONTRACT_CALL_FROM_AMOUNT = "contractCall.fromAmount"
    QUOTE_TO_AMOUNT_MIN = "quote.toAmountMin"
    QUOTE_TO_AMOUNT = "quote.toAmount"


def _candidates(quote: Quote | Route) -> Iterator[tuple[AmountSource, object]]:
    steps = quote.leaf_steps()
    bridge = next((s for s in steps if isinstance(s, CrossStep)), None)
    call = next((s for s in steps if isinstance(s, CustomStep)), None)

    if bridge is not None:
        yield AmountSource.BRIDGE_TO_AMOUNT_MIN, bridge.estimate.to_amount_min
        yield AmountSource.BRIDGE_TO_AMOUNT, bridge.estimate.to_amount
    if call is not None:
        yield AmountSource.CONTRACT_CALL_FROM_AMOUNT, call.action.from_amount

    if isinstance(quote, Route):
        yield AmountSource.QUOTE_TO_AMOUNT_MIN, quote.to_amount_min
        yield AmountSource.QUOTE_TO_AMOUNT, quote.to_amount
    else:
        yield AmountSource.QUOTE_TO_AMOUNT_MIN, quote.estimate.to_amount_min
        yield AmountSource.QUOTE_TO_AMOUNT, quote.estimate.to_amount


def find_guaranteed_amount(quote: Quote | Route) -> tuple[int, AmountSource]:
    """Guaranteed amount and the field it came from.

    Raises:
        ExtractionError: If every candidate field is absent, zero or malformed
    """
    for source, raw in _candidates(quote):
        amount = parse_base_units(raw)
        if amount is not None and amount > 0:
            return amount, source

    logger.warning("guaranteed_amount_missing", quote_id=quote.id)
    raise ExtractionError(f"No usable guaranteed amount in quote {quote.id}")


def extract_guaranteed_amount(quote: Quote | Route) -> str:
    """Minimum amount guaranteed to arrive on the destination chain.

    Args:
        quote: Contract-calls quote or route returned by the routing service

    Returns:
        Base-unit integer as decimal string (e.g. "998000" for 0.998 USDC)

    Raises:
        ExtractionError: If every candidate field is absent, zero or malformed
    """
    amount, source = find_guaranteed_amount(quote)
    logger.debug(
        "guaranteed_amount_extracted",
        quote_id=quote.id,
        source=source.value,
        amount=amount,
    )
    return str(amount)
