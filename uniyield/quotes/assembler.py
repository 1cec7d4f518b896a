"""Deposit quote assembly: "bridge + vault deposit" in one signature.

The deposit amount inside the destination call must be exact, yet it is only
known after the bridge has quoted its slippage. Two modes handle this:

Two-pass negotiation (default):
1. Build a provisional deposit call with the user's nominal amount and
   request a quote.
2. Extract the guaranteed amount from the provisional quote.
3. Rebuild the deposit call with the guaranteed amount and request the final
   quote, which is returned annotated with that amount.

Patched mode (`DepositConfig.use_patcher`):
The deposit call carries a sentinel amount and is marked patchable; the
execution engine substitutes the bridged amount at send time. One quote
request, but only usable with an engine that supports patching.

Chain, token and vault configuration is checked before any request is sent.
"""

from dataclasses import dataclass

import structlog

from uniyield.config import DepositConfig
from uniyield.errors import ConfigurationError, QuoteError
from uniyield.models.route import ContractCall, Quote, Route
from uniyield.models.types import ZERO_ADDRESS, is_valid_address, normalize_address
from uniyield.quotes.calldata import encode_deposit, encode_patchable_deposit
from uniyield.quotes.client import (
    ContractCallsQuoteRequest,
    RouteOptions,
    RoutesRequest,
    RoutingClient,
)
from uniyield.quotes.extraction import extract_guaranteed_amount, find_guaranteed_amount
from uniyield.registry import usdc_address

logger = structlog.get_logger()


@dataclass(frozen=True)
class DepositQuote:
    """Executable deposit quote and the amount its vault call deposits.

    Attributes:
        quote: Final quote, with `deposit_amount_out` set to guaranteed_amount
        guaranteed_amount: Base-unit amount the destination call is built with
            (for patched quotes: the amount expected to be patched in)
        contract_call: Destination call sent with the final quote request
        patched: True if the call carries the patch sentinel
    """

    quote: Quote
    guaranteed_amount: str
    contract_call: ContractCall
    patched: bool = False


def _resolve_tokens(source_chain_id: int, config: DepositConfig) -> tuple[str, str]:
    """USDC on source and destination chains, after checking the vault is set.

    Raises:
        ConfigurationError: If a token or the vault address is not configured
    """
    if not is_valid_address(config.vault_address):
        raise ConfigurationError(f"Invalid vault address: {config.vault_address}")
    if normalize_address(config.vault_address) == ZERO_ADDRESS:
        raise ConfigurationError("Vault address not configured")
    return usdc_address(source_chain_id), usdc_address(config.destination_chain_id)


def _check_amount(source_amount: int) -> None:
    if source_amount <= 0:
        raise ValueError(f"Deposit amount must be positive, got {source_amount}")


def build_deposit_contract_call(
    assets: int,
    receiver: str,
    config: DepositConfig,
    *,
    patchable: bool = False,
) -> ContractCall:
    """Destination call depositing `assets` USDC into the vault for `receiver`.

    With `patchable=True` the calldata carries the patch sentinel instead of
    `assets`; `assets` is still declared as the call's expected input.
    """
    to_token = usdc_address(config.destination_chain_id)
    if patchable:
        call_data = encode_patchable_deposit(receiver)
    else:
        call_data = encode_deposit(assets, receiver)
    return ContractCall(
        from_amount=str(assets),
        from_token_address=to_token,
        to_contract_address=config.vault_address,
        to_contract_call_data=call_data,
        to_contract_gas_limit=str(config.deposit_gas_limit),
        to_approval_address=config.vault_address,
        patchable=patchable,
    )


def _quote_request(
    source_chain_id: int,
    source_amount: int,
    user_address: str,
    from_token: str,
    to_token: str,
    call: ContractCall,
    config: DepositConfig,
) -> ContractCallsQuoteRequest:
    return ContractCallsQuoteRequest(
        from_chain=source_chain_id,
        from_token=from_token,
        from_address=user_address,
        from_amount=str(source_amount),
        to_chain=config.destination_chain_id,
        to_token=to_token,
        contract_calls=[call],
        # Bridged funds land with the user if the deposit call fails
        to_fallback_address=user_address,
        slippage=config.slippage,
        integrator=config.integrator,
    )


async def build_deposit_quote(
    client: RoutingClient,
    source_chain_id: int,
    source_amount: int,
    user_address: str,
    receiver_address: str,
    config: DepositConfig,
) -> DepositQuote:
    """Build the executable "bridge + deposit" quote.

    Args:
        client: Routing service
        source_chain_id: Chain the user's USDC is on
        source_amount: Nominal USDC amount in base units
        user_address: Wallet sending the funds
        receiver_address: Address receiving the vault shares
        config: Vault address, destination chain, slippage and mode

    Returns:
        DepositQuote whose contract call deposits exactly the guaranteed amount

    Raises:
        ConfigurationError: Before any request, if chain/token/vault is unmapped
        ExtractionError: If a quote carries no usable guaranteed amount
        QuoteError: If the routing service fails, or the final quote guarantees
            less than the amount already encoded in the deposit call
    """
    from_token, to_token = _resolve_tokens(source_chain_id, config)
    _check_amount(source_amount)

    if config.use_patcher:
        return await build_patched_deposit_quote(
            client, source_chain_id, source_amount, user_address, receiver_address, config
        )

    # Pass 1: provisional call with the nominal amount
    provisional_call = build_deposit_contract_call(source_amount, receiver_address, config)
    provisional = await client.get_contract_calls_quote(
        _quote_request(
            source_chain_id,
            source_amount,
            user_address,
            from_token,
            to_token,
            provisional_call,
            config,
        )
    )
    guaranteed = extract_guaranteed_amount(provisional)

    # Pass 2: rebuild with the amount the bridge guarantees
    final_call = build_deposit_contract_call(int(guaranteed), receiver_address, config)
    final = await client.get_contract_calls_quote(
        _quote_request(
            source_chain_id,
            source_amount,
            user_address,
            from_token,
            to_token,
            final_call,
            config,
        )
    )

    final_amount, source = find_guaranteed_amount(final)
    if final_amount < int(guaranteed):
        logger.warning(
            "guaranteed_amount_drift",
            quote_id=final.id,
            encoded_amount=guaranteed,
            final_guaranteed_amount=final_amount,
            source=source.value,
        )
        raise QuoteError(
            f"Guaranteed amount dropped from {guaranteed} to {final_amount} between quote passes"
        )

    logger.info(
        "deposit_quote_ready",
        quote_id=final.id,
        source_chain_id=source_chain_id,
        source_amount=source_amount,
        guaranteed_amount=guaranteed,
        pass_count=2,
    )
    return DepositQuote(
        quote=final.with_deposit_amount(guaranteed),
        guaranteed_amount=guaranteed,
        contract_call=final_call,
    )


async def build_patched_deposit_quote(
    client: RoutingClient,
    source_chain_id: int,
    source_amount: int,
    user_address: str,
    receiver_address: str,
    config: DepositConfig,
) -> DepositQuote:
    """Single-request quote whose deposit amount is patched at execution time.

    The returned `guaranteed_amount` is informational: the engine deposits
    whatever actually arrives.
    """
    from_token, to_token = _resolve_tokens(source_chain_id, config)
    _check_amount(source_amount)

    call = build_deposit_contract_call(source_amount, receiver_address, config, patchable=True)
    quote = await client.get_contract_calls_quote(
        _quote_request(
            source_chain_id, source_amount, user_address, from_token, to_token, call, config
        )
    )
    guaranteed = extract_guaranteed_amount(quote)

    logger.info(
        "deposit_quote_ready",
        quote_id=quote.id,
        source_chain_id=source_chain_id,
        source_amount=source_amount,
        guaranteed_amount=guaranteed,
        pass_count=1,
        patched=True,
    )
    return DepositQuote(
        quote=quote.with_deposit_amount(guaranteed),
        guaranteed_amount=guaranteed,
        contract_call=call,
        patched=True,
    )


def bridge_to_self_request(
    source_chain_id: int,
    source_amount: int,
    from_address: str,
    to_address: str,
    config: DepositConfig,
) -> RoutesRequest:
    """Routes request moving USDC into the user's own wallet on the vault chain.

    Raises:
        ConfigurationError: If USDC is not mapped on either chain
    """
    _check_amount(source_amount)
    return RoutesRequest(
        from_chain_id=source_chain_id,
        from_amount=str(source_amount),
        from_token_address=usdc_address(source_chain_id),
        from_address=from_address,
        to_chain_id=config.destination_chain_id,
        to_token_address=usdc_address(config.destination_chain_id),
        to_address=to_address,
        options=RouteOptions(
            order="CHEAPEST",
            slippage=config.slippage,
            allow_switch_chain=False,
            integrator=config.integrator,
        ),
    )


async def get_bridge_to_self_routes(
    client: RoutingClient,
    source_chain_id: int,
    source_amount: int,
    from_address: str,
    to_address: str,
    config: DepositConfig,
) -> list[Route]:
    """Candidate bridge-to-self routes, the fallback when deposit execution fails."""
    request = bridge_to_self_request(
        source_chain_id, source_amount, from_address, to_address, config
    )
    return await client.get_routes(request)
