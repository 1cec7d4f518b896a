"""Deposit execution: drive the engine, track progress, finalize the outcome.

Only one attempt is active per session. Any failure abandons the attempt:
the tracker is closed and ExecutionError is raised with the bridge-to-self
recovery hint. Nothing is retried automatically.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

import structlog

from uniyield.constants import DEPOSIT_STAGES, VAULT_CHAIN_ID
from uniyield.errors import ExecutionError, QuoteError
from uniyield.execution.progress import DepositOutcome, ProgressTracker
from uniyield.models.route import Quote
from uniyield.models.status import StepExecutionStatus, TransferState, TransferStatus
from uniyield.quotes.calldata import patch_amount

if TYPE_CHECKING:
    from uniyield.quotes.assembler import DepositQuote
    from uniyield.quotes.client import RoutingClient
    from uniyield.vault.base import VaultClient

logger = structlog.get_logger()

ProgressCallback = Callable[[Sequence[StepExecutionStatus]], None]
AmountPatcher = Callable[[str, int], str]

# Seconds between status polls
DEFAULT_POLL_INTERVAL = 5.0


@dataclass(frozen=True)
class ExecutionResult:
    """What the execution engine reports once every step has run."""

    to_amount: str | None
    tx_hash: str | None
    chain_id: int = VAULT_CHAIN_ID


class ExecutionEngine(Protocol):
    """Submits each step of a quote on-chain.

    The engine calls `on_update` with one status per underlying step whenever
    progress changes. When `amount_patcher` is given, the engine must run the
    destination calldata through it with the actually bridged amount before
    sending. Failures (rejected signature, revert) are raised.
    """

    async def execute(
        self,
        quote: Quote,
        on_update: ProgressCallback,
        amount_patcher: AmountPatcher | None = None,
    ) -> ExecutionResult: ...


async def run_deposit(
    engine: ExecutionEngine,
    deposit_quote: DepositQuote,
    tracker: ProgressTracker,
    vault: VaultClient | None = None,
) -> DepositOutcome:
    """Execute a deposit quote while reflecting progress in `tracker`.

    Args:
        engine: Execution engine
        deposit_quote: Quote from build_deposit_quote
        tracker: Fresh tracker for this attempt
        vault: If given, used to estimate shares for the received amount

    Returns:
        DepositOutcome, also recorded on the tracker

    Raises:
        ExecutionError: If the engine raised; the tracker is closed
    """
    quote = deposit_quote.quote
    patcher = patch_amount if deposit_quote.patched else None
    tracker.start()

    logger.info(
        "deposit_execution_started",
        quote_id=quote.id,
        guaranteed_amount=deposit_quote.guaranteed_amount,
        patched=deposit_quote.patched,
    )

    try:
        result = await engine.execute(quote, tracker.update, amount_patcher=patcher)
    except Exception as err:
        tracker.close()
        logger.exception("deposit_execution_failed", quote_id=quote.id)
        raise ExecutionError(str(err) or None) from err

    amount = result.to_amount or deposit_quote.guaranteed_amount
    shares = None
    if vault is not None:
        # The deposit already landed; a failed share estimate only loses display data
        try:
            shares = str(await vault.preview_deposit(int(amount)))
        except Exception:
            logger.exception("share_estimate_failed", quote_id=quote.id, amount=amount)

    outcome = DepositOutcome(
        amount_received=amount,
        shares_received=shares,
        tx_hash=result.tx_hash,
        chain_id=result.chain_id,
    )
    tracker.finish(outcome)

    if not tracker.is_open:
        logger.info("deposit_completed_after_close", quote_id=quote.id, tx_hash=result.tx_hash)
    logger.info(
        "deposit_execution_completed",
        quote_id=quote.id,
        amount_received=amount,
        shares_received=shares,
        tx_hash=result.tx_hash,
    )
    return outcome


class DepositSession:
    """Holds the single active deposit attempt of a UI session.

    Starting a new attempt closes the previous tracker and replaces it;
    attempts are never queued.
    """

    def __init__(self, stages: Sequence[tuple[str, str]] = DEPOSIT_STAGES) -> None:
        self._stages = tuple(stages)
        self.tracker: ProgressTracker | None = None

    def start_attempt(self) -> ProgressTracker:
        """Reset progress state for a new attempt."""
        if self.tracker is not None:
            self.tracker.close()
        self.tracker = ProgressTracker(self._stages)
        return self.tracker

    def close(self) -> None:
        """Close the progress view. The running execution is not cancelled."""
        if self.tracker is not None:
            self.tracker.close()

    async def deposit(
        self,
        engine: ExecutionEngine,
        deposit_quote: DepositQuote,
        vault: VaultClient | None = None,
    ) -> DepositOutcome:
        tracker = self.start_attempt()
        return await run_deposit(engine, deposit_quote, tracker, vault)


async def poll_transfer_status(
    client: RoutingClient,
    tx_hash: str,
    bridge: str | None = None,
    from_chain: int | None = None,
    to_chain: int | None = None,
    interval: float = DEFAULT_POLL_INTERVAL,
    max_polls: int | None = None,
) -> TransferStatus:
    """Poll the routing service until a transfer reaches a final state.

    No timeout is imposed unless `max_polls` is set; a stalled transfer keeps
    polling. NOT_FOUND is treated as "not indexed yet".

    Raises:
        QuoteError: If `max_polls` is exhausted or the service fails
    """
    polls = 0
    while True:
        status = await client.get_status(tx_hash, bridge, from_chain, to_chain)
        polls += 1
        if status.is_final:
            logger.info(
                "transfer_status_final",
                tx_hash=tx_hash,
                status=status.status.value,
                substatus=status.substatus,
                polls=polls,
            )
            return status
        if status.status == TransferState.NOT_FOUND:
            logger.debug("transfer_not_indexed", tx_hash=tx_hash, polls=polls)
        if max_polls is not None and polls >= max_polls:
            raise QuoteError(f"Transfer {tx_hash} still {status.status.value} after {polls} polls")
        await asyncio.sleep(interval)
