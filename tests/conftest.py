"""Pytest configuration and fixtures."""

import json
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pytest
from eth_abi import decode  # type: ignore[attr-defined]

from uniyield.config import DepositConfig
from uniyield.errors import QuoteError
from uniyield.execution.runner import AmountPatcher, ExecutionResult, ProgressCallback
from uniyield.models.route import Quote, Route
from uniyield.models.status import StepExecutionStatus, TransferState, TransferStatus
from uniyield.quotes.calldata import DEPOSIT_SELECTOR
from uniyield.quotes.client import ContractCallsQuoteRequest, RoutesRequest
from uniyield.vault.mock import MockVaultClient, VaultStore
from tests.helpers import VAULT, make_quote

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the fixtures directory path."""
    return FIXTURES_DIR


def load_json_fixture(name: str) -> Any:
    """Load a JSON fixture by name.

    Args:
        name: Fixture path without suffix (e.g., "quotes/contract_calls_base")
    """
    path = FIXTURES_DIR / f"{name}.json"
    with open(path) as f:
        return json.load(f)


def decode_deposit(call_data: str) -> tuple[int, str]:
    """Decode deposit(uint256,address) calldata into (assets, lowercase receiver)."""
    assert call_data.startswith(DEPOSIT_SELECTOR)
    assets, receiver = decode(["uint256", "address"], bytes.fromhex(call_data[10:]))
    return assets, receiver.lower()


@pytest.fixture
def deposit_config() -> DepositConfig:
    """Deposit config pointing at a test vault."""
    return DepositConfig(vault_address=VAULT)


@pytest.fixture
def vault_store() -> VaultStore:
    """Fresh vault state per test."""
    return VaultStore()


@pytest.fixture
def mock_vault(vault_store: VaultStore) -> MockVaultClient:
    return MockVaultClient(vault_store)


# =============================================================================
# Mock classes for dependency injection
# =============================================================================


def slippage_quote(bps: int = 30) -> Callable[[ContractCallsQuoteRequest], Quote]:
    """Quote responder guaranteeing `fromAmount` minus `bps` basis points.

    The contract-call step echoes the fromAmount of the submitted call.
    """

    def respond(request: ContractCallsQuoteRequest) -> Quote:
        guaranteed = int(request.from_amount) * (10_000 - bps) // 10_000
        return make_quote(
            bridge_to_amount_min=str(guaranteed),
            bridge_to_amount=request.from_amount,
            call_from_amount=request.contract_calls[0].from_amount,
            quote_id=f"quote-{request.contract_calls[0].from_amount}",
        )

    return respond


class FakeRoutingClient:
    """In-memory RoutingClient recording every request.

    Usage:
        # Quotes guaranteeing 0.3% less than the source amount
        client = FakeRoutingClient(quote_responder=slippage_quote(30))

        # Fixed route list
        client = FakeRoutingClient(routes=[route1, route2])

        # Failing service
        client = FakeRoutingClient(error=QuoteError("down"))
    """

    def __init__(
        self,
        quote_responder: Callable[[ContractCallsQuoteRequest], Quote] | None = None,
        routes: list[Route] | None = None,
        statuses: Sequence[TransferStatus] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.quote_responder = quote_responder or slippage_quote()
        self.routes = routes or []
        self.statuses = list(statuses or [TransferStatus(status=TransferState.DONE)])
        self.error = error
        self.quote_requests: list[ContractCallsQuoteRequest] = []
        self.route_requests: list[RoutesRequest] = []
        self.status_calls: list[str] = []

    async def get_routes(self, request: RoutesRequest) -> list[Route]:
        self.route_requests.append(request)
        if self.error is not None:
            raise self.error
        if not self.routes:
            raise QuoteError("No routes found")
        return self.routes

    async def get_contract_calls_quote(self, request: ContractCallsQuoteRequest) -> Quote:
        self.quote_requests.append(request)
        if self.error is not None:
            raise self.error
        return self.quote_responder(request)

    async def get_status(
        self,
        tx_hash: str,
        bridge: str | None = None,
        from_chain: int | None = None,
        to_chain: int | None = None,
    ) -> TransferStatus:
        self.status_calls.append(tx_hash)
        # Last status repeats once the script is exhausted
        if len(self.statuses) > 1:
            return self.statuses.pop(0)
        return self.statuses[0]


DONE = StepExecutionStatus.DONE
PENDING = StepExecutionStatus.PENDING
ACTION_REQUIRED = StepExecutionStatus.ACTION_REQUIRED
NOT_STARTED = StepExecutionStatus.NOT_STARTED


class FakeExecutionEngine:
    """ExecutionEngine replaying a scripted sequence of step-status updates.

    Usage:
        engine = FakeExecutionEngine(
            updates=[[ACTION_REQUIRED, NOT_STARTED], [DONE, PENDING], [DONE, DONE]],
            result=ExecutionResult(to_amount="99700000", tx_hash="0xabc"),
        )
    """

    def __init__(
        self,
        updates: Sequence[Sequence[StepExecutionStatus]] = (),
        result: ExecutionResult | None = None,
        error: Exception | None = None,
        bridged_amount: int | None = None,
        call_data: str | None = None,
    ) -> None:
        self.updates = [list(u) for u in updates]
        self.result = result or ExecutionResult(to_amount=None, tx_hash="0x" + "ab" * 32)
        self.error = error
        self.bridged_amount = bridged_amount
        self.call_data = call_data
        self.executed: list[Quote] = []
        self.patched_call_data: str | None = None

    async def execute(
        self,
        quote: Quote,
        on_update: ProgressCallback,
        amount_patcher: AmountPatcher | None = None,
    ) -> ExecutionResult:
        self.executed.append(quote)
        for statuses in self.updates:
            on_update(statuses)
        if self.error is not None:
            raise self.error
        if amount_patcher is not None and self.call_data is not None:
            self.patched_call_data = amount_patcher(self.call_data, self.bridged_amount)
        return self.result
