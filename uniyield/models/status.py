"""Execution and transfer status models.

`StepExecutionStatus` is what the execution engine reports per underlying
step; `TransferStatus` is the routing service's status-polling response.
"""

from enum import Enum

from pydantic import BaseModel, Field


class StepExecutionStatus(str, Enum):
    """Status of one underlying execution step, as reported by the engine."""

    NOT_STARTED = "NOT_STARTED"
    ACTION_REQUIRED = "ACTION_REQUIRED"
    PENDING = "PENDING"
    DONE = "DONE"
    FAILED = "FAILED"

    @property
    def is_active(self) -> bool:
        """True while the step is in progress or waiting on the user."""
        return self in (StepExecutionStatus.ACTION_REQUIRED, StepExecutionStatus.PENDING)


class TransferState(str, Enum):
    """Top-level state of a cross-chain transfer."""

    NOT_FOUND = "NOT_FOUND"
    INVALID = "INVALID"
    PENDING = "PENDING"
    DONE = "DONE"
    FAILED = "FAILED"


class TransactionInfo(BaseModel):
    """One side (sending or receiving) of a transfer."""

    tx_hash: str | None = Field(default=None, alias="txHash")
    tx_link: str | None = Field(default=None, alias="txLink")
    chain_id: int | None = Field(default=None, alias="chainId")
    amount: str | None = None

    model_config = {"populate_by_name": True}


class TransferStatus(BaseModel):
    """Response of the routing service's status endpoint."""

    status: TransferState
    substatus: str | None = None
    substatus_message: str | None = Field(default=None, alias="substatusMessage")
    tool: str | None = None
    sending: TransactionInfo | None = None
    receiving: TransactionInfo | None = None

    model_config = {"populate_by_name": True}

    @property
    def is_final(self) -> bool:
        return self.status in (TransferState.DONE, TransferState.FAILED, TransferState.INVALID)
