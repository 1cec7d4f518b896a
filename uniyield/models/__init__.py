"""Pydantic models for routing-service and execution data structures."""

from uniyield.models.route import (
    Action,
    CompositeStep,
    ContractCall,
    CrossStep,
    CustomStep,
    Estimate,
    FeeCost,
    GasCost,
    ProtocolStep,
    Quote,
    Route,
    Step,
    SwapStep,
    Token,
    iter_leaf_steps,
)
from uniyield.models.status import (
    StepExecutionStatus,
    TransactionInfo,
    TransferState,
    TransferStatus,
)
from uniyield.models.types import Address, Bytes, Bytes32, Uint256

__all__ = [
    # Types
    "Address",
    "Bytes",
    "Bytes32",
    "Uint256",
    # Route models
    "Action",
    "CompositeStep",
    "ContractCall",
    "CrossStep",
    "CustomStep",
    "Estimate",
    "FeeCost",
    "GasCost",
    "ProtocolStep",
    "Quote",
    "Route",
    "Step",
    "SwapStep",
    "Token",
    "iter_leaf_steps",
    # Status models
    "StepExecutionStatus",
    "TransactionInfo",
    "TransferState",
    "TransferStatus",
]
