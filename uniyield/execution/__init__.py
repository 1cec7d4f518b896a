"""Deposit execution and progress tracking."""

from uniyield.execution.progress import (
    DepositOutcome,
    ProgressTracker,
    StageStatus,
    TransactionStage,
    collapse_progress,
)
from uniyield.execution.runner import (
    DepositSession,
    ExecutionEngine,
    ExecutionResult,
    poll_transfer_status,
    run_deposit,
)

__all__ = [
    "DepositOutcome",
    "DepositSession",
    "ExecutionEngine",
    "ExecutionResult",
    "ProgressTracker",
    "StageStatus",
    "TransactionStage",
    "collapse_progress",
    "poll_transfer_status",
    "run_deposit",
]
