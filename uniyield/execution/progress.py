"""Deposit progress: engine step statuses collapsed onto fixed UI stages.

The execution engine reports a status per underlying step, and its step
granularity does not match the UI stages. Collapsing rule:

- the number of steps reported DONE is the number of leading stages marked
  complete
- if any step is in progress or awaiting the user, the stage right after the
  completed ones is marked loading
- when every step is DONE, every stage is complete
- stages never move backwards within an attempt; an out-of-order or stale
  report cannot un-complete a stage
"""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

import structlog

from uniyield.constants import DEPOSIT_STAGES
from uniyield.models.status import StepExecutionStatus
from uniyield.registry import explorer_tx_link

logger = structlog.get_logger()


class StageStatus(str, Enum):
    """Display status of one progress stage."""

    PENDING = "pending"
    LOADING = "loading"
    COMPLETE = "complete"


@dataclass(frozen=True)
class TransactionStage:
    """One named progress stage."""

    id: str
    label: str
    status: StageStatus


@dataclass(frozen=True)
class DepositOutcome:
    """Final result of a successful deposit attempt.

    Attributes:
        amount_received: Destination amount delivered (base units)
        shares_received: Vault shares expected for that amount (base units)
        tx_hash: Final transaction hash on the destination chain
        chain_id: Chain the final transaction landed on
    """

    amount_received: str | None
    shares_received: str | None
    tx_hash: str | None
    chain_id: int

    @property
    def tx_link(self) -> str | None:
        if self.tx_hash is None:
            return None
        return explorer_tx_link(self.chain_id, self.tx_hash)


def collapse_progress(
    step_statuses: Sequence[StepExecutionStatus],
    stage_count: int,
) -> list[StageStatus]:
    """Map one status report onto `stage_count` stages (no history)."""
    if stage_count <= 0:
        raise ValueError(f"stage_count must be positive, got {stage_count}")

    if step_statuses and all(s == StepExecutionStatus.DONE for s in step_statuses):
        return [StageStatus.COMPLETE] * stage_count

    done = min(sum(1 for s in step_statuses if s == StepExecutionStatus.DONE), stage_count)
    stages = [StageStatus.COMPLETE] * done + [StageStatus.PENDING] * (stage_count - done)
    if done < stage_count and any(s.is_active for s in step_statuses):
        stages[done] = StageStatus.LOADING
    return stages


class ProgressTracker:
    """Progress state of one deposit attempt.

    Created fresh per attempt. `close()` models the progress modal closing:
    later reports are ignored, but the underlying execution keeps running.
    """

    def __init__(self, stages: Sequence[tuple[str, str]] = DEPOSIT_STAGES) -> None:
        if not stages:
            raise ValueError("At least one progress stage is required")
        self._stage_defs = tuple(stages)
        self._completed = 0
        self._loading = False
        self.is_open = True
        self.is_complete = False
        self.outcome: DepositOutcome | None = None

    @property
    def stage_count(self) -> int:
        return len(self._stage_defs)

    @property
    def stages(self) -> list[TransactionStage]:
        """Current stage list, complete stages always first."""
        result = []
        for i, (stage_id, label) in enumerate(self._stage_defs):
            if i < self._completed:
                status = StageStatus.COMPLETE
            elif i == self._completed and self._loading:
                status = StageStatus.LOADING
            else:
                status = StageStatus.PENDING
            result.append(TransactionStage(id=stage_id, label=label, status=status))
        return result

    @property
    def statuses(self) -> list[StageStatus]:
        return [stage.status for stage in self.stages]

    def start(self) -> None:
        """Mark the first stage loading (waiting for the wallet)."""
        if self.is_open and self._completed == 0:
            self._loading = True

    def update(self, step_statuses: Sequence[StepExecutionStatus]) -> list[TransactionStage]:
        """Apply an engine status report and return the resulting stages."""
        if not self.is_open:
            logger.debug("progress_update_ignored", reason="closed")
            return self.stages
        if self.is_complete:
            return self.stages

        collapsed = collapse_progress(step_statuses, self.stage_count)
        done = collapsed.count(StageStatus.COMPLETE)
        loading = StageStatus.LOADING in collapsed

        if done > self._completed:
            self._completed = done
            self._loading = loading
        elif done == self._completed:
            self._loading = self._loading or loading
        else:
            logger.debug(
                "progress_update_stale",
                reported_done=done,
                completed=self._completed,
            )
        return self.stages

    def finish(self, outcome: DepositOutcome) -> None:
        """Force every stage complete and record the outcome."""
        self._completed = self.stage_count
        self._loading = False
        self.is_complete = True
        self.outcome = outcome

    def close(self) -> None:
        """Stop reflecting updates. Does not cancel the running execution."""
        self.is_open = False
