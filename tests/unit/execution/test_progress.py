"""Unit tests for deposit progress tracking."""

import pytest

from uniyield.execution.progress import (
    DepositOutcome,
    ProgressTracker,
    StageStatus,
    collapse_progress,
)
from tests.conftest import ACTION_REQUIRED, DONE, NOT_STARTED, PENDING

C = StageStatus.COMPLETE
L = StageStatus.LOADING
P = StageStatus.PENDING


class TestCollapseProgress:
    """Tests for the stateless collapsing rule."""

    def test_done_then_in_progress(self):
        """Step 0 done, step 1 in progress: complete, loading, pending..."""
        assert collapse_progress([DONE, PENDING], 5) == [C, L, P, P, P]

    def test_all_done_completes_every_stage(self):
        """Two engine steps done complete all five stages."""
        assert collapse_progress([DONE, DONE], 5) == [C] * 5

    def test_awaiting_user_is_loading(self):
        assert collapse_progress([ACTION_REQUIRED, NOT_STARTED], 5) == [L, P, P, P, P]

    def test_nothing_started(self):
        assert collapse_progress([NOT_STARTED, NOT_STARTED], 5) == [P] * 5

    def test_empty_report(self):
        assert collapse_progress([], 3) == [P] * 3

    def test_out_of_order_done_counts(self):
        """Done steps complete leading stages regardless of their position."""
        assert collapse_progress([PENDING, DONE], 5) == [C, L, P, P, P]

    def test_more_steps_than_stages(self):
        assert collapse_progress([DONE, DONE, DONE, PENDING], 2) == [C, C]

    def test_invalid_stage_count(self):
        with pytest.raises(ValueError):
            collapse_progress([DONE], 0)


class TestProgressTracker:
    """Tests for the per-attempt tracker."""

    def test_initial_state(self):
        tracker = ProgressTracker()

        assert tracker.stage_count == 5
        assert tracker.statuses == [P] * 5
        assert [s.id for s in tracker.stages] == [
            "wallet",
            "routing",
            "settlement",
            "deposit",
            "mint",
        ]

    def test_start_marks_wallet_loading(self):
        tracker = ProgressTracker()
        tracker.start()

        assert tracker.statuses == [L, P, P, P, P]

    def test_forward_progress(self):
        tracker = ProgressTracker()
        tracker.start()

        tracker.update([ACTION_REQUIRED, NOT_STARTED])
        assert tracker.statuses == [L, P, P, P, P]

        tracker.update([DONE, PENDING])
        assert tracker.statuses == [C, L, P, P, P]

        tracker.update([DONE, DONE])
        assert tracker.statuses == [C] * 5

    def test_stale_report_never_regresses(self):
        """A late report with fewer done steps leaves completed stages alone."""
        tracker = ProgressTracker()
        tracker.update([DONE, PENDING])

        stages = tracker.update([PENDING, NOT_STARTED])

        assert [s.status for s in stages] == [C, L, P, P, P]

    def test_completion_never_left_behind_loading(self):
        """Earlier stages are complete whenever a later one is."""
        tracker = ProgressTracker()
        for report in ([DONE, PENDING], [PENDING, DONE], [DONE, DONE, PENDING]):
            statuses = tracker.update(report)
            seen_incomplete = False
            for stage in statuses:
                if stage.status != C:
                    seen_incomplete = True
                else:
                    assert not seen_incomplete

    def test_all_done_regardless_of_prior_order(self):
        tracker = ProgressTracker()
        tracker.update([PENDING, DONE])
        tracker.update([NOT_STARTED, NOT_STARTED])

        tracker.update([DONE, DONE])

        assert tracker.statuses == [C] * 5

    def test_finish_records_outcome(self):
        tracker = ProgressTracker()
        outcome = DepositOutcome(
            amount_received="99700000",
            shares_received="99700000",
            tx_hash="0xabc",
            chain_id=1,
        )

        tracker.finish(outcome)

        assert tracker.is_complete
        assert tracker.statuses == [C] * 5
        assert tracker.outcome.tx_link == "https://etherscan.io/tx/0xabc"

    def test_updates_after_finish_ignored(self):
        tracker = ProgressTracker()
        tracker.finish(DepositOutcome(None, None, None, 1))

        tracker.update([PENDING])

        assert tracker.statuses == [C] * 5

    def test_closed_tracker_ignores_updates(self):
        """After close, callbacks no longer move the stages."""
        tracker = ProgressTracker()
        tracker.update([DONE, PENDING])
        tracker.close()

        tracker.update([DONE, DONE])

        assert not tracker.is_open
        assert tracker.statuses == [C, L, P, P, P]

    def test_custom_stages(self):
        tracker = ProgressTracker([("sign", "Sign"), ("done", "Done")])
        tracker.update([DONE, PENDING])

        assert tracker.statuses == [C, L]

    def test_requires_stages(self):
        with pytest.raises(ValueError):
            ProgressTracker([])


class TestDepositOutcome:
    def test_tx_link_uses_chain_explorer(self):
        outcome = DepositOutcome("1", None, "0xdef", 8453)
        assert outcome.tx_link == "https://basescan.org/tx/0xdef"

    def test_no_hash_no_link(self):
        assert DepositOutcome("1", None, None, 1).tx_link is None
