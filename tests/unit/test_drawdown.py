"""Unit tests for DrawdownTracker."""

import random

from stock_portfolios.services import DrawdownTracker

from tests.conftest import assert_close


class TestDrawdownTracker:
    """Peak and max drawdown bookkeeping."""

    def test_empty_tracker(self):
        tracker = DrawdownTracker()

        assert tracker.peak == 0
        assert tracker.max_drawdown == 0

    def test_rising_curve_has_no_drawdown(self):
        tracker = DrawdownTracker()
        for equity in [100, 110, 120, 130]:
            tracker.update(equity)

        assert tracker.max_drawdown == 0
        assert tracker.peak == 130

    def test_deepest_drop_is_kept(self):
        """
        GIVEN a curve 100 -> 80 -> 120 -> 90
        WHEN folded
        THEN max drawdown is -25% (120 -> 90), not the later recovery
        """
        tracker = DrawdownTracker()
        for equity in [100, 80, 120, 90, 119]:
            tracker.update(equity)

        assert_close(tracker.max_drawdown, -25.0)

    def test_zero_peak_is_ignored(self):
        tracker = DrawdownTracker()

        assert tracker.update(0) == 0.0
        assert tracker.max_drawdown == 0

    def test_drawdown_monotonicity(self):
        """
        GIVEN a random equity curve
        WHEN each point is folded
        THEN max drawdown is <= 0 and never moves on a new peak
        """
        rng = random.Random(3)
        tracker = DrawdownTracker()
        for _ in range(500):
            before = tracker.max_drawdown
            equity = rng.uniform(0, 1000)
            new_peak = equity > tracker.peak
            tracker.update(equity)
            assert tracker.max_drawdown <= 0
            assert tracker.max_drawdown <= before
            if new_peak:
                assert tracker.max_drawdown == before
