"""Peak and maximum drawdown bookkeeping for an equity curve."""


class DrawdownTracker:
    """
    Tracks the running peak of an equity curve and the deepest drop below it.

    Drawdowns are percentages <= 0; max_drawdown keeps the most negative one.
    """

    def __init__(self):
        self.peak = 0.0
        self.max_drawdown = 0.0

    def update(self, equity: float) -> float:
        """Fold one equity point; returns the drawdown at that point."""
        if equity > self.peak:
            self.peak = equity
            return 0.0
        if self.peak <= 0:
            return 0.0
        drawdown = (equity / self.peak - 1.0) * 100.0
        if drawdown < self.max_drawdown:
            self.max_drawdown = drawdown
        return drawdown
