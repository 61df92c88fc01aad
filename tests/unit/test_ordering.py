"""
Unit tests for chronological ordering.

Tests cover:
- Date ascending order
- Same-day inflow-before-outflow tie-break
- Identifier tie-break
"""

from stock_portfolios.domain.models import TradeType
from stock_portfolios.services import cash_rank, order_transactions

from tests.conftest import d, buy, sell, dividend, deposit, withdrawal, make_txn


class TestOrdering:
    """Tests for order_transactions."""

    def test_orders_by_date(self):
        later = deposit(d(2024, 3, 2), 100, txn_id="a")
        earlier = deposit(d(2024, 3, 1), 100, txn_id="b")

        assert order_transactions([later, earlier]) == [earlier, later]

    def test_inflows_before_outflows_on_same_day(self):
        """
        GIVEN a buy, withdrawal, sell, dividend and deposit on one day
        WHEN ordered
        THEN the three inflows precede the two outflows
        """
        day = d(2024, 3, 1)
        txns = [
            buy(day, "AAPL", 1, 100, txn_id="a1"),
            withdrawal(day, 50, txn_id="a2"),
            sell(day, "MSFT", 1, 100, txn_id="z1"),
            dividend(day, "MSFT", 5, txn_id="z2"),
            deposit(day, 500, txn_id="z3"),
        ]

        ordered = order_transactions(txns)

        assert [t.txn_id for t in ordered] == ["z1", "z2", "z3", "a1", "a2"]

    def test_buy_sign_comes_from_kind_not_total(self):
        """
        GIVEN a buy stored with a positive total
        WHEN ranked
        THEN it is still an outflow
        """
        txn = make_txn(TradeType.BUY, d(2024, 1, 1), 500.0, symbol="AAPL", shares=1)

        assert cash_rank(txn) == 2

    def test_zero_delta_sits_between_inflows_and_outflows(self):
        day = d(2024, 3, 1)
        zero = deposit(day, 0, txn_id="m")
        inflow = deposit(day, 10, txn_id="z")
        outflow = withdrawal(day, 10, txn_id="a")

        assert order_transactions([outflow, zero, inflow]) == [inflow, zero, outflow]

    def test_identifier_breaks_remaining_ties(self):
        day = d(2024, 3, 1)
        b = buy(day, "AAPL", 1, 100, txn_id="b")
        a = buy(day, "MSFT", 1, 100, txn_id="a")

        assert order_transactions([b, a]) == [a, b]

    def test_order_is_stable_under_permutation(self):
        day = d(2024, 3, 1)
        txns = [
            deposit(day, 100, txn_id="x"),
            buy(day, "AAPL", 1, 50, txn_id="y"),
            buy(d(2024, 2, 1), "AAPL", 1, 50, txn_id="z"),
        ]

        assert order_transactions(txns) == order_transactions(list(reversed(txns)))
