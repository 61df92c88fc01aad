"""
API tests for transaction endpoints.

Tests cover:
- Create from an object body or an array body
- Batch atomicity
- List with default paging, symbol filter and sort
- Get, replace and delete
- Validation errors (400) and unknown ids (404)
"""

import pytest
from fastapi.testclient import TestClient


# =============================================================================
# HELPER FIXTURES
# =============================================================================


@pytest.fixture
def portfolio(client: TestClient) -> dict:
    """Create a portfolio and return its data."""
    return client.post("/portfolios", json={"name": "Test Portfolio"}).json()


def _buy(**overrides) -> dict:
    body = {
        "trade_type": "buy",
        "date": "2024/03/01",
        "symbol": "aapl",
        "currency": "usd",
        "shares": 10,
        "price": 100,
        "fee": 1,
        "total": -1001,
    }
    body.update(overrides)
    return body


# =============================================================================
# CREATE TESTS
# =============================================================================


class TestCreateTransactionAPI:
    """Tests for POST /portfolios/{id}/transactions."""

    def test_create_single(self, client: TestClient, portfolio: dict):
        """
        GIVEN a portfolio exists
        WHEN I POST one transaction object
        THEN response is 201 with a single transaction object
        """
        response = client.post(f"/portfolios/{portfolio['id']}/transactions", json=_buy())

        assert response.status_code == 201
        data = response.json()
        assert data["id"]
        assert data["portfolio_id"] == portfolio["id"]
        assert data["trade_type"] == "buy"
        assert data["symbol"] == "AAPL"
        assert data["currency"] == "USD"
        assert data["date"] == "2024-03-01"
        assert data["total"] == -1001

    def test_create_batch(self, client: TestClient, portfolio: dict):
        """
        GIVEN a portfolio exists
        WHEN I POST an array of transactions
        THEN response is 201 with an array in the same order
        """
        response = client.post(
            f"/portfolios/{portfolio['id']}/transactions",
            json=[
                {"trade_type": "cash", "date": "2024/02/01", "currency": "USD", "total": 5000},
                _buy(trade_type="purchase"),
            ],
        )

        assert response.status_code == 201
        data = response.json()
        assert isinstance(data, list)
        assert [t["trade_type"] for t in data] == ["cash", "buy"]

    def test_batch_with_invalid_item_stores_nothing(self, client: TestClient, portfolio: dict):
        response = client.post(
            f"/portfolios/{portfolio['id']}/transactions",
            json=[_buy(), _buy(date="yesterday")],
        )

        assert response.status_code == 400
        assert response.json()["message"].startswith("item 1:")
        assert client.get(f"/portfolios/{portfolio['id']}/transactions").json() == []

    @pytest.mark.parametrize(
        "overrides",
        [
            {"trade_type": "gift"},
            {"trade_type": ""},
            {"symbol": ""},
            {"currency": ""},
            {"shares": -1},
            {"date": "2024-13-45"},
        ],
    )
    def test_invalid_transaction(self, client: TestClient, portfolio: dict, overrides: dict):
        response = client.post(f"/portfolios/{portfolio['id']}/transactions", json=_buy(**overrides))

        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"

    def test_unknown_portfolio(self, client: TestClient):
        response = client.post("/portfolios/missing/transactions", json=_buy())

        assert response.status_code == 404


# =============================================================================
# QUERY TESTS
# =============================================================================


class TestListTransactionsAPI:
    """Tests for GET /portfolios/{id}/transactions."""

    def test_default_limit_is_50(self, client: TestClient, portfolio: dict):
        client.post(
            f"/portfolios/{portfolio['id']}/transactions",
            json=[_buy(date=f"2024/01/{(i % 28) + 1:02d}") for i in range(60)],
        )

        response = client.get(f"/portfolios/{portfolio['id']}/transactions")

        assert response.status_code == 200
        assert len(response.json()) == 50

    def test_filter_sort_and_page(self, client: TestClient, portfolio: dict):
        client.post(
            f"/portfolios/{portfolio['id']}/transactions",
            json=[
                _buy(date="2024/03/02"),
                _buy(date="2024/03/01", symbol="msft"),
                _buy(date="2024/03/03"),
                _buy(date="2024/03/04"),
            ],
        )

        response = client.get(
            f"/portfolios/{portfolio['id']}/transactions",
            params={"symbol": "AAPL", "sort": "date_desc", "limit": 2, "offset": 1},
        )

        assert [t["date"] for t in response.json()] == ["2024-03-03", "2024-03-02"]

    def test_bad_sort(self, client: TestClient, portfolio: dict):
        response = client.get(f"/portfolios/{portfolio['id']}/transactions", params={"sort": "price"})

        assert response.status_code == 400

    def test_unknown_portfolio(self, client: TestClient):
        assert client.get("/portfolios/missing/transactions").status_code == 404


# =============================================================================
# GET / REPLACE / DELETE TESTS
# =============================================================================


class TestSingleTransactionAPI:
    """Tests for /portfolios/{id}/transactions/{txn_id}."""

    def test_get(self, client: TestClient, portfolio: dict):
        created = client.post(f"/portfolios/{portfolio['id']}/transactions", json=_buy()).json()

        response = client.get(f"/portfolios/{portfolio['id']}/transactions/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    def test_replace(self, client: TestClient, portfolio: dict):
        created = client.post(f"/portfolios/{portfolio['id']}/transactions", json=_buy()).json()

        response = client.put(
            f"/portfolios/{portfolio['id']}/transactions/{created['id']}",
            json=_buy(trade_type="sell", shares=5, total=600),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == created["id"]
        assert data["trade_type"] == "sell"
        assert data["shares"] == 5
        assert data["created_at"] == created["created_at"]

    def test_replace_unknown(self, client: TestClient, portfolio: dict):
        response = client.put(f"/portfolios/{portfolio['id']}/transactions/missing", json=_buy())

        assert response.status_code == 404

    def test_delete(self, client: TestClient, portfolio: dict):
        created = client.post(f"/portfolios/{portfolio['id']}/transactions", json=_buy()).json()

        response = client.delete(f"/portfolios/{portfolio['id']}/transactions/{created['id']}")

        assert response.status_code == 204
        assert client.get(f"/portfolios/{portfolio['id']}/transactions/{created['id']}").status_code == 404
