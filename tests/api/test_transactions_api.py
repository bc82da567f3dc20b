"""
API tests for transaction endpoints.

Tests cover:
- Recording BUY/SELL with cash adjustment and company name capture
- Ledger ordering
- Editing without cash adjustment
- Deleting with cash reversal
- Error responses (400, 404, 422)
"""

from fastapi.testclient import TestClient


def post_txn(client: TestClient, **overrides):
    payload = {
        "ticker": "aapl",
        "type": "BUY",
        "shares": 10,
        "price": 150,
        "date": "2024-01-02",
    }
    payload.update(overrides)
    return client.post("/transactions", json=payload)


def cash(client: TestClient) -> float:
    return client.get("/accounts").json()["accounts"][0]["cash"]


# =============================================================================
# CREATE TESTS
# =============================================================================


class TestCreateTransactionAPI:
    """Tests for POST /transactions."""

    def test_buy_debits_cash(self, client: TestClient):
        """
        GIVEN the active account has $10,000
        WHEN I buy 10 AAPL at $150
        THEN the transaction carries the looked-up company name
        AND cash drops by $1,500
        """
        response = post_txn(client, notes="  starter  ")

        assert response.status_code == 201
        data = response.json()
        assert data["ticker"] == "AAPL"
        assert data["company_name"] == "Apple Inc."
        assert data["notes"] == "starter"
        assert data["date"] == "2024-01-02"
        assert cash(client) == 8500.0

    def test_sell_credits_cash(self, client: TestClient):
        post_txn(client)
        response = post_txn(client, type="SELL", shares=4, price=200, date="2024-02-01")

        assert response.status_code == 201
        assert cash(client) == 9300.0

    def test_ledger_newest_first(self, client: TestClient):
        post_txn(client, date="2024-01-02")
        post_txn(client, ticker="MSFT", date="2024-03-01")
        post_txn(client, ticker="NVDA", date="2024-02-01")

        data = client.get("/transactions").json()

        assert data["count"] == 3
        assert [t["ticker"] for t in data["transactions"]] == ["MSFT", "NVDA", "AAPL"]

    def test_unknown_ticker_returns_400_and_records_nothing(self, client: TestClient):
        response = post_txn(client, ticker="ZZZZ")

        assert response.status_code == 400
        assert response.json()["error"] == "TICKER_NOT_FOUND"
        assert "ZZZZ" in response.json()["message"]
        assert client.get("/transactions").json()["count"] == 0
        assert cash(client) == 10000.0

    def test_zero_shares_returns_422(self, client: TestClient):
        assert post_txn(client, shares=0).status_code == 422

    def test_negative_price_returns_422(self, client: TestClient):
        assert post_txn(client, price=-1).status_code == 422

    def test_invalid_type_returns_422(self, client: TestClient):
        assert post_txn(client, type="HOLD").status_code == 422

    def test_oversell_allowed_by_default(self, client: TestClient):
        response = post_txn(client, type="SELL", shares=5)

        assert response.status_code == 201
        assert client.get("/portfolio/positions").json() == []


# =============================================================================
# UPDATE TESTS
# =============================================================================


class TestUpdateTransactionAPI:
    """Tests for PUT /transactions/{id}."""

    def test_edit_keeps_id_and_cash(self, client: TestClient):
        """
        GIVEN a recorded BUY
        WHEN I change its shares and price
        THEN the record is replaced under the same id and cash is unchanged
        """
        txn = post_txn(client).json()

        response = client.put(f"/transactions/{txn['id']}", json={"shares": 20, "price": 100})

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == txn["id"]
        assert data["shares"] == 20.0
        assert data["price"] == 100.0
        assert cash(client) == 8500.0

    def test_ticker_change_captures_new_name(self, client: TestClient):
        txn = post_txn(client).json()

        response = client.put(f"/transactions/{txn['id']}", json={"ticker": "msft"})

        assert response.json()["ticker"] == "MSFT"
        assert response.json()["company_name"] == "Microsoft Corporation"

    def test_unknown_transaction_returns_404(self, client: TestClient):
        response = client.put("/transactions/missing", json={"shares": 1})

        assert response.status_code == 404


# =============================================================================
# DELETE TESTS
# =============================================================================


class TestDeleteTransactionAPI:
    """Tests for DELETE /transactions/{id}."""

    def test_delete_reverses_cash(self, client: TestClient):
        txn = post_txn(client).json()
        client.put(f"/transactions/{txn['id']}", json={"price": 100})

        response = client.delete(f"/transactions/{txn['id']}")

        # 10 shares x $100 from the edited record
        assert response.status_code == 204
        assert cash(client) == 9500.0
        assert client.get("/transactions").json()["count"] == 0

    def test_unknown_transaction_returns_404(self, client: TestClient):
        assert client.delete("/transactions/missing").status_code == 404
