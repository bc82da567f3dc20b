"""
API tests for backup export and staged import.

Tests cover:
- JSON and CSV export of the active account and of all accounts
- Upload, preview, confirm and cancel
- Error responses for unreadable files
"""

import json

from fastapi.testclient import TestClient


def add_buy(client: TestClient, ticker: str = "AAPL") -> dict:
    response = client.post("/transactions", json={
        "ticker": ticker,
        "type": "BUY",
        "shares": 10,
        "price": 150,
        "date": "2024-01-02",
    })
    assert response.status_code == 201
    return response.json()


def upload(client: TestClient, name: str, content: str, media_type: str = "application/json"):
    return client.post("/backup/import", files={"file": (name, content.encode("utf-8"), media_type)})


# =============================================================================
# EXPORT TESTS
# =============================================================================


class TestExportAPI:
    """Tests for GET /backup/export."""

    def test_account_json(self, client: TestClient):
        add_buy(client)

        response = client.get("/backup/export")

        assert response.status_code == 200
        assert 'filename="portfolio_backup.json"' in response.headers["content-disposition"]
        data = response.json()
        assert data["account"] == {"name": "Brokerage", "cash": 8500.0}
        assert data["transactions"][0]["companyName"] == "Apple Inc."

    def test_all_csv(self, client: TestClient):
        add_buy(client)

        response = client.get("/backup/export", params={"format": "csv", "scope": "all"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        lines = response.text.strip().splitlines()
        assert lines[0].startswith("accountId,accountName,accountCash,id,ticker")
        assert lines[1].startswith("acc-brokerage,Brokerage,8500,")

    def test_invalid_format_returns_422(self, client: TestClient):
        assert client.get("/backup/export", params={"format": "xml"}).status_code == 422


# =============================================================================
# IMPORT TESTS
# =============================================================================


class TestImportAPI:
    """Tests for the staged import flow."""

    def test_export_then_import_all_restores_state(self, client: TestClient):
        """
        GIVEN an exported full backup
        WHEN the portfolio is changed and the backup is imported and confirmed
        THEN the exported accounts and ledgers are back
        """
        add_buy(client)
        backup = client.get("/backup/export", params={"scope": "all"}).text
        client.post("/accounts", json={"name": "Scratch"})
        add_buy(client, "MSFT")

        preview = upload(client, "portfolio_backup_all.json", backup)
        assert preview.status_code == 200
        assert preview.json()["kind"] == "full"
        assert client.get("/accounts").json()["count"] == 2

        confirmed = client.post("/backup/import/confirm")

        assert confirmed.status_code == 200
        accounts = client.get("/accounts").json()
        assert accounts["count"] == 1
        assert accounts["accounts"][0]["cash"] == 8500.0
        assert [t["ticker"] for t in client.get("/transactions").json()["transactions"]] == ["AAPL"]

    def test_csv_replaces_ledger_keeps_cash(self, client: TestClient):
        add_buy(client)
        csv_text = (
            "id,ticker,companyName,type,shares,price,date,notes\n"
            "t-1,NVDA,NVIDIA Corporation,BUY,1,400,2024-03-01,\n"
        )

        preview = upload(client, "ledger.csv", csv_text, "text/csv")
        client.post("/backup/import/confirm")

        assert preview.json()["transaction_count"] == 1
        assert client.get("/accounts").json()["accounts"][0]["cash"] == 8500.0
        assert client.get("/transactions").json()["transactions"][0]["ticker"] == "NVDA"

    def test_cancel_discards_staged_import(self, client: TestClient):
        upload(client, "x.json", json.dumps([]))

        assert client.delete("/backup/import").json() == {"cancelled": True}
        assert client.delete("/backup/import").json() == {"cancelled": False}
        assert client.post("/backup/import/confirm").status_code == 400

    def test_confirm_without_upload_returns_400(self, client: TestClient):
        response = client.post("/backup/import/confirm")

        assert response.status_code == 400
        assert response.json()["error"] == "NO_PENDING_IMPORT"

    def test_malformed_json_returns_400(self, client: TestClient):
        response = upload(client, "broken.json", "{oops")

        assert response.status_code == 400
        assert response.json()["error"] == "IMPORT_FORMAT"

    def test_unsupported_extension_returns_400(self, client: TestClient):
        response = upload(client, "notes.txt", "hello", "text/plain")

        assert response.status_code == 400
        assert "Unsupported file type" in response.json()["message"]

    def test_format_override(self, client: TestClient):
        response = client.post(
            "/backup/import",
            params={"format": "json"},
            files={"file": ("backup.dat", b"[]", "application/octet-stream")},
        )

        assert response.status_code == 200
        assert response.json()["kind"] == "transactions"
