"""Tests for the ledger API endpoints."""

import pytest
from decimal import Decimal
from uuid import uuid4

from fastapi.testclient import TestClient

from app.main import app

client = TestClient(app)

API = "/api/v1"


def line(account, debit="0", credit="0", currency="JOD"):
    return {
        "account_id": str(account.id),
        "debit_amount": debit,
        "credit_amount": credit,
        "currency": currency,
    }


def sale_payload(chart, amount="100", **overrides):
    payload = {
        "date": "2026-01-15",
        "description": "Cash sale",
        "reference": "INV-1",
        "lines": [line(chart["cash"], debit=amount), line(chart["sales"], credit=amount)],
    }
    payload.update(overrides)
    return payload


class TestJournalEndpoints:

    def test_create_entry(self, chart, read_balances):
        response = client.post(f"{API}/journal", json=sale_payload(chart), headers={"X-User": "alice"})

        assert response.status_code == 201
        body = response.json()
        assert body["entry_number"] == 1
        assert body["status"] == "POSTED"
        assert body["created_by"] == "alice"
        assert body["total_debits_jod"] == "100.00"
        assert body["total_credits_jod"] == "100.00"
        assert [l["line_number"] for l in body["lines"]] == [1, 2]
        assert body["lines"][0]["account"]["code"] == "1101"
        assert Decimal(body["lines"][0]["exchange_rate"]) == Decimal("0.71")

        assert read_balances(chart)["cash"] == Decimal("100.00")

    def test_default_actor(self, chart):
        response = client.post(f"{API}/journal", json=sale_payload(chart))
        assert response.json()["created_by"] == "admin"

    def test_create_uses_current_exchange_rate(self, chart):
        client.put(f"{API}/exchange-rate", json={"rate": "0.70"})

        payload = sale_payload(
            chart,
            lines=[
                line(chart["wallet"], debit="10", currency="USDT"),
                line(chart["usdt_sales"], credit="10", currency="USDT"),
            ],
        )
        body = client.post(f"{API}/journal", json=payload).json()

        assert body["total_debits_usdt"] == "10.00"
        assert [l["converted_amount_jod"] for l in body["lines"]] == ["7.00", "7.00"]

    def test_imbalanced_entry(self, chart):
        payload = sale_payload(chart, lines=[line(chart["cash"], debit="100"), line(chart["sales"], credit="90")])

        response = client.post(f"{API}/journal", json=payload)

        assert response.status_code == 400
        body = response.json()
        assert body["kind"] == "ImbalancedEntry"
        assert "JOD" in body["detail"]

    def test_invalid_line(self, chart):
        payload = sale_payload(chart, lines=[line(chart["cash"], debit="10", credit="10")])

        response = client.post(f"{API}/journal", json=payload)

        assert response.status_code == 400
        assert response.json()["kind"] == "InvalidLineInput"

    def test_oversized_amounts_are_rejected(self, chart, read_balances):
        payload = sale_payload(chart, lines=[line(chart["cash"], debit="1e27"), line(chart["sales"], credit="1e27")])

        response = client.post(f"{API}/journal", json=payload)

        assert response.status_code == 400
        body = response.json()
        assert body["kind"] == "InvalidLineInput"
        assert body["detail"].startswith("Line 1")
        assert read_balances(chart)["cash"] == Decimal("0.00")

    def test_oversized_opening_balance_is_rejected(self, chart):
        response = client.post(
            f"{API}/accounts",
            json={"name": "Vault", "account_type": "ASSET", "parent_id": str(chart["current_assets"].id), "opening_balance": "1e27"},
        )

        assert response.status_code == 400
        assert response.json()["kind"] == "ConstraintViolation"

    def test_unknown_account(self, chart):
        payload = sale_payload(
            chart,
            lines=[
                line(chart["cash"], debit="10"),
                {"account_id": str(uuid4()), "credit_amount": "10", "currency": "JOD"},
            ],
        )

        response = client.post(f"{API}/journal", json=payload)

        assert response.status_code == 404
        assert response.json()["kind"] == "AccountNotFound"

    def test_posting_to_parent(self, chart):
        payload = sale_payload(chart, lines=[line(chart["assets"], debit="10"), line(chart["sales"], credit="10")])

        response = client.post(f"{API}/journal", json=payload)

        assert response.status_code == 400
        assert response.json()["kind"] == "ConstraintViolation"

    def test_get_entry_with_transactions(self, chart):
        created = client.post(f"{API}/journal", json=sale_payload(chart)).json()

        response = client.get(f"{API}/journal/{created['id']}")

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == created["id"]
        assert len(body["transactions"]) == 2
        assert body["transactions"][0]["balance_before"] == "0.00"
        assert body["transactions"][0]["balance_after"] == "100.00"

    def test_get_unknown_entry(self):
        response = client.get(f"{API}/journal/{uuid4()}")
        assert response.status_code == 404
        assert response.json()["kind"] == "JournalEntryNotFound"

    def test_edit_entry(self, chart, read_balances):
        created = client.post(f"{API}/journal", json=sale_payload(chart)).json()

        response = client.put(f"{API}/journal/{created['id']}", json=sale_payload(chart, amount="60"))

        assert response.status_code == 200
        body = response.json()
        assert body["entry_number"] == created["entry_number"]
        assert body["total_debits_jod"] == "60.00"
        assert read_balances(chart)["cash"] == Decimal("60.00")

    def test_void_entry(self, chart, read_balances):
        created = client.post(f"{API}/journal", json=sale_payload(chart)).json()

        response = client.delete(f"{API}/journal/{created['id']}")

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert read_balances(chart)["cash"] == Decimal("0.00")

        detail = client.get(f"{API}/journal/{created['id']}").json()
        assert detail["status"] == "VOIDED"
        assert detail["voided_at"] is not None
        assert detail["transactions"] == []

    def test_void_twice(self, chart):
        created = client.post(f"{API}/journal", json=sale_payload(chart)).json()
        client.delete(f"{API}/journal/{created['id']}")

        response = client.delete(f"{API}/journal/{created['id']}")

        assert response.status_code == 400
        assert response.json()["kind"] == "AlreadyVoided"

    def test_edit_voided_entry(self, chart):
        created = client.post(f"{API}/journal", json=sale_payload(chart)).json()
        client.delete(f"{API}/journal/{created['id']}")

        response = client.put(f"{API}/journal/{created['id']}", json=sale_payload(chart))

        assert response.status_code == 400
        assert response.json()["kind"] == "ConstraintViolation"

    def test_list_entries(self, chart):
        for day in ("2026-01-10", "2026-02-10", "2026-03-10"):
            client.post(f"{API}/journal", json=sale_payload(chart, date=day))

        response = client.get(f"{API}/journal", params={"limit": 2})

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 3
        assert body["total_pages"] == 2
        assert [e["date"] for e in body["entries"]] == ["2026-03-10", "2026-02-10"]

        filtered = client.get(
            f"{API}/journal",
            params={"date_from": "2026-02-01", "account_id": str(chart["cash"].id), "status": "POSTED"},
        ).json()
        assert filtered["total"] == 2


class TestAccountEndpoints:

    def test_create_account(self, chart):
        response = client.post(
            f"{API}/accounts",
            json={
                "name": "Petty Cash",
                "account_type": "ASSET",
                "parent_id": str(chart["current_assets"].id),
                "opening_balance": "25",
            },
            headers={"X-User": "bob"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["code"] == "1103"
        assert body["normal_balance"] == "DEBIT"
        assert body["current_balance"] == "25.00"
        assert body["created_by"] == "bob"

    def test_create_under_leaf(self, chart):
        response = client.post(
            f"{API}/accounts",
            json={"name": "Nested", "account_type": "ASSET", "parent_id": str(chart["cash"].id)},
        )
        assert response.status_code == 400
        assert response.json()["kind"] == "ConstraintViolation"

    def test_list_by_type(self, chart):
        response = client.get(f"{API}/accounts", params={"type": "LIABILITY"})

        assert response.status_code == 200
        assert [a["code"] for a in response.json()] == ["2000", "2001"]

    def test_tree(self, chart):
        response = client.get(f"{API}/accounts/tree", params={"search": "cash"})

        assert response.status_code == 200
        roots = response.json()
        assert [node["account"]["code"] for node in roots] == ["1000"]
        assert roots[0]["is_expanded"] is True
        current_assets = roots[0]["children"][0]
        assert current_assets["level"] == 1
        assert [node["account"]["code"] for node in current_assets["children"]] == ["1101"]

    def test_get_account(self, chart):
        response = client.get(f"{API}/accounts/{chart['revenue'].id}")

        assert response.status_code == 200
        assert [child["code"] for child in response.json()["children"]] == ["4001", "4002"]

    def test_update_opening_balance_after_posting(self, chart):
        client.post(f"{API}/journal", json=sale_payload(chart))

        response = client.put(f"{API}/accounts/{chart['cash'].id}", json={"opening_balance": "5"})

        assert response.status_code == 400
        assert response.json()["kind"] == "ConstraintViolation"

    def test_rename(self, chart):
        response = client.put(f"{API}/accounts/{chart['cash'].id}", json={"name": "Cash on hand"})
        assert response.status_code == 200
        assert response.json()["name"] == "Cash on hand"

    def test_delete(self, chart):
        response = client.delete(f"{API}/accounts/{chart['bank'].id}")
        assert response.status_code == 200
        assert response.json() == {"success": True}

        assert client.get(f"{API}/accounts/{chart['bank'].id}").status_code == 404

    def test_delete_with_children(self, chart):
        response = client.delete(f"{API}/accounts/{chart['assets'].id}")
        assert response.status_code == 400


class TestExchangeRateEndpoints:

    def test_default_rate(self):
        response = client.get(f"{API}/exchange-rate")

        assert response.status_code == 200
        body = response.json()
        assert Decimal(body["rate"]) == Decimal("0.71")
        assert body["updated_by"] == "system"

    def test_set_rate(self):
        response = client.put(f"{API}/exchange-rate", json={"rate": "0.709"}, headers={"X-User": "carol"})

        assert response.status_code == 200
        assert response.json()["updated_by"] == "carol"
        assert Decimal(client.get(f"{API}/exchange-rate").json()["rate"]) == Decimal("0.709")

    @pytest.mark.parametrize("rate", ["0", "-1"])
    def test_rejects_non_positive_rate(self, rate):
        response = client.put(f"{API}/exchange-rate", json={"rate": rate})

        assert response.status_code == 400
        assert response.json()["kind"] == "InvalidExchangeRate"


class TestHealth:

    def test_health(self):
        response = client.get(f"{API}/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "database": "healthy"}

    def test_liveness(self):
        assert client.get(f"{API}/health/live").json() == {"status": "alive"}
