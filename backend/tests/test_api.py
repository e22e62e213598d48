from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from finance_tracker.main import create_app

BASE = "/api/users/alice"


@pytest.fixture
def client(tmp_path):
    app = create_app(tmp_path)
    with TestClient(app) as client:
        yield client


PASSWORD = "s3cret"


def register_and_login(client, base=BASE, password=PASSWORD):
    assert client.post(f"{base}/register", json={"password": password}).status_code == 201
    return client.post(f"{base}/session", json={"password": password})


@pytest.fixture
def session_client(client):
    response = register_and_login(client)
    assert response.status_code == 200
    return client


def add_transaction(client, **fields):
    payload = {"timestamp": "2025-05-23", "description": "", "category": "Misc", "amount": "0"}
    payload.update(fields)
    return client.post(f"{BASE}/transactions", json=payload)


def test_health(client) -> None:
    assert client.get("/health").json() == {"status": "ok"}


def test_cross_origin_requests_get_no_cors_headers(client) -> None:
    response = client.get("/health", headers={"Origin": "http://localhost:5173"})
    assert "access-control-allow-origin" not in response.headers


def test_open_session_for_new_user(client) -> None:
    response = register_and_login(client)
    assert response.json() == {"username": "alice", "transaction_count": 0}


def test_invalid_username_is_rejected(client) -> None:
    assert client.post("/api/users/bad name/session", json={"password": "x"}).status_code == 400
    assert client.post("/api/users/bad name/register", json={"password": "x"}).status_code == 400
    assert client.get("/api/users/bad name/available").status_code == 400


def test_unknown_session_is_404(client) -> None:
    assert client.get("/api/users/bob/transactions").status_code == 404
    assert client.delete("/api/users/bob/session").status_code == 404


def test_create_and_list_transactions(session_client) -> None:
    response = add_transaction(session_client, description="Salary", category="Income", amount="1000")
    assert response.status_code == 201
    assert response.json()["index"] == 0
    assert Decimal(response.json()["amount"]) == Decimal("1000")

    add_transaction(session_client, description="Groceries", category="Food", amount=-100)
    add_transaction(session_client, description="Grocery run", category="Food", amount=-20)

    listed = session_client.get(f"{BASE}/transactions").json()
    assert [tx["description"] for tx in listed] == ["Salary", "Groceries", "Grocery run"]

    filtered = session_client.get(f"{BASE}/transactions", params={"search": "grocer", "category": "Food"}).json()
    assert [tx["index"] for tx in filtered] == [1, 2]

    assert session_client.get(f"{BASE}/transactions/categories").json() == ["Food", "Income"]


def test_invalid_transaction_is_422(session_client) -> None:
    response = add_transaction(session_client, timestamp="someday")
    assert response.status_code == 422

    response = add_transaction(session_client, category="")
    assert response.status_code == 422

    assert session_client.get(f"{BASE}/transactions").json() == []


def test_delete_transactions(session_client) -> None:
    for i in range(3):
        add_transaction(session_client, description=f"Item {i}", amount=-1)

    response = session_client.post(f"{BASE}/transactions/delete", json={"indices": [0, 2, 9]})
    assert response.json() == {"removed": True, "remaining_count": 1}

    response = session_client.post(f"{BASE}/transactions/delete", json={"indices": [5]})
    assert response.json() == {"removed": False, "remaining_count": 1}


def test_budgets(session_client) -> None:
    add_transaction(session_client, category="Food", amount="-45")

    response = session_client.put(f"{BASE}/budgets/categories/Food", json={"amount": "50"})
    assert response.status_code == 200
    body = response.json()
    assert Decimal(body["overall_percentage"]) == Decimal("90")
    assert body["categories"][0]["category"] == "Food"
    assert Decimal(body["categories"][0]["spent"]) == Decimal("45")
    assert [w["category"] for w in body["warnings"]] == [None, "Food"]

    response = session_client.put(f"{BASE}/budgets/monthly", json={"amount": "3000"})
    assert Decimal(response.json()["monthly_budget"]) == Decimal("3000")

    assert session_client.put(f"{BASE}/budgets/categories/Food", json={"amount": "-1"}).status_code == 422

    assert session_client.delete(f"{BASE}/budgets/categories/Food").status_code == 204
    assert session_client.delete(f"{BASE}/budgets/categories/Food").status_code == 404
    assert session_client.get(f"{BASE}/budgets").json()["categories"] == []


def test_settings_update_changes_warnings(session_client) -> None:
    add_transaction(session_client, category="Food", amount="-45")
    session_client.put(f"{BASE}/budgets/categories/Food", json={"amount": "100"})
    assert session_client.get(f"{BASE}/budgets").json()["warnings"] == []

    settings = session_client.get(f"{BASE}/settings").json()
    assert settings["currency_code"] == "USD"
    settings["budget_warning_threshold"] = "40"

    response = session_client.put(f"{BASE}/settings", json=settings)
    assert Decimal(response.json()["budget_warning_threshold"]) == Decimal("40")
    assert len(session_client.get(f"{BASE}/budgets").json()["warnings"]) == 2


CSV_CONTENT = (
    "Date,Description,Category,Amount\n"
    "2025-05-01,Salary,Income,3000.00\n"
    "oops,Broken,Food,-1\n"
    "2025-05-02,Groceries,Food,-82.40\n"
    "2025-06-02,Bakery,Food,-7.60\n"
)


def test_import_preview_and_commit(session_client) -> None:
    preview = session_client.post(f"{BASE}/import/csv/preview", json={"content": CSV_CONTENT}).json()
    assert preview["new_count"] == 3
    assert preview["error_count"] == 1
    assert preview["errors"][0]["line_number"] == 3
    assert preview["suggested_config"]["amount_column"] == 3
    assert session_client.get(f"{BASE}/transactions").json() == []

    result = session_client.post(f"{BASE}/import/csv", json={"content": CSV_CONTENT}).json()
    assert result["committed_count"] == 3
    assert result["skipped_count"] == 0
    assert result["error_rows"][0]["line_number"] == 3
    assert result["source_hash"] == preview["source_hash"]

    again = session_client.post(f"{BASE}/import/csv", json={"content": CSV_CONTENT}).json()
    assert again["committed_count"] == 0
    assert again["skipped_count"] == 3


def test_import_rejects_inconsistent_config(session_client) -> None:
    response = session_client.post(
        f"{BASE}/import/csv",
        json={"content": CSV_CONTENT, "config": {"all_amounts_positive": True}},
    )
    assert response.status_code == 422


def test_reports(session_client) -> None:
    session_client.post(f"{BASE}/import/csv", json={"content": CSV_CONTENT})
    session_client.put(f"{BASE}/budgets/categories/Food", json={"amount": "180"})

    categories = session_client.get(f"{BASE}/reports/categories").json()
    assert [c["category"] for c in categories] == ["Food", "Income"]
    assert Decimal(categories[0]["expense"]) == Decimal("90")
    assert Decimal(categories[0]["budget"]) == Decimal("180")

    daily = session_client.get(f"{BASE}/reports/daily").json()
    assert [d["date"] for d in daily["days"]] == ["2025-05-01", "2025-05-02", "2025-06-02"]
    assert Decimal(daily["days"][0]["income"]) == Decimal("3000")

    monthly = session_client.get(f"{BASE}/reports/monthly").json()
    assert [(m["year"], m["month"]) for m in monthly] == [(2025, 5), (2025, 6)]

    summary = session_client.get(f"{BASE}/reports/summary").json()
    assert summary["transaction_count"] == 3
    assert summary["start_date"] == "2025-05-01"
    assert Decimal(summary["total_savings"]) == Decimal("2910")
    assert Decimal(summary["overall_budget_percentage"]) == Decimal("50")


def test_export(session_client) -> None:
    add_transaction(session_client, description="Tea", category="Food", amount="-2")
    response = session_client.get(f"{BASE}/transactions/export")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert response.text.splitlines() == [
        "Date,Description,Category,Amount,Cleared",
        "2025-05-23,Tea,Food,-2.00,false",
    ]


def test_closing_a_session_saves_the_book(tmp_path) -> None:
    app = create_app(tmp_path)
    with TestClient(app) as client:
        register_and_login(client)
        add_transaction(client, description="Tea", category="Food", amount="-2")
        assert client.delete(f"{BASE}/session").status_code == 204
        assert client.get(f"{BASE}/transactions").status_code == 404

    with TestClient(create_app(tmp_path)) as client:
        response = client.post(f"{BASE}/session", json={"password": PASSWORD})
        assert response.json()["transaction_count"] == 1


def test_username_availability_and_register(client) -> None:
    assert client.get(f"{BASE}/available").json() == {"username": "alice", "available": True}

    response = client.post(f"{BASE}/register", json={"password": PASSWORD, "email": "alice@example.com"})
    assert response.status_code == 201
    assert response.json() == {"username": "alice"}

    assert client.get(f"{BASE}/available").json()["available"] is False
    assert client.post(f"{BASE}/register", json={"password": "other"}).status_code == 409
    assert client.post(f"{BASE}/register", json={"password": ""}).status_code == 422


def test_session_requires_the_password(client) -> None:
    assert client.post(f"{BASE}/session", json={"password": PASSWORD}).status_code == 403
    assert client.post(f"{BASE}/session").status_code == 422

    client.post(f"{BASE}/register", json={"password": PASSWORD, "email": "alice@example.com"})
    assert client.post(f"{BASE}/session", json={"password": "wrong"}).status_code == 403
    assert client.get(f"{BASE}/transactions").status_code == 404

    assert client.post(f"{BASE}/session", json={"password": PASSWORD}).status_code == 200
    assert client.get(f"{BASE}/settings").json()["email"] == "alice@example.com"


def test_out_of_range_amount_is_422(session_client) -> None:
    assert add_transaction(session_client, amount="1e30").status_code == 422
    assert add_transaction(session_client, amount="-1e12").status_code == 422
    assert session_client.get(f"{BASE}/transactions").json() == []
