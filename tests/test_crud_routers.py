from datetime import datetime, timedelta, timezone

import pytest


@pytest.fixture
def category(client, auth_headers):
    response = client.post(
        "/api/v1/categories/create-category",
        headers=auth_headers,
        json={"name": "Groceries", "type": "expense"},
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture
def account(client, auth_headers):
    response = client.post(
        "/api/v1/accounts/create-account",
        headers=auth_headers,
        json={"name": "Checking", "type": "bank", "balance": 1500.25},
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


# Accounts


def test_account_lifecycle(client, auth_headers, account):
    assert account["name"] == "Checking"
    assert account["balance"] == 1500.25

    listed = client.get("/api/v1/accounts/get-accounts", headers=auth_headers)
    assert [item["accountId"] for item in listed.json()["data"]] == [account["accountId"]]

    updated = client.put(
        f"/api/v1/accounts/update-account/{account['accountId']}",
        headers=auth_headers,
        json={"balance": 99.5},
    )
    assert updated.status_code == 200
    assert updated.json()["data"]["balance"] == 99.5
    assert updated.json()["data"]["name"] == "Checking"

    deleted = client.delete(
        f"/api/v1/accounts/delete-account/{account['accountId']}", headers=auth_headers
    )
    assert deleted.status_code == 200
    assert deleted.json()["data"]["accountId"] == account["accountId"]

    missing = client.get(
        f"/api/v1/accounts/get-account/{account['accountId']}", headers=auth_headers
    )
    assert missing.status_code == 404
    assert missing.json()["message"] == "Account not found"


def test_account_requires_all_fields(client, auth_headers):
    response = client.post(
        "/api/v1/accounts/create-account", headers=auth_headers, json={"name": "Savings"}
    )

    assert response.status_code == 400
    assert response.json()["message"] == "All fields are required"


def test_account_update_needs_at_least_one_field(client, auth_headers, account):
    response = client.put(
        f"/api/v1/accounts/update-account/{account['accountId']}",
        headers=auth_headers,
        json={},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "At least one field is required"


def test_accounts_are_scoped_to_their_owner(client, account, other_auth_headers):
    response = client.get(
        f"/api/v1/accounts/get-account/{account['accountId']}", headers=other_auth_headers
    )
    listed = client.get("/api/v1/accounts/get-accounts", headers=other_auth_headers)
    deleted = client.delete(
        f"/api/v1/accounts/delete-account/{account['accountId']}", headers=other_auth_headers
    )

    assert response.status_code == 404
    assert listed.json()["data"] == []
    assert deleted.status_code == 404


# Categories


def test_category_lifecycle(client, auth_headers, category):
    client.post(
        "/api/v1/categories/create-category",
        headers=auth_headers,
        json={"name": "Salary", "type": "income"},
    )

    expenses = client.get(
        "/api/v1/categories/get-categories", headers=auth_headers, params={"type": "expense"}
    )
    assert [item["name"] for item in expenses.json()["data"]] == ["Groceries"]

    renamed = client.put(
        f"/api/v1/categories/update-category/{category['categoryId']}",
        headers=auth_headers,
        json={"name": "Food"},
    )
    assert renamed.json()["data"]["name"] == "Food"
    assert renamed.json()["data"]["type"] == "expense"

    deleted = client.delete(
        f"/api/v1/categories/delete-category/{category['categoryId']}", headers=auth_headers
    )
    assert deleted.status_code == 200
    remaining = client.get("/api/v1/categories/get-categories", headers=auth_headers)
    assert [item["name"] for item in remaining.json()["data"]] == ["Salary"]


def test_category_rejects_unknown_type(client, auth_headers):
    response = client.post(
        "/api/v1/categories/create-category",
        headers=auth_headers,
        json={"name": "Gifts", "type": "transfer"},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid request data"


def test_category_names_are_unique_per_user(client, auth_headers, other_auth_headers, category):
    duplicate = client.post(
        "/api/v1/categories/create-category",
        headers=auth_headers,
        json={"name": "Groceries", "type": "expense"},
    )
    other_user = client.post(
        "/api/v1/categories/create-category",
        headers=other_auth_headers,
        json={"name": "Groceries", "type": "expense"},
    )

    assert duplicate.status_code == 409
    assert other_user.status_code == 201


def test_category_update_needs_a_field(client, auth_headers, category):
    response = client.put(
        f"/api/v1/categories/update-category/{category['categoryId']}",
        headers=auth_headers,
        json={},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Name or type is required"


# Transactions


def test_transaction_lifecycle(client, auth_headers, category, account):
    created = client.post(
        "/api/v1/transactions/create-transaction",
        headers=auth_headers,
        json={
            "name": "Weekly shop",
            "amount": 82.4,
            "type": "expense",
            "date": "2025-03-08T10:00:00",
            "categoryId": category["categoryId"],
            "accountId": account["accountId"],
        },
    )
    assert created.status_code == 201, created.text
    transaction = created.json()["data"]
    assert transaction["categoryName"] == "Groceries"

    fetched = client.get(
        f"/api/v1/transactions/get-transaction/{transaction['transactionId']}",
        headers=auth_headers,
    )
    assert fetched.json()["data"]["amount"] == 82.4

    updated = client.put(
        f"/api/v1/transactions/update-transaction/{transaction['transactionId']}",
        headers=auth_headers,
        json={"description": "Farmers market"},
    )
    assert updated.json()["data"]["description"] == "Farmers market"
    assert updated.json()["data"]["name"] == "Weekly shop"

    deleted = client.delete(
        f"/api/v1/transactions/delete-transaction/{transaction['transactionId']}",
        headers=auth_headers,
    )
    assert deleted.status_code == 200
    gone = client.get(
        f"/api/v1/transactions/get-transaction/{transaction['transactionId']}",
        headers=auth_headers,
    )
    assert gone.status_code == 404


def test_transaction_filters(client, auth_headers, category):
    for name, amount, kind, day, category_id in [
        ("Groceries", 40, "expense", "2025-03-02", category["categoryId"]),
        ("Paycheck", 2000, "income", "2025-03-15", None),
        ("Groceries", 55, "expense", "2025-04-02", category["categoryId"]),
    ]:
        response = client.post(
            "/api/v1/transactions/create-transaction",
            headers=auth_headers,
            json={
                "name": name,
                "amount": amount,
                "type": kind,
                "date": f"{day}T12:00:00",
                "categoryId": category_id,
            },
        )
        assert response.status_code == 201, response.text

    march = client.get(
        "/api/v1/transactions/get-transactions",
        headers=auth_headers,
        params={"startDate": "2025-03-01", "endDate": "2025-03-31"},
    )
    expenses = client.get(
        "/api/v1/transactions/get-transactions", headers=auth_headers, params={"type": "expense"}
    )
    by_category = client.get(
        "/api/v1/transactions/get-transactions",
        headers=auth_headers,
        params={"categoryId": category["categoryId"], "endDate": "2025-03-31"},
    )

    assert sorted(item["name"] for item in march.json()["data"]) == ["Groceries", "Paycheck"]
    assert [item["amount"] for item in expenses.json()["data"]] == [55.0, 40.0]
    assert [item["amount"] for item in by_category.json()["data"]] == [40.0]


def test_transaction_rejects_foreign_category(client, auth_headers, other_auth_headers, category):
    response = client.post(
        "/api/v1/transactions/create-transaction",
        headers=other_auth_headers,
        json={
            "name": "Sneaky",
            "amount": 10,
            "type": "expense",
            "categoryId": category["categoryId"],
        },
    )

    assert response.status_code == 404
    assert response.json()["message"] == "Category not found or does not belong to you"


def test_transaction_requires_name_amount_and_type(client, auth_headers):
    response = client.post(
        "/api/v1/transactions/create-transaction",
        headers=auth_headers,
        json={"name": "Coffee", "amount": 0, "type": "expense"},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Name, amount, and type are required"


def test_transaction_date_defaults_to_now(client, auth_headers):
    response = client.post(
        "/api/v1/transactions/create-transaction",
        headers=auth_headers,
        json={"name": "Coffee", "amount": 3.5, "type": "expense"},
    )

    assert response.status_code == 201
    recorded = datetime.fromisoformat(response.json()["data"]["date"]).replace(tzinfo=None)
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    assert now - timedelta(minutes=1) <= recorded <= now


# Budgets


def test_budget_lifecycle(client, auth_headers, category):
    created = client.post(
        "/api/v1/budgets/create-budget",
        headers=auth_headers,
        json={
            "monthlyAmount": 400,
            "startDate": "2025-03-01",
            "endDate": "2025-03-31",
            "categoryId": category["categoryId"],
        },
    )
    assert created.status_code == 201, created.text
    budget = created.json()["data"]
    assert budget["category"]["name"] == "Groceries"
    assert budget["expenseAmount"] is None

    updated = client.put(
        f"/api/v1/budgets/update-budget/{budget['budgetId']}",
        headers=auth_headers,
        json={"expenseAmount": 120},
    )
    assert updated.json()["data"]["expenseAmount"] == 120.0
    assert updated.json()["data"]["monthlyAmount"] == 400.0

    listed = client.get(
        "/api/v1/budgets/get-budgets",
        headers=auth_headers,
        params={"startDate": "2025-03-15", "endDate": "2025-04-15"},
    )
    assert [item["budgetId"] for item in listed.json()["data"]] == [budget["budgetId"]]

    outside = client.get(
        "/api/v1/budgets/get-budgets", headers=auth_headers, params={"startDate": "2025-04-01"}
    )
    assert outside.json()["data"] == []

    deleted = client.delete(
        f"/api/v1/budgets/delete-budget/{budget['budgetId']}", headers=auth_headers
    )
    assert deleted.status_code == 200
    gone = client.get(f"/api/v1/budgets/get-one-budget/{budget['budgetId']}", headers=auth_headers)
    assert gone.status_code == 404
    assert gone.json()["message"] == "Budget not found"


def test_budget_rejects_inverted_range(client, auth_headers):
    response = client.post(
        "/api/v1/budgets/create-budget",
        headers=auth_headers,
        json={"monthlyAmount": 100, "startDate": "2025-03-31", "endDate": "2025-03-01"},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Start date must be before end date"


def test_budget_update_cannot_invert_range(client, auth_headers):
    created = client.post(
        "/api/v1/budgets/create-budget",
        headers=auth_headers,
        json={"monthlyAmount": 100, "startDate": "2025-03-01", "endDate": "2025-03-31"},
    )
    budget_id = created.json()["data"]["budgetId"]

    response = client.put(
        f"/api/v1/budgets/update-budget/{budget_id}",
        headers=auth_headers,
        json={"startDate": "2025-04-15"},
    )

    assert response.status_code == 400


def test_budget_needs_an_amount(client, auth_headers):
    response = client.post(
        "/api/v1/budgets/create-budget",
        headers=auth_headers,
        json={"startDate": "2025-03-01", "endDate": "2025-03-31"},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Monthly amount or expense amount is required"


def test_budget_of_another_user_is_not_found(client, auth_headers, other_auth_headers):
    created = client.post(
        "/api/v1/budgets/create-budget",
        headers=auth_headers,
        json={"expenseAmount": 50, "startDate": "2025-03-01", "endDate": "2025-03-31"},
    )
    budget_id = created.json()["data"]["budgetId"]

    response = client.put(
        f"/api/v1/budgets/update-budget/{budget_id}",
        headers=other_auth_headers,
        json={"expenseAmount": 1},
    )

    assert response.status_code == 404


def test_deleting_a_category_uncategorizes_its_budgets(client, auth_headers, category):
    created = client.post(
        "/api/v1/budgets/create-budget",
        headers=auth_headers,
        json={
            "monthlyAmount": 100,
            "startDate": "2025-03-01",
            "endDate": "2025-03-31",
            "categoryId": category["categoryId"],
        },
    )
    budget_id = created.json()["data"]["budgetId"]

    client.delete(
        f"/api/v1/categories/delete-category/{category['categoryId']}", headers=auth_headers
    )
    response = client.get(f"/api/v1/budgets/get-one-budget/{budget_id}", headers=auth_headers)

    assert response.json()["data"]["categoryId"] is None


# Monthly budgets


def test_monthly_budget_lifecycle(client, auth_headers):
    created = client.post(
        "/api/v1/budgets/monthly-budget",
        headers=auth_headers,
        json={"amount": 2500, "startDate": "2025-03-01", "endDate": "2025-03-31"},
    )
    assert created.status_code == 201, created.text
    monthly_budget = created.json()["data"]
    monthly_budget_id = monthly_budget["monthlyBudgetId"]
    assert monthly_budget["amount"] == 2500.0

    updated = client.put(
        f"/api/v1/budgets/monthly-budgets/{monthly_budget_id}",
        headers=auth_headers,
        json={"amount": 2750.5},
    )
    assert updated.json()["data"]["amount"] == 2750.5

    listed = client.get("/api/v1/budgets/monthly-budgets", headers=auth_headers)
    assert [item["monthlyBudgetId"] for item in listed.json()["data"]] == [monthly_budget_id]

    empty_update = client.put(
        f"/api/v1/budgets/monthly-budgets/{monthly_budget_id}", headers=auth_headers, json={}
    )
    assert empty_update.status_code == 400

    deleted = client.delete(
        f"/api/v1/budgets/monthly-budgets/{monthly_budget_id}", headers=auth_headers
    )
    assert deleted.status_code == 200
    gone = client.get(
        f"/api/v1/budgets/monthly-budgets/{monthly_budget_id}", headers=auth_headers
    )
    assert gone.status_code == 404
    assert gone.json()["message"] == "Monthly budget not found"
