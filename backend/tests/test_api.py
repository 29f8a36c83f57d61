"""Tests for the HTTP API."""
import pytest
from fastapi.testclient import TestClient
from budgy.main import app
from budgy.services.insights import InsightsService
from budgy.services.tracker import FinanceTracker, set_tracker
from tests.conftest import PASSWORD


@pytest.fixture
def client(local_store, remote_store):
    set_tracker(FinanceTracker(local_store, remote_store, insights=InsightsService("mock:advisor")))
    with TestClient(app) as client:
        yield client
    set_tracker(None)


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["message"] == "Budgy Finance API"


def test_logged_out_cannot_add(client):
    response = client.post("/transactions", json={"title": "Rent", "amount": 10, "category": "Housing"})

    assert response.status_code == 401
    assert client.get("/status").json()["mode"] == "LOGGED_OUT"


def test_guest_then_sign_up_flow(client):
    assert client.post("/auth/guest").json()["mode"] == "ANONYMOUS"

    for title, amount, type in [("Salary", 200, "INCOME"), ("Rent", 150, "EXPENSE")]:
        response = client.post("/transactions", json={
            "title": title,
            "amount": amount,
            "type": type,
            "category": "Other",
            "date": "2024-01-10T09:00:00",
        })
        assert response.status_code == 200

    response = client.post("/auth/sign-up", json={
        "email": "asha@example.com",
        "password": PASSWORD,
        "confirm_password": PASSWORD,
        "full_name": "Asha",
    })
    assert response.status_code == 200
    assert response.json()["mode"] == "AUTHENTICATED"

    status = client.get("/status").json()
    assert status["last_reconciliation"]["outcome"] == "transferred"
    assert status["last_reconciliation"]["transferred"] == 2

    dashboard = client.get("/dashboard").json()
    assert dashboard["financials"]["balance"] == 50.0
    assert dashboard["name"] == "Asha"

    details = client.get("/details", params={"category": "INCOME", "month": "2024-01"}).json()
    assert details["total"] == 200.0


def test_bad_month_is_rejected(client):
    client.post("/auth/guest")

    response = client.get("/details", params={"category": "EXPENSE", "month": "January"})

    assert response.status_code == 400


def test_delete_unknown_transaction(client):
    client.post("/auth/guest")

    assert client.delete("/transactions/missing").status_code == 404


def test_settings_validation(client):
    client.post("/auth/guest")

    bad = client.put("/profile/settings", json={"monthly_budget": 0, "currency": "$"})
    good = client.put("/profile/settings", json={"monthly_budget": 500, "currency": "$"})

    assert bad.status_code == 400
    assert bad.json()["detail"] == "Monthly budget must be greater than zero."
    assert good.json() == {"name": "User", "currency": "$", "monthly_budget": 500.0}


def test_sign_in_with_wrong_password(client):
    response = client.post("/auth/sign-in", json={"email": "nobody@example.com", "password": "x"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid email or password. Please try again."


def test_categories(client):
    client.post("/auth/guest")

    added = client.post("/categories", json={"type": "EXPENSE", "name": "Pets"}).json()
    assert added["expense"][-1] == "Pets"

    index = len(added["expense"]) - 1
    renamed = client.put("/categories", json={"type": "EXPENSE", "index": index, "name": "Animals"}).json()
    assert renamed["expense"][-1] == "Animals"

    deleted = client.delete(f"/categories/EXPENSE/{index}").json()
    assert "Animals" not in deleted["expense"]

    assert client.delete("/categories/EXPENSE/99").status_code == 404


def test_view_navigation(client):
    client.post("/auth/guest")

    assert client.post("/view/details/month", params={"step": -1}).status_code == 409

    client.post("/view/details", params={"category": "PENDING"})
    view = client.post("/view/navigate", params={"view": "PROFILE"}).json()
    assert view["active_view"] == "PROFILE"
    assert view["detail_category"] is None

    assert client.post("/view/navigate", params={"view": "DETAILS"}).status_code == 400


def test_theme_toggle(client):
    assert client.get("/theme").json() == {"theme": "dark"}
    assert client.post("/theme/toggle").json() == {"theme": "light"}


def test_insights(client):
    client.post("/auth/guest")

    response = client.post("/insights").json()

    assert response["model_id"] == "mock:advisor"
    assert response["text"].startswith("- ")


def test_view_editing_endpoints(client):
    client.post("/auth/guest")

    assert client.put("/view/edit/draft", json={"key": "name", "value": "A"}).status_code == 409

    client.post("/view/edit", json={"target": "CATEGORY_ITEM", "index": 0, "drafts": {"name": "Food"}})
    view = client.put("/view/edit/draft", json={"key": "name", "value": "Groceries"}).json()
    assert view["drafts"] == {"name": "Groceries"}

    view = client.post("/view/category-tab", params={"tab": "INCOME"}).json()
    assert view["category_tab"] == "INCOME"
    assert view["editing"] == "CATEGORIES"

    assert client.delete("/view/edit").json()["editing"] == "NONE"
    assert client.post("/view/add-type", params={"type": "INCOME"}).json()["add_type"] == "INCOME"


def test_select_detail_month(client):
    client.post("/auth/guest")
    client.post("/transactions", json={
        "title": "Bonus",
        "amount": 80,
        "type": "INCOME",
        "category": "Salary",
        "date": "2023-08-12T10:00:00",
    })

    assert client.put("/view/details/month", params={"month": "2023-08"}).status_code == 409

    client.post("/view/details", params={"category": "INCOME"})
    details = client.put("/view/details/month", params={"month": "2023-08"}).json()

    assert details["month"] == "2023-08-01"
    assert details["total"] == 80.0
    assert client.get("/view").json()["selected_month"] == "2023-08-01"
    assert client.put("/view/details/month", params={"month": "08/2023"}).status_code == 400
