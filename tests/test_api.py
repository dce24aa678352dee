"""
Tests for the RPC surface.

Requests go through FastAPI's TestClient, so validation, serialization and
error mapping are exercised exactly as a remote caller would see them.
"""

import pytest
from fastapi.testclient import TestClient

from expense_tracker.api import create_app
from expense_tracker.orchestrator import ExpenseHandler
from expense_tracker.services.storage import StorageError


LUNCH = {
    "amount": 29.99,
    "date": "2024-01-15",
    "description": "Lunch",
    "category": "Food",
}


def _create(api_client, **overrides):
    response = api_client.post("/rpc/createExpense", json={**LUNCH, **overrides})
    assert response.status_code == 200, response.text
    return response.json()


class TestHealthcheck:

    def test_reports_ok(self, api_client):
        response = api_client.get("/rpc/healthcheck")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["timestamp"].endswith("Z")


class TestCreateExpense:

    def test_returns_record(self, api_client):
        body = _create(api_client)
        assert body["amount"] == 29.99
        assert body["category"] == "Food"
        assert body["date"] == "2024-01-15"
        assert isinstance(body["id"], int)
        assert body["created_at"]

    def test_amount_rounded(self, api_client):
        assert _create(api_client, amount="12.345")["amount"] == 12.35

    @pytest.mark.parametrize(
        "field, value",
        [
            ("amount", -5),
            ("amount", 0),
            ("description", ""),
            ("category", "Groceries"),
            ("date", "not-a-date"),
        ],
    )
    def test_invalid_input_is_422(self, api_client, field, value):
        """Test that a bad field is rejected and named in the response."""
        response = api_client.post("/rpc/createExpense", json={**LUNCH, field: value})

        assert response.status_code == 422
        locs = [issue["loc"] for issue in response.json()["detail"]]
        assert any(loc[-1] == field for loc in locs)

    def test_invalid_input_is_not_stored(self, api_client):
        api_client.post("/rpc/createExpense", json={**LUNCH, "amount": -1})
        assert api_client.post("/rpc/getExpenses").json() == []

    @pytest.mark.parametrize("amount", [0.004, "123456789012.99", "1e30"])
    def test_unstorable_amount_is_422_and_not_stored(self, api_client, amount):
        """Test that amounts rounding to 0.00 or overflowing NUMERIC(10, 2) are rejected."""
        response = api_client.post("/rpc/createExpense", json={**LUNCH, "amount": amount})

        assert response.status_code == 422
        assert response.json()["detail"][0]["loc"][-1] == "amount"

        listed = api_client.post("/rpc/getExpenses")
        assert listed.status_code == 200
        assert listed.json() == []


class TestGetExpenses:

    @pytest.fixture(autouse=True)
    def populated(self, api_client):
        _create(api_client)
        _create(api_client, description="Bus", category="Transport", date="2024-02-03")
        _create(api_client, description="Dinner", date="2023-01-20")

    def test_no_body_lists_everything(self, api_client):
        response = api_client.post("/rpc/getExpenses")
        assert response.status_code == 200
        assert len(response.json()) == 3

    def test_null_body_lists_everything(self, api_client):
        response = api_client.post(
            "/rpc/getExpenses",
            content="null",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 200
        assert len(response.json()) == 3

    def test_empty_filter_lists_everything(self, api_client):
        assert len(api_client.post("/rpc/getExpenses", json={}).json()) == 3

    def test_filter(self, api_client):
        response = api_client.post("/rpc/getExpenses", json={"category": "Food", "year": 2024})
        assert [e["description"] for e in response.json()] == ["Lunch"]

    def test_newest_first(self, api_client):
        dates = [e["date"] for e in api_client.post("/rpc/getExpenses").json()]
        assert dates == sorted(dates, reverse=True)

    def test_invalid_month_is_422(self, api_client):
        response = api_client.post("/rpc/getExpenses", json={"month": 13})
        assert response.status_code == 422


class TestGetExpenseById:

    def test_found(self, api_client):
        created = _create(api_client)
        response = api_client.post("/rpc/getExpenseById", json=created["id"])
        assert response.status_code == 200
        assert response.json() == created

    def test_missing_is_null(self, api_client):
        response = api_client.post("/rpc/getExpenseById", json=404)
        assert response.status_code == 200
        assert response.json() is None

    def test_non_integer_id_is_422(self, api_client):
        response = api_client.post("/rpc/getExpenseById", json="abc")
        assert response.status_code == 422


class TestUpdateExpense:

    def test_partial_update(self, api_client):
        created = _create(api_client)
        response = api_client.post(
            "/rpc/updateExpense",
            json={"id": created["id"], "amount": 35.00},
        )
        assert response.status_code == 200
        assert response.json() == {**created, "amount": 35.0}

    def test_missing_id_is_404(self, api_client):
        response = api_client.post("/rpc/updateExpense", json={"id": 999, "amount": 1})
        assert response.status_code == 404
        assert "999" in response.json()["detail"]

    def test_amount_rounding_to_zero_is_422(self, api_client):
        created = _create(api_client)
        response = api_client.post(
            "/rpc/updateExpense",
            json={"id": created["id"], "amount": 0.001},
        )

        assert response.status_code == 422
        stored = api_client.post("/rpc/getExpenseById", json=created["id"])
        assert stored.json() == created

    def test_invalid_field_is_422(self, api_client):
        created = _create(api_client)
        response = api_client.post(
            "/rpc/updateExpense",
            json={"id": created["id"], "category": "Nope"},
        )
        assert response.status_code == 422


class TestDeleteExpense:

    def test_delete(self, api_client):
        created = _create(api_client)
        response = api_client.post("/rpc/deleteExpense", json=created["id"])
        assert response.status_code == 200
        assert api_client.post("/rpc/getExpenseById", json=created["id"]).json() is None

    def test_missing_id_succeeds(self, api_client):
        response = api_client.post("/rpc/deleteExpense", json=12345)
        assert response.status_code == 200


class _FailingStorage:
    def __getattr__(self, name):
        def fail(*args, **kwargs):
            raise StorageError("disk full")
        return fail


class TestStorageFailure:

    def test_storage_error_is_500(self):
        client = TestClient(create_app(ExpenseHandler(_FailingStorage())))
        response = client.post("/rpc/getExpenses")
        assert response.status_code == 500
        assert response.json()["detail"] == "disk full"


class TestExampleScenario:
    """The Lunch walkthrough, end to end over RPC."""

    def test_full_lifecycle(self, api_client):
        created = _create(api_client)
        assert created["amount"] == 29.99
        assert created["category"] == "Food"

        food = api_client.post("/rpc/getExpenses", json={"category": "Food"}).json()
        assert created["id"] in [e["id"] for e in food]

        updated = api_client.post(
            "/rpc/updateExpense",
            json={"id": created["id"], "amount": 35.00},
        ).json()
        assert updated["amount"] == 35.0
        assert {k: v for k, v in updated.items() if k != "amount"} == {
            k: v for k, v in created.items() if k != "amount"
        }

        api_client.post("/rpc/deleteExpense", json=created["id"])
        assert api_client.post("/rpc/getExpenseById", json=created["id"]).json() is None
