"""Integration tests for API endpoints"""

import uuid
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session


def _food(**overrides) -> dict:
    body = {
        "description": "Food",
        "quantity": 1,
        "total_amount_cents": 9000,
        "paid_by": "A",
        "split_among": ["A", "B", "C"],
    }
    body.update(overrides)
    return body


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient, dinner_bill: dict):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "friends_trip_operation_total" in response.text


def test_request_id_header(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "trace-123"})
    assert response.headers["X-Request-ID"] == "trace-123"

    generated = client.get("/health").headers["X-Request-ID"]
    assert uuid.UUID(generated)


def test_create_bill(client: TestClient):
    """Test POST /v1/bills"""
    response = client.post("/v1/bills", json={"name": " Dinner ", "participants": ["A", "B", "A"]})

    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Dinner"
    assert data["participants"] == ["A", "B"]
    assert data["expenses"] == []
    assert uuid.UUID(data["bill_id"])


def test_create_bill_empty_participants(client: TestClient):
    response = client.post("/v1/bills", json={"name": "Dinner", "participants": []})

    assert response.status_code == 400
    assert response.json()["detail"]["field"] == "participants"


def test_create_bill_blank_name(client: TestClient):
    response = client.post("/v1/bills", json={"name": "  ", "participants": ["A"]})

    assert response.status_code == 400
    assert response.json()["detail"]["field"] == "name"


def test_list_bills(client: TestClient, dinner_bill: dict):
    client.post(f"/v1/bills/{dinner_bill['bill_id']}/expenses", json=_food())

    response = client.get("/v1/bills")

    assert response.status_code == 200
    bills = response.json()
    assert len(bills) == 1
    assert len(bills[0]["expenses"]) == 1


def test_get_bill(client: TestClient, dinner_bill: dict):
    response = client.get(f"/v1/bills/{dinner_bill['bill_id']}")

    assert response.status_code == 200
    assert response.json()["participants"] == ["A", "B", "C"]


def test_get_bill_not_found(client: TestClient):
    """Test GET /v1/bills/{bill_id} with unknown ID"""
    fake_uuid = "00000000-0000-0000-0000-000000000000"
    response = client.get(f"/v1/bills/{fake_uuid}")
    assert response.status_code == 404


def test_get_bill_invalid_id(client: TestClient):
    response = client.get("/v1/bills/not-a-uuid")
    assert response.status_code == 400


def test_add_expense(client: TestClient, dinner_bill: dict):
    """Test POST /v1/bills/{bill_id}/expenses"""
    response = client.post(f"/v1/bills/{dinner_bill['bill_id']}/expenses", json=_food(quantity=3))

    assert response.status_code == 201
    data = response.json()
    assert data["bill_id"] == dinner_bill["bill_id"]
    assert data["quantity"] == 3
    assert data["total_amount_cents"] == 9000
    assert data["split_among"] == ["A", "B", "C"]


def test_add_expense_defaults_quantity(client: TestClient, dinner_bill: dict):
    body = _food()
    del body["quantity"]

    response = client.post(f"/v1/bills/{dinner_bill['bill_id']}/expenses", json=body)

    assert response.status_code == 201
    assert response.json()["quantity"] == 1


def test_add_expense_unknown_bill(client: TestClient):
    response = client.post(f"/v1/bills/{uuid.uuid4()}/expenses", json=_food())
    assert response.status_code == 404


def test_add_expense_rejects_non_participant(client: TestClient, dinner_bill: dict):
    bill_id = dinner_bill["bill_id"]

    response = client.post(f"/v1/bills/{bill_id}/expenses", json=_food(paid_by="D"))

    assert response.status_code == 400
    assert response.json()["detail"]["field"] == "paid_by"
    assert client.get(f"/v1/bills/{bill_id}").json()["expenses"] == []


def test_add_expense_field_errors(client: TestClient, dinner_bill: dict):
    url = f"/v1/bills/{dinner_bill['bill_id']}/expenses"

    cases = [
        (_food(description=""), "description"),
        (_food(quantity=0), "quantity"),
        (_food(total_amount_cents=-5), "total_amount_cents"),
        (_food(split_among=[]), "split_among"),
        (_food(split_among=["A", "Z"]), "split_among"),
    ]
    for body, field in cases:
        response = client.post(url, json=body)
        assert response.status_code == 400
        assert response.json()["detail"]["field"] == field


def test_update_expense(client: TestClient, dinner_bill: dict):
    """Test PUT /v1/expenses/{expense_id}"""
    bill_id = dinner_bill["bill_id"]
    expense_id = client.post(f"/v1/bills/{bill_id}/expenses", json=_food()).json()["expense_id"]

    response = client.put(
        f"/v1/expenses/{expense_id}",
        json=_food(description="Snacks", total_amount_cents=600, paid_by="B", split_among=["B", "C"]),
    )

    assert response.status_code == 200
    data = response.json()
    assert data["expense_id"] == expense_id
    assert data["bill_id"] == bill_id
    assert data["description"] == "Snacks"
    assert data["paid_by"] == "B"


def test_update_expense_not_found(client: TestClient):
    response = client.put(f"/v1/expenses/{uuid.uuid4()}", json=_food())
    assert response.status_code == 404


def test_update_expense_invalid_payer(client: TestClient, dinner_bill: dict):
    expense_id = client.post(
        f"/v1/bills/{dinner_bill['bill_id']}/expenses", json=_food()
    ).json()["expense_id"]

    response = client.put(f"/v1/expenses/{expense_id}", json=_food(paid_by="Nobody"))

    assert response.status_code == 400
    assert response.json()["detail"]["field"] == "paid_by"


def test_delete_expense(client: TestClient, dinner_bill: dict):
    bill_id = dinner_bill["bill_id"]
    expense_id = client.post(f"/v1/bills/{bill_id}/expenses", json=_food()).json()["expense_id"]

    response = client.delete(f"/v1/expenses/{expense_id}")

    assert response.status_code == 204
    assert client.get(f"/v1/bills/{bill_id}").json()["expenses"] == []
    assert client.delete(f"/v1/expenses/{expense_id}").status_code == 404


def test_delete_expense_invalid_id(client: TestClient):
    assert client.delete("/v1/expenses/123").status_code == 400


def test_get_summary(client: TestClient, dinner_bill: dict):
    """Test GET /v1/bills/{bill_id}/summary"""
    bill_id = dinner_bill["bill_id"]
    client.post(f"/v1/bills/{bill_id}/expenses", json=_food())

    response = client.get(f"/v1/bills/{bill_id}/summary")

    assert response.status_code == 200
    data = response.json()
    assert data["bill_id"] == bill_id
    assert data["total_amount_cents"] == 9000
    by_name = {p["name"]: p for p in data["participants"]}
    assert by_name["A"] == {
        "name": "A",
        "total_paid_cents": 9000,
        "total_owed_cents": 3000,
        "balance_cents": 6000,
        "status": "owed",
    }
    assert by_name["B"]["balance_cents"] == -3000
    assert by_name["B"]["status"] == "owes"


def test_get_summary_not_found(client: TestClient):
    response = client.get(f"/v1/bills/{uuid.uuid4()}/summary")
    assert response.status_code == 404


def test_delete_bill_cascade(client: TestClient, dinner_bill: dict):
    bill_id = dinner_bill["bill_id"]
    expense_id = client.post(f"/v1/bills/{bill_id}/expenses", json=_food()).json()["expense_id"]

    response = client.delete(f"/v1/bills/{bill_id}")

    assert response.status_code == 204
    assert client.get(f"/v1/bills/{bill_id}").status_code == 404
    assert client.delete(f"/v1/expenses/{expense_id}").status_code == 404


def test_delete_bill_restrict(restrict_client: TestClient):
    bill_id = restrict_client.post(
        "/v1/bills", json={"name": "Dinner", "participants": ["A", "B"]}
    ).json()["bill_id"]
    expense_id = restrict_client.post(
        f"/v1/bills/{bill_id}/expenses", json=_food(split_among=["A", "B"])
    ).json()["expense_id"]

    assert restrict_client.delete(f"/v1/bills/{bill_id}").status_code == 409

    restrict_client.delete(f"/v1/expenses/{expense_id}")
    assert restrict_client.delete(f"/v1/bills/{bill_id}").status_code == 204


def test_delete_bill_not_found(client: TestClient):
    assert client.delete(f"/v1/bills/{uuid.uuid4()}").status_code == 404


def test_add_expense_unknown_bill_wins_over_bad_fields(client: TestClient):
    """Test a missing bill is reported before any field error"""
    response = client.post(
        f"/v1/bills/{uuid.uuid4()}/expenses",
        json=_food(quantity=1.5, total_amount_cents="lots", split_among="A"),
    )
    assert response.status_code == 404


def test_add_expense_rejects_fractional_quantity(client: TestClient, dinner_bill: dict):
    response = client.post(f"/v1/bills/{dinner_bill['bill_id']}/expenses", json=_food(quantity=1.5))

    assert response.status_code == 400
    assert response.json()["detail"]["field"] == "quantity"


def test_add_expense_rejects_string_quantity(client: TestClient, dinner_bill: dict):
    response = client.post(f"/v1/bills/{dinner_bill['bill_id']}/expenses", json=_food(quantity="2"))

    assert response.status_code == 400
    assert response.json()["detail"]["field"] == "quantity"


def test_add_expense_missing_fields_reported_in_order(client: TestClient, dinner_bill: dict):
    response = client.post(f"/v1/bills/{dinner_bill['bill_id']}/expenses", json={"description": "Food"})

    assert response.status_code == 400
    assert response.json()["detail"]["field"] == "total_amount_cents"


def test_add_expense_amount_beyond_storage_limit(client: TestClient, dinner_bill: dict):
    bill_id = dinner_bill["bill_id"]

    response = client.post(f"/v1/bills/{bill_id}/expenses", json=_food(total_amount_cents=2**63))

    assert response.status_code == 400
    assert response.json()["detail"]["field"] == "total_amount_cents"
    assert client.get(f"/v1/bills/{bill_id}").json()["expenses"] == []


def test_update_expense_quantity_beyond_storage_limit(client: TestClient, dinner_bill: dict):
    expense_id = client.post(
        f"/v1/bills/{dinner_bill['bill_id']}/expenses", json=_food()
    ).json()["expense_id"]

    response = client.put(f"/v1/expenses/{expense_id}", json=_food(quantity=2**31))

    assert response.status_code == 400
    assert response.json()["detail"]["field"] == "quantity"


def test_create_bill_participants_not_a_list(client: TestClient):
    response = client.post("/v1/bills", json={"name": "Dinner", "participants": "A,B"})

    assert response.status_code == 400
    assert response.json()["detail"]["field"] == "participants"


def test_list_bills_in_creation_order(client: TestClient):
    names = [f"Stop {i}" for i in range(5)]
    for name in names:
        client.post("/v1/bills", json={"name": name, "participants": ["A"]})

    assert [b["name"] for b in client.get("/v1/bills").json()] == names


def test_storage_failure_returns_503(client: TestClient, db: Session, monkeypatch):
    def failing_commit():
        raise OperationalError("COMMIT", {}, Exception("database is locked"))

    monkeypatch.setattr(db, "commit", failing_commit)

    response = client.post("/v1/bills", json={"name": "Dinner", "participants": ["A"]})

    assert response.status_code == 503
    assert response.json()["detail"] == "Storage unavailable"
