from __future__ import annotations

from typing import Any, Dict


def _create_goal(client, name: str = "Vacation") -> str:
    response = client.post(
        "/goals",
        json={
            "name": name,
            "type": "savings",
            "targetAmount": "500.00",
            "startDate": "2026-01-01T00:00:00+00:00",
            "endDate": "2026-12-31T00:00:00+00:00",
        },
    )
    assert response.status_code == 201
    return response.get_json()["data"]["goal"]["id"]


def _transaction_payload(goal_id: str, **overrides: Any) -> Dict[str, Any]:
    payload = {
        "goalId": goal_id,
        "amount": "120.00",
        "date": "2026-02-01T10:00:00+00:00",
        "type": "deposit",
        "description": "Paycheck split",
    }
    payload.update(overrides)
    return payload


def test_transaction_crud_keeps_goal_balance_in_sync(client) -> None:
    goal_id = _create_goal(client)

    create_response = client.post("/transactions", json=_transaction_payload(goal_id))
    assert create_response.status_code == 201
    created = create_response.get_json()["data"]
    transaction_id = created["transaction"]["id"]
    assert created["transaction"]["amount"] == "120.00"
    assert created["goal"]["currentAmount"] == "120.00"

    get_response = client.get(f"/transactions/{transaction_id}")
    assert get_response.status_code == 200
    assert get_response.get_json()["data"]["transaction"]["goalId"] == goal_id

    update_response = client.put(
        f"/transactions/{transaction_id}",
        json={"amount": "80.00"},
    )
    assert update_response.status_code == 200
    updated = update_response.get_json()["data"]
    assert updated["transaction"]["description"] == "Paycheck split"
    assert updated["goal"]["currentAmount"] == "80.00"

    delete_response = client.delete(f"/transactions/{transaction_id}")
    assert delete_response.status_code == 200
    goal_body = client.get(f"/goals/{goal_id}").get_json()
    assert goal_body["data"]["goal"]["currentAmount"] == "0.00"


def test_transaction_list_filters_by_goal_newest_first(client) -> None:
    first_goal = _create_goal(client, "First")
    second_goal = _create_goal(client, "Second")
    client.post(
        "/transactions",
        json=_transaction_payload(first_goal, date="2026-01-05T00:00:00+00:00"),
    )
    client.post(
        "/transactions",
        json=_transaction_payload(first_goal, date="2026-03-05T00:00:00+00:00"),
    )
    client.post("/transactions", json=_transaction_payload(second_goal))

    all_body = client.get("/transactions").get_json()
    assert all_body["meta"]["total"] == 3

    filtered = client.get(f"/transactions?goalId={first_goal}").get_json()
    dates = [item["date"] for item in filtered["data"]["items"]]
    assert filtered["meta"]["total"] == 2
    assert dates == sorted(dates, reverse=True)


def test_transaction_create_rejects_invalid_amount(client) -> None:
    goal_id = _create_goal(client)

    response = client.post(
        "/transactions", json=_transaction_payload(goal_id, amount="-5")
    )

    assert response.status_code == 400
    body = response.get_json()
    assert body["error"]["code"] == "VALIDATION_ERROR"
    assert "amount" in body["error"]["details"]["messages"]


def test_unknown_transaction_returns_not_found(client) -> None:
    assert client.get("/transactions/nope").status_code == 404
    assert client.put("/transactions/nope", json={"amount": "1"}).status_code == 404
    assert client.delete("/transactions/nope").status_code == 404


def test_transaction_update_rejects_non_object_body(client) -> None:
    goal_id = _create_goal(client)
    created = client.post("/transactions", json=_transaction_payload(goal_id))
    transaction_id = created.get_json()["data"]["transaction"]["id"]

    response = client.put(f"/transactions/{transaction_id}", json=["amount", "5"])

    assert response.status_code == 400
    assert response.get_json()["error"]["code"] == "VALIDATION_ERROR"
    goal = client.get(f"/goals/{goal_id}").get_json()["data"]["goal"]
    assert goal["currentAmount"] == "120.00"
