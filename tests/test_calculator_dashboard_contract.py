from __future__ import annotations

import pytest


def test_roi_calculator_contract(client) -> None:
    response = client.post(
        "/calculator/roi",
        json={
            "principal": "1000",
            "monthlyContribution": "100",
            "annualInterestRate": "5",
            "years": 10,
        },
    )

    assert response.status_code == 200
    data = response.get_json()["data"]
    assert data["result"]["totalContribution"] == "13000.00"
    assert len(data["growth"]) == 11
    assert data["growth"][0] == {
        "year": 0,
        "value": "1000.00",
        "contributions": "1000.00",
    }
    assert data["growth"][-1]["value"] == data["result"]["futureValue"]


@pytest.mark.parametrize(
    "payload",
    [
        {"principal": "-1", "annualInterestRate": "5", "years": 1},
        {"principal": "100", "annualInterestRate": "5", "years": 0},
        {"principal": "100", "years": 3},
    ],
)
def test_roi_calculator_rejects_invalid_input(client, payload) -> None:
    response = client.post("/calculator/roi", json=payload)

    assert response.status_code == 400
    assert response.get_json()["error"]["code"] == "VALIDATION_ERROR"


def test_dashboard_contract(client) -> None:
    goal_response = client.post(
        "/goals",
        json={
            "name": "Car",
            "type": "other",
            "targetAmount": "2000.00",
            "startDate": "2026-01-01T00:00:00+00:00",
            "endDate": "2099-01-01T00:00:00+00:00",
        },
    )
    goal_id = goal_response.get_json()["data"]["goal"]["id"]
    client.post(
        "/transactions",
        json={
            "goalId": goal_id,
            "amount": "500.00",
            "date": "2026-02-14T09:00:00+00:00",
            "type": "deposit",
        },
    )

    response = client.get("/dashboard")

    assert response.status_code == 200
    data = response.get_json()["data"]
    assert data["totalSaved"] == "500.00"
    assert data["totalTarget"] == "2000.00"
    assert data["totalProgressPercentage"] == 25
    assert data["activeGoals"] == 1
    assert data["monthlyFlows"] == [
        {
            "month": "2026-02",
            "label": "Feb 2026",
            "deposits": "500.00",
            "withdrawals": "0.00",
        }
    ]
    assert data["upcomingGoals"][0]["id"] == goal_id
