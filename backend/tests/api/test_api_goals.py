"""
HTTP tests for goals and historical stats.
"""

import pytest

from app.shared.dates import utcnow

from tests.helpers import auth_headers


def goal_payload(**extra) -> dict:
    payload = {"type": "WORKOUTS", "period": "WEEKLY", "title": "Run 4 times", "targetValue": 4}
    payload.update(extra)
    return payload


@pytest.fixture
def goal(client, users):
    response = client.post("/api/v1/goals", headers=auth_headers(users.athlete), json=goal_payload())
    assert response.status_code == 201
    return response.json()["goal"]


class TestGoals:

    def test_create(self, goal, users):
        assert goal["userId"] == users.athlete.id
        assert goal["type"] == "WORKOUTS"
        assert goal["status"] == "ACTIVE"
        assert (goal["currentValue"], goal["progressPercent"]) == (0.0, 0)
        assert 1 <= goal["daysRemaining"] <= 7

    def test_custom_needs_dates(self, client, users):
        response = client.post(
            "/api/v1/goals", headers=auth_headers(users.athlete), json=goal_payload(period="CUSTOM")
        )
        assert response.status_code == 400

    def test_target_must_be_positive(self, client, users):
        response = client.post(
            "/api/v1/goals", headers=auth_headers(users.athlete), json=goal_payload(targetValue=0)
        )
        assert response.status_code == 400

    def test_logged_activity_moves_progress(self, client, users, goal):
        headers = auth_headers(users.athlete)
        client.post(
            "/api/v1/activities",
            headers=headers,
            json={"name": "Easy", "date": utcnow().isoformat() + "Z", "distance": 5, "duration": 1800},
        )

        [listed] = client.get("/api/v1/goals", headers=headers).json()["goals"]
        assert listed["currentValue"] == 1.0
        assert listed["progressPercent"] == 25

    def test_update_and_delete(self, client, users, goal):
        headers = auth_headers(users.athlete)
        url = f"/api/v1/goals/{goal['id']}"

        response = client.put(url, headers=headers, json={"title": "Run 3 times", "targetValue": 3})
        assert response.json()["goal"]["title"] == "Run 3 times"

        assert client.put(url, headers=auth_headers(users.free_athlete), json={"title": "x"}).status_code == 404
        assert client.delete(url, headers=headers).status_code == 200
        assert client.get("/api/v1/goals", headers=headers).json()["goals"] == []

    def test_cancelled_goals_by_status(self, client, users, goal):
        headers = auth_headers(users.athlete)
        client.put(f"/api/v1/goals/{goal['id']}", headers=headers, json={"status": "CANCELLED"})

        assert client.get("/api/v1/goals", headers=headers).json()["goals"] == []
        cancelled = client.get("/api/v1/goals", headers=headers, params={"status": "CANCELLED"}).json()["goals"]
        assert [g["id"] for g in cancelled] == [goal["id"]]


class TestHistoricalStats:

    def test_shape(self, client, users):
        response = client.get(
            "/api/v1/goals/stats/historical", headers=auth_headers(users.athlete), params={"months": 3}
        )

        body = response.json()
        assert len(body["monthly"]) == 3
        assert len(body["weekly"]) == 4
        assert body["comparison"] == {"distance": 0, "duration": 0, "workouts": 0}

    def test_months_range(self, client, users):
        response = client.get(
            "/api/v1/goals/stats/historical", headers=auth_headers(users.athlete), params={"months": 30}
        )
        assert response.status_code == 400
