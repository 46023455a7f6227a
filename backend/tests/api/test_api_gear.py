"""
HTTP tests for gear.
"""

from datetime import datetime

import pytest

from app.features.activities.models import Activity

from tests.helpers import auth_headers


@pytest.fixture
def shoes(client, users):
    response = client.post(
        "/api/v1/gear",
        headers=auth_headers(users.athlete),
        json={"type": "SHOES", "brand": "Hoka", "model": "Mach 6", "maxDistance": 25},
    )
    assert response.status_code == 201
    return response.json()["gear"]


@pytest.fixture
def long_run(users, seed):
    return seed(Activity(
        user_id=users.athlete.id, name="Long run", date=datetime(2026, 6, 7, 7), distance=21.1, duration=7200,
    ))


class TestGear:

    def test_create(self, shoes, users):
        assert shoes["type"] == "SHOES"
        assert shoes["status"] == "ACTIVE"
        assert shoes["userId"] == users.athlete.id
        assert (shoes["totalDistance"], shoes["usagePercent"]) == (0.0, 0)

    def test_unknown_type(self, client, users):
        response = client.post(
            "/api/v1/gear",
            headers=auth_headers(users.athlete),
            json={"type": "BIKE", "brand": "Canyon", "model": "Grail"},
        )
        assert response.status_code == 400

    def test_filters(self, client, users, shoes):
        headers = auth_headers(users.athlete)
        client.post("/api/v1/gear", headers=headers, json={"type": "WATCH", "brand": "Coros", "model": "Pace 3"})

        watches = client.get("/api/v1/gear", headers=headers, params={"type": "WATCH"}).json()["gear"]
        retired = client.get("/api/v1/gear", headers=headers, params={"status": "RETIRED"}).json()["gear"]

        assert [g["model"] for g in watches] == ["Pace 3"]
        assert retired == []

    def test_private_to_owner(self, client, users, shoes):
        response = client.get(f"/api/v1/gear/{shoes['id']}", headers=auth_headers(users.coach))
        assert response.status_code == 404

    def test_retire(self, client, users, shoes):
        response = client.put(
            f"/api/v1/gear/{shoes['id']}", headers=auth_headers(users.athlete), json={"status": "RETIRED"}
        )
        assert response.json()["gear"]["retiredAt"] is not None

    def test_delete(self, client, users, shoes):
        headers = auth_headers(users.athlete)
        assert client.delete(f"/api/v1/gear/{shoes['id']}", headers=headers).status_code == 200
        assert client.get(f"/api/v1/gear/{shoes['id']}", headers=headers).status_code == 404


# =============================================================================
# Activity tagging
# =============================================================================

class TestTagging:

    def test_assign_updates_totals_and_alerts(self, client, users, shoes, long_run):
        headers = auth_headers(users.athlete)

        response = client.post(f"/api/v1/gear/activity/{long_run.id}", headers=headers, json={"gearId": shoes["id"]})

        gear = response.json()["gear"]
        assert (gear["totalDistance"], gear["totalActivities"], gear["usagePercent"]) == (21.1, 1, 84)
        alerts = client.get("/api/v1/gear/alerts", headers=headers).json()["alerts"]
        assert [a["id"] for a in alerts] == [shoes["id"]]
        detail = client.get(f"/api/v1/gear/{shoes['id']}", headers=headers).json()["gear"]
        assert [a["name"] for a in detail["recentActivities"]] == ["Long run"]

    def test_assign_twice(self, client, users, shoes, long_run):
        headers = auth_headers(users.athlete)
        url = f"/api/v1/gear/activity/{long_run.id}"

        client.post(url, headers=headers, json={"gearId": shoes["id"]})
        response = client.post(url, headers=headers, json={"gearId": shoes["id"]})

        assert response.status_code == 400

    def test_unassign(self, client, users, shoes, long_run):
        headers = auth_headers(users.athlete)
        client.post(f"/api/v1/gear/activity/{long_run.id}", headers=headers, json={"gearId": shoes["id"]})

        url = f"/api/v1/gear/activity/{long_run.id}/{shoes['id']}"
        response = client.delete(url, headers=headers)

        assert response.json()["gear"]["totalActivities"] == 0
        assert client.delete(url, headers=headers).status_code == 404
