"""
HTTP tests for training plans and the calendar.
"""

import pytest

from tests.helpers import auth_headers


def plan_payload(athlete_id, **extra) -> dict:
    payload = {
        "athleteId": athlete_id,
        "name": "10k build",
        "startDate": "2026-06-01T00:00:00Z",
        "endDate": "2026-06-30T00:00:00Z",
        "sessions": [
            {"date": "2026-06-02T00:00:00Z", "sessionType": "EASY", "title": "Easy 8k", "targetDistance": 8},
            {"date": "2026-06-04T00:00:00Z", "sessionType": "INTERVALS", "title": "6x800m"},
        ],
    }
    payload.update(extra)
    return payload


@pytest.fixture
def plan(client, users):
    response = client.post("/api/v1/plans", headers=auth_headers(users.coach), json=plan_payload(users.athlete.id))
    assert response.status_code == 201
    return response.json()


# =============================================================================
# Plans
# =============================================================================

class TestPlans:

    def test_create(self, client, users, plan):
        assert plan["athleteId"] == users.athlete.id
        assert plan["sessionCount"] == 2
        assert plan["athlete"]["name"] == users.athlete.name

        inbox = client.get("/api/v1/notifications", headers=auth_headers(users.athlete)).json()
        assert inbox["notifications"][0]["type"] == "PLAN_ASSIGNED"

    def test_create_for_foreign_athlete(self, client, users):
        response = client.post(
            "/api/v1/plans",
            headers=auth_headers(users.other_coach),
            json=plan_payload(users.athlete.id),
        )
        assert response.status_code == 403

    def test_athlete_cannot_create(self, client, users):
        response = client.post(
            "/api/v1/plans",
            headers=auth_headers(users.athlete),
            json=plan_payload(users.athlete.id),
        )
        assert response.status_code == 403

    def test_inverted_dates(self, client, users):
        response = client.post(
            "/api/v1/plans",
            headers=auth_headers(users.coach),
            json=plan_payload(users.athlete.id, endDate="2026-05-01T00:00:00Z"),
        )
        assert response.status_code == 400

    def test_list_for_both_sides(self, client, users, plan):
        for user in (users.coach, users.athlete):
            plans = client.get("/api/v1/plans", headers=auth_headers(user)).json()["plans"]
            assert [p["id"] for p in plans] == [plan["id"]]

        assert client.get("/api/v1/plans", headers=auth_headers(users.other_coach)).json()["plans"] == []

    def test_detail_is_hidden_from_others(self, client, users, plan):
        response = client.get(f"/api/v1/plans/{plan['id']}", headers=auth_headers(users.other_athlete))
        assert response.status_code == 404

    def test_update_and_delete(self, client, users, plan):
        updated = client.put(
            f"/api/v1/plans/{plan['id']}",
            headers=auth_headers(users.coach),
            json={"name": "10k build v2", "status": "PAUSED"},
        )
        assert updated.json()["name"] == "10k build v2"
        assert updated.json()["status"] == "PAUSED"

        deleted = client.delete(f"/api/v1/plans/{plan['id']}", headers=auth_headers(users.coach))
        assert deleted.status_code == 200
        assert client.get(f"/api/v1/plans/{plan['id']}", headers=auth_headers(users.coach)).status_code == 404


# =============================================================================
# Sessions
# =============================================================================

class TestSessions:

    def test_athlete_completes_session(self, client, users, plan):
        session_id = plan["upcomingSessions"][0]["id"]

        response = client.patch(
            f"/api/v1/plans/sessions/{session_id}",
            headers=auth_headers(users.athlete),
            json={"completed": True, "athleteNotes": "Easy indeed"},
        )

        assert response.status_code == 200
        assert response.json()["completed"] is True
        detail = client.get(f"/api/v1/plans/{plan['id']}", headers=auth_headers(users.coach)).json()
        assert detail["stats"] == {"completedSessions": 1, "totalSessions": 2, "completionRate": 50}

        coach_inbox = client.get("/api/v1/notifications", headers=auth_headers(users.coach)).json()
        assert coach_inbox["notifications"][0]["type"] == "SESSION_COMPLETED"

    def test_completed_and_skipped_is_rejected(self, client, users, plan):
        session_id = plan["upcomingSessions"][0]["id"]

        response = client.patch(
            f"/api/v1/plans/sessions/{session_id}",
            headers=auth_headers(users.athlete),
            json={"completed": True, "skipped": True},
        )

        assert response.status_code == 400

    def test_add_session_and_feedback(self, client, users, plan):
        added = client.post(
            f"/api/v1/plans/{plan['id']}/sessions",
            headers=auth_headers(users.coach),
            json={"date": "2026-06-06T00:00:00Z", "sessionType": "LONG_RUN", "title": "Long 18k"},
        )
        assert added.status_code == 201

        feedback = client.patch(
            f"/api/v1/plans/sessions/{added.json()['id']}/feedback",
            headers=auth_headers(users.coach),
            json={"feedback": "Keep it conversational"},
        )
        assert feedback.json()["coachFeedback"] == "Keep it conversational"

    def test_stranger_cannot_touch_session(self, client, users, plan):
        session_id = plan["upcomingSessions"][0]["id"]

        response = client.patch(
            f"/api/v1/plans/sessions/{session_id}",
            headers=auth_headers(users.other_athlete),
            json={"completed": True},
        )

        assert response.status_code == 404


# =============================================================================
# Calendar
# =============================================================================

class TestCalendar:

    def test_range(self, client, users, plan):
        response = client.get(
            "/api/v1/plans/calendar",
            headers=auth_headers(users.athlete),
            params={"from": "2026-06-01T00:00:00Z", "to": "2026-06-03T00:00:00Z"},
        )

        sessions = response.json()["sessions"]
        assert [s["title"] for s in sessions] == ["Easy 8k"]
        assert sessions[0]["planName"] == "10k build"

    def test_inverted_range(self, client, users):
        response = client.get(
            "/api/v1/plans/calendar",
            headers=auth_headers(users.athlete),
            params={"from": "2026-06-03T00:00:00Z", "to": "2026-06-01T00:00:00Z"},
        )

        assert response.status_code == 400


# =============================================================================
# Templates and duplication
# =============================================================================

class TestTemplates:

    @pytest.fixture
    def template(self, client, users, plan):
        response = client.post(
            f"/api/v1/plans/{plan['id']}/create-template",
            headers=auth_headers(users.coach),
            json={"name": "10k template"},
        )
        assert response.status_code == 201
        return response.json()

    def test_create_and_list(self, client, users, template):
        assert template["durationDays"] == 29
        assert [(s["dayOffset"], s["title"]) for s in template["sessions"]] == [(1, "Easy 8k"), (3, "6x800m")]

        listed = client.get("/api/v1/plans/templates", headers=auth_headers(users.coach)).json()
        assert [t["id"] for t in listed["templates"]] == [template["id"]]
        assert listed["templates"][0]["sessionCount"] == 2

    def test_athletes_cannot_use_templates(self, client, users, template):
        response = client.get("/api/v1/plans/templates", headers=auth_headers(users.athlete))
        assert response.status_code == 403

    def test_create_plan_from_template(self, client, users, template):
        response = client.post(
            f"/api/v1/plans/templates/{template['id']}/create-plan",
            headers=auth_headers(users.coach),
            json={"athleteId": users.athlete.id, "planName": "Autumn 10k", "startDate": "2026-09-07T00:00:00Z"},
        )

        assert response.status_code == 201
        created = response.json()
        assert created["name"] == "Autumn 10k"
        assert created["startDate"].startswith("2026-09-07")
        assert created["sessionCount"] == 2

    def test_rename_and_delete(self, client, users, template):
        url = f"/api/v1/plans/templates/{template['id']}"

        renamed = client.put(url, headers=auth_headers(users.coach), json={"name": "Base 10k"})
        assert renamed.json()["name"] == "Base 10k"

        assert client.delete(url, headers=auth_headers(users.other_coach)).status_code == 404
        assert client.delete(url, headers=auth_headers(users.coach)).status_code == 200
        assert client.get("/api/v1/plans/templates", headers=auth_headers(users.coach)).json()["templates"] == []

    def test_duplicate(self, client, users, plan):
        response = client.post(
            f"/api/v1/plans/{plan['id']}/duplicate",
            headers=auth_headers(users.coach),
            json={"targetAthleteId": users.athlete.id, "startDate": "2026-07-06T00:00:00Z"},
        )

        assert response.status_code == 201
        copy = response.json()
        assert copy["name"] == "10k build (copy)"
        assert copy["endDate"].startswith("2026-08-04")

        plans = client.get("/api/v1/plans", headers=auth_headers(users.athlete)).json()["plans"]
        assert len(plans) == 2

    def test_duplicate_to_unknown_athlete(self, client, users, plan):
        response = client.post(
            f"/api/v1/plans/{plan['id']}/duplicate",
            headers=auth_headers(users.coach),
            json={"targetAthleteId": users.other_athlete.id, "startDate": "2026-07-06T00:00:00Z"},
        )
        assert response.status_code == 403
