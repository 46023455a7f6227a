"""
HTTP tests for authentication and the error envelope.
"""

from datetime import timedelta

from app.features.auth.security import issue_session

from tests.helpers import PASSWORD, auth_headers


# =============================================================================
# Error envelope
# =============================================================================

class TestErrorEnvelope:

    def test_missing_token(self, client, users):
        response = client.get("/api/v1/auth/me")

        assert response.status_code == 401
        assert response.json() == {"error": "Not authenticated"}
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_expired_token(self, client, users):
        token = issue_session(
            users.coach.id, users.coach.email, users.coach.role, expires_delta=timedelta(minutes=-1)
        )

        response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json() == {"error": "Not authenticated"}

    def test_validation_error_shape(self, client):
        response = client.post("/api/v1/auth/register", json={"email": "not-an-email", "name": "X"})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Validation error"
        assert {"email", "password", "name"} <= set(body["details"])
        assert all(isinstance(messages, list) for messages in body["details"].values())

    def test_unknown_route(self, client):
        response = client.get("/api/v1/nope")

        assert response.status_code == 404
        assert "error" in response.json()

    def test_health(self, client):
        assert client.get("/health").json()["status"] == "healthy"


# =============================================================================
# Register / login
# =============================================================================

class TestRegisterAndLogin:

    def test_register_then_login(self, client):
        response = client.post("/api/v1/auth/register", json={
            "email": "New.Runner@Example.com",
            "password": "longenough",
            "name": "New Runner",
        })

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "User registered successfully"
        assert body["user"]["email"] == "new.runner@example.com"
        assert body["user"]["role"] == "ATHLETE"
        assert "passwordHash" not in body["user"]

        login = client.post("/api/v1/auth/login", json={
            "email": "new.runner@example.com",
            "password": "longenough",
        })
        assert login.status_code == 200
        me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {login.json()['token']}"})
        assert me.json()["user"]["name"] == "New Runner"

    def test_duplicate_email(self, client, users):
        response = client.post("/api/v1/auth/register", json={
            "email": users.coach.email,
            "password": "longenough",
            "name": "Copycat",
        })

        assert response.status_code == 400
        assert "email" in response.json()["details"]

    def test_bad_credentials(self, client, users):
        wrong_password = client.post("/api/v1/auth/login", json={
            "email": users.coach.email, "password": "wrong-password",
        })
        unknown_email = client.post("/api/v1/auth/login", json={
            "email": "nobody@example.com", "password": PASSWORD,
        })

        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json()

    def test_me_includes_coach(self, client, users):
        response = client.get("/api/v1/auth/me", headers=auth_headers(users.athlete))

        user = response.json()["user"]
        assert user["coachId"] == users.coach.id
        assert user["coach"]["name"] == users.coach.name

    def test_change_password(self, client, users):
        response = client.post(
            "/api/v1/auth/change-password",
            headers=auth_headers(users.coach),
            json={"currentPassword": PASSWORD, "newPassword": "brand-new-password"},
        )
        assert response.status_code == 200

        login = client.post("/api/v1/auth/login", json={
            "email": users.coach.email, "password": "brand-new-password",
        })
        assert login.status_code == 200


# =============================================================================
# Users
# =============================================================================

class TestUsers:

    def test_update_profile(self, client, users):
        response = client.put(
            "/api/v1/users/profile",
            headers=auth_headers(users.athlete),
            json={"name": "Alice Fast"},
        )

        assert response.status_code == 200
        assert response.json()["user"]["name"] == "Alice Fast"

    def test_public_profile_has_no_email(self, client, users):
        response = client.get(f"/api/v1/users/{users.coach.id}", headers=auth_headers(users.athlete))

        assert response.status_code == 200
        assert response.json()["name"] == users.coach.name
        assert "email" not in response.json()

    def test_unknown_user(self, client, users):
        response = client.get("/api/v1/users/missing", headers=auth_headers(users.athlete))
        assert response.status_code == 404
