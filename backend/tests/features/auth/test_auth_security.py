"""
Tests for session tokens and password hashing.
"""

from datetime import timedelta

import pytest
from jose import jwt

from app.config import settings
from app.shared.dates import utcnow
from app.shared.errors import Unauthenticated, ValidationError
from app.features.auth.security import (
    hash_password,
    issue_session,
    issue_state_token,
    verify_password,
    verify_session,
    verify_state_token,
)


# =============================================================================
# Passwords
# =============================================================================

class TestPasswords:

    def test_hash_and_verify(self):
        hashed = hash_password("correct horse")
        assert hashed != "correct horse"
        assert verify_password("correct horse", hashed)
        assert not verify_password("wrong horse", hashed)

    def test_hashes_are_salted(self):
        assert hash_password("same") != hash_password("same")

    def test_overlong_password_rejected(self):
        with pytest.raises(ValidationError):
            hash_password("x" * 73)

    def test_overlong_password_never_verifies(self):
        hashed = hash_password("x" * 72)
        assert not verify_password("x" * 73, hashed)


# =============================================================================
# Session tokens
# =============================================================================

class TestSessionTokens:

    def test_round_trip(self):
        token = issue_session("user-1", "a@example.com", "COACH")
        claims = verify_session(token)

        assert claims.user_id == "user-1"
        assert claims.email == "a@example.com"
        assert claims.role == "COACH"
        assert claims.is_coach

    def test_claims_include_sub_and_expiry(self):
        token = issue_session("user-1", "a@example.com", "ATHLETE")
        payload = jwt.get_unverified_claims(token)

        assert payload["sub"] == "user-1"
        assert payload["userId"] == "user-1"
        assert payload["exp"] > payload["iat"]

    def test_expired_token(self):
        token = issue_session("user-1", "a@example.com", "ATHLETE", expires_delta=timedelta(seconds=-10))
        with pytest.raises(Unauthenticated):
            verify_session(token)

    def test_wrong_secret(self):
        token = jwt.encode(
            {"userId": "user-1", "email": "a@example.com", "role": "ATHLETE",
             "exp": utcnow() + timedelta(hours=1)},
            "another-secret-that-is-also-long-enough-000",
            algorithm="HS256",
        )
        with pytest.raises(Unauthenticated):
            verify_session(token)

    def test_tampered_token(self):
        token = issue_session("user-1", "a@example.com", "ATHLETE")
        header, payload, signature = token.split(".")
        tampered = ".".join([header, payload, signature[::-1]])
        with pytest.raises(Unauthenticated):
            verify_session(tampered)

    @pytest.mark.parametrize("token", [None, "", "not-a-jwt", "a.b.c"])
    def test_malformed(self, token):
        with pytest.raises(Unauthenticated):
            verify_session(token)

    def test_missing_claims(self):
        token = jwt.encode(
            {"sub": "user-1", "exp": utcnow() + timedelta(hours=1)},
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )
        with pytest.raises(Unauthenticated):
            verify_session(token)

    def test_unknown_role(self):
        token = jwt.encode(
            {"userId": "user-1", "email": "a@example.com", "role": "ADMIN",
             "exp": utcnow() + timedelta(hours=1)},
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )
        with pytest.raises(Unauthenticated):
            verify_session(token)

    def test_failures_are_indistinguishable(self):
        expired = issue_session("u", "a@example.com", "ATHLETE", expires_delta=timedelta(seconds=-1))
        messages = set()
        for token in (expired, "garbage", None):
            with pytest.raises(Unauthenticated) as exc:
                verify_session(token)
            messages.add(exc.value.message)
        assert messages == {"Not authenticated"}


# =============================================================================
# OAuth state tokens
# =============================================================================

class TestStateTokens:

    def test_round_trip(self):
        assert verify_state_token(issue_state_token("user-1")) == "user-1"

    def test_session_token_is_not_a_state_token(self):
        session = issue_session("user-1", "a@example.com", "ATHLETE")
        assert verify_state_token(session) is None

    @pytest.mark.parametrize("state", [None, "", "garbage"])
    def test_invalid(self, state):
        assert verify_state_token(state) is None
