"""
Tests for the Strava token vault.

The OAuth client is replaced by an AsyncMock; no network.
"""

from datetime import timedelta
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import select, update

from app.shared.dates import utcnow
from app.shared.errors import Conflict
from app.features.strava.errors import StravaOAuthError
from app.features.strava.models import StravaToken
from app.features.strava.repository import StravaTokenRepository
from app.features.strava.vault import TokenVault


def stored_token(user_id, expires_in=timedelta(hours=3), athlete_id="111") -> StravaToken:
    return StravaToken(
        user_id=user_id,
        strava_athlete_id=athlete_id,
        access_token="old-access",
        refresh_token="old-refresh",
        expires_at=utcnow() + expires_in,
    )


def token_response(access="new-access", refresh="new-refresh", hours=6, athlete_id=None) -> dict:
    data = {
        "access_token": access,
        "refresh_token": refresh,
        "expires_at": int((utcnow() + timedelta(hours=hours)).timestamp()),
    }
    if athlete_id is not None:
        data["athlete"] = {"id": athlete_id, "firstname": "Alice"}
    return data


def mock_oauth(response=None, error=None) -> AsyncMock:
    oauth = AsyncMock()
    if error is not None:
        oauth.refresh_token.side_effect = error
    else:
        oauth.refresh_token.return_value = response or token_response()
    oauth.deauthorize.return_value = True
    return oauth


async def reload(db, user_id) -> StravaToken:
    return await StravaTokenRepository(db).get_by_user_id(user_id, fresh=True)


# =============================================================================
# get_valid_access_token
# =============================================================================

class TestGetValidAccessToken:

    @pytest.mark.asyncio
    async def test_no_record(self, db, users):
        oauth = mock_oauth()
        assert await TokenVault(db, oauth).get_valid_access_token(users.athlete.id) is None
        oauth.refresh_token.assert_not_called()

    @pytest.mark.asyncio
    async def test_fresh_token_needs_no_provider_call(self, db, users, seed):
        seed(stored_token(users.athlete.id))
        oauth = mock_oauth()

        token = await TokenVault(db, oauth).get_valid_access_token(users.athlete.id)

        assert token == "old-access"
        oauth.refresh_token.assert_not_called()

    @pytest.mark.asyncio
    async def test_expired_token_is_refreshed_once(self, db, users, seed):
        seed(stored_token(users.athlete.id, expires_in=-timedelta(hours=1)))
        oauth = mock_oauth(token_response(access="A2", refresh="R2", hours=6))

        token = await TokenVault(db, oauth).get_valid_access_token(users.athlete.id)

        assert token == "A2"
        oauth.refresh_token.assert_awaited_once_with("old-refresh")
        stored = await reload(db, users.athlete.id)
        assert stored.access_token == "A2"
        assert stored.refresh_token == "R2"
        assert stored.expires_at > utcnow() + timedelta(hours=5)

    @pytest.mark.asyncio
    async def test_refreshed_token_is_reused(self, db, users, seed):
        seed(stored_token(users.athlete.id, expires_in=-timedelta(hours=1)))
        oauth = mock_oauth()
        vault = TokenVault(db, oauth)

        first = await vault.get_valid_access_token(users.athlete.id)
        second = await vault.get_valid_access_token(users.athlete.id)

        assert first == second == "new-access"
        assert oauth.refresh_token.await_count == 1

    @pytest.mark.asyncio
    async def test_refresh_failure_leaves_record_untouched(self, db, users, seed):
        seed(stored_token(users.athlete.id, expires_in=-timedelta(hours=1)))
        oauth = mock_oauth(error=StravaOAuthError("Token refresh failed: 400"))

        token = await TokenVault(db, oauth).get_valid_access_token(users.athlete.id)

        assert token is None
        stored = await reload(db, users.athlete.id)
        assert stored.access_token == "old-access"
        assert stored.refresh_token == "old-refresh"

    @pytest.mark.asyncio
    async def test_malformed_refresh_response(self, db, users, seed):
        seed(stored_token(users.athlete.id, expires_in=-timedelta(hours=1)))
        oauth = mock_oauth({"access_token": "only-half"})

        assert await TokenVault(db, oauth).get_valid_access_token(users.athlete.id) is None
        assert (await reload(db, users.athlete.id)).access_token == "old-access"

    @pytest.mark.asyncio
    async def test_concurrent_refresh_returns_winner(self, db, users, seed):
        """Another writer stores a pair between our read and our write."""
        seed(stored_token(users.athlete.id, expires_in=-timedelta(hours=1)))
        oauth = mock_oauth(token_response(access="loser"))

        async def other_writer_first(user_id, *observed, **values):
            await db.execute(
                update(StravaToken)
                .where(StravaToken.user_id == user_id)
                .values(
                    access_token="winner",
                    refresh_token="winner-refresh",
                    expires_at=utcnow() + timedelta(hours=6),
                )
            )
            return False

        with patch.object(StravaTokenRepository, "replace_if_unchanged", side_effect=other_writer_first):
            token = await TokenVault(db, oauth).get_valid_access_token(users.athlete.id)

        assert token == "winner"
        assert (await reload(db, users.athlete.id)).refresh_token == "winner-refresh"


# =============================================================================
# Link / unlink
# =============================================================================

class TestLink:

    @pytest.mark.asyncio
    async def test_link_creates_record(self, db, users):
        vault = TokenVault(db, mock_oauth())

        token = await vault.link(users.athlete.id, token_response(athlete_id=555), scope="read")

        assert token.strava_athlete_id == "555"
        assert token.scope == "read"
        assert await vault.get_valid_access_token(users.athlete.id) == "new-access"

    @pytest.mark.asyncio
    async def test_relink_replaces_pair(self, db, users, seed):
        seed(stored_token(users.athlete.id, athlete_id="555"))
        vault = TokenVault(db, mock_oauth())

        await vault.link(users.athlete.id, token_response(access="again", athlete_id=555))

        result = await db.execute(select(StravaToken).where(StravaToken.user_id == users.athlete.id))
        rows = result.scalars().all()
        assert len(rows) == 1
        assert rows[0].access_token == "again"

    @pytest.mark.asyncio
    async def test_athlete_linked_to_another_user(self, db, users, seed):
        seed(stored_token(users.other_athlete.id, athlete_id="555"))

        with pytest.raises(Conflict):
            await TokenVault(db, mock_oauth()).link(users.athlete.id, token_response(athlete_id=555))

    @pytest.mark.asyncio
    async def test_unlink(self, db, users, seed):
        seed(stored_token(users.athlete.id))
        oauth = mock_oauth()
        vault = TokenVault(db, oauth)

        assert await vault.unlink(users.athlete.id)
        oauth.deauthorize.assert_awaited_once_with("old-access")
        assert await vault.get(users.athlete.id) is None
        assert not await vault.unlink(users.athlete.id)

    @pytest.mark.asyncio
    async def test_unlink_when_revoke_fails(self, db, users, seed):
        seed(stored_token(users.athlete.id))
        oauth = mock_oauth()
        oauth.deauthorize.return_value = False

        assert await TokenVault(db, oauth).unlink(users.athlete.id)
        assert await TokenVault(db, oauth).get(users.athlete.id) is None
