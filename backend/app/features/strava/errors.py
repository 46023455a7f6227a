"""
Strava integration errors.

StravaError
├── StravaAPIError      non-2xx or transport failure on the REST API
├── StravaAuthError     the access token was rejected (401)
└── StravaOAuthError    token exchange / refresh failed
"""


class StravaError(Exception):
    """Base Strava error."""
    pass


class StravaAPIError(StravaError):
    """Strava API error."""
    pass


class StravaAuthError(StravaError):
    """Authentication/authorization error."""
    pass


class StravaOAuthError(StravaError):
    """OAuth-related error."""
    pass
