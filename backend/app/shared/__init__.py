"""
Shared utilities (NOT business logic).

Usage:
    from app.shared import BaseRepository, NotFound, utcnow
    from app.shared.formatters import format_pace
"""
from .constants import (
    UserRole,
    InvitationStatus,
    ActivityType,
    StravaActivityType,
    PlanStatus,
    SessionType,
    NotificationType,
    STRAVA_TO_ACTIVITY_TYPE,
    SYNCED_STRAVA_TYPES,
)
from .dates import utcnow
from .errors import (
    AppError,
    Unauthenticated,
    Forbidden,
    NotFound,
    ValidationError,
    Conflict,
    UpstreamFailure,
    InvalidCredentials,
)
from .formatters import format_duration, format_pace, format_distance_km
from .polyline import decode_polyline
from .repository import BaseRepository
from .schemas import CamelModel, FeedbackRequest, MessageResponse, UtcDatetime

__all__ = [
    # constants
    "UserRole",
    "InvitationStatus",
    "ActivityType",
    "StravaActivityType",
    "PlanStatus",
    "SessionType",
    "NotificationType",
    "STRAVA_TO_ACTIVITY_TYPE",
    "SYNCED_STRAVA_TYPES",
    # dates
    "utcnow",
    # errors
    "AppError",
    "Unauthenticated",
    "Forbidden",
    "NotFound",
    "ValidationError",
    "Conflict",
    "UpstreamFailure",
    "InvalidCredentials",
    # formatters
    "format_duration",
    "format_pace",
    "format_distance_km",
    # polyline
    "decode_polyline",
    # base classes
    "BaseRepository",
    "CamelModel",
    "FeedbackRequest",
    "MessageResponse",
    "UtcDatetime",
]
