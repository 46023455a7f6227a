"""
Shared enums and constants.

Single source of truth for role names, status values and the Strava
activity kinds we import.
"""

from enum import Enum


class UserRole(str, Enum):
    COACH = "COACH"
    ATHLETE = "ATHLETE"


class InvitationStatus(str, Enum):
    """
    Invitation lifecycle.

    PENDING is the only non-terminal state; the other three never
    transition anywhere.
    """
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    EXPIRED = "EXPIRED"
    CANCELLED = "CANCELLED"


class ActivityType(str, Enum):
    """Our internal activity types."""
    RUNNING = "RUNNING"
    TRAIL = "TRAIL"
    RACE = "RACE"
    TREADMILL = "TREADMILL"
    OTHER = "OTHER"


class StravaActivityType(str, Enum):
    """
    Activity types from Strava API.

    These are Strava's naming conventions, not ours.
    Use STRAVA_TO_ACTIVITY_TYPE to map to our types.
    """
    RUN = "Run"
    TRAIL_RUN = "TrailRun"
    VIRTUAL_RUN = "VirtualRun"
    RACE = "Race"


# Mapping: Strava type -> our ActivityType
STRAVA_TO_ACTIVITY_TYPE: dict[str, ActivityType] = {
    StravaActivityType.RUN.value: ActivityType.RUNNING,
    StravaActivityType.TRAIL_RUN.value: ActivityType.TRAIL,
    StravaActivityType.VIRTUAL_RUN.value: ActivityType.RUNNING,
    StravaActivityType.RACE.value: ActivityType.RACE,
}

# Allow-list for sync: everything else (rides, swims, walks...) is skipped
SYNCED_STRAVA_TYPES: frozenset[str] = frozenset(STRAVA_TO_ACTIVITY_TYPE)


class PlanStatus(str, Enum):
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    PAUSED = "PAUSED"
    CANCELLED = "CANCELLED"


class SessionType(str, Enum):
    EASY = "EASY"
    LONG_RUN = "LONG_RUN"
    TEMPO = "TEMPO"
    INTERVALS = "INTERVALS"
    FARTLEK = "FARTLEK"
    HILLS = "HILLS"
    RECOVERY = "RECOVERY"
    RACE = "RACE"
    REST = "REST"
    CROSS_TRAINING = "CROSS_TRAINING"


class NotificationType(str, Enum):
    PLAN_ASSIGNED = "PLAN_ASSIGNED"
    SESSION_COMPLETED = "SESSION_COMPLETED"
    SESSION_SKIPPED = "SESSION_SKIPPED"
    COACH_FEEDBACK = "COACH_FEEDBACK"
    ACTIVITY_SYNCED = "ACTIVITY_SYNCED"
    GOAL_MILESTONE = "GOAL_MILESTONE"
    GOAL_COMPLETED = "GOAL_COMPLETED"


class Gender(str, Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    OTHER = "OTHER"


class GearType(str, Enum):
    SHOES = "SHOES"
    WATCH = "WATCH"
    HEART_RATE = "HEART_RATE"
    CLOTHING = "CLOTHING"
    OTHER = "OTHER"


class GearStatus(str, Enum):
    ACTIVE = "ACTIVE"
    RETIRED = "RETIRED"


class GoalType(str, Enum):
    """What a goal measures. DURATION is in hours, STREAK in days."""
    DISTANCE = "DISTANCE"
    DURATION = "DURATION"
    WORKOUTS = "WORKOUTS"
    ELEVATION = "ELEVATION"
    STREAK = "STREAK"


class GoalPeriod(str, Enum):
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"
    CUSTOM = "CUSTOM"


class GoalStatus(str, Enum):
    """ACTIVE is the only state progress updates touch."""
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


MESSAGE_MAX_LENGTH = 2000
INVITATION_CODE_BYTES = 4  # 8 hex chars
