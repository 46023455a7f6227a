"""
Mapping of Strava activity payloads to local Activity rows.

Pure functions; no I/O.
"""

import logging
from typing import Optional

from app.shared.constants import STRAVA_TO_ACTIVITY_TYPE, ActivityType
from app.shared.dates import parse_iso_datetime
from .config import SYNCED_ACTIVITY_TYPES

logger = logging.getLogger(__name__)


def strava_type(data: dict) -> Optional[str]:
    """Strava's coarse 'type', falling back to 'sport_type'."""
    return data.get("type") or data.get("sport_type")


def is_synced_type(data: dict) -> bool:
    return strava_type(data) in SYNCED_ACTIVITY_TYPES


def _round_opt(value) -> Optional[int]:
    return int(round(value)) if value is not None else None


def map_strava_activity(data: dict) -> dict:
    """
    Build Activity column values from a Strava summary activity.

    - distance: meters -> km
    - avg_pace: moving_time / distance_km (0 when distance is 0)
    - elevation and heart rate rounded to integers

    Args:
        data: Activity dict from /athlete/activities or /activities/{id}

    Returns:
        Column values (without user_id)

    Raises:
        KeyError/ValueError: If required fields are missing or malformed
    """
    distance_km = float(data.get("distance") or 0) / 1000
    moving_time = int(data.get("moving_time") or 0)
    avg_pace = moving_time / distance_km if distance_km > 0 else 0.0

    start_latlng = data.get("start_latlng") or []
    summary_map = data.get("map") or {}

    return {
        "strava_id": int(data["id"]),
        "name": data.get("name") or "Strava activity",
        "activity_type": STRAVA_TO_ACTIVITY_TYPE.get(strava_type(data), ActivityType.RUNNING).value,
        "date": parse_iso_datetime(data["start_date"]),
        "distance": round(distance_km, 3),
        "duration": moving_time,
        "elevation_gain": _round_opt(data.get("total_elevation_gain")) or 0,
        "avg_pace": round(avg_pace, 1),
        "avg_heart_rate": _round_opt(data.get("average_heartrate")),
        "max_heart_rate": _round_opt(data.get("max_heartrate")),
        "calories": _round_opt(data.get("calories")),
        "start_lat": start_latlng[0] if len(start_latlng) == 2 else None,
        "start_lng": start_latlng[1] if len(start_latlng) == 2 else None,
        "map_polyline": summary_map.get("summary_polyline") or None,
        "splits": data.get("splits_metric"),
    }
