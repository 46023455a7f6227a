"""
Formatting utilities for notification texts.
"""


def format_duration(seconds: int | None) -> str:
    """
    Format a duration as 'H:MM:SS' (or 'M:SS' under an hour).

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted string (e.g., '1:05:30')
    """
    if seconds is None or seconds < 0:
        return "—"

    h, rest = divmod(int(seconds), 3600)
    m, s = divmod(rest, 60)
    if h:
        return f"{h}:{m:02d}:{s:02d}"
    return f"{m}:{s:02d}"


def format_pace(pace_s_km: float | None) -> str:
    """
    Format pace as 'M:SS /km'.

    Args:
        pace_s_km: Pace in seconds per km

    Returns:
        Formatted string (e.g., '5:30 /km')
    """
    if not pace_s_km:
        return "—"

    minutes, seconds = divmod(int(round(pace_s_km)), 60)
    return f"{minutes}:{seconds:02d} /km"


def format_distance_km(km: float) -> str:
    """
    Format distance.

    Args:
        km: Distance in kilometers

    Returns:
        Formatted string (e.g., '12.5 km' or '850 m')
    """
    if km < 1:
        return f"{int(km * 1000)} m"
    return f"{km:.1f} km"
