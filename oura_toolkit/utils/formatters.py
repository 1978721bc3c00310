"""Formatting helpers for turning Oura data into human-readable strings."""

import math
from datetime import datetime, timedelta, timezone


def _round_half_up(value: float, digits: int = 1) -> float:
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def _format_number(value: float) -> str:
    """Render 20.0 as "20" and 26.7 as "26.7"."""
    return f"{value:g}"


def format_duration(seconds: float) -> str:
    """Convert seconds to a duration string.

    Examples:
        27000 -> "7h 30m", 7200 -> "2h", 1800 -> "30m"
    """
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)

    if hours == 0:
        return f"{minutes}m"
    if minutes == 0:
        return f"{hours}h"
    return f"{hours}h {minutes}m"


def seconds_to_hours(seconds: float) -> float:
    """Convert seconds to hours with one decimal (27000 -> 7.5)."""
    return _round_half_up(seconds / 3600)


def format_time(iso_timestamp: str) -> str:
    """Format an ISO timestamp as a 12-hour clock time in its own offset.

    Examples:
        "2024-01-15T22:30:00-05:00" -> "10:30 PM"
    """
    try:
        moment = datetime.fromisoformat(iso_timestamp)
    except (TypeError, ValueError):
        return "Invalid Date"

    hour = moment.hour % 12 or 12
    meridiem = "AM" if moment.hour < 12 else "PM"
    return f"{hour}:{moment.minute:02d} {meridiem}"


def get_today(now: datetime | None = None) -> str:
    """Get today's UTC date in YYYY-MM-DD format."""
    return get_days_ago(0, now=now)


def get_days_ago(days: int, now: datetime | None = None) -> str:
    """Get the UTC date ``days`` days ago in YYYY-MM-DD format."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return (now - timedelta(days=days)).date().isoformat()


def percentage(part: float, whole: float) -> float:
    """Calculate a percentage with one decimal, 0 when ``whole`` is 0."""
    if whole == 0:
        return 0
    return _round_half_up(part / whole * 100)


def format_score(score: int | None) -> str:
    """Format a score with its label (85 -> "85 (Optimal)")."""
    if score is None:
        return "No data"

    if score >= 85:
        label = "Optimal"
    elif score >= 70:
        label = "Good"
    elif score >= 60:
        label = "Fair"
    else:
        label = "Pay attention"

    return f"{score} ({label})"


def format_sleep_stages(deep: float, rem: float, light: float, total_sleep: float) -> str:
    """Summarize sleep stage durations and their share of total sleep."""
    stages = [("Deep", deep), ("REM", rem), ("Light", light)]
    return " | ".join(
        f"{name}: {format_duration(seconds)} "
        f"({_format_number(percentage(seconds, total_sleep))}%)"
        for name, seconds in stages
    )
