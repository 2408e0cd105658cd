from __future__ import annotations

import math
from datetime import date

MILES_PER_METER = 0.000621371
FEET_PER_METER = 3.28084
METERS_PER_5K = 5000.0


def meters_to_miles(meters: float) -> float:
    return meters * MILES_PER_METER


def meters_to_feet(meters: float) -> float:
    return meters * FEET_PER_METER


def seconds_to_minutes(seconds: float) -> float:
    return seconds / 60


def round_half_up(value: float, places: int = 0) -> float:
    # round() is banker's rounding; report figures round .5 away from zero
    factor = 10**places
    return math.floor(value * factor + 0.5) / factor


def format_duration(total_minutes: float) -> str:
    hours = math.floor(total_minutes / 60)
    mins = int(round_half_up(total_minutes % 60))
    if hours > 0:
        return f"{hours}h {mins}m"
    return f"{mins}m"


def format_pace(min_per_mile: float) -> str:
    total_seconds = int(round_half_up(min_per_mile * 60))
    mins, secs = divmod(total_seconds, 60)
    return f"{mins}:{secs:02d} /mile"


def format_speed(mph: float) -> str:
    return f"{round_half_up(mph, 1):.1f} mph"


def format_date(value: date) -> str:
    """Short US date, e.g. ``Mar 7, 2024``."""
    return f"{value:%b} {value.day}, {value.year}"


def format_long_date(value: date) -> str:
    return f"{value:%B} {value.day}, {value.year}"


def format_number(value: float) -> str:
    """Thousands separators, no trailing zeros: 1234.0 -> "1,234", 18.5 -> "18.5"."""
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.3f}".rstrip("0").rstrip(".")


def format_hour(hour: int) -> str:
    suffix = "AM" if hour < 12 else "PM"
    display = hour % 12 or 12
    return f"{display} {suffix}"


def format_clock(total_minutes: float) -> str:
    """Race-clock style time: ``24:05`` or ``1:02:30``."""
    total_seconds = int(round_half_up(total_minutes * 60))
    hours, remainder = divmod(total_seconds, 3600)
    mins, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}:{mins:02d}:{secs:02d}"
    return f"{mins}:{secs:02d}"
