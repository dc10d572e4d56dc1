"""
Human-readable formatting of activity values.

Inputs are in the units ActivityData stores (cm, mm/s, ms, °C, m, bpm).
Absent values are shown as NO_DATA_TEXT via format_optional().
"""
from datetime import datetime
from typing import Callable, Optional, TypeVar

V = TypeVar("V")

NO_DATA_TEXT = "no data"


def format_optional(value: Optional[V], formatter: Callable[[V], str]) -> str:
    if value is None:
        return NO_DATA_TEXT
    return formatter(value)


def format_distance(distance_cm: int, decimals: int = 1) -> str:
    """
    Format a distance given in centimeters.

    Below 1 km: whole meters ("850m"). From 1 km: kilometers with `decimals`
    places; the 1-decimal form drops a trailing ".0" ("12km", "12.5km").
    """
    meters = distance_cm // 100
    if meters < 1000:
        return f"{meters}m"

    km = meters / 1000
    if decimals == 1:
        text = f"{km:.1f}".rstrip("0").rstrip(".")
    elif decimals in (2, 3):
        text = f"{km:.{decimals}f}"
    else:
        text = str(int(km))
    return text + "km"


def format_duration(duration_ms: int) -> str:
    """Format milliseconds as "42s", "5m 3s", "1h 2m 3s" or "2d 1h 2m 3s"."""
    seconds = duration_ms // 1000
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}m {seconds % 60}s"
    if seconds < 86400:
        hours, rest = divmod(seconds, 3600)
        return f"{hours}h {rest // 60}m {rest % 60}s"
    days, rest = divmod(seconds, 86400)
    hours, rest = divmod(rest, 3600)
    return f"{days}d {hours}h {rest // 60}m {rest % 60}s"


def format_speed(speed_mm_s: float) -> str:
    """mm/s → "12.3km/h"."""
    return f"{speed_mm_s * 3.6 / 1000:.1f}km/h"


def format_temperature(celsius: int) -> str:
    return f"{celsius}°C"


def format_altitude(meters: float) -> str:
    return f"{meters:.0f}m"


def format_elevation(meters: int) -> str:
    return f"{meters}m"


def format_gps_accuracy(meters: int) -> str:
    return f"{meters}m"


def format_heart_rate(bpm: int) -> str:
    return f"{bpm}bpm"


# ─── Time stamps ──────────────────────────────────────────────────────────────

def format_time(value: datetime) -> str:
    return value.strftime("%d.%m.%y %H:%M")


def format_date(value: datetime) -> str:
    return value.strftime("%d.%m.%y")


def format_hh_mm(value: datetime) -> str:
    return value.strftime("%H:%M")


def format_hh_mm_ss(value: datetime) -> str:
    return value.strftime("%H:%M:%S")
