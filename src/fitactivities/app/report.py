"""
Plain-text lines describing import progress, activities and records.

Used by the command-line entry point; nothing here touches state.
"""
from pathlib import Path
from typing import List

from fitactivities.analysis.format import (
    format_altitude,
    format_distance,
    format_duration,
    format_elevation,
    format_gps_accuracy,
    format_heart_rate,
    format_hh_mm_ss,
    format_optional,
    format_speed,
    format_temperature,
    format_time,
)
from fitactivities.app.importer import Importer
from fitactivities.models.activity import Activity, ActivityData, RecordData, Stat


def progress_line(importer: Importer) -> str:
    done = importer.parsed() + importer.failed()
    return f"{done}/{len(importer.activities)} FIT files ({importer.failed()} errors)"


def _summary(data: ActivityData) -> str:
    start = format_optional(data.start_time, format_time)
    distance = format_optional(data.total_distance, format_distance)
    duration = format_optional(data.duration.total, format_duration)
    return f"{start}  {distance:>8}  {duration:>12}"


def activity_line(activity: Activity) -> str:
    name = Path(activity.path).name

    def on_loading(prev):
        if prev is None:
            return f"{'loading':<40}{name}"
        return f"{_summary(prev):<40}{name} (reloading)"

    return activity.data.fold(
        lambda: f"{'waiting':<40}{name}",
        on_loading,
        lambda error: f"{'error: ' + str(error):<40}{name}",
        lambda data: f"{_summary(data):<40}{name}",
    )


def _stat_line(label: str, stat: Stat, formatter) -> str:
    parts = []
    for name in ("min", "avg", "max"):
        value = getattr(stat, name)
        parts.append(f"{name} {format_optional(value, formatter)}")
    return f"{label:<14}" + "  ".join(parts)


def activity_details(data: ActivityData) -> List[str]:
    """Multi-line statistics block for one parsed activity."""
    return [
        f"{'start':<14}{format_optional(data.start_time, format_time)}",
        f"{'finish':<14}{format_optional(data.finish_time, format_time)}",
        f"{'duration':<14}total {format_optional(data.duration.total, format_duration)}"
        f"  active {format_optional(data.duration.active, format_duration)}"
        f"  pause {format_optional(data.duration.pause, format_duration)}",
        f"{'distance':<14}{format_optional(data.total_distance, format_distance)}",
        _stat_line("speed", data.speed, format_speed),
        _stat_line("heart rate", data.heart_rate, format_heart_rate),
        _stat_line("altitude", data.altitude, format_altitude),
        f"{'elevation':<14}ascent {format_optional(data.elevation.ascent, format_elevation)}"
        f"  descent {format_optional(data.elevation.descent, format_elevation)}",
        _stat_line("temperature", data.temperature, format_temperature),
        _stat_line("gps accuracy", data.gps_accuracy, format_gps_accuracy),
        f"{'sessions':<14}{data.no_sessions}",
        f"{'records':<14}{data.no_records}",
    ]


def record_line(record: RecordData, index: int, total: int) -> str:
    fields = [
        format_hh_mm_ss(record.time),
        format_optional(record.distance, lambda d: format_distance(d, decimals=2)),
        format_optional(record.speed, format_speed),
        format_optional(record.heart_rate, format_heart_rate),
        format_optional(record.altitude, format_altitude),
        format_optional(record.temperature, format_temperature),
    ]
    return f"[{index + 1}/{total}] " + "  ".join(f"{f:>10}" for f in fields)
