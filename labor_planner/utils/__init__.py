"""Shared helpers."""

from .time_of_day import (
    MINUTES_PER_DAY,
    minutes_since_midnight,
    time_from_minutes,
    wrapped_duration,
    time_in_window,
    offset_in_window,
    windows_overlap,
)

__all__ = [
    "MINUTES_PER_DAY",
    "minutes_since_midnight",
    "time_from_minutes",
    "wrapped_duration",
    "time_in_window",
    "offset_in_window",
    "windows_overlap",
]
