"""Time-of-day arithmetic for shift and deduction windows.

Shift and deduction windows are expressed as wall-clock times. A window whose
end is earlier than its start spans midnight. All wrap handling lives here so
gross duration, deduction duration and overlap checks agree with each other.
"""

from datetime import time

MINUTES_PER_DAY = 24 * 60


def minutes_since_midnight(value: time) -> int:
    """Convert a time of day to whole minutes since midnight."""
    return value.hour * 60 + value.minute


def time_from_minutes(minutes: int) -> time:
    """Convert minutes since midnight (any integer) back to a time of day."""
    minutes %= MINUTES_PER_DAY
    return time(hour=minutes // 60, minute=minutes % 60)


def wrapped_duration(start: time, end: time) -> int:
    """
    Duration in minutes from start to end, wrapping past midnight.

    Args:
        start: Window start
        end: Window end (earlier than start means the next day)

    Returns:
        Minutes between start and end (0 when start == end)

    Example:
        >>> wrapped_duration(time(22, 0), time(6, 0))
        480
    """
    duration = minutes_since_midnight(end) - minutes_since_midnight(start)
    if duration < 0:
        duration += MINUTES_PER_DAY
    return duration


def time_in_window(value: time, start: time, end: time) -> bool:
    """
    Check whether a time falls inside the half-open window [start, end).

    Args:
        value: Time to test
        start: Window start
        end: Window end, may be before start for windows spanning midnight

    Returns:
        True if value is inside the window
    """
    if end < start:
        return value >= start or value < end
    return start <= value < end


def offset_in_window(value: time, start: time) -> int:
    """Minutes from the window start to value, following the clock forward."""
    return wrapped_duration(start, value)


def windows_overlap(
    first_start: time,
    first_end: time,
    second_start: time,
    second_end: time,
) -> bool:
    """
    Check whether two wall-clock windows overlap.

    Each window is unrolled to [start, start + duration) on a minute axis.
    The second window is also compared one day earlier and later so that a
    window straddling midnight still meets a window just after midnight.

    Returns:
        True if the half-open windows share at least one minute
    """
    a_start = minutes_since_midnight(first_start)
    a_end = a_start + wrapped_duration(first_start, first_end)
    b_start = minutes_since_midnight(second_start)
    b_end = b_start + wrapped_duration(second_start, second_end)

    for shift in (-MINUTES_PER_DAY, 0, MINUTES_PER_DAY):
        if a_start < b_end + shift and a_end > b_start + shift:
            return True
    return False
