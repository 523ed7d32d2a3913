# apps/bookingapp/utils/time_calculator.py
import math
from datetime import datetime, time, timedelta
from datetime import timezone as dt_timezone

# End of an interval that has not been closed yet
OPEN_END = datetime.max.replace(tzinfo=dt_timezone.utc)


def overlaps(a_start, a_end, b_start, b_end):
    """
    Check whether two half-open intervals [start, end) share any instant

    Touching intervals (one ends exactly when the other starts) do not overlap.

    Args:
        a_start: Start of the first interval
        a_end: End of the first interval
        b_start: Start of the second interval
        b_end: End of the second interval

    Returns:
        Boolean indicating if the intervals overlap
    """
    return a_start < b_end and b_start < a_end


def calculate_end_time(start_time, duration):
    """
    Calculate end time based on start time and duration

    Args:
        start_time: Datetime for start
        duration: Duration in minutes

    Returns:
        Datetime for end
    """
    return start_time + timedelta(minutes=duration)


def hours_to_minutes(hours):
    """Convert a (possibly Decimal) number of hours to whole minutes."""
    return int(round(float(hours) * 60))


def floor_minutes(start_time, end_time):
    """
    Whole minutes elapsed between two datetimes, rounded down

    Args:
        start_time: Datetime the period started
        end_time: Datetime the period ended

    Returns:
        Integer number of minutes
    """
    return math.floor((end_time - start_time).total_seconds() / 60)


def parse_clock_time(value):
    """Parse an ``HH:MM`` string (or pass through a ``time``) into a time."""
    if isinstance(value, time):
        return value
    return datetime.strptime(value, "%H:%M").time()
