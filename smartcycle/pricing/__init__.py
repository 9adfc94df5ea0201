"""
The pricing module determines the duration and the price of a ride.

Every started hour is charged at the configured rate, so a ride of
61 minutes costs twice as much as a ride of 60 minutes. The same rate
is used for single rides, user statistics and revenue reports.
"""

from datetime import datetime
from math import ceil, floor
from typing import Optional

from smartcycle.config import rate_per_hour

RATE_PER_HOUR = rate_per_hour


def get_duration(start_time: datetime, end_time: datetime) -> int:
    """
    Gets the duration of a ride in whole minutes, rounding halves up.

    :raises ValueError: If the ride ends before it starts.
    """
    seconds = (end_time - start_time).total_seconds()
    if seconds < 0:
        raise ValueError(f"Ride ends ({end_time}) before it starts ({start_time}).")

    return int(floor(seconds / 60 + 0.5))


def get_price(duration: Optional[int], rate: float = None) -> float:
    """
    Given a duration in minutes, returns the price of the ride.

    :param duration: The duration of the ride (in minutes).
    :param rate: Overrides the configured hourly rate.
    """
    if not duration:
        return 0

    rate = RATE_PER_HOUR if rate is None else rate
    return ceil(duration / 60) * rate


def format_duration(duration: Optional[int]) -> str:
    """Formats a duration in minutes as ``1h 5m`` or ``12m``, or ``Ongoing`` for an unfinished ride."""
    if duration is None:
        return "Ongoing"

    hours, minutes = divmod(duration, 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"
