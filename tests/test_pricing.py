from datetime import datetime, timedelta, timezone

import pytest

from smartcycle.pricing import get_duration, get_price, format_duration, RATE_PER_HOUR

start = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(("elapsed", "duration"), [
    (timedelta(0), 0),
    (timedelta(seconds=29), 0),
    (timedelta(seconds=30), 1),
    (timedelta(minutes=5, seconds=29), 5),
    (timedelta(minutes=5, seconds=30), 6),
    (timedelta(hours=2), 120),
])
def test_get_duration(elapsed, duration):
    """Assert that the duration is rounded to the nearest minute, halves rounding up."""
    assert get_duration(start, start + elapsed) == duration


def test_get_duration_negative():
    with pytest.raises(ValueError):
        get_duration(start, start - timedelta(minutes=1))


@pytest.mark.parametrize(("duration", "hours"), [
    (0, 0),
    (None, 0),
    (1, 1),
    (60, 1),
    (61, 2),
    (120, 2),
    (121, 3),
])
def test_get_price(duration, hours):
    """Assert that every started hour is charged in full."""
    assert get_price(duration) == hours * RATE_PER_HOUR


def test_get_price_override_rate():
    assert get_price(90, rate=2.5) == 5


@pytest.mark.parametrize(("duration", "formatted"), [
    (None, "Ongoing"),
    (0, "0m"),
    (45, "45m"),
    (60, "1h 0m"),
    (135, "2h 15m"),
])
def test_format_duration(duration, formatted):
    assert format_duration(duration) == formatted
