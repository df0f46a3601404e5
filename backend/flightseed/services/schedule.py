"""
Schedule planning over a calendar window.

Each day gets 3-8 flights, each departing on a quarter hour between
06:00 and 21:45.
"""

import logging
from datetime import date, datetime, time, timedelta
from typing import Iterator, NamedTuple, Tuple

from .random_source import RandomSource

logger = logging.getLogger(__name__)

MIN_FLIGHTS_PER_DAY = 3
MAX_FLIGHTS_PER_DAY = 8
FIRST_DEPARTURE_HOUR = 6
LAST_DEPARTURE_HOUR = 21
QUARTER_HOURS = [0, 15, 30, 45]


class ScheduleSlot(NamedTuple):
    day: date
    departure_time: datetime


def iter_days(start: date, end: date) -> Iterator[date]:
    """Every calendar day from start to end, both inclusive."""
    if start > end:
        raise ValueError(f"Start date {start} is after end date {end}")
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def window_bounds(start: date, end: date) -> Tuple[datetime, datetime]:
    """Departure window covering the whole of both end days."""
    return (
        datetime.combine(start, time(0, 0, 0)),
        datetime.combine(end, time(23, 59, 59)),
    )


def plan_schedule(start: date, end: date, rng: RandomSource) -> Iterator[ScheduleSlot]:
    """
    Lazily yield departure slots for every day in [start, end].

    Args:
        start: First day of the window
        end: Last day of the window (inclusive)
        rng: Random source for counts and times

    Yields:
        ScheduleSlot per flight, days in order, times in draw order
    """
    for day in iter_days(start, end):
        flights_per_day = rng.randint(MIN_FLIGHTS_PER_DAY, MAX_FLIGHTS_PER_DAY)
        logger.debug(f"{day.isoformat()}: {flights_per_day} flights")
        for _ in range(flights_per_day):
            hour = rng.randint(FIRST_DEPARTURE_HOUR, LAST_DEPARTURE_HOUR)
            minute = rng.choice(QUARTER_HOURS)
            yield ScheduleSlot(day, datetime.combine(day, time(hour, minute)))
