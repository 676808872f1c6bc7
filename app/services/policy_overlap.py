"""Overlap detection between insurance policy date ranges.

Both bounds of a policy are inclusive: a policy ending on day N and another
starting on day N share that day and conflict, while one starting on N+1
does not.
"""

from datetime import date
from typing import Iterable, Optional, Protocol


class DateRanged(Protocol):
    start_date: date
    end_date: date


def ranges_overlap(start_a: date, end_a: date, start_b: date, end_b: date) -> bool:
    """Return True when [start_a, end_a] and [start_b, end_b] share a day."""
    return start_a <= end_b and start_b <= end_a


def find_overlapping(
    existing: Iterable[DateRanged], start_date: date, end_date: date
) -> Optional[DateRanged]:
    """Return the first existing range that overlaps the candidate, if any."""
    for item in existing:
        if ranges_overlap(item.start_date, item.end_date, start_date, end_date):
            return item
    return None


def has_overlap(existing: Iterable[DateRanged], start_date: date, end_date: date) -> bool:
    """Decide whether a candidate range conflicts with any existing range."""
    return find_overlapping(existing, start_date, end_date) is not None
