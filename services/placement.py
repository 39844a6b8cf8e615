"""
Time-slot math for itinerary placements.

A vault item dropped on the calendar without a target slot lands at a random
start within the next PLACEMENT_WINDOW, lasting DEFAULT_DURATION.

Naive datetimes are taken to be UTC, so every slot compares and stores as
timezone-aware UTC.
"""
import random
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from services.errors import ValidationError

DEFAULT_DURATION = timedelta(hours=2)
PLACEMENT_WINDOW = timedelta(days=3)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def validate_slot(start: datetime, end: datetime) -> Tuple[datetime, datetime]:
    """Return (start, end) in UTC; raise ValidationError unless end > start."""
    if start is None or end is None:
        raise ValidationError("Start time and end time are required")
    start, end = as_utc(start), as_utc(end)
    if end <= start:
        raise ValidationError("End time must be after start time")
    return start, end


def suggest_slot(
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
    duration: timedelta = DEFAULT_DURATION,
) -> Tuple[datetime, datetime]:
    """Random start in [now, now + PLACEMENT_WINDOW), end = start + duration."""
    now = as_utc(now) if now else datetime.now(timezone.utc)
    rng = rng or random.Random()
    offset = rng.random() * PLACEMENT_WINDOW.total_seconds()
    start = now + timedelta(seconds=offset)
    return start, start + duration
