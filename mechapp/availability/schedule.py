"""
Workshop schedule parsing and hourly slot generation.

A workshop publishes its opening hours as free text, for example
"Lunes a sábado de 9:00 a 19:00 hrs". The bookable range is taken from the
first and last ``H:MM`` tokens in that text; anything that cannot be read
falls back to the configured default range instead of raising.

Usage:
    schedule_range = compute_schedule_range("Lunes a viernes de 8:30 a 18:30 hrs")
    generate_time_slots(schedule_range)  # ["08:30", "09:30", ..., "18:30"]
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from mechapp.config import settings

logger = logging.getLogger(__name__)

TIME_TOKEN_PATTERN = re.compile(r"\d{1,2}:\d{2}")


@dataclass(frozen=True)
class ScheduleRange:
    """Opening window in minutes of day, both ends bookable."""

    start: int
    end: int


DEFAULT_SCHEDULE_RANGE = ScheduleRange(
    start=settings.calendar.default_start_minutes,
    end=settings.calendar.default_end_minutes,
)


def parse_time_token(token: str) -> Optional[int]:
    """Convert "H:MM" or "HH:MM" to minutes of day, or None when out of range."""
    try:
        hours_text, minutes_text = token.strip().split(":")
        hours, minutes = int(hours_text), int(minutes_text)
    except (AttributeError, ValueError):
        return None
    if not 0 <= hours <= 23 or not 0 <= minutes <= 59:
        return None
    return hours * 60 + minutes


def format_minutes(total_minutes: int) -> str:
    """Format minutes of day as a zero-padded "HH:MM" slot value."""
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours:02d}:{minutes:02d}"


def compute_schedule_range(schedule_text: Optional[str]) -> ScheduleRange:
    """Derive the bookable range from a workshop's free-text schedule."""
    if not isinstance(schedule_text, str):
        return DEFAULT_SCHEDULE_RANGE

    tokens = TIME_TOKEN_PATTERN.findall(schedule_text)
    if len(tokens) < 2:
        return DEFAULT_SCHEDULE_RANGE

    start = parse_time_token(tokens[0])
    end = parse_time_token(tokens[-1])
    if start is None or end is None or end <= start:
        logger.debug("Unusable schedule %r, using default range", schedule_text)
        return DEFAULT_SCHEDULE_RANGE

    return ScheduleRange(start=start, end=end)


def generate_time_slots(
    schedule_range: ScheduleRange, step_minutes: Optional[int] = None
) -> list[str]:
    """One "HH:MM" slot per step from start to end inclusive."""
    step = step_minutes or settings.calendar.slot_step_minutes
    return [
        format_minutes(minute)
        for minute in range(schedule_range.start, schedule_range.end + 1, step)
    ]
