"""
Per-page-session availability state.

``CalendarState`` owns the displayed month, the selected day and the set of
reserved days for the current mechanic. ``TimeSlotState`` holds reserved
hours for exactly one (mechanic, day) pair and is ignored when that pair no
longer matches the selection. ``RequestGeneration`` hands out tokens so a
response can tell whether a newer request was issued after it.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from mechapp.availability.calendar import (
    MonthView,
    WEEKDAY_LABELS,
    add_months,
    build_month_grid,
    can_go_next,
    can_go_previous,
    first_of_month,
    format_date_key,
    format_month_label,
    is_day_selectable,
    parse_date_key,
)

logger = logging.getLogger(__name__)


@dataclass
class CalendarState:
    """Calendar selection state; selected_date is always a selectable day."""

    today: date
    start_of_today_month: date
    current_month: date
    selected_date: Optional[date] = None
    unavailable_dates: set[str] = field(default_factory=set)
    mechanic_id: Optional[int] = None

    @classmethod
    def initialize(cls, today: Optional[date] = None) -> "CalendarState":
        today = today or date.today()
        start = first_of_month(today)
        return cls(today=today, start_of_today_month=start, current_month=start)

    @property
    def selected_key(self) -> Optional[str]:
        return format_date_key(self.selected_date) if self.selected_date else None

    def select_date(self, date_key: str) -> bool:
        """Select a day by key. Returns False and changes nothing if it is not selectable."""
        parsed = parse_date_key(date_key)
        if parsed is None:
            return False
        if not is_day_selectable(parsed, self.today, self.unavailable_dates):
            logger.debug("Ignoring selection of unavailable day %s", date_key)
            return False
        self.selected_date = parsed
        return True

    def clear_selection(self) -> None:
        self.selected_date = None

    def apply_unavailable_dates(self, date_keys: Iterable[str]) -> None:
        """Replace reserved days, dropping the selection if it became reserved."""
        self.unavailable_dates = set(date_keys)
        if self.selected_key is not None and self.selected_key in self.unavailable_dates:
            logger.info("Selected day %s is no longer available", self.selected_key)
            self.selected_date = None

    def go_previous_month(self) -> bool:
        if not can_go_previous(self.current_month, self.start_of_today_month):
            return False
        self.current_month = add_months(self.current_month, -1)
        return True

    def go_next_month(self) -> bool:
        if not can_go_next(self.current_month, self.today):
            return False
        self.current_month = add_months(self.current_month, 1)
        return True

    def reset_month(self) -> None:
        self.current_month = self.start_of_today_month

    def month_view(self) -> MonthView:
        return MonthView(
            month=self.current_month,
            label=format_month_label(self.current_month),
            weekdays=list(WEEKDAY_LABELS),
            days=build_month_grid(
                self.current_month, self.today, self.unavailable_dates, self.selected_date
            ),
            can_go_previous=can_go_previous(self.current_month, self.start_of_today_month),
            can_go_next=can_go_next(self.current_month, self.today),
        )


@dataclass
class TimeSlotState:
    """Reserved hours for one mechanic on one day."""

    mechanic_id: Optional[int] = None
    date_key: Optional[str] = None
    unavailable_times: set[str] = field(default_factory=set)

    def matches(self, mechanic_id: Optional[int], date_key: Optional[str]) -> bool:
        return (
            mechanic_id is not None
            and date_key is not None
            and self.mechanic_id == mechanic_id
            and self.date_key == date_key
        )

    def reset(self, mechanic_id: Optional[int] = None, date_key: Optional[str] = None) -> None:
        self.mechanic_id = mechanic_id
        self.date_key = date_key
        self.unavailable_times = set()


class RequestGeneration:
    """Monotonic token source for one kind of async request.

    Only the most recently issued token is current, so a slow response to
    an older request is recognised as stale even when it targets the same
    mechanic and day as the newer one.
    """

    def __init__(self) -> None:
        self._latest = 0

    def issue(self) -> int:
        self._latest += 1
        return self._latest

    def is_current(self, token: int) -> bool:
        return token == self._latest

    def invalidate(self) -> None:
        """Make every outstanding token stale."""
        self._latest += 1
