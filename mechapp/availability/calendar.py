"""
Calendar arithmetic for the visit picker.

Date keys are local calendar dates formatted as ``YYYY-MM-DD``. The month
grid always has 42 cells (six weeks) starting on the Monday on or before
the first of the displayed month; cells outside that month are disabled.
"""

from collections.abc import Collection
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Optional

from mechapp.config import settings

GRID_CELLS = 42
WEEKEND_WEEKDAYS = (5, 6)  # date.weekday(): Saturday, Sunday

WEEKDAY_LABELS = ["L", "M", "X", "J", "V", "S", "D"]
WEEKDAY_NAMES_ES = ["lunes", "martes", "miércoles", "jueves", "viernes", "sábado", "domingo"]
MONTH_NAMES_ES = [
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
]


def format_date_key(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def parse_date_key(value: Any) -> Optional[date]:
    """Parse a ``YYYY-MM-DD`` key; returns None for anything that is not a real date."""
    if not isinstance(value, str):
        return None
    parts = value.strip().split("-")
    if len(parts) != 3:
        return None
    try:
        year, month, day = (int(part) for part in parts)
        return date(year, month, day)
    except ValueError:
        return None


def first_of_month(day: date) -> date:
    return day.replace(day=1)


def add_months(month: date, offset: int) -> date:
    """Shift the first-of-month ``month`` by ``offset`` months."""
    index = month.year * 12 + (month.month - 1) + offset
    return date(index // 12, index % 12 + 1, 1)


def is_weekend(day: date) -> bool:
    return day.weekday() in WEEKEND_WEEKDAYS


def is_day_selectable(day: date, today: date, unavailable_dates: Collection[str]) -> bool:
    """A day is bookable when it is not past, not a weekend and not reserved."""
    if day < today:
        return False
    if is_weekend(day):
        return False
    return format_date_key(day) not in unavailable_dates


def grid_start(month: date) -> date:
    """Monday on or before the first of ``month``."""
    start = first_of_month(month)
    return start - timedelta(days=start.weekday())


@dataclass(frozen=True)
class CalendarDay:
    """One rendered cell of the month grid."""

    date: date
    key: str
    in_month: bool
    is_today: bool
    is_past: bool
    is_weekend: bool
    is_unavailable: bool
    is_selected: bool
    disabled: bool

    @property
    def label(self) -> str:
        return str(self.date.day)


@dataclass(frozen=True)
class MonthView:
    """Everything a presentation layer needs to draw one month."""

    month: date
    label: str
    weekdays: list[str]
    days: list[CalendarDay]
    can_go_previous: bool
    can_go_next: bool


def build_month_grid(
    month: date,
    today: date,
    unavailable_dates: Collection[str],
    selected_date: Optional[date] = None,
) -> list[CalendarDay]:
    displayed = first_of_month(month)
    start = grid_start(displayed)
    cells = []
    for offset in range(GRID_CELLS):
        day = start + timedelta(days=offset)
        key = format_date_key(day)
        in_month = day.month == displayed.month and day.year == displayed.year
        cells.append(
            CalendarDay(
                date=day,
                key=key,
                in_month=in_month,
                is_today=day == today,
                is_past=day < today,
                is_weekend=is_weekend(day),
                is_unavailable=key in unavailable_dates,
                is_selected=selected_date is not None and day == selected_date,
                disabled=not in_month or not is_day_selectable(day, today, unavailable_dates),
            )
        )
    return cells


def can_go_previous(current_month: date, start_of_today_month: date) -> bool:
    return first_of_month(current_month) > first_of_month(start_of_today_month)


def can_go_next(current_month: date, today: date, horizon_months: Optional[int] = None) -> bool:
    """Next is allowed until the month after ``horizon_months`` from today."""
    horizon = horizon_months or settings.calendar.booking_horizon_months
    limit = add_months(first_of_month(today), horizon)
    return add_months(first_of_month(current_month), 1) <= limit


def format_month_label(month: date) -> str:
    """Spanish month heading, e.g. "octubre de 2026"."""
    return f"{MONTH_NAMES_ES[month.month - 1]} de {month.year}"


def format_long_date(day: date) -> str:
    """Spanish long date, e.g. "lunes, 19 de octubre"."""
    return f"{WEEKDAY_NAMES_ES[day.weekday()]}, {day.day} de {MONTH_NAMES_ES[day.month - 1]}"
