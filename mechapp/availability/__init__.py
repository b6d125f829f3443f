from mechapp.availability.calendar import (
    CalendarDay,
    MonthView,
    format_date_key,
    is_day_selectable,
    parse_date_key,
)
from mechapp.availability.controller import AvailabilityController, TimeSlotOption
from mechapp.availability.registry import MechanicRegistry, WorkshopRegistry
from mechapp.availability.schedule import (
    ScheduleRange,
    compute_schedule_range,
    generate_time_slots,
)
from mechapp.availability.state import CalendarState, RequestGeneration, TimeSlotState

__all__ = [
    "AvailabilityController",
    "TimeSlotOption",
    "CalendarState",
    "TimeSlotState",
    "RequestGeneration",
    "CalendarDay",
    "MonthView",
    "MechanicRegistry",
    "WorkshopRegistry",
    "ScheduleRange",
    "compute_schedule_range",
    "generate_time_slots",
    "format_date_key",
    "parse_date_key",
    "is_day_selectable",
]
