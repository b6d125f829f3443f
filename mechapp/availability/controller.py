"""
Availability controller for the "book a visit" page.

One controller instance lives for one page session. It owns the mechanic
registry, the calendar and time-slot state, and talks to the backend through
``MechAppClient``. Fetches are guarded by request generations: a response is
applied only if no newer request of the same kind was issued meanwhile and
the (mechanic, day) it was fetched for is still the current selection.

A 401 is never turned into navigation here; the ``Unauthenticated`` result is
returned to the caller, which decides where to send the user.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from mechapp.api.client import MechAppClient
from mechapp.api.results import ApiResult, Failure, Forbidden, Ok, Unauthenticated
from mechapp.availability.calendar import MonthView, format_long_date
from mechapp.availability.registry import MechanicRegistry
from mechapp.availability.schedule import compute_schedule_range, generate_time_slots
from mechapp.availability.state import CalendarState, RequestGeneration, TimeSlotState
from mechapp.logging_context import get_session_logger
from mechapp.schemas.workshop_schema import Mechanic
from mechapp.utils import parse_positive_int

logger = get_session_logger(__name__)

SELECT_MECHANIC_MESSAGE = "Selecciona un mecánico para ver la disponibilidad."
LOADING_MESSAGE = "Cargando disponibilidad..."
SELECT_DAY_MESSAGE = "Selecciona un día disponible para tu visita."
LOAD_FAILED_MESSAGE = "No pudimos cargar la disponibilidad. Intenta nuevamente más tarde."
SELECT_MECHANIC_FOR_SLOTS_MESSAGE = "Selecciona un mecánico para ver los horarios disponibles."
NO_MECHANICS_MESSAGE = "Aún no hay mecánicos validados disponibles."
MECHANICS_FAILED_MESSAGE = (
    "No pudimos cargar los mecánicos disponibles. Intenta nuevamente en unos minutos."
)


@dataclass(frozen=True)
class TimeSlotOption:
    """One hourly option in the time picker."""

    value: str
    available: bool


class AvailabilityController:
    """Computes bookable days and hours for the selected mechanic."""

    def __init__(self, client: MechAppClient, today: Optional[date] = None) -> None:
        self.client = client
        self.calendar = CalendarState.initialize(today)
        self.time_slots = TimeSlotState()
        self.mechanics = MechanicRegistry()
        self.selected_time: Optional[str] = None
        self.helper_message = SELECT_MECHANIC_MESSAGE
        self.mechanic_helper = ""
        self.slot_helper = ""
        self._day_requests = RequestGeneration()
        self._slot_requests = RequestGeneration()

    # ----- Mechanics -----

    async def load_mechanics(self) -> ApiResult[list[Mechanic]]:
        """Fetch validated mechanics and rebuild the registry."""
        result = await self.client.list_mechanics()
        if isinstance(result, Ok):
            self.mechanics.rebuild(result.value)
            self.mechanic_helper = "" if result.value else NO_MECHANICS_MESSAGE
            logger.info("Loaded %d mechanic(s)", len(result.value))
        elif not isinstance(result, Unauthenticated):
            self.mechanics.rebuild([])
            self.mechanic_helper = MECHANICS_FAILED_MESSAGE
        return result

    async def select_mechanic(self, mechanic_id: Any) -> Optional[ApiResult[set[str]]]:
        """Switch mechanic and fetch the days already reserved for them.

        Returns None when the id is empty or invalid, which clears the
        calendar without a network call.
        """
        requested = parse_positive_int(mechanic_id)
        token = self._day_requests.issue()
        self._slot_requests.invalidate()
        self.calendar.mechanic_id = requested
        self.time_slots.reset()

        if requested is None:
            self.calendar.apply_unavailable_dates(())
            self.calendar.clear_selection()
            self.selected_time = None
            self.helper_message = SELECT_MECHANIC_MESSAGE
            return None

        self.helper_message = LOADING_MESSAGE
        result = await self.client.get_unavailable_days(requested)

        if not self._day_requests.is_current(token) or self.calendar.mechanic_id != requested:
            logger.debug("Discarding stale unavailable days for mechanic %s", requested)
            return result

        if isinstance(result, Ok):
            self.calendar.apply_unavailable_dates(result.value)
            self._refresh_helper(default=SELECT_DAY_MESSAGE)
            if self.calendar.selected_date is not None:
                await self.refresh_time_slots()
            else:
                self.selected_time = None
        elif isinstance(result, (Failure, Forbidden)):
            logger.warning("Unavailable days for mechanic %s failed: %s", requested, result)
            self.calendar.apply_unavailable_dates(())
            self._drop_unoffered_time()
            self.helper_message = LOAD_FAILED_MESSAGE
        else:
            self._drop_unoffered_time()
        return result

    # ----- Days -----

    async def select_date(self, date_key: str) -> bool:
        """Select a calendar day; a non-selectable day is ignored entirely."""
        if not self.calendar.select_date(date_key):
            return False
        self._refresh_helper()
        await self.refresh_time_slots()
        return True

    def go_previous_month(self) -> bool:
        return self.calendar.go_previous_month()

    def go_next_month(self) -> bool:
        return self.calendar.go_next_month()

    def month_view(self) -> MonthView:
        return self.calendar.month_view()

    # ----- Hours -----

    async def refresh_time_slots(self) -> Optional[ApiResult[set[str]]]:
        """Fetch reserved hours for the current (mechanic, day) pair."""
        mechanic_id = self.calendar.mechanic_id
        date_key = self.calendar.selected_key
        token = self._slot_requests.issue()
        if mechanic_id is None or date_key is None:
            self.time_slots.reset()
            return None

        result = await self.client.get_unavailable_slots(mechanic_id, date_key)

        if (
            not self._slot_requests.is_current(token)
            or self.calendar.mechanic_id != mechanic_id
            or self.calendar.selected_key != date_key
        ):
            logger.debug("Discarding stale unavailable slots for %s on %s", mechanic_id, date_key)
            return result

        self.time_slots.reset(mechanic_id, date_key)
        if isinstance(result, Ok):
            self.time_slots.unavailable_times = set(result.value)
        self.render_time_slots()
        return result

    def render_time_slots(self, mechanic_id: Optional[int] = None) -> list[TimeSlotOption]:
        """Hourly options for the mechanic's workshop schedule.

        Hours are only marked unavailable once the reserved hours for the
        current mechanic and day have arrived; until then every hour is shown
        as available.
        """
        if mechanic_id is None:
            mechanic_id = self.calendar.mechanic_id
        mechanic = self.mechanics.get(mechanic_id)
        if mechanic is None or mechanic.workshop is None:
            self.selected_time = None
            self.slot_helper = SELECT_MECHANIC_FOR_SLOTS_MESSAGE
            return []

        slots = generate_time_slots(compute_schedule_range(mechanic.schedule))
        blocked: set[str] = set()
        if self.time_slots.matches(mechanic_id, self.calendar.selected_key):
            blocked = self.time_slots.unavailable_times

        options = [TimeSlotOption(value=slot, available=slot not in blocked) for slot in slots]
        available = {option.value for option in options if option.available}
        if self.selected_time is not None and self.selected_time not in available:
            logger.debug("Clearing chosen time %s, no longer offered", self.selected_time)
            self.selected_time = None
            self._refresh_helper()
        self.slot_helper = ""
        return options

    def choose_time(self, value: str) -> bool:
        """Pick an hour; only currently available options are accepted."""
        options = self.render_time_slots()
        if not any(option.value == value and option.available for option in options):
            return False
        self.selected_time = value
        self._refresh_helper()
        return True

    def scheduled_for(self) -> Optional[str]:
        """Local "YYYY-MM-DDTHH:MM" value, or None until day and hour are chosen."""
        date_key = self.calendar.selected_key
        if date_key is None or not self.selected_time:
            return None
        return f"{date_key}T{self.selected_time}"

    async def reset_after_booking(self) -> None:
        """Clear the selection and reload reserved days after a successful booking."""
        self.calendar.clear_selection()
        self.calendar.reset_month()
        self.selected_time = None
        self.time_slots.reset()
        await self.select_mechanic(self.calendar.mechanic_id)

    def _drop_unoffered_time(self) -> None:
        """Re-check the chosen hour against the current mechanic's schedule."""
        if self.calendar.selected_date is not None:
            self.render_time_slots()

    def _refresh_helper(self, default: Optional[str] = None) -> None:
        selected = self.calendar.selected_date
        if selected is None:
            self.helper_message = default or (
                SELECT_DAY_MESSAGE if self.calendar.mechanic_id else SELECT_MECHANIC_MESSAGE
            )
        elif not self.selected_time:
            self.helper_message = (
                f"Seleccionaste el {format_long_date(selected)}. Ahora elige una hora disponible."
            )
        else:
            self.helper_message = f"Seleccionaste el {format_long_date(selected)}."
