"""
MechApp command-line entry point.

Exercises the availability and validation engines without a browser.

Usage:
    Slots for a schedule:  python main.py slots "Lunes a sábado de 9:00 a 19:00 hrs"
    Month grid:            python main.py calendar --month 2026-11 --unavailable 2026-11-04
    Live availability:     python main.py availability --mechanic 7 --date 2026-11-05
    Validate a form:       python main.py validate register name=Ana email=ana@correo.cl
"""

import argparse
import asyncio
import logging
import sys
from datetime import date
from typing import Optional

from mechapp.api.client import MechAppClient
from mechapp.api.results import Ok, Unauthenticated
from mechapp.availability.calendar import MonthView, parse_date_key
from mechapp.availability.controller import AvailabilityController
from mechapp.availability.schedule import (
    compute_schedule_range,
    format_minutes,
    generate_time_slots,
)
from mechapp.availability.state import CalendarState
from mechapp.config import settings
from mechapp.logging_context import get_session_logger, session_scope
from mechapp.validation.forms import FORM_CONFIGURATIONS, validate_form

logger = get_session_logger(__name__)


def _format_month(view: MonthView) -> str:
    lines = [view.label.center(27), " ".join(f"{label:>3}" for label in view.weekdays)]
    for week in range(0, len(view.days), 7):
        cells = []
        for day in view.days[week:week + 7]:
            if not day.in_month:
                cells.append("   ")
            elif day.is_unavailable:
                cells.append("  x")
            elif day.disabled:
                cells.append("  .")
            else:
                cells.append(f"{day.label:>3}")
        lines.append(" ".join(cells))
    return "\n".join(lines)


def _run_slots(args: argparse.Namespace) -> int:
    schedule_range = compute_schedule_range(args.schedule)
    slots = generate_time_slots(schedule_range)
    sys.stdout.write(
        f"{format_minutes(schedule_range.start)}-{format_minutes(schedule_range.end)}: "
        f"{', '.join(slots)}\n"
    )
    return 0


def _parse_month(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    return parse_date_key(f"{value}-01")


def _run_calendar(args: argparse.Namespace) -> int:
    state = CalendarState.initialize()
    state.apply_unavailable_dates(args.unavailable or [])
    month = _parse_month(args.month)
    if args.month and month is None:
        logger.error("Invalid month %r, expected YYYY-MM", args.month)
        return 1
    if month is not None:
        state.current_month = month
    sys.stdout.write(_format_month(state.month_view()) + "\n")
    return 0


async def _availability(mechanic_id: int, date_key: Optional[str], api_url: Optional[str]) -> int:
    async with MechAppClient(api_url) as client:
        controller = AvailabilityController(client)
        mechanics = await controller.load_mechanics()
        if isinstance(mechanics, Unauthenticated):
            logger.error("Not authenticated, log in at %s", mechanics.login_path)
            return 1

        result = await controller.select_mechanic(mechanic_id)
        if not isinstance(result, Ok):
            logger.error(controller.helper_message)
            return 1
        sys.stdout.write(_format_month(controller.month_view()) + "\n")

        if date_key:
            if not await controller.select_date(date_key):
                logger.error("%s is not a selectable day", date_key)
                return 1
            options = controller.render_time_slots()
            if not options:
                logger.error(controller.slot_helper)
                return 1
            for option in options:
                sys.stdout.write(f"{option.value} {'libre' if option.available else 'ocupado'}\n")
        sys.stdout.write(controller.helper_message + "\n")
    return 0


def _run_availability(args: argparse.Namespace) -> int:
    return asyncio.run(_availability(args.mechanic, args.date, args.api))


def _run_validate(args: argparse.Namespace) -> int:
    values = {}
    for pair in args.values:
        name, _, value = pair.partition("=")
        values[name] = value
    errors = validate_form(args.form, values)
    if not errors:
        sys.stdout.write("OK\n")
        return 0
    for name, messages in errors.items():
        sys.stdout.write(f"{name}: {' '.join(messages)}\n")
    return 2


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Inspect MechApp visit availability and form validation."
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    slots = subparsers.add_parser("slots", help="Hourly slots for a workshop schedule text.")
    slots.add_argument("schedule", help='Free-text schedule, e.g. "Lunes a viernes de 8:30 a 18:30 hrs".')
    slots.set_defaults(handler=_run_slots)

    calendar = subparsers.add_parser("calendar", help="Print a month grid.")
    calendar.add_argument("--month", default=None, help="Month to show as YYYY-MM (default: current).")
    calendar.add_argument("--unavailable", nargs="*", help="Reserved days as YYYY-MM-DD.")
    calendar.set_defaults(handler=_run_calendar)

    availability = subparsers.add_parser("availability", help="Query live availability for a mechanic.")
    availability.add_argument("--mechanic", type=int, required=True, help="Mechanic id.")
    availability.add_argument("--date", default=None, help="Day to list hours for, YYYY-MM-DD.")
    availability.add_argument("--api", default=None, help=f"API base URL (default: {settings.api.base_url}).")
    availability.set_defaults(handler=_run_availability)

    validate = subparsers.add_parser("validate", help="Validate form values.")
    validate.add_argument("form", choices=sorted(FORM_CONFIGURATIONS))
    validate.add_argument("values", nargs="*", help="field=value pairs.")
    validate.set_defaults(handler=_run_validate)

    args = parser.parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    with session_scope() as session_id:
        logger.debug("CLI session %s: %s", session_id, args.command)
        return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
