"""
Appointment submission.

Checks a draft in the same order the booking page does, builds the payload
and posts it. Nothing reaches the network while a check fails.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import ValidationError

from mechapp.api.client import MechAppClient
from mechapp.api.results import ApiResult, Failure, Ok
from mechapp.availability.controller import AvailabilityController
from mechapp.config import settings
from mechapp.schemas.appointment_schema import AppointmentRequest, VisitType
from mechapp.utils import normalize_text, parse_positive_int

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "¡Solicitud enviada! Te contactaremos para confirmar la cita."


@dataclass
class AppointmentDraft:
    """Raw values of the booking form."""

    mechanic_id: Any
    service: str
    scheduled_for: Optional[str]
    visit_type: str = VisitType.PRESENCIAL.value
    notes: str = ""
    workshop: str = ""
    workshop_manual: str = ""
    domicile_address: str = ""
    client_latitude: Optional[float] = None
    client_longitude: Optional[float] = None


@dataclass(frozen=True)
class DraftCheck:
    request: Optional[AppointmentRequest] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.request is not None


def _zone(tz_name: Optional[str]) -> Optional[ZoneInfo]:
    name = tz_name if tz_name is not None else settings.calendar.timezone
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except ZoneInfoNotFoundError:
        logger.warning("Unknown timezone %r, using system local time", name)
        return None


def to_scheduled_instant(local_value: str, tz_name: Optional[str] = None) -> Optional[str]:
    """Convert a local "YYYY-MM-DDTHH:MM" into a UTC ISO-8601 instant.

    Examples:
        >>> to_scheduled_instant("2026-10-20T09:00", "UTC")
        '2026-10-20T09:00:00.000Z'
        >>> to_scheduled_instant("not a date") is None
        True
    """
    try:
        naive = datetime.fromisoformat(normalize_text(local_value))
    except ValueError:
        return None
    zone = _zone(tz_name)
    local = naive.replace(tzinfo=zone) if zone else naive.astimezone()
    return local.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.000Z")


def build_appointment_request(draft: AppointmentDraft, tz_name: Optional[str] = None) -> DraftCheck:
    """Run the booking form checks in order and build the request payload."""
    service = normalize_text(draft.service)
    scheduled_value = normalize_text(draft.scheduled_for)
    visit_type = normalize_text(draft.visit_type) or VisitType.PRESENCIAL.value
    mechanic_id = parse_positive_int(draft.mechanic_id)

    if not service:
        return DraftCheck(error="Indica el servicio requerido.")
    if not scheduled_value:
        return DraftCheck(error="Selecciona un día y una hora disponibles para la visita.")
    if mechanic_id is None:
        return DraftCheck(error="Selecciona un mecánico disponible.")

    scheduled_for = to_scheduled_instant(scheduled_value, tz_name)
    if scheduled_for is None:
        return DraftCheck(error="La fecha seleccionada no es válida.")

    if visit_type == VisitType.PRESENCIAL.value:
        address = normalize_text(draft.workshop) or normalize_text(draft.workshop_manual)
        if not address:
            return DraftCheck(
                error="Selecciona un taller o ingresa la dirección donde se realizará el servicio."
            )
    else:
        visit_type = VisitType.DOMICILIO.value
        address = normalize_text(draft.domicile_address)
        if not address:
            return DraftCheck(error="Indica la dirección para la visita a domicilio.")

    try:
        request = AppointmentRequest(
            mechanic_id=mechanic_id,
            service=service,
            visit_type=visit_type,
            scheduled_for=scheduled_for,
            notes=normalize_text(draft.notes),
            address=address,
            client_latitude=draft.client_latitude,
            client_longitude=draft.client_longitude,
        )
    except ValidationError as exc:
        logger.warning("Appointment draft rejected: %s", exc.errors()[:1])
        return DraftCheck(error="No pudimos agendar la cita. Inténtalo nuevamente.")
    return DraftCheck(request=request)


async def submit_appointment(
    client: MechAppClient,
    draft: AppointmentDraft,
    controller: Optional[AvailabilityController] = None,
) -> ApiResult[dict[str, Any]]:
    """Validate and post a draft; on success reset the availability picker."""
    check = build_appointment_request(draft)
    if not check.ok:
        return Failure(message=check.error or "")

    result = await client.create_appointment(check.request)
    if isinstance(result, Ok):
        logger.info(
            "Appointment requested with mechanic %s for %s",
            check.request.mechanic_id, check.request.scheduled_for,
        )
        if controller is not None:
            await controller.reset_after_booking()
    return result
