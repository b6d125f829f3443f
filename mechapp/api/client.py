"""
Async HTTP client for the MechApp backend.

Session-cookie authenticated JSON over HTTP. Every public method returns an
``ApiResult`` instead of raising: transport and decode errors become
``Failure``, 401 becomes ``Unauthenticated`` and 403 becomes ``Forbidden``.
There is no automatic retry anywhere; a failed call is reported once and the
caller decides what to do.

Usage:
    async with MechAppClient() as client:
        result = await client.get_unavailable_days(7)
        if isinstance(result, Ok):
            reserved = result.value
"""

from collections.abc import Callable
from typing import Any, Optional, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from mechapp.api.results import ApiResult, Failure, Forbidden, Ok, Unauthenticated
from mechapp.config import settings
from mechapp.logging_context import get_session_logger
from mechapp.schemas.account_schema import (
    AccountType,
    AdminUser,
    CertificateStatus,
    LoginResult,
    Profile,
    RegisterRequest,
)
from mechapp.schemas.appointment_schema import AppointmentRequest, ReviewRequest
from mechapp.schemas.workshop_schema import Mechanic, Review, Workshop

logger = get_session_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)
T = TypeVar("T")
U = TypeVar("U")

DEFAULT_ERROR = "No pudimos completar la solicitud. Intenta nuevamente."
REGISTER_STATUS_MESSAGES = {409: "El correo ya está registrado."}
MAX_REVIEWS_LIMIT = 50


def _body_error(response: httpx.Response) -> Optional[str]:
    """Extract the backend's ``{"error": "..."}`` message, if present."""
    try:
        data = response.json()
    except ValueError:
        return None
    if isinstance(data, dict):
        message = data.get("error")
        if isinstance(message, str) and message.strip():
            return message.strip()
    return None


def _list_payload(payload: Any, key: str) -> list[Any]:
    """Return ``payload[key]`` when it is a list, otherwise an empty list."""
    if isinstance(payload, dict) and isinstance(payload.get(key), list):
        return payload[key]
    return []


def _parse_records(items: list[Any], model: type[ModelT]) -> list[ModelT]:
    records = []
    for item in items:
        try:
            records.append(model.model_validate(item))
        except ValidationError as exc:
            logger.warning("Skipping malformed %s record: %s", model.__name__, exc.errors()[:1])
    return records


def _map_ok(result: ApiResult[T], transform: Callable[[T], U]) -> ApiResult[U]:
    if isinstance(result, Ok):
        return Ok(transform(result.value))
    return result


def _message(payload: Any, default: str) -> str:
    if isinstance(payload, dict) and isinstance(payload.get("message"), str):
        return payload["message"]
    return default


class MechAppClient:
    """Thin typed wrapper over the backend REST endpoints."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._http = httpx.AsyncClient(
            base_url=base_url or settings.api.base_url,
            timeout=timeout or settings.api.timeout_seconds,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self) -> "MechAppClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        fallback_error: str = DEFAULT_ERROR,
        params: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
        status_messages: Optional[dict[int, str]] = None,
        auth_required: bool = True,
    ) -> ApiResult[Any]:
        try:
            response = await self._http.request(method, path, params=params, json=json)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            return Failure(message=fallback_error)

        status = response.status_code
        if status == 401 and auth_required:
            logger.info("%s %s requires authentication", method, path)
            return Unauthenticated()
        if status == 403:
            return Forbidden(message=_body_error(response) or Forbidden.message)
        if not response.is_success:
            message = (
                _body_error(response)
                or (status_messages or {}).get(status)
                or fallback_error
            )
            logger.warning("%s %s returned %d: %s", method, path, status, message)
            return Failure(message=message, status_code=status)

        if status == 204 or not response.content:
            return Ok({})
        try:
            return Ok(response.json())
        except ValueError:
            logger.warning("%s %s returned a non-JSON body", method, path)
            return Failure(message=fallback_error, status_code=status)

    # ----- Mechanics, workshops and reviews -----

    async def list_mechanics(self) -> ApiResult[list[Mechanic]]:
        result = await self._request(
            "GET", "/api/mechanics",
            fallback_error="No se pudo obtener la lista de mecánicos.",
        )
        return _map_ok(result, lambda payload: _parse_records(_list_payload(payload, "mechanics"), Mechanic))

    async def list_workshops(self) -> ApiResult[list[Workshop]]:
        result = await self._request(
            "GET", "/api/workshops",
            fallback_error="No se pudieron obtener los talleres.",
        )
        return _map_ok(result, lambda payload: _parse_records(_list_payload(payload, "workshops"), Workshop))

    async def get_workshop(self, workshop_id: str) -> ApiResult[Optional[Workshop]]:
        """Workshop detail; an unknown id yields ``Failure`` with status 404."""
        result = await self._request(
            "GET", f"/api/workshops/{workshop_id}",
            fallback_error="No se pudieron obtener los detalles del taller.",
        )

        def _parse(payload: Any) -> Optional[Workshop]:
            data = payload.get("workshop") if isinstance(payload, dict) else None
            parsed = _parse_records([data], Workshop) if isinstance(data, dict) else []
            return parsed[0] if parsed else None

        return _map_ok(result, _parse)

    async def list_reviews(
        self, workshop_id: str, limit: Optional[int] = None
    ) -> ApiResult[list[Review]]:
        limit = limit if limit is not None else settings.validation.reviews_default_limit
        limit = min(max(limit, 1), MAX_REVIEWS_LIMIT)
        result = await self._request(
            "GET", f"/api/workshops/{workshop_id}/reviews",
            params={"limit": limit},
            fallback_error="No se pudieron obtener las reseñas.",
        )
        return _map_ok(result, lambda payload: _parse_records(_list_payload(payload, "reviews"), Review))

    async def create_review(self, workshop_id: str, request: ReviewRequest) -> ApiResult[Optional[Review]]:
        result = await self._request(
            "POST", f"/api/workshops/{workshop_id}/reviews",
            json=request.to_payload(),
            fallback_error="No se pudo guardar la reseña.",
        )

        def _parse(payload: Any) -> Optional[Review]:
            data = payload.get("review") if isinstance(payload, dict) else None
            parsed = _parse_records([data], Review) if isinstance(data, dict) else []
            return parsed[0] if parsed else None

        return _map_ok(result, _parse)

    # ----- Appointments -----

    async def get_unavailable_days(self, mechanic_id: int) -> ApiResult[set[str]]:
        result = await self._request(
            "GET", "/api/appointments/unavailable-days",
            params={"mechanicId": str(mechanic_id)},
            fallback_error="No pudimos obtener la disponibilidad actualizada.",
        )
        return _map_ok(
            result,
            lambda payload: {day for day in _list_payload(payload, "unavailableDays") if isinstance(day, str)},
        )

    async def get_unavailable_slots(self, mechanic_id: int, date_key: str) -> ApiResult[set[str]]:
        result = await self._request(
            "GET", "/api/appointments/unavailable-slots",
            params={"mechanicId": str(mechanic_id), "date": date_key},
            fallback_error="No pudimos obtener los horarios disponibles.",
        )
        return _map_ok(
            result,
            lambda payload: {slot for slot in _list_payload(payload, "unavailableSlots") if isinstance(slot, str)},
        )

    async def create_appointment(self, request: AppointmentRequest) -> ApiResult[dict[str, Any]]:
        result = await self._request(
            "POST", "/api/appointments",
            json=request.to_payload(),
            fallback_error="No pudimos agendar la cita. Inténtalo nuevamente.",
        )
        return _map_ok(result, lambda payload: payload if isinstance(payload, dict) else {})

    # ----- Session and account -----

    async def get_profile(self) -> ApiResult[Profile]:
        result = await self._request(
            "GET", "/api/profile",
            fallback_error="No se pudo obtener la información del perfil.",
        )
        if not isinstance(result, Ok):
            return result
        try:
            return Ok(Profile.model_validate(result.value))
        except ValidationError:
            logger.warning("Profile payload did not match the expected shape")
            return Failure(message="No se pudo obtener la información del perfil.")

    async def login(self, email: str, password: str) -> ApiResult[LoginResult]:
        result = await self._request(
            "POST", "/api/login",
            json={"email": email, "password": password},
            fallback_error="Ocurrió un error al iniciar sesión.",
            auth_required=False,
        )
        if not isinstance(result, Ok):
            return result
        try:
            return Ok(LoginResult.model_validate(result.value))
        except ValidationError:
            return Failure(message="Ocurrió un error al iniciar sesión.")

    async def register(self, request: RegisterRequest) -> ApiResult[str]:
        result = await self._request(
            "POST", "/api/register",
            json=request.to_payload(),
            fallback_error="Ocurrió un error al registrar el usuario.",
            status_messages=REGISTER_STATUS_MESSAGES,
            auth_required=False,
        )
        return _map_ok(result, lambda payload: _message(payload, "Usuario registrado correctamente."))

    async def logout(self) -> ApiResult[str]:
        result = await self._request(
            "POST", "/api/logout",
            fallback_error="No se pudo cerrar sesión.",
            auth_required=False,
        )
        return _map_ok(result, lambda payload: _message(payload, "Sesión finalizada."))

    # ----- Admin moderation -----

    async def list_users(self) -> ApiResult[list[AdminUser]]:
        result = await self._request(
            "GET", "/api/admin/users",
            fallback_error="No se pudieron obtener los usuarios.",
        )
        return _map_ok(result, lambda payload: _parse_records(_list_payload(payload, "users"), AdminUser))

    async def update_certificate_status(
        self, user_id: int, status: CertificateStatus
    ) -> ApiResult[str]:
        result = await self._request(
            "PUT", f"/api/admin/users/{user_id}/certificate",
            json={"status": CertificateStatus(status).value},
            fallback_error="No se pudo actualizar el estado del certificado.",
        )
        return _map_ok(result, lambda payload: _message(payload, "Estado del certificado actualizado correctamente."))

    async def update_account_type(self, user_id: int, account_type: AccountType) -> ApiResult[str]:
        result = await self._request(
            "PUT", f"/api/admin/users/{user_id}/account-type",
            json={"accountType": AccountType(account_type).value},
            fallback_error="No se pudo actualizar el tipo de cuenta.",
        )
        return _map_ok(result, lambda payload: _message(payload, "Tipo de cuenta actualizado correctamente."))
