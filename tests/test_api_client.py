"""Tests for the backend client and its result mapping."""

import json

import httpx
import pytest

from mechapp.api.client import MechAppClient
from mechapp.api.results import Failure, Forbidden, Ok, Unauthenticated, error_message, is_ok
from mechapp.schemas.account_schema import (
    AccountType,
    CertificateStatus,
    CertificateUpload,
    RegisterRequest,
)
from mechapp.schemas.appointment_schema import AppointmentRequest, ReviewRequest


def _register_request() -> RegisterRequest:
    return RegisterRequest(
        name="Ana Pérez",
        email="ana@correo.cl",
        password="Secreta1!",
        account_type=AccountType.CLIENTE,
        terms_accepted=True,
    )


class TestStatusMapping:
    @pytest.mark.asyncio
    async def test_unauthenticated(self, backend, client):
        backend.add("GET", "/api/profile", status=401, payload={"error": "No autenticado"})
        result = await client.get_profile()
        assert isinstance(result, Unauthenticated)

    @pytest.mark.asyncio
    async def test_forbidden_keeps_backend_message(self, backend, client):
        backend.add("GET", "/api/admin/users", status=403, payload={"error": "Solo administradores."})
        result = await client.list_users()
        assert result == Forbidden(message="Solo administradores.")

    @pytest.mark.asyncio
    async def test_forbidden_default_message(self, backend, client):
        backend.add("GET", "/api/admin/users", status=403)
        result = await client.list_users()
        assert result == Forbidden()

    @pytest.mark.asyncio
    async def test_server_error_uses_fallback(self, backend, client):
        backend.add("GET", "/api/workshops", status=500)
        result = await client.list_workshops()
        assert result == Failure(message="No se pudieron obtener los talleres.", status_code=500)

    @pytest.mark.asyncio
    async def test_transport_error_is_failure(self):
        def boom(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with MechAppClient("http://testserver", transport=httpx.MockTransport(boom)) as client:
            result = await client.list_mechanics()
        assert result == Failure(message="No se pudo obtener la lista de mecánicos.")

    @pytest.mark.asyncio
    async def test_non_json_body_is_failure(self):
        def html(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html></html>")

        async with MechAppClient("http://testserver", transport=httpx.MockTransport(html)) as client:
            result = await client.list_mechanics()
        assert isinstance(result, Failure)
        assert result.status_code == 200

    def test_result_helpers(self):
        assert is_ok(Ok([]))
        assert not is_ok(Failure(message="x"))
        assert error_message(Failure(message="x"), "fallback") == "x"
        assert error_message(Ok(1), "fallback") == "fallback"


class TestMechanicsAndWorkshops:
    @pytest.mark.asyncio
    async def test_list_mechanics(self, client):
        result = await client.list_mechanics()
        assert isinstance(result, Ok)
        mechanics = result.value
        assert [m.id for m in mechanics] == [7, 8, 9]
        assert mechanics[0].schedule == "Lunes a sábado de 9:00 a 19:00 hrs"
        assert mechanics[2].workshop is None

    @pytest.mark.asyncio
    async def test_malformed_records_skipped(self, backend, client):
        backend.add("GET", "/api/mechanics", payload={
            "mechanics": [{"id": "x"}, {"id": 3, "name": "Luis"}, "basura"],
        })
        result = await client.list_mechanics()
        assert [m.id for m in result.value] == [3]

    @pytest.mark.asyncio
    async def test_unexpected_shape_is_empty_list(self, backend, client):
        backend.add("GET", "/api/mechanics", payload=["not", "wrapped"])
        result = await client.list_mechanics()
        assert result == Ok([])

    @pytest.mark.asyncio
    async def test_workshop_detail(self, backend, client):
        backend.add("GET", "/api/workshops/taller-ruiz", payload={"workshop": {
            "id": "taller-ruiz",
            "name": "Taller Ruiz",
            "address": "Av. Providencia 1456",
            "experienceYears": 12,
            "averageRating": 4.5,
            "reviewsCount": 2,
            "lat": -33.43,
            "lng": -70.61,
        }})
        result = await client.get_workshop("taller-ruiz")
        workshop = result.value
        assert workshop.experience_years == 12
        assert workshop.average_rating == 4.5

    @pytest.mark.asyncio
    async def test_unknown_workshop(self, backend, client):
        backend.add("GET", "/api/workshops/nada", status=404, payload={"error": "Taller no encontrado."})
        result = await client.get_workshop("nada")
        assert result == Failure(message="Taller no encontrado.", status_code=404)


class TestReviews:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit,expected", [(None, "20"), (0, "1"), (500, "50"), (10, "10")])
    async def test_limit_is_clamped(self, backend, client, limit, expected):
        backend.add("GET", "/api/workshops/taller-ruiz/reviews", payload={"reviews": []})
        await client.list_reviews("taller-ruiz", limit=limit)
        assert backend.calls[-1][2] == {"limit": expected}

    @pytest.mark.asyncio
    async def test_reviews_parsed(self, backend, client):
        backend.add("GET", "/api/workshops/taller-ruiz/reviews", payload={"reviews": [{
            "id": 1,
            "workshopId": "taller-ruiz",
            "rating": 5,
            "service": "Frenos",
            "visitType": "taller",
            "comment": "Excelente.",
        }]})
        result = await client.list_reviews("taller-ruiz")
        review = result.value[0]
        assert review.rating == 5
        assert review.client_name == "Cliente verificado"

    @pytest.mark.asyncio
    async def test_create_review_posts_camel_case(self, backend, client):
        captured = {}

        def create(request: httpx.Request) -> httpx.Response:
            captured.update(json.loads(request.content))
            return httpx.Response(201, json={"review": {
                "id": 2, "workshopId": "taller-ruiz", "rating": 4, "service": "Frenos",
            }})

        backend.add_handler("POST", "/api/workshops/taller-ruiz/reviews", create)
        request = ReviewRequest(
            rating=4, service="Frenos", visit_date="2026-10-01", comments="Rápido y prolijo.",
        )
        result = await client.create_review("taller-ruiz", request)
        assert result.value.id == 2
        assert captured["visitDate"] == "2026-10-01"
        assert captured["visitType"] == "taller"


class TestAppointments:
    @pytest.mark.asyncio
    async def test_unavailable_days_ignores_non_strings(self, backend, client):
        backend.add("GET", "/api/appointments/unavailable-days", payload={
            "unavailableDays": ["2026-10-21", 5, None, "2026-10-22"],
        })
        result = await client.get_unavailable_days(7)
        assert result == Ok({"2026-10-21", "2026-10-22"})

    @pytest.mark.asyncio
    async def test_unavailable_slots_query(self, backend, client):
        backend.add("GET", "/api/appointments/unavailable-slots", payload={"unavailableSlots": ["10:00"]})
        result = await client.get_unavailable_slots(7, "2026-10-20")
        assert result == Ok({"10:00"})
        assert backend.calls[-1][2] == {"mechanicId": "7", "date": "2026-10-20"}

    @pytest.mark.asyncio
    async def test_create_appointment_payload(self, backend, client):
        captured = {}

        def create(request: httpx.Request) -> httpx.Response:
            captured.update(json.loads(request.content))
            return httpx.Response(201, json={"message": "ok", "appointment": {"id": 1}})

        backend.add_handler("POST", "/api/appointments", create)
        request = AppointmentRequest(
            mechanic_id=7,
            service="Cambio de aceite",
            scheduled_for="2026-10-20T12:00:00.000Z",
            address="Taller Ruiz · Av. Providencia 1456",
        )
        result = await client.create_appointment(request)
        assert isinstance(result, Ok)
        assert captured["mechanicId"] == 7
        assert captured["visitType"] == "presencial"
        assert captured["scheduledFor"] == "2026-10-20T12:00:00.000Z"


class TestAccount:
    @pytest.mark.asyncio
    async def test_register_conflict_without_body_message(self, backend, client):
        backend.add("POST", "/api/register", status=409)
        result = await client.register(_register_request())
        assert result == Failure(message="El correo ya está registrado.", status_code=409)

    @pytest.mark.asyncio
    async def test_register_backend_message_wins(self, backend, client):
        backend.add("POST", "/api/register", status=409, payload={"error": "Correo en uso."})
        result = await client.register(_register_request())
        assert error_message(result, "") == "Correo en uso."

    @pytest.mark.asyncio
    async def test_register_success(self, backend, client):
        backend.add("POST", "/api/register", status=201, payload={"message": "Usuario registrado correctamente."})
        result = await client.register(_register_request())
        assert result == Ok("Usuario registrado correctamente.")

    def test_register_payload_with_certificate(self):
        request = RegisterRequest(
            name="Rosa Díaz",
            email="rosa@tallerruiz.cl",
            password="Secreta1!",
            account_type=AccountType.MECANICO,
            certificate=CertificateUpload.from_bytes(b"%PDF", "application/pdf"),
        )
        payload = request.to_payload()
        assert payload["accountType"] == "mecanico"
        assert payload["certificate"] == {"dataUrl": "data:application/pdf;base64,JVBERg=="}

    @pytest.mark.asyncio
    async def test_bad_credentials_are_a_failure(self, backend, client):
        backend.add("POST", "/api/login", status=401, payload={"error": "Credenciales inválidas."})
        result = await client.login("ana@correo.cl", "Secreta1!")
        assert result == Failure(message="Credenciales inválidas.", status_code=401)

    @pytest.mark.asyncio
    async def test_login_success(self, backend, client):
        backend.add("POST", "/api/login", payload={
            "message": "Inicio de sesión exitoso.", "accountType": "admin", "redirectTo": "/admin.html",
        })
        result = await client.login("ana@correo.cl", "Secreta1!")
        assert result.value.account_type == AccountType.ADMIN
        assert result.value.redirect_to == "/admin.html"

    @pytest.mark.asyncio
    async def test_profile(self, backend, client):
        backend.add("GET", "/api/profile", payload={
            "id": 4, "name": "Rosa", "email": "rosa@tallerruiz.cl", "accountType": "mecanico",
        })
        result = await client.get_profile()
        assert result.value.is_mechanic

    @pytest.mark.asyncio
    async def test_logout_no_content(self, backend, client):
        backend.add("POST", "/api/logout", status=204)
        assert await client.logout() == Ok("Sesión finalizada.")


class TestAdmin:
    @pytest.mark.asyncio
    async def test_update_certificate_status(self, backend, client):
        captured = {}

        def update(request: httpx.Request) -> httpx.Response:
            captured.update(json.loads(request.content))
            return httpx.Response(200, json={})

        backend.add_handler("PUT", "/api/admin/users/4/certificate", update)
        result = await client.update_certificate_status(4, CertificateStatus.VALIDADO)
        assert result == Ok("Estado del certificado actualizado correctamente.")
        assert captured == {"status": "validado"}

    @pytest.mark.asyncio
    async def test_update_account_type(self, backend, client):
        backend.add("PUT", "/api/admin/users/4/account-type", payload={"message": "Listo."})
        assert await client.update_account_type(4, AccountType.ADMIN) == Ok("Listo.")

    def test_invalid_status_rejected(self):
        with pytest.raises(ValueError):
            CertificateStatus("aprobado")
