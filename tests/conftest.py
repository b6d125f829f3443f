"""Shared test fixtures and helpers."""

from datetime import date
from typing import Any, Callable, Optional, Union

import httpx
import pytest

from mechapp.api.client import MechAppClient
from mechapp.availability.controller import AvailabilityController
from mechapp.availability.state import CalendarState
from mechapp.validation.engine import FormValidator

# Monday
TODAY = date(2026, 10, 19)

RUIZ_SCHEDULE = "Lunes a sábado de 9:00 a 19:00 hrs"

MECHANICS_PAYLOAD = {
    "mechanics": [
        {
            "id": 7,
            "name": "Rosa Díaz",
            "email": "rosa@tallerruiz.cl",
            "workshop": {
                "id": "taller-ruiz",
                "name": "Taller Ruiz",
                "address": "Av. Providencia 1456, Providencia",
                "schedule": RUIZ_SCHEDULE,
            },
        },
        {
            "id": 8,
            "name": "Diego Soto",
            "email": "diego@electroauto.cl",
            "workshop": {
                "id": "electroauto-norte",
                "name": "ElectroAuto Norte",
                "address": "Av. Recoleta 2888, Recoleta",
                "schedule": "Lunes a viernes de 8:30 a 18:30 hrs",
            },
        },
        {"id": 9, "name": "", "email": "pedro@motores.cl", "workshop": None},
    ]
}

Handler = Union[tuple[int, Any], Callable[[httpx.Request], Any]]


class FakeBackend:
    """Routes requests by (method, path) to canned responses and records calls."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Handler] = {}
        self.calls: list[tuple[str, str, dict[str, str]]] = []

    def add(self, method: str, path: str, status: int = 200, payload: Any = None) -> None:
        self.routes[(method, path)] = (status, payload)

    def add_handler(self, method: str, path: str, handler: Callable[[httpx.Request], Any]) -> None:
        self.routes[(method, path)] = handler

    def paths(self) -> list[str]:
        return [path for _, path, _ in self.calls]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append((request.method, request.url.path, dict(request.url.params)))
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"error": "Not found"})
        if callable(route):
            response = route(request)
            if not isinstance(response, httpx.Response):
                response = await response
            return response
        status, payload = route
        if payload is None:
            return httpx.Response(status)
        return httpx.Response(status, json=payload)


def make_client(backend: FakeBackend) -> MechAppClient:
    return MechAppClient("http://testserver", transport=httpx.MockTransport(backend))


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def calendar_state() -> CalendarState:
    return CalendarState.initialize(TODAY)


@pytest.fixture
def backend() -> FakeBackend:
    fake = FakeBackend()
    fake.add("GET", "/api/mechanics", payload=MECHANICS_PAYLOAD)
    return fake


@pytest.fixture
def client(backend) -> MechAppClient:
    return make_client(backend)


@pytest.fixture
def controller(client) -> AvailabilityController:
    return AvailabilityController(client, today=TODAY)


@pytest.fixture
def register_form() -> FormValidator:
    return FormValidator("register")


def fill_register(
    validator: FormValidator,
    account_type: str = "cliente",
    certificate: Optional[list[str]] = None,
) -> FormValidator:
    """Fill every register field with valid values."""
    validator.input("name", "Ana Pérez")
    validator.input("email", "ana@correo.cl")
    validator.input("password", "Secreta1!")
    validator.input("confirm-password", "Secreta1!")
    validator.input("account-type", account_type)
    if certificate is not None:
        validator.input("certificate", certificate)
    return validator
