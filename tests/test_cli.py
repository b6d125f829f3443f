"""Tests for the command-line entry point."""

import pytest

from main import main


class TestSlotsCommand:
    def test_prints_range_and_slots(self, capsys):
        assert main(["slots", "Lunes a viernes de 8:30 a 11:30 hrs"]) == 0
        assert capsys.readouterr().out == "08:30-11:30: 08:30, 09:30, 10:30, 11:30\n"

    def test_unparseable_schedule_uses_default(self, capsys):
        main(["slots", "Consultar"])
        assert capsys.readouterr().out.startswith("09:00-18:00: 09:00, ")


class TestCalendarCommand:
    def test_invalid_month(self):
        assert main(["calendar", "--month", "2026-13"]) == 1

    def test_month_header(self, capsys):
        assert main(["calendar"]) == 0
        out = capsys.readouterr().out
        assert "  L   M   X   J   V   S   D" in out


class TestValidateCommand:
    def test_valid_login(self, capsys):
        assert main(["validate", "login", "email=ana@correo.cl", "password=x"]) == 0
        assert capsys.readouterr().out == "OK\n"

    def test_invalid_register(self, capsys):
        code = main([
            "validate", "register",
            "name=Ana Pérez", "email=ana@correo.cl",
            "password=Secreta1!", "confirm-password=Secreta1",
            "account-type=cliente",
        ])
        assert code == 2
        assert capsys.readouterr().out == "confirm-password: Las contraseñas no coinciden.\n"

    def test_unknown_form(self):
        with pytest.raises(SystemExit):
            main(["validate", "checkout"])
