"""
Reusable field validators and the password policy.

A validator is called as ``validator(value, form, field_name)`` and returns
None when the value is valid, a single message, or a list of messages.
``value`` is already normalized: trimmed text, a bool for checkboxes or a
list of file names for file inputs.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional, Union

from mechapp.availability.calendar import parse_date_key
from mechapp.config import settings

if TYPE_CHECKING:
    from mechapp.validation.forms import FormValues

ValidatorOutput = Union[None, str, list[str]]
Validator = Callable[[Any, "FormValues", str], ValidatorOutput]

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
UPPERCASE_PATTERN = re.compile(r"[A-ZÁÉÍÓÚÜÑ]")
LOWERCASE_PATTERN = re.compile(r"[a-záéíóúüñ]")
NUMBER_OR_SYMBOL_PATTERN = re.compile(r"(\d|[^A-Za-zÁÉÍÓÚÜÑáéíóúüñ\s])")

PASSWORD_REQUIRED_MESSAGE = "Ingresa una contraseña."


@dataclass(frozen=True)
class PasswordRule:
    """One independently checked password requirement."""

    key: str
    message: str
    test: Callable[[str], bool]


PASSWORD_RULES: list[PasswordRule] = [
    PasswordRule(
        key="length",
        message=(
            "La contraseña debe tener al menos "
            f"{settings.validation.password_min_length} caracteres."
        ),
        test=lambda value: len(value) >= settings.validation.password_min_length,
    ),
    PasswordRule(
        key="uppercase",
        message="La contraseña debe incluir al menos una letra mayúscula.",
        test=lambda value: bool(UPPERCASE_PATTERN.search(value)),
    ),
    PasswordRule(
        key="lowercase",
        message="La contraseña debe incluir al menos una letra minúscula.",
        test=lambda value: bool(LOWERCASE_PATTERN.search(value)),
    ),
    PasswordRule(
        key="numberOrSymbol",
        message="La contraseña debe incluir un número o símbolo.",
        test=lambda value: bool(NUMBER_OR_SYMBOL_PATTERN.search(value)),
    ),
]


def is_empty(value: Any) -> bool:
    return value is None or value is False or value == "" or value == []


def password_rule_states(value: Optional[str]) -> dict[str, bool]:
    """Pass/fail per rule key, for the live checklist under the password field."""
    text = (value or "").strip()
    return {rule.key: rule.test(text) for rule in PASSWORD_RULES}


def password_policy(value: Any, form: Optional["FormValues"] = None, field: str = "") -> list[str]:
    if is_empty(value):
        return [PASSWORD_REQUIRED_MESSAGE]
    text = str(value)
    return [rule.message for rule in PASSWORD_RULES if not rule.test(text)]


def required(message: str) -> Validator:
    def _check(value: Any, form: "FormValues", field: str) -> ValidatorOutput:
        return message if is_empty(value) else None
    return _check


def email_format(message: str = "Ingresa un correo electrónico válido.") -> Validator:
    def _check(value: Any, form: "FormValues", field: str) -> ValidatorOutput:
        if isinstance(value, str) and value and EMAIL_PATTERN.match(value):
            return None
        return message
    return _check


def min_length(length: int, message: str) -> Validator:
    def _check(value: Any, form: "FormValues", field: str) -> ValidatorOutput:
        if isinstance(value, str) and value and len(value) >= length:
            return None
        return message
    return _check


def matches_field(other_field: str, message: str) -> Validator:
    """Invalid whenever the value differs from the live value of ``other_field``."""
    def _check(value: Any, form: "FormValues", field: str) -> ValidatorOutput:
        if value != form.value(other_field):
            return message
        return None
    return _check


def required_when(other_field: str, expected: str, message: str) -> Validator:
    """Required only while ``other_field`` equals ``expected``."""
    def _check(value: Any, form: "FormValues", field: str) -> ValidatorOutput:
        if form.value(other_field) != expected:
            return None
        return message if is_empty(value) else None
    return _check


def integer_between(low: int, high: int, message: str) -> Validator:
    def _check(value: Any, form: "FormValues", field: str) -> ValidatorOutput:
        try:
            number = int(value)
        except (TypeError, ValueError):
            return message
        return None if low <= number <= high else message
    return _check


def date_key_format(message: str) -> Validator:
    def _check(value: Any, form: "FormValues", field: str) -> ValidatorOutput:
        if isinstance(value, str) and re.fullmatch(r"\d{4}-\d{2}-\d{2}", value) and parse_date_key(value):
            return None
        return message
    return _check
