"""
Declarative field rules for each client-side form.

Each form type maps field names to an ordered list of validators. A
field's errors are the concatenation of every validator's output in
declaration order, and fields are checked in declaration order so the first
invalid one can receive focus.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from mechapp.config import settings
from mechapp.validation.rules import (
    Validator,
    ValidatorOutput,
    date_key_format,
    email_format,
    integer_between,
    matches_field,
    min_length,
    password_policy,
    required,
    required_when,
)

ACCOUNT_TYPE_FIELD = "account-type"
CERTIFICATE_FIELD = "certificate"
PASSWORD_FIELD = "password"
CONFIRM_PASSWORD_FIELD = "confirm-password"
MECHANIC_ACCOUNT = "mecanico"


def normalize_value(value: Any) -> Any:
    """Text is trimmed, checkboxes stay bool, file inputs become a list."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return value
    if isinstance(value, (list, tuple)):
        return list(value)
    return str(value).strip()


class FormValues:
    """Current raw values of a form, read back normalized."""

    def __init__(self, values: Mapping[str, Any] = ()) -> None:
        self._values: dict[str, Any] = dict(values)

    def has(self, name: str) -> bool:
        return name in self._values

    def value(self, name: str) -> Any:
        return normalize_value(self._values.get(name))

    def set(self, name: str, value: Any) -> None:
        self._values[name] = value

    def to_dict(self) -> dict[str, Any]:
        return {name: normalize_value(value) for name, value in self._values.items()}


@dataclass(frozen=True)
class FormConfig:
    """Validators per field for one form type."""

    form_type: str
    fields: dict[str, list[Validator]]

    @property
    def field_names(self) -> list[str]:
        return list(self.fields.keys())


def _email_rules() -> list[Validator]:
    return [required("Ingresa tu correo electrónico."), email_format()]


FORM_CONFIGURATIONS: dict[str, FormConfig] = {
    "login": FormConfig(
        form_type="login",
        fields={
            "email": _email_rules(),
            PASSWORD_FIELD: [required("Ingresa tu contraseña.")],
        },
    ),
    "register": FormConfig(
        form_type="register",
        fields={
            "name": [
                required("Ingresa tu nombre completo."),
                min_length(
                    settings.validation.name_min_length,
                    f"Tu nombre debe tener al menos {settings.validation.name_min_length} caracteres.",
                ),
            ],
            "email": _email_rules(),
            PASSWORD_FIELD: [password_policy],
            CONFIRM_PASSWORD_FIELD: [
                required("Confirma tu contraseña."),
                matches_field(PASSWORD_FIELD, "Las contraseñas no coinciden."),
            ],
            ACCOUNT_TYPE_FIELD: [required("Selecciona un tipo de cuenta.")],
            CERTIFICATE_FIELD: [
                required_when(
                    ACCOUNT_TYPE_FIELD, MECHANIC_ACCOUNT, "Adjunta tu certificación profesional."
                ),
            ],
        },
    ),
    "recovery": FormConfig(
        form_type="recovery",
        fields={"email": _email_rules()},
    ),
    "review": FormConfig(
        form_type="review",
        fields={
            "rating": [integer_between(1, 5, "Selecciona una calificación entre 1 y 5 estrellas.")],
            "service": [required("Describe el servicio que recibiste.")],
            "visit-date": [
                date_key_format("Ingresa la fecha de la visita en el formato AAAA-MM-DD."),
            ],
            "comments": [required("Comparte tu experiencia con algunos detalles.")],
        },
    ),
}


def get_form_config(form_type: str) -> FormConfig:
    try:
        return FORM_CONFIGURATIONS[form_type]
    except KeyError:
        raise ValueError(f"Unknown form type: {form_type}") from None


def normalize_errors(result: ValidatorOutput) -> list[str]:
    if not result:
        return []
    if isinstance(result, list):
        return [message for message in result if message]
    return [result]


def get_field_errors(config: FormConfig, form: FormValues, field_name: str) -> list[str]:
    """Run every validator of ``field_name`` in order and collect the messages."""
    value = form.value(field_name)
    errors: list[str] = []
    for validator in config.fields.get(field_name, []):
        errors.extend(normalize_errors(validator(value, form, field_name)))
    return errors


def validate_form(form_type: str, values: Mapping[str, Any]) -> dict[str, list[str]]:
    """Stateless check of a whole form; only fields with errors are returned."""
    config = get_form_config(form_type)
    form = FormValues(values)
    errors = {name: get_field_errors(config, form, name) for name in config.field_names}
    return {name: messages for name, messages in errors.items() if messages}
