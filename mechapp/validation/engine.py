"""
Stateful form validator with touched tracking and a submit gate.

Mirrors what the user sees while filling a form: errors are only shown for
touched fields, but the submit button reflects the validity of the whole
form at all times. Submitting marks every field touched and reports the
first invalid field so the caller can focus it.

Usage:
    validator = FormValidator("register")
    validator.input("password", "Secreta1!")
    validator.input("confirm-password", "Secreta1")
    validator.visible_errors("confirm-password")  # ["Las contraseñas no coinciden."]
    outcome = validator.submit()
    if not outcome.allowed:
        focus(outcome.focus_field)
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from mechapp.api.results import Failure, Forbidden, Ok, Unauthenticated
from mechapp.logging_context import get_session_logger
from mechapp.validation.forms import (
    ACCOUNT_TYPE_FIELD,
    CERTIFICATE_FIELD,
    CONFIRM_PASSWORD_FIELD,
    MECHANIC_ACCOUNT,
    PASSWORD_FIELD,
    FormValues,
    get_field_errors,
    get_form_config,
)
from mechapp.validation.rules import password_rule_states

logger = get_session_logger(__name__)

SESSION_EXPIRED_MESSAGE = "Tu sesión expiró. Inicia sesión nuevamente."


@dataclass
class FieldState:
    """Display state of one field."""

    touched: bool = False
    errors: list[str] = field(default_factory=list)
    visible: bool = True
    required: bool = True


@dataclass(frozen=True)
class SubmitResult:
    """Outcome of a submit attempt; no network call should happen unless allowed."""

    allowed: bool
    focus_field: Optional[str] = None
    errors: dict[str, list[str]] = field(default_factory=dict)


class FormValidator:
    """Validates one form instance as the user edits it."""

    def __init__(self, form_type: str, values: Optional[Mapping[str, Any]] = None) -> None:
        self.config = get_form_config(form_type)
        self.form = FormValues(values or {})
        self.fields: dict[str, FieldState] = {
            name: FieldState() for name in self.config.field_names
        }
        self.status_message = ""
        for name in self.fields:
            self.validate_field(name)
        if self.has_field(ACCOUNT_TYPE_FIELD) and self.has_field(CERTIFICATE_FIELD):
            self._toggle_certificate()

    @property
    def form_type(self) -> str:
        return self.config.form_type

    def has_field(self, name: str) -> bool:
        return name in self.fields

    def _state(self, name: str) -> FieldState:
        if name not in self.fields:
            raise ValueError(f"Unknown field: {name}")
        return self.fields[name]

    def validate_field(self, name: str) -> list[str]:
        state = self._state(name)
        state.errors = get_field_errors(self.config, self.form, name)
        return state.errors

    # ----- Events -----

    def input(self, name: str, value: Any) -> list[str]:
        """Handle an input/change event: store, touch and revalidate."""
        state = self._state(name)
        self.form.set(name, value)
        state.touched = True
        errors = self.validate_field(name)

        if name == PASSWORD_FIELD and self.has_field(CONFIRM_PASSWORD_FIELD):
            self.validate_field(CONFIRM_PASSWORD_FIELD)
        if name == ACCOUNT_TYPE_FIELD and self.has_field(CERTIFICATE_FIELD):
            self._toggle_certificate()
        return errors

    def blur(self, name: str) -> list[str]:
        self._state(name).touched = True
        return self.validate_field(name)

    def _toggle_certificate(self) -> None:
        """Certificate is shown and required only for mechanic accounts."""
        is_mechanic = self.form.value(ACCOUNT_TYPE_FIELD) == MECHANIC_ACCOUNT
        certificate = self.fields[CERTIFICATE_FIELD]
        certificate.visible = is_mechanic
        certificate.required = is_mechanic
        if not is_mechanic:
            self.form.set(CERTIFICATE_FIELD, [])
        self.validate_field(CERTIFICATE_FIELD)
        logger.debug("Certificate field %s", "required" if is_mechanic else "hidden")

    # ----- Read-back -----

    def visible_errors(self, name: str) -> list[str]:
        state = self._state(name)
        return list(state.errors) if state.touched else []

    def error_text(self, name: str) -> str:
        return " ".join(self.visible_errors(name))

    def is_invalid(self, name: str) -> bool:
        """aria-invalid: only true once the field is touched."""
        return bool(self.visible_errors(name))

    def is_submit_enabled(self) -> bool:
        return all(
            not get_field_errors(self.config, self.form, name) for name in self.fields
        )

    def password_rules(self) -> dict[str, bool]:
        value = self.form.value(PASSWORD_FIELD)
        return password_rule_states(value if isinstance(value, str) else "")

    def values(self) -> dict[str, Any]:
        return {name: self.form.value(name) for name in self.fields}

    # ----- Submission -----

    def submit(self) -> SubmitResult:
        """Force-validate everything; block submission if any field is invalid."""
        invalid = []
        for name, state in self.fields.items():
            state.touched = True
            if self.validate_field(name):
                invalid.append(name)

        if invalid:
            logger.info("%s form blocked: %d invalid field(s)", self.form_type, len(invalid))
            return SubmitResult(
                allowed=False,
                focus_field=invalid[0],
                errors={name: list(self.fields[name].errors) for name in invalid},
            )
        return SubmitResult(allowed=True)

    def apply_server_result(self, result: object, success_message: str = "") -> str:
        """Set the form-level status line from a backend outcome."""
        if isinstance(result, Ok):
            value = result.value
            self.status_message = value if isinstance(value, str) and value else success_message
        elif isinstance(result, (Failure, Forbidden)):
            self.status_message = result.message
        elif isinstance(result, Unauthenticated):
            self.status_message = SESSION_EXPIRED_MESSAGE
        return self.status_message
