from mechapp.validation.engine import FieldState, FormValidator, SubmitResult
from mechapp.validation.forms import FORM_CONFIGURATIONS, FormValues, get_form_config, validate_form
from mechapp.validation.rules import PASSWORD_RULES, password_policy, password_rule_states

__all__ = [
    "FormValidator",
    "FieldState",
    "SubmitResult",
    "FormValues",
    "FORM_CONFIGURATIONS",
    "get_form_config",
    "validate_form",
    "PASSWORD_RULES",
    "password_policy",
    "password_rule_states",
]
