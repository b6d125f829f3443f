"""Typed outcomes of backend API calls.

The client never redirects or raises for HTTP problems. Callers match on
the result and decide themselves whether to navigate to the login page,
show an empty state or display the failure message.
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, Union

from mechapp.config import settings

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Unauthenticated:
    """HTTP 401: the session is missing or expired."""

    login_path: str = settings.api.login_path


@dataclass(frozen=True)
class Forbidden:
    """HTTP 403: authenticated, but not allowed."""

    message: str = "No autorizado."


@dataclass(frozen=True)
class Failure:
    """Network, parse or non-2xx failure carrying a user-facing message."""

    message: str
    status_code: Optional[int] = None


ApiResult = Union[Ok[T], Unauthenticated, Forbidden, Failure]


def is_ok(result: object) -> bool:
    return isinstance(result, Ok)


def error_message(result: object, default: str = "") -> str:
    """Message to show on a form status line for a non-Ok result."""
    if isinstance(result, (Failure, Forbidden)):
        return result.message
    return default
