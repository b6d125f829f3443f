from mechapp.api.client import MechAppClient
from mechapp.api.results import ApiResult, Failure, Forbidden, Ok, Unauthenticated

__all__ = [
    "MechAppClient",
    "ApiResult",
    "Ok",
    "Unauthenticated",
    "Forbidden",
    "Failure",
]
