"""Certificate moderation helpers for the admin dashboard."""

from dataclasses import dataclass
from typing import Iterable, Optional

from mechapp.schemas.account_schema import AccountType, AdminUser, CertificateStatus
from mechapp.utils import normalize_text

ALL = "todos"


@dataclass(frozen=True)
class UserStats:
    total: int
    mechanics: int
    admins: int
    validated_certificates: int
    pending_certificates: int


def summarize_users(users: Iterable[AdminUser]) -> UserStats:
    items = list(users)
    return UserStats(
        total=len(items),
        mechanics=sum(1 for u in items if u.account_type == AccountType.MECANICO),
        admins=sum(1 for u in items if u.account_type == AccountType.ADMIN),
        validated_certificates=sum(
            1 for u in items if u.certificate_status == CertificateStatus.VALIDADO
        ),
        pending_certificates=sum(
            1 for u in items if u.certificate_status == CertificateStatus.PENDIENTE
        ),
    )


def filter_users(
    users: Iterable[AdminUser],
    account_type: str = ALL,
    certificate_status: str = ALL,
    search: Optional[str] = None,
) -> list[AdminUser]:
    """Filter by account type and certificate status ("todos" matches any)."""
    needle = normalize_text(search).casefold()
    results = []
    for user in users:
        if account_type != ALL and user.account_type.value != account_type:
            continue
        status = user.certificate_status.value if user.certificate_status else None
        if certificate_status != ALL and status != certificate_status:
            continue
        if needle and needle not in user.name.casefold() and needle not in user.email.casefold():
            continue
        results.append(user)
    return results
