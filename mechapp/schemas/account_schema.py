"""Account, session and moderation data models."""

import base64
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class AccountType(str, Enum):
    CLIENTE = "cliente"
    MECANICO = "mecanico"
    ADMIN = "admin"


class CertificateStatus(str, Enum):
    PENDIENTE = "pendiente"
    VALIDADO = "validado"
    RECHAZADO = "rechazado"


class Profile(BaseModel):
    """Current session user from GET /api/profile."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    email: str
    account_type: AccountType = Field(alias="accountType")
    created_at: Optional[str] = Field(default=None, alias="createdAt")

    @property
    def is_mechanic(self) -> bool:
        return self.account_type == AccountType.MECANICO


class LoginResult(BaseModel):
    """Successful login response."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = ""
    account_type: AccountType = Field(alias="accountType")
    redirect_to: str = Field(default="/perfil.html", alias="redirectTo")


class CertificateUpload(BaseModel):
    """Professional certificate encoded as a data URL."""

    model_config = ConfigDict(populate_by_name=True)

    data_url: str = Field(alias="dataUrl")

    @classmethod
    def from_bytes(cls, content: bytes, mime_type: str = "application/pdf") -> "CertificateUpload":
        encoded = base64.b64encode(content).decode("ascii")
        return cls(data_url=f"data:{mime_type};base64,{encoded}")


class RegisterRequest(BaseModel):
    """Payload for POST /api/register."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    email: str
    password: str
    account_type: AccountType = Field(alias="accountType")
    certificate: Optional[CertificateUpload] = None
    terms_accepted: bool = Field(default=False, alias="termsAccepted")

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class AdminUser(BaseModel):
    """User row shown on the admin moderation dashboard."""

    id: int
    name: str = ""
    email: str = ""
    account_type: AccountType
    certificate_uploaded: bool = False
    certificate_status: Optional[CertificateStatus] = None
    created_at: Optional[str] = None
