"""Appointment and review request models sent to the backend."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class VisitType(str, Enum):
    PRESENCIAL = "presencial"
    DOMICILIO = "domicilio"


class ReviewVisitType(str, Enum):
    TALLER = "taller"
    DOMICILIO = "domicilio"


class AppointmentRequest(BaseModel):
    """Validated payload for POST /api/appointments."""

    model_config = ConfigDict(populate_by_name=True)

    mechanic_id: int = Field(gt=0, alias="mechanicId")
    service: str = Field(min_length=1)
    visit_type: VisitType = Field(default=VisitType.PRESENCIAL, alias="visitType")
    scheduled_for: str = Field(alias="scheduledFor")
    notes: str = ""
    address: str = Field(min_length=1)
    client_latitude: Optional[float] = Field(default=None, alias="clientLatitude")
    client_longitude: Optional[float] = Field(default=None, alias="clientLongitude")

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class ReviewRequest(BaseModel):
    """Validated payload for POST /api/workshops/:id/reviews."""

    model_config = ConfigDict(populate_by_name=True)

    rating: int = Field(ge=1, le=5)
    service: str = Field(min_length=1)
    visit_type: ReviewVisitType = Field(default=ReviewVisitType.TALLER, alias="visitType")
    visit_date: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$", alias="visitDate")
    headline: str = ""
    comments: str = Field(min_length=1)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")
