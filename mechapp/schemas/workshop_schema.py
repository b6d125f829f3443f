"""Workshop, mechanic and review data models."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ApiModel(BaseModel):
    """Base for models read from camelCase JSON payloads."""

    model_config = ConfigDict(populate_by_name=True)


class MechanicWorkshop(ApiModel):
    """Workshop summary attached to a mechanic record."""

    id: str
    name: str = ""
    address: str = ""
    schedule: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        return str(value)


class Mechanic(ApiModel):
    """Validated mechanic available for appointments."""

    id: int = Field(gt=0)
    name: str = ""
    email: str = ""
    workshop: Optional[MechanicWorkshop] = None

    @property
    def display_name(self) -> str:
        return self.name or self.email

    @property
    def schedule(self) -> Optional[str]:
        return self.workshop.schedule if self.workshop else None


class Workshop(ApiModel):
    """Public workshop listing or detail."""

    id: str
    name: str
    address: str = ""
    schedule: Optional[str] = None
    short_description: Optional[str] = Field(default=None, alias="shortDescription")
    description: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    services: list[str] = Field(default_factory=list)
    specialties: list[str] = Field(default_factory=list)
    experience_years: int = Field(default=0, alias="experienceYears")
    average_rating: Optional[float] = Field(default=None, alias="averageRating")
    reviews_count: int = Field(default=0, alias="reviewsCount")
    lat: Optional[float] = None
    lng: Optional[float] = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        return str(value)


class Review(ApiModel):
    """Published workshop review."""

    id: int
    workshop_id: str = Field(alias="workshopId")
    rating: int = Field(ge=1, le=5)
    service: str = ""
    visit_type: str = Field(default="taller", alias="visitType")
    visit_date: Optional[str] = Field(default=None, alias="visitDate")
    headline: Optional[str] = None
    comment: str = ""
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    client_name: str = Field(default="Cliente verificado", alias="clientName")

    @field_validator("workshop_id", mode="before")
    @classmethod
    def _coerce_workshop_id(cls, value: Any) -> str:
        return str(value)
