"""Organization, place and company schemas."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class OrganizationCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    slug: str = Field(min_length=1, max_length=255)


class OrganizationRead(OrganizationCreate):
    id: int

    model_config = ConfigDict(from_attributes=True)


class PlaceCreate(BaseModel):
    organization_id: int
    name: str = Field(min_length=1, max_length=255)
    slug: str = Field(min_length=1, max_length=255)
    city: str
    state: str
    latitude: Decimal | None = Field(default=None, ge=-90, le=90)
    longitude: Decimal | None = Field(default=None, ge=-180, le=180)


class PlaceRead(PlaceCreate):
    id: int

    model_config = ConfigDict(from_attributes=True)


class CompanyCreate(BaseModel):
    place_id: int
    name: str = Field(min_length=1, max_length=255)
    slug: str = Field(min_length=1, max_length=255)
    description: str | None = None
    address: str | None = None
    latitude: Decimal | None = Field(default=None, ge=-90, le=90)
    longitude: Decimal | None = Field(default=None, ge=-180, le=180)


class CompanyRead(CompanyCreate):
    id: int
    is_active: bool

    model_config = ConfigDict(from_attributes=True)
