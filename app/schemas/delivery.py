"""Delivery configuration, zone and quote schemas."""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.utils.enums import DeliveryType, DeliveryZoneType, FeeCalculationType


class DeliveryZoneCreate(BaseModel):
    """Payload for one delivery zone; geometry must match ``zone_type``."""

    name: str = Field(min_length=1, max_length=255)
    zone_type: DeliveryZoneType
    radius_km: Decimal | None = Field(default=None, gt=0, le=100)
    coordinates: list[Any] | dict[str, Any] | None = None
    neighborhoods: str | None = None
    postal_codes: str | None = None
    delivery_fee: Decimal = Field(default=Decimal("0.00"), ge=0)
    estimated_time_minutes: int = Field(default=30, ge=5, le=300)
    minimum_order_value: Decimal | None = Field(default=None, ge=0)
    is_enabled: bool = True
    priority: int = Field(default=0, ge=0, le=100)
    description: str | None = Field(default=None, max_length=1000)


class DeliveryZoneUpdate(BaseModel):
    """Partial zone update; only provided fields change."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    zone_type: DeliveryZoneType | None = None
    radius_km: Decimal | None = Field(default=None, gt=0, le=100)
    coordinates: list[Any] | dict[str, Any] | None = None
    neighborhoods: str | None = None
    postal_codes: str | None = None
    delivery_fee: Decimal | None = Field(default=None, ge=0)
    estimated_time_minutes: int | None = Field(default=None, ge=5, le=300)
    minimum_order_value: Decimal | None = Field(default=None, ge=0)
    is_enabled: bool | None = None
    priority: int | None = Field(default=None, ge=0, le=100)
    description: str | None = Field(default=None, max_length=1000)


class DeliveryZoneRead(BaseModel):
    id: int
    company_id: int
    name: str
    zone_type: DeliveryZoneType
    radius_km: Decimal | None
    coordinates: list[Any] | dict[str, Any] | None
    neighborhoods: str | None
    postal_codes: str | None
    delivery_fee: Decimal
    estimated_time_minutes: int
    minimum_order_value: Decimal | None
    is_enabled: bool
    priority: int
    description: str | None

    model_config = ConfigDict(from_attributes=True)


class CompanyDeliveryCreate(BaseModel):
    """Full delivery configuration payload for create or upsert."""

    is_enabled: bool = False
    available_types: list[DeliveryType] = Field(default_factory=list)
    fee_calculation_type: FeeCalculationType = FeeCalculationType.FIXED
    base_fee: Decimal = Field(default=Decimal("0.00"), ge=0)
    fee_per_km: Decimal | None = Field(default=None, ge=0)
    free_delivery_min_value: Decimal | None = Field(default=None, ge=0)
    estimated_time_minutes: int = Field(default=30, ge=5, le=300)
    max_delivery_time_minutes: int | None = Field(default=None, ge=5, le=600)
    pickup_time_minutes: int = Field(default=15, ge=5, le=120)
    minimum_order_value: Decimal | None = Field(default=None, ge=0)
    maximum_order_value: Decimal | None = Field(default=None, ge=0)
    accepts_cash: bool = True
    accepts_card: bool = True
    accepts_pix: bool = True
    delivery_instructions: str | None = None
    pickup_instructions: str | None = None
    delivery_phone: str | None = Field(default=None, max_length=32)
    zones: list[DeliveryZoneCreate] | None = None


class CompanyDeliveryUpdate(BaseModel):
    """Partial configuration update; ``zones`` replaces the zone collection."""

    is_enabled: bool | None = None
    available_types: list[DeliveryType] | None = None
    fee_calculation_type: FeeCalculationType | None = None
    base_fee: Decimal | None = Field(default=None, ge=0)
    fee_per_km: Decimal | None = Field(default=None, ge=0)
    free_delivery_min_value: Decimal | None = Field(default=None, ge=0)
    estimated_time_minutes: int | None = Field(default=None, ge=5, le=300)
    max_delivery_time_minutes: int | None = Field(default=None, ge=5, le=600)
    pickup_time_minutes: int | None = Field(default=None, ge=5, le=120)
    minimum_order_value: Decimal | None = Field(default=None, ge=0)
    maximum_order_value: Decimal | None = Field(default=None, ge=0)
    accepts_cash: bool | None = None
    accepts_card: bool | None = None
    accepts_pix: bool | None = None
    delivery_instructions: str | None = None
    pickup_instructions: str | None = None
    delivery_phone: str | None = Field(default=None, max_length=32)
    zones: list[DeliveryZoneCreate] | None = None


class CompanyDeliveryRead(BaseModel):
    id: int
    company_id: int
    is_enabled: bool
    available_types: list[DeliveryType]
    fee_calculation_type: FeeCalculationType
    base_fee: Decimal
    fee_per_km: Decimal | None
    free_delivery_min_value: Decimal | None
    estimated_time_minutes: int
    max_delivery_time_minutes: int | None
    pickup_time_minutes: int
    minimum_order_value: Decimal | None
    maximum_order_value: Decimal | None
    accepts_cash: bool
    accepts_card: bool
    accepts_pix: bool
    delivery_instructions: str | None
    pickup_instructions: str | None
    delivery_phone: str | None
    zones: list[DeliveryZoneRead]

    model_config = ConfigDict(from_attributes=True)


class DeliveryQuoteRequest(BaseModel):
    """Customer address and optional order value to quote."""

    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    postal_code: str | None = None
    neighborhood: str | None = None
    order_value: Decimal | None = Field(default=None, ge=0)


class DeliveryQuoteResponse(BaseModel):
    can_deliver: bool
    fee: Decimal
    estimated_time: int
    zone: DeliveryZoneRead | None = None
    reason: str | None = None
    distance_km: float | None = None

    model_config = ConfigDict(from_attributes=True)


class DeliveryStatistics(BaseModel):
    total_companies: int
    companies_with_delivery: int
    average_delivery_fee: float
    average_delivery_time: int
    delivery_type_stats: dict[DeliveryType, int]
