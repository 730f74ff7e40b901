"""Schema exports."""

from app.schemas.auth import AuthUserResponse, LoginRequest, RegisterRequest, RoleAssignmentRequest, TokenResponse
from app.schemas.company import (
    CompanyCreate,
    CompanyRead,
    OrganizationCreate,
    OrganizationRead,
    PlaceCreate,
    PlaceRead,
)
from app.schemas.delivery import (
    CompanyDeliveryCreate,
    CompanyDeliveryRead,
    CompanyDeliveryUpdate,
    DeliveryQuoteRequest,
    DeliveryQuoteResponse,
    DeliveryStatistics,
    DeliveryZoneCreate,
    DeliveryZoneRead,
    DeliveryZoneUpdate,
)
from app.schemas.schedule import (
    CompanyOpenStatus,
    CompanyScheduleCreate,
    CompanyScheduleRead,
    CompanyScheduleUpdate,
    OpenStatusResponse,
    ScheduleHourCreate,
    ScheduleHourRead,
    ScheduleHourUpdate,
    ScheduleStatistics,
)

__all__ = [
    "AuthUserResponse",
    "LoginRequest",
    "RegisterRequest",
    "RoleAssignmentRequest",
    "TokenResponse",
    "CompanyCreate",
    "CompanyRead",
    "OrganizationCreate",
    "OrganizationRead",
    "PlaceCreate",
    "PlaceRead",
    "CompanyDeliveryCreate",
    "CompanyDeliveryRead",
    "CompanyDeliveryUpdate",
    "DeliveryQuoteRequest",
    "DeliveryQuoteResponse",
    "DeliveryStatistics",
    "DeliveryZoneCreate",
    "DeliveryZoneRead",
    "DeliveryZoneUpdate",
    "CompanyOpenStatus",
    "CompanyScheduleCreate",
    "CompanyScheduleRead",
    "CompanyScheduleUpdate",
    "OpenStatusResponse",
    "ScheduleHourCreate",
    "ScheduleHourRead",
    "ScheduleHourUpdate",
    "ScheduleStatistics",
]
