"""Company delivery configuration, zone and quote endpoints."""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError
from app.core.security import get_current_user
from app.db.session import get_db
from app.models import User
from app.schemas.company import CompanyRead
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
from app.services import delivery_service
from app.services.company_service import get_company
from app.services.security_guards import ensure_role
from app.utils.enums import RoleType

router = APIRouter()

ADMIN_ROLES: set[RoleType] = {
    RoleType.SUPER_ADMIN,
    RoleType.ORGANIZATION_ADMIN,
    RoleType.PLACE_ADMIN,
    RoleType.COMPANY_ADMIN,
}


@router.get("/companies/{company_id}/delivery", response_model=CompanyDeliveryRead)
def get_company_delivery(company_id: int, db: Session = Depends(get_db)) -> CompanyDeliveryRead:
    get_company(db, company_id)
    config = delivery_service.get_delivery_by_company(db, company_id)
    if config is None:
        raise NotFoundError("Delivery configuration not found for this company")
    return CompanyDeliveryRead.model_validate(config)


@router.put("/companies/{company_id}/delivery", response_model=CompanyDeliveryRead)
def upsert_company_delivery(
    company_id: int,
    payload: CompanyDeliveryCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CompanyDeliveryRead:
    config = delivery_service.upsert_delivery(db, current_user, company_id, payload)
    return CompanyDeliveryRead.model_validate(config)


@router.delete("/companies/{company_id}/delivery", status_code=status.HTTP_204_NO_CONTENT)
def delete_company_delivery(
    company_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Response:
    config = delivery_service.get_delivery_by_company(db, company_id)
    if config is None:
        raise NotFoundError("Delivery configuration not found for this company")
    delivery_service.remove_delivery(db, current_user, config.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/delivery/{delivery_id}", response_model=CompanyDeliveryRead)
def update_delivery(
    delivery_id: int,
    payload: CompanyDeliveryUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CompanyDeliveryRead:
    config = delivery_service.update_delivery(db, current_user, delivery_id, payload)
    return CompanyDeliveryRead.model_validate(config)


@router.post(
    "/companies/{company_id}/delivery/zones",
    response_model=DeliveryZoneRead,
    status_code=status.HTTP_201_CREATED,
)
def add_delivery_zone(
    company_id: int,
    payload: DeliveryZoneCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> DeliveryZoneRead:
    zone = delivery_service.add_zone(db, current_user, company_id, payload)
    return DeliveryZoneRead.model_validate(zone)


@router.patch("/delivery/zones/{zone_id}", response_model=DeliveryZoneRead)
def update_delivery_zone(
    zone_id: int,
    payload: DeliveryZoneUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> DeliveryZoneRead:
    zone = delivery_service.update_zone(db, current_user, zone_id, payload)
    return DeliveryZoneRead.model_validate(zone)


@router.delete("/delivery/zones/{zone_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_delivery_zone(
    zone_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Response:
    delivery_service.remove_zone(db, current_user, zone_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/companies/{company_id}/delivery/quote", response_model=DeliveryQuoteResponse)
def quote_delivery(
    company_id: int,
    payload: DeliveryQuoteRequest,
    db: Session = Depends(get_db),
) -> DeliveryQuoteResponse:
    quote = delivery_service.quote_for_company(db, company_id, payload)
    return DeliveryQuoteResponse.model_validate(quote)


@router.get("/delivery/mine", response_model=list[CompanyDeliveryRead])
def list_my_deliveries(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[CompanyDeliveryRead]:
    ensure_role(current_user, ADMIN_ROLES)
    configs = delivery_service.list_deliveries_for_user(db, current_user)
    return [CompanyDeliveryRead.model_validate(config) for config in configs]


@router.get("/delivery/companies", response_model=list[CompanyRead])
def list_companies_with_delivery(
    place_id: int | None = Query(default=None),
    db: Session = Depends(get_db),
) -> list[CompanyRead]:
    companies = delivery_service.list_companies_with_delivery(db, place_id=place_id)
    return [CompanyRead.model_validate(company) for company in companies]


@router.get("/delivery/statistics", response_model=DeliveryStatistics)
def get_delivery_statistics(
    place_id: int | None = Query(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> DeliveryStatistics:
    ensure_role(current_user, ADMIN_ROLES)
    return DeliveryStatistics(**delivery_service.delivery_statistics(db, place_id=place_id))
