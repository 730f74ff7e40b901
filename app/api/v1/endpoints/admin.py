"""Admin endpoints for the organization, place and company hierarchy."""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError
from app.core.security import get_current_user
from app.db.session import get_db
from app.models import Company, User
from app.schemas.auth import AuthUserResponse, RoleAssignmentRequest
from app.schemas.company import (
    CompanyCreate,
    CompanyRead,
    OrganizationCreate,
    OrganizationRead,
    PlaceCreate,
    PlaceRead,
)
from app.services import company_service
from app.services.security_guards import ensure_role
from app.services.user_service import assign_role, get_user_by_id
from app.utils.enums import RoleType

router = APIRouter()

ADMIN_ROLES: set[RoleType] = {
    RoleType.SUPER_ADMIN,
    RoleType.ORGANIZATION_ADMIN,
    RoleType.PLACE_ADMIN,
    RoleType.COMPANY_ADMIN,
}


@router.post("/organizations", response_model=OrganizationRead, status_code=status.HTTP_201_CREATED)
def create_organization(
    payload: OrganizationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> OrganizationRead:
    organization = company_service.create_organization(db, current_user, payload)
    return OrganizationRead.model_validate(organization)


@router.post("/places", response_model=PlaceRead, status_code=status.HTTP_201_CREATED)
def create_place(
    payload: PlaceCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> PlaceRead:
    place = company_service.create_place(db, current_user, payload)
    return PlaceRead.model_validate(place)


@router.post("/companies", response_model=CompanyRead, status_code=status.HTTP_201_CREATED)
def create_company(
    payload: CompanyCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CompanyRead:
    company = company_service.create_company(db, current_user, payload)
    return CompanyRead.model_validate(company)


@router.get("/companies", response_model=list[CompanyRead])
def list_companies(
    place_id: int | None = Query(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[Company]:
    ensure_role(current_user, ADMIN_ROLES)
    return company_service.list_companies(db, place_id=place_id, active_only=False)


@router.put("/users/{user_id}/role", response_model=AuthUserResponse)
def update_user_role(
    user_id: int,
    payload: RoleAssignmentRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> AuthUserResponse:
    ensure_role(current_user, {RoleType.SUPER_ADMIN})
    user = get_user_by_id(db, user_id)
    if user is None:
        raise NotFoundError(f"User {user_id} not found")
    try:
        user = assign_role(
            db,
            user,
            payload.role,
            organization_id=payload.organization_id,
            place_id=payload.place_id,
            company_id=payload.company_id,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return AuthUserResponse.model_validate(user)
