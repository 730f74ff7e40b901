"""Tenant hierarchy helpers: organizations, places and companies."""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.errors import AccessDeniedError, NotFoundError, ValidationError
from app.models import Company, Organization, Place, User
from app.schemas.company import CompanyCreate, OrganizationCreate, PlaceCreate
from app.services.security_guards import ensure_can_manage_place, ensure_role
from app.utils.enums import RoleType

logger = logging.getLogger(__name__)


def _ensure_unique_slug(db: Session, model: type, slug: str) -> None:
    if db.scalar(select(model.id).where(model.slug == slug).limit(1)) is not None:
        raise ValidationError(f"{model.__name__} slug '{slug}' already in use")


def create_organization(db: Session, user: User, payload: OrganizationCreate) -> Organization:
    ensure_role(user, {RoleType.SUPER_ADMIN})
    _ensure_unique_slug(db, Organization, payload.slug)
    organization = Organization(name=payload.name.strip(), slug=payload.slug.strip())
    db.add(organization)
    db.commit()
    db.refresh(organization)
    logger.info("[TENANT] Organization %s created by user_id=%s", organization.id, user.id)
    return organization


def create_place(db: Session, user: User, payload: PlaceCreate) -> Place:
    organization = db.get(Organization, payload.organization_id)
    if organization is None:
        raise NotFoundError(f"Organization {payload.organization_id} not found")
    allowed = user.role == RoleType.SUPER_ADMIN or (
        user.role == RoleType.ORGANIZATION_ADMIN and user.organization_id == organization.id
    )
    if not allowed:
        raise AccessDeniedError("You are not allowed to manage this organization")
    _ensure_unique_slug(db, Place, payload.slug)
    place = Place(**payload.model_dump())
    db.add(place)
    db.commit()
    db.refresh(place)
    logger.info("[TENANT] Place %s created by user_id=%s", place.id, user.id)
    return place


def create_company(db: Session, user: User, payload: CompanyCreate) -> Company:
    ensure_can_manage_place(db, user, payload.place_id)
    _ensure_unique_slug(db, Company, payload.slug)
    company = Company(**payload.model_dump())
    db.add(company)
    db.commit()
    db.refresh(company)
    logger.info("[TENANT] Company %s created in place %s", company.id, company.place_id)
    return company


def get_company(db: Session, company_id: int) -> Company:
    company = db.get(Company, company_id)
    if company is None:
        raise NotFoundError(f"Company {company_id} not found")
    return company


def list_companies(db: Session, place_id: int | None = None, active_only: bool = True) -> list[Company]:
    """Return companies ordered by name, optionally restricted to one place."""
    stmt = select(Company)
    if place_id is not None:
        stmt = stmt.where(Company.place_id == place_id)
    if active_only:
        stmt = stmt.where(Company.is_active.is_(True))
    return list(db.scalars(stmt.order_by(Company.name.asc())).all())
