"""Centralized role-scope checks for every mutation entry point."""

from __future__ import annotations

from sqlalchemy.orm import Session

from app.core.errors import AccessDeniedError, NotFoundError
from app.models import Company, Place, User
from app.utils.enums import RoleType


def can_manage_place(user: User, place: Place) -> bool:
    """Return whether user administers ``place`` directly or through its organization."""
    if user.role == RoleType.SUPER_ADMIN:
        return True
    if user.role == RoleType.ORGANIZATION_ADMIN:
        return user.organization_id is not None and user.organization_id == place.organization_id
    if user.role == RoleType.PLACE_ADMIN:
        return user.place_id is not None and user.place_id == place.id
    return False


def can_manage(user: User, company: Company) -> bool:
    """Return whether user may change the configuration of ``company``."""
    if user.role == RoleType.COMPANY_ADMIN:
        return user.company_id is not None and user.company_id == company.id
    if company.place is None:
        return user.role == RoleType.SUPER_ADMIN
    return can_manage_place(user, company.place)


def ensure_role(user: User, allowed_roles: set[RoleType]) -> None:
    """Ensure user role is one of allowed roles."""
    if user.role not in allowed_roles:
        raise AccessDeniedError("Not enough permissions")


def ensure_can_manage(db: Session, user: User, company_id: int) -> Company:
    """Load company and forbid access outside the user's scope."""
    company = db.get(Company, company_id)
    if company is None:
        raise NotFoundError(f"Company {company_id} not found")
    if not can_manage(user, company):
        raise AccessDeniedError("You are not allowed to manage this company")
    return company


def ensure_can_manage_place(db: Session, user: User, place_id: int) -> Place:
    place = db.get(Place, place_id)
    if place is None:
        raise NotFoundError(f"Place {place_id} not found")
    if not can_manage_place(user, place):
        raise AccessDeniedError("You are not allowed to manage this place")
    return place
