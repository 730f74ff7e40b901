"""Role scope checks over in-memory tenants."""

import pytest

from app.core.errors import AccessDeniedError
from app.models import Company, Place, User
from app.services.security_guards import can_manage, can_manage_place, ensure_role
from app.utils.enums import RoleType


def _tenant() -> tuple[Place, Company]:
    place = Place(id=10, organization_id=1, name="Center", slug="center", city="Sao Paulo", state="SP")
    company = Company(id=100, place_id=10, name="Pizzeria", slug="pizzeria")
    company.place = place
    return place, company


def _user(role: RoleType, **scope) -> User:
    return User(username=f"{role.value.lower()}", role=role, is_active=True, **scope)


@pytest.mark.parametrize(
    ("user", "allowed"),
    [
        (_user(RoleType.SUPER_ADMIN), True),
        (_user(RoleType.ORGANIZATION_ADMIN, organization_id=1), True),
        (_user(RoleType.ORGANIZATION_ADMIN, organization_id=2), False),
        (_user(RoleType.PLACE_ADMIN, place_id=10), True),
        (_user(RoleType.PLACE_ADMIN, place_id=11), False),
        (_user(RoleType.COMPANY_ADMIN, company_id=100), True),
        (_user(RoleType.COMPANY_ADMIN, company_id=101), False),
        (_user(RoleType.COMPANY_ADMIN), False),
        (_user(RoleType.PUBLIC_USER), False),
    ],
)
def test_can_manage_company_by_role(user, allowed) -> None:
    _, company = _tenant()
    assert can_manage(user, company) is allowed


def test_organization_admin_without_scope_manages_nothing() -> None:
    place, company = _tenant()
    user = _user(RoleType.ORGANIZATION_ADMIN)
    assert can_manage_place(user, place) is False
    assert can_manage(user, company) is False


def test_company_admin_cannot_manage_place() -> None:
    place, _ = _tenant()
    assert can_manage_place(_user(RoleType.COMPANY_ADMIN, company_id=100), place) is False


def test_ensure_role() -> None:
    ensure_role(_user(RoleType.SUPER_ADMIN), {RoleType.SUPER_ADMIN})
    with pytest.raises(AccessDeniedError):
        ensure_role(_user(RoleType.PUBLIC_USER), {RoleType.SUPER_ADMIN, RoleType.COMPANY_ADMIN})
