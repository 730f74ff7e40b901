"""User service operations."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, ValidationError
from app.models import Company, Organization, Place
from app.models.user import User, normalize_user_role
from app.utils.enums import RoleType


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.scalar(select(User).where(User.email == email).limit(1))


def get_user_by_username(db: Session, username: str) -> User | None:
    return db.scalar(select(User).where(User.username == username).limit(1))


def get_user_by_id(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)


def create_user(
    db: Session,
    username: str,
    hashed_password: str,
    role: str | RoleType = RoleType.PUBLIC_USER,
    email: str | None = None,
) -> User:
    user = User(
        username=username,
        password_hash=hashed_password,
        role=normalize_user_role(role),
        email=email,
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def assign_role(
    db: Session,
    user: User,
    role: str | RoleType,
    *,
    organization_id: int | None = None,
    place_id: int | None = None,
    company_id: int | None = None,
) -> User:
    """Set role and the scope id it requires; other scope ids are cleared."""
    canonical_role = normalize_user_role(role)
    required: dict[RoleType, tuple[str, int | None, type]] = {
        RoleType.ORGANIZATION_ADMIN: ("organization_id", organization_id, Organization),
        RoleType.PLACE_ADMIN: ("place_id", place_id, Place),
        RoleType.COMPANY_ADMIN: ("company_id", company_id, Company),
    }

    user.organization_id = None
    user.place_id = None
    user.company_id = None
    if canonical_role in required:
        field, value, model = required[canonical_role]
        if value is None:
            raise ValidationError(f"{field} is required for role {canonical_role.value}")
        if db.get(model, value) is None:
            raise NotFoundError(f"{model.__name__} {value} not found")
        setattr(user, field, value)

    user.role = canonical_role
    db.commit()
    db.refresh(user)
    return user
