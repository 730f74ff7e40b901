"""User ORM model."""

from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, EntityMixin
from app.utils.enums import RoleType


def normalize_user_role(value: str | RoleType | None) -> RoleType:
    """Return canonical role for user input such as ``place_admin``."""
    normalized = str(value.value if isinstance(value, RoleType) else value or "").strip().upper()
    try:
        return RoleType(normalized)
    except ValueError as exc:
        raise ValueError(f"Unknown role: {value}") from exc


class User(EntityMixin, Base):
    """Account acting on the platform with one role and its scope ids."""

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(128), nullable=False, unique=True, index=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[RoleType] = mapped_column(
        Enum(RoleType, name="user_role", native_enum=False),
        nullable=False,
        default=RoleType.PUBLIC_USER,
    )
    organization_id: Mapped[int | None] = mapped_column(ForeignKey("organizations.id"), nullable=True)
    place_id: Mapped[int | None] = mapped_column(ForeignKey("places.id"), nullable=True)
    company_id: Mapped[int | None] = mapped_column(ForeignKey("companies.id"), nullable=True)
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
