"""Shared SQLAlchemy base declarative class and model imports."""

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for ORM models."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EntityMixin:
    """Columns every marketplace entity carries.

    ``is_active`` and ``deleted_at`` are filtering concerns of the query layer;
    the resolution engines never look at them.
    """

    id: Mapped[int] = mapped_column(primary_key=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


# Import model modules so metadata is populated before create_all.
from app.models import audit_log as _audit_log  # noqa: E402,F401
from app.models import company as _company  # noqa: E402,F401
from app.models import delivery as _delivery  # noqa: E402,F401
from app.models import schedule as _schedule  # noqa: E402,F401
from app.models import user as _user  # noqa: E402,F401
