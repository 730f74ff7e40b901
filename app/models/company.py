"""Organization, place and company ORM models."""

from decimal import Decimal

from sqlalchemy import ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, EntityMixin


class Organization(EntityMixin, Base):
    """Tenant that owns one or more places."""

    __tablename__ = "organizations"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    places: Mapped[list["Place"]] = relationship(back_populates="organization")


class Place(EntityMixin, Base):
    """City or region containing companies."""

    __tablename__ = "places"

    organization_id: Mapped[int] = mapped_column(ForeignKey("organizations.id"), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    city: Mapped[str] = mapped_column(String(255), nullable=False)
    state: Mapped[str] = mapped_column(String(64), nullable=False)
    latitude: Mapped[Decimal | None] = mapped_column(Numeric(10, 7), nullable=True)
    longitude: Mapped[Decimal | None] = mapped_column(Numeric(10, 7), nullable=True)

    organization: Mapped[Organization] = relationship(back_populates="places")
    companies: Mapped[list["Company"]] = relationship(back_populates="place")


class Company(EntityMixin, Base):
    """Business listed inside a place."""

    __tablename__ = "companies"

    place_id: Mapped[int] = mapped_column(ForeignKey("places.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    latitude: Mapped[Decimal | None] = mapped_column(Numeric(10, 7), nullable=True)
    longitude: Mapped[Decimal | None] = mapped_column(Numeric(10, 7), nullable=True)

    place: Mapped[Place] = relationship(back_populates="companies")
    delivery: Mapped["CompanyDelivery | None"] = relationship(
        back_populates="company",
        uselist=False,
        cascade="all, delete-orphan",
    )
    schedule: Mapped["CompanySchedule | None"] = relationship(
        back_populates="company",
        uselist=False,
        cascade="all, delete-orphan",
    )
