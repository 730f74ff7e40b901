"""Delivery configuration ORM models."""

from decimal import Decimal

from sqlalchemy import JSON, Boolean, Enum, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, EntityMixin
from app.utils.enums import DeliveryZoneType, FeeCalculationType


class CompanyDelivery(EntityMixin, Base):
    """One-to-one delivery configuration of a company."""

    __tablename__ = "company_delivery"

    company_id: Mapped[int] = mapped_column(ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, unique=True)
    is_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    available_types: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    fee_calculation_type: Mapped[FeeCalculationType] = mapped_column(
        Enum(FeeCalculationType, name="fee_calculation_type", native_enum=False),
        nullable=False,
        default=FeeCalculationType.FIXED,
    )
    base_fee: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False, default=Decimal("0.00"))
    fee_per_km: Mapped[Decimal | None] = mapped_column(Numeric(8, 2), nullable=True)
    free_delivery_min_value: Mapped[Decimal | None] = mapped_column(Numeric(8, 2), nullable=True)
    estimated_time_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=30)
    max_delivery_time_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    pickup_time_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=15)
    minimum_order_value: Mapped[Decimal | None] = mapped_column(Numeric(8, 2), nullable=True)
    maximum_order_value: Mapped[Decimal | None] = mapped_column(Numeric(8, 2), nullable=True)
    accepts_cash: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    accepts_card: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    accepts_pix: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    delivery_instructions: Mapped[str | None] = mapped_column(Text, nullable=True)
    pickup_instructions: Mapped[str | None] = mapped_column(Text, nullable=True)
    delivery_phone: Mapped[str | None] = mapped_column(String(32), nullable=True)

    company: Mapped["Company"] = relationship(back_populates="delivery")
    zones: Mapped[list["DeliveryZone"]] = relationship(
        back_populates="delivery",
        cascade="all, delete-orphan",
        order_by="DeliveryZone.priority.desc()",
    )


class DeliveryZone(EntityMixin, Base):
    """Named delivery area with its own fee and ETA."""

    __tablename__ = "delivery_zones"
    __table_args__ = (
        UniqueConstraint("company_id", "name", name="uq_delivery_zone_company_name"),
    )

    delivery_id: Mapped[int] = mapped_column(ForeignKey("company_delivery.id", ondelete="CASCADE"), nullable=False)
    company_id: Mapped[int] = mapped_column(ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    zone_type: Mapped[DeliveryZoneType] = mapped_column(
        Enum(DeliveryZoneType, name="delivery_zone_type", native_enum=False),
        nullable=False,
    )
    radius_km: Mapped[Decimal | None] = mapped_column(Numeric(6, 2), nullable=True)
    # Ring of [longitude, latitude] pairs.
    coordinates: Mapped[list | None] = mapped_column(JSON, nullable=True)
    neighborhoods: Mapped[str | None] = mapped_column(Text, nullable=True)
    postal_codes: Mapped[str | None] = mapped_column(Text, nullable=True)
    delivery_fee: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False, default=Decimal("0.00"))
    estimated_time_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=30)
    minimum_order_value: Mapped[Decimal | None] = mapped_column(Numeric(8, 2), nullable=True)
    is_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    delivery: Mapped[CompanyDelivery] = relationship(back_populates="zones")
