"""Opening hours ORM models."""

from datetime import date

from sqlalchemy import Boolean, Date, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, EntityMixin
from app.utils.enums import DayOfWeek, ScheduleType


class CompanySchedule(EntityMixin, Base):
    """One-to-one opening hours configuration of a company."""

    __tablename__ = "company_schedule"

    company_id: Mapped[int] = mapped_column(ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, unique=True)
    is_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    timezone: Mapped[str | None] = mapped_column(String(100), nullable=True)
    allow_online_scheduling: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    slot_duration_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    advance_booking_days: Mapped[int | None] = mapped_column(Integer, nullable=True)
    schedule_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    holiday_message: Mapped[str | None] = mapped_column(String(500), nullable=True)
    closed_message: Mapped[str | None] = mapped_column(String(500), nullable=True)
    show_next_open_time: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    company: Mapped["Company"] = relationship(back_populates="schedule")
    hours: Mapped[list["CompanyScheduleHour"]] = relationship(
        back_populates="schedule",
        cascade="all, delete-orphan",
        order_by="CompanyScheduleHour.priority.desc()",
    )


class CompanyScheduleHour(EntityMixin, Base):
    """Operating hours for one weekday or one specific date."""

    __tablename__ = "company_schedule_hours"

    schedule_id: Mapped[int] = mapped_column(ForeignKey("company_schedule.id", ondelete="CASCADE"), nullable=False)
    company_id: Mapped[int] = mapped_column(ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)
    day_of_week: Mapped[DayOfWeek] = mapped_column(Enum(DayOfWeek, name="day_of_week", native_enum=False), nullable=False)
    schedule_type: Mapped[ScheduleType] = mapped_column(
        Enum(ScheduleType, name="schedule_type", native_enum=False),
        nullable=False,
        default=ScheduleType.REGULAR,
    )
    # HH:MM strings; fixed width keeps lexical and chronological order equal.
    open_time: Mapped[str | None] = mapped_column(String(5), nullable=True)
    close_time: Mapped[str | None] = mapped_column(String(5), nullable=True)
    is_closed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_24_hours: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    break_start_time: Mapped[str | None] = mapped_column(String(5), nullable=True)
    break_end_time: Mapped[str | None] = mapped_column(String(5), nullable=True)
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)
    specific_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    valid_from: Mapped[date | None] = mapped_column(Date, nullable=True)
    valid_until: Mapped[date | None] = mapped_column(Date, nullable=True)
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    schedule: Mapped[CompanySchedule] = relationship(back_populates="hours")
