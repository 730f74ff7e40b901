"""Opening hours management, open-now listings and statistics."""

from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, ValidationError
from app.models import Company, CompanySchedule, CompanyScheduleHour, Place, User
from app.schemas.schedule import CompanyScheduleCreate, CompanyScheduleUpdate, ScheduleHourCreate, ScheduleHourUpdate
from app.services.audit_service import log_action, snapshot
from app.services.company_service import list_companies
from app.services.schedule_engine import STATUS_NOT_CONFIGURED, OpenStatus, is_open_now
from app.services.security_guards import ensure_can_manage
from app.utils.enums import RoleType, ScheduleType
from app.utils.time import is_known_timezone, to_local, utc_now

logger = logging.getLogger(__name__)

DEFAULT_OPEN_TIME = "09:00"
DEFAULT_CLOSE_TIME = "18:00"

HOUR_FIELDS: tuple[str, ...] = (
    "day_of_week",
    "schedule_type",
    "open_time",
    "close_time",
    "is_closed",
    "is_24_hours",
    "break_start_time",
    "break_end_time",
    "notes",
    "specific_date",
    "valid_from",
    "valid_until",
    "priority",
)
REQUIRED_HOUR_FIELDS: set[str] = {"day_of_week", "schedule_type", "is_closed", "is_24_hours", "priority"}
REQUIRED_SCHEDULE_FIELDS: set[str] = {"is_enabled", "allow_online_scheduling", "show_next_open_time"}


def _reject_nulls(changes: dict[str, Any], required: set[str]) -> None:
    for key, value in changes.items():
        if key in required and value is None:
            raise ValidationError(f"{key} cannot be null")


def _minutes(value: str) -> int:
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def validate_hour(hour: dict[str, Any], today: Any) -> None:
    """Check one hours entry; ``today`` is the schedule-local current date."""
    day = getattr(hour["day_of_week"], "value", hour["day_of_week"])
    open_time, close_time = hour.get("open_time"), hour.get("close_time")
    break_start, break_end = hour.get("break_start_time"), hour.get("break_end_time")

    if not hour.get("is_closed") and not hour.get("is_24_hours") and (not open_time or not close_time):
        raise ValidationError(f"open and close times are required for {day}")
    if open_time and close_time and open_time >= close_time:
        raise ValidationError(f"open time must be before close time for {day}")

    if bool(break_start) != bool(break_end):
        raise ValidationError(f"break needs both start and end for {day}")
    if break_start and break_end:
        if break_start >= break_end:
            raise ValidationError(f"break start must be before break end for {day}")
        if open_time and close_time and (break_start < open_time or break_end > close_time):
            raise ValidationError(f"break must be within opening hours for {day}")

    specific_date = hour.get("specific_date")
    if hour.get("schedule_type", ScheduleType.REGULAR) != ScheduleType.REGULAR and specific_date is not None:
        if specific_date < today:
            raise ValidationError("specific date cannot be in the past")

    valid_from, valid_until = hour.get("valid_from"), hour.get("valid_until")
    if valid_from is not None and valid_until is not None and valid_from > valid_until:
        raise ValidationError("valid_from must not be after valid_until")


def _hour_key(hour: dict[str, Any] | CompanyScheduleHour) -> tuple:
    if isinstance(hour, dict):
        return hour["day_of_week"], hour.get("schedule_type", ScheduleType.REGULAR), hour.get("specific_date")
    return hour.day_of_week, hour.schedule_type, hour.specific_date


def validate_hours(hours: list[dict[str, Any]], today: Any) -> None:
    """Validate every entry and the one-regular-entry-per-weekday rule."""
    for hour in hours:
        validate_hour(hour, today)

    regular_days = Counter(
        hour["day_of_week"] for hour in hours if hour.get("schedule_type", ScheduleType.REGULAR) == ScheduleType.REGULAR
    )
    for day, count in regular_days.items():
        if count > 1:
            raise ValidationError(f"multiple regular hours for {day.value} are not allowed")

    keys = [_hour_key(hour) for hour in hours]
    if len(keys) != len(set(keys)):
        raise ValidationError("duplicate hours entry for the same day, type and date")


def validate_schedule_settings(values: dict[str, Any]) -> None:
    timezone_name = values.get("timezone")
    if timezone_name and not is_known_timezone(timezone_name):
        raise ValidationError(f"unknown timezone: {timezone_name}")
    slot = values.get("slot_duration_minutes")
    if slot is not None and not 15 <= slot <= 480:
        raise ValidationError("slot_duration_minutes must be between 15 and 480")
    advance = values.get("advance_booking_days")
    if advance is not None and not 0 <= advance <= 365:
        raise ValidationError("advance_booking_days must be between 0 and 365")


def _local_today(timezone_name: str | None, now: datetime | None) -> Any:
    return to_local(now or utc_now(), timezone_name).date()


def _schedule_snapshot(schedule: CompanySchedule) -> dict[str, Any] | None:
    data = snapshot(schedule)
    if data is not None:
        data["hours"] = [snapshot(hour) for hour in schedule.hours]
    return data


def _replace_hours(schedule: CompanySchedule, company_id: int, hours: list[dict[str, Any]]) -> None:
    """Sync hours keyed by weekday, type and date: update, insert, drop missing."""
    existing = {_hour_key(hour): hour for hour in schedule.hours}
    wanted = set()
    for fields in hours:
        key = _hour_key(fields)
        wanted.add(key)
        hour = existing.get(key)
        if hour is None:
            schedule.hours.append(CompanyScheduleHour(company_id=company_id, **fields))
            continue
        for field, value in fields.items():
            setattr(hour, field, value)

    for key, hour in existing.items():
        if key not in wanted:
            schedule.hours.remove(hour)


def get_schedule(db: Session, schedule_id: int) -> CompanySchedule:
    schedule = db.get(CompanySchedule, schedule_id)
    if schedule is None:
        raise NotFoundError(f"Schedule {schedule_id} not found")
    return schedule


def get_schedule_by_company(db: Session, company_id: int) -> CompanySchedule | None:
    return db.scalar(select(CompanySchedule).where(CompanySchedule.company_id == company_id).limit(1))


def create_schedule(
    db: Session,
    user: User,
    company_id: int,
    payload: CompanyScheduleCreate,
    now: datetime | None = None,
) -> CompanySchedule:
    company = ensure_can_manage(db, user, company_id)
    if get_schedule_by_company(db, company.id) is not None:
        raise ValidationError("schedule already exists for this company")

    values = payload.model_dump(exclude={"hours"})
    validate_schedule_settings(values)
    hours = [hour.model_dump() for hour in payload.hours or []]
    validate_hours(hours, _local_today(values.get("timezone"), now))

    schedule = CompanySchedule(company_id=company.id, **values)
    _replace_hours(schedule, company.id, hours)
    db.add(schedule)
    db.flush()

    log_action(
        db,
        actor=user,
        action_type="schedule_created",
        company_id=company.id,
        entity_id=schedule.id,
        after_snapshot=_schedule_snapshot(schedule),
    )
    db.commit()
    db.refresh(schedule)
    logger.info("[SCHEDULE] Schedule %s created for company %s with %s entries", schedule.id, company.id, len(hours))
    return schedule


def _changes(payload: CompanyScheduleCreate | CompanyScheduleUpdate) -> dict[str, Any]:
    changes = payload.model_dump(exclude_unset=True, exclude={"hours"})
    if payload.hours is not None:
        changes["hours"] = [hour.model_dump() for hour in payload.hours]
    return changes


def _update_schedule(
    db: Session,
    user: User,
    schedule: CompanySchedule,
    changes: dict[str, Any],
    now: datetime | None,
) -> CompanySchedule:
    hours = changes.pop("hours", None)
    if not changes and hours is None:
        raise ValidationError("no fields to update")
    _reject_nulls(changes, REQUIRED_SCHEDULE_FIELDS)
    validate_schedule_settings(changes)
    if hours is not None:
        validate_hours(hours, _local_today(changes.get("timezone", schedule.timezone), now))

    before = _schedule_snapshot(schedule)
    for key, value in changes.items():
        setattr(schedule, key, value)
    if hours is not None:
        _replace_hours(schedule, schedule.company_id, hours)
    db.flush()

    log_action(
        db,
        actor=user,
        action_type="schedule_updated",
        company_id=schedule.company_id,
        entity_id=schedule.id,
        before_snapshot=before,
        after_snapshot=_schedule_snapshot(schedule),
    )
    db.commit()
    db.refresh(schedule)
    logger.info("[SCHEDULE] Schedule %s updated by user_id=%s", schedule.id, user.id)
    return schedule


def update_schedule(
    db: Session,
    user: User,
    schedule_id: int,
    payload: CompanyScheduleUpdate,
    now: datetime | None = None,
) -> CompanySchedule:
    """Apply provided fields; a provided ``hours`` list replaces the entry set."""
    schedule = get_schedule(db, schedule_id)
    ensure_can_manage(db, user, schedule.company_id)
    return _update_schedule(db, user, schedule, _changes(payload), now)


def upsert_schedule(
    db: Session,
    user: User,
    company_id: int,
    payload: CompanyScheduleCreate,
    now: datetime | None = None,
) -> CompanySchedule:
    ensure_can_manage(db, user, company_id)
    schedule = get_schedule_by_company(db, company_id)
    if schedule is None:
        return create_schedule(db, user, company_id, payload, now)
    return _update_schedule(db, user, schedule, _changes(payload), now)


def remove_schedule(db: Session, user: User, schedule_id: int) -> None:
    schedule = get_schedule(db, schedule_id)
    company_id = schedule.company_id
    ensure_can_manage(db, user, company_id)
    before = _schedule_snapshot(schedule)
    db.delete(schedule)
    log_action(
        db,
        actor=user,
        action_type="schedule_removed",
        company_id=company_id,
        entity_id=schedule_id,
        before_snapshot=before,
    )
    db.commit()
    logger.info("[SCHEDULE] Schedule %s removed by user_id=%s", schedule_id, user.id)


def add_hour(
    db: Session,
    user: User,
    company_id: int,
    payload: ScheduleHourCreate,
    now: datetime | None = None,
) -> CompanyScheduleHour:
    ensure_can_manage(db, user, company_id)
    schedule = get_schedule_by_company(db, company_id)
    if schedule is None:
        raise NotFoundError("Schedule not found for this company")

    fields = payload.model_dump()
    if fields["schedule_type"] == ScheduleType.REGULAR:
        for hour in schedule.hours:
            if hour.schedule_type == ScheduleType.REGULAR and hour.day_of_week == fields["day_of_week"]:
                raise ValidationError(f"regular hours already defined for {fields['day_of_week'].value}")
    validate_hour(fields, _local_today(schedule.timezone, now))
    if any(_hour_key(hour) == _hour_key(fields) for hour in schedule.hours):
        raise ValidationError("duplicate hours entry for the same day, type and date")

    hour = CompanyScheduleHour(company_id=company_id, **fields)
    schedule.hours.append(hour)
    db.flush()

    log_action(
        db,
        actor=user,
        action_type="schedule_hour_added",
        company_id=company_id,
        entity_id=hour.id,
        after_snapshot=snapshot(hour),
    )
    db.commit()
    db.refresh(hour)
    logger.info(
        "[SCHEDULE] Hour %s added for company %s (%s %s)",
        hour.id,
        company_id,
        hour.day_of_week.value,
        hour.schedule_type.value,
    )
    return hour


def _get_hour(db: Session, hour_id: int) -> CompanyScheduleHour:
    hour = db.get(CompanyScheduleHour, hour_id)
    if hour is None:
        raise NotFoundError(f"Schedule hour {hour_id} not found")
    return hour


def update_hour(
    db: Session,
    user: User,
    hour_id: int,
    payload: ScheduleHourUpdate,
    now: datetime | None = None,
) -> CompanyScheduleHour:
    hour = _get_hour(db, hour_id)
    ensure_can_manage(db, user, hour.company_id)

    changes = payload.model_dump(exclude_unset=True)
    if not changes:
        raise ValidationError("no fields to update")
    _reject_nulls(changes, REQUIRED_HOUR_FIELDS)

    merged = {field: getattr(hour, field) for field in HOUR_FIELDS}
    merged.update(changes)
    validate_hour(merged, _local_today(hour.schedule.timezone, now))
    for other in hour.schedule.hours:
        if other.id == hour.id:
            continue
        if _hour_key(other) == _hour_key(merged):
            raise ValidationError("duplicate hours entry for the same day, type and date")
        if (
            merged["schedule_type"] == ScheduleType.REGULAR
            and other.schedule_type == ScheduleType.REGULAR
            and other.day_of_week == merged["day_of_week"]
        ):
            raise ValidationError(f"regular hours already defined for {merged['day_of_week'].value}")

    before = snapshot(hour)
    for key, value in changes.items():
        setattr(hour, key, value)
    db.flush()

    log_action(
        db,
        actor=user,
        action_type="schedule_hour_updated",
        company_id=hour.company_id,
        entity_id=hour.id,
        before_snapshot=before,
        after_snapshot=snapshot(hour),
    )
    db.commit()
    db.refresh(hour)
    return hour


def remove_hour(db: Session, user: User, hour_id: int) -> None:
    hour = _get_hour(db, hour_id)
    company_id = hour.company_id
    ensure_can_manage(db, user, company_id)
    before = snapshot(hour)
    hour.schedule.hours.remove(hour)
    log_action(
        db,
        actor=user,
        action_type="schedule_hour_removed",
        company_id=company_id,
        entity_id=hour_id,
        before_snapshot=before,
    )
    db.commit()
    logger.info("[SCHEDULE] Hour %s removed from company %s", hour_id, company_id)


def list_schedules_for_user(db: Session, user: User) -> list[CompanySchedule]:
    """Return schedules inside the user's administrative scope."""
    stmt = select(CompanySchedule).join(Company, Company.id == CompanySchedule.company_id)
    if user.role == RoleType.SUPER_ADMIN:
        pass
    elif user.role == RoleType.ORGANIZATION_ADMIN:
        stmt = stmt.join(Place, Place.id == Company.place_id).where(Place.organization_id == user.organization_id)
    elif user.role == RoleType.PLACE_ADMIN:
        stmt = stmt.where(Company.place_id == user.place_id)
    elif user.role == RoleType.COMPANY_ADMIN:
        stmt = stmt.where(Company.id == user.company_id)
    else:
        return []
    return list(db.scalars(stmt.order_by(Company.name.asc())).all())


def _company_status(company: Company, now: datetime) -> OpenStatus:
    schedule = company.schedule
    return is_open_now(schedule, schedule.hours if schedule is not None else [], now)


def status_for_company(db: Session, company_id: int, now: datetime) -> OpenStatus:
    company = db.get(Company, company_id)
    if company is None:
        return OpenStatus(is_open=False, current_status=STATUS_NOT_CONFIGURED)
    status = _company_status(company, now)
    logger.debug("[SCHEDULE] company_id=%s is_open=%s status=%s", company_id, status.is_open, status.current_status)
    return status


def companies_open_now(
    db: Session,
    now: datetime,
    place_id: int | None = None,
    open_only: bool = False,
) -> list[dict[str, Any]]:
    """Opening status of every active company, optionally only the open ones."""
    results = []
    for company in list_companies(db, place_id=place_id):
        status = _company_status(company, now)
        if open_only and not status.is_open:
            continue
        results.append(
            {
                "company_id": company.id,
                "company_name": company.name,
                "is_open": status.is_open,
                "status": status.current_status,
                "opens_at": status.next_open_time,
                "closes_at": getattr(status.today_entry, "close_time", None),
            }
        )
    logger.debug(
        "[SCHEDULE] %s of %s companies open now",
        sum(1 for item in results if item["is_open"]),
        len(results),
    )
    return results


def schedule_statistics(db: Session, now: datetime, place_id: int | None = None) -> dict[str, Any]:
    companies = list_companies(db, place_id=place_id)
    scheduled = [company for company in companies if company.schedule is not None and company.schedule.is_enabled]

    open_now = 0
    open_times: list[str] = []
    close_times: list[str] = []
    daily_hours: list[float] = []
    for company in scheduled:
        if _company_status(company, now).is_open:
            open_now += 1
        for hour in company.schedule.hours:
            if hour.schedule_type != ScheduleType.REGULAR or hour.is_closed or hour.is_24_hours:
                continue
            if not hour.open_time or not hour.close_time:
                continue
            open_times.append(hour.open_time)
            close_times.append(hour.close_time)
            duration = (_minutes(hour.close_time) - _minutes(hour.open_time)) / 60
            if duration > 0:
                daily_hours.append(duration)

    return {
        "total_companies": len(companies),
        "companies_with_schedule": len(scheduled),
        "companies_open_now": open_now,
        "average_open_hours": round(sum(daily_hours) / len(daily_hours), 1) if daily_hours else 0.0,
        "most_common_open_time": Counter(open_times).most_common(1)[0][0] if open_times else DEFAULT_OPEN_TIME,
        "most_common_close_time": Counter(close_times).most_common(1)[0][0] if close_times else DEFAULT_CLOSE_TIME,
    }
