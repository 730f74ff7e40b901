"""Opening hours schemas."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from app.utils.enums import DayOfWeek, ScheduleType

HHMM_PATTERN: str = r"^([01][0-9]|2[0-3]):[0-5][0-9]$"


class ScheduleHourCreate(BaseModel):
    """Hours for a weekday, or for a specific date when ``specific_date`` is set."""

    day_of_week: DayOfWeek
    schedule_type: ScheduleType = ScheduleType.REGULAR
    open_time: str | None = Field(default=None, pattern=HHMM_PATTERN)
    close_time: str | None = Field(default=None, pattern=HHMM_PATTERN)
    is_closed: bool = False
    is_24_hours: bool = False
    break_start_time: str | None = Field(default=None, pattern=HHMM_PATTERN)
    break_end_time: str | None = Field(default=None, pattern=HHMM_PATTERN)
    notes: str | None = Field(default=None, max_length=500)
    specific_date: date | None = None
    valid_from: date | None = None
    valid_until: date | None = None
    priority: int = Field(default=0, ge=0, le=100)


class ScheduleHourUpdate(BaseModel):
    day_of_week: DayOfWeek | None = None
    schedule_type: ScheduleType | None = None
    open_time: str | None = Field(default=None, pattern=HHMM_PATTERN)
    close_time: str | None = Field(default=None, pattern=HHMM_PATTERN)
    is_closed: bool | None = None
    is_24_hours: bool | None = None
    break_start_time: str | None = Field(default=None, pattern=HHMM_PATTERN)
    break_end_time: str | None = Field(default=None, pattern=HHMM_PATTERN)
    notes: str | None = Field(default=None, max_length=500)
    specific_date: date | None = None
    valid_from: date | None = None
    valid_until: date | None = None
    priority: int | None = Field(default=None, ge=0, le=100)


class ScheduleHourRead(BaseModel):
    id: int
    company_id: int
    day_of_week: DayOfWeek
    schedule_type: ScheduleType
    open_time: str | None
    close_time: str | None
    is_closed: bool
    is_24_hours: bool
    break_start_time: str | None
    break_end_time: str | None
    notes: str | None
    specific_date: date | None
    valid_from: date | None
    valid_until: date | None
    priority: int

    model_config = ConfigDict(from_attributes=True)


class CompanyScheduleCreate(BaseModel):
    timezone: str | None = Field(default=None, max_length=100)
    is_enabled: bool = True
    allow_online_scheduling: bool = False
    slot_duration_minutes: int | None = Field(default=None, ge=15, le=480)
    advance_booking_days: int | None = Field(default=None, ge=0, le=365)
    schedule_notes: str | None = None
    holiday_message: str | None = Field(default=None, max_length=500)
    closed_message: str | None = Field(default=None, max_length=500)
    show_next_open_time: bool = True
    hours: list[ScheduleHourCreate] | None = None


class CompanyScheduleUpdate(BaseModel):
    timezone: str | None = Field(default=None, max_length=100)
    is_enabled: bool | None = None
    allow_online_scheduling: bool | None = None
    slot_duration_minutes: int | None = Field(default=None, ge=15, le=480)
    advance_booking_days: int | None = Field(default=None, ge=0, le=365)
    schedule_notes: str | None = None
    holiday_message: str | None = Field(default=None, max_length=500)
    closed_message: str | None = Field(default=None, max_length=500)
    show_next_open_time: bool | None = None
    hours: list[ScheduleHourCreate] | None = None


class CompanyScheduleRead(BaseModel):
    id: int
    company_id: int
    timezone: str | None
    is_enabled: bool
    allow_online_scheduling: bool
    slot_duration_minutes: int | None
    advance_booking_days: int | None
    schedule_notes: str | None
    holiday_message: str | None
    closed_message: str | None
    show_next_open_time: bool
    hours: list[ScheduleHourRead]

    model_config = ConfigDict(from_attributes=True)


class OpenStatusResponse(BaseModel):
    is_open: bool
    current_status: str
    next_open_time: str | None = None
    today_entry: ScheduleHourRead | None = None

    model_config = ConfigDict(from_attributes=True)


class CompanyOpenStatus(BaseModel):
    company_id: int
    company_name: str
    is_open: bool
    status: str
    opens_at: str | None = None
    closes_at: str | None = None


class ScheduleStatistics(BaseModel):
    total_companies: int
    companies_with_schedule: int
    companies_open_now: int
    average_open_hours: float
    most_common_open_time: str
    most_common_close_time: str
