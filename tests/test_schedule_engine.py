"""Opening hours resolution tests over in-memory schedules."""

from datetime import date, datetime, timezone

import pytest

from app.models import CompanySchedule, CompanyScheduleHour
from app.services.schedule_engine import (
    STATUS_CLOSED,
    STATUS_CLOSED_TODAY,
    STATUS_ERROR,
    STATUS_HOURS_UNDEFINED,
    STATUS_NOT_CONFIGURED,
    STATUS_OPEN_24H,
    get_next_open_time,
    is_open_now,
)
from app.utils.enums import DayOfWeek, ScheduleType

# 2025-01-06 is a Monday.
MONDAY = date(2025, 1, 6)


def _at(day: date, hhmm: str) -> datetime:
    hour, minute = hhmm.split(":")
    return datetime(day.year, day.month, day.day, int(hour), int(minute))


def _config(**overrides) -> CompanySchedule:
    values = {
        "is_enabled": True,
        "timezone": None,
        "holiday_message": None,
        "closed_message": None,
    }
    values.update(overrides)
    return CompanySchedule(**values)


def _hour(day: DayOfWeek, open_time: str | None = "09:00", close_time: str | None = "18:00", **overrides):
    values = {
        "day_of_week": day,
        "schedule_type": ScheduleType.REGULAR,
        "open_time": open_time,
        "close_time": close_time,
        "is_closed": False,
        "is_24_hours": False,
        "break_start_time": None,
        "break_end_time": None,
        "specific_date": None,
        "valid_from": None,
        "valid_until": None,
        "priority": 0,
    }
    values.update(overrides)
    return CompanyScheduleHour(**values)


def test_day_of_week_maps_monday_first() -> None:
    assert DayOfWeek.from_date(MONDAY) is DayOfWeek.SEGUNDA
    assert DayOfWeek.from_date(date(2025, 1, 5)) is DayOfWeek.DOMINGO
    assert DayOfWeek.SABADO.display_name == "Saturday"


def test_open_during_regular_hours() -> None:
    status = is_open_now(_config(), [_hour(DayOfWeek.SEGUNDA)], _at(MONDAY, "10:15"))
    assert status.is_open is True
    assert status.current_status == "open until 18:00"
    assert status.today_entry.day_of_week is DayOfWeek.SEGUNDA


def test_closing_time_is_exclusive_and_opening_inclusive() -> None:
    hours = [_hour(DayOfWeek.SEGUNDA)]
    assert is_open_now(_config(), hours, _at(MONDAY, "09:00")).is_open is True
    assert is_open_now(_config(), hours, _at(MONDAY, "18:00")).is_open is False


def test_after_closing_reports_next_opening() -> None:
    hours = [_hour(DayOfWeek.SEGUNDA), _hour(DayOfWeek.TERCA, "10:00", "16:00")]
    status = is_open_now(_config(), hours, _at(MONDAY, "19:30"))

    assert status.is_open is False
    assert status.current_status == STATUS_CLOSED
    assert status.next_open_time == "Tuesday at 10:00"


def test_next_opening_wraps_to_same_weekday() -> None:
    status = is_open_now(_config(), [_hour(DayOfWeek.SEGUNDA)], _at(MONDAY, "19:30"))
    assert status.next_open_time == "Monday at 09:00"


def test_before_opening_reports_todays_open_time() -> None:
    status = is_open_now(_config(), [_hour(DayOfWeek.SEGUNDA)], _at(MONDAY, "07:45"))
    assert status.is_open is False
    assert status.current_status == "closed - opens at 09:00"
    assert status.next_open_time == "09:00"


def test_lunch_break_closes_company() -> None:
    tuesday = date(2025, 1, 7)
    hours = [_hour(DayOfWeek.TERCA, break_start_time="12:00", break_end_time="13:00")]

    during = is_open_now(_config(), hours, _at(tuesday, "12:30"))
    after = is_open_now(_config(), hours, _at(tuesday, "13:00"))

    assert during.is_open is False
    assert "13:00" in during.current_status
    assert after.is_open is True


@pytest.mark.parametrize("hhmm", ["00:00", "03:30", "23:59"])
def test_24_hour_entry_is_always_open(hhmm) -> None:
    hours = [_hour(DayOfWeek.SEGUNDA, open_time="10:00", close_time="11:00", is_24_hours=True)]
    status = is_open_now(_config(), hours, _at(MONDAY, hhmm))
    assert status.is_open is True
    assert status.current_status == STATUS_OPEN_24H


def test_holiday_override_beats_regular_entry() -> None:
    hours = [
        _hour(DayOfWeek.SEGUNDA),
        _hour(DayOfWeek.SEGUNDA, None, None, schedule_type=ScheduleType.HOLIDAY, is_closed=True, specific_date=MONDAY),
    ]
    status = is_open_now(_config(holiday_message="closed for the holiday"), hours, _at(MONDAY, "10:00"))

    assert status.is_open is False
    assert status.current_status == "closed for the holiday"
    assert status.today_entry.schedule_type is ScheduleType.HOLIDAY


@pytest.mark.parametrize(
    ("schedule_type", "message"),
    [
        (ScheduleType.HOLIDAY, "closed - holiday"),
        (ScheduleType.VACATION, "closed - vacation"),
        (ScheduleType.TEMPORARY_CLOSURE, "temporarily closed"),
        (ScheduleType.SPECIAL, "closed"),
    ],
)
def test_closed_override_messages(schedule_type, message) -> None:
    hours = [_hour(DayOfWeek.SEGUNDA, None, None, schedule_type=schedule_type, is_closed=True, specific_date=MONDAY)]
    status = is_open_now(_config(), hours, _at(MONDAY, "10:00"))
    assert status.current_status == message


def test_special_hours_override_regular_hours() -> None:
    hours = [
        _hour(DayOfWeek.SEGUNDA),
        _hour(DayOfWeek.SEGUNDA, "14:00", "16:00", schedule_type=ScheduleType.SPECIAL, specific_date=MONDAY),
    ]
    assert is_open_now(_config(), hours, _at(MONDAY, "10:00")).is_open is False
    assert is_open_now(_config(), hours, _at(MONDAY, "15:00")).is_open is True


def test_regular_entry_outside_validity_window_is_ignored() -> None:
    hours = [_hour(DayOfWeek.SEGUNDA, valid_from=date(2025, 2, 1))]
    status = is_open_now(_config(), hours, _at(MONDAY, "10:00"))
    assert status.current_status == STATUS_CLOSED_TODAY


def test_missing_or_disabled_configuration() -> None:
    assert is_open_now(None, [], _at(MONDAY, "10:00")).current_status == STATUS_NOT_CONFIGURED
    disabled = is_open_now(_config(is_enabled=False), [_hour(DayOfWeek.SEGUNDA)], _at(MONDAY, "10:00"))
    assert disabled.is_open is False
    assert disabled.current_status == STATUS_NOT_CONFIGURED


def test_no_entry_for_today_is_closed_today() -> None:
    status = is_open_now(_config(), [_hour(DayOfWeek.TERCA)], _at(MONDAY, "10:00"))
    assert status.current_status == STATUS_CLOSED_TODAY
    assert status.today_entry is None


def test_regular_closed_day_uses_closed_message() -> None:
    hours = [_hour(DayOfWeek.SEGUNDA, None, None, is_closed=True)]
    assert is_open_now(_config(), hours, _at(MONDAY, "10:00")).current_status == STATUS_CLOSED
    custom = is_open_now(_config(closed_message="see you tomorrow"), hours, _at(MONDAY, "10:00"))
    assert custom.current_status == "see you tomorrow"


def test_entry_without_times_is_hours_not_defined() -> None:
    status = is_open_now(_config(), [_hour(DayOfWeek.SEGUNDA, None, None)], _at(MONDAY, "10:00"))
    assert status.current_status == STATUS_HOURS_UNDEFINED


def test_aware_now_is_converted_to_schedule_timezone() -> None:
    config = _config(timezone="America/Sao_Paulo")
    hours = [_hour(DayOfWeek.SEGUNDA)]

    # 13:00 UTC is 10:00 in Sao Paulo; 22:30 UTC is 19:30.
    morning = is_open_now(config, hours, datetime(2025, 1, 6, 13, 0, tzinfo=timezone.utc))
    evening = is_open_now(config, hours, datetime(2025, 1, 6, 22, 30, tzinfo=timezone.utc))

    assert morning.is_open is True
    assert evening.is_open is False
    assert evening.current_status == STATUS_CLOSED


def test_local_weekday_follows_timezone() -> None:
    # 01:00 UTC on Tuesday is still Monday 22:00 in Sao Paulo.
    config = _config(timezone="America/Sao_Paulo")
    hours = [_hour(DayOfWeek.SEGUNDA, "20:00", "23:00")]
    status = is_open_now(config, hours, datetime(2025, 1, 7, 1, 0, tzinfo=timezone.utc))
    assert status.is_open is True


def test_next_open_time_skips_closed_days_and_uses_overrides() -> None:
    tuesday = date(2025, 1, 7)
    hours = [
        _hour(DayOfWeek.TERCA),
        _hour(DayOfWeek.TERCA, None, None, schedule_type=ScheduleType.HOLIDAY, is_closed=True, specific_date=tuesday),
        _hour(DayOfWeek.QUARTA, is_closed=True),
        _hour(DayOfWeek.QUINTA, is_24_hours=True),
    ]
    assert get_next_open_time(_config(), hours, _at(MONDAY, "20:00")) == "Thursday at 00:00"


def test_next_open_time_is_none_without_openings() -> None:
    hours = [_hour(DayOfWeek.SEGUNDA, None, None, is_closed=True)]
    assert get_next_open_time(_config(), hours, _at(MONDAY, "20:00")) is None
    assert get_next_open_time(None, hours, _at(MONDAY, "20:00")) is None


def test_inconsistent_data_yields_error_status() -> None:
    hours = [_hour(DayOfWeek.SEGUNDA, open_time=900, close_time="18:00")]
    status = is_open_now(_config(), hours, _at(MONDAY, "10:00"))
    assert status.is_open is False
    assert status.current_status == STATUS_ERROR
